"""
Extraction, hardening and password-encoding building blocks.
"""
import pytest
from argon2.exceptions import HashingError

from whiphash.crypto import kdf
from whiphash.crypto.errors import KDFExecutionError
from whiphash.crypto.kdf import HardeningParams, extract, harden, new_salt
from whiphash.crypto.password import CHARSET, MIN_PASSWORD_LEN, encode_password


# --- HKDF-SHA256 ---

def test_extract_rfc5869_case_1():
    okm = extract(
        b'\x0b' * 22,
        salt=bytes(range(0x0d)),
        info=bytes(range(0xf0, 0xfa)),
        length=42,
    )
    assert okm.hex() == (
        '3cb25f25faacd57a90434f64d0362f2a2d2d0a90cf1a5a4c'
        '5db02d56ecc4c5bf34007208d5b887185865'
    )


def test_extract_defaults_to_32_bytes():
    assert len(extract(b'ikm', salt=bytes(32), info=b'seed_v1')) == 32


def test_extract_info_separates_domains():
    a = extract(b'ikm', salt=bytes(32), info=b'local_raw_v1')
    b = extract(b'ikm', salt=bytes(32), info=b'seed_v1')
    assert a != b


# --- Argon2id ---

def test_harden_matches_reference_argon2id():
    # phc-winner-argon2 reference vector: argon2id v19, t=2, m=2^16, p=1
    params = HardeningParams(memory_cost=65536, time_cost=2, parallelism=1)
    out = harden(b'password', b'somesalt', params)
    assert out.hex() == '09316115d5cf24ed5a15a31a3ba326e5cf32edc24702987c02b6566f61913cf7'


def test_harden_salt_sensitivity():
    params = HardeningParams(memory_cost=256, time_cost=1, parallelism=4)
    assert harden(b's' * 32, bytes(16), params) != harden(b's' * 32, b'\x01' + bytes(15), params)


def test_harden_wraps_library_failure(monkeypatch):
    def boom(**kwargs):
        raise HashingError('Memory allocation error')

    monkeypatch.setattr(kdf, 'hash_secret_raw', boom)
    with pytest.raises(KDFExecutionError):
        harden(bytes(32), bytes(16), HardeningParams())


def test_harden_wraps_memory_error(monkeypatch):
    def boom(**kwargs):
        raise MemoryError()

    monkeypatch.setattr(kdf, 'hash_secret_raw', boom)
    with pytest.raises(KDFExecutionError):
        harden(bytes(32), bytes(16), HardeningParams())


def test_harden_rejects_wrong_output_length(monkeypatch):
    monkeypatch.setattr(kdf, 'hash_secret_raw', lambda **kwargs: bytes(31))
    with pytest.raises(KDFExecutionError):
        harden(bytes(32), bytes(16), HardeningParams())


def test_default_params():
    p = kdf.default_params()
    assert (p.memory_cost, p.time_cost, p.parallelism, p.hash_len, p.salt_len) == (65536, 3, 4, 32, 16)
    assert p.to_metadata() == {'memory': 65536, 'time': 3, 'parallelism': 4}


@pytest.mark.parametrize('kwargs', [
    {'time_cost': 0},
    {'parallelism': 0},
    {'memory_cost': 16, 'parallelism': 4},
    {'hash_len': 2},
    {'salt_len': 4},
    {'type': 'scrypt'},
])
def test_params_validation(kwargs):
    with pytest.raises(ValueError):
        HardeningParams(**kwargs)


def test_new_salt_is_fresh():
    params = HardeningParams()
    a, b = new_salt(params), new_salt(params)
    assert len(a) == 16 and a != b


# --- password encoding ---

def test_charset():
    assert CHARSET.startswith('ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789')
    assert CHARSET.endswith('!@#$%^&*()_+-=[]{}|;:,.<>?')
    assert len(set(CHARSET)) == len(CHARSET) == 88


def test_encode_password_modulo_mapping():
    size = len(CHARSET)
    data = bytes([0, 1, size - 1, size, size + 1, 255] + [7] * 26)
    pw = encode_password(data)
    assert len(pw) == 32
    assert pw[:6] == CHARSET[0] + CHARSET[1] + CHARSET[-1] + CHARSET[0] + CHARSET[1] + CHARSET[255 % size]


def test_encode_password_extends_short_input_cyclically():
    pw = encode_password(bytes([0, 1, 2]))
    assert len(pw) == MIN_PASSWORD_LEN
    assert pw == ('ABC' * 6)[:16]


def test_encode_password_keeps_long_input_length():
    assert len(encode_password(bytes(40))) == 40


def test_encode_password_rejects_empty():
    with pytest.raises(ValueError):
        encode_password(b'')
