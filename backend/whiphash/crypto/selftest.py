from __future__ import annotations

from whiphash.crypto.encoding import b64url_decode, encode_random_word
from whiphash.crypto.pipeline import RandomPair, derive
from whiphash.crypto.password import CHARSET


# Regression baseline: HKDF-SHA256 + Argon2id (v0x13, m=65536 KiB, t=3, p=4)
VECTOR_N1 = "12345678901234567890"
VECTOR_N2 = "98765432109876543210"
VECTOR_LOCAL_RAW = "f5fefe8c911435a82523dd3a13a9dd466179e0a4193507bcaf18237f26db884f"
VECTOR_LOCAL_KEY = "0fd9d1a78e84f2c4e75d84459effb1ea11c72a9508fe215363e1b79a99121f4c"
VECTOR_SEED_RAW = "4dbe95dc169e9b5ef337f9bdb78c93c398f08be9b11d5930ff7d993883e331b7"
VECTOR_PASSWORD_BYTES = "8087ee13286bc0637b3095f89566ce2d8974a3d02232cae38fcc5faaa8a3b852"
VECTOR_PASSWORD = "ov!ToTQLjw9_9Oetxc=giyaz3cH:|=I:"


def main() -> None:
    # --- fixed-width encoding ---
    assert encode_random_word(0) == bytes(32), 'Zero must encode to 32 zero bytes'
    assert encode_random_word(2 ** 256 - 1) == b'\xff' * 32, 'Max value must encode to 32 x 0xFF'

    # --- pinned end-to-end vector ---
    result = derive(
        RandomPair.from_decimal(VECTOR_N1, VECTOR_N2),
        bytes(32),
        salt1=bytes(16),
        password_salt=bytes(16),
    )
    meta = result.metadata
    assert b64url_decode(meta.local_raw).hex() == VECTOR_LOCAL_RAW, 'local_raw mismatch'
    assert b64url_decode(meta.local_key).hex() == VECTOR_LOCAL_KEY, 'LocalKey mismatch'
    assert b64url_decode(meta.seed_raw).hex() == VECTOR_SEED_RAW, 'seed_raw mismatch'
    assert b64url_decode(meta.password_bytes).hex() == VECTOR_PASSWORD_BYTES, 'password bytes mismatch'
    assert result.password == VECTOR_PASSWORD, 'password mismatch'
    assert all(c in CHARSET for c in result.password), 'password outside alphabet'

    print('OK: derivation selftest passed')


if __name__ == '__main__':
    main()
