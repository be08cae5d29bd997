# whiphash/crypto/encoding.py
from __future__ import annotations

import base64
import os
import re

from whiphash.crypto.errors import InvalidInputError, RandomSourceError


RANDOM_WORD_LEN = 32        # bytes per oracle value (256 bits)
_MAX_RANDOM_WORD = (1 << (RANDOM_WORD_LEN * 8)) - 1
_MAX_DECIMAL_DIGITS = len(str(_MAX_RANDOM_WORD))

_DECIMAL_PATTERN = re.compile(r'[0-9]+')


def parse_decimal(value: str, *, field: str = 'value') -> int:
    """
    Parse an oracle value delivered as a decimal string.
    Only ASCII digits are accepted; signs, whitespace and other bases are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidInputError(f'{field} must be a decimal string')
    if isinstance(value, int):
        return value
    if not _DECIMAL_PATTERN.fullmatch(value):
        raise InvalidInputError(f'{field} must be a non-negative decimal string')
    digits = value.lstrip('0') or '0'
    if len(digits) > _MAX_DECIMAL_DIGITS:
        raise InvalidInputError(f'{field} does not fit in {RANDOM_WORD_LEN * 8} bits')
    return int(digits)


def encode_random_word(value: int, *, field: str = 'value') -> bytes:
    """
    Fixed-width 32-byte big-endian encoding of an oracle value.

    The integer is rendered as hex, left-padded with '0' to 64 digits and
    decoded pairwise, so 0 -> 32 zero bytes and 2**256 - 1 -> 32 x 0xFF.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f'{field} must be an integer')
    if value < 0:
        raise InvalidInputError(f'{field} must be non-negative')
    if value > _MAX_RANDOM_WORD:
        raise InvalidInputError(f'{field} does not fit in {RANDOM_WORD_LEN * 8} bits')
    hex_digits = format(value, 'x').rjust(RANDOM_WORD_LEN * 2, '0')
    return bytes.fromhex(hex_digits)


def b64url_encode(data: bytes) -> str:
    """base64url without '=' padding."""
    return base64.urlsafe_b64encode(data).rstrip(b'=').decode('ascii')


def b64url_decode(text: str) -> bytes:
    padding = '=' * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def random_bytes(n: int) -> bytes:
    try:
        return os.urandom(n)
    except (NotImplementedError, OSError) as e:
        raise RandomSourceError('OS random source unavailable') from e


def wipe(buf: bytearray) -> None:
    """Overwrite a mutable buffer in place (best effort, CPython may hold copies)."""
    for i in range(len(buf)):
        buf[i] = 0
