# whiphash/crypto/password.py
"""
Maps hardened bytes onto a typable alphabet.

Each byte selects ``CHARSET[byte % len(CHARSET)]``. 256 is not a multiple of
the alphabet size, so low-index characters are slightly more likely; changing
that would change every previously derived password.
"""
from __future__ import annotations

import string


CHARSET = (
    string.ascii_uppercase
    + string.ascii_lowercase
    + string.digits
    + '!@#$%^&*()_+-=[]{}|;:,.<>?'
)

MIN_PASSWORD_LEN = 16


def encode_password(password_bytes: bytes, *, charset: str = CHARSET, min_length: int = MIN_PASSWORD_LEN) -> str:
    if not password_bytes:
        raise ValueError('password_bytes must not be empty')

    size = len(charset)
    chars = [charset[b % size] for b in password_bytes]

    # Short outputs are extended by cycling back over the same bytes.
    while len(chars) < min_length:
        chars.append(charset[password_bytes[len(chars) % len(password_bytes)] % size])

    return ''.join(chars)
