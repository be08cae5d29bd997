# whiphash/crypto/kdf.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from whiphash.crypto.encoding import random_bytes
from whiphash.crypto.errors import KDFExecutionError

logger = logging.getLogger(__name__)

HKDF_OUTPUT_LEN = 32


@dataclass(frozen=True)
class HardeningParams:
    """
    Argon2id cost parameters shared by both hardening rounds.
    memory_cost is in KiB, so 65536 is a 64 MiB working set.
    """
    memory_cost: int = 64 * 1024
    time_cost: int = 3
    parallelism: int = 4
    hash_len: int = 32
    salt_len: int = 16
    type: str = "argon2id"

    def __post_init__(self) -> None:
        if self.type != "argon2id":
            raise ValueError("Only argon2id is supported")
        if self.time_cost < 1:
            raise ValueError("time_cost must be >= 1")
        if self.parallelism < 1:
            raise ValueError("parallelism must be >= 1")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("memory_cost must be >= 8 * parallelism KiB")
        if self.hash_len < 4:
            raise ValueError("hash_len must be >= 4")
        if self.salt_len < 8:
            raise ValueError("salt_len must be >= 8")

    def to_metadata(self) -> dict:
        return {
            "memory": self.memory_cost,
            "time": self.time_cost,
            "parallelism": self.parallelism,
        }


def default_params() -> HardeningParams:
    return HardeningParams()


def new_salt(params: HardeningParams) -> bytes:
    return random_bytes(params.salt_len)


def extract(ikm: bytes, *, salt: bytes, info: bytes, length: int = HKDF_OUTPUT_LEN) -> bytes:
    """HKDF-SHA256 (RFC 5869) extract-then-expand."""
    return HKDF(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        info=info,
    ).derive(ikm)


def harden(secret: bytes, salt: bytes, params: HardeningParams) -> bytes:
    """
    Memory-hard stretching with Argon2id, returning raw bytes.
    Any failure of the underlying library surfaces as KDFExecutionError.
    """
    try:
        out = hash_secret_raw(
            secret=secret,
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=params.hash_len,
            type=Type.ID,
        )
    except (HashingError, MemoryError) as e:
        logger.warning(
            "Argon2id failed (m=%d KiB, t=%d, p=%d): %s",
            params.memory_cost, params.time_cost, params.parallelism, type(e).__name__,
        )
        raise KDFExecutionError("Memory-hard KDF failed") from e

    if len(out) != params.hash_len:
        raise KDFExecutionError(
            f"Memory-hard KDF returned {len(out)} bytes, expected {params.hash_len}"
        )
    return out
