# whiphash/crypto/pipeline.py
"""
Password derivation pipeline.

Two oracle random values and a fresh device secret are mixed through
HKDF-SHA256 -> Argon2id -> HKDF-SHA256 -> Argon2id, and the final bytes are
mapped onto a typable alphabet:

    local_raw      = HKDF(R1 || device_secret || "local_raw_v1", AppSalt1, "local_raw_v1")
    local_key      = Argon2id(local_raw, salt1)
    seed_raw       = HKDF(local_key || R2 || "seed_v1", AppSalt2, "seed_v1")
    password_bytes = Argon2id(seed_raw, password_salt)
    password       = charset[b % len(charset)] for b in password_bytes

The second HKDF round reinjects an independent oracle draw (R2) after the
first hardening pass, so the result depends on two draws rather than one.

``derive`` is stateless and does no I/O. Every intermediate value is returned
(base64url, unpadded) in the metadata for auditing; nothing is returned or
logged when a step fails.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from whiphash.crypto.encoding import (
    b64url_encode,
    encode_random_word,
    parse_decimal,
    random_bytes,
    wipe,
)
from whiphash.crypto.errors import DerivationCancelled, DerivationError, InvalidInputError
from whiphash.crypto.kdf import HardeningParams, extract, harden, new_salt
from whiphash.crypto.password import encode_password

logger = logging.getLogger(__name__)

DEVICE_SECRET_LEN = 32
APP_SALT_LEN = 32

# Domain-separation constants, identical for every deployment. Not secret.
APP_SALT_1 = bytes(range(0, 32))
APP_SALT_2 = bytes(range(32, 64))

LOCAL_RAW_CONTEXT = "local_raw_v1"
SEED_CONTEXT = "seed_v1"


@dataclass(frozen=True)
class RandomPair:
    """
    Two oracle values, each expected to fit in 256 bits.

    n1_text / n2_text keep the decimal strings as delivered so metadata echoes
    them unchanged (leading zeros included); they default to str(n).
    """
    n1: int
    n2: int
    n1_text: Optional[str] = field(default=None, compare=False)
    n2_text: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_decimal(cls, n1: str, n2: str) -> "RandomPair":
        return cls(
            n1=parse_decimal(n1, field="n1"),
            n2=parse_decimal(n2, field="n2"),
            n1_text=str(n1),
            n2_text=str(n2),
        )

    @property
    def r1(self) -> str:
        return self.n1_text if self.n1_text is not None else str(self.n1)

    @property
    def r2(self) -> str:
        return self.n2_text if self.n2_text is not None else str(self.n2)


@dataclass(frozen=True)
class DerivationConfig:
    app_salt1: bytes = APP_SALT_1
    app_salt2: bytes = APP_SALT_2
    local_context: str = LOCAL_RAW_CONTEXT
    seed_context: str = SEED_CONTEXT
    params: HardeningParams = field(default_factory=HardeningParams)

    def __post_init__(self) -> None:
        for name in ("app_salt1", "app_salt2"):
            if len(getattr(self, name)) != APP_SALT_LEN:
                raise ValueError(f"{name} must be {APP_SALT_LEN} bytes")


DEFAULT_CONFIG = DerivationConfig()


@dataclass(frozen=True)
class DerivationMetadata:
    tx_hash: str
    sequence_number: str
    r1: str
    r2: str
    salt1: str
    password_salt: str
    hardening_params: HardeningParams
    device_secret: str = field(repr=False)
    local_raw: str = field(repr=False)
    local_key: str = field(repr=False)
    seed_raw: str = field(repr=False)
    password_bytes: str = field(repr=False)

    def to_dict(self) -> dict:
        return {
            "txHash": self.tx_hash,
            "sequenceNumber": self.sequence_number,
            "deviceSecret": self.device_secret,
            "r1": self.r1,
            "r2": self.r2,
            "localRaw": self.local_raw,
            "localKey": self.local_key,
            "seedRaw": self.seed_raw,
            "passwordBytes": self.password_bytes,
            "salt1": self.salt1,
            "passwordSalt": self.password_salt,
            "hardeningParams": self.hardening_params.to_metadata(),
        }


@dataclass(frozen=True)
class DerivationResult:
    password: str = field(repr=False)
    metadata: DerivationMetadata

    def to_dict(self) -> dict:
        return {"password": self.password, "metadata": self.metadata.to_dict()}


def _require_len(name: str, value: bytes, expected: int) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise InvalidInputError(f"{name} must be bytes")
    if len(value) != expected:
        raise InvalidInputError(f"{name} must be {expected} bytes, got {len(value)}")
    return bytes(value)


def derive(
    random_pair: RandomPair,
    device_secret: Optional[bytes] = None,
    *,
    salt1: Optional[bytes] = None,
    password_salt: Optional[bytes] = None,
    tx_hash: str = "",
    sequence_number: str = "",
    config: DerivationConfig = DEFAULT_CONFIG,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> DerivationResult:
    """
    Derive a password from an oracle random pair.

    Args:
        random_pair: the two oracle values (already confirmed on-chain)
        device_secret: 32 bytes; drawn from the OS CSPRNG when omitted
        salt1, password_salt: per-round Argon2id salts; drawn fresh when omitted.
            Only pass these to reproduce a known derivation.
        tx_hash, sequence_number: correlation ids, copied into the metadata
        config: app salts, context strings and hardening parameters
        should_cancel: polled once, between the two hardening rounds

    Raises:
        InvalidInputError, RandomSourceError, KDFExecutionError, DerivationCancelled
    """
    params = config.params

    # Fail before any KDF work on bad input.
    r1 = encode_random_word(random_pair.n1, field="n1")
    r2 = encode_random_word(random_pair.n2, field="n2")
    if device_secret is not None:
        device_secret = _require_len("device_secret", device_secret, DEVICE_SECRET_LEN)
    if salt1 is not None:
        salt1 = _require_len("salt1", salt1, params.salt_len)
    if password_salt is not None:
        password_salt = _require_len("password_salt", password_salt, params.salt_len)

    logger.info("Starting derivation tx=%s seq=%s", tx_hash or "-", sequence_number or "-")

    secret = bytearray(device_secret if device_secret is not None else random_bytes(DEVICE_SECRET_LEN))
    local_context = config.local_context.encode("utf-8")
    seed_context = config.seed_context.encode("utf-8")

    try:
        ikm1 = r1 + bytes(secret) + local_context
        local_raw = extract(ikm1, salt=config.app_salt1, info=local_context)

        if salt1 is None:
            salt1 = new_salt(params)
        local_key = harden(local_raw, salt1, params)
        logger.debug("Hardening round 1 done (m=%d KiB, t=%d, p=%d)",
                     params.memory_cost, params.time_cost, params.parallelism)

        if should_cancel is not None and should_cancel():
            raise DerivationCancelled("Derivation cancelled after first hardening round")

        ikm2 = local_key + r2 + seed_context
        seed_raw = extract(ikm2, salt=config.app_salt2, info=seed_context)

        if password_salt is None:
            password_salt = new_salt(params)
        password_bytes = harden(seed_raw, password_salt, params)
        logger.debug("Hardening round 2 done")

        password = encode_password(password_bytes)

        metadata = DerivationMetadata(
            tx_hash=tx_hash,
            sequence_number=sequence_number,
            r1=random_pair.r1,
            r2=random_pair.r2,
            salt1=b64url_encode(salt1),
            password_salt=b64url_encode(password_salt),
            hardening_params=params,
            device_secret=b64url_encode(bytes(secret)),
            local_raw=b64url_encode(local_raw),
            local_key=b64url_encode(local_key),
            seed_raw=b64url_encode(seed_raw),
            password_bytes=b64url_encode(password_bytes),
        )
    except DerivationError as e:
        logger.warning("Derivation aborted tx=%s: %s", tx_hash or "-", type(e).__name__)
        raise
    finally:
        wipe(secret)

    logger.info("Derivation complete tx=%s seq=%s", tx_hash or "-", sequence_number or "-")
    return DerivationResult(password=password, metadata=metadata)
