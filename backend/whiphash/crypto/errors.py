# whiphash/crypto/errors.py
from __future__ import annotations


class DerivationError(Exception):
    """Base class for every failure of the password derivation pipeline."""


class InvalidInputError(DerivationError, ValueError):
    """
    Caller supplied bad input: a negative, non-numeric or over-256-bit
    randomness value, or a device secret / salt of the wrong length.
    Raised before any KDF runs.
    """


class RandomSourceError(DerivationError):
    """The OS CSPRNG could not provide bytes. There is no fallback RNG."""


class KDFExecutionError(DerivationError):
    """
    The memory-hard KDF failed (e.g. could not allocate its working set)
    or produced output of an unexpected length.
    Indicates a resource/environment problem, not a bad request.
    """


class DerivationCancelled(DerivationError):
    """Cancellation was requested and observed between the two hardening rounds."""
