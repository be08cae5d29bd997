# whiphash/crypto/__init__.py
from .errors import (
    DerivationCancelled,
    DerivationError,
    InvalidInputError,
    KDFExecutionError,
    RandomSourceError,
)
from .kdf import HardeningParams
from .pipeline import (
    DEFAULT_CONFIG,
    DerivationConfig,
    DerivationMetadata,
    DerivationResult,
    RandomPair,
    derive,
)

__all__ = [
    "DEFAULT_CONFIG",
    "DerivationCancelled",
    "DerivationConfig",
    "DerivationError",
    "DerivationMetadata",
    "DerivationResult",
    "HardeningParams",
    "InvalidInputError",
    "KDFExecutionError",
    "RandomPair",
    "RandomSourceError",
    "derive",
]
