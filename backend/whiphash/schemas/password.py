from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# 2**256 - 1 has 78 decimal digits; longer inputs are rejected before parsing.
# Values of 78 digits that still exceed 256 bits are rejected by the pipeline.
_MAX_DECIMAL_DIGITS = 78


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra='forbid',
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RandomnessIn(_CamelModel):
    """Oracle fulfillment forwarded by the caller after on-chain confirmation."""

    n1: str = Field(min_length=1, max_length=_MAX_DECIMAL_DIGITS, description='First random value (decimal)')
    n2: str = Field(min_length=1, max_length=_MAX_DECIMAL_DIGITS, description='Second random value (decimal)')
    tx_hash: str = Field(max_length=128, description='Originating transaction hash')
    sequence_number: str = Field(max_length=_MAX_DECIMAL_DIGITS, description='Oracle sequence number (decimal)')

    @field_validator('n1', 'n2')
    @classmethod
    def validate_random_value(cls, v: str) -> str:
        if not v.isascii() or not v.isdigit():
            raise ValueError('must be a non-negative decimal string')
        return v

    @field_validator('sequence_number')
    @classmethod
    def validate_sequence_number(cls, v: str) -> str:
        if v and (not v.isascii() or not v.isdigit()):
            raise ValueError('must be a decimal string')
        return v


class HardeningParamsOut(BaseModel):
    model_config = ConfigDict(extra='forbid')

    memory: int
    time: int
    parallelism: int


class PasswordMetadataOut(_CamelModel):
    tx_hash: str
    sequence_number: str
    device_secret: str
    r1: str
    r2: str
    local_raw: str
    local_key: str
    seed_raw: str
    password_bytes: str
    salt1: str
    password_salt: str
    hardening_params: HardeningParamsOut


class PasswordOut(_CamelModel):
    password: str
    metadata: PasswordMetadataOut


class DerivationParamsOut(_CamelModel):
    """Active derivation settings (no secrets)."""

    primitive: str
    memory: int
    time: int
    parallelism: int
    hash_len: int
    salt_len: int
