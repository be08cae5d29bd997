import pytest

from whiphash.crypto.kdf import HardeningParams
from whiphash.crypto.pipeline import DerivationConfig


# Cheap Argon2id settings for property tests; pinned vectors use the defaults.
LIGHT_PARAMS = HardeningParams(memory_cost=256, time_cost=1, parallelism=4)


@pytest.fixture
def light_config() -> DerivationConfig:
    return DerivationConfig(params=LIGHT_PARAMS)
