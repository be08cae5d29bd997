from pydantic_settings import BaseSettings, SettingsConfigDict

from whiphash.crypto.kdf import HardeningParams


class Settings(BaseSettings):
    app_name: str = "whiphash"
    app_env: str = "development"
    log_level: str = "INFO"

    # Argon2id hardening (memory in KiB)
    argon2_memory_cost: int = 64 * 1024
    argon2_time_cost: int = 3
    argon2_parallelism: int = 4

    derivation_timeout_seconds: float = 10.0

    # Per-client limit on POST /passwords/generate
    rate_limit_max_requests: int = 10
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def hardening_params(self) -> HardeningParams:
        return HardeningParams(
            memory_cost=self.argon2_memory_cost,
            time_cost=self.argon2_time_cost,
            parallelism=self.argon2_parallelism,
        )


settings = Settings()
