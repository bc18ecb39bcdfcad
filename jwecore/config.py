"""Library configuration."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# RSA moduli below this size are never accepted, whatever the configuration says
RSA_KEY_BITS_FLOOR = 2048


class Settings(BaseSettings):
    """Settings loaded from ``JWECORE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JWECORE_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # Key policy
    min_rsa_key_bits: int = RSA_KEY_BITS_FLOOR

    # Logging
    log_level: str = "info"
    log_json: bool = True

    @field_validator("min_rsa_key_bits")
    @classmethod
    def _check_min_rsa_key_bits(cls, value: int) -> int:
        if value < RSA_KEY_BITS_FLOOR:
            raise ValueError(f"min_rsa_key_bits must be {RSA_KEY_BITS_FLOOR} or more: {value}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.lower()
        if level not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
