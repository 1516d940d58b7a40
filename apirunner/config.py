from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # HTTP transport defaults
    default_timeout_ms: int = 30000
    max_redirects: int = 5
    follow_redirects: bool = True
    verify_ssl: bool = True
    max_body_size: int = 10 * 1024 * 1024  # 10MB max response body

    # History sink
    history_limit: int = 100

    # Logging
    log_level: str = "WARNING"

    # Optional definition files picked up when no CLI flag is given
    environments_file: str | None = None
    globals_file: str | None = None

    model_config = SettingsConfigDict(env_prefix="APIRUNNER_", env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return level


@lru_cache
def get_settings() -> Settings:
    return Settings()
