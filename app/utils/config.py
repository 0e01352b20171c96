"""Application configuration settings using Pydantic."""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field, ValidationError


class Settings(BaseSettings):
    """Application configuration settings."""

    # API Configuration
    api_host: str = Field("0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(8000, validation_alias="API_PORT")
    debug: bool = Field(False, validation_alias="DEBUG")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # CORS Configuration
    allowed_origins: list[str] = Field(
        ["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Trusted Hosts Configuration
    trusted_hosts: list[str] = Field(["*"], validation_alias="TRUSTED_HOSTS")

    # Rate Limiting
    rate_limit_per_minute: int = Field(30, validation_alias="RATE_LIMIT_PER_MINUTE")
    rate_limit_exempt_paths: list[str] = Field(
        ["/health", "/api/v1/simulation/health"],
        validation_alias="RATE_LIMIT_EXEMPT_PATHS",
    )

    class Config:
        """Pydantic configuration to load from .env file."""

        env_file = ".env"
        case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        s = Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        # Raise a helpful message in logs for bad envs
        raise RuntimeError(f"Configuration error: {e}") from e
    return s
