# Assumptions:
# - Request defaults come from environment variables
# - Pydantic Settings for validation
# - Defaults match a plain builder with no overrides


from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONNECTION_TIMEOUT_MS = 8000


class RequestSettings(BaseSettings):
    """Default request configuration"""

    # Connection
    timeout_ms: int = Field(default=DEFAULT_CONNECTION_TIMEOUT_MS, ge=0)
    use_cache: bool = False
    user_agent: str | None = None

    # Retries
    retry_count: int = Field(default=1, ge=1)
    retry_backoff: float = Field(default=0.0, ge=0.0)

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    model_config = SettingsConfigDict(
        env_prefix="HTTPBUILDER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> RequestSettings:
    """Get request settings singleton"""
    return RequestSettings()
