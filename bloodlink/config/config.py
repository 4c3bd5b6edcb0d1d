from contextvars import ContextVar
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://bloodlinks.onrender.com"
DEFAULT_STORE_NAME = "auth-store"
CREDENTIALS_FOLDER = ".bloodlink"


class Settings(BaseSettings):
    api_base_url: str = DEFAULT_API_BASE_URL
    api_prefix: str = "/api"
    request_timeout: float = 30.0
    # Upper bound on a token refresh; queued requests fail instead of hanging
    refresh_timeout: float = 30.0
    credentials_dir: Path = Path.home() / CREDENTIALS_FOLDER
    store_name: str = DEFAULT_STORE_NAME

    model_config = SettingsConfigDict(
        env_prefix="BLOODLINK_", env_file=".env", extra="ignore"
    )

    @field_validator("api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalize the base URL so path joining never doubles slashes."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @field_validator("request_timeout", "refresh_timeout")
    @classmethod
    def validate_positive_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @property
    def api_url(self) -> str:
        """Root URL every resource path is resolved against."""
        return f"{self.api_base_url}{self.api_prefix}"

    @property
    def credentials_path(self) -> Path:
        """Location of the persisted credential record."""
        return self.credentials_dir / f"{self.store_name}.json"


# Context variable to store the Settings instance
_settings_ctx: ContextVar[Settings | None] = ContextVar("settings", default=None)


def init_settings(**overrides) -> Settings:
    """Create the settings from the environment plus overrides and make them current."""
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    _settings_ctx.set(settings)
    return settings


def get_settings() -> Settings:
    settings = _settings_ctx.get()
    if settings is None:
        raise RuntimeError("Settings have not been initialized.")
    return settings
