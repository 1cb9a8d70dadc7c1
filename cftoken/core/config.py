"""Process configuration (settings and environment).

Single source of truth for process-level settings. Uses pydantic-settings
with .env support. Zone tables and global defaults live in the user's
config.json and are loaded by cftoken.infrastructure.config.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cftoken.core.constants import CONFIG_DIR_NAME


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    The API token is only required for commands that talk to Cloudflare,
    so it is checked by require_api_token() rather than at load time.
    """

    # Cloudflare API
    cloudflare_api_token: SecretStr = SecretStr("")
    cloudflare_api_base_url: str = "https://api.cloudflare.com/client/v4"
    request_timeout_seconds: float = 30.0
    user_agent: str = "cftoken-cli/0.1"

    # Config directory: $XDG_CONFIG_HOME/cftoken, else ~/.config/cftoken
    xdg_config_home: str = ""
    config_dir_override: str = Field(
        default="",
        validation_alias=AliasChoices("CFTOKEN_CONFIG_DIR", "config_dir_override"),
    )

    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("cloudflare_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return value

    @property
    def config_dir(self) -> Path:
        """Directory holding config.json and zones.json."""
        if self.config_dir_override.strip():
            return Path(self.config_dir_override.strip()).expanduser()
        if self.xdg_config_home.strip():
            return Path(self.xdg_config_home.strip()) / CONFIG_DIR_NAME
        return Path.home() / ".config" / CONFIG_DIR_NAME

    def require_api_token(self) -> str:
        """Return the API token or raise ValueError when it is not set."""
        token = self.cloudflare_api_token.get_secret_value().strip()
        if not token:
            raise ValueError(
                "missing API token: export CLOUDFLARE_API_TOKEN before running this command"
            )
        return token


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() after overriding env vars so
    the next get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
