# fastclient/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import __version__


class ClientSettings(BaseSettings):
    """
    User-configurable settings for clients built with fastclient, loaded from
    environment variables (prefixed with ``FASTCLIENT_``) or a .env file.

    Settings only shape construction-time behaviour: which transport is used
    when none is injected, how it is tuned, and how strictly path templates
    are checked. They never change the order of the dispatch pipeline.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "secrets.env"),  # Look in both .env and secrets.env
        env_file_encoding="utf-8",
        env_prefix="FASTCLIENT_",
        extra="ignore",  # Ignore extra fields found in environment
        case_sensitive=False,
    )

    # --- Default Transport Settings ---
    request_timeout: float = Field(
        default=30.0, description="Request timeout in seconds for the default transport"
    )
    user_agent: str = Field(
        default=f"fastclient/{__version__}",
        description="User-Agent header sent by the default transport",
    )
    use_ambient_transport: bool = Field(
        default=True,
        description="Fall back to the process-wide default transport when none is injected",
    )

    # --- Request Construction Settings ---
    strict_path_params: bool = Field(
        default=False,
        description="Raise instead of sending a URL with an unresolved {placeholder}",
    )
    default_content_type: str = Field(
        default="application/json",
        description="Content-Type applied to POST/PUT/PATCH when the caller sets none",
    )


@lru_cache
def get_settings() -> ClientSettings:
    """
    Provides access to the library settings.

    Settings are loaded from environment variables or .env/secrets.env files.
    The instance is cached for performance.

    Returns:
        ClientSettings: The settings instance.
    """
    return ClientSettings()
