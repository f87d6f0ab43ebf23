"""
Configuration management for the Etsy API client.

Provides per-client request options and environment-driven settings using
Pydantic models. Settings are loaded from ``ETSY_*`` environment variables or
a ``.env`` file and validated before any client is built from them.
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from etsy_client.utils.exceptions import ConfigurationError
from etsy_client.utils.logger import get_logger


logger = get_logger(__name__)

API_URL = "https://api.etsy.com/v3"
CONNECT_URL = "https://www.etsy.com/oauth/connect"
TOKEN_URL = "https://api.etsy.com/v3/public/oauth/token"


class ClientOptions(BaseModel):
    """Request options recognized by the dispatcher."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    not_found_error: bool = Field(
        default=False,
        alias="404_error",
        description="Raise a 404 as RequestError instead of returning a soft not-found envelope"
    )
    timeout: Optional[float] = Field(default=30.0, description="Request timeout in seconds")

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Timeout must be positive")
        return v


OptionsLike = Union[ClientOptions, Mapping[str, Any], None]


def build_options(options: OptionsLike = None) -> ClientOptions:
    """
    Normalize a mapping such as ``{"404_error": True}`` into ClientOptions.

    Raises:
        ConfigurationError: If an option has an invalid value.
    """
    if options is None:
        return ClientOptions()
    if isinstance(options, ClientOptions):
        return options
    try:
        return ClientOptions.model_validate(dict(options))
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid client options: {e}")


class EtsySettings(BaseSettings):
    """Environment-driven settings for building an Etsy client."""

    model_config = SettingsConfigDict(
        env_prefix="ETSY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    client_id: str = Field(..., description="Etsy app keystring (x-api-key)")
    api_key: Optional[str] = Field(default=None, description="OAuth access token")
    refresh_token: Optional[str] = Field(default=None, description="OAuth refresh token")
    redirect_uri: Optional[str] = Field(default=None, description="Registered OAuth redirect URI")

    api_url: str = Field(default=API_URL, description="API base URL")
    connect_url: str = Field(default=CONNECT_URL, description="OAuth authorize endpoint")
    token_url: str = Field(default=TOKEN_URL, description="OAuth token endpoint")

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    not_found_error: bool = Field(default=False, description="Raise on 404 responses")
    log_level: str = Field(default="WARNING", description="Logging level")

    @field_validator('client_id')
    @classmethod
    def validate_client_id(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError("Etsy client ID is required")
        return v.strip()

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @property
    def options(self) -> ClientOptions:
        """Get the request options described by these settings."""
        return ClientOptions(not_found_error=self.not_found_error, timeout=self.timeout)

    def summary(self) -> Dict[str, Any]:
        """Sanitized view of the settings (no secrets)."""
        return {
            "client_id": self.client_id,
            "has_api_key": bool(self.api_key),
            "has_refresh_token": bool(self.refresh_token),
            "redirect_uri": self.redirect_uri,
            "api_url": self.api_url,
            "timeout": self.timeout,
            "404_error": self.not_found_error,
            "log_level": self.log_level,
        }


_config: Optional[EtsySettings] = None


def get_config() -> EtsySettings:
    """
    Get the cached settings instance.

    Raises:
        ConfigurationError: If settings validation fails.
    """
    global _config

    if _config is None:
        try:
            _config = EtsySettings()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}")
        logger.debug(f"Loaded settings for client {_config.client_id}")

    return _config


def reload_config() -> EtsySettings:
    """Reload settings from the environment."""
    global _config
    _config = None
    return get_config()
