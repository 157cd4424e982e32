"""
Application settings for the billing engine CLI.

The engine components take every input as an explicit argument; these
settings only feed the command-line layer (log level, display precision,
default billing-config file).
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Configuration settings for the billing engine CLI."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Display precision for read-out totals
    hours_decimal_places: int = Field(default=1, ge=0, alias="HOURS_DECIMAL_PLACES")
    currency_decimal_places: int = Field(
        default=2, ge=0, alias="CURRENCY_DECIMAL_PLACES"
    )

    # Billing configuration used when a command is given no --config
    billing_config_file: Optional[str] = Field(
        default=None, alias="BILLING_CONFIG_FILE"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()


def load_config(env_file: Optional[str] = None) -> EngineSettings:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return EngineSettings()


# Global configuration instance
_config: Optional[EngineSettings] = None


def get_config() -> EngineSettings:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> EngineSettings:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
