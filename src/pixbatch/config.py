"""
Configuration management using Pydantic for pixbatch.
Provides type-safe configuration with validation and environment variable support.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pixbatch.common.constants import ExportConstants, SystemConstants
from pixbatch.schemas import ProcessOptions

logger = logging.getLogger(__name__)


class SystemConfig(BaseSettings):
    """System configuration."""

    log_level: str = Field(default=SystemConstants.LOG_LEVEL_DEFAULT, description="Logging level")
    log_format: str = Field(
        default=SystemConstants.LOG_FORMAT_DEFAULT, description="Logging record format"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        v_upper = v.upper()
        if v_upper not in SystemConstants.VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {SystemConstants.VALID_LOG_LEVELS}"
            )
        return v_upper

    model_config = SettingsConfigDict(env_prefix="PIXBATCH_SYSTEM_", extra="ignore")


class ExportConfig(BaseSettings):
    """Export configuration."""

    archive_name: str = Field(
        default=ExportConstants.DEFAULT_ARCHIVE_NAME, description="Default ZIP archive name"
    )
    overwrite: bool = Field(default=False, description="Overwrite existing output files")

    model_config = SettingsConfigDict(env_prefix="PIXBATCH_EXPORT_", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-configurations
    system: SystemConfig = Field(default_factory=SystemConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    # Overrides for ProcessOptions defaults (snake_case or camelCase keys)
    defaults: Dict[str, Any] = Field(default_factory=dict)

    # Config file support
    config_file: Optional[str] = Field(default=None, description="Path to YAML config file")

    @model_validator(mode="before")
    @classmethod
    def load_config_file(cls, values):
        """Load configuration from YAML file if specified."""
        if not isinstance(values, dict):
            return values

        config_file = values.get("config_file") or os.getenv("PIXBATCH_CONFIG_FILE")

        if config_file and Path(config_file).exists():
            import yaml

            try:
                with open(config_file, "r") as f:
                    file_config = yaml.safe_load(f)
                    if file_config:
                        # Merge file config with values (env vars take precedence)
                        for key, value in file_config.items():
                            if key not in values or values[key] is None:
                                values[key] = value
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        return values

    @field_validator("defaults")
    @classmethod
    def validate_defaults(cls, v):
        """Reject overrides that do not form valid options."""
        ProcessOptions(**v)
        return v

    def default_options(self, **overrides: Any) -> ProcessOptions:
        """
        Build processing options from the configured defaults.

        Args:
            **overrides: Option values taking precedence over the defaults

        Returns:
            Validated ProcessOptions
        """
        return ProcessOptions(**{**self.defaults, **overrides})

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return self.model_dump(exclude_none=True)

    def save_to_file(self, path: str) -> None:
        """Save current configuration to YAML file."""
        import yaml

        config_dict = self.to_dict()
        with open(path, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False)

    model_config = SettingsConfigDict(
        env_prefix="PIXBATCH_",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with validated configuration
    """
    return Settings()


# Convenience function to reload settings (clears cache)
def reload_settings() -> Settings:
    """
    Reload settings, clearing the cache.

    Returns:
        Fresh Settings object
    """
    get_settings.cache_clear()
    return get_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure root logging from settings.

    Args:
        settings: Settings to use (cached settings when omitted)
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.system.log_level),
        format=settings.system.log_format,
    )
