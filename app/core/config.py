"""Inflector configuration settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InflectorSettings(BaseSettings):
    """Process-wide inflection switches and translation sources.

    Environment Variables:
        INFLECTOR_RAISES: Raise on unknown tokens or missing options (default: False)
        INFLECTOR_ALIASED_PATTERNS: Allow aliases inside patterns (default: False)
        INFLECTOR_UNKNOWN_DEFAULTS: Fall back to the default token when an
            option is missing, empty or unknown (default: True)
        INFLECTOR_EXCLUDED_DEFAULTS: Fall back to the default token when a
            valid option is not mentioned in a pattern (default: False)
        INFLECTOR_TRANSLATIONS_DIR: Directory with *.<locale>.yml files
    """

    raises: bool = Field(default=False, alias="INFLECTOR_RAISES")
    aliased_patterns: bool = Field(default=False, alias="INFLECTOR_ALIASED_PATTERNS")
    unknown_defaults: bool = Field(default=True, alias="INFLECTOR_UNKNOWN_DEFAULTS")
    excluded_defaults: bool = Field(
        default=False, alias="INFLECTOR_EXCLUDED_DEFAULTS"
    )
    translations_dir: Optional[str] = Field(
        default=None, alias="INFLECTOR_TRANSLATIONS_DIR"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Inflector configuration settings."""

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    inflector: InflectorSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        settings_map = {
            "inflector": InflectorSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
