"""
Configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
"""

from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class RecaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    recaptcha_secret: str = ""
    # Overridable so tests and staging can point at a stand-in service
    recaptcha_verify_url: str = DEFAULT_VERIFY_URL
    recaptcha_timeout_seconds: float = 10.0

    @field_validator("recaptcha_timeout_seconds")
    @classmethod
    def _timeout_must_be_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("recaptcha_timeout_seconds must be positive")
        return value


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production

    @property
    def is_production(self) -> bool:
        return self.env == "production"
