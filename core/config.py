"""Configuration management using pydantic-settings."""
from typing import Literal
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Configuration priority (highest to lowest):
    1. Runtime environment variables
    2. .env file
    3. Defaults in this class

    Categories:
    - Secrets: Required from environment, never hardcoded
    - Service Endpoints: Defaults with environment override
    - Display: How incidents are rendered for the list view
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ============================================
    # SECRETS (Required from environment)
    # ============================================
    pagerduty_api_key: SecretStr | None = Field(
        default=None,
        description="[REQUIRED] PagerDuty REST API key. Sent as 'Authorization: Token token=<key>'."
    )

    # ============================================
    # SERVICE ENDPOINTS (Defaults with env override)
    # ============================================
    pagerduty_api_url: str = Field(
        default="https://api.pagerduty.com",
        description="PagerDuty REST API base URL"
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout applied to every PagerDuty request (seconds)"
    )

    # ============================================
    # DISPLAY
    # ============================================
    display_timezone: str = Field(
        default="Asia/Tokyo",
        description="IANA time zone incident timestamps are rendered in"
    )
    timestamp_format: str = Field(
        default="%Y/%m/%d %I:%M:%S",
        description="strftime pattern for incident timestamps (12-hour clock, as in yyyy/MM/dd hh:mm:ss)"
    )

    # Application Configuration
    app_name: str = Field(
        default="Incident Board",
        description="Application name"
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("pagerduty_api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        """Whether a non-blank PagerDuty API key is configured."""
        return bool(self.get_secret_value(self.pagerduty_api_key))

    @staticmethod
    def get_secret_value(secret_field: SecretStr | None) -> str | None:
        """
        Safely extract string value from SecretStr field.

        Args:
            secret_field: SecretStr field or None

        Returns:
            Stripped string value, or None when unset or blank
        """
        if secret_field is None:
            return None
        value = secret_field.get_secret_value().strip()
        return value or None


# Global settings instance
settings = Settings()
