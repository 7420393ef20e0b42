"""Application settings with Pydantic validation."""

import json
from typing import Any, Dict, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ADMIN_WHATSAPP_URL = "https://wa.me/918777845713"
DEFAULT_ADMIN_TELEGRAM_URL = "https://t.me/X_o_x_o_002"
DEFAULT_INFO_PHOTO_URL = (
    "https://raw.githubusercontent.com/Hawkay002/my-portfolio-bot/main/IMG_20260131_132820_711.jpg"
)


class BotSettings(BaseSettings):
    """Application settings with validation and environment variable support."""

    # Telegram
    bot_token: SecretStr = Field(..., description="Telegram bot token")  # Required field
    admin_id: int = Field(
        default=1299129410, description="Telegram user id allowed to issue access codes"
    )

    # Document store
    store_backend: str = Field(
        default="firestore", description="Document store backend (firestore, memory)"
    )
    firebase_service_account: Optional[SecretStr] = Field(
        default=None, description="Firebase service-account credential as a JSON string"
    )

    # Keep-alive web server
    host: str = Field(default="0.0.0.0", description="Keep-alive server bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="Keep-alive server port")

    # Environment
    env: str = Field(
        default="production", description="Environment (production, development, testing)"
    )

    # Presentation
    admin_whatsapp_url: Optional[str] = Field(
        default=DEFAULT_ADMIN_WHATSAPP_URL, description="WhatsApp link shown by /admin_socials"
    )
    admin_telegram_url: Optional[str] = Field(
        default=DEFAULT_ADMIN_TELEGRAM_URL, description="Telegram link shown by /admin_socials"
    )
    bot_creator: str = Field(default="Shovith", description="Creator name shown by /info")
    info_fallback_photo_url: str = Field(
        default=DEFAULT_INFO_PHOTO_URL,
        description="Photo used by /info when the bot has no profile photo",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("store_backend")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        """Validate store backend name."""
        allowed = ["firestore", "memory"]
        if v.lower() not in allowed:
            raise ValueError(f'STORE_BACKEND must be one of: {", ".join(allowed)}')
        return v.lower()

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value."""
        allowed = ["production", "development", "testing", "staging"]
        if v.lower() not in allowed:
            raise ValueError(f'ENV must be one of: {", ".join(allowed)}')
        return v.lower()

    @model_validator(mode="after")
    def validate_firestore_credentials(self) -> "BotSettings":
        """The Firestore backend cannot start without a parsable service account."""
        if self.store_backend != "firestore":
            return self
        if self.firebase_service_account is None:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT is required when STORE_BACKEND=firestore")
        self.service_account_info()
        return self

    def service_account_info(self) -> Dict[str, Any]:
        """
        Parse the service-account JSON blob.

        Returns:
            Service-account dictionary

        Raises:
            ValueError: If the blob is missing or is not a JSON object
        """
        if self.firebase_service_account is None:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT is not set")
        try:
            info = json.loads(self.firebase_service_account.get_secret_value())
        except json.JSONDecodeError as e:
            raise ValueError(f"FIREBASE_SERVICE_ACCOUNT is not valid JSON: {e.msg}") from e
        if not isinstance(info, dict):
            raise ValueError("FIREBASE_SERVICE_ACCOUNT must be a JSON object")
        return info


# Singleton instance
_settings: Optional[BotSettings] = None


def get_settings() -> BotSettings:
    """
    Get application settings singleton.

    Returns:
        BotSettings instance

    Raises:
        ValidationError: If required settings are missing or invalid
    """
    global _settings
    if _settings is None:
        _settings = BotSettings()  # type: ignore[call-arg]
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
