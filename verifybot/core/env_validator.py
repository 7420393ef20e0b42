"""Environment variables validation."""

import json
import os
from typing import Dict, List

from loguru import logger


class EnvValidator:
    """Validate required environment variables before settings are built."""

    REQUIRED_VARS = {
        "BOT_TOKEN": "Telegram bot token from @BotFather",
    }

    FIRESTORE_VARS = {
        "FIREBASE_SERVICE_ACCOUNT": "Firebase service-account credential (JSON string)",
    }

    OPTIONAL_VARS = {
        "PORT": "Keep-alive web server port (default 3000)",
        "ADMIN_ID": "Telegram user id allowed to issue access codes",
        "ADMIN_WHATSAPP_URL": "WhatsApp link for /admin_socials",
        "ADMIN_TELEGRAM_URL": "Telegram link for /admin_socials",
    }

    @classmethod
    def validate(cls) -> bool:
        """
        Validate environment variables.

        Returns:
            True if all required vars are present and valid
        """
        missing_required: List[str] = []
        missing_optional: List[str] = []
        validation_errors: List[str] = []

        required = dict(cls.REQUIRED_VARS)
        if os.getenv("STORE_BACKEND", "firestore").lower() == "firestore":
            required.update(cls.FIRESTORE_VARS)

        for var, description in required.items():
            value = os.getenv(var)
            if not value:
                missing_required.append(f"{var} ({description})")
            elif var == "BOT_TOKEN" and not cls._validate_bot_token(value):
                validation_errors.append(f"{var}: Expected '<bot id>:<secret>' format")
            elif var == "FIREBASE_SERVICE_ACCOUNT" and not cls._validate_service_account(value):
                validation_errors.append(f"{var}: Must be a JSON object with a project_id")

        for var, description in cls.OPTIONAL_VARS.items():
            value = os.getenv(var)
            if not value:
                missing_optional.append(f"{var} ({description})")
            elif var in ("PORT", "ADMIN_ID") and not value.isdigit():
                validation_errors.append(f"{var}: Must be a positive integer")

        if missing_required:
            logger.error("❌ Missing required environment variables:")
            for var in missing_required:
                logger.error(f"  - {var}")

        if validation_errors:
            logger.error("❌ Environment variable validation errors:")
            for error in validation_errors:
                logger.error(f"  - {error}")

        if missing_required or validation_errors:
            return False

        if missing_optional:
            logger.debug("Optional environment variables not set:")
            for var in missing_optional:
                logger.debug(f"  - {var}")

        logger.info("✅ Environment validation passed")
        return True

    @staticmethod
    def _validate_bot_token(token: str) -> bool:
        bot_id, sep, secret = token.partition(":")
        return bool(sep) and bot_id.isdigit() and len(secret) > 0

    @staticmethod
    def _validate_service_account(blob: str) -> bool:
        try:
            info = json.loads(blob)
        except json.JSONDecodeError:
            return False
        return isinstance(info, dict) and bool(info.get("project_id"))

    @classmethod
    def get_masked_summary(cls) -> Dict[str, str]:
        """Get summary of env vars with masked values."""
        summary = {}

        all_vars = {**cls.REQUIRED_VARS, **cls.FIRESTORE_VARS, **cls.OPTIONAL_VARS}
        for var in all_vars:
            value = os.getenv(var)
            if value:
                if len(value) > 8:
                    summary[var] = f"{value[:4]}...{value[-4:]}"
                else:
                    summary[var] = "***"
            else:
                summary[var] = "NOT SET"

        return summary
