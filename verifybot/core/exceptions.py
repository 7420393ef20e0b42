"""Custom exception classes for VerifyBot."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class VerifyBotError(Exception):
    """Base exception for VerifyBot."""

    def __init__(
        self, message: str, recoverable: bool = True, details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize VerifyBot error.

        Args:
            message: Error message
            recoverable: Whether the user can recover by trying again
            details: Additional error details
        """
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "recoverable": self.recoverable,
            "details": self.details,
            "timestamp": self.timestamp,
        }


class ConfigurationError(VerifyBotError):
    """Required configuration is missing or invalid. Fatal at startup."""

    def __init__(self, message: str = "Invalid configuration", key: Optional[str] = None):
        details = {"key": key} if key else {}
        super().__init__(message, recoverable=False, details=details)


class PersistenceError(VerifyBotError):
    """A document store read or write failed."""

    def __init__(
        self,
        message: str = "Document store operation failed",
        operation: Optional[str] = None,
    ):
        details = {"operation": operation} if operation else {}
        super().__init__(message, recoverable=True, details=details)
        self.operation = operation


class AuthorizationError(VerifyBotError):
    """Caller is not allowed to run an admin operation."""

    def __init__(self, message: str = "Unauthorized", user_id: Optional[int] = None):
        details = {"user_id": user_id} if user_id is not None else {}
        super().__init__(message, recoverable=False, details=details)


class InputValidationError(VerifyBotError):
    """User input failed validation; the user is re-prompted."""

    def __init__(self, message: str = "Invalid input", field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, recoverable=True, details=details)
        self.field = field

