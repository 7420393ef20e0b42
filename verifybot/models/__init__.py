"""Document and session models."""

from .documents import (
    ACCESS_CODES_COLLECTION,
    NO_USERNAME,
    OTP_SESSIONS_COLLECTION,
    PENDING_VERIFICATIONS_COLLECTION,
    AccessCode,
    AdminCodeSession,
    OtpSession,
    PendingVerification,
)

__all__ = [
    "ACCESS_CODES_COLLECTION",
    "NO_USERNAME",
    "OTP_SESSIONS_COLLECTION",
    "PENDING_VERIFICATIONS_COLLECTION",
    "AccessCode",
    "AdminCodeSession",
    "OtpSession",
    "PendingVerification",
]
