"""Verification and access-code flows."""

from .admin_sessions import AdminSessionRegistry
from .code_issuance import MAX_CODES_PER_BATCH, CodeIssuanceFlow
from .replies import (
    ContactRequestKeyboard,
    InlineButton,
    InlineKeyboard,
    RemoveKeyboard,
    Reply,
)
from .verification import VerificationFlow

__all__ = [
    "AdminSessionRegistry",
    "CodeIssuanceFlow",
    "MAX_CODES_PER_BATCH",
    "ContactRequestKeyboard",
    "InlineButton",
    "InlineKeyboard",
    "RemoveKeyboard",
    "Reply",
    "VerificationFlow",
]
