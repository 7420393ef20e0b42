"""Document models shared with the website through Firestore.

Field names produced by ``to_document`` are read directly by the website and
must not change.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from verifybot.core.enums import AdminStep

PENDING_VERIFICATIONS_COLLECTION = "pending_verifications"
OTP_SESSIONS_COLLECTION = "otp_sessions"
ACCESS_CODES_COLLECTION = "access_codes"

NO_USERNAME = "No Username"


@dataclass
class PendingVerification:
    """
    A user who opened a verification deep link but has not shared a contact yet.

    Attributes:
        user_id: Telegram user id (document key, stored as a string)
        session_id: Opaque session id supplied by the website
        timestamp: Server time of the ``/start`` (None until read back)
    """

    user_id: int
    session_id: str
    timestamp: Optional[datetime] = None

    @property
    def document_id(self) -> str:
        return str(self.user_id)

    def to_document(self, timestamp: Any) -> Dict[str, Any]:
        return {"session_id": self.session_id, "timestamp": timestamp}

    @classmethod
    def from_document(cls, user_id: int, data: Dict[str, Any]) -> "PendingVerification":
        return cls(
            user_id=user_id,
            session_id=data["session_id"],
            timestamp=data.get("timestamp"),
        )


@dataclass
class OtpSession:
    """
    An issued one-time code, keyed by the website's session id.

    ``verified`` is flipped by the website only; the bot always writes False.
    """

    session_id: str
    otp: str
    telegram_id: int
    telegram_name: str
    telegram_username: str
    phone_number: str
    verified: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def for_contact(
        cls,
        session_id: str,
        otp: str,
        user_id: int,
        first_name: str,
        last_name: Optional[str],
        username: Optional[str],
        phone_number: str,
    ) -> "OtpSession":
        """
        Build the session for a verified contact share.

        Args:
            session_id: Website session id from the pending verification
            otp: Freshly generated one-time code
            user_id: Telegram user id of the sender
            first_name: Sender first name
            last_name: Sender last name, omitted from the display name when empty
            username: Sender username, replaced by a placeholder when empty
            phone_number: Phone number from the shared contact

        Returns:
            OtpSession ready to be written
        """
        name = " ".join(part for part in (first_name, last_name) if part)
        return cls(
            session_id=session_id,
            otp=otp,
            telegram_id=user_id,
            telegram_name=name,
            telegram_username=username or NO_USERNAME,
            phone_number=phone_number,
        )

    def to_document(self, timestamp: Any) -> Dict[str, Any]:
        return {
            "otp": self.otp,
            "telegram_id": self.telegram_id,
            "telegram_name": self.telegram_name,
            "telegram_username": self.telegram_username,
            "phone_number": self.phone_number,
            "verified": self.verified,
            "created_at": timestamp,
        }

    @classmethod
    def from_document(cls, session_id: str, data: Dict[str, Any]) -> "OtpSession":
        return cls(
            session_id=session_id,
            otp=data["otp"],
            telegram_id=data["telegram_id"],
            telegram_name=data.get("telegram_name", ""),
            telegram_username=data.get("telegram_username", NO_USERNAME),
            phone_number=data.get("phone_number", ""),
            verified=bool(data.get("verified", False)),
            created_at=data.get("created_at"),
        )


@dataclass
class AccessCode:
    """A redeemable code tied to a downloadable resource."""

    code: str
    resource_name: str
    download_url: str
    is_used: bool = False
    created_at: Optional[datetime] = None
    document_id: Optional[str] = None

    def to_document(self, timestamp: Any) -> Dict[str, Any]:
        return {
            "code": self.code,
            "resourceName": self.resource_name,
            "downloadUrl": self.download_url,
            "isUsed": self.is_used,
            "created_at": timestamp,
        }

    @classmethod
    def from_document(cls, document_id: str, data: Dict[str, Any]) -> "AccessCode":
        return cls(
            code=data["code"],
            resource_name=data.get("resourceName", ""),
            download_url=data.get("downloadUrl", ""),
            is_used=bool(data.get("isUsed", False)),
            created_at=data.get("created_at"),
            document_id=document_id,
        )


@dataclass
class AdminCodeSession:
    """
    In-memory state of one admin's code issuance dialog.

    Attributes:
        admin_id: Telegram id of the admin
        step: Current dialog step
        count: Number of codes to issue (1-50)
        name: Resource name, stored verbatim
        link: Download URL, stored verbatim
        codes: Generated codes awaiting confirmation
        committing: True while a confirm is writing the codes
        created_at: Dialog start time
    """

    admin_id: int
    step: AdminStep = AdminStep.ASK_COUNT
    count: Optional[int] = None
    name: Optional[str] = None
    link: Optional[str] = None
    codes: List[str] = field(default_factory=list)
    committing: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def build_access_codes(self) -> List[AccessCode]:
        """Turn the previewed codes into documents for the batch write."""
        return [
            AccessCode(code=code, resource_name=self.name or "", download_url=self.link or "")
            for code in self.codes
        ]
