"""Repository interfaces over the shared document store."""

from abc import ABC, abstractmethod
from typing import List, Optional

from verifybot.models import AccessCode, OtpSession, PendingVerification


class VerificationRepository(ABC):
    """Pending verifications and OTP sessions."""

    @abstractmethod
    async def set_pending(self, pending: PendingVerification) -> None:
        """
        Upsert the pending verification of a user (last write wins).

        Args:
            pending: Pending verification keyed by its user id

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    async def get_pending(self, user_id: int) -> Optional[PendingVerification]:
        """
        Get the pending verification of a user.

        Args:
            user_id: Telegram user id

        Returns:
            Pending verification or None if absent

        Raises:
            PersistenceError: If the read fails
        """
        pass

    @abstractmethod
    async def complete_verification(self, user_id: int, otp_session: OtpSession) -> None:
        """
        Write the OTP session and consume the pending verification atomically.

        The OTP session fully overwrites any existing document at its session id.

        Args:
            user_id: Telegram user id whose pending verification is deleted
            otp_session: OTP session keyed by the website session id

        Raises:
            PersistenceError: If the batch fails; nothing is applied in that case
        """
        pass

    @abstractmethod
    async def get_otp_session(self, session_id: str) -> Optional[OtpSession]:
        """
        Get an OTP session by website session id.

        Raises:
            PersistenceError: If the read fails
        """
        pass


class AccessCodeRepository(ABC):
    """Redeemable access codes."""

    @abstractmethod
    async def add_batch(self, codes: List[AccessCode]) -> None:
        """
        Write access codes all-or-nothing, each under a generated id.

        Args:
            codes: Codes to persist

        Raises:
            PersistenceError: If the batch fails; no code is written in that case
        """
        pass

    @abstractmethod
    async def list_unused(self) -> List[AccessCode]:
        """
        List codes that have not been redeemed.

        Raises:
            PersistenceError: If the query fails
        """
        pass
