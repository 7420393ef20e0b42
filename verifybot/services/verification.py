"""Phone-number verification flow: pending verification -> contact share -> OTP.

The website sends the user to ``t.me/<bot>?start=<sessionId>``. ``/start``
records the pending verification, the shared contact proves possession of the
phone number, and the OTP is written under the website's session id for the
website to compare against.
"""

from typing import Callable, Optional

from loguru import logger

from verifybot.core.enums import ParseMode
from verifybot.core.exceptions import PersistenceError
from verifybot.models import OtpSession, PendingVerification
from verifybot.repositories.base import VerificationRepository
from verifybot.utils.codes import generate_otp
from verifybot.utils.masking import mask_phone, mask_session_id

from .messages import Messages
from .replies import ContactRequestKeyboard, RemoveKeyboard, Reply


class VerificationFlow:
    """Controller for the verification sequence."""

    def __init__(
        self,
        repository: VerificationRepository,
        otp_generator: Callable[[], str] = generate_otp,
    ):
        """
        Initialize verification flow.

        Args:
            repository: Store for pending verifications and OTP sessions
            otp_generator: Source of one-time codes
        """
        self._repository = repository
        self._otp_generator = otp_generator

    async def handle_start(self, user_id: int, payload: Optional[str]) -> Reply:
        """
        Handle ``/start`` with an optional deep-link payload.

        Without a payload the user only gets a welcome message. With one, a
        pending verification keyed by the user id is written (a later
        ``/start`` replaces it) and the user is asked to share their contact.

        Args:
            user_id: Telegram user id of the sender
            payload: Website session id from the deep link

        Returns:
            Reply for the user
        """
        if not payload:
            return Reply(Messages.WELCOME)

        try:
            await self._repository.set_pending(
                PendingVerification(user_id=user_id, session_id=payload)
            )
        except PersistenceError as e:
            logger.error(f"Start failed for user {user_id}: {e}")
            return Reply(Messages.SYSTEM_ERROR)

        logger.info(f"Pending verification for user {user_id} (session {mask_session_id(payload)})")
        return Reply(
            Messages.SECURITY_CHECK,
            parse_mode=ParseMode.MARKDOWN,
            keyboard=ContactRequestKeyboard(Messages.SHARE_PHONE_BUTTON),
        )

    async def handle_contact(
        self,
        user_id: int,
        contact_user_id: Optional[int],
        phone_number: str,
        first_name: str,
        last_name: Optional[str] = None,
        username: Optional[str] = None,
    ) -> Reply:
        """
        Handle a shared contact and issue the OTP.

        Args:
            user_id: Telegram user id of the sender
            contact_user_id: Telegram user id the contact card belongs to
            phone_number: Phone number on the contact card
            first_name: Sender first name
            last_name: Sender last name
            username: Sender username

        Returns:
            Reply for the user
        """
        # A forwarded card would bind someone else's number to this session
        if contact_user_id != user_id:
            logger.warning(
                f"User {user_id} shared a contact belonging to {contact_user_id}, rejected"
            )
            return Reply(Messages.OWN_CONTACT_REQUIRED)

        try:
            pending = await self._repository.get_pending(user_id)
            if pending is None:
                logger.info(f"Contact from user {user_id} without pending verification")
                return Reply(Messages.SESSION_EXPIRED, keyboard=RemoveKeyboard())

            otp = self._otp_generator()
            otp_session = OtpSession.for_contact(
                session_id=pending.session_id,
                otp=otp,
                user_id=user_id,
                first_name=first_name,
                last_name=last_name,
                username=username,
                phone_number=phone_number,
            )
            await self._repository.complete_verification(user_id, otp_session)
        except PersistenceError as e:
            logger.error(f"Contact processing failed for user {user_id}: {e}")
            return Reply(Messages.CONTACT_ERROR)

        logger.info(
            f"OTP issued for session {mask_session_id(pending.session_id)} "
            f"(user {user_id}, phone {mask_phone(phone_number)})"
        )
        return Reply(
            Messages.verification_successful(otp),
            parse_mode=ParseMode.MARKDOWN,
            keyboard=RemoveKeyboard(),
        )
