"""Admin dialog for issuing batches of access codes.

Dialog: ``/addcodes`` -> count -> resource name -> download link -> preview,
then confirm (batch write), regenerate (new codes, no write) or cancel.
"""

import asyncio
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from loguru import logger

from verifybot.core.enums import AdminStep, CallbackAction, ParseMode, ReplyMode
from verifybot.core.exceptions import AuthorizationError, InputValidationError, PersistenceError
from verifybot.models import AdminCodeSession
from verifybot.repositories.base import AccessCodeRepository
from verifybot.utils.codes import generate_resource_codes

from .admin_sessions import AdminSessionRegistry
from .messages import Messages
from .replies import InlineButton, InlineKeyboard, Reply

MAX_CODES_PER_BATCH = 50

# Telegram API message limit
TELEGRAM_MESSAGE_LIMIT = 4096

PREVIEW_KEYBOARD = InlineKeyboard.single_column(
    [
        InlineButton(Messages.BUTTON_CONFIRM, callback_data=CallbackAction.CONFIRM_ADD.value),
        InlineButton(
            Messages.BUTTON_REGENERATE, callback_data=CallbackAction.REGENERATE_CODES.value
        ),
        InlineButton(Messages.BUTTON_CANCEL, callback_data=CallbackAction.CANCEL_ADD.value),
    ]
)

REFRESH_KEYBOARD = InlineKeyboard.single_column(
    [
        InlineButton(
            Messages.BUTTON_REFRESH, callback_data=CallbackAction.REFRESH_CODES_LIST.value
        ),
    ]
)


def parse_count(text: str, maximum: int = MAX_CODES_PER_BATCH) -> int:
    """
    Parse the number of codes requested by the admin.

    Args:
        text: Raw message text
        maximum: Largest accepted count

    Returns:
        Count between 1 and ``maximum``

    Raises:
        InputValidationError: If the text is not an integer in range
    """
    value = text.strip()
    if not (value.isascii() and value.isdigit()):
        raise InputValidationError(f"Not a number: {text!r}", field="count")
    count = int(value)
    if count <= 0 or count > maximum:
        raise InputValidationError(f"Count out of range: {count}", field="count")
    return count


class CodeIssuanceFlow:
    """Controller for the admin-only access code dialog."""

    def __init__(
        self,
        repository: AccessCodeRepository,
        admin_id: int,
        sessions: Optional[AdminSessionRegistry] = None,
        code_generator: Callable[[int], List[str]] = generate_resource_codes,
    ):
        """
        Initialize code issuance flow.

        Args:
            repository: Store for access codes
            admin_id: The only Telegram user allowed to run the dialog
            sessions: Registry of active dialogs
            code_generator: Produces ``count`` codes for a preview
        """
        self._repository = repository
        self._admin_id = admin_id
        self._sessions = sessions if sessions is not None else AdminSessionRegistry()
        self._generate_codes = code_generator
        self._confirm_lock = asyncio.Lock()

    @property
    def sessions(self) -> AdminSessionRegistry:
        return self._sessions

    def is_admin(self, user_id: int) -> bool:
        return user_id == self._admin_id

    def _authorize(self, user_id: int) -> None:
        if not self.is_admin(user_id):
            raise AuthorizationError(user_id=user_id)

    def start(self, user_id: int) -> Reply:
        """Begin a new dialog for the admin, replacing any unfinished one."""
        try:
            self._authorize(user_id)
        except AuthorizationError:
            logger.warning(f"Unauthorized /addcodes from user {user_id}")
            return Reply(Messages.UNAUTHORIZED)

        self._sessions.start(user_id)
        return Reply(Messages.ask_count(MAX_CODES_PER_BATCH))

    def advance(self, user_id: int, text: str) -> Optional[Reply]:
        """
        Feed a text message into the admin's dialog.

        Args:
            user_id: Telegram user id of the sender
            text: Message text

        Returns:
            Reply for the admin, or None when the sender has no active dialog
            and the message should go to general handling
        """
        session = self._sessions.get(user_id)
        if session is None:
            return None

        value = text.strip()

        if session.step == AdminStep.ASK_COUNT:
            try:
                count = parse_count(value)
            except InputValidationError as e:
                logger.debug(f"Rejected count from admin {user_id}: {e.message}")
                return Reply(Messages.invalid_count(MAX_CODES_PER_BATCH))
            session.count = count
            session.step = AdminStep.ASK_NAME
            return Reply(Messages.ASK_NAME, parse_mode=ParseMode.MARKDOWN)

        if session.step == AdminStep.ASK_NAME:
            session.name = value
            session.step = AdminStep.ASK_LINK
            return Reply(Messages.ASK_LINK)

        if session.step == AdminStep.ASK_LINK:
            session.link = value
            session.codes = self._generate_codes(session.count or 0)
            session.step = AdminStep.PREVIEW
            logger.info(f"Previewing {len(session.codes)} codes for admin {user_id}")
            return self._preview(session, ReplyMode.SEND)

        return Reply(Messages.PREVIEW_PENDING)

    async def confirm(self, user_id: int) -> Reply:
        """
        Persist the previewed codes as one all-or-nothing batch.

        On failure the session is kept so the same codes can be confirmed again.
        Only the session that was written is discarded; a dialog restarted while
        the batch was in flight survives.
        """
        async with self._confirm_lock:
            session = self._sessions.get(user_id)
            if session is None or session.step != AdminStep.PREVIEW:
                return Reply(Messages.DIALOG_EXPIRED, mode=ReplyMode.ANSWER_CALLBACK)

            access_codes = session.build_access_codes()
            session.committing = True
            try:
                await self._repository.add_batch(access_codes)
            except PersistenceError as e:
                logger.error(f"Adding {len(access_codes)} codes failed for admin {user_id}: {e}")
                return Reply(Messages.DATABASE_ERROR)
            finally:
                session.committing = False

            if not self._sessions.discard_if(user_id, session):
                logger.info(f"Admin {user_id} restarted the dialog while codes were being added")

        logger.info(f"Added {len(access_codes)} access codes for resource {session.name!r}")
        return Reply(
            Messages.codes_added(len(access_codes), session.name or ""),
            parse_mode=ParseMode.MARKDOWN,
            mode=ReplyMode.EDIT,
        )

    def regenerate(self, user_id: int) -> Reply:
        """Replace the previewed codes with a fresh batch of the same size."""
        session = self._sessions.get(user_id)
        if session is None or session.step != AdminStep.PREVIEW:
            return Reply(Messages.DIALOG_EXPIRED, mode=ReplyMode.ANSWER_CALLBACK)
        if session.committing:
            return Reply(Messages.SAVE_IN_PROGRESS, mode=ReplyMode.ANSWER_CALLBACK)

        session.codes = self._generate_codes(session.count or 0)
        logger.debug(f"Regenerated {len(session.codes)} codes for admin {user_id}")
        return self._preview(session, ReplyMode.EDIT, regenerated=True)

    def cancel(self, user_id: int) -> Reply:
        """Drop the admin's dialog without touching the store."""
        if self._sessions.discard(user_id):
            logger.info(f"Admin {user_id} cancelled code issuance")
        return Reply(Messages.CANCELLED, mode=ReplyMode.EDIT)

    async def list_unused(self, user_id: int, mode: ReplyMode = ReplyMode.SEND) -> Reply:
        """
        List unused codes grouped by resource name.

        Args:
            user_id: Telegram user id of the sender
            mode: SEND for the command, EDIT when refreshing an earlier listing

        Returns:
            Reply for the admin
        """
        try:
            self._authorize(user_id)
        except AuthorizationError:
            logger.warning(f"Unauthorized code listing from user {user_id}")
            if mode == ReplyMode.EDIT:
                return Reply(Messages.UNAUTHORIZED, mode=ReplyMode.ANSWER_CALLBACK)
            return Reply(Messages.UNAUTHORIZED)

        try:
            codes = await self._repository.list_unused()
        except PersistenceError as e:
            logger.error(f"Listing unused codes failed: {e}")
            return Reply(Messages.DATABASE_ERROR)

        if not codes:
            return Reply(Messages.NO_UNUSED_CODES, keyboard=REFRESH_KEYBOARD, mode=mode)

        grouped: Dict[str, List[str]] = defaultdict(list)
        for access_code in codes:
            grouped[access_code.resource_name].append(access_code.code)

        return Reply(
            Messages.unused_codes(grouped, limit=TELEGRAM_MESSAGE_LIMIT),
            parse_mode=ParseMode.MARKDOWN,
            keyboard=REFRESH_KEYBOARD,
            mode=mode,
        )

    @staticmethod
    def _preview(session: AdminCodeSession, mode: ReplyMode, regenerated: bool = False) -> Reply:
        return Reply(
            Messages.code_preview(
                session.name or "", session.codes, session.link or "", regenerated=regenerated
            ),
            parse_mode=ParseMode.MARKDOWN,
            keyboard=PREVIEW_KEYBOARD,
            mode=mode,
        )
