"""Telegram update handlers.

Each handler extracts the fields a controller needs from the update, calls
the controller and delivers the returned :class:`Reply`.
"""

from typing import List, Optional

from loguru import logger
from telegram import InlineKeyboardMarkup, Update
from telegram.error import BadRequest, TelegramError
from telegram.ext import ContextTypes

from verifybot.core.enums import ParseMode, ReplyMode
from verifybot.core.settings import BotSettings
from verifybot.core.uptime import get_uptime_seconds
from verifybot.services.code_issuance import CodeIssuanceFlow
from verifybot.services.messages import Messages
from verifybot.services.replies import InlineButton, InlineKeyboard, Reply
from verifybot.services.verification import VerificationFlow
from verifybot.utils.formatting import format_uptime

from .keyboards import build_markup


async def deliver(update: Update, reply: Reply) -> None:
    """
    Send, edit or acknowledge according to the reply mode.

    Args:
        update: Incoming update the reply answers
        reply: Controller reply
    """
    query = update.callback_query
    parse_mode = reply.parse_mode.value if reply.parse_mode else None
    markup = build_markup(reply.keyboard)

    if query is not None:
        if reply.mode == ReplyMode.ANSWER_CALLBACK:
            await query.answer(reply.text or None)
            return
        await query.answer()
        if reply.mode == ReplyMode.EDIT:
            inline_markup = markup if isinstance(markup, InlineKeyboardMarkup) else None
            try:
                await query.edit_message_text(
                    reply.text, parse_mode=parse_mode, reply_markup=inline_markup
                )
            except BadRequest as e:
                # Refreshing an unchanged listing is not an error
                if "not modified" not in str(e).lower():
                    raise
                logger.debug("Edit skipped, message not modified")
            return

    message = update.effective_message
    if message is None:
        logger.warning("Reply dropped: update has no message to answer")
        return
    await message.reply_text(reply.text, parse_mode=parse_mode, reply_markup=markup)


class BotHandlers:
    """Telegram callbacks bound to the flow controllers."""

    def __init__(
        self,
        verification: VerificationFlow,
        issuance: CodeIssuanceFlow,
        settings: BotSettings,
    ):
        """
        Initialize handlers.

        Args:
            verification: Verification flow controller
            issuance: Admin code issuance controller
            settings: Application settings (links and /info presentation)
        """
        self.verification = verification
        self.issuance = issuance
        self.settings = settings

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """/start [sessionId]"""
        user = update.effective_user
        if user is None:
            return
        payload = " ".join(context.args) if context.args else None
        reply = await self.verification.handle_start(user.id, payload)
        await deliver(update, reply)

    async def contact(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Shared contact card."""
        user = update.effective_user
        message = update.effective_message
        if user is None or message is None or message.contact is None:
            return
        shared = message.contact
        reply = await self.verification.handle_contact(
            user_id=user.id,
            contact_user_id=shared.user_id,
            phone_number=shared.phone_number,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )
        await deliver(update, reply)

    async def add_codes(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """/addcodes"""
        user = update.effective_user
        if user is None:
            return
        await deliver(update, self.issuance.start(user.id))

    async def text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """
        Plain text. The admin dialog gets the first look; anything it does
        not claim falls through to general handling.
        """
        user = update.effective_user
        message = update.effective_message
        if user is None or message is None or message.text is None:
            return

        reply = self.issuance.advance(user.id, message.text)
        if reply is not None:
            await deliver(update, reply)
            return

        await self.general_text(update, context)

    async def general_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Text outside any dialog is ignored."""
        user = update.effective_user
        logger.debug(f"Unclaimed text message from user {user.id if user else None}")

    async def confirm_add(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None:
            return
        await deliver(update, await self.issuance.confirm(user.id))

    async def regenerate_codes(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None:
            return
        await deliver(update, self.issuance.regenerate(user.id))

    async def cancel_add(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        user = update.effective_user
        if user is None:
            return
        await deliver(update, self.issuance.cancel(user.id))

    async def list_codes(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """/codes"""
        user = update.effective_user
        if user is None:
            return
        await deliver(update, await self.issuance.list_unused(user.id))

    async def refresh_codes_list(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        user = update.effective_user
        if user is None:
            return
        await deliver(update, await self.issuance.list_unused(user.id, mode=ReplyMode.EDIT))

    async def admin_socials(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """/admin_socials - links to reach the admin."""
        buttons: List[InlineButton] = []
        if self.settings.admin_whatsapp_url:
            buttons.append(InlineButton("WhatsApp", url=self.settings.admin_whatsapp_url))
        if self.settings.admin_telegram_url:
            buttons.append(InlineButton("Telegram", url=self.settings.admin_telegram_url))

        if not buttons:
            await deliver(update, Reply(Messages.NO_ADMIN_LINKS))
            return

        await deliver(
            update,
            Reply(
                Messages.CONTACT_ADMIN,
                parse_mode=ParseMode.MARKDOWN,
                keyboard=InlineKeyboard.single_column(buttons),
            ),
        )

    async def info(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """/info - bot identity and uptime with the bot's profile photo."""
        message = update.effective_message
        if message is None:
            return

        try:
            bot_user = await context.bot.get_me()
            photos = await context.bot.get_user_profile_photos(bot_user.id, offset=0, limit=1)
            photo: Optional[str] = None
            if photos.total_count > 0 and photos.photos:
                # Largest size of the newest photo
                photo = photos.photos[0][-1].file_id
            caption = Messages.bot_info(
                name=bot_user.first_name,
                username=bot_user.username,
                bot_id=bot_user.id,
                creator=self.settings.bot_creator,
                uptime=format_uptime(get_uptime_seconds()),
            )
            await message.reply_photo(
                photo or self.settings.info_fallback_photo_url,
                caption=caption,
                parse_mode=ParseMode.HTML.value,
            )
        except TelegramError as e:
            logger.error(f"/info failed: {e}")
            await message.reply_text(Messages.INFO_UNAVAILABLE)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Log exceptions raised by handlers."""
        logger.opt(exception=context.error).error(
            f"Unhandled error while processing update: {context.error}"
        )
