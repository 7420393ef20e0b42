"""Build the python-telegram-bot application."""

from typing import Optional

from loguru import logger
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from verifybot.core.enums import CallbackAction
from verifybot.core.settings import BotSettings
from verifybot.repositories import Repositories
from verifybot.services.admin_sessions import AdminSessionRegistry
from verifybot.services.code_issuance import CodeIssuanceFlow
from verifybot.services.verification import VerificationFlow

from .handlers import BotHandlers


def create_handlers(
    settings: BotSettings,
    repositories: Repositories,
    sessions: Optional[AdminSessionRegistry] = None,
) -> BotHandlers:
    """
    Wire controllers to their repositories.

    Args:
        settings: Application settings
        repositories: Document store repositories
        sessions: Admin dialog registry (a fresh one when omitted)

    Returns:
        Handlers ready to be registered
    """
    return BotHandlers(
        verification=VerificationFlow(repositories.verifications),
        issuance=CodeIssuanceFlow(
            repositories.access_codes,
            admin_id=settings.admin_id,
            sessions=sessions,
        ),
        settings=settings,
    )


def register_handlers(application: Application, handlers: BotHandlers) -> None:
    """
    Register handlers in dispatch order.

    Commands first, then contact shares, then free text, which the admin
    dialog inspects before anything else.
    """
    application.add_handler(CommandHandler("start", handlers.start))
    application.add_handler(CommandHandler("addcodes", handlers.add_codes))
    application.add_handler(CommandHandler("codes", handlers.list_codes))
    application.add_handler(CommandHandler("admin_socials", handlers.admin_socials))
    application.add_handler(CommandHandler("info", handlers.info))
    application.add_handler(MessageHandler(filters.CONTACT, handlers.contact))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handlers.text))

    callbacks = {
        CallbackAction.CONFIRM_ADD: handlers.confirm_add,
        CallbackAction.REGENERATE_CODES: handlers.regenerate_codes,
        CallbackAction.CANCEL_ADD: handlers.cancel_add,
        CallbackAction.REFRESH_CODES_LIST: handlers.refresh_codes_list,
    }
    for action, callback in callbacks.items():
        application.add_handler(CallbackQueryHandler(callback, pattern=f"^{action.value}$"))

    application.add_error_handler(handlers.on_error)


def build_application(
    settings: BotSettings,
    repositories: Repositories,
    sessions: Optional[AdminSessionRegistry] = None,
) -> Application:
    """
    Build the Telegram application with all handlers registered.

    Args:
        settings: Application settings
        repositories: Document store repositories
        sessions: Admin dialog registry

    Returns:
        Application ready to be initialized and started
    """
    application = ApplicationBuilder().token(settings.bot_token.get_secret_value()).build()
    register_handlers(application, create_handlers(settings, repositories, sessions))
    logger.info(f"Telegram application built ({len(application.handlers[0])} handlers)")
    return application
