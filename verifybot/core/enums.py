"""Centralized enum definitions for VerifyBot."""

from enum import Enum


class AdminStep(str, Enum):
    """Steps of the admin access-code issuance dialog."""
    ASK_COUNT = "ask_count"
    ASK_NAME = "ask_name"
    ASK_LINK = "ask_link"
    PREVIEW = "preview"


class CallbackAction(str, Enum):
    """Inline button callback data understood by the bot."""
    CONFIRM_ADD = "confirm_add"
    REGENERATE_CODES = "regenerate_codes"
    CANCEL_ADD = "cancel_add"
    REFRESH_CODES_LIST = "refresh_codes_list"


class ReplyMode(str, Enum):
    """How a reply is delivered back to the chat."""
    SEND = "send"
    EDIT = "edit"
    ANSWER_CALLBACK = "answer_callback"


class ParseMode(str, Enum):
    """Telegram text formatting modes used by replies."""
    MARKDOWN = "Markdown"
    HTML = "HTML"
