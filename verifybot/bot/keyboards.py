"""Map transport-neutral reply keyboards onto Telegram markup."""

from typing import Optional, Union

from telegram import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)

from verifybot.services.replies import (
    ContactRequestKeyboard,
    InlineKeyboard,
    Keyboard,
    RemoveKeyboard,
)

TelegramMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]


def build_markup(keyboard: Optional[Keyboard]) -> Optional[TelegramMarkup]:
    """
    Convert a reply keyboard into Telegram markup.

    Args:
        keyboard: Keyboard attached to a controller reply

    Returns:
        Telegram markup, or None when the reply has no keyboard
    """
    if keyboard is None:
        return None

    if isinstance(keyboard, ContactRequestKeyboard):
        return ReplyKeyboardMarkup(
            [[KeyboardButton(keyboard.button_text, request_contact=True)]],
            resize_keyboard=True,
            one_time_keyboard=True,
        )

    if isinstance(keyboard, RemoveKeyboard):
        return ReplyKeyboardRemove()

    if isinstance(keyboard, InlineKeyboard):
        return InlineKeyboardMarkup(
            [
                [
                    InlineKeyboardButton(
                        button.text, callback_data=button.callback_data, url=button.url
                    )
                    for button in row
                ]
                for row in keyboard.rows
            ]
        )

    raise TypeError(f"Unsupported keyboard: {type(keyboard).__name__}")
