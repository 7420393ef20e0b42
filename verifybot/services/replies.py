"""Transport-neutral replies returned by the flow controllers.

The bot layer maps these onto Telegram markup; controllers never import
the Telegram library.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from verifybot.core.enums import ParseMode, ReplyMode


@dataclass(frozen=True)
class InlineButton:
    """Inline button carrying either callback data or a URL."""

    text: str
    callback_data: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class InlineKeyboard:
    """Rows of inline buttons attached to a message."""

    rows: Tuple[Tuple[InlineButton, ...], ...]

    @classmethod
    def single_column(cls, buttons: Sequence[InlineButton]) -> "InlineKeyboard":
        return cls(rows=tuple((button,) for button in buttons))


@dataclass(frozen=True)
class ContactRequestKeyboard:
    """One-button reply keyboard asking the user to share their phone number."""

    button_text: str


@dataclass(frozen=True)
class RemoveKeyboard:
    """Remove any reply keyboard shown to the user."""


Keyboard = Union[InlineKeyboard, ContactRequestKeyboard, RemoveKeyboard]


@dataclass(frozen=True)
class Reply:
    """
    Outbound message produced by a controller.

    Attributes:
        text: Message text (empty text with ANSWER_CALLBACK acknowledges silently)
        parse_mode: Formatting mode, None for plain text
        keyboard: Markup to attach
        mode: Send a new message, edit the message holding the pressed
            button, or only answer the button press
    """

    text: str
    parse_mode: Optional[ParseMode] = None
    keyboard: Optional[Keyboard] = None
    mode: ReplyMode = ReplyMode.SEND
