"""Telegram message formatting helpers."""

import html

# Characters with meaning in Telegram's legacy Markdown parse mode
MARKDOWN_SPECIAL_CHARS = ("_", "*", "`", "[")


def escape_markdown(text: str) -> str:
    """
    Escape Telegram legacy Markdown special characters.

    Args:
        text: Untrusted text to interpolate into a Markdown message

    Returns:
        Escaped text safe for Markdown parse_mode
    """
    for char in MARKDOWN_SPECIAL_CHARS:
        text = text.replace(char, "\\" + char)
    return text


def escape_html(text: str) -> str:
    """Escape text for Telegram HTML parse_mode."""
    return html.escape(text, quote=False)


def format_uptime(seconds: float) -> str:
    """
    Format an uptime duration.

    Example: 3725 -> "1h 2m 5s"
    """
    total = int(max(seconds, 0))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{hours}h {minutes}m {secs}s"
