"""Telegram transport: handlers and application wiring."""

from .application import build_application
from .handlers import BotHandlers

__all__ = ["BotHandlers", "build_application"]
