"""VerifyBot - Telegram phone verification and access-code bot."""

import importlib as _importlib
from typing import TYPE_CHECKING, Any

__version__ = "1.0.0"
__license__ = "MIT"

if TYPE_CHECKING:
    from .bot.application import build_application as build_application
    from .core.logger import setup_structured_logging as setup_structured_logging
    from .core.settings import BotSettings as BotSettings
    from .services.code_issuance import CodeIssuanceFlow as CodeIssuanceFlow
    from .services.verification import VerificationFlow as VerificationFlow

# Explicit lazy-loading map: name -> (module_path, attribute_name)
_LAZY_MODULE_MAP = {
    "build_application": ("verifybot.bot.application", "build_application"),
    "setup_structured_logging": ("verifybot.core.logger", "setup_structured_logging"),
    "BotSettings": ("verifybot.core.settings", "BotSettings"),
    "CodeIssuanceFlow": ("verifybot.services.code_issuance", "CodeIssuanceFlow"),
    "VerificationFlow": ("verifybot.services.verification", "VerificationFlow"),
}

__all__ = list(_LAZY_MODULE_MAP.keys())


def __getattr__(name: str) -> Any:
    """Lazy import with explicit mapping."""
    if name in _LAZY_MODULE_MAP:
        module_path, attr_name = _LAZY_MODULE_MAP[name]
        module = _importlib.import_module(module_path)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
