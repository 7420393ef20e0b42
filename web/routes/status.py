"""Landing and health check routes for the keep-alive server."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from verifybot import __version__
from verifybot.core.uptime import get_uptime_seconds
from verifybot.utils.formatting import format_uptime

router = APIRouter(tags=["status"])

LANDING_TEXT = "Bot is running securely. Go to /privacy.html to view the policy."


@router.get("/", response_class=PlainTextResponse)
async def landing() -> str:
    """Uptime pings hit this route."""
    return LANDING_TEXT


@router.get("/health")
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint for monitoring and container orchestration.

    Returns:
        Health status with version and uptime
    """
    uptime = get_uptime_seconds()
    return {
        "status": "healthy",
        "version": __version__,
        "uptime_seconds": round(uptime, 1),
        "uptime": format_uptime(uptime),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
