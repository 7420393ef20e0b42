#!/usr/bin/env python3
"""
VerifyBot - Telegram phone verification and access-code bot.

Main entry point: runs the Telegram bot (long polling) and the keep-alive
web server in one event loop.
"""

import argparse
import asyncio
import os
import signal
import sys
from typing import Optional

import uvicorn
from loguru import logger
from pydantic import ValidationError
from telegram import Update

from verifybot.bot import build_application
from verifybot.core.env_validator import EnvValidator
from verifybot.core.exceptions import ConfigurationError
from verifybot.core.logger import setup_structured_logging
from verifybot.core.settings import BotSettings, get_settings
from verifybot.repositories import Repositories, create_repositories

# Graceful shutdown timeout in seconds (configurable via env)
try:
    SHUTDOWN_TIMEOUT = max(5, min(int(os.getenv("SHUTDOWN_TIMEOUT", "30")), 300))
except (ValueError, TypeError):
    SHUTDOWN_TIMEOUT = 30


def setup_signal_handlers(server: uvicorn.Server) -> None:
    """
    Setup graceful shutdown handlers.

    uvicorn captures SIGINT/SIGTERM while serving and re-raises them once it
    has stopped; these handlers make that re-raise a no-op so the bot can
    still be stopped cleanly afterwards.
    """

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)


def load_settings() -> BotSettings:
    """
    Validate the environment and build settings.

    Raises:
        ConfigurationError: If required configuration is missing or invalid
    """
    if not EnvValidator.validate():
        raise ConfigurationError("Missing or invalid environment variables")
    logger.debug(f"Environment: {EnvValidator.get_masked_summary()}")
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e


async def run(settings: BotSettings, repositories: Repositories) -> None:
    """
    Run the bot and the keep-alive server until a shutdown signal arrives.

    Args:
        settings: Application settings
        repositories: Document store repositories
    """
    from web.app import app

    application = build_application(settings, repositories)
    server = uvicorn.Server(
        uvicorn.Config(app, host=settings.host, port=settings.port, log_config=None)
    )
    setup_signal_handlers(server)

    async with application:
        await application.start()
        await application.updater.start_polling(allowed_updates=Update.ALL_TYPES)
        logger.info(f"🚀 Telegram bot started, web server on port {settings.port}")
        try:
            await server.serve()
        finally:
            logger.info("Stopping Telegram bot...")
            try:
                await asyncio.wait_for(application.updater.stop(), timeout=SHUTDOWN_TIMEOUT)
                await asyncio.wait_for(application.stop(), timeout=SHUTDOWN_TIMEOUT)
            except asyncio.TimeoutError:
                logger.error(f"Bot shutdown timed out after {SHUTDOWN_TIMEOUT}s")
            await repositories.close()
            logger.info("Shutdown complete")


def main(argv: Optional[list] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="VerifyBot - Telegram verification bot")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO").upper(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    args = parser.parse_args(argv)

    json_logging = os.getenv("JSON_LOGGING", "true").lower() == "true"
    diagnose = os.getenv("ENV", "production").lower() in ("development", "testing")
    setup_structured_logging(args.log_level, json_format=json_logging, diagnose=diagnose)

    try:
        settings = load_settings()
        repositories = create_repositories(settings)
    except ConfigurationError as e:
        logger.critical(f"❌ CRITICAL ERROR: {e.message}")
        sys.exit(1)

    try:
        asyncio.run(run(settings, repositories))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    main()
