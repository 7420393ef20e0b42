"""FastAPI keep-alive server: landing text, health check and privacy policy."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from loguru import logger

from verifybot import __version__
from web.routes import status_router

STATIC_DIR = Path(__file__).parent / "static"


def create_app() -> FastAPI:
    """
    Create the keep-alive application.

    Static files are mounted last so that explicit routes take precedence.

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="VerifyBot",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(status_router)
    app.mount("/", StaticFiles(directory=STATIC_DIR), name="static")
    logger.debug(f"Serving static files from {STATIC_DIR}")
    return app


app = create_app()
