"""Document store repositories and backend selection."""

import inspect
from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger

from verifybot.core.exceptions import ConfigurationError
from verifybot.core.settings import BotSettings

from .base import AccessCodeRepository, VerificationRepository
from .memory import (
    InMemoryAccessCodeRepository,
    InMemoryDocumentStore,
    InMemoryVerificationRepository,
)


@dataclass
class Repositories:
    """Repositories handed to the flow controllers."""

    verifications: VerificationRepository
    access_codes: AccessCodeRepository
    client: Optional[Any] = None

    async def close(self) -> None:
        """Release the underlying client, if any."""
        close = getattr(self.client, "close", None)
        if close is None:
            return
        result = close()
        if inspect.isawaitable(result):
            await result


def create_repositories(settings: BotSettings) -> Repositories:
    """
    Build the repositories for the configured store backend.

    Args:
        settings: Application settings

    Returns:
        Repositories bundle

    Raises:
        ConfigurationError: If the Firestore credentials cannot be used
    """
    if settings.store_backend == "memory":
        logger.warning("Using in-memory document store; data is lost on restart")
        store = InMemoryDocumentStore()
        return Repositories(
            verifications=InMemoryVerificationRepository(store),
            access_codes=InMemoryAccessCodeRepository(store),
        )

    from .firestore import (
        FirestoreAccessCodeRepository,
        FirestoreVerificationRepository,
        create_firestore_client,
    )

    try:
        client = create_firestore_client(settings.service_account_info())
    except ValueError as e:
        raise ConfigurationError(
            f"Firebase initialization failed: {e}", key="FIREBASE_SERVICE_ACCOUNT"
        ) from e
    return Repositories(
        verifications=FirestoreVerificationRepository(client),
        access_codes=FirestoreAccessCodeRepository(client),
        client=client,
    )


__all__ = [
    "AccessCodeRepository",
    "VerificationRepository",
    "InMemoryDocumentStore",
    "InMemoryVerificationRepository",
    "InMemoryAccessCodeRepository",
    "Repositories",
    "create_repositories",
]
