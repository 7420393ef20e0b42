"""Firestore-backed repositories."""

import functools
from typing import Any, Callable, Dict, List, Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account
from loguru import logger

from verifybot.core.exceptions import PersistenceError
from verifybot.models import (
    ACCESS_CODES_COLLECTION,
    OTP_SESSIONS_COLLECTION,
    PENDING_VERIFICATIONS_COLLECTION,
    AccessCode,
    OtpSession,
    PendingVerification,
)
from verifybot.utils.masking import mask_session_id

from .base import AccessCodeRepository, VerificationRepository

FIRESTORE_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

_STORE_ERRORS = (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError)


def create_firestore_client(service_account_info: Dict[str, Any]) -> firestore.AsyncClient:
    """
    Build an async Firestore client from a service-account dictionary.

    Args:
        service_account_info: Parsed service-account JSON

    Returns:
        Firestore AsyncClient bound to the service account's project
    """
    credentials = service_account.Credentials.from_service_account_info(
        service_account_info, scopes=FIRESTORE_SCOPES
    )
    project = service_account_info.get("project_id")
    client = firestore.AsyncClient(project=project, credentials=credentials)
    logger.info(f"Firestore client created (project={project})")
    return client


def translate_store_errors(operation: str) -> Callable:
    """
    Async decorator turning Google client errors into :class:`PersistenceError`.

    Args:
        operation: Human-readable label used in log messages and the error
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except _STORE_ERRORS as e:
                logger.error(f"Firestore {operation} failed: {e}")
                raise PersistenceError(f"Firestore {operation} failed", operation=operation) from e

        return wrapper

    return decorator


class FirestoreVerificationRepository(VerificationRepository):
    """Pending verifications and OTP sessions stored in Firestore."""

    def __init__(self, client: firestore.AsyncClient):
        self._client = client
        self._pending = client.collection(PENDING_VERIFICATIONS_COLLECTION)
        self._otp_sessions = client.collection(OTP_SESSIONS_COLLECTION)

    @translate_store_errors("set pending verification")
    async def set_pending(self, pending: PendingVerification) -> None:
        await self._pending.document(pending.document_id).set(
            pending.to_document(firestore.SERVER_TIMESTAMP)
        )

    @translate_store_errors("get pending verification")
    async def get_pending(self, user_id: int) -> Optional[PendingVerification]:
        snapshot = await self._pending.document(str(user_id)).get()
        if not snapshot.exists:
            return None
        return PendingVerification.from_document(user_id, snapshot.to_dict() or {})

    @translate_store_errors("complete verification")
    async def complete_verification(self, user_id: int, otp_session: OtpSession) -> None:
        batch = self._client.batch()
        batch.set(
            self._otp_sessions.document(otp_session.session_id),
            otp_session.to_document(firestore.SERVER_TIMESTAMP),
        )
        batch.delete(self._pending.document(str(user_id)))
        await batch.commit()
        logger.debug(
            f"OTP session {mask_session_id(otp_session.session_id)} written, "
            f"pending verification of {user_id} consumed"
        )

    @translate_store_errors("get OTP session")
    async def get_otp_session(self, session_id: str) -> Optional[OtpSession]:
        snapshot = await self._otp_sessions.document(session_id).get()
        if not snapshot.exists:
            return None
        return OtpSession.from_document(session_id, snapshot.to_dict() or {})


class FirestoreAccessCodeRepository(AccessCodeRepository):
    """Access codes stored in Firestore under auto-generated ids."""

    def __init__(self, client: firestore.AsyncClient):
        self._client = client
        self._codes = client.collection(ACCESS_CODES_COLLECTION)

    @translate_store_errors("add access codes")
    async def add_batch(self, codes: List[AccessCode]) -> None:
        batch = self._client.batch()
        for access_code in codes:
            batch.set(self._codes.document(), access_code.to_document(firestore.SERVER_TIMESTAMP))
        await batch.commit()

    @translate_store_errors("list unused access codes")
    async def list_unused(self) -> List[AccessCode]:
        query = self._codes.where(filter=FieldFilter("isUsed", "==", False))
        return [
            AccessCode.from_document(snapshot.id, snapshot.to_dict() or {})
            async for snapshot in query.stream()
        ]
