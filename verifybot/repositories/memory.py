"""In-process document store used by tests and local development."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from verifybot.models import (
    ACCESS_CODES_COLLECTION,
    OTP_SESSIONS_COLLECTION,
    PENDING_VERIFICATIONS_COLLECTION,
    AccessCode,
    OtpSession,
    PendingVerification,
)

from .base import AccessCodeRepository, VerificationRepository


class InMemoryDocumentStore:
    """Collections of plain dict documents, guarded by one asyncio lock."""

    def __init__(self) -> None:
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {
            PENDING_VERIFICATIONS_COLLECTION: {},
            OTP_SESSIONS_COLLECTION: {},
            ACCESS_CODES_COLLECTION: {},
        }
        self.lock = asyncio.Lock()

    def collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    @staticmethod
    def server_timestamp() -> datetime:
        return datetime.now(timezone.utc)


class InMemoryVerificationRepository(VerificationRepository):
    """Verification repository backed by :class:`InMemoryDocumentStore`."""

    def __init__(self, store: InMemoryDocumentStore):
        self._store = store

    async def set_pending(self, pending: PendingVerification) -> None:
        async with self._store.lock:
            self._store.collection(PENDING_VERIFICATIONS_COLLECTION)[pending.document_id] = (
                pending.to_document(self._store.server_timestamp())
            )

    async def get_pending(self, user_id: int) -> Optional[PendingVerification]:
        async with self._store.lock:
            data = self._store.collection(PENDING_VERIFICATIONS_COLLECTION).get(str(user_id))
        if data is None:
            return None
        return PendingVerification.from_document(user_id, dict(data))

    async def complete_verification(self, user_id: int, otp_session: OtpSession) -> None:
        async with self._store.lock:
            self._store.collection(OTP_SESSIONS_COLLECTION)[otp_session.session_id] = (
                otp_session.to_document(self._store.server_timestamp())
            )
            self._store.collection(PENDING_VERIFICATIONS_COLLECTION).pop(str(user_id), None)

    async def get_otp_session(self, session_id: str) -> Optional[OtpSession]:
        async with self._store.lock:
            data = self._store.collection(OTP_SESSIONS_COLLECTION).get(session_id)
        if data is None:
            return None
        return OtpSession.from_document(session_id, dict(data))


class InMemoryAccessCodeRepository(AccessCodeRepository):
    """Access-code repository backed by :class:`InMemoryDocumentStore`."""

    def __init__(self, store: InMemoryDocumentStore):
        self._store = store

    async def add_batch(self, codes: List[AccessCode]) -> None:
        async with self._store.lock:
            collection = self._store.collection(ACCESS_CODES_COLLECTION)
            timestamp = self._store.server_timestamp()
            for access_code in codes:
                collection[uuid.uuid4().hex[:20]] = access_code.to_document(timestamp)
        logger.debug(f"Stored {len(codes)} access codes in memory")

    async def list_unused(self) -> List[AccessCode]:
        async with self._store.lock:
            items = list(self._store.collection(ACCESS_CODES_COLLECTION).items())
        return [
            AccessCode.from_document(doc_id, dict(data))
            for doc_id, data in items
            if not data.get("isUsed", False)
        ]
