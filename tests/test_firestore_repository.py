"""Tests for Firestore repositories with a mocked AsyncClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.oauth2 import service_account

from verifybot.core.exceptions import PersistenceError
from verifybot.models import (
    ACCESS_CODES_COLLECTION,
    OTP_SESSIONS_COLLECTION,
    PENDING_VERIFICATIONS_COLLECTION,
    AccessCode,
    OtpSession,
    PendingVerification,
)
from verifybot.repositories.firestore import (
    FirestoreAccessCodeRepository,
    FirestoreVerificationRepository,
    create_firestore_client,
)


def make_snapshot(doc_id, data):
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = data is not None
    snapshot.to_dict.return_value = data
    return snapshot


@pytest.fixture
def collections():
    """One mocked collection reference per collection name."""
    refs = {}
    names = (PENDING_VERIFICATIONS_COLLECTION, OTP_SESSIONS_COLLECTION, ACCESS_CODES_COLLECTION)
    for name in names:
        collection = MagicMock(name=name)
        collection.document.side_effect = lambda doc_id=None, _name=name: MagicMock(
            name=f"{_name}/{doc_id}", set=AsyncMock(), get=AsyncMock()
        )
        refs[name] = collection
    return refs


@pytest.fixture
def batch():
    batch = MagicMock()
    batch.commit = AsyncMock()
    return batch


@pytest.fixture
def client(collections, batch):
    """Mock Firestore AsyncClient."""
    client = MagicMock()
    client.collection.side_effect = lambda name: collections[name]
    client.batch.return_value = batch
    return client


class TestFirestoreVerificationRepository:
    """Tests for FirestoreVerificationRepository."""

    @pytest.mark.asyncio
    async def test_set_pending(self, client, collections):
        document = MagicMock(set=AsyncMock())
        collections[PENDING_VERIFICATIONS_COLLECTION].document.side_effect = None
        collections[PENDING_VERIFICATIONS_COLLECTION].document.return_value = document
        repo = FirestoreVerificationRepository(client)

        await repo.set_pending(PendingVerification(user_id=12, session_id="web-1"))

        collections[PENDING_VERIFICATIONS_COLLECTION].document.assert_called_once_with("12")
        document.set.assert_awaited_once_with(
            {"session_id": "web-1", "timestamp": firestore.SERVER_TIMESTAMP}
        )

    @pytest.mark.asyncio
    async def test_get_pending_missing(self, client, collections):
        document = MagicMock(get=AsyncMock(return_value=make_snapshot("12", None)))
        collections[PENDING_VERIFICATIONS_COLLECTION].document.side_effect = None
        collections[PENDING_VERIFICATIONS_COLLECTION].document.return_value = document
        repo = FirestoreVerificationRepository(client)

        assert await repo.get_pending(12) is None

    @pytest.mark.asyncio
    async def test_get_pending_found(self, client, collections):
        document = MagicMock(
            get=AsyncMock(return_value=make_snapshot("12", {"session_id": "web-1"}))
        )
        collections[PENDING_VERIFICATIONS_COLLECTION].document.side_effect = None
        collections[PENDING_VERIFICATIONS_COLLECTION].document.return_value = document
        repo = FirestoreVerificationRepository(client)

        pending = await repo.get_pending(12)

        assert pending.user_id == 12
        assert pending.session_id == "web-1"

    @pytest.mark.asyncio
    async def test_complete_verification_uses_one_batch(self, client, batch):
        """Test the OTP write and the pending delete commit together."""
        repo = FirestoreVerificationRepository(client)
        otp_session = OtpSession("web-1", "123456", 12, "Jane", "jdoe", "905551234567")

        await repo.complete_verification(12, otp_session)

        batch.set.assert_called_once()
        set_ref, set_data = batch.set.call_args.args
        assert set_ref._mock_name == f"{OTP_SESSIONS_COLLECTION}/web-1"
        assert set_data["otp"] == "123456"
        assert set_data["created_at"] is firestore.SERVER_TIMESTAMP
        batch.delete.assert_called_once()
        assert batch.delete.call_args.args[0]._mock_name == (
            f"{PENDING_VERIFICATIONS_COLLECTION}/12"
        )
        batch.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_error_becomes_persistence_error(self, client, batch):
        batch.commit = AsyncMock(side_effect=google_exceptions.ServiceUnavailable("down"))
        repo = FirestoreVerificationRepository(client)
        otp_session = OtpSession("web-1", "123456", 12, "Jane", "jdoe", "905551234567")

        with pytest.raises(PersistenceError) as exc_info:
            await repo.complete_verification(12, otp_session)

        assert exc_info.value.operation == "complete verification"
        assert isinstance(exc_info.value.__cause__, google_exceptions.ServiceUnavailable)

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, client, batch):
        """Test programming errors are not disguised as store failures."""
        batch.commit = AsyncMock(side_effect=RuntimeError("bug"))
        repo = FirestoreVerificationRepository(client)
        otp_session = OtpSession("web-1", "123456", 12, "Jane", "jdoe", "905551234567")

        with pytest.raises(RuntimeError):
            await repo.complete_verification(12, otp_session)


class TestFirestoreAccessCodeRepository:
    """Tests for FirestoreAccessCodeRepository."""

    @pytest.mark.asyncio
    async def test_add_batch_single_commit(self, client, batch, collections):
        """Test every code goes into one batch under an auto id."""
        repo = FirestoreAccessCodeRepository(client)
        codes = [AccessCode(f"REDM-AAAAA{i}", "Pack", "http://x") for i in range(3)]

        await repo.add_batch(codes)

        assert batch.set.call_count == 3
        for call in collections[ACCESS_CODES_COLLECTION].document.call_args_list:
            assert call.args == ()
        written = [call.args[1] for call in batch.set.call_args_list]
        assert [doc["code"] for doc in written] == ["REDM-AAAAA0", "REDM-AAAAA1", "REDM-AAAAA2"]
        assert all(doc["isUsed"] is False for doc in written)
        batch.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_batch_failure(self, client, batch):
        batch.commit = AsyncMock(side_effect=google_exceptions.DeadlineExceeded("slow"))
        repo = FirestoreAccessCodeRepository(client)

        with pytest.raises(PersistenceError):
            await repo.add_batch([AccessCode("REDM-AAAAAA", "Pack", "http://x")])

    @pytest.mark.asyncio
    async def test_list_unused(self, client, collections):
        snapshots = [
            make_snapshot("d1", {"code": "REDM-AAAAAA", "resourceName": "A", "isUsed": False}),
            make_snapshot("d2", {"code": "REDM-BBBBBB", "resourceName": "B", "isUsed": False}),
        ]

        async def stream():
            for snapshot in snapshots:
                yield snapshot

        query = MagicMock()
        query.stream.return_value = stream()
        collections[ACCESS_CODES_COLLECTION].where.return_value = query
        repo = FirestoreAccessCodeRepository(client)

        codes = await repo.list_unused()

        assert [(c.document_id, c.code) for c in codes] == [
            ("d1", "REDM-AAAAAA"),
            ("d2", "REDM-BBBBBB"),
        ]
        field_filter = collections[ACCESS_CODES_COLLECTION].where.call_args.kwargs["filter"]
        assert field_filter.field_path == "isUsed"
        assert field_filter.value is False


class TestCreateFirestoreClient:
    """Tests for create_firestore_client."""

    def test_client_uses_service_account_project(self):
        info = {"project_id": "demo-project", "client_email": "bot@demo.iam"}
        with patch.object(
            service_account.Credentials, "from_service_account_info"
        ) as from_info, patch.object(firestore, "AsyncClient") as async_client:
            client = create_firestore_client(info)

        from_info.assert_called_once()
        assert from_info.call_args.args[0] == info
        async_client.assert_called_once_with(
            project="demo-project", credentials=from_info.return_value
        )
        assert client is async_client.return_value
