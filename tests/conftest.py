"""Pytest configuration and common fixtures."""

import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Try to load test-specific environment file if it exists
test_env_file = Path(__file__).parent / ".env.test"
if test_env_file.exists():
    load_dotenv(test_env_file)

# CRITICAL: Set environment variables BEFORE any verifybot imports
# pydantic_settings reads them when settings are first built.
os.environ.setdefault("BOT_TOKEN", "123456:TEST-TOKEN")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("ENV", "testing")

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from unittest.mock import AsyncMock, MagicMock

import pytest

from verifybot.repositories.memory import (
    InMemoryAccessCodeRepository,
    InMemoryDocumentStore,
    InMemoryVerificationRepository,
)
from verifybot.services.admin_sessions import AdminSessionRegistry
from verifybot.services.code_issuance import CodeIssuanceFlow
from verifybot.services.verification import VerificationFlow

ADMIN_ID = 1299129410
USER_ID = 555001


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Give every test fresh settings built from a known environment."""
    monkeypatch.setenv("BOT_TOKEN", "123456:TEST-TOKEN")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.delenv("FIREBASE_SERVICE_ACCOUNT", raising=False)

    from verifybot.core.settings import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def store():
    """Empty in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def verification_repo(store):
    return InMemoryVerificationRepository(store)


@pytest.fixture
def access_code_repo(store):
    return InMemoryAccessCodeRepository(store)


@pytest.fixture
def verification_flow(verification_repo):
    """Verification flow with a predictable OTP."""
    return VerificationFlow(verification_repo, otp_generator=lambda: "482913")


@pytest.fixture
def sessions():
    return AdminSessionRegistry()


@pytest.fixture
def issuance_flow(access_code_repo, sessions):
    """Code issuance flow bound to the in-memory store."""
    return CodeIssuanceFlow(access_code_repo, admin_id=ADMIN_ID, sessions=sessions)


@pytest.fixture
def mock_access_code_repo():
    """Mock access-code repository."""
    repo = AsyncMock()
    repo.add_batch = AsyncMock()
    repo.list_unused = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_verification_repo():
    """Mock verification repository."""
    repo = AsyncMock()
    repo.set_pending = AsyncMock()
    repo.get_pending = AsyncMock(return_value=None)
    repo.complete_verification = AsyncMock()
    repo.get_otp_session = AsyncMock(return_value=None)
    return repo


def _make_update(user_id: int = USER_ID, text: str = None, callback: bool = False):
    """
    Build a mocked Telegram update.

    Args:
        user_id: Sender id
        text: Message text
        callback: Attach a callback query instead of a plain message
    """
    update = MagicMock()
    update.effective_user.id = user_id
    update.effective_user.first_name = "Jane"
    update.effective_user.last_name = "Doe"
    update.effective_user.username = "jdoe"
    update.effective_message.text = text
    update.effective_message.reply_text = AsyncMock()
    update.effective_message.reply_photo = AsyncMock()
    if callback:
        update.callback_query.answer = AsyncMock()
        update.callback_query.edit_message_text = AsyncMock()
    else:
        update.callback_query = None
    return update


@pytest.fixture
def make_update():
    """Factory for mocked Telegram updates."""
    return _make_update


@pytest.fixture
def admin_id():
    return ADMIN_ID


@pytest.fixture
def mock_context():
    """Mock handler context."""
    context = MagicMock()
    context.args = []
    context.bot = AsyncMock()
    return context


def _legacy_markdown_entities(text: str):
    """
    Split Telegram legacy Markdown into entity bodies.

    Backslash escapes count only outside an entity; inside one, the text runs
    to the next matching delimiter.
    """
    entities = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text) and text[i + 1] in "_*`[":
            i += 2
            continue
        if char in "_*`":
            end = text.find(char, i + 1)
            assert end != -1, f"Unclosed {char!r} entity at offset {i}: {text!r}"
            entities.append(text[i + 1 : end])
            i = end + 1
            continue
        i += 1
    return entities


@pytest.fixture
def markdown_entities():
    """Parser for legacy Markdown entities; fails on unclosed entities."""
    return _legacy_markdown_entities
