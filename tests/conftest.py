"""
Shared fixtures: every test runs against a fresh in-memory document store.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import bcrypt
import pytest

from db.memory_store import MemoryDocumentStore
from db.store import close_store, init_store
from models.account import ROLE_SCHOOL, ROLE_USER, Account
from security.rate_limiter import limiter


@pytest.fixture(autouse=True)
def store():
    memory = init_store(MemoryDocumentStore())
    yield memory
    close_store()


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(autouse=True)
def _fast_hashing(monkeypatch):
    real_gensalt = bcrypt.gensalt
    monkeypatch.setattr(bcrypt, "gensalt", lambda: real_gensalt(rounds=4))


@pytest.fixture
def school_draft():
    def build(name="Greenwood High", email="office@greenwood.edu", city="Pune", **extra) -> Account:
        extra.setdefault("school_name", name)
        return Account(name=name, email=email, password="s3cret", role=ROLE_SCHOOL, city=city, **extra)
    return build


@pytest.fixture
def user_draft():
    def build(name="Alice", email="alice@example.com", city="Pune", **extra) -> Account:
        return Account(name=name, email=email, password="s3cret", role=ROLE_USER, city=city, **extra)
    return build


@pytest.fixture
def make_update():
    """
    Build a fake Update. Every reply, whether quoted or sent to the chat,
    is appended to `update.replies`.
    """
    def build(user_id: int = 1001, first_name: str = "Alice"):
        update = MagicMock()
        update.replies = []

        async def record(text, *args, **kwargs):
            update.replies.append(text)

        update.effective_user.id = user_id
        update.effective_user.first_name = first_name
        update.message.reply_text = AsyncMock(side_effect=record)
        update.message.delete = AsyncMock()
        update.effective_chat.send_message = AsyncMock(side_effect=record)
        return update
    return build


@pytest.fixture
def make_context():
    def build(*args, user_data=None):
        return SimpleNamespace(args=list(args), user_data={} if user_data is None else user_data)
    return build
