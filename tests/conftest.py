"""Shared test fixtures for Kanban Board Assistant tests"""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from tinydb.storages import MemoryStorage

# Set test environment before importing app
os.environ["DEBUG"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_PATH"] = "/tmp/test_kanban_assistant.json"
os.environ["COMPLETION_API_KEY"] = "test-completion-key"

from kanban_assistant.services.database import Database  # noqa: E402

from tests.factories import assistant_reply  # noqa: E402


# =============================================================================
# Stub Completion Gateway
# =============================================================================

class StubGateway:
    """Stands in for CompletionGateway.

    Replies are served in order; an exception instance is raised instead of
    returned. Every call is recorded in ``calls``.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    async def complete(self, system_prompt: str, user_message: str) -> str:
        self.calls.append({"system_prompt": system_prompt, "user_message": user_message})
        if not self.replies:
            return assistant_reply("Nothing to do.")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def db() -> Database:
    """In-memory database"""
    database = Database(storage=MemoryStorage)
    database.initialize()
    yield database
    database.close()


@pytest.fixture
def owner(db) -> dict:
    return db.create_profile("alice", "alice@example.com")


@pytest.fixture
def member(db) -> dict:
    return db.create_profile("bob", "bob@example.com")


@pytest.fixture
def outsider(db) -> dict:
    return db.create_profile("mallory", "mallory@example.com")


@pytest.fixture
def board(db, owner, member) -> dict:
    """Board owned by ``owner`` with ``member`` joined"""
    created = db.create_board("Test Board", owner["id"])
    db.add_board_member(created["id"], member["id"])
    return created


@pytest.fixture
def columns(db, board) -> dict:
    """Default columns of ``board`` keyed by title"""
    return {column["title"]: column for column in db.list_columns(board["id"])}


# =============================================================================
# Application and Client Fixtures
# =============================================================================

@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def app(db, gateway):
    """FastAPI application wired to the in-memory database and stub gateway"""
    from kanban_assistant.main import create_app
    return create_app(db=db, gateway=gateway)


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator:
    """Create async HTTP client for testing"""
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =============================================================================
# JWT Token Fixtures
# =============================================================================

def _auth_headers(user: dict) -> dict:
    from kanban_assistant.auth.jwt import create_access_token
    token = create_access_token(data={"sub": user["id"]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(owner) -> dict:
    return _auth_headers(owner)


@pytest.fixture
def member_headers(member) -> dict:
    return _auth_headers(member)


@pytest.fixture
def outsider_headers(outsider) -> dict:
    return _auth_headers(outsider)
