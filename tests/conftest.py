"""
LifeStream Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the test suite.
How:   Environment is set before any `lifestream` import. The real Mongo
       client is replaced by FakeDatabase through FastAPI's
       dependency_overrides, so no server is needed.

Fixtures:
    fake_db       FakeDatabase with empty users/blogs/donationRequests
    app           FastAPI app wired to fake_db
    test_client   HTTPX AsyncClient over ASGITransport
    make_token    issue a real signed token for an email
    auth_headers  Authorization header builder
"""

import os

os.environ["ACCESS_TOKEN_SECRET"] = "test-secret-key-for-lifestream-tests-0123456789"
os.environ["MONGODB_URL"] = "mongodb://localhost:27017"
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from lifestream.database import get_database
from lifestream.services.token_service import token_service


# ══════════════════════════════════════════════════════════════════════════
# In-memory document store
# ══════════════════════════════════════════════════════════════════════════

_MISSING = object()


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    # Equality only; a None value matches a missing field, as in Mongo
    for key, expected in query.items():
        actual = document.get(key, _MISSING)
        if expected is None:
            if actual is not _MISSING and actual is not None:
                return False
        elif actual is _MISSING or actual != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self._documents = documents
        self._limit = 0

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._documents = sorted(
            self._documents, key=lambda d: d.get(key), reverse=direction < 0
        )
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        documents = self._documents
        if self._limit:
            documents = documents[: self._limit]
        return [dict(d) for d in documents]


class FakeCollection:
    """Implements the subset of the async collection API the services call."""

    def __init__(self):
        self.documents: List[Dict[str, Any]] = []
        self.calls: List[tuple] = []

    async def insert_one(self, document: Dict[str, Any]):
        self.calls.append(("insert_one", document))
        document.setdefault("_id", ObjectId())
        self.documents.append(dict(document))
        return SimpleNamespace(acknowledged=True, inserted_id=document["_id"])

    def find(self, query: Optional[Dict[str, Any]] = None) -> FakeCursor:
        query = query or {}
        self.calls.append(("find", query))
        return FakeCursor([d for d in self.documents if _matches(d, query)])

    async def find_one(self, query: Dict[str, Any]):
        self.calls.append(("find_one", query))
        for document in self.documents:
            if _matches(document, query):
                return dict(document)
        return None

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False):
        self.calls.append(("update_one", query, update, upsert))
        changes = update.get("$set", {})
        for document in self.documents:
            if _matches(document, query):
                modified = any(document.get(k, _MISSING) != v for k, v in changes.items())
                document.update(changes)
                return SimpleNamespace(
                    acknowledged=True, matched_count=1,
                    modified_count=int(modified), upserted_id=None,
                )
        if upsert:
            document = {**query, **changes}
            document.setdefault("_id", ObjectId())
            self.documents.append(document)
            return SimpleNamespace(
                acknowledged=True, matched_count=0,
                modified_count=0, upserted_id=document["_id"],
            )
        return SimpleNamespace(
            acknowledged=True, matched_count=0, modified_count=0, upserted_id=None
        )

    async def delete_one(self, query: Dict[str, Any]):
        self.calls.append(("delete_one", query))
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(acknowledged=True, deleted_count=1)
        return SimpleNamespace(acknowledged=True, deleted_count=0)

    def seed(self, *documents: Dict[str, Any]) -> List[ObjectId]:
        ids = []
        for document in documents:
            document = dict(document)
            document.setdefault("_id", ObjectId())
            self.documents.append(document)
            ids.append(document["_id"])
        return ids


class FakeDatabase:
    def __init__(self):
        self.users = FakeCollection()
        self.blogs = FakeCollection()
        self.donation_requests = FakeCollection()
        self.reachable = True

    async def ping(self) -> None:
        if not self.reachable:
            raise ConnectionError("server selection timed out")

    async def close(self) -> None:
        pass


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def app(fake_db):
    from lifestream.main import app as application

    application.dependency_overrides[get_database] = lambda: fake_db
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_root(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_token():
    def _make(email: Optional[str] = "a@x.com", **claims: Any) -> str:
        payload = dict(claims)
        if email is not None:
            payload["email"] = email
        return token_service.issue(payload)
    return _make


@pytest.fixture
def auth_headers(make_token):
    def _headers(email: Optional[str] = "a@x.com") -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(email)}"}
    return _headers
