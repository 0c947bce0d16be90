"""
Shared fixtures: an in-memory MongoDB, the application and authenticated users.
"""
import asyncio

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.security import create_access_token
from app.db.mongo import MongoDB
from app.main import create_app
from app.models.user import USERS
from app.utils.helpers import utcnow


def run(coro):
    """Drive a mongomock coroutine from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def db():
    client = AsyncMongoMockClient()
    return client["job_tracker_test"]


@pytest.fixture
def app(db):
    application = create_app(use_lifespan=False)
    application.state.mongo = MongoDB.from_database(db)
    return application


@pytest.fixture
def client(app):
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    """Insert a user and return ``(user_doc, auth_headers)``."""

    def _make_user(email="alice@example.com", name="Alice", role="user"):
        now = utcnow()
        user = {
            "email": email,
            "name": name,
            "role": role,
            "googleId": f"google-{ObjectId()}",
            "isVerified": True,
            "createdAt": now,
            "updatedAt": now,
        }
        result = run(db[USERS].insert_one(user))
        user["_id"] = result.inserted_id
        token = create_access_token(str(result.inserted_id), role)
        return user, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Bob")


@pytest.fixture
def admin(make_user):
    return make_user("admin@example.com", "Admin", role="admin")
