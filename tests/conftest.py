# tests/conftest.py
"""
Shared fixtures: an in-memory MongoDB (mongomock-motor) wired into the app.
"""
import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from core import db
from shared.repository import MongoRepository
from users.repository import UserRepository


class WidgetRepository(MongoRepository):
    model_name = "Widget"


@pytest.fixture
def mongo_client():
    return AsyncMongoMockClient()


@pytest.fixture
def widgets(mongo_client):
    """Generic repository over a throwaway collection"""
    return WidgetRepository(mongo_client["test_db"]["widgets"])


@pytest.fixture
def users_repo(mongo_client):
    return UserRepository(mongo_client["test_db"]["users"])


@pytest.fixture
def client(mongo_client, monkeypatch):
    """HTTP client against the app with the mock Mongo client installed.

    Used without a `with` block, so the lifespan (real Mongo connection) never runs.
    """
    monkeypatch.setattr(db, "_client", mongo_client)
    monkeypatch.setenv("MONGODB_DATABASE", "test_db")
    # Same unique email index the app creates on startup.
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(UserRepository(mongo_client["test_db"]["users"]).ensure_indexes())
    finally:
        loop.close()

    from main import app

    return TestClient(app)
