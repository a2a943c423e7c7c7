"""
Async MongoDB access using motor.

This module owns the client (and therefore the connection pool). FastAPI
initializes it on startup and closes it on shutdown (see `api/main.py`).

Reads through the repositories are "lean": motor returns plain dicts, never
change-tracked objects.
"""

from __future__ import annotations

import logging

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from . import config

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None


async def init_client() -> None:
    global _client
    if _client is not None:
        return None
    _client = AsyncIOMotorClient(
        config.mongodb_url(),
        serverSelectionTimeoutMS=config.mongodb_timeout_ms(),
        tz_aware=True,
    )
    logger.info("mongodb_client_started database=%s", config.mongodb_database())


async def close_client() -> None:
    global _client
    if _client is None:
        return None
    _client.close()
    _client = None
    logger.info("mongodb_client_closed")


def client() -> AsyncIOMotorClient:
    if _client is None:
        raise RuntimeError("MongoDB client is not initialized. Call init_client() on startup.")
    return _client


def database() -> AsyncIOMotorDatabase:
    return client()[config.mongodb_database()]


def collection(name: str) -> AsyncIOMotorCollection:
    return database()[name]
