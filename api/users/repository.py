"""
User persistence (MongoDB `users` collection).
"""

from __future__ import annotations

import logging

from core import db
from shared.repository import MongoRepository

logger = logging.getLogger(__name__)

COLLECTION_NAME = "users"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class UserRepository(MongoRepository):
    model_name = "User"
    collection_name = COLLECTION_NAME

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("email", unique=True)
        logger.info("indexes_ensured collection=%s", self.collection_name)


def get_user_repository() -> UserRepository:
    """
    FastAPI dependency: a repository bound to the shared client.
    """
    return UserRepository(db.collection(COLLECTION_NAME))
