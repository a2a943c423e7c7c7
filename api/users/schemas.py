"""
Users API schemas (request/response models) and document mapping.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class CreateUserRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    status: UserStatus = UserStatus.ACTIVE


class UpdateUserRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    status: UserStatus | None = None


class FindAllUsersQuery(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    status: UserStatus | None = None
    # Matches first or last name.
    name: str | None = Field(default=None, max_length=100)


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    full_name: str
    status: UserStatus
    created_at: datetime | None = None


def full_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()


def to_user_response(document: dict[str, Any]) -> UserResponse:
    """
    Map a stored user document to its API shape.

    `_id` becomes a string `id`; `password_hash` is never exposed.
    """
    first = str(document.get("first_name") or "")
    last = str(document.get("last_name") or "")
    return UserResponse(
        id=str(document["_id"]),
        email=str(document["email"]),
        first_name=first,
        last_name=last,
        full_name=str(document.get("full_name") or full_name(first, last)),
        status=UserStatus(document.get("status") or UserStatus.ACTIVE),
        created_at=document.get("created_at"),
    )
