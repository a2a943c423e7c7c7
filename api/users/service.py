"""
Users business logic.

Repository errors are translated into HTTP errors here so the router stays
thin:
- DocumentNotFoundError -> 404
- QueryStringError (bad `sort` / `search`) -> 400
- duplicate email -> 409
"""

from __future__ import annotations

import logging
import re
from typing import Any

from fastapi import HTTPException, status
from pymongo.errors import DuplicateKeyError

from core.exceptions import DocumentNotFoundError
from shared.query_options import QueryOptions, QueryStringError, ensure_allowed_fields
from shared.responses import AppResponse

from . import schemas, security
from .repository import UserRepository, normalize_email

logger = logging.getLogger(__name__)

# Fields clients may sort and search on; never `password_hash`.
QUERYABLE_FIELDS = frozenset({"email", "first_name", "last_name", "full_name", "status", "created_at"})


def _not_found(exc: DocumentNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _bad_query(exc: QueryStringError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _email_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already registered.")


def build_conditions(query: schemas.FindAllUsersQuery) -> dict[str, Any]:
    conditions: dict[str, Any] = {}
    if query.email:
        conditions["email"] = normalize_email(query.email)
    if query.status is not None:
        conditions["status"] = query.status.value
    name = (query.name or "").strip()
    if name:
        pattern = {"$regex": re.escape(name), "$options": "i"}
        conditions["$or"] = [{"first_name": pattern}, {"last_name": pattern}]
    return conditions


async def find_all_users(
    users: UserRepository,
    query: schemas.FindAllUsersQuery,
    options: QueryOptions,
) -> AppResponse[list[schemas.UserResponse]]:
    try:
        ensure_allowed_fields(options, QUERYABLE_FIELDS)
        result = await users.paginate(build_conditions(query), options)
    except QueryStringError as exc:
        raise _bad_query(exc) from exc

    return AppResponse[list[schemas.UserResponse]](
        data=[schemas.to_user_response(doc) for doc in result.data],
        pagination=result.spec,
    )


async def find_user_by_email(users: UserRepository, email: str) -> AppResponse[schemas.UserResponse]:
    try:
        document = await users.find_one_by_conditions({"email": normalize_email(email)})
    except DocumentNotFoundError as exc:
        raise _not_found(exc) from exc
    return AppResponse[schemas.UserResponse](data=schemas.to_user_response(document))


async def user_exists(users: UserRepository, email: str) -> AppResponse[bool]:
    found = await users.exists({"email": normalize_email(email)})
    return AppResponse[bool](data=found)


async def create_user(
    users: UserRepository,
    payload: schemas.CreateUserRequest,
) -> AppResponse[schemas.UserResponse]:
    email = normalize_email(payload.email)
    if await users.exists({"email": email}):
        raise _email_taken()

    try:
        document = await users.create(
            {
                "email": email,
                "password_hash": security.hash_password(payload.password),
                "first_name": payload.first_name,
                "last_name": payload.last_name,
                "full_name": schemas.full_name(payload.first_name, payload.last_name),
                "status": payload.status.value,
            }
        )
    except DuplicateKeyError as exc:
        # A soft-deleted user still holds the unique email index.
        raise _email_taken() from exc

    logger.info("user_created id=%s", document["_id"])
    return AppResponse[schemas.UserResponse](
        status_code=status.HTTP_201_CREATED,
        message="created",
        data=schemas.to_user_response(document),
    )


async def update_user(
    users: UserRepository,
    user_id: str,
    payload: schemas.UpdateUserRequest,
) -> AppResponse[schemas.UserResponse]:
    changes = payload.model_dump(exclude_none=True, mode="json")

    try:
        if "first_name" in changes or "last_name" in changes:
            current = await users.find_one_by_id(user_id)
            changes["full_name"] = schemas.full_name(
                changes.get("first_name", current.get("first_name", "")),
                changes.get("last_name", current.get("last_name", "")),
            )
        document = await users.update(user_id, changes)
    except DocumentNotFoundError as exc:
        raise _not_found(exc) from exc

    return AppResponse[schemas.UserResponse](data=schemas.to_user_response(document))


async def delete_user(users: UserRepository, user_id: str) -> AppResponse[bool]:
    try:
        deleted = await users.soft_delete(user_id)
    except DocumentNotFoundError as exc:
        raise _not_found(exc) from exc
    return AppResponse[bool](message="deleted", data=deleted)
