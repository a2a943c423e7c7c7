"""
Users API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from shared.query_options import QueryOptions, query_options
from shared.responses import AppResponse

from . import schemas, service
from .repository import UserRepository, get_user_repository

router = APIRouter(prefix="/users")


@router.get(
    "",
    summary="find all users",
    response_model=AppResponse[list[schemas.UserResponse]],
)
async def find_all_users(
    query: schemas.FindAllUsersQuery = Depends(),
    options: QueryOptions = Depends(query_options),
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[list[schemas.UserResponse]]:
    return await service.find_all_users(users, query, options)


@router.get(
    "/exists/{email}",
    summary="check user exists",
    response_model=AppResponse[bool],
)
async def user_exists(
    email: str = Path(..., min_length=3, max_length=320),
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[bool]:
    return await service.user_exists(users, email)


@router.get(
    "/{email}",
    summary="find user by email",
    response_model=AppResponse[schemas.UserResponse],
)
async def find_user_by_email(
    email: str = Path(..., min_length=3, max_length=320),
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[schemas.UserResponse]:
    return await service.find_user_by_email(users, email)


@router.post(
    "",
    summary="create user",
    status_code=status.HTTP_201_CREATED,
    response_model=AppResponse[schemas.UserResponse],
)
async def create_user(
    payload: schemas.CreateUserRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[schemas.UserResponse]:
    return await service.create_user(users, payload)


@router.patch(
    "/{user_id}",
    summary="update user",
    response_model=AppResponse[schemas.UserResponse],
)
async def update_user(
    user_id: str,
    payload: schemas.UpdateUserRequest,
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[schemas.UserResponse]:
    return await service.update_user(users, user_id, payload)


@router.delete(
    "/{user_id}",
    summary="soft-delete user",
    response_model=AppResponse[bool],
)
async def delete_user(
    user_id: str,
    users: UserRepository = Depends(get_user_repository),
) -> AppResponse[bool]:
    """
    Soft delete: the user disappears from every read but stays in storage.
    """
    return await service.delete_user(users, user_id)
