"""
Uniform response envelope returned by every feature endpoint.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from .pagination import PaginationSpec

T = TypeVar("T")


class AppResponse(BaseModel, Generic[T]):
    status_code: int = 200
    message: str = "success"
    data: T
    pagination: PaginationSpec | None = None
