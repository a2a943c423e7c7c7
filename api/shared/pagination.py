"""
Pagination metadata for list responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

UNPAGINATED = -1


class PaginationSpec(BaseModel):
    current_page: int
    page_size: int
    total: int


@dataclass(frozen=True)
class PaginatedResult:
    data: list[dict[str, Any]]
    spec: PaginationSpec


def build_pagination_spec(total: int, page: int | None = None, page_size: int | None = None) -> PaginationSpec:
    # -1 marks "no pagination requested".
    return PaginationSpec(
        current_page=page if page is not None else UNPAGINATED,
        page_size=page_size if page_size is not None else UNPAGINATED,
        total=total,
    )
