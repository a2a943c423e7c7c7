"""
List-endpoint query options and the `sort` / `search` string parsers.

Both strings share one grammar: comma-separated `field:value` segments.

    sort=name:asc,age:desc
    search=first_name:ann,status:active

A malformed segment rejects the whole string (QueryStringError). There is no
escaping: values cannot contain ',' or ':'.
"""

from __future__ import annotations

import re
from collections.abc import Collection
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from fastapi import HTTPException, Query


class QueryStringError(ValueError):
    pass


class SortDirection(IntEnum):
    # Values match pymongo.ASCENDING / pymongo.DESCENDING.
    ASC = 1
    DESC = -1


SortSpec = list[tuple[str, SortDirection]]
SearchSpec = dict[str, Any]

_DIRECTIONS = {
    "asc": SortDirection.ASC,
    "ascending": SortDirection.ASC,
    "1": SortDirection.ASC,
    "desc": SortDirection.DESC,
    "descending": SortDirection.DESC,
    "-1": SortDirection.DESC,
}


@dataclass(frozen=True)
class QueryOptions:
    page: int | None = None
    page_size: int | None = None
    sort: str | None = None
    search: str | None = None

    @property
    def is_paginated(self) -> bool:
        return self.page is not None and self.page_size is not None


def _split_pairs(value: str | None, *, kind: str) -> list[tuple[str, str]]:
    raw = (value or "").strip()
    if not raw:
        return []

    pairs: list[tuple[str, str]] = []
    for segment in raw.split(","):
        parts = segment.split(":")
        if len(parts) != 2:
            raise QueryStringError(f"Invalid {kind} segment '{segment.strip()}'. Expected 'field:value'.")
        field, token = parts[0].strip(), parts[1].strip()
        if not field or not token:
            raise QueryStringError(f"Invalid {kind} segment '{segment.strip()}'. Expected 'field:value'.")
        if field.startswith("$"):
            raise QueryStringError(f"Invalid {kind} field '{field}'. Operators are not allowed.")
        pairs.append((field, token))
    return pairs


def parse_sort(value: str | None) -> SortSpec:
    """
    "name:asc,age:desc" -> [("name", ASC), ("age", DESC)]

    Order is preserved: earlier fields take precedence.
    """
    spec: SortSpec = []
    for field, token in _split_pairs(value, kind="sort"):
        direction = _DIRECTIONS.get(token.lower())
        if direction is None:
            raise QueryStringError(f"Invalid sort direction '{token}' for field '{field}'.")
        spec.append((field, direction))
    return spec


def parse_search(value: str | None) -> SearchSpec:
    """
    "first_name:ann" -> {"first_name": {"$regex": "ann", "$options": "i"}}

    Values are matched as case-insensitive substrings; regex metacharacters
    are escaped.
    """
    return {
        field: {"$regex": re.escape(token), "$options": "i"}
        for field, token in _split_pairs(value, kind="search")
    }


def ensure_allowed_fields(options: QueryOptions, allowed: Collection[str]) -> None:
    """
    Reject `sort` / `search` on fields a feature does not expose.
    """
    for kind, value in (("sort", options.sort), ("search", options.search)):
        for field, _ in _split_pairs(value, kind=kind):
            if field not in allowed:
                raise QueryStringError(f"Cannot {kind} on field '{field}'. Allowed: {sorted(allowed)}")


def query_options(
    page: int | None = Query(default=None, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    sort: str | None = Query(default=None, max_length=500),
    search: str | None = Query(default=None, max_length=500),
) -> QueryOptions:
    """
    FastAPI dependency for list endpoints.
    """
    if (page is None) != (page_size is None):
        raise HTTPException(
            status_code=422,
            detail="page and page_size must be provided together.",
        )
    return QueryOptions(page=page, page_size=page_size, sort=sort, search=search)
