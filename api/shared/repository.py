"""
Generic repository with soft-delete visibility rules.

`BaseRepository` is the data-access interface every feature repository
exposes. `MongoRepository` is the MongoDB adapter (motor).

Visibility: every default read filters on `deleted_at: None`, so soft-deleted
documents behave as if they do not exist. The only way to reach them is
`permanently_delete(..., include_deleted=True)`.

Ordering: sort keys apply in the order given. Ties after the last key fall
back to natural storage order, which is not stable across calls; sort on a
unique field (e.g. `_id`) when page boundaries must be stable.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

from core.exceptions import DocumentNotFoundError, InvalidUsageError

from .pagination import PaginatedResult, build_pagination_spec
from .query_options import QueryOptions, parse_search, parse_sort

logger = logging.getLogger(__name__)

T = TypeVar("T")

DocumentId = ObjectId | str
Projection = Mapping[str, Any] | list[str] | None

# Fields only the repository itself may write.
_PROTECTED_FIELDS = {"_id", "created_at", "deleted_at"}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: DocumentId) -> DocumentId:
    """
    Hex strings that look like ObjectIds are converted; other strings are
    kept as-is for collections that use their own string ids.
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return value


class BaseRepository(ABC, Generic[T]):
    """
    Data-access surface for one document type.

    Controllers and services go through these operations only; none of them
    return soft-deleted documents unless stated otherwise.
    """

    model_name: str = "Document"

    @abstractmethod
    async def create(self, dto: Mapping[str, Any]) -> T:
        """Persist a new document and return it with its id."""

    @abstractmethod
    async def find_one_by_id(self, id: DocumentId, projection: Projection = None) -> T:
        """Return the visible document with `id` or raise DocumentNotFoundError."""

    @abstractmethod
    async def find_one_by_conditions(
        self,
        conditions: Mapping[str, Any] | None = None,
        projection: Projection = None,
    ) -> T:
        """Return the first visible document matching `conditions` or raise DocumentNotFoundError."""

    @abstractmethod
    async def find_all(
        self,
        conditions: Mapping[str, Any] | None = None,
        query_options: QueryOptions | None = None,
        projection: Projection = None,
        options: Mapping[str, Any] | None = None,
    ) -> list[T]:
        """Unpaginated listing; raises InvalidUsageError when given page + page_size."""

    @abstractmethod
    async def update(self, id: DocumentId, dto: Mapping[str, Any]) -> T:
        """Apply a partial update and return the updated document."""

    @abstractmethod
    async def soft_delete(self, id: DocumentId) -> bool:
        """Stamp `deleted_at`; raises DocumentNotFoundError if already deleted or absent."""

    @abstractmethod
    async def permanently_delete(self, id: DocumentId, *, include_deleted: bool = False) -> bool:
        """Physically remove the document."""

    @abstractmethod
    async def paginate(
        self,
        conditions: Mapping[str, Any] | None = None,
        query_options: QueryOptions | None = None,
    ) -> PaginatedResult:
        """Return one page of visible documents plus pagination metadata."""

    @abstractmethod
    async def exists(self, conditions: Mapping[str, Any]) -> bool:
        """Whether any visible document matches `conditions`."""


class MongoRepository(BaseRepository[dict[str, Any]]):
    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    def _not_found(self) -> DocumentNotFoundError:
        return DocumentNotFoundError(self.model_name)

    @staticmethod
    def _visible(
        conditions: Mapping[str, Any] | None = None,
        search: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return {**(conditions or {}), **(search or {}), "deleted_at": None}

    async def create(self, dto: Mapping[str, Any]) -> dict[str, Any]:
        now = _utc_now()
        document = {**dto, "created_at": now, "updated_at": now, "deleted_at": None}
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def find_one_by_id(self, id: DocumentId, projection: Projection = None) -> dict[str, Any]:
        document = await self.collection.find_one({"_id": to_object_id(id)}, projection)
        if document is None or document.get("deleted_at") is not None:
            raise self._not_found()
        return document

    async def find_one_by_conditions(
        self,
        conditions: Mapping[str, Any] | None = None,
        projection: Projection = None,
    ) -> dict[str, Any]:
        document = await self.collection.find_one(self._visible(conditions), projection)
        if document is None:
            raise self._not_found()
        return document

    async def find_all(
        self,
        conditions: Mapping[str, Any] | None = None,
        query_options: QueryOptions | None = None,
        projection: Projection = None,
        options: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        query_options = query_options or QueryOptions()
        if query_options.is_paginated:
            raise InvalidUsageError(
                f"Use paginate() instead of find_all() with page={query_options.page} "
                f"page_size={query_options.page_size}"
            )

        find_kwargs: dict[str, Any] = dict(options or {})
        sort = parse_sort(query_options.sort)
        if sort:
            find_kwargs["sort"] = [(field, int(direction)) for field, direction in sort]

        search = parse_search(query_options.search)
        cursor = self.collection.find(self._visible(conditions, search), projection, **find_kwargs)
        return await cursor.to_list(length=None)

    async def update(self, id: DocumentId, dto: Mapping[str, Any]) -> dict[str, Any]:
        changes = {k: v for k, v in dto.items() if k not in _PROTECTED_FIELDS}
        changes["updated_at"] = _utc_now()

        document = await self.collection.find_one_and_update(
            {"_id": to_object_id(id), "deleted_at": None},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise self._not_found()
        return document

    async def soft_delete(self, id: DocumentId) -> bool:
        result = await self.collection.update_one(
            {"_id": to_object_id(id), "deleted_at": None},
            {"$set": {"deleted_at": _utc_now()}},
        )
        if result.matched_count == 0:
            raise self._not_found()
        logger.info("soft_deleted model=%s id=%s", self.model_name, id)
        return result.modified_count == 1

    async def permanently_delete(self, id: DocumentId, *, include_deleted: bool = False) -> bool:
        """
        Soft-deleted documents are only reachable with `include_deleted=True`;
        otherwise they raise DocumentNotFoundError like any other miss.
        """
        query: dict[str, Any] = {"_id": to_object_id(id)}
        if not include_deleted:
            query["deleted_at"] = None

        result = await self.collection.delete_one(query)
        if result.deleted_count == 0:
            raise self._not_found()
        logger.info(
            "permanently_deleted model=%s id=%s include_deleted=%s",
            self.model_name,
            id,
            include_deleted,
        )
        return result.deleted_count == 1

    async def paginate(
        self,
        conditions: Mapping[str, Any] | None = None,
        query_options: QueryOptions | None = None,
    ) -> PaginatedResult:
        query_options = query_options or QueryOptions()
        page, page_size = query_options.page, query_options.page_size

        sort = parse_sort(query_options.sort)
        search = parse_search(query_options.search)
        query = self._visible(conditions, search)

        # Total is counted before limit/skip.
        total = await self.collection.count_documents(query)

        find_kwargs: dict[str, Any] = {}
        if page_size is not None and page_size >= 1:
            find_kwargs["limit"] = page_size
            find_kwargs["skip"] = (max(page or 1, 1) - 1) * page_size
        if sort:
            find_kwargs["sort"] = [(field, int(direction)) for field, direction in sort]

        data = await self.collection.find(query, **find_kwargs).to_list(length=None)
        return PaginatedResult(
            data=data,
            spec=build_pagination_spec(total, page=page, page_size=page_size),
        )

    async def exists(self, conditions: Mapping[str, Any]) -> bool:
        document = await self.collection.find_one(self._visible(conditions), {"_id": 1})
        return document is not None
