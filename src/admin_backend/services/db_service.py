"""
# Document Service

Generic CRUD access to a MongoDB collection.

`DocumentService` is the only component that talks to the driver for entity
data. Route handlers stay thin: they validate input, call one method here,
and map the outcome to a response helper.

## Key Features

### 1. Document Construction
When a `document_model` is given, inserts go through it: unknown keys are
dropped, defaults applied, and failures raised as `DocumentValidationError`.
`createdAt`/`updatedAt` are stamped on insert, `updatedAt` on every update.

### 2. Query Normalisation
`id` is aliased to `_id`. String values of `_id`, `addedBy` and `updatedBy`
(also inside `$in`, `$nin`, `$eq`, `$ne`) are cast to `ObjectId` when they
are valid identifiers.

### 3. Pagination
`get_all_documents()` returns:

```python
{
    "data": [...],
    "paginator": {
        "itemCount": 42, "perPage": 10, "pageCount": 5, "currentPage": 1,
        "slNo": 1, "hasPrevPage": False, "hasNextPage": True,
        "prev": None, "next": 2,
    },
}
```

## Usage Example

```python
blog_service = DocumentService(BLOG_COLLECTION, document_model=BlogDocument)
created = await blog_service.create_document({"title": "Hello", "addedBy": user_id})
page = await blog_service.get_all_documents({"isActive": True}, {"page": 2, "limit": 5})
```

Driver errors (`DuplicateKeyError`, `PyMongoError`) are not caught here.
"""

import math
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel, ValidationError
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError

from admin_backend.config import settings
from admin_backend.database import db_manager
from admin_backend.managers.logging_manager import get_logger
from admin_backend.services.validation_service import format_validation_errors

logger = get_logger(prefix="[DocumentService]")

ID_OPERATORS = ("$in", "$nin", "$eq", "$ne")

# Fields holding ObjectId references to other documents
REFERENCE_FIELDS = ("addedBy", "updatedBy")

SORT_DIRECTIONS = {
    1: ASCENDING,
    -1: DESCENDING,
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}


class DocumentValidationError(Exception):
    """Raised when data cannot be turned into a stored document."""


DUPLICATE_KEY_CODE = 11000


def is_duplicate_key_error(error: BaseException) -> bool:
    """True when the driver rejected a write because of a unique index."""
    if isinstance(error, DuplicateKeyError):
        return True
    if isinstance(error, BulkWriteError):
        write_errors = (error.details or {}).get("writeErrors", [])
        return any(item.get("code") == DUPLICATE_KEY_CODE for item in write_errors)
    return getattr(error, "code", None) == DUPLICATE_KEY_CODE


def is_valid_object_id(value: Any) -> bool:
    """True for `ObjectId` instances and 24-character hex strings."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def to_object_id(value: Any) -> Any:
    """Cast a valid identifier string to `ObjectId`, leave anything else untouched."""
    if isinstance(value, str) and is_valid_object_id(value):
        return ObjectId(value)
    return value


def _cast_id_value(value: Any) -> Any:
    if isinstance(value, dict):
        cast = dict(value)
        for operator in ID_OPERATORS:
            if operator not in cast:
                continue
            operand = cast[operator]
            if isinstance(operand, list):
                cast[operator] = [to_object_id(item) for item in operand]
            else:
                cast[operator] = to_object_id(operand)
        return cast
    if isinstance(value, list):
        return {"$in": [to_object_id(item) for item in value]}
    return to_object_id(value)


def normalize_query(query: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Prepare a client filter for the driver.

    Args:
        query: Filter document as received from the client.

    Returns:
        Dict[str, Any]: A new filter with `id` aliased to `_id` and identifier and reference values cast.
    """
    normalized = dict(query or {})
    if "id" in normalized and "_id" not in normalized:
        normalized["_id"] = normalized.pop("id")
    for field in ("_id", *REFERENCE_FIELDS):
        if field in normalized:
            normalized[field] = _cast_id_value(normalized[field])
    return normalized


def build_projection(select: Any) -> Optional[Dict[str, int]]:
    """Turn a `select` option (list of fields or mapping) into a projection."""
    if not select:
        return None
    if isinstance(select, dict):
        return {field: int(flag) for field, flag in select.items()}
    return {field: 1 for field in select}


def build_sort(sort: Optional[Dict[str, Any]]) -> Optional[List[tuple]]:
    if not sort:
        return None
    return [(field, SORT_DIRECTIONS.get(direction, ASCENDING)) for field, direction in sort.items()]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentService:
    """
    CRUD operations on one collection.

    Args:
        collection_name: Name of the MongoDB collection.
        document_model: Optional pydantic model used to build inserted documents.
    """

    def __init__(self, collection_name: str, document_model: Optional[Type[BaseModel]] = None):
        self.collection_name = collection_name
        self.document_model = document_model

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return db_manager.get_collection(self.collection_name)

    def _build_document(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if self.document_model is None:
            document = dict(data)
        else:
            try:
                document = self.document_model.model_validate(data).model_dump(exclude_none=True)
            except ValidationError as e:
                raise DocumentValidationError(format_validation_errors(e)) from e

        now = _utcnow()
        document["createdAt"] = now
        document["updatedAt"] = now
        return document

    async def create_document(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert one document.

        Returns:
            Dict[str, Any]: The stored document including its `_id`.

        Raises:
            DocumentValidationError: If `data` does not fit the document model.
            DuplicateKeyError: If a unique index rejects the document.
        """
        document = self._build_document(data)
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        logger.debug("Inserted document %s into '%s'", result.inserted_id, self.collection_name)
        return document

    async def bulk_insert(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert many documents in order.

        Raises:
            DocumentValidationError: If any item does not fit the document model.
            BulkWriteError: If the driver rejects part of the batch.
        """
        documents = [self._build_document(item) for item in items]
        result = await self.collection.insert_many(documents)
        for document, inserted_id in zip(documents, result.inserted_ids):
            document["_id"] = inserted_id
        logger.debug("Inserted %d documents into '%s'", len(documents), self.collection_name)
        return documents

    async def get_all_documents(
        self, query: Optional[Dict[str, Any]] = None, options: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Find documents page by page.

        Args:
            query: Filter document.
            options: `page`, `limit`, `pagination`, `sort`, `select`.

        Returns:
            Dict[str, Any]: `{"data": [...], "paginator": {...}}`.
        """
        start_time = time.time()
        query = normalize_query(query)
        options = options or {}

        item_count = await self.collection.count_documents(query)

        cursor = self.collection.find(query, build_projection(options.get("select")))
        sort = build_sort(options.get("sort"))
        if sort:
            cursor = cursor.sort(sort)

        if options.get("pagination", True) is False:
            page, limit, skip = 1, item_count, 0
            documents = await cursor.to_list(length=None)
        else:
            page = int(options.get("page") or 1)
            limit = int(options.get("limit") or settings.DEFAULT_PAGE_LIMIT)
            skip = (page - 1) * limit
            documents = await cursor.skip(skip).limit(limit).to_list(length=limit)

        page_count = math.ceil(item_count / limit) if item_count and limit else 1
        has_prev = page > 1
        has_next = page < page_count
        paginator = {
            "itemCount": item_count,
            "perPage": limit,
            "pageCount": page_count,
            "currentPage": page,
            "slNo": skip + 1,
            "hasPrevPage": has_prev,
            "hasNextPage": has_next,
            "prev": page - 1 if has_prev else None,
            "next": page + 1 if has_next else None,
        }

        logger.debug(
            "Listed %d/%d documents from '%s' in %.3fs",
            len(documents),
            item_count,
            self.collection_name,
            time.time() - start_time,
        )
        return {"data": documents, "paginator": paginator}

    async def get_single_document(
        self, query: Dict[str, Any], options: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Return the first matching document or `None`."""
        options = options or {}
        return await self.collection.find_one(normalize_query(query), build_projection(options.get("select")))

    async def count_document(self, query: Optional[Dict[str, Any]] = None) -> int:
        """Count matching documents without reading them."""
        return await self.collection.count_documents(normalize_query(query))

    async def find_one_and_update_document(
        self, query: Dict[str, Any], data: Dict[str, Any], new: bool = True
    ) -> Optional[Dict[str, Any]]:
        """
        `$set` fields on the first matching document.

        Args:
            query: Filter document.
            data: Fields to set.
            new: Return the document after the update instead of before.

        Returns:
            Optional[Dict[str, Any]]: The document, or `None` when nothing matched.
        """
        update = {"$set": {**data, "updatedAt": _utcnow()}}
        return await self.collection.find_one_and_update(
            normalize_query(query),
            update,
            return_document=ReturnDocument.AFTER if new else ReturnDocument.BEFORE,
        )

    async def bulk_update(self, query: Dict[str, Any], data: Dict[str, Any]) -> int:
        """`$set` fields on every matching document and return the modified count."""
        update = {"$set": {**data, "updatedAt": _utcnow()}}
        result = await self.collection.update_many(normalize_query(query), update)
        logger.debug("Updated %d documents in '%s'", result.modified_count, self.collection_name)
        return result.modified_count

    async def delete_many(self, query: Dict[str, Any]) -> int:
        """Delete every matching document and return the deleted count."""
        result = await self.collection.delete_many(normalize_query(query))
        logger.debug("Deleted %d documents from '%s'", result.deleted_count, self.collection_name)
        return result.deleted_count

    async def find_one_and_delete_document(self, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Delete the first matching document and return it, or `None`."""
        return await self.collection.find_one_and_delete(normalize_query(query))
