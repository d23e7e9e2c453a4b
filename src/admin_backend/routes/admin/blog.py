"""
# Admin Blog Routes

CRUD endpoints of the admin backend for the `blog` collection.

Every handler follows the same shape: validate the request, call exactly one
`DocumentService` operation, and translate the outcome into one of the
response helpers (`{status, message, data}` envelope).

## API Endpoints

| Method | Path | Handler |
|---|---|---|
| `POST` | `/admin/blog/create` | `add_blog` |
| `POST` | `/admin/blog/addBulk` | `bulk_insert_blog` |
| `POST` | `/admin/blog/list` | `find_all_blog` |
| `POST` | `/admin/blog/count` | `get_blog_count` |
| `GET` | `/admin/blog/{id}` | `get_blog` |
| `PUT` | `/admin/blog/update/{id}` | `update_blog` |
| `PUT` | `/admin/blog/updateBulk` | `bulk_update_blog` |
| `PUT` | `/admin/blog/partial-update/{id}` | `partial_update_blog` |
| `PUT` | `/admin/blog/softDelete/{id}` | `soft_delete_blog` |
| `PUT` | `/admin/blog/softDeleteMany` | `soft_delete_many_blog` |
| `DELETE` | `/admin/blog/delete/{id}` | `delete_blog` |
| `POST` | `/admin/blog/deleteMany` | `delete_many_blog` |

## Ownership Fields

`addedBy` and `updatedBy` are never taken from the client. Creation sets
`addedBy` to the authenticated user; every update strips `addedBy` and sets
`updatedBy`.

## Error Mapping

- Schema mismatch -> `validation_error` (422)
- Duplicate key -> `validation_error` with `Data duplication found.`
- Anything else -> `internal_server_error` (500) carrying the error message

## Usage Example

```python
response = await client.post(
    "/admin/blog/list",
    json={"query": {"isDeleted": False}, "options": {"page": 1, "limit": 10, "sort": {"createdAt": -1}}},
    headers={"Authorization": f"Bearer {token}"},
)
paginator = response.json()["data"]["paginator"]
```
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from admin_backend.managers.logging_manager import get_logger
from admin_backend.models import (
    BLOG_COLLECTION,
    BLOG_MODEL_FIELDS,
    BlogCreateRequest,
    BlogDocument,
    BlogFindFilter,
    BlogUpdateRequest,
)
from admin_backend.routes.auth.dependencies import get_current_user_dep
from admin_backend.services.db_service import (
    DocumentService,
    DocumentValidationError,
    is_duplicate_key_error,
    is_valid_object_id,
)
from admin_backend.services.validation_service import validate_filter, validate_params
from admin_backend.utils import response_handler as res
from admin_backend.utils.logging_utils import log_error_with_context

logger = get_logger(prefix="[Blog Routes]")

blog_service = DocumentService(BLOG_COLLECTION, document_model=BlogDocument)

router = APIRouter(prefix="/admin/blog", tags=["admin-blog"])

INVALID_OBJECT_ID_MESSAGE = "invalid objectId."
DUPLICATE_DATA_MESSAGE = "Data duplication found."
OWNERSHIP_FIELDS = ("addedBy", "updatedBy")
IMMUTABLE_FIELDS = ("_id", "id", "createdAt")


def _invalid_params(message: str) -> JSONResponse:
    return res.validation_error(message=f"Invalid values in parameters, {message}")


def _server_error(error: Exception, operation: str, **context: Any) -> JSONResponse:
    log_error_with_context(error, {"operation": operation, "collection": BLOG_COLLECTION, **context})
    return res.internal_server_error(message=str(error))


def _write_error(error: Exception, operation: str, **context: Any) -> JSONResponse:
    """Map a failed insert/update to a response."""
    if isinstance(error, DocumentValidationError):
        return res.validation_error(message=f"Invalid Data, Validation Failed at {error}")
    if is_duplicate_key_error(error):
        logger.info("Duplicate key rejected during %s", operation)
        return res.validation_error(message=DUPLICATE_DATA_MESSAGE)
    return _server_error(error, operation, **context)


def _update_data(values: Dict[str, Any], current_user: Dict[str, Any]) -> Dict[str, Any]:
    """Keep stored fields only, drop identity and ownership, stamp `updatedBy`."""
    data = {
        key: value
        for key, value in values.items()
        if key in BLOG_MODEL_FIELDS and key not in OWNERSHIP_FIELDS and key not in IMMUTABLE_FIELDS
    }
    data["updatedBy"] = current_user["_id"]
    return data


def _ids_from_body(body: Any) -> Optional[List[str]]:
    """Return the `ids` list of a bulk request, or `None` when it is missing, empty or malformed."""
    if not isinstance(body, dict):
        return None
    ids = body.get("ids")
    if not isinstance(ids, list) or not ids:
        return None
    if not all(is_valid_object_id(item) for item in ids):
        return None
    return ids


@router.post("/create")
async def add_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Create a blog.

    The body is validated against `BlogCreateRequest`; `addedBy` is set to the
    authenticated user whatever the client sent.

    Returns:
        JSONResponse: `success` with the created document.
    """
    result = validate_params(body, BlogCreateRequest)
    if not result.is_valid:
        return _invalid_params(result.message)

    data = dict(result.value)
    data.pop("updatedBy", None)
    data["addedBy"] = current_user["_id"]

    try:
        created = await blog_service.create_document(data)
    except Exception as e:
        return _write_error(e, "add_blog", user_id=current_user["id"])

    logger.info("Blog %s created by %s", created["_id"], current_user["id"])
    return res.success(data=created)


@router.post("/addBulk")
async def bulk_insert_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Create several blogs in one insert.

    Body: `{"data": [{...}, ...]}`. A missing or empty `data` array is a bad
    request; every item gets `addedBy` set to the authenticated user.
    """
    items = body.get("data") if isinstance(body, dict) else None
    if not isinstance(items, list) or not items:
        return res.bad_request()

    documents = []
    for item in items:
        if not isinstance(item, dict):
            return res.bad_request()
        document = {key: value for key, value in item.items() if key != "updatedBy"}
        document["addedBy"] = current_user["_id"]
        documents.append(document)

    try:
        created = await blog_service.bulk_insert(documents)
    except Exception as e:
        return _write_error(e, "bulk_insert_blog", user_id=current_user["id"], items=len(documents))

    logger.info("%d blogs created by %s", len(created), current_user["id"])
    return res.success(data=created)


@router.post("/list")
async def find_all_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    List blogs with pagination.

    Body: `{"query": {...}, "options": {...}, "isCountOnly": false}`.

    With `isCountOnly` only a count query is issued and `{"totalRecords": n}`
    returned. Otherwise the result is `{"data": [...], "paginator": {...}}`;
    an empty page yields `record_not_found`.
    """
    result = validate_filter(body, BlogFindFilter, BLOG_MODEL_FIELDS)
    if not result.is_valid:
        return res.validation_error(message=result.message)

    payload = result.value
    query = dict(payload["query"]) if isinstance(payload.get("query"), dict) else {}

    try:
        if payload.get("isCountOnly"):
            total_records = await blog_service.count_document(query)
            return res.success(data={"totalRecords": total_records})

        options = dict(payload["options"]) if isinstance(payload.get("options"), dict) else {}
        if payload.get("select") and not options.get("select"):
            options["select"] = payload["select"]

        found = await blog_service.get_all_documents(query, options)
    except Exception as e:
        return _server_error(e, "find_all_blog", user_id=current_user["id"])

    if not found or not found.get("data"):
        return res.record_not_found()
    return res.success(data=found)


@router.post("/count")
async def get_blog_count(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """Count blogs matching `where` and return `{"totalRecords": n}`."""
    result = validate_filter(body, BlogFindFilter)
    if not result.is_valid:
        return res.validation_error(message=result.message)

    where = result.value.get("where")
    where = dict(where) if isinstance(where, dict) else {}

    try:
        total_records = await blog_service.count_document(where)
    except Exception as e:
        return _server_error(e, "get_blog_count", user_id=current_user["id"])

    return res.success(data={"totalRecords": total_records})


@router.put("/softDeleteMany")
async def soft_delete_many_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Flag several blogs as deleted.

    Body: `{"ids": [...]}`. Returns the number of modified documents; the
    records stay in the collection.
    """
    ids = _ids_from_body(body)
    if ids is None:
        return res.bad_request()

    try:
        modified = await blog_service.bulk_update(
            {"_id": {"$in": ids}},
            {"isDeleted": True, "updatedBy": current_user["_id"]},
        )
    except Exception as e:
        return _server_error(e, "soft_delete_many_blog", user_id=current_user["id"])

    if not modified:
        return res.record_not_found()
    logger.info("%d blogs soft-deleted by %s", modified, current_user["id"])
    return res.success(data=modified)


@router.put("/updateBulk")
async def bulk_update_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Update every blog matching `filter` with `data`.

    Body: `{"filter": {...}, "data": {...}}`. Client `addedBy` is dropped and
    `updatedBy` set to the authenticated user. Returns the modified count.
    """
    if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
        return res.bad_request()

    filter_doc = body.get("filter")
    filter_doc = dict(filter_doc) if isinstance(filter_doc, dict) else {}

    result = validate_params(body["data"], BlogUpdateRequest)
    if not result.is_valid:
        return _invalid_params(result.message)

    try:
        modified = await blog_service.bulk_update(filter_doc, _update_data(result.value, current_user))
    except Exception as e:
        return _server_error(e, "bulk_update_blog", user_id=current_user["id"])

    if not modified:
        return res.record_not_found()
    return res.success(data=modified)


@router.post("/deleteMany")
async def delete_many_blog(body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """Permanently delete the blogs listed in `{"ids": [...]}` and return the deleted count."""
    ids = _ids_from_body(body)
    if ids is None:
        return res.bad_request()

    try:
        deleted = await blog_service.delete_many({"_id": {"$in": ids}})
    except Exception as e:
        return _server_error(e, "delete_many_blog", user_id=current_user["id"])

    if not deleted:
        return res.record_not_found()
    logger.info("%d blogs deleted by %s", deleted, current_user["id"])
    return res.success(data=deleted)


@router.put("/softDelete/{id}")
async def soft_delete_blog(id: str, current_user: dict = Depends(get_current_user_dep)):
    """Flag one blog as deleted and return it."""
    if not is_valid_object_id(id):
        return res.validation_error(message=INVALID_OBJECT_ID_MESSAGE)

    try:
        updated = await blog_service.find_one_and_update_document(
            {"_id": id},
            {"isDeleted": True, "updatedBy": current_user["_id"]},
            new=True,
        )
    except Exception as e:
        return _server_error(e, "soft_delete_blog", blog_id=id)

    if not updated:
        return res.record_not_found()
    return res.success(data=updated)


@router.put("/partial-update/{id}")
async def partial_update_blog(id: str, body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Update the given fields of one blog.

    Returns:
        JSONResponse: `success` with the document after the update.
    """
    if not is_valid_object_id(id):
        return res.validation_error(message=INVALID_OBJECT_ID_MESSAGE)

    result = validate_params(body, BlogUpdateRequest)
    if not result.is_valid:
        return _invalid_params(result.message)

    try:
        updated = await blog_service.find_one_and_update_document(
            {"_id": id}, _update_data(result.value, current_user), new=True
        )
    except Exception as e:
        return _server_error(e, "partial_update_blog", blog_id=id)

    if not updated:
        return res.record_not_found()
    return res.success(data=updated)


@router.put("/update/{id}")
async def update_blog(id: str, body: Any = Body(None), current_user: dict = Depends(get_current_user_dep)):
    """
    Update one blog.

    Store-level validation and duplicate-key failures are reported as
    `validation_error`.
    """
    if not is_valid_object_id(id):
        return res.validation_error(message=INVALID_OBJECT_ID_MESSAGE)

    result = validate_params(body, BlogUpdateRequest)
    if not result.is_valid:
        return _invalid_params(result.message)

    try:
        updated = await blog_service.find_one_and_update_document(
            {"_id": id}, _update_data(result.value, current_user), new=True
        )
    except Exception as e:
        return _write_error(e, "update_blog", blog_id=id)

    if not updated:
        return res.record_not_found()
    logger.info("Blog %s updated by %s", id, current_user["id"])
    return res.success(data=updated)


@router.get("/{id}")
async def get_blog(id: str, current_user: dict = Depends(get_current_user_dep)):
    """Fetch one blog by id."""
    if not is_valid_object_id(id):
        return res.validation_error(message=INVALID_OBJECT_ID_MESSAGE)

    try:
        found = await blog_service.get_single_document({"_id": id})
    except Exception as e:
        return _server_error(e, "get_blog", blog_id=id)

    if not found:
        return res.record_not_found()
    return res.success(data=found)


@router.delete("/delete/{id}")
async def delete_blog(id: str, current_user: dict = Depends(get_current_user_dep)):
    """Permanently delete one blog and return the removed document."""
    if not is_valid_object_id(id):
        return res.validation_error(message=INVALID_OBJECT_ID_MESSAGE)

    try:
        deleted = await blog_service.find_one_and_delete_document({"_id": id})
    except Exception as e:
        return _server_error(e, "delete_blog", blog_id=id)

    if not deleted:
        return res.record_not_found()
    logger.info("Blog %s deleted by %s", id, current_user["id"])
    return res.success(data=deleted)
