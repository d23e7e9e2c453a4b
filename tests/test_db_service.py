from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

from bson import ObjectId
import pytest
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import BulkWriteError, DuplicateKeyError, OperationFailure

from admin_backend.models.blog_models import BLOG_COLLECTION, BlogDocument
from admin_backend.services.db_service import (
    DocumentService,
    DocumentValidationError,
    build_projection,
    build_sort,
    is_duplicate_key_error,
    normalize_query,
)

HEX_ID = "65b000000000000000000001"


@pytest.fixture
def service():
    return DocumentService(BLOG_COLLECTION, document_model=BlogDocument)


def _cursor(documents):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents)
    return cursor


class TestQueryHelpers:
    def test_id_alias_and_cast(self):
        assert normalize_query({"id": HEX_ID}) == {"_id": ObjectId(HEX_ID)}

    def test_operator_values_are_cast(self):
        query = normalize_query({"_id": {"$in": [HEX_ID, "legacy-key"]}, "isDeleted": False})
        assert query == {"_id": {"$in": [ObjectId(HEX_ID), "legacy-key"]}, "isDeleted": False}

    def test_list_becomes_in(self):
        assert normalize_query({"_id": [HEX_ID]}) == {"_id": {"$in": [ObjectId(HEX_ID)]}}

    def test_reference_fields_are_cast(self):
        query = normalize_query({"addedBy": HEX_ID, "updatedBy": {"$in": [HEX_ID]}, "author": HEX_ID})

        assert query == {
            "addedBy": ObjectId(HEX_ID),
            "updatedBy": {"$in": [ObjectId(HEX_ID)]},
            "author": HEX_ID,
        }

    def test_input_is_not_mutated(self):
        query = {"id": HEX_ID}
        normalize_query(query)
        assert query == {"id": HEX_ID}

    def test_projection(self):
        assert build_projection(None) is None
        assert build_projection(["title", "author"]) == {"title": 1, "author": 1}
        assert build_projection({"articleBody": 0}) == {"articleBody": 0}

    def test_sort(self):
        assert build_sort({"createdAt": -1, "title": "asc"}) == [("createdAt", DESCENDING), ("title", 1)]

    def test_duplicate_key_detection(self):
        assert is_duplicate_key_error(DuplicateKeyError("E11000", 11000))
        assert is_duplicate_key_error(BulkWriteError({"writeErrors": [{"code": 11000}]}))
        assert not is_duplicate_key_error(BulkWriteError({"writeErrors": [{"code": 121}]}))
        assert not is_duplicate_key_error(OperationFailure("boom", 2))
        assert not is_duplicate_key_error(ValueError("nope"))


@pytest.mark.asyncio
async def test_create_document_applies_model(service, mock_collection):
    inserted_id = ObjectId()
    mock_collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted_id))

    created = await service.create_document({"title": "<b>Hello</b>", "unknown": 1})

    stored = mock_collection.insert_one.await_args.args[0]
    assert stored["title"] == "Hello"
    assert stored["isActive"] is True
    assert stored["isDeleted"] is False
    assert "unknown" not in stored
    assert isinstance(stored["createdAt"], datetime)
    assert stored["createdAt"] == stored["updatedAt"]
    assert created["_id"] == inserted_id


@pytest.mark.asyncio
async def test_create_document_rejects_invalid_data(service, mock_collection):
    mock_collection.insert_one = AsyncMock()

    with pytest.raises(DocumentValidationError) as exc_info:
        await service.create_document({"author": "Jane"})

    assert '"title"' in str(exc_info.value)
    mock_collection.insert_one.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_document_propagates_duplicate_key(service, mock_collection):
    mock_collection.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000", 11000))

    with pytest.raises(DuplicateKeyError):
        await service.create_document({"title": "Hello"})


@pytest.mark.asyncio
async def test_bulk_insert_assigns_ids(service, mock_collection):
    ids = [ObjectId(), ObjectId()]
    mock_collection.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=ids))

    created = await service.bulk_insert([{"title": "A"}, {"title": "B"}])

    assert [doc["_id"] for doc in created] == ids
    assert [doc["title"] for doc in created] == ["A", "B"]


@pytest.mark.asyncio
async def test_length_limits_apply_to_every_insert(service, mock_collection):
    mock_collection.insert_one = AsyncMock()
    mock_collection.insert_many = AsyncMock()

    with pytest.raises(DocumentValidationError) as exc_info:
        await service.create_document({"title": "x" * 301})
    assert '"title"' in str(exc_info.value)

    with pytest.raises(DocumentValidationError) as exc_info:
        await service.bulk_insert([{"title": "ok"}, {"title": "ok", "author": "a" * 201}])
    assert '"author"' in str(exc_info.value)

    mock_collection.insert_one.assert_not_awaited()
    mock_collection.insert_many.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_all_documents_paginates(service, mock_collection):
    cursor = _cursor([{"_id": ObjectId(), "title": "A"}])
    mock_collection.count_documents = AsyncMock(return_value=25)
    mock_collection.find.return_value = cursor

    result = await service.get_all_documents(
        {"isDeleted": False}, {"page": 2, "limit": 10, "sort": {"createdAt": -1}, "select": ["title"]}
    )

    mock_collection.find.assert_called_once_with({"isDeleted": False}, {"title": 1})
    cursor.sort.assert_called_once_with([("createdAt", DESCENDING)])
    cursor.skip.assert_called_once_with(10)
    cursor.limit.assert_called_once_with(10)
    assert result["paginator"] == {
        "itemCount": 25,
        "perPage": 10,
        "pageCount": 3,
        "currentPage": 2,
        "slNo": 11,
        "hasPrevPage": True,
        "hasNextPage": True,
        "prev": 1,
        "next": 3,
    }
    assert len(result["data"]) == 1


@pytest.mark.asyncio
async def test_get_all_documents_without_pagination(service, mock_collection):
    documents = [{"_id": ObjectId()} for _ in range(4)]
    cursor = _cursor(documents)
    mock_collection.count_documents = AsyncMock(return_value=4)
    mock_collection.find.return_value = cursor

    result = await service.get_all_documents({}, {"pagination": False})

    cursor.skip.assert_not_called()
    cursor.to_list.assert_awaited_once_with(length=None)
    assert result["data"] == documents
    assert result["paginator"]["perPage"] == 4
    assert result["paginator"]["pageCount"] == 1
    assert result["paginator"]["hasNextPage"] is False


@pytest.mark.asyncio
async def test_get_all_documents_defaults(service, mock_collection):
    cursor = _cursor([])
    mock_collection.count_documents = AsyncMock(return_value=0)
    mock_collection.find.return_value = cursor

    result = await service.get_all_documents()

    mock_collection.find.assert_called_once_with({}, None)
    cursor.sort.assert_not_called()
    assert result["data"] == []
    assert result["paginator"]["currentPage"] == 1
    assert result["paginator"]["pageCount"] == 1
    assert result["paginator"]["prev"] is None


@pytest.mark.asyncio
async def test_count_document_never_reads_documents(service, mock_collection):
    mock_collection.count_documents = AsyncMock(return_value=12)

    assert await service.count_document({"id": HEX_ID}) == 12

    mock_collection.count_documents.assert_awaited_once_with({"_id": ObjectId(HEX_ID)})
    mock_collection.find.assert_not_called()


@pytest.mark.asyncio
async def test_bulk_update_filters_by_owner(service, mock_collection):
    mock_collection.update_many = AsyncMock(return_value=MagicMock(modified_count=1))

    await service.bulk_update({"addedBy": HEX_ID}, {"isActive": False})

    query, _ = mock_collection.update_many.await_args.args
    assert query == {"addedBy": ObjectId(HEX_ID)}


@pytest.mark.asyncio
async def test_get_single_document(service, mock_collection):
    mock_collection.find_one = AsyncMock(return_value={"_id": ObjectId(HEX_ID)})

    found = await service.get_single_document({"_id": HEX_ID})

    assert found == {"_id": ObjectId(HEX_ID)}
    mock_collection.find_one.assert_awaited_once_with({"_id": ObjectId(HEX_ID)}, None)


@pytest.mark.asyncio
async def test_find_one_and_update_sets_timestamp(service, mock_collection):
    mock_collection.find_one_and_update = AsyncMock(return_value={"_id": ObjectId(HEX_ID), "isDeleted": True})

    updated = await service.find_one_and_update_document({"_id": HEX_ID}, {"isDeleted": True})

    query, update = mock_collection.find_one_and_update.await_args.args
    assert query == {"_id": ObjectId(HEX_ID)}
    assert update["$set"]["isDeleted"] is True
    assert isinstance(update["$set"]["updatedAt"], datetime)
    assert mock_collection.find_one_and_update.await_args.kwargs["return_document"] == ReturnDocument.AFTER
    assert updated["isDeleted"] is True


@pytest.mark.asyncio
async def test_find_one_and_update_returns_original_when_requested(service, mock_collection):
    mock_collection.find_one_and_update = AsyncMock(return_value=None)

    assert await service.find_one_and_update_document({"_id": HEX_ID}, {"title": "x"}, new=False) is None
    assert mock_collection.find_one_and_update.await_args.kwargs["return_document"] == ReturnDocument.BEFORE


@pytest.mark.asyncio
async def test_bulk_update_returns_modified_count(service, mock_collection):
    mock_collection.update_many = AsyncMock(return_value=MagicMock(modified_count=3))

    modified = await service.bulk_update({"_id": {"$in": [HEX_ID]}}, {"isDeleted": True})

    assert modified == 3
    query, update = mock_collection.update_many.await_args.args
    assert query == {"_id": {"$in": [ObjectId(HEX_ID)]}}
    assert update["$set"]["isDeleted"] is True


@pytest.mark.asyncio
async def test_delete_many_returns_deleted_count(service, mock_collection):
    mock_collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))

    assert await service.delete_many({"_id": {"$in": [HEX_ID]}}) == 2


@pytest.mark.asyncio
async def test_find_one_and_delete(service, mock_collection):
    mock_collection.find_one_and_delete = AsyncMock(return_value={"_id": ObjectId(HEX_ID)})

    deleted = await service.find_one_and_delete_document({"_id": HEX_ID})

    assert deleted == {"_id": ObjectId(HEX_ID)}
    mock_collection.find_one_and_delete.assert_awaited_once_with({"_id": ObjectId(HEX_ID)})
