import os
from unittest.mock import AsyncMock, MagicMock, patch

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DEFAULT_LOG_LEVEL", "WARNING")

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

USER_ID = ObjectId("65a1b2c3d4e5f6a7b8c9d0e1")

SERVICE_METHODS = (
    "create_document",
    "bulk_insert",
    "get_all_documents",
    "get_single_document",
    "count_document",
    "find_one_and_update_document",
    "bulk_update",
    "delete_many",
    "find_one_and_delete_document",
)


@pytest.fixture
def current_user():
    return {
        "_id": USER_ID,
        "id": str(USER_ID),
        "username": "admin",
        "isActive": True,
        "isDeleted": False,
    }


@pytest.fixture
def mock_blog_service():
    with patch("admin_backend.routes.admin.blog.blog_service") as mock:
        for name in SERVICE_METHODS:
            setattr(mock, name, AsyncMock())
        yield mock


@pytest.fixture
def app(current_user):
    from admin_backend.main import app
    from admin_backend.routes.auth.dependencies import get_current_user_dep

    app.dependency_overrides[get_current_user_dep] = lambda: current_user
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client_factory(app):
    def make_client():
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return make_client


@pytest.fixture
def mock_collection():
    with patch("admin_backend.services.db_service.db_manager") as mock:
        collection = MagicMock()
        mock.get_collection.return_value = collection
        yield collection
