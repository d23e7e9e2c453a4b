from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from admin_backend.database.manager import COLLECTION_INDEXES, DatabaseManager


def _client():
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1})
    return client


def test_get_collection_requires_connection():
    manager = DatabaseManager()

    with pytest.raises(ConnectionError):
        manager.get_collection("blog")


@pytest.mark.asyncio
async def test_connect_pings_server():
    client = _client()
    manager = DatabaseManager()

    with patch("admin_backend.database.manager.AsyncIOMotorClient", return_value=client):
        await manager.connect()

    client.admin.command.assert_awaited_once_with("ping")
    assert manager.client is client
    assert manager.database is client.__getitem__.return_value


@pytest.mark.asyncio
async def test_connect_retries_with_backoff():
    client = _client()
    client.admin.command.side_effect = [ServerSelectionTimeoutError("down"), {"ok": 1}]
    manager = DatabaseManager()

    with patch("admin_backend.database.manager.AsyncIOMotorClient", return_value=client), patch(
        "admin_backend.database.manager.asyncio.sleep", new=AsyncMock()
    ) as sleep:
        await manager.connect()

    assert client.admin.command.await_count == 2
    sleep.assert_awaited_once_with(1)


@pytest.mark.asyncio
async def test_connect_gives_up_after_last_attempt():
    client = _client()
    client.admin.command.side_effect = ServerSelectionTimeoutError("down")
    manager = DatabaseManager()

    with patch("admin_backend.database.manager.AsyncIOMotorClient", return_value=client), patch(
        "admin_backend.database.manager.asyncio.sleep", new=AsyncMock()
    ):
        with pytest.raises(ServerSelectionTimeoutError):
            await manager.connect()

    assert client.admin.command.await_count == 3


@pytest.mark.asyncio
async def test_health_check():
    manager = DatabaseManager()
    assert await manager.health_check() is False

    manager.client = _client()
    assert await manager.health_check() is True

    manager.client.admin.command.side_effect = ServerSelectionTimeoutError("down")
    assert await manager.health_check() is False


@pytest.mark.asyncio
async def test_disconnect_closes_client():
    manager = DatabaseManager()
    client = _client()
    manager.client = client
    manager.database = MagicMock()

    await manager.disconnect()

    client.close.assert_called_once()
    assert manager.client is None
    assert manager.database is None


@pytest.mark.asyncio
async def test_create_indexes():
    manager = DatabaseManager()
    collection = MagicMock()
    collection.create_index = AsyncMock()
    manager.database = MagicMock()
    manager.database.__getitem__.return_value = collection

    await manager.create_indexes()

    names = [call.kwargs["name"] for call in collection.create_index.await_args_list]
    assert names == [options["name"] for _, options in COLLECTION_INDEXES["blog"]]
