"""
# Database Management Module

This module provides the **MongoDB infrastructure** for the Admin Backend.
The `DatabaseManager` class owns the **Motor** async client and hands out
collections to the generic document service.

## Key Features

### 1. Connection Lifecycle Management
- **Async Initialization**: Connection established during application startup.
- **Exponential Backoff**: Up to 3 attempts (1s, 2s between them).
- **Graceful Shutdown**: Client closed on application shutdown.

### 2. Connection Pooling
Motor/PyMongo pool sized by `MONGODB_MIN_POOL_SIZE` / `MONGODB_MAX_POOL_SIZE`.
Request handlers never manage connections themselves.

### 3. Observability
- `db_logger` (`[DATABASE]`): connection and index events.
- `perf_logger` (`[DB_PERFORMANCE]`): timings.
- `health_logger` (`[DB_HEALTH]`): health check outcomes.

## Usage

```python
from admin_backend.database import db_manager

await db_manager.connect()
blogs = db_manager.get_collection("blog")
blog = await blogs.find_one({"title": "Hello"})
await db_manager.disconnect()
```

## Module Attributes

Attributes:
    db_manager (DatabaseManager): Global singleton used throughout the application.
"""

import asyncio
import time
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from admin_backend.config import settings
from admin_backend.managers.logging_manager import get_logger

db_logger = get_logger(prefix="[DATABASE]")
perf_logger = get_logger(prefix="[DB_PERFORMANCE]")
health_logger = get_logger(prefix="[DB_HEALTH]")

# Collection name -> list of (keys, options)
COLLECTION_INDEXES: Dict[str, list] = {
    "blog": [
        ([("isDeleted", ASCENDING)], {"name": "isDeleted_1"}),
        ([("addedBy", ASCENDING)], {"name": "addedBy_1"}),
        ([("createdAt", DESCENDING)], {"name": "createdAt_-1"}),
    ],
}


class DatabaseManager:
    """
    Manages the MongoDB client, collections and indexes.

    **Lifecycle:**
    1. **Instantiation**: `client` and `database` are `None`.
    2. **Connection**: `connect()` creates the client and pings the server.
    3. **Operations**: `get_collection()` returns Motor collections.
    4. **Shutdown**: `disconnect()` closes the client.

    Attributes:
        client (`Optional[AsyncIOMotorClient]`): Motor client, set by `connect()`.
        database (`Optional[AsyncIOMotorDatabase]`): Selected database, set by `connect()`.
    """

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._connection_retries = 3

    def _build_connection_string(self) -> str:
        if settings.MONGODB_USERNAME and settings.MONGODB_PASSWORD:
            password = settings.MONGODB_PASSWORD.get_secret_value()
            db_logger.debug("Using authenticated connection to MongoDB")
            return (
                f"mongodb://{settings.MONGODB_USERNAME}:{password}@"
                f"{settings.MONGODB_URL.replace('mongodb://', '')}"
            )
        db_logger.debug("Using unauthenticated connection to MongoDB")
        return settings.MONGODB_URL

    async def connect(self):
        """
        Establish the MongoDB connection with exponential backoff.

        Raises:
            ServerSelectionTimeoutError: If MongoDB is unreachable after all attempts.
            ConnectionFailure: If the last attempt is refused or fails authentication.
        """
        start_time = time.time()
        db_logger.info("Starting MongoDB connection process")

        for attempt in range(self._connection_retries):
            attempt_start = time.time()
            try:
                db_logger.info("Connection attempt %d/%d to MongoDB", attempt + 1, self._connection_retries)
                db_logger.info(
                    "MongoDB connection config - Database: %s, MaxPool: %d, MinPool: %d, ServerTimeout: %dms, ConnTimeout: %dms",
                    settings.MONGODB_DATABASE,
                    settings.MONGODB_MAX_POOL_SIZE,
                    settings.MONGODB_MIN_POOL_SIZE,
                    settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    settings.MONGODB_CONNECTION_TIMEOUT,
                )

                self.client = AsyncIOMotorClient(
                    self._build_connection_string(),
                    serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT,
                    connectTimeoutMS=settings.MONGODB_CONNECTION_TIMEOUT,
                    maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
                    minPoolSize=settings.MONGODB_MIN_POOL_SIZE,
                )
                self.database = self.client[settings.MONGODB_DATABASE]

                ping_start = time.time()
                await self.client.admin.command("ping")
                ping_duration = time.time() - ping_start

                perf_logger.info(
                    "MongoDB connection established in %.3fs (ping: %.3fs)", time.time() - start_time, ping_duration
                )
                db_logger.info("Successfully connected to MongoDB database: %s", settings.MONGODB_DATABASE)
                return

            except (ServerSelectionTimeoutError, ConnectionFailure) as e:
                perf_logger.warning("Connection attempt %d failed after %.3fs", attempt + 1, time.time() - attempt_start)
                db_logger.warning(
                    "Failed to connect to MongoDB (attempt %d/%d): %s", attempt + 1, self._connection_retries, e
                )
                if attempt == self._connection_retries - 1:
                    db_logger.error("All connection attempts failed after %.3fs", time.time() - start_time)
                    raise

                backoff_time = 2**attempt
                db_logger.info("Waiting %.1fs before retry (exponential backoff)", backoff_time)
                await asyncio.sleep(backoff_time)

    async def disconnect(self):
        """Close the Motor client. Safe to call when not connected."""
        start_time = time.time()
        db_logger.info("Starting MongoDB disconnection process")

        if not self.client:
            db_logger.warning("Disconnect called but no active MongoDB connection found")
            return

        self.client.close()
        self.client = None
        self.database = None
        perf_logger.info("MongoDB disconnection completed in %.3fs", time.time() - start_time)
        db_logger.info("Successfully disconnected from MongoDB")

    async def health_check(self) -> bool:
        """
        Ping the server.

        Returns:
            `bool`: `True` if the database answered the ping, `False` otherwise.
        """
        if self.client is None:
            health_logger.warning("Health check failed: No database client available")
            return False

        start_time = time.time()
        try:
            await self.client.admin.command("ping")
            perf_logger.debug("Database health check completed in %.3fs", time.time() - start_time)
            return True
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            health_logger.error("Database health check failed: %s", e)
            return False
        except PyMongoError as e:
            health_logger.error("Unexpected error during health check: %s", e)
            return False

    def get_collection(self, collection_name: str) -> AsyncIOMotorCollection:
        """
        Return a Motor collection from the connected database.

        Args:
            collection_name (`str`): Name of the collection, e.g. `"blog"`.

        Raises:
            `ConnectionError`: If `connect()` has not been called.
        """
        if self.database is None:
            db_logger.error("Attempted to get collection '%s' without database connection", collection_name)
            raise ConnectionError("Database not connected. Call connect() first.")

        return self.database[collection_name]

    async def create_indexes(self):
        """Create the indexes declared in `COLLECTION_INDEXES`."""
        start_time = time.time()
        db_logger.info("Starting database index creation process")

        for collection_name, indexes in COLLECTION_INDEXES.items():
            collection = self.get_collection(collection_name)
            for keys, options in indexes:
                await self._create_index(collection, keys, options)

        perf_logger.info("Database index creation completed in %.3fs", time.time() - start_time)

    async def _create_index(self, collection: AsyncIOMotorCollection, keys: list, options: Dict[str, Any]):
        try:
            await collection.create_index(keys, **options)
            db_logger.debug("Ensured index %s on '%s'", options.get("name"), collection.name)
        except PyMongoError as e:
            db_logger.error("Failed to create index %s on '%s': %s", options.get("name"), collection.name, e)
            raise


db_manager = DatabaseManager()
