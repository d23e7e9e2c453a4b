"""
# Database Package

Persistence layer built on **Motor** (async MongoDB driver).

- **`manager`**: The `DatabaseManager` singleton handling connection lifecycle,
  health checks, collection access and index creation.

The `db_manager` instance is a **module-level singleton**, so one connection
pool is shared by the whole application. It connects lazily during application
startup via `db_manager.connect()`.
"""

from admin_backend.database.manager import DatabaseManager, db_manager

__all__ = ["DatabaseManager", "db_manager"]
