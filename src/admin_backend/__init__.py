"""
# Admin Backend

FastAPI service exposing the admin CRUD API for blog content stored in
MongoDB.

## Layout

- **`config`**: `Settings` loaded from the environment and `.env` files.
- **`database`**: `DatabaseManager` owning the Motor client.
- **`models`**: Pydantic request, filter and document models.
- **`services`**: request validation and the generic `DocumentService`.
- **`routes`**: `/admin/blog` handlers, authentication dependency, health probes.
- **`utils`** / **`managers`**: response envelopes and logging.
- **`main`**: the FastAPI application.
"""

__version__ = "1.0.0"
