"""
# Data Models Package

Pydantic models of the admin backend.

- **`blog_models`**: request schemas (`BlogCreateRequest`, `BlogUpdateRequest`),
  list/count filter envelopes (`BlogFindFilter`, `ListOptions`) and the stored
  `BlogDocument`.
"""

from admin_backend.models.blog_models import (
    BLOG_COLLECTION,
    BLOG_MODEL_FIELDS,
    BlogCreateRequest,
    BlogDocument,
    BlogFindFilter,
    BlogQuery,
    BlogUpdateRequest,
    ListOptions,
)

__all__ = [
    "BLOG_COLLECTION",
    "BLOG_MODEL_FIELDS",
    "BlogCreateRequest",
    "BlogDocument",
    "BlogFindFilter",
    "BlogQuery",
    "BlogUpdateRequest",
    "ListOptions",
]
