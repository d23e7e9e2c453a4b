"""
# Blog Models

Pydantic models for the `blog` collection of the admin backend.

## Model Overview

- **Request schemas**: `BlogCreateRequest`, `BlogUpdateRequest` validate
  incoming payloads. Unknown keys are tolerated at validation time.
- **Filter schemas**: `BlogQuery`, `ListOptions` and `BlogFindFilter`
  validate the `{query, options, isCountOnly}` / `{where}` envelopes of the
  list and count endpoints.
- **Document model**: `BlogDocument` is the persisted shape. Building a
  document through it drops unknown keys and applies defaults.

Field names are camelCase because they are the stored and wire names.

## Content Safety

`title`, `alternativeHeadline` and `author` are stripped of all HTML.
`articleBody` keeps an allow-list of formatting tags; scripts and iframes are
removed.
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional, Union

import bleach
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from admin_backend.config import settings

BLOG_COLLECTION = "blog"

OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"

ARTICLE_ALLOWED_TAGS = [
    "p", "br", "strong", "em", "code", "pre", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote", "a", "img", "hr", "table", "thead", "tbody",
    "tr", "th", "td",
]

ObjectIdString = Annotated[str, StringConstraints(pattern=OBJECT_ID_PATTERN)]

# Query values accepted per field: exact value, list of values, or an operator document
StringFilter = Union[List[Any], str, Dict[str, Any]]
BoolFilter = Union[bool, Dict[str, Any]]
DateFilter = Union[datetime, List[Any], Dict[str, Any]]


def _strip_html(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return bleach.clean(value, tags=[], strip=True).strip()


def _clean_article(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    return bleach.clean(value, tags=ARTICLE_ALLOWED_TAGS, strip=True)


class BlogCreateRequest(BaseModel):
    """
    Request schema for creating a blog.

    `title` is required. Unknown keys are accepted here and dropped later when
    the stored document is built.
    """

    model_config = ConfigDict(extra="allow")

    title: str = Field(..., min_length=1, max_length=300, description="Blog title")
    alternativeHeadline: Optional[str] = Field(None, max_length=300, description="Secondary headline")
    image: Optional[str] = Field(None, description="Cover image URL")
    publishDate: Optional[datetime] = Field(None, description="Publication date")
    author: Optional[str] = Field(None, max_length=200, description="Author display name")
    articleBody: Optional[str] = Field(None, description="Article body (HTML)")
    isActive: Optional[bool] = Field(None, description="Whether the blog is active")
    isDeleted: Optional[bool] = Field(None, description="Soft-delete flag")

    @field_validator("title", "alternativeHeadline", "author")
    @classmethod
    def validate_plain_text(cls, v):
        return _strip_html(v)

    @field_validator("articleBody")
    @classmethod
    def validate_article_body(cls, v):
        return _clean_article(v)


class BlogUpdateRequest(BaseModel):
    """
    Request schema for full and partial updates. Every field is optional.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[ObjectIdString] = Field(None, alias="_id", description="Document identifier")
    title: Optional[str] = Field(None, min_length=1, max_length=300, description="Blog title")
    alternativeHeadline: Optional[str] = Field(None, max_length=300, description="Secondary headline")
    image: Optional[str] = Field(None, description="Cover image URL")
    publishDate: Optional[datetime] = Field(None, description="Publication date")
    author: Optional[str] = Field(None, max_length=200, description="Author display name")
    articleBody: Optional[str] = Field(None, description="Article body (HTML)")
    isActive: Optional[bool] = Field(None, description="Whether the blog is active")
    isDeleted: Optional[bool] = Field(None, description="Soft-delete flag")

    @field_validator("title", "isActive", "isDeleted", mode="before")
    @classmethod
    def reject_null(cls, v):
        # Omitted fields stay unchanged; explicit null is never stored
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("title", "alternativeHeadline", "author")
    @classmethod
    def validate_plain_text(cls, v):
        return _strip_html(v)

    @field_validator("articleBody")
    @classmethod
    def validate_article_body(cls, v):
        return _clean_article(v)


class BlogQuery(BaseModel):
    """Per-field value types allowed inside `query` / `where`."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Any = None
    object_id: Optional[Union[List[ObjectIdString], ObjectIdString, Dict[str, Any]]] = Field(None, alias="_id")
    title: Optional[StringFilter] = None
    alternativeHeadline: Optional[StringFilter] = None
    image: Optional[StringFilter] = None
    publishDate: Optional[DateFilter] = None
    author: Optional[StringFilter] = None
    articleBody: Optional[StringFilter] = None
    isActive: Optional[BoolFilter] = None
    isDeleted: Optional[BoolFilter] = None
    addedBy: Optional[Union[List[ObjectIdString], ObjectIdString, Dict[str, Any]]] = None
    updatedBy: Optional[Union[List[ObjectIdString], ObjectIdString, Dict[str, Any]]] = None


class ListOptions(BaseModel):
    """
    Pagination options of the list endpoint.

    `sort` maps field names to `1`/`-1` (or `"asc"`/`"desc"`); `select` is a
    list of field names or a projection mapping. `populate` is accepted and
    ignored.
    """

    model_config = ConfigDict(extra="forbid")

    page: int = Field(1, ge=1, description="1-based page number")
    limit: int = Field(settings.DEFAULT_PAGE_LIMIT, ge=1, description="Page size")
    pagination: bool = Field(True, description="Set false to return every match")
    sort: Optional[Dict[str, Union[int, str]]] = Field(None, description="Sort specification")
    select: Optional[Union[List[str], Dict[str, int]]] = Field(None, description="Projection")
    populate: Optional[Any] = Field(None, description="Accepted for compatibility, ignored")
    lean: Optional[bool] = Field(None, description="Accepted for compatibility, ignored")

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v):
        if v > settings.MAX_PAGE_LIMIT:
            raise ValueError(f"must be less than or equal to {settings.MAX_PAGE_LIMIT}")
        return v

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v):
        if v is None:
            return v
        for direction in v.values():
            if direction not in (1, -1, "asc", "desc", "ascending", "descending"):
                raise ValueError("sort direction must be one of 1, -1, 'asc', 'desc'")
        return v


class BlogFindFilter(BaseModel):
    """Envelope of the list and count endpoints."""

    model_config = ConfigDict(extra="allow")

    query: Optional[BlogQuery] = None
    where: Optional[BlogQuery] = None
    options: Optional[ListOptions] = None
    isCountOnly: bool = False
    select: Optional[Union[List[str], Dict[str, int]]] = None
    populate: Optional[Any] = None


class BlogDocument(BaseModel):
    """
    MongoDB document model for the `blog` collection.

    `createdAt`/`updatedAt` are stamped by the document service.
    """

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True)

    title: str = Field(..., min_length=1, max_length=300)
    alternativeHeadline: Optional[str] = Field(None, max_length=300)
    image: Optional[str] = None
    publishDate: Optional[datetime] = None
    author: Optional[str] = Field(None, max_length=200)
    articleBody: Optional[str] = None
    isActive: bool = True
    isDeleted: bool = False
    addedBy: Optional[Any] = None
    updatedBy: Optional[Any] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @field_validator("title", "alternativeHeadline", "author")
    @classmethod
    def validate_plain_text(cls, v):
        return _strip_html(v)

    @field_validator("articleBody")
    @classmethod
    def validate_article_body(cls, v):
        return _clean_article(v)


BLOG_MODEL_FIELDS = frozenset(BlogDocument.model_fields)
