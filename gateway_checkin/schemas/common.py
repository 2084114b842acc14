"""Common schemas used across the application."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every check-in endpoint."""

    success: bool = True
    message: str = ""
    data: T | None = None


class PageInfo(BaseModel, Generic[T]):
    """One page of items with its position in the full result."""

    page: int
    page_size: int
    total: int
    items: list[T] = Field(default_factory=list)


def normalize_pagination(page: int | None, page_size: int | None) -> tuple[int, int]:
    """Clamp paging input: page below 1 becomes 1, page_size outside
    [1, MAX_PAGE_SIZE] becomes DEFAULT_PAGE_SIZE."""
    if page is None or page < 1:
        page = 1
    if page_size is None or page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def error_envelope(message: str) -> dict[str, Any]:
    """Body for a business failure (``success: false``)."""
    return {"success": False, "message": message}
