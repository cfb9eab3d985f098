"""Common API response schemas."""

from math import ceil
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cardscan.errors import InputValidationError

T = TypeVar("T")

# Row offsets are bound as signed 64-bit integers by every supported driver.
MAX_ROW_OFFSET = 2**63 - 1


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(CamelModel, Generic[T]):
    """Paginated list envelope. Pages are 1-based."""

    items: list[T]
    total: int
    pages: int
    current_page: int

    @classmethod
    def build(cls, items: list[T], *, total: int, page: int, limit: int) -> "Page[T]":
        return cls(items=items, total=total, pages=page_count(total, limit), current_page=page)


class DeleteResult(CamelModel):
    """Generic delete response payload."""

    id: int
    deleted: bool


def page_count(total: int, limit: int) -> int:
    return ceil(total / limit) if limit > 0 else 0


def page_offset(page: int, limit: int) -> int:
    """Row offset of a 1-based page. Raises InputValidationError when out of range."""

    if page < 1 or limit < 1:
        raise InputValidationError("Invalid pagination parameters")
    offset = (page - 1) * limit
    if offset > MAX_ROW_OFFSET:
        raise InputValidationError("Page is out of range")
    return offset
