"""
Shapes shared by every resource: row ids, the pagination envelope and
partial-update helpers.
"""

from typing import Annotated, Any, Dict, Generic, List, TypeVar

from fastapi import Path
from pydantic import BaseModel, Field

T = TypeVar("T")

# Row ids are 64-bit signed integers in the store
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

RowId = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]
IdPath = Annotated[int, Path(ge=INT64_MIN, le=INT64_MAX)]


class Page(BaseModel, Generic[T]):
    """Pagination envelope returned by list endpoints"""
    page: int = Field(..., ge=1, description="1-based page number, offset // limit + 1")
    count: int = Field(..., ge=0, description="Total rows in the table, unfiltered")
    items: List[T]


def page_number(offset: int, limit: int) -> int:
    """
    Compute the 1-based page for an offset/limit pair.

    Raises:
        ValueError: if limit is not positive
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    return offset // limit + 1


def provided_fields(update: BaseModel) -> Dict[str, Any]:
    """
    Fields the client actually supplied in a partial update.

    Absent fields and explicit nulls both mean "keep the stored value".
    """
    return {
        name: value
        for name, value in update.model_dump(exclude_unset=True).items()
        if value is not None
    }
