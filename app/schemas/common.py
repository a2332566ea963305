"""
Shared schema building blocks.
Provides the camelCase base model and the success response envelopes.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
import math

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationMeta(CamelModel):
    """Page position of a paginated read."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of matching items")
    pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if total else 0)


class DataResponse(CamelModel, Generic[DataT]):
    """Success envelope: {"success": true, "data": ...}."""

    success: bool = True
    message: Optional[str] = None
    data: DataT


class PaginatedResponse(CamelModel, Generic[DataT]):
    """Success envelope for a page of results."""

    success: bool = True
    data: List[DataT]
    pagination: PaginationMeta


class MessageOnlyResponse(CamelModel):
    """Success envelope for operations with nothing to return."""

    success: bool = True
    message: str
