from __future__ import annotations

from typing import Generic, List, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageMeta(BaseModel):
    limit: int = Field(ge=1, le=200)
    offset: int = Field(ge=0)
    total: int = Field(ge=0)
    has_more: bool = False


class Page(BaseModel, Generic[T]):
    """List envelope shared by paginated endpoints."""

    items: List[T]
    meta: PageMeta

    @classmethod
    def build(cls, items: Sequence[T], *, limit: int, offset: int, total: int) -> "Page[T]":
        return cls(
            items=list(items),
            meta=PageMeta(limit=limit, offset=offset, total=total, has_more=offset + len(items) < total),
        )
