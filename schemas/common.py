"""Shared schema base and pagination envelope."""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Page metadata returned alongside list results."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str


class PageParams(CamelModel):
    """Resolved page and limit for a list query."""

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def reject_null(value):
    """Field validator body for partial updates of columns that cannot be NULL."""
    if value is None:
        raise ValueError("must not be null")
    return value
