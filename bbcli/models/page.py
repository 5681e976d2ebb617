"""Paginated response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint: ``{values, size, next}``."""

    model_config = ConfigDict(extra="ignore")

    values: list[T] = Field(default_factory=list)
    size: int | None = None
    page: int | None = None
    pagelen: int | None = None
    next: str | None = None
