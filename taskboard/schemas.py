"""Request/response schemas. JSON on the wire is camelCase."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[T]):
    """Uniform wrapper returned by every endpoint"""

    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None


# Categories


class CategoryCreate(CamelModel):
    name: str | None = None
    color: str | None = None


class CategoryUpdate(CamelModel):
    """All fields optional; only the ones sent are applied"""

    name: str | None = None
    color: str | None = None


class CategorySummary(CamelModel):
    id: int
    name: str
    color: str


class CategoryRead(CategorySummary):
    created_at: datetime
    updated_at: datetime


# Tasks


class TaskCreate(CamelModel):
    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    category_id: int | None = None


class TaskUpdate(CamelModel):
    """All fields optional; only the ones sent are applied"""

    title: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    category_id: int | None = None


class TaskRead(CamelModel):
    id: int
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: datetime | None = None
    category_id: int | None = None
    created_at: datetime
    updated_at: datetime
    category: CategorySummary | None = None


class TaskFilters(CamelModel):
    status: str | None = None
    priority: str | None = None
    category_id: int | None = None
    search: str | None = None

    def to_query_params(self) -> dict[str, str]:
        """Non-empty filters keyed by their query-string names."""
        params = {}
        for name, value in self.model_dump(by_alias=True).items():
            if value not in (None, ""):
                params[name] = str(value)
        return params


class TaskStatistics(CamelModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    high_priority: int = 0
    overdue: int = 0
