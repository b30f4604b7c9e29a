"""Task data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TaskPriority(str, Enum):
    """Task priority, serialised with the API's wire values."""

    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class Task(BaseModel):
    """Task model."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str = Field(min_length=1)
    due_by: Optional[int] = Field(default=None, alias="dueBy")
    priority: TaskPriority = TaskPriority.LOW


class TaskRequest(BaseModel):
    """Body of a create or update request."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    due_by: Optional[int] = Field(default=None, alias="dueBy")
    priority: TaskPriority = TaskPriority.LOW

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PageMeta(BaseModel):
    """Pagination metadata of a task listing."""

    current: int
    limit: int
    count: int

    @property
    def has_next_page(self) -> bool:
        """Whether the server holds more tasks past the current page."""
        if self.limit <= 0:
            return False
        return self.count / self.limit > self.current


class TasksPage(BaseModel):
    """One page of tasks as returned by ``GET /tasks``."""

    tasks: list[Task] = Field(default_factory=list)
    meta: PageMeta
