"""Data models for SimpleTasks."""

from simpletasks.models.auth import AuthToken, Failure
from simpletasks.models.task import PageMeta, Task, TaskPriority, TaskRequest, TasksPage

__all__ = [
    "AuthToken",
    "Failure",
    "PageMeta",
    "Task",
    "TaskPriority",
    "TaskRequest",
    "TasksPage",
]
