"""HTTP client for the SimpleTasks REST API."""

from simpletasks.api.auth import AuthAPI
from simpletasks.api.client import APIClient, TasksClientError
from simpletasks.api.tasks import TasksAPI

__all__ = ["APIClient", "AuthAPI", "TasksAPI", "TasksClientError"]
