"""Tasks API endpoints."""

from simpletasks.api.client import APIClient
from simpletasks.models import Task, TaskRequest, TasksPage


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self, page: int) -> TasksPage:
        """List one page of tasks. Pages start at 1."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        response = await self.client.get("/tasks", params={"page": page})
        return self.client.decode(response, TasksPage)

    async def create_task(self, request: TaskRequest) -> Task:
        """Create a new task."""
        response = await self.client.post("/tasks", json=request.to_payload())
        return self.client.decode(response, Task, key="task")

    async def update_task(self, task_id: int, request: TaskRequest) -> Task:
        """Replace the fields of an existing task."""
        response = await self.client.put(f"/tasks/{task_id}", json=request.to_payload())
        return self.client.decode(response, Task, key="task")

    async def delete_task(self, task_id: int) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")
