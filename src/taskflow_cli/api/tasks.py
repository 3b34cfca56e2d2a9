"""Tasks API endpoints."""

from datetime import date
from typing import Optional

from pydantic import TypeAdapter

from taskflow_cli.api.client import APIClient, parse_response, validate_input
from taskflow_cli.models import Task, TaskCreate, TaskUpdate

_task_list = TypeAdapter(list[Task])


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self, project_id: int) -> list[Task]:
        """List the tasks of one project."""
        response = await self.client.get(f"/projects/{project_id}/tasks")
        return parse_response(response, _task_list)

    async def create_task(
        self,
        project_id: int,
        title: str,
        *,
        description: str = "",
        due_date: Optional[date] = None,
    ) -> Task:
        """Create a new task in a project."""
        body = validate_input(
            TaskCreate, title=title, description=description, due_date=due_date
        )
        response = await self.client.post(
            f"/projects/{project_id}/tasks", json=body.to_payload(exclude_none=True)
        )
        return parse_response(response, Task)

    async def toggle_complete(self, task_id: int) -> Task:
        """Flip a task between completed and pending."""
        response = await self.client.patch(f"/tasks/{task_id}/complete")
        return parse_response(response, Task)

    async def update_task(
        self,
        task_id: int,
        title: str,
        *,
        description: str = "",
        due_date: Optional[date] = None,
    ) -> Task:
        """Replace a task's title, description and due date."""
        body = validate_input(
            TaskUpdate, title=title, description=description, due_date=due_date
        )
        response = await self.client.patch(f"/tasks/{task_id}", json=body.to_payload())
        return parse_response(response, Task)

    async def delete_task(self, task_id: int) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")
