"""Task service - task operations kept in sync with the aggregated view."""

from __future__ import annotations

from datetime import date

from taskflow_cli.api.tasks import TasksAPI
from taskflow_cli.errors import NotFound
from taskflow_cli.models import Task
from taskflow_cli.services.reconciler import (
    MutationReconciler,
    MutationResult,
    ReconcileOutcome,
)


class TaskService:
    """Service for task business logic."""

    def __init__(self, tasks_api: TasksAPI, reconciler: MutationReconciler):
        self.tasks_api = tasks_api
        self.reconciler = reconciler

    async def create_task(
        self,
        project_id: int,
        title: str,
        *,
        description: str = "",
        due_date: date | None = None,
    ) -> MutationResult[Task]:
        """Create a task and append it to its project's list."""
        try:
            task = await self.tasks_api.create_task(
                project_id, title, description=description, due_date=due_date
            )
        except NotFound:
            self.reconciler.require_reload(f"project {project_id} not found")
            raise
        return MutationResult(task, self.reconciler.on_task_created(task))

    async def toggle_task(self, task_id: int) -> MutationResult[Task]:
        """Flip a task's completion state."""
        try:
            task = await self.tasks_api.toggle_complete(task_id)
        except NotFound:
            self.reconciler.require_reload(f"task {task_id} not found")
            raise
        return MutationResult(task, self.reconciler.on_task_toggled(task))

    async def update_task(
        self,
        task_id: int,
        title: str,
        *,
        description: str = "",
        due_date: date | None = None,
    ) -> MutationResult[Task]:
        """Replace a task's title, description and due date."""
        try:
            task = await self.tasks_api.update_task(
                task_id, title, description=description, due_date=due_date
            )
        except NotFound:
            self.reconciler.require_reload(f"task {task_id} not found")
            raise
        return MutationResult(task, self.reconciler.on_task_updated(task))

    async def delete_task(self, task_id: int) -> ReconcileOutcome:
        """Delete a task and drop it from its project's list."""
        try:
            await self.tasks_api.delete_task(task_id)
        except NotFound:
            self.reconciler.require_reload(f"task {task_id} not found")
            raise
        return self.reconciler.on_task_deleted(task_id)
