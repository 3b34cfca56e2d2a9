"""Task data models."""

from datetime import date, datetime

from pydantic import Field, field_validator

from taskflow_cli.models._base import APIModel

TASK_TITLE_MAX = 200


class Task(APIModel):
    """Task model.

    A task belongs to exactly one project for its whole lifetime.
    """

    id: int
    title: str
    description: str = ""
    due_date: date | None = None
    is_completed: bool = False
    project_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class TaskCreate(APIModel):
    """Body for POST /projects/{id}/tasks and PATCH /tasks/{id}."""

    title: str = Field(min_length=1, max_length=TASK_TITLE_MAX)
    description: str = ""
    due_date: date | None = None

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


TaskUpdate = TaskCreate
