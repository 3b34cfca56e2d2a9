"""Project data models."""

from datetime import datetime

from pydantic import AliasChoices, Field, field_validator

from taskflow_cli.models._base import APIModel

PROJECT_TITLE_MAX = 100
PROJECT_DESCRIPTION_MAX = 500


class Project(APIModel):
    """Project model.

    Attributes:
        id: Unique identifier for the project
        title: Project title
        description: Free-form description, empty when not set
        owner_id: Identifier of the owning user (``userId`` on the wire)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    id: int
    title: str
    description: str = ""
    owner_id: int | None = Field(
        default=None, validation_alias=AliasChoices("userId", "ownerId", "owner_id")
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class ProjectCreate(APIModel):
    """Body for creating or updating a project.

    PUT /projects/{id} replaces both fields, so the same shape serves updates.
    """

    title: str = Field(min_length=1, max_length=PROJECT_TITLE_MAX)
    description: str = Field(default="", max_length=PROJECT_DESCRIPTION_MAX)

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


ProjectUpdate = ProjectCreate


class ProjectProgress(APIModel):
    """Server-computed progress for one project (GET /projects/{id}/progress)."""

    project_id: int
    project_title: str = ""
    total_tasks: int = 0
    completed_tasks: int = 0
    progress_percentage: float = 0.0
