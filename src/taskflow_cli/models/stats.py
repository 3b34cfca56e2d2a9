"""Derived statistics models. None of these are persisted."""

from enum import Enum

from pydantic import BaseModel, Field

from taskflow_cli.models.project import Project
from taskflow_cli.models.task import Task


class DueUrgency(str, Enum):
    """Classification of a due date relative to the current day."""

    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    UPCOMING = "upcoming"
    NONE = "none"


class ProjectStats(BaseModel):
    """Completion statistics for one project."""

    project_id: int | None = None
    total_tasks: int = Field(default=0, ge=0)
    completed_tasks: int = Field(default=0, ge=0)
    progress_percentage: int = Field(default=0, ge=0, le=100)


class ProjectWithStats(BaseModel):
    """A project joined with its tasks and the stats derived from them."""

    project: Project
    tasks: list[Task] = Field(default_factory=list)
    stats: ProjectStats


class DashboardSummary(BaseModel):
    """Totals across every project of the current user."""

    total_projects: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    overall_progress: int = 0
    recent_projects: list[ProjectWithStats] = Field(default_factory=list)
    skipped_projects: list[Project] = Field(default_factory=list)
