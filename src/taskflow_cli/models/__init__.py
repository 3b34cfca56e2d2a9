"""TaskFlow CLI domain models.

Pydantic models for the entities exchanged with the TaskFlow API and the
statistics derived from them on the client.
"""

from .project import Project, ProjectCreate, ProjectProgress, ProjectUpdate
from .stats import DashboardSummary, DueUrgency, ProjectStats, ProjectWithStats
from .task import Task, TaskCreate, TaskUpdate
from .user import Identity, LoginResponse, Session

__all__ = [
    # Project models
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectProgress",
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    # Derived models
    "ProjectStats",
    "ProjectWithStats",
    "DashboardSummary",
    "DueUrgency",
    # Session models
    "Identity",
    "Session",
    "LoginResponse",
]
