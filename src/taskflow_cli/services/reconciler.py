"""Keeps the in-memory project/task view consistent after single mutations.

The reconciler is the only writer of the aggregated view. It accepts a fresh
load result or the entity returned by a completed API call, and updates just
the affected project. Every change to the task set of a project goes through
``recompute_stats`` so stats always follow the same rounding rule.

Load cycles are stamped with a generation number. Any later load, mutation or
``invalidate()`` moves the generation forward, and a load result carrying an
older stamp is discarded instead of overwriting newer state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from taskflow_cli.models import (
    DashboardSummary,
    Project,
    ProjectStats,
    ProjectWithStats,
    Task,
)
from taskflow_cli.services.aggregation import compute_stats, summarize
from taskflow_cli.utils.logger import get_logger

logger = get_logger("reconciler")

T = TypeVar("T")


class ReconcileOutcome(str, Enum):
    """What the consumer should do after handing a change to the reconciler."""

    APPLIED = "applied"
    RELOAD_REQUIRED = "reload_required"
    NAVIGATE_AWAY = "navigate_away"
    STALE = "stale"


class MutationReconciler:
    """Owns the aggregated view: ordered projects, their tasks and stats."""

    def __init__(self) -> None:
        self.generation = 0
        self.active_project_id: int | None = None
        self.reload_required = False
        self.skipped_projects: list[Project] = []
        self._order: list[int] = []
        self._projects: dict[int, Project] = {}
        self._tasks: dict[int, list[Task]] = {}
        self._stats: dict[int, ProjectStats] = {}
        self._task_owner: dict[int, int] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def projects(self) -> list[ProjectWithStats]:
        """Current view in display order."""
        return [
            ProjectWithStats(
                project=self._projects[pid],
                tasks=list(self._tasks[pid]),
                stats=self._stats[pid],
            )
            for pid in self._order
        ]

    def get(self, project_id: int) -> ProjectWithStats | None:
        if project_id not in self._projects:
            return None
        return ProjectWithStats(
            project=self._projects[project_id],
            tasks=list(self._tasks[project_id]),
            stats=self._stats[project_id],
        )

    def stats(self, project_id: int) -> ProjectStats | None:
        return self._stats.get(project_id)

    def find_task(self, task_id: int) -> Task | None:
        project_id = self._task_owner.get(task_id)
        if project_id is None:
            return None
        return next(t for t in self._tasks[project_id] if t.id == task_id)

    def summary(self, recent: int = 5) -> DashboardSummary:
        return summarize(self.projects(), recent, self.skipped_projects)

    # ------------------------------------------------------------------
    # Load cycle
    # ------------------------------------------------------------------

    def begin_load(self) -> int:
        """Start a load cycle and return its generation stamp."""
        self.generation += 1
        return self.generation

    def invalidate(self) -> None:
        """Abandon the current view; in-flight loads will be discarded."""
        self.generation += 1
        self.active_project_id = None

    def apply_load(
        self,
        generation: int,
        projects: Iterable[ProjectWithStats],
        *,
        active_project_id: int | None = None,
        skipped: Iterable[Project] = (),
    ) -> ReconcileOutcome:
        """Replace the whole view with a load result, unless it is stale.

        *skipped* are projects the load could not fetch tasks for; they stay
        out of the view and are reported by ``summary()``.
        """
        if generation != self.generation:
            logger.info(
                "discarding stale load (generation %d, current %d)",
                generation,
                self.generation,
            )
            return ReconcileOutcome.STALE

        self._order = []
        self._projects = {}
        self._tasks = {}
        self._stats = {}
        self._task_owner = {}
        for item in projects:
            pid = item.project.id
            self._order.append(pid)
            self._projects[pid] = item.project
            self._tasks[pid] = list(item.tasks)
            for task in item.tasks:
                self._task_owner[task.id] = pid
            self.recompute_stats(pid)

        self.active_project_id = active_project_id
        self.reload_required = False
        self.skipped_projects = list(skipped)
        return ReconcileOutcome.APPLIED

    def recompute_stats(self, project_id: int) -> ProjectStats:
        """Rederive one project's stats from its current task list."""
        stats = compute_stats(self._tasks[project_id], project_id)
        self._stats[project_id] = stats
        return stats

    def require_reload(self, reason: str) -> ReconcileOutcome:
        """Flag the view as out of sync with the server."""
        logger.info("reload required: %s", reason)
        self.reload_required = True
        return ReconcileOutcome.RELOAD_REQUIRED

    # ------------------------------------------------------------------
    # Project mutations
    # ------------------------------------------------------------------

    def on_project_created(self, project: Project) -> ReconcileOutcome:
        """Insert a new project at the head of the list with no tasks."""
        self.generation += 1
        if project.id in self._projects:
            self._order.remove(project.id)
        else:
            self._tasks[project.id] = []
            self.recompute_stats(project.id)
        self._projects[project.id] = project
        self._order.insert(0, project.id)
        return ReconcileOutcome.APPLIED

    def on_project_updated(self, project: Project) -> ReconcileOutcome:
        """Replace the project record; tasks and stats are untouched."""
        self.generation += 1
        if project.id not in self._projects:
            return self.require_reload(f"updated project {project.id} not in view")
        self._projects[project.id] = project
        return ReconcileOutcome.APPLIED

    def on_project_deleted(self, project_id: int) -> ReconcileOutcome:
        """Drop the project with its tasks and stats.

        Returns NAVIGATE_AWAY when the deleted project was the active detail view.
        """
        self.generation += 1
        if project_id not in self._projects:
            return self.require_reload(f"deleted project {project_id} not in view")

        self._order.remove(project_id)
        del self._projects[project_id]
        del self._stats[project_id]
        for task in self._tasks.pop(project_id):
            self._task_owner.pop(task.id, None)

        if self.active_project_id == project_id:
            self.active_project_id = None
            return ReconcileOutcome.NAVIGATE_AWAY
        return ReconcileOutcome.APPLIED

    # ------------------------------------------------------------------
    # Task mutations
    # ------------------------------------------------------------------

    def on_task_created(self, task: Task) -> ReconcileOutcome:
        """Append the task to its project and refresh that project's stats."""
        self.generation += 1
        if task.project_id not in self._projects:
            return self.require_reload(
                f"task {task.id} created in project {task.project_id} not in view"
            )
        if task.id in self._task_owner:
            return self._replace_task(task)
        self._tasks[task.project_id].append(task)
        self._task_owner[task.id] = task.project_id
        self.recompute_stats(task.project_id)
        return ReconcileOutcome.APPLIED

    def on_task_toggled(self, task: Task) -> ReconcileOutcome:
        """Replace the toggled task and refresh its project's stats."""
        self.generation += 1
        return self._replace_task(task)

    def on_task_updated(self, task: Task) -> ReconcileOutcome:
        """Replace the edited task and refresh its project's stats."""
        self.generation += 1
        return self._replace_task(task)

    def on_task_deleted(self, task_id: int) -> ReconcileOutcome:
        """Remove the task and refresh its project's stats."""
        self.generation += 1
        project_id = self._task_owner.pop(task_id, None)
        if project_id is None:
            return self.require_reload(f"deleted task {task_id} not in view")
        self._tasks[project_id] = [t for t in self._tasks[project_id] if t.id != task_id]
        self.recompute_stats(project_id)
        return ReconcileOutcome.APPLIED

    def _replace_task(self, task: Task) -> ReconcileOutcome:
        if self._task_owner.get(task.id) != task.project_id:
            return self.require_reload(
                f"task {task.id} of project {task.project_id} not in view"
            )
        tasks = self._tasks[task.project_id]
        self._tasks[task.project_id] = [task if t.id == task.id else t for t in tasks]
        self.recompute_stats(task.project_id)
        return ReconcileOutcome.APPLIED


@dataclass
class MutationResult(Generic[T]):
    """The entity returned by the API and how the view absorbed it."""

    entity: T
    outcome: ReconcileOutcome
