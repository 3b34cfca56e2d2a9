"""Aggregation of projects and tasks into dashboard statistics.

The pure helpers here (``compute_stats``, ``classify_due_date``,
``progress_label``, ``partition_tasks``, ``summarize``) hold every derivation
rule; the reconciler and the CLI call them rather than re-deriving numbers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from taskflow_cli.api.projects import ProjectsAPI
from taskflow_cli.api.tasks import TasksAPI
from taskflow_cli.config import FanOutPolicy
from taskflow_cli.models import (
    DashboardSummary,
    DueUrgency,
    Project,
    ProjectStats,
    ProjectWithStats,
    Task,
)
from taskflow_cli.utils.fanout import fan_out
from taskflow_cli.utils.logger import get_logger

logger = get_logger("aggregation")


def percentage(part: int, whole: int) -> int:
    """Integer percentage of part/whole, rounded half up. 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def compute_stats(tasks: Iterable[Task], project_id: int | None = None) -> ProjectStats:
    """Count total and completed tasks and derive the progress percentage.

    1 of 3 completed gives 33, 2 of 3 gives 67, 1 of 8 gives 13.
    """
    total = 0
    completed = 0
    for task in tasks:
        total += 1
        if task.is_completed:
            completed += 1
    return ProjectStats(
        project_id=project_id,
        total_tasks=total,
        completed_tasks=completed,
        progress_percentage=percentage(completed, total),
    )


def classify_due_date(due_date: date | datetime | None, now: date | datetime) -> DueUrgency:
    """Classify *due_date* against the calendar day of *now*.

    *now* is always passed in so the result depends only on the arguments.
    An aware datetime due date is converted to *now*'s timezone first.
    """
    if due_date is None:
        return DueUrgency.NONE

    if isinstance(due_date, datetime):
        if due_date.tzinfo is not None and isinstance(now, datetime) and now.tzinfo is not None:
            due_date = due_date.astimezone(now.tzinfo)
        due_day = due_date.date()
    else:
        due_day = due_date
    today = now.date() if isinstance(now, datetime) else now

    if due_day < today:
        return DueUrgency.OVERDUE
    if due_day == today:
        return DueUrgency.DUE_TODAY
    return DueUrgency.UPCOMING


def progress_label(progress: int) -> str:
    """Short human description of a progress percentage."""
    if progress < 30:
        return "Just started"
    if progress < 70:
        return "In progress"
    return "Almost done!"


def partition_tasks(tasks: Iterable[Task]) -> tuple[list[Task], list[Task]]:
    """Split tasks into (pending, completed), keeping their order."""
    pending: list[Task] = []
    completed: list[Task] = []
    for task in tasks:
        (completed if task.is_completed else pending).append(task)
    return pending, completed


def summarize(
    projects: Sequence[ProjectWithStats],
    recent: int = 5,
    skipped: Sequence[Project] = (),
) -> DashboardSummary:
    """Totals across all projects plus the first *recent* of them.

    *skipped* lists projects whose tasks could not be loaded; they are not
    part of any total.
    """
    total = sum(p.stats.total_tasks for p in projects)
    completed = sum(p.stats.completed_tasks for p in projects)
    return DashboardSummary(
        total_projects=len(projects),
        total_tasks=total,
        completed_tasks=completed,
        pending_tasks=total - completed,
        overall_progress=percentage(completed, total),
        recent_projects=list(projects[:recent]),
        skipped_projects=list(skipped),
    )


def join_project(project: Project, tasks: Iterable[Task]) -> ProjectWithStats:
    """Pair a project with the tasks that belong to it and their stats.

    Tasks reporting a different project id are dropped.
    """
    owned = []
    for task in tasks:
        if task.project_id != project.id:
            logger.warning(
                "task %s reports project %s, expected %s; dropped",
                task.id,
                task.project_id,
                project.id,
            )
            continue
        owned.append(task)
    return ProjectWithStats(
        project=project, tasks=owned, stats=compute_stats(owned, project.id)
    )


@dataclass
class AggregateLoad:
    """Result of one load cycle, in server project order."""

    projects: list[ProjectWithStats] = field(default_factory=list)
    failures: dict[int, Exception] = field(default_factory=dict)
    skipped: list[Project] = field(default_factory=list)


class AggregationEngine:
    """Fetches projects and their tasks and joins them into stats."""

    def __init__(
        self,
        projects_api: ProjectsAPI,
        tasks_api: TasksAPI,
        *,
        policy: FanOutPolicy = FanOutPolicy.ALL_OR_NOTHING,
    ):
        self.projects_api = projects_api
        self.tasks_api = tasks_api
        self.policy = policy

    async def load_projects_with_stats(self) -> AggregateLoad:
        """Fetch every project, then all their task lists concurrently.

        Under ALL_OR_NOTHING any failed fetch fails the whole load. Under
        BEST_EFFORT projects whose tasks could not be fetched are left out of
        ``projects``, listed in ``skipped`` and their errors kept in ``failures``.
        """
        projects = await self.projects_api.list_projects()
        fetched = await fan_out(
            [p.id for p in projects], self.tasks_api.list_tasks, policy=self.policy
        )

        load = AggregateLoad(failures=dict(fetched.failures))
        for project in projects:
            if project.id in fetched.results:
                load.projects.append(join_project(project, fetched.results[project.id]))
            else:
                load.skipped.append(project)
        if load.failures:
            logger.warning(
                "task fetch failed for projects %s", sorted(load.failures)
            )
        logger.info(
            "loaded %d projects (%d tasks)",
            len(load.projects),
            sum(p.stats.total_tasks for p in load.projects),
        )
        return load

    async def load_project_detail(self, project_id: int) -> ProjectWithStats:
        """Fetch one project and its tasks concurrently."""
        try:
            async with asyncio.TaskGroup() as group:
                project_task = group.create_task(self.projects_api.get_project(project_id))
                tasks_task = group.create_task(self.tasks_api.list_tasks(project_id))
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None
        return join_project(project_task.result(), tasks_task.result())
