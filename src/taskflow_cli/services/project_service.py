"""Project service - project operations kept in sync with the aggregated view."""

from __future__ import annotations

from taskflow_cli.api.projects import ProjectsAPI
from taskflow_cli.errors import NotFound
from taskflow_cli.models import Project, ProjectProgress, ProjectWithStats
from taskflow_cli.services.aggregation import AggregationEngine
from taskflow_cli.services.reconciler import (
    MutationReconciler,
    MutationResult,
    ReconcileOutcome,
)


class ProjectService:
    """Service for project business logic.

    Every mutation goes to the API first; only the entity the API returns is
    handed to the reconciler. A NotFound from the API marks the view as
    needing a reload before the error is re-raised.
    """

    def __init__(
        self,
        projects_api: ProjectsAPI,
        engine: AggregationEngine,
        reconciler: MutationReconciler,
    ):
        """Initialize the project service.

        Args:
            projects_api: Gateway for the /projects endpoints
            engine: Aggregation engine used for full loads
            reconciler: Owner of the in-memory view
        """
        self.projects_api = projects_api
        self.engine = engine
        self.reconciler = reconciler

    async def refresh(self) -> ReconcileOutcome:
        """Load every project with its stats and replace the view.

        Projects whose tasks could not be fetched under the best-effort policy
        end up in ``reconciler.skipped_projects``.

        Returns:
            APPLIED, or STALE when a newer change arrived while loading
        """
        generation = self.reconciler.begin_load()
        load = await self.engine.load_projects_with_stats()
        return self.reconciler.apply_load(
            generation, load.projects, skipped=load.skipped
        )

    async def open_project(self, project_id: int) -> ProjectWithStats:
        """Load a single project's detail view and make it the active one.

        Args:
            project_id: Project to open

        Returns:
            The project with its tasks and stats
        """
        generation = self.reconciler.begin_load()
        try:
            detail = await self.engine.load_project_detail(project_id)
        except NotFound:
            self.reconciler.require_reload(f"project {project_id} not found")
            raise
        self.reconciler.apply_load(generation, [detail], active_project_id=project_id)
        return detail

    async def create_project(
        self, title: str, description: str = ""
    ) -> MutationResult[Project]:
        """Create a project and put it at the head of the view."""
        project = await self.projects_api.create_project(title, description)
        return MutationResult(project, self.reconciler.on_project_created(project))

    async def update_project(
        self, project_id: int, title: str, description: str = ""
    ) -> MutationResult[Project]:
        """Replace a project's title and description."""
        try:
            project = await self.projects_api.update_project(
                project_id, title, description
            )
        except NotFound:
            self.reconciler.require_reload(f"project {project_id} not found")
            raise
        return MutationResult(project, self.reconciler.on_project_updated(project))

    async def delete_project(self, project_id: int) -> ReconcileOutcome:
        """Delete a project.

        Returns:
            NAVIGATE_AWAY if the project was the active detail view
        """
        try:
            await self.projects_api.delete_project(project_id)
        except NotFound:
            self.reconciler.require_reload(f"project {project_id} not found")
            raise
        return self.reconciler.on_project_deleted(project_id)

    async def get_progress(self, project_id: int) -> ProjectProgress:
        """Server-side progress figures, for cross-checking local stats."""
        return await self.projects_api.get_progress(project_id)
