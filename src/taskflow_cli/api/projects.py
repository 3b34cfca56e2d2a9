"""Projects API endpoints."""

from pydantic import TypeAdapter

from taskflow_cli.api.client import APIClient, parse_response, validate_input
from taskflow_cli.models import Project, ProjectCreate, ProjectProgress, ProjectUpdate

_project_list = TypeAdapter(list[Project])


class ProjectsAPI:
    """Projects API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_projects(self) -> list[Project]:
        """List the current user's projects, most recent first."""
        response = await self.client.get("/projects")
        return parse_response(response, _project_list)

    async def get_project(self, project_id: int) -> Project:
        """Get a specific project by ID."""
        response = await self.client.get(f"/projects/{project_id}")
        return parse_response(response, Project)

    async def create_project(self, title: str, description: str = "") -> Project:
        """Create a new project."""
        body = validate_input(ProjectCreate, title=title, description=description)
        response = await self.client.post("/projects", json=body.to_payload())
        return parse_response(response, Project)

    async def update_project(
        self, project_id: int, title: str, description: str = ""
    ) -> Project:
        """Replace a project's title and description."""
        body = validate_input(ProjectUpdate, title=title, description=description)
        response = await self.client.put(
            f"/projects/{project_id}", json=body.to_payload()
        )
        return parse_response(response, Project)

    async def delete_project(self, project_id: int) -> None:
        """Delete a project. Its tasks go with it on the server."""
        await self.client.delete(f"/projects/{project_id}")

    async def get_progress(self, project_id: int) -> ProjectProgress:
        """Get the server-computed progress of a project."""
        response = await self.client.get(f"/projects/{project_id}/progress")
        return parse_response(response, ProjectProgress)
