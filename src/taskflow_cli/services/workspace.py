"""Wiring of the session store, API client and services for one profile."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from taskflow_cli.api.auth import AuthAPI
from taskflow_cli.api.client import APIClient, get_client
from taskflow_cli.api.projects import ProjectsAPI
from taskflow_cli.api.tasks import TasksAPI
from taskflow_cli.config import Config, ConfigManager, get_config_manager
from taskflow_cli.services.aggregation import AggregationEngine
from taskflow_cli.services.auth_service import AuthService
from taskflow_cli.services.project_service import ProjectService
from taskflow_cli.services.reconciler import MutationReconciler
from taskflow_cli.services.session_store import FileStorage, SessionStore
from taskflow_cli.services.task_service import TaskService


@dataclass
class Workspace:
    """Everything a command needs, sharing one SessionStore and one view."""

    config: Config
    session_store: SessionStore
    client: APIClient
    reconciler: MutationReconciler
    auth: AuthService
    projects: ProjectService
    tasks: TaskService


def get_session_store(config_manager: ConfigManager) -> SessionStore:
    """Session store persisted in the profile's data directory, restored."""
    store = SessionStore(FileStorage(config_manager.session_dir))
    store.restore()
    return store


def build_workspace(
    config: Config, session_store: SessionStore, client: APIClient
) -> Workspace:
    projects_api = ProjectsAPI(client)
    tasks_api = TasksAPI(client)
    reconciler = MutationReconciler()
    # A cleared session invalidates whatever view was loaded with it
    session_store.add_clear_listener(reconciler.invalidate)
    engine = AggregationEngine(
        projects_api, tasks_api, policy=config.aggregation.fanout_policy
    )
    return Workspace(
        config=config,
        session_store=session_store,
        client=client,
        reconciler=reconciler,
        auth=AuthService(session_store, AuthAPI(client)),
        projects=ProjectService(projects_api, engine, reconciler),
        tasks=TaskService(tasks_api, reconciler),
    )


@asynccontextmanager
async def open_workspace(profile: str = "default") -> AsyncIterator[Workspace]:
    """Build a workspace for *profile* and close its HTTP client on exit."""
    config_manager = get_config_manager(profile)
    config = config_manager.config
    session_store = get_session_store(config_manager)
    client = get_client(session_store, profile)
    try:
        yield build_workspace(config, session_store, client)
    finally:
        await client.close()
