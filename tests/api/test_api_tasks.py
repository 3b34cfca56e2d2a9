"""Tests for Tasks API."""

import json
from datetime import date

import pytest

from taskflow_cli.api.tasks import TasksAPI
from taskflow_cli.errors import NotFound, ValidationFailed
from taskflow_cli.models import Identity


@pytest.fixture()
def project(session_store, fake_server):
    fake_server.tokens["tok-john"] = 1
    session_store.establish("tok-john", Identity(email="john@example.com", display_name="John Doe"))
    return fake_server.add_project("Website")


@pytest.mark.asyncio
async def test_list_tasks(api_client, fake_server, project):
    fake_server.add_task(project["id"], "Design", completed=True, due_date="2026-10-20")
    fake_server.add_task(project["id"], "Build")

    tasks = await TasksAPI(api_client).list_tasks(project["id"])

    assert [t.title for t in tasks] == ["Design", "Build"]
    assert tasks[0].is_completed
    assert tasks[0].due_date == date(2026, 10, 20)
    assert tasks[1].due_date is None
    assert all(t.project_id == project["id"] for t in tasks)


@pytest.mark.asyncio
async def test_create_task_sends_camel_case_due_date(api_client, fake_server, project):
    task = await TasksAPI(api_client).create_task(
        project["id"], "Ship", description="v1", due_date=date(2026, 11, 1)
    )

    assert task.project_id == project["id"]
    assert task.due_date == date(2026, 11, 1)
    assert json.loads(fake_server.requests[-1].content) == {
        "title": "Ship",
        "description": "v1",
        "dueDate": "2026-11-01",
    }


@pytest.mark.asyncio
async def test_create_task_without_due_date_omits_it(api_client, fake_server, project):
    await TasksAPI(api_client).create_task(project["id"], "Ship")
    assert "dueDate" not in json.loads(fake_server.requests[-1].content)


@pytest.mark.asyncio
async def test_create_task_rejects_long_title(api_client, fake_server, project):
    with pytest.raises(ValidationFailed):
        await TasksAPI(api_client).create_task(project["id"], "t" * 201)
    assert fake_server.requests == []


@pytest.mark.asyncio
async def test_toggle_complete(api_client, fake_server, project):
    task = fake_server.add_task(project["id"], "Build")
    api = TasksAPI(api_client)

    done = await api.toggle_complete(task["id"])
    undone = await api.toggle_complete(task["id"])

    assert done.is_completed
    assert not undone.is_completed
    assert fake_server.requests[-1].method == "PATCH"
    assert fake_server.requests[-1].url.path == f"/api/tasks/{task['id']}/complete"


@pytest.mark.asyncio
async def test_update_task_can_clear_due_date(api_client, fake_server, project):
    task = fake_server.add_task(project["id"], "Build", due_date="2026-10-20")

    updated = await TasksAPI(api_client).update_task(task["id"], "Build it", description="now")

    assert updated.title == "Build it"
    assert updated.due_date is None
    assert json.loads(fake_server.requests[-1].content)["dueDate"] is None


@pytest.mark.asyncio
async def test_delete_task(api_client, fake_server, project):
    task = fake_server.add_task(project["id"], "Build")
    await TasksAPI(api_client).delete_task(task["id"])
    assert task["id"] not in fake_server.tasks


@pytest.mark.asyncio
async def test_toggle_missing_task_raises_not_found(api_client, project):
    with pytest.raises(NotFound):
        await TasksAPI(api_client).toggle_complete(12345)
