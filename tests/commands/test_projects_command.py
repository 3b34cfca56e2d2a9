"""Tests for project commands."""

import json

from typer.testing import CliRunner

from taskflow_cli.config import get_config_manager
from taskflow_cli.main import app
from taskflow_cli.services.workspace import get_session_store

runner = CliRunner()


def test_list_requires_login(cli_server):
    result = runner.invoke(app, ["projects", "list"])

    assert result.exit_code == 3
    assert "Not logged in" in result.stdout
    assert cli_server.requests == []


def test_list_projects_table(logged_in):
    project = logged_in.add_project("Website")
    logged_in.add_task(project["id"], "a", completed=True)
    logged_in.add_task(project["id"], "b")
    logged_in.add_task(project["id"], "c")

    result = runner.invoke(app, ["projects", "list"])

    assert result.exit_code == 0
    assert "Website" in result.stdout
    assert "1/3" in result.stdout
    assert "33%" in result.stdout


def test_list_projects_json(logged_in):
    older = logged_in.add_project("Older")
    newer = logged_in.add_project("Newer")
    logged_in.add_task(older["id"], "a", completed=True)

    result = runner.invoke(app, ["projects", "list", "--output", "json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [p["project"]["id"] for p in data["projects"]] == [newer["id"], older["id"]]
    assert data["projects"][1]["stats"]["progress_percentage"] == 100


def test_list_projects_reports_skipped_projects(logged_in):
    logged_in.add_project("Healthy")
    broken = logged_in.add_project("Broken")
    logged_in.fail_paths[f"/projects/{broken['id']}/tasks"] = 500
    get_config_manager().set("aggregation.fanout_policy", "best_effort")

    table = runner.invoke(app, ["projects", "list"])
    as_json = runner.invoke(app, ["projects", "list", "-o", "json"])

    assert table.exit_code == 0
    assert "Tasks failed to load" in table.stdout
    assert "Broken" in table.stdout
    data = json.loads(as_json.stdout)
    assert [p["project"]["title"] for p in data["projects"]] == ["Healthy"]
    assert [p["id"] for p in data["skipped_projects"]] == [broken["id"]]


def test_list_projects_uses_configured_output_format(logged_in):
    logged_in.add_project("Website")
    runner.invoke(app, ["config", "set", "output.format", "json"])

    result = runner.invoke(app, ["projects", "list"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["projects"][0]["project"]["title"] == "Website"


def test_output_option_overrides_configured_format(logged_in):
    logged_in.add_project("Website")
    get_config_manager().set("output.format", "json")

    result = runner.invoke(app, ["projects", "list", "-o", "table"])

    assert result.exit_code == 0
    assert "Website" in result.stdout
    assert not result.stdout.lstrip().startswith("{")


def test_list_projects_empty(logged_in):
    result = runner.invoke(app, ["projects", "list"])
    assert result.exit_code == 0
    assert "No projects yet" in result.stdout


def test_show_project(logged_in):
    project = logged_in.add_project("Docs", description="Handbook")
    logged_in.add_task(project["id"], "Outline", completed=True)
    logged_in.add_task(project["id"], "Draft", due_date="2020-01-01")

    result = runner.invoke(app, ["projects", "show", str(project["id"]), "--check-server"])

    assert result.exit_code == 0
    assert "Docs" in result.stdout
    assert "50%" in result.stdout
    assert "In progress" in result.stdout
    assert "Overdue" in result.stdout
    assert "Server progress matches" in result.stdout


def test_show_missing_project(logged_in):
    result = runner.invoke(app, ["projects", "show", "999"])
    assert result.exit_code == 5
    assert "Project not found" in result.stdout


def test_create_project(logged_in):
    logged_in.add_project("Existing")

    result = runner.invoke(app, ["projects", "create", "--title", "Launch", "-d", "Q4"])

    assert result.exit_code == 0
    assert "Project created: Launch" in result.stdout
    assert any(p["title"] == "Launch" for p in logged_in.projects.values())


def test_create_project_invalid_title(logged_in):
    result = runner.invoke(app, ["projects", "create", "--title", "x" * 101])

    assert result.exit_code == 2
    assert "title" in result.stdout
    assert logged_in.projects == {}


def test_update_project_keeps_unset_fields(logged_in):
    project = logged_in.add_project("Old", description="Keep me")

    result = runner.invoke(app, ["projects", "update", str(project["id"]), "--title", "New"])

    assert result.exit_code == 0
    assert logged_in.projects[project["id"]]["title"] == "New"
    assert logged_in.projects[project["id"]]["description"] == "Keep me"


def test_delete_project_with_confirmation(logged_in):
    keep = logged_in.add_project("Keep")
    drop = logged_in.add_project("Drop")

    result = runner.invoke(app, ["projects", "delete", str(drop["id"])], input="y\n")

    assert result.exit_code == 0
    assert "Project deleted: Drop" in result.stdout
    assert list(logged_in.projects) == [keep["id"]]


def test_delete_project_declined(logged_in):
    project = logged_in.add_project("Stay")

    result = runner.invoke(app, ["projects", "delete", str(project["id"])], input="n\n")

    assert result.exit_code == 1
    assert project["id"] in logged_in.projects


def test_expired_session_is_cleared(logged_in):
    logged_in.revoke_all_tokens()

    result = runner.invoke(app, ["projects", "list"])

    assert result.exit_code == 3
    assert "taskflow login" in result.stdout
    assert not get_session_store(get_config_manager()).is_authenticated()


def test_server_failure_exit_code(logged_in):
    logged_in.fail_paths["/projects"] = 503

    result = runner.invoke(app, ["projects", "list"])

    assert result.exit_code == 4
    assert "try again" in result.stdout
