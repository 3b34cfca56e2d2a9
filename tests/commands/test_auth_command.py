"""Tests for login, logout and whoami."""

from typer.testing import CliRunner

from taskflow_cli.config import get_config_manager
from taskflow_cli.main import app
from taskflow_cli.services.workspace import get_session_store

runner = CliRunner()


def _store():
    return get_session_store(get_config_manager())


def test_login_success(cli_server):
    result = runner.invoke(
        app, ["login", "--email", "john@example.com", "--password", "password123"]
    )

    assert result.exit_code == 0
    assert "John Doe" in result.stdout
    assert _store().identity.display_name == "John Doe"


def test_login_prompts_for_missing_credentials(cli_server):
    result = runner.invoke(app, ["login", "--password", "password123"], input="jane@example.com\n")

    assert result.exit_code == 0
    assert _store().identity.email == "jane@example.com"


def test_login_bad_credentials(cli_server):
    result = runner.invoke(
        app, ["login", "--email", "john@example.com", "--password", "wrong"]
    )

    assert result.exit_code == 3
    assert "Invalid email or password" in result.stdout
    assert not _store().is_authenticated()


def test_auth_group_login(cli_server):
    result = runner.invoke(
        app, ["auth", "login", "--email", "john@example.com", "--password", "password123"]
    )
    assert result.exit_code == 0


def test_whoami(logged_in):
    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 0
    assert "John Doe" in result.stdout
    assert "john@example.com" in result.stdout


def test_whoami_logged_out(cli_server):
    result = runner.invoke(app, ["whoami"])
    assert result.exit_code == 0
    assert "Not logged in" in result.stdout


def test_logout(logged_in):
    result = runner.invoke(app, ["logout"])

    assert result.exit_code == 0
    assert "Logged out" in result.stdout
    assert not _store().is_authenticated()


def test_logout_when_logged_out(cli_server):
    result = runner.invoke(app, ["logout"])
    assert result.exit_code == 0
    assert "Not logged in" in result.stdout
