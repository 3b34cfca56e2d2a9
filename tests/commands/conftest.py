"""Fixtures for running CLI commands against the fake API."""

from unittest.mock import patch

import pytest

from taskflow_cli.api.client import APIClient
from taskflow_cli.config import get_config_manager
from taskflow_cli.models import Identity
from taskflow_cli.services.workspace import get_session_store

BASE_URL = "http://testserver/api"


@pytest.fixture()
def cli_server(fake_server):
    """Route every workspace opened by a command to *fake_server*."""

    def _client(session_store, profile="default"):
        return APIClient(session_store, BASE_URL, transport=fake_server.transport())

    with patch("taskflow_cli.services.workspace.get_client", side_effect=_client):
        yield fake_server


@pytest.fixture()
def logged_in(cli_server):
    """A persisted session for john, known to the fake server."""
    cli_server.tokens["tok-john"] = 1
    store = get_session_store(get_config_manager())
    store.establish("tok-john", Identity(email="john@example.com", display_name="John Doe"))
    return cli_server
