"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest
import pytest_asyncio

from fake_server import FakeTaskFlowServer
from taskflow_cli.api.client import APIClient
from taskflow_cli.services.session_store import FileStorage, SessionStore

BASE_URL = "http://testserver/api"


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Point platformdirs at *tmp_path* and reset module-level singletons."""
    import taskflow_cli.config as config_mod
    import taskflow_cli.utils.logger as logger_mod

    tmpdir = str(tmp_path)
    config_mod._config_manager = None
    logger_mod._logger = None
    logging.getLogger("taskflow_cli").handlers.clear()
    with patch("taskflow_cli.config.user_config_dir", return_value=tmpdir + "/config"):
        with patch("taskflow_cli.config.user_data_dir", return_value=tmpdir + "/data"):
            with patch("taskflow_cli.utils.logger.user_log_dir", return_value=tmpdir + "/log"):
                yield tmp_path
    config_mod._config_manager = None
    logger_mod._logger = None
    logging.getLogger("taskflow_cli").handlers.clear()


# ---------------------------------------------------------------------------
# Session and gateway
# ---------------------------------------------------------------------------


@pytest.fixture()
def session_store(tmp_path):
    """A SessionStore persisted under tmp_path, initially empty."""
    return SessionStore(FileStorage(tmp_path / "session"))


@pytest.fixture()
def fake_server():
    return FakeTaskFlowServer()


@pytest_asyncio.fixture
async def api_client(session_store, fake_server):
    """APIClient wired to the in-memory fake server."""
    client = APIClient(session_store, BASE_URL, transport=fake_server.transport())
    yield client
    await client.close()
