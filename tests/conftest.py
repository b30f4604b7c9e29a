"""Shared test fixtures and configuration.

Keeps config, data and log files inside the test's tmp_path.
"""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from simpletasks.api import AuthAPI, TasksAPI
from simpletasks.session_store import SessionStore


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path):
    """Redirect platformdirs lookups into *tmp_path* and reset singletons."""
    import simpletasks.config as config_mod
    import simpletasks.utils.logger as logger_mod

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    log_dir = str(tmp_path / "logs")

    config_mod._config_manager = None
    logger_mod._logger = None
    with patch("simpletasks.config.user_config_dir", return_value=config_dir), patch(
        "simpletasks.config.user_data_dir", return_value=data_dir
    ), patch("simpletasks.session_store.user_data_dir", return_value=data_dir), patch(
        "simpletasks.utils.logger.user_log_dir", return_value=log_dir
    ):
        yield tmp_path

    app_logger = logging.getLogger("simpletasks")
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    config_mod._config_manager = None
    logger_mod._logger = None


@pytest.fixture
def session_store(tmp_path):
    return SessionStore(service="com.simpletasks.tests", data_dir=tmp_path / "session")


@pytest.fixture
def auth_api():
    """AuthAPI stand-in whose calls are AsyncMocks."""
    api = MagicMock(spec=AuthAPI)
    api.login = AsyncMock()
    api.register = AsyncMock()
    return api


@pytest.fixture
def tasks_api():
    """TasksAPI stand-in whose calls are AsyncMocks."""
    api = MagicMock(spec=TasksAPI)
    api.list_tasks = AsyncMock()
    api.create_task = AsyncMock()
    api.update_task = AsyncMock()
    api.delete_task = AsyncMock(return_value=None)
    return api
