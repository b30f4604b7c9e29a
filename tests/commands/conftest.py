"""Fixtures running commands against an in-memory API."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest

from simpletasks.api import APIClient
from simpletasks.config import get_config_manager
from simpletasks.runtime import build_session_store
from tests.fakes import FakeServer


@pytest.fixture
def server():
    return FakeServer(titles=["Buy milk", "Walk dog", "Pay rent"])


@pytest.fixture(autouse=True)
def fake_api(server):
    """Route every command's HTTP traffic to *server*."""

    def build_client(config_manager, session_store):
        return APIClient(
            "https://api.test/api",
            token_provider=session_store.get,
            transport=httpx.MockTransport(server),
        )

    with patch("simpletasks.runtime.build_client", side_effect=build_client):
        yield server


@pytest.fixture
def session():
    return build_session_store(get_config_manager())


@pytest.fixture
def logged_in(session, server):
    session.set(server.token)
    return session
