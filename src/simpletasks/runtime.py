"""Wiring of the store to the live API, session and configuration."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from simpletasks.api import APIClient, AuthAPI, TasksAPI
from simpletasks.architecture import Store, log_actions
from simpletasks.config import ConfigManager, get_config_manager
from simpletasks.flows.app import AppEnvironment, AppState, app_reducer
from simpletasks.flows.task_list import TaskListEnvironment
from simpletasks.session_store import SessionStore
from simpletasks.utils.logger import get_logger


def build_session_store(config_manager: ConfigManager) -> SessionStore:
    return SessionStore(
        service=config_manager.config.auth.service,
        data_dir=config_manager.data_dir,
    )


def build_client(config_manager: ConfigManager, session_store: SessionStore) -> APIClient:
    config = config_manager.config
    return APIClient(
        config.api.endpoint,
        timeout=config.api.timeout,
        token_provider=session_store.get,
    )


def build_store(
    config_manager: ConfigManager,
    client: APIClient,
    session_store: SessionStore,
) -> Store:
    """Create the root store, starting on the screen the session calls for."""
    config = config_manager.config
    environment = AppEnvironment(
        auth_api=AuthAPI(client),
        session_store=session_store,
        task_list=TaskListEnvironment(
            tasks_api=TasksAPI(client),
            now=lambda: datetime.now().astimezone(),
            due_delay=timedelta(hours=config.tasks.default_due_hours),
            logout_on_unauthorized=config.auth.logout_on_unauthorized,
        ),
    )
    return Store(
        AppState.initial(session_store),
        app_reducer,
        environment,
        observer=log_actions(get_logger("actions")),
    )


@asynccontextmanager
async def open_app(profile: str = "default") -> AsyncIterator[Store]:
    """Run a root store against the live API for the duration of the block."""
    config_manager = get_config_manager(profile)
    session_store = build_session_store(config_manager)
    async with build_client(config_manager, session_store) as client:
        store = build_store(config_manager, client, session_store)
        try:
            yield store
        finally:
            await store.close()
