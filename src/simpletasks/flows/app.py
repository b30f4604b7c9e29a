"""Root flow: signed-out and signed-in screens, never both."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from simpletasks.api import AuthAPI
from simpletasks.architecture import Effect, combine, optional_child
from simpletasks.flows import auth, task_list
from simpletasks.flows.auth import AuthEnvironment, AuthState, auth_reducer
from simpletasks.flows.task_list import (
    TaskListEnvironment,
    TaskListState,
    task_list_reducer,
)
from simpletasks.session_store import SessionStore
from simpletasks.utils.logger import get_logger


@dataclass
class AuthPresented:
    state: AuthState = field(default_factory=AuthState)


@dataclass
class TasksPresented:
    state: TaskListState = field(default_factory=TaskListState)


Screen = Union[AuthPresented, TasksPresented]


@dataclass
class AppState:
    screen: Screen

    @classmethod
    def initial(cls, session_store: SessionStore) -> AppState:
        """Pick the first screen from the stored session."""
        if session_store.get() is not None:
            return cls(screen=TasksPresented())
        return cls(screen=AuthPresented())

    @property
    def auth(self) -> Optional[AuthState]:
        return self.screen.state if isinstance(self.screen, AuthPresented) else None

    @property
    def task_list(self) -> Optional[TaskListState]:
        return self.screen.state if isinstance(self.screen, TasksPresented) else None


@dataclass(frozen=True)
class Auth:
    """Wraps an action of the auth flow."""

    action: Any


@dataclass(frozen=True)
class TaskList:
    """Wraps an action of the task list flow."""

    action: Any


AppAction = Union[Auth, TaskList]


@dataclass
class AppEnvironment:
    auth_api: AuthAPI
    session_store: SessionStore
    task_list: TaskListEnvironment


def _session_reducer(state: AppState, action: AppAction, env: AppEnvironment) -> Effect:
    if isinstance(action, Auth) and isinstance(action.action, auth.AuthSucceeded):
        if state.auth is None:
            return Effect.none()
        env.session_store.set(action.action.token)
        state.screen = TasksPresented()
        get_logger(__name__).info("signed in")

    elif isinstance(action, TaskList) and isinstance(action.action, task_list.LogoutTapped):
        current = state.task_list
        if current is None:
            return Effect.none()
        env.session_store.set(None)
        state.screen = AuthPresented()
        get_logger(__name__).info("signed out")
        return Effect.cancel(*current.request_ids())

    return Effect.none()


app_reducer = combine(
    optional_child(
        auth_reducer,
        state=lambda s: s.auth,
        action=Auth,
        environment=lambda e: AuthEnvironment(auth_api=e.auth_api),
    ),
    optional_child(
        task_list_reducer,
        state=lambda s: s.task_list,
        action=TaskList,
        environment=lambda e: e.task_list,
    ),
    _session_reducer,
)
