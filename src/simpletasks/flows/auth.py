"""Email/password sign-in and registration."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Literal, Optional, Union

from simpletasks.api import AuthAPI
from simpletasks.architecture import Effect
from simpletasks.models import AuthToken, Failure

AuthStatus = Literal["idle", "submitting", "error"]

AUTH_REQUEST = "auth.request"


@dataclass
class AuthState:
    email: str = ""
    password: str = field(default="", repr=False)
    is_submitting: bool = False
    alert: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        """Both fields filled in; the server decides whether they are valid."""
        return bool(self.email) and bool(self.password)

    @property
    def status(self) -> AuthStatus:
        if self.is_submitting:
            return "submitting"
        if self.alert is not None:
            return "error"
        return "idle"


@dataclass(frozen=True)
class EmailChanged:
    email: str


@dataclass(frozen=True)
class PasswordChanged:
    password: str = field(repr=False)


@dataclass(frozen=True)
class LoginTapped:
    pass


@dataclass(frozen=True)
class RegisterTapped:
    pass


@dataclass(frozen=True)
class AuthSucceeded:
    token: str = field(repr=False)


@dataclass(frozen=True)
class AuthFailed:
    failure: Failure


@dataclass(frozen=True)
class AlertDismissed:
    pass


AuthAction = Union[
    EmailChanged,
    PasswordChanged,
    LoginTapped,
    RegisterTapped,
    AuthSucceeded,
    AuthFailed,
    AlertDismissed,
]


@dataclass
class AuthEnvironment:
    auth_api: AuthAPI


def _succeeded(token: AuthToken) -> AuthSucceeded:
    return AuthSucceeded(token.token)


def auth_reducer(state: AuthState, action: AuthAction, env: AuthEnvironment) -> Effect:
    if isinstance(action, EmailChanged):
        state.email = action.email
    elif isinstance(action, PasswordChanged):
        state.password = action.password

    elif isinstance(action, (LoginTapped, RegisterTapped)):
        if not state.can_submit:
            return Effect.none()
        state.is_submitting = True
        state.alert = None
        submit = env.auth_api.login if isinstance(action, LoginTapped) else env.auth_api.register
        # Login and register share one id: the latest submit wins.
        return Effect.catching(
            partial(submit, state.email, state.password),
            _succeeded,
            AuthFailed,
            id=AUTH_REQUEST,
        )

    elif isinstance(action, AuthSucceeded):
        # The root flow stores the token and replaces this flow.
        state.is_submitting = False
    elif isinstance(action, AuthFailed):
        state.is_submitting = False
        state.alert = action.failure.message
    elif isinstance(action, AlertDismissed):
        state.alert = None

    return Effect.none()
