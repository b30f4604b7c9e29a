"""Authentication commands."""

import typer
from rich.prompt import Prompt

from simpletasks.architecture import Store
from simpletasks.flows import auth, task_list
from simpletasks.flows.app import Auth, TaskList
from simpletasks.runtime import open_app
from simpletasks.utils.exit_codes import ERROR_AUTH_FAILURE, ERROR_INVALID_ARGS
from simpletasks.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper


async def _authenticate(store: Store, email: str, password: str, submit) -> None:
    """Fill in the auth form, submit it and wait for the outcome."""
    store.send(Auth(auth.EmailChanged(email)))
    store.send(Auth(auth.PasswordChanged(password)))

    state = store.state.auth
    if not state.can_submit:
        raise AppError("Email and password are required", ERROR_INVALID_ARGS)

    store.send(Auth(submit()))
    await store.settle()

    if store.state.task_list is None:
        message = store.state.auth.alert or "Authentication failed"
        raise AppError(message, ERROR_AUTH_FAILURE)


def _prompt_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)
    return email, password


@command_wrapper(auth_required=False)
async def login(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Log in with email and password."""
    async with open_app() as store:
        if store.state.task_list is not None:
            format_info("Already logged in. Use 'simpletasks logout' first.")
            return

        email, password = _prompt_credentials(email, password)
        await _authenticate(store, email, password, auth.LoginTapped)
        format_success(f"Logged in as {email}")


@command_wrapper(auth_required=False)
async def register(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Create an account and log in."""
    async with open_app() as store:
        if store.state.task_list is not None:
            format_info("Already logged in. Use 'simpletasks logout' first.")
            return

        email, password = _prompt_credentials(email, password)
        await _authenticate(store, email, password, auth.RegisterTapped)
        format_success(f"Registered and logged in as {email}")


@command_wrapper(auth_required=False)
async def logout() -> None:
    """Forget the stored session."""
    async with open_app() as store:
        if store.state.task_list is None:
            format_info("Not logged in")
            return

        store.send(TaskList(task_list.LogoutTapped()))
        format_success("Logged out")
