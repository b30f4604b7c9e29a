"""Task management commands."""

from datetime import datetime

import typer

from simpletasks.architecture import Store
from simpletasks.flows import new_task, task_list
from simpletasks.flows.app import TaskList
from simpletasks.models import Task, TaskPriority
from simpletasks.runtime import open_app
from simpletasks.utils.exit_codes import ERROR_AUTH_FAILURE, ERROR_NETWORK, ERROR_NOT_FOUND
from simpletasks.utils.typer_helpers import SuggestingGroup
from simpletasks.utils.ui.formatters import format_success, format_task, format_tasks_table

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")

DUE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M"]


def _list_state(store: Store) -> task_list.TaskListState:
    """Current task list, failing if the session ended meanwhile."""
    state = store.state.task_list
    if state is None:
        raise AppError(
            "Session expired. Use 'simpletasks login' to authenticate.",
            ERROR_AUTH_FAILURE,
        )
    return state


async def _send(store: Store, action) -> task_list.TaskListState:
    """Send a task list action, wait for its effects and surface any alert."""
    store.send(TaskList(action))
    await store.settle()
    state = _list_state(store)
    if state.alert is not None:
        message = state.alert
        store.send(TaskList(task_list.AlertDismissed()))
        raise AppError(message, ERROR_NETWORK)
    return state


async def _find_task(store: Store, task_id: int) -> Task:
    """Page through the list until ``task_id`` shows up."""
    state = await _send(store, task_list.ViewAppeared())
    while state.index_of(task_id) is None and state.can_load_next_page:
        state = await _send(store, task_list.LoadNextPage())

    index = state.index_of(task_id)
    if index is None:
        raise AppError(f"Task {task_id} not found", ERROR_NOT_FOUND)
    return state.tasks[index]


async def _save_editor(
    store: Store,
    title: str | None,
    priority: TaskPriority | None,
    due: datetime | None,
) -> Task:
    """Fill in the open editor, save it and return the saved task."""
    edits = []
    if title is not None:
        edits.append(new_task.TitleChanged(title))
    if priority is not None:
        edits.append(new_task.PriorityPicked(priority))
    if due is not None:
        edits.append(new_task.DuePicked(due.astimezone()))
    for edit in edits:
        store.send(TaskList(task_list.Editor(edit)))

    editor = _list_state(store).editor
    if not editor.is_valid:
        raise AppError("Title must not be empty")

    store.send(TaskList(task_list.Editor(new_task.SaveTapped())))
    await store.settle()

    state = _list_state(store)
    if state.editor is not None:
        message = state.editor.alert or "Task was not saved"
        store.send(TaskList(task_list.Editor(new_task.CancelTapped())))
        raise AppError(message, ERROR_NETWORK)
    index = state.index_of(editor.task_id) if editor.mode == "update" else None
    # Created tasks, and edited ones no longer listed, land at the front.
    return state.tasks[0 if index is None else index]


@app.command("list")
@command_wrapper
async def list_tasks(
    pages: int = typer.Option(1, "--pages", "-p", min=1, help="Number of pages to fetch"),
    refresh: bool = typer.Option(
        False, "--refresh", "-r", help="Load the first page as a refresh instead of a first view"
    ),
) -> None:
    """List tasks."""
    async with open_app() as store:
        first = task_list.RefreshTriggered() if refresh else task_list.ViewAppeared()
        state = await _send(store, first)
        while state.current_page < pages and state.can_load_next_page:
            state = await _send(store, task_list.LoadNextPage())

        format_tasks_table(state.tasks)
        if state.can_load_next_page:
            typer.echo(f"More tasks available; use --pages {state.current_page + 1}")


@app.command("show")
@command_wrapper
async def show_task(
    task_id: int = typer.Argument(..., help="Task ID"),
) -> None:
    """Show the details of a task."""
    async with open_app() as store:
        format_task(await _find_task(store, task_id))


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    priority: TaskPriority = typer.Option(
        TaskPriority.LOW, "--priority", case_sensitive=False, help="Task priority"
    ),
    due: datetime | None = typer.Option(
        None, "--due", formats=DUE_FORMATS, help="Due date (default: in 24 hours)"
    ),
) -> None:
    """Create a task."""
    async with open_app() as store:
        _list_state(store)
        store.send(TaskList(task_list.AddTapped()))
        task = await _save_editor(store, title, priority, due)
        format_success(f"Created task #{task.id}")
        format_task(task)


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    title: str | None = typer.Option(None, "--title", help="New title"),
    priority: TaskPriority | None = typer.Option(
        None, "--priority", case_sensitive=False, help="New priority"
    ),
    due: datetime | None = typer.Option(None, "--due", formats=DUE_FORMATS, help="New due date"),
) -> None:
    """Edit a task."""
    async with open_app() as store:
        await _find_task(store, task_id)
        store.send(TaskList(task_list.EditTapped(task_id)))
        task = await _save_editor(store, title, priority, due)
        format_success(f"Updated task #{task.id}")
        format_task(task)


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: int = typer.Argument(..., help="Task ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    async with open_app() as store:
        task = await _find_task(store, task_id)

        if not force:
            confirm = typer.confirm(f"Delete task '{task.title}'?")
            if not confirm:
                raise typer.Exit(0)

        await _send(store, task_list.DeleteTapped(task_id))
        format_success(f"Deleted task #{task_id}")
