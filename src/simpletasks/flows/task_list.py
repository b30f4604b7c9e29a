"""Paginated task list with refresh, optimistic delete and the task editor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from functools import partial
from typing import Any, Optional, Union

from simpletasks.api import TasksAPI
from simpletasks.architecture import Effect, combine, optional_child
from simpletasks.flows import new_task
from simpletasks.flows.new_task import (
    DEFAULT_DUE_DELAY,
    NewTaskEnvironment,
    NewTaskState,
    new_task_reducer,
)
from simpletasks.models import Failure, Task, TasksPage

# Refresh and next-page loads share this id, so a refresh supersedes a load.
PAGE_REQUEST = "task_list.page"


def delete_request(task_id: int) -> tuple[str, int]:
    return ("task_list.delete", task_id)


@dataclass
class TaskListState:
    tasks: list[Task] = field(default_factory=list)
    current_page: int = 0
    can_load_next_page: bool = True
    is_loading: bool = False
    is_refreshing: bool = False
    alert: Optional[str] = None
    editor: Optional[NewTaskState] = None
    deleting: set[int] = field(default_factory=set)

    def index_of(self, task_id: int) -> Optional[int]:
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        return None

    def request_ids(self) -> list[Any]:
        """Ids of every request this list may have in flight."""
        return [
            PAGE_REQUEST,
            new_task.SAVE_REQUEST,
            *(delete_request(task_id) for task_id in sorted(self.deleting)),
        ]


@dataclass(frozen=True)
class ViewAppeared:
    pass


@dataclass(frozen=True)
class RefreshTriggered:
    pass


@dataclass(frozen=True)
class LoadNextPage:
    pass


@dataclass(frozen=True)
class TasksLoaded:
    page: TasksPage
    requested_page: int


@dataclass(frozen=True)
class TasksFailed:
    failure: Failure


@dataclass(frozen=True)
class DeleteTapped:
    task_id: int


@dataclass(frozen=True)
class DeleteSucceeded:
    task_id: int


@dataclass(frozen=True)
class DeleteFailed:
    task: Task
    failure: Failure


@dataclass(frozen=True)
class AddTapped:
    pass


@dataclass(frozen=True)
class EditTapped:
    task_id: int


@dataclass(frozen=True)
class Editor:
    """Wraps an action of the task editor."""

    action: Any


@dataclass(frozen=True)
class AlertDismissed:
    pass


@dataclass(frozen=True)
class LogoutTapped:
    pass


TaskListAction = Union[
    ViewAppeared,
    RefreshTriggered,
    LoadNextPage,
    TasksLoaded,
    TasksFailed,
    DeleteTapped,
    DeleteSucceeded,
    DeleteFailed,
    AddTapped,
    EditTapped,
    Editor,
    AlertDismissed,
    LogoutTapped,
]


@dataclass
class TaskListEnvironment:
    tasks_api: TasksAPI
    now: Callable[[], datetime] = datetime.now
    due_delay: timedelta = DEFAULT_DUE_DELAY
    logout_on_unauthorized: bool = True


def _load_page(env: TaskListEnvironment, page: int) -> Effect:
    return Effect.catching(
        partial(env.tasks_api.list_tasks, page),
        lambda result: TasksLoaded(result, page),
        TasksFailed,
        id=PAGE_REQUEST,
    )


def _show_failure(state: TaskListState, failure: Failure, env: TaskListEnvironment) -> Effect:
    state.alert = failure.message
    if failure.is_unauthorized and env.logout_on_unauthorized:
        return Effect.send(LogoutTapped())
    return Effect.none()


def _task_list_core(
    state: TaskListState, action: TaskListAction, env: TaskListEnvironment
) -> Effect:
    if isinstance(action, ViewAppeared):
        # First load goes through the next-page path, not refresh.
        if not state.tasks:
            return _task_list_core(state, LoadNextPage(), env)

    elif isinstance(action, RefreshTriggered):
        state.is_refreshing = True
        state.is_loading = False
        return _load_page(env, 1)

    elif isinstance(action, LoadNextPage):
        if not state.can_load_next_page or state.is_loading or state.is_refreshing:
            return Effect.none()
        state.is_loading = True
        return _load_page(env, state.current_page + 1)

    elif isinstance(action, TasksLoaded):
        if action.requested_page == 1:
            state.tasks = list(action.page.tasks)
        else:
            # Duplicates returned by the server are kept.
            state.tasks.extend(action.page.tasks)
        state.current_page = action.page.meta.current
        state.can_load_next_page = action.page.meta.has_next_page
        state.is_loading = False
        state.is_refreshing = False

    elif isinstance(action, TasksFailed):
        state.is_loading = False
        state.is_refreshing = False
        return _show_failure(state, action.failure, env)

    elif isinstance(action, DeleteTapped):
        index = state.index_of(action.task_id)
        if index is None:
            return Effect.none()
        task = state.tasks.pop(index)
        state.deleting.add(task.id)
        return Effect.catching(
            partial(env.tasks_api.delete_task, task.id),
            lambda _: DeleteSucceeded(task.id),
            lambda failure: DeleteFailed(task, failure),
            id=delete_request(task.id),
        )

    elif isinstance(action, DeleteSucceeded):
        state.deleting.discard(action.task_id)

    elif isinstance(action, DeleteFailed):
        state.deleting.discard(action.task.id)
        # Back at the front, not at its original position.
        state.tasks.insert(0, action.task)
        return _show_failure(state, action.failure, env)

    elif isinstance(action, AddTapped):
        state.editor = NewTaskState.create(env.now(), env.due_delay)

    elif isinstance(action, EditTapped):
        index = state.index_of(action.task_id)
        if index is not None:
            state.editor = NewTaskState.edit(state.tasks[index], env.now(), env.due_delay)

    elif isinstance(action, Editor):
        return _editor_result(state, action.action, env)

    elif isinstance(action, AlertDismissed):
        state.alert = None

    # LogoutTapped is handled by the root flow.
    return Effect.none()


def _editor_result(state: TaskListState, action: Any, env: TaskListEnvironment) -> Effect:
    if state.editor is None:
        return Effect.none()

    if isinstance(action, new_task.SaveSucceeded):
        index = state.index_of(action.task.id) if state.editor.mode == "update" else None
        if index is None:
            state.tasks.insert(0, action.task)
        else:
            state.tasks[index] = action.task
        state.editor = None
    elif isinstance(action, new_task.CancelTapped):
        state.editor = None
    elif isinstance(action, new_task.SaveFailed):
        if action.failure.is_unauthorized and env.logout_on_unauthorized:
            return Effect.send(LogoutTapped())

    return Effect.none()


def _editor_environment(env: TaskListEnvironment) -> NewTaskEnvironment:
    return NewTaskEnvironment(tasks_api=env.tasks_api)


task_list_reducer = combine(
    optional_child(
        new_task_reducer,
        state=lambda s: s.editor,
        action=Editor,
        environment=_editor_environment,
    ),
    _task_list_core,
)
