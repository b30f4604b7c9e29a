"""Tests for the task list flow."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from simpletasks.architecture import Store
from simpletasks.flows import new_task
from simpletasks.flows.task_list import (
    PAGE_REQUEST,
    AddTapped,
    AlertDismissed,
    DeleteFailed,
    DeleteTapped,
    EditTapped,
    Editor,
    LoadNextPage,
    LogoutTapped,
    RefreshTriggered,
    TaskListEnvironment,
    TaskListState,
    TasksFailed,
    TasksLoaded,
    ViewAppeared,
    delete_request,
    task_list_reducer,
)
from simpletasks.models import Failure, TaskPriority
from tests.fakes import PendingCalls, client_error, make_page, make_task

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def env(tasks_api):
    return TaskListEnvironment(tasks_api=tasks_api, now=lambda: NOW)


@pytest.fixture
def store(env):
    return Store(TaskListState(), task_list_reducer, env)


def ids(state):
    return [task.id for task in state.tasks]


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------


def test_view_appeared_on_empty_list_loads_first_page(env):
    state = TaskListState()
    effect = task_list_reducer(state, ViewAppeared(), env)

    assert state.is_loading is True
    assert state.is_refreshing is False
    assert [job.id for job in effect.jobs] == [PAGE_REQUEST]


def test_view_appeared_with_tasks_does_nothing(env):
    state = TaskListState(tasks=[make_task(1)], current_page=1)
    assert task_list_reducer(state, ViewAppeared(), env).is_none
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_bootstrap_requests_page_one(store, tasks_api):
    tasks_api.list_tasks.return_value = make_page([1, 2], current=1, limit=2, count=5)

    store.send(ViewAppeared())
    await store.settle()

    tasks_api.list_tasks.assert_awaited_once_with(1)
    assert ids(store.state) == [1, 2]
    assert store.state.current_page == 1
    assert store.state.can_load_next_page is True
    assert store.state.is_loading is False


@pytest.mark.parametrize(
    ("current", "limit", "count", "expected"),
    [(2, 10, 20, False), (2, 10, 19, False), (2, 10, 21, True), (1, 10, 11, True)],
)
def test_loaded_page_recomputes_next_page_flag(env, current, limit, count, expected):
    state = TaskListState(is_loading=True)
    page = make_page([1], current=current, limit=limit, count=count)

    task_list_reducer(state, TasksLoaded(page, current), env)

    assert state.can_load_next_page is expected
    assert state.current_page == current


def test_page_one_replaces_collection(env):
    state = TaskListState(tasks=[make_task(1), make_task(2)], current_page=3, is_refreshing=True)

    task_list_reducer(state, TasksLoaded(make_page([9], current=1), 1), env)

    assert ids(state) == [9]
    assert state.current_page == 1
    assert state.is_refreshing is False


def test_later_page_appends_without_dedup(env):
    state = TaskListState(tasks=[make_task(1), make_task(2)], current_page=1, is_loading=True)

    task_list_reducer(state, TasksLoaded(make_page([2, 3], current=2, count=30), 2), env)

    assert ids(state) == [1, 2, 2, 3]
    assert state.is_loading is False


@pytest.mark.asyncio
async def test_next_page_requests_following_page(store, tasks_api):
    store.state.tasks = [make_task(1)]
    store.state.current_page = 1
    tasks_api.list_tasks.return_value = make_page([2], current=2, limit=1, count=2)

    store.send(LoadNextPage())
    await store.settle()

    tasks_api.list_tasks.assert_awaited_once_with(2)
    assert ids(store.state) == [1, 2]
    assert store.state.can_load_next_page is False


@pytest.mark.parametrize(
    "flags",
    [
        {"is_loading": True},
        {"is_refreshing": True},
        {"can_load_next_page": False},
    ],
)
def test_next_page_guard(env, tasks_api, flags):
    state = TaskListState(tasks=[make_task(1)], current_page=1, **flags)
    effect = task_list_reducer(state, LoadNextPage(), env)

    assert effect.is_none
    tasks_api.list_tasks.assert_not_called()


@pytest.mark.asyncio
async def test_repeated_scroll_triggers_issue_one_call(store, tasks_api):
    pending = PendingCalls()
    tasks_api.list_tasks = pending

    store.send(ViewAppeared())
    store.send(LoadNextPage())
    store.send(LoadNextPage())
    await asyncio.sleep(0)

    assert pending.args == [(1,)]
    pending.resolve(0, make_page([1], current=1, limit=1, count=3))
    await store.settle()
    assert ids(store.state) == [1]


def test_refresh_sets_flag_and_requests_page_one(env):
    state = TaskListState(tasks=[make_task(1)], current_page=2, is_loading=True)
    effect = task_list_reducer(state, RefreshTriggered(), env)

    assert state.is_refreshing is True
    assert state.is_loading is False
    assert [job.id for job in effect.jobs] == [PAGE_REQUEST]


@pytest.mark.asyncio
async def test_refresh_supersedes_page_load(store, tasks_api):
    pending = PendingCalls()
    tasks_api.list_tasks = pending
    store.state.tasks = [make_task(1)]
    store.state.current_page = 1

    store.send(LoadNextPage())
    await asyncio.sleep(0)
    store.send(RefreshTriggered())
    await asyncio.sleep(0)

    assert pending.args == [(2,), (1,)]
    pending.resolve(1, make_page([5, 6], current=1, limit=2, count=4))
    pending.resolve(0, make_page([3, 4], current=2, limit=2, count=4))
    await store.settle()

    assert ids(store.state) == [5, 6]
    assert store.state.current_page == 1
    assert store.state.is_loading is False
    assert store.state.is_refreshing is False


@pytest.mark.asyncio
async def test_refresh_failure_keeps_collection(store, tasks_api):
    store.state.tasks = [make_task(1)]
    tasks_api.list_tasks.side_effect = client_error("Server is down", 500)

    store.send(RefreshTriggered())
    await store.settle()

    assert ids(store.state) == [1]
    assert store.state.is_refreshing is False
    assert store.state.alert == "Server is down"

    store.send(AlertDismissed())
    assert store.state.alert is None


def test_page_failure_clears_loading(env):
    state = TaskListState(is_loading=True)
    task_list_reducer(state, TasksFailed(Failure(message="Network error")), env)

    assert state.is_loading is False
    assert state.alert == "Network error"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_removes_immediately(store, tasks_api):
    store.state.tasks = [make_task(5), make_task(7), make_task(9)]

    store.send(DeleteTapped(7))
    assert ids(store.state) == [5, 9]

    await store.settle()
    tasks_api.delete_task.assert_awaited_once_with(7)
    assert ids(store.state) == [5, 9]
    assert store.state.alert is None
    assert store.state.deleting == set()


@pytest.mark.asyncio
async def test_failed_delete_reinserts_at_front(store, tasks_api):
    store.state.tasks = [make_task(5), make_task(7), make_task(9)]
    tasks_api.delete_task.side_effect = client_error("Network error", None)

    store.send(DeleteTapped(7))
    assert ids(store.state) == [5, 9]
    await store.settle()

    assert ids(store.state) == [7, 5, 9]
    assert store.state.alert == "Network error"
    tasks_api.delete_task.assert_awaited_once()


def test_delete_unknown_task_is_ignored(env, tasks_api):
    state = TaskListState(tasks=[make_task(1)])
    assert task_list_reducer(state, DeleteTapped(42), env).is_none
    assert ids(state) == [1]


def test_delete_uses_per_task_request_id(env):
    state = TaskListState(tasks=[make_task(1)])
    effect = task_list_reducer(state, DeleteTapped(1), env)

    assert [job.id for job in effect.jobs] == [delete_request(1)]
    assert state.deleting == {1}
    assert delete_request(1) in state.request_ids()


def test_delete_failed_action_restores_task(env):
    state = TaskListState(tasks=[make_task(2)])
    task_list_reducer(state, DeleteFailed(make_task(7), Failure(message="Nope")), env)
    assert ids(state) == [7, 2]


# ---------------------------------------------------------------------------
# Editor hand-off
# ---------------------------------------------------------------------------


def test_add_opens_empty_editor(env):
    state = TaskListState()
    task_list_reducer(state, AddTapped(), env)

    assert state.editor.mode == "create"
    assert state.editor.title == ""
    assert state.editor.priority is TaskPriority.LOW
    assert state.editor.due == NOW + timedelta(hours=24)


def test_add_uses_configured_due_delay(tasks_api):
    env = TaskListEnvironment(tasks_api=tasks_api, now=lambda: NOW, due_delay=timedelta(hours=2))
    state = TaskListState()
    task_list_reducer(state, AddTapped(), env)
    assert state.editor.due == NOW + timedelta(hours=2)


def test_edit_opens_prefilled_editor(env):
    task = make_task(3, "Old title", priority=TaskPriority.HIGH, due_by=1_714_600_000)
    state = TaskListState(tasks=[task])

    task_list_reducer(state, EditTapped(3), env)

    assert state.editor.mode == "update"
    assert state.editor.task_id == 3
    assert state.editor.title == "Old title"
    assert state.editor.priority is TaskPriority.HIGH
    assert int(state.editor.due.timestamp()) == 1_714_600_000


def test_edit_unknown_task_keeps_editor_closed(env):
    state = TaskListState(tasks=[make_task(1)])
    task_list_reducer(state, EditTapped(99), env)
    assert state.editor is None


def test_cancel_tears_down_editor(env):
    state = TaskListState(tasks=[make_task(1)])
    task_list_reducer(state, AddTapped(), env)
    effect = task_list_reducer(state, Editor(new_task.CancelTapped()), env)

    assert state.editor is None
    assert ids(state) == [1]
    assert effect.cancellations == (new_task.SAVE_REQUEST,)


def test_editor_actions_after_teardown_are_dropped(env):
    state = TaskListState()
    effect = task_list_reducer(state, Editor(new_task.SaveSucceeded(make_task(1))), env)

    assert effect.is_none
    assert state.tasks == []


@pytest.mark.asyncio
async def test_created_task_is_prepended(store, tasks_api):
    store.state.tasks = [make_task(1), make_task(2)]
    tasks_api.create_task.return_value = make_task(10, "New")

    store.send(AddTapped())
    store.send(Editor(new_task.TitleChanged("New")))
    store.send(Editor(new_task.SaveTapped()))
    await store.settle()

    assert store.state.editor is None
    assert ids(store.state) == [10, 1, 2]
    request = tasks_api.create_task.await_args.args[0]
    assert request.title == "New"
    assert request.due_by == int((NOW + timedelta(hours=24)).timestamp())


@pytest.mark.asyncio
@pytest.mark.parametrize("page_first", [True, False])
async def test_created_task_lands_first_while_page_two_loads(store, tasks_api, page_first):
    pages = PendingCalls()
    saves = PendingCalls()
    tasks_api.list_tasks = pages
    tasks_api.create_task = saves
    store.state.tasks = [make_task(1), make_task(2)]
    store.state.current_page = 1

    store.send(LoadNextPage())
    store.send(AddTapped())
    store.send(Editor(new_task.TitleChanged("New")))
    store.send(Editor(new_task.SaveTapped()))
    await asyncio.sleep(0)

    page = make_page([3, 4], current=2, limit=2, count=4)
    if page_first:
        pages.resolve(0, page)
        await asyncio.sleep(0)
        saves.resolve(0, make_task(10, "New"))
    else:
        saves.resolve(0, make_task(10, "New"))
        await asyncio.sleep(0)
        pages.resolve(0, page)
    await store.settle()

    assert ids(store.state)[0] == 10
    assert sorted(ids(store.state)) == [1, 2, 3, 4, 10]


@pytest.mark.asyncio
async def test_save_failure_keeps_editor(store, tasks_api):
    tasks_api.create_task.side_effect = client_error("Title too long")

    store.send(AddTapped())
    store.send(Editor(new_task.TitleChanged("x" * 300)))
    store.send(Editor(new_task.SaveTapped()))
    await store.settle()

    assert store.state.editor is not None
    assert store.state.editor.alert == "Title too long"
    assert store.state.editor.title == "x" * 300
    assert store.state.tasks == []


@pytest.mark.asyncio
async def test_edited_task_is_replaced_in_place(store, tasks_api):
    store.state.tasks = [make_task(1), make_task(2), make_task(3)]
    tasks_api.update_task.return_value = make_task(2, "Renamed")

    store.send(EditTapped(2))
    store.send(Editor(new_task.TitleChanged("Renamed")))
    store.send(Editor(new_task.SaveTapped()))
    await store.settle()

    assert store.state.editor is None
    assert [t.title for t in store.state.tasks] == ["Task 1", "Renamed", "Task 3"]
    assert tasks_api.update_task.await_args.args[0] == 2


# ---------------------------------------------------------------------------
# Expired session
# ---------------------------------------------------------------------------


def test_unauthorized_failure_requests_logout(env):
    state = TaskListState(is_refreshing=True)
    effect = task_list_reducer(
        state, TasksFailed(Failure(message="Token expired", status_code=401)), env
    )

    assert state.alert == "Token expired"
    assert effect.actions == (LogoutTapped(),)


def test_unauthorized_logout_can_be_disabled(tasks_api):
    env = TaskListEnvironment(tasks_api=tasks_api, logout_on_unauthorized=False)
    state = TaskListState()
    effect = task_list_reducer(
        state, TasksFailed(Failure(message="Token expired", status_code=401)), env
    )
    assert effect.is_none


def test_unauthorized_save_requests_logout(env):
    state = TaskListState()
    task_list_reducer(state, AddTapped(), env)
    effect = task_list_reducer(
        state,
        Editor(new_task.SaveFailed(Failure(message="Token expired", status_code=401))),
        env,
    )
    assert LogoutTapped() in effect.actions


def test_logout_is_left_to_parent(env):
    state = TaskListState(tasks=[make_task(1)])
    assert task_list_reducer(state, LogoutTapped(), env).is_none
    assert ids(state) == [1]
