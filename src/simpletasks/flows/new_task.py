"""Form for creating a task or editing an existing one."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import partial
from typing import Literal, Optional, Union

from simpletasks.api import TasksAPI
from simpletasks.architecture import Effect
from simpletasks.models import Failure, Task, TaskPriority, TaskRequest

EditorMode = Literal["create", "update"]

SAVE_REQUEST = "new_task.save"

DEFAULT_DUE_DELAY = timedelta(hours=24)


@dataclass
class NewTaskState:
    mode: EditorMode
    due: datetime
    task_id: Optional[int] = None
    title: str = ""
    priority: TaskPriority = TaskPriority.LOW
    is_loading: bool = False
    alert: Optional[str] = None

    @classmethod
    def create(cls, now: datetime, due_delay: timedelta = DEFAULT_DUE_DELAY) -> NewTaskState:
        return cls(mode="create", due=now + due_delay)

    @classmethod
    def edit(
        cls, task: Task, now: datetime, due_delay: timedelta = DEFAULT_DUE_DELAY
    ) -> NewTaskState:
        if task.due_by is not None:
            due = datetime.fromtimestamp(task.due_by, tz=now.tzinfo)
        else:
            due = now + due_delay
        return cls(
            mode="update",
            due=due,
            task_id=task.id,
            title=task.title,
            priority=task.priority,
        )

    @property
    def is_valid(self) -> bool:
        return bool(self.title)

    def to_request(self) -> TaskRequest:
        return TaskRequest(
            title=self.title,
            due_by=int(self.due.timestamp()),
            priority=self.priority,
        )


@dataclass(frozen=True)
class TitleChanged:
    title: str


@dataclass(frozen=True)
class PriorityPicked:
    priority: TaskPriority


@dataclass(frozen=True)
class DuePicked:
    due: datetime


@dataclass(frozen=True)
class SaveTapped:
    pass


@dataclass(frozen=True)
class CancelTapped:
    pass


@dataclass(frozen=True)
class SaveSucceeded:
    task: Task


@dataclass(frozen=True)
class SaveFailed:
    failure: Failure


@dataclass(frozen=True)
class AlertDismissed:
    pass


NewTaskAction = Union[
    TitleChanged,
    PriorityPicked,
    DuePicked,
    SaveTapped,
    CancelTapped,
    SaveSucceeded,
    SaveFailed,
    AlertDismissed,
]


@dataclass
class NewTaskEnvironment:
    tasks_api: TasksAPI


def new_task_reducer(
    state: NewTaskState, action: NewTaskAction, env: NewTaskEnvironment
) -> Effect:
    if isinstance(action, (TitleChanged, PriorityPicked, DuePicked)):
        # The form is disabled while a save is in flight.
        if state.is_loading:
            return Effect.none()
        if isinstance(action, TitleChanged):
            state.title = action.title
        elif isinstance(action, PriorityPicked):
            state.priority = action.priority
        else:
            state.due = action.due

    elif isinstance(action, SaveTapped):
        if not state.is_valid or state.is_loading:
            return Effect.none()
        state.is_loading = True
        state.alert = None
        request = state.to_request()
        if state.mode == "update" and state.task_id is not None:
            call = partial(env.tasks_api.update_task, state.task_id, request)
        else:
            call = partial(env.tasks_api.create_task, request)
        return Effect.catching(call, SaveSucceeded, SaveFailed, id=SAVE_REQUEST)

    elif isinstance(action, CancelTapped):
        state.is_loading = False
        return Effect.cancel(SAVE_REQUEST)

    elif isinstance(action, SaveSucceeded):
        state.is_loading = False
    elif isinstance(action, SaveFailed):
        state.is_loading = False
        state.alert = action.failure.message
    elif isinstance(action, AlertDismissed):
        state.alert = None

    return Effect.none()
