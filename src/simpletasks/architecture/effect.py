"""Descriptions of asynchronous work returned by reducers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, replace
from typing import Any

from simpletasks.api.client import TasksClientError

Operation = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class Job:
    """A single unit of async work that may resolve to a follow-up action."""

    operation: Operation
    id: Hashable | None = None


@dataclass(frozen=True)
class Effect:
    """What a reducer asks the store to do after mutating state.

    An effect is inert until a :class:`~simpletasks.architecture.store.Store`
    runs it. Jobs sharing an ``id`` form one request family: starting a new
    job supersedes the running one, whose result is never delivered.
    """

    jobs: tuple[Job, ...] = ()
    cancellations: tuple[Hashable, ...] = ()
    actions: tuple[Any, ...] = ()

    @classmethod
    def none(cls) -> Effect:
        return cls()

    @classmethod
    def task(cls, operation: Operation, *, id: Hashable | None = None) -> Effect:
        """Run ``operation`` and send the action it resolves to, if any."""
        return cls(jobs=(Job(operation, id),))

    @classmethod
    def catching(
        cls,
        call: Operation,
        on_success: Callable[[Any], Any],
        on_failure: Callable[[Any], Any],
        *,
        id: Hashable | None = None,
    ) -> Effect:
        """Run an API call and turn its outcome into an action.

        ``TasksClientError`` becomes ``on_failure(failure)``; any other
        exception is a bug and propagates to the store.
        """

        async def operation():
            try:
                value = await call()
            except TasksClientError as e:
                return on_failure(e.failure)
            return on_success(value)

        return cls.task(operation, id=id)

    @classmethod
    def send(cls, *actions: Any) -> Effect:
        """Feed actions back into the store right after the current one."""
        return cls(actions=actions)

    @classmethod
    def cancel(cls, *ids: Hashable) -> Effect:
        """Cancel in-flight jobs; their results are dropped."""
        return cls(cancellations=ids)

    @classmethod
    def merge(cls, *effects: Effect) -> Effect:
        return cls(
            jobs=tuple(job for e in effects for job in e.jobs),
            cancellations=tuple(i for e in effects for i in e.cancellations),
            actions=tuple(a for e in effects for a in e.actions),
        )

    @property
    def is_none(self) -> bool:
        return not (self.jobs or self.cancellations or self.actions)

    def map(self, transform: Callable[[Any], Any]) -> Effect:
        """Wrap every action this effect produces with ``transform``."""
        if self.is_none:
            return self

        def lift(job: Job) -> Job:
            async def operation():
                action = await job.operation()
                return None if action is None else transform(action)

            return replace(job, operation=operation)

        return Effect(
            jobs=tuple(lift(job) for job in self.jobs),
            cancellations=self.cancellations,
            actions=tuple(transform(a) for a in self.actions),
        )
