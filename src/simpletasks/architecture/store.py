"""Runtime that owns the state and runs effects."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import deque
from collections.abc import Callable, Hashable
from typing import Any, Optional

from simpletasks.architecture.effect import Effect, Job
from simpletasks.architecture.reducer import Reducer
from simpletasks.utils.logger import get_logger

Observer = Callable[[Any, Any], None]


def log_actions(target: Optional[logging.Logger] = None) -> Observer:
    """Observer logging every dispatched action at debug level."""
    target = target or get_logger("actions")

    def observer(action: Any, state: Any) -> None:
        target.debug("received %r", action)

    return observer


class Store:
    """Single owner of the application state.

    ``send`` runs the reducer synchronously, so every mutation happens on
    the caller's turn. Jobs returned by the reducer run as asyncio tasks on
    the running loop and feed their result back through ``send``.
    """

    def __init__(
        self,
        initial_state: Any,
        reducer: Reducer,
        environment: Any,
        *,
        observer: Optional[Observer] = None,
    ):
        self.state = initial_state
        self._reducer = reducer
        self._environment = environment
        self._observer = observer

        self._queue: deque = deque()
        self._dispatching = False
        self._counter = itertools.count(1)
        # id -> generation of the only job of that family allowed to deliver
        self._generations: dict[Hashable, int] = {}
        self._running: dict[Hashable, asyncio.Task] = {}
        self._tasks: set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        """Number of jobs still running."""
        return len(self._tasks)

    def send(self, action: Any) -> None:
        """Dispatch ``action`` and any actions it synchronously produces."""
        self._queue.append(action)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                self._dispatch(self._queue.popleft())
        finally:
            self._dispatching = False

    def _dispatch(self, action: Any) -> None:
        effect = self._reducer(self.state, action, self._environment)
        if self._observer is not None:
            self._observer(action, self.state)

        for id in effect.cancellations:
            self._cancel(id)
        for job in effect.jobs:
            self._start(job)
        self._queue.extend(effect.actions)

    def _start(self, job: Job) -> None:
        generation = next(self._counter)
        if job.id is not None:
            self._cancel(job.id)
            self._generations[job.id] = generation

        task = asyncio.get_running_loop().create_task(self._run(job, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        if job.id is not None:
            self._running[job.id] = task

    def _cancel(self, id: Hashable) -> None:
        self._generations.pop(id, None)
        task = self._running.pop(id, None)
        if task is not None and not task.done():
            get_logger(__name__).debug("cancelling in-flight job %r", id)
            task.cancel()

    async def _run(self, job: Job, generation: int) -> None:
        current = True
        try:
            action = await job.operation()
        finally:
            if job.id is not None:
                current = self._generations.get(job.id) == generation
                if current:
                    del self._generations[job.id]
                    del self._running[job.id]

        if not current:
            get_logger(__name__).debug("dropped superseded result of %r", job.id)
            return
        if action is not None:
            self.send(action)

    def cancel_all(self) -> None:
        """Cancel every running job."""
        for task in self._tasks:
            task.cancel()
        self._generations.clear()
        self._running.clear()

    async def close(self) -> None:
        """Cancel every running job and wait until all of them have finished."""
        tasks = list(self._tasks)
        self.cancel_all()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def settle(self) -> None:
        """Wait until no job is running, including jobs started meanwhile.

        Re-raises the first unexpected exception raised by a job.
        """
        while self._tasks:
            done, _ = await asyncio.wait(set(self._tasks))
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    raise task.exception()
