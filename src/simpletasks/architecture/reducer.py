"""Reducer composition helpers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

from simpletasks.architecture.effect import Effect
from simpletasks.utils.logger import get_logger

Reducer = Callable[[Any, Any, Any], Effect]


def combine(*reducers: Reducer) -> Reducer:
    """Run ``reducers`` in order against the same state and merge their effects."""

    def reducer(state, action, environment) -> Effect:
        return Effect.merge(*(r(state, action, environment) for r in reducers))

    return reducer


def optional_child(
    child: Reducer,
    *,
    state: Callable[[Any], Optional[Any]],
    action: type,
    environment: Callable[[Any], Any],
) -> Reducer:
    """Lift a child reducer into its parent.

    ``state`` extracts the child state from the parent (``None`` when the
    child is not presented), ``action`` is the parent action type wrapping
    child actions in its ``action`` attribute, and ``environment`` derives
    the child environment. Effects produced by the child are wrapped back
    into ``action``. Child actions arriving while the child is absent are
    dropped.
    """

    def reducer(parent_state, parent_action, parent_environment) -> Effect:
        if not isinstance(parent_action, action):
            return Effect.none()

        child_state = state(parent_state)
        if child_state is None:
            get_logger(__name__).debug(
                "dropped %r: no %s state", parent_action.action, action.__name__
            )
            return Effect.none()

        effect = child(child_state, parent_action.action, environment(parent_environment))
        return effect.map(action)

    return reducer
