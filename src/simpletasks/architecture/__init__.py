"""State, action, reducer and environment building blocks."""

from simpletasks.architecture.effect import Effect
from simpletasks.architecture.reducer import Reducer, combine, optional_child
from simpletasks.architecture.store import Store, log_actions

__all__ = ["Effect", "Reducer", "Store", "combine", "log_actions", "optional_child"]
