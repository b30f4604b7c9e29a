"""Screen-level state machines."""
