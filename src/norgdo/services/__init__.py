"""Service layer for business logic."""

from .task_store import TOGGLE_CYCLE, TaskStore, next_state, single_line

__all__ = [
    "TOGGLE_CYCLE",
    "TaskStore",
    "next_state",
    "single_line",
]
