"""Enums for to-do state, workflow column and task relations."""

from __future__ import annotations

from enum import Enum


class TodoState(str, Enum):
    """Status of a single to-do item."""

    DONE = "done"
    PENDING = "pending"
    UNDONE = "undone"
    UNCERTAIN = "uncertain"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"
    RECURRING = "recurring"
    URGENT = "urgent"

    @classmethod
    def from_char(cls, char: str) -> TodoState:
        """Decode a status character. Unknown characters decode to UNDONE."""
        return _STATE_BY_CHAR.get(char, cls.UNDONE)

    @classmethod
    def is_known_char(cls, char: str) -> bool:
        """Whether the character is part of the status table."""
        return char in _STATE_BY_CHAR

    @property
    def char(self) -> str:
        """Canonical markup character, e.g. 'x' for DONE."""
        return _CHAR_BY_STATE[self]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_completed(self) -> bool:
        return self in (TodoState.DONE, TodoState.CANCELLED)

    @property
    def is_in_progress(self) -> bool:
        return self in (TodoState.PENDING, TodoState.URGENT)


_CHAR_BY_STATE: dict[TodoState, str] = {
    TodoState.DONE: "x",
    TodoState.PENDING: "-",
    TodoState.UNDONE: " ",
    TodoState.UNCERTAIN: "?",
    TodoState.ON_HOLD: "=",
    TodoState.CANCELLED: "_",
    TodoState.RECURRING: "+",
    TodoState.URGENT: "!",
}

_STATE_BY_CHAR: dict[str, TodoState] = {char: state for state, char in _CHAR_BY_STATE.items()}

_LABELS: dict[TodoState, str] = {
    TodoState.DONE: "Done",
    TodoState.PENDING: "Pending",
    TodoState.UNDONE: "To Do",
    TodoState.UNCERTAIN: "Uncertain",
    TodoState.ON_HOLD: "On Hold",
    TodoState.CANCELLED: "Cancelled",
    TodoState.RECURRING: "Recurring",
    TodoState.URGENT: "Urgent",
}


class KanbanCategory(str, Enum):
    """Workflow column a task belongs to, derived from its to-dos."""

    YET_TO_BE_DONE = "yet_to_be_done"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS: dict[KanbanCategory, str] = {
    KanbanCategory.YET_TO_BE_DONE: "Yet to be Done",
    KanbanCategory.IN_PROGRESS: "In Progress",
    KanbanCategory.COMPLETED: "Completed",
}


class RelationType(str, Enum):
    """Kinds of links between tasks."""

    RELATED = "related"
    REQUIRES = "requires"
    BLOCKS = "blocks"
