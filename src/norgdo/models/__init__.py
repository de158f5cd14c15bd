"""Data models."""

from .enums import KanbanCategory, RelationType, TodoState
from .task import DEFAULT_TITLE, Task, TaskRelation, TodoItem

__all__ = [
    "DEFAULT_TITLE",
    "KanbanCategory",
    "RelationType",
    "Task",
    "TaskRelation",
    "TodoItem",
    "TodoState",
]
