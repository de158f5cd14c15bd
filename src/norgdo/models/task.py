"""Task domain model."""

from __future__ import annotations

import uuid
from collections import Counter
from datetime import date, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from ..utils import now_utc
from .enums import KanbanCategory, RelationType, TodoState

DEFAULT_TITLE = "Untitled Task"


class TodoItem(BaseModel):
    """A single checkable line of a task document."""

    id: str = ""  # "todo_0", "todo_1", ... only meaningful inside its task
    text: str
    state: TodoState = TodoState.UNDONE
    level: int = Field(default=0, ge=0)  # Nesting depth
    line_number: int = Field(default=0, ge=0)  # 1-based, 0 when unknown


class TaskRelation(BaseModel):
    """A link from one task to another."""

    target_task_id: str
    relation_type: RelationType = RelationType.RELATED


class Task(BaseModel):
    """Represents a single task backed by a .norg document."""

    # Generated per session, never written to the document
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = DEFAULT_TITLE
    description: str = ""
    todos: list[TodoItem] = Field(default_factory=list)
    relations: list[TaskRelation] = Field(default_factory=list)
    file_path: Path = Path()
    due_date: date | None = None
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)

    def todo_counts(self) -> dict[TodoState, int]:
        """Number of to-dos in each state. States with no to-dos are absent."""
        return dict(Counter(todo.state for todo in self.todos))

    def completion_percentage(self) -> float:
        """Share of completed to-dos, 0-100. A task without to-dos is complete."""
        if not self.todos:
            return 100.0
        completed = sum(1 for todo in self.todos if todo.state.is_completed)
        return completed / len(self.todos) * 100.0

    def kanban_category(self) -> KanbanCategory:
        """
        Derive the workflow column from the current to-do states.

        - no to-dos: yet to be done
        - every to-do done or cancelled: completed
        - any to-do pending/urgent, or any completed: in progress
        - otherwise: yet to be done
        """
        if not self.todos:
            return KanbanCategory.YET_TO_BE_DONE

        counts = self.todo_counts()
        total = len(self.todos)
        completed = counts.get(TodoState.DONE, 0) + counts.get(TodoState.CANCELLED, 0)
        in_progress = counts.get(TodoState.PENDING, 0) + counts.get(TodoState.URGENT, 0)

        if completed == total:
            return KanbanCategory.COMPLETED
        if in_progress > 0 or completed > 0:
            return KanbanCategory.IN_PROGRESS
        return KanbanCategory.YET_TO_BE_DONE

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on title, description and to-dos."""
        needle = query.lower()
        return (
            needle in self.title.lower()
            or needle in self.description.lower()
            or any(needle in todo.text.lower() for todo in self.todos)
        )

    def renumber_todos(self) -> None:
        """Reassign sequential to-do ids in list order."""
        for index, todo in enumerate(self.todos):
            todo.id = f"todo_{index}"
