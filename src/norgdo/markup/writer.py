"""Serializer turning a Task back into .norg document text."""

from __future__ import annotations

from enum import Enum

from ..models import Task, TodoItem
from .meta import dump_meta, needs_meta
from .parser import INDENT_WIDTH


class NestingStyle(str, Enum):
    """How to-do nesting is written out."""

    INDENT = "indent"  # "  - ( ) child"
    PREFIX = "prefix"  # "-- ( ) child"


class NorgWriter:
    """Renders tasks in canonical document form."""

    def __init__(self, nesting_style: NestingStyle = NestingStyle.INDENT) -> None:
        self.nesting_style = NestingStyle(nesting_style)

    def write(self, task: Task) -> str:
        """Render a task. Re-parsing the output yields the same fields."""
        parts: list[str] = []
        if needs_meta(task):
            parts.append(dump_meta(task))

        parts.append(f"* {task.title}\n\n")

        if task.description:
            parts.append(f"{task.description}\n\n")

        parts.extend(f"{self.format_todo(todo)}\n" for todo in task.todos)
        return "".join(parts)

    def format_todo(self, todo: TodoItem) -> str:
        """Render a single to-do line without the trailing newline."""
        if self.nesting_style is NestingStyle.PREFIX:
            prefix = "-" * (todo.level + 1)
        else:
            prefix = " " * (INDENT_WIDTH * todo.level) + "-"
        line = f"{prefix} ({todo.state.char})"
        return f"{line} {todo.text}" if todo.text else line


def write(task: Task, nesting_style: NestingStyle = NestingStyle.INDENT) -> str:
    """Render a task as document text."""
    return NorgWriter(nesting_style).write(task)
