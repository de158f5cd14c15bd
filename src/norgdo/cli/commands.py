"""Subcommand handlers for the command line front end.

Tasks are addressed by their 1-based position in the loaded list, and
to-dos by their 1-based position inside a task. Task ids are regenerated on
every load, so positions are the only stable handle between invocations.
"""

from __future__ import annotations

import argparse
import logging

from ..models import Task
from ..services import TaskStore
from . import output

logger = logging.getLogger(__name__)


def _select_task(store: TaskStore, number: int) -> Task | None:
    tasks = store.tasks
    if not 1 <= number <= len(tasks):
        output.error(f"No task #{number} (have {len(tasks)})")
        return None
    return tasks[number - 1]


def _print_task_line(number: int, task: Task) -> None:
    counts = task.todo_counts()
    completed = sum(n for state, n in counts.items() if state.is_completed)
    print(
        f"{number:3d}. {task.title}  "
        f"{output.progress_bar(task.completion_percentage())}  "
        f"{completed}/{len(task.todos)}"
    )


def run_list(store: TaskStore, args: argparse.Namespace) -> int:  # noqa: ARG001
    """List every task with its completion."""
    tasks = store.tasks
    if not tasks:
        output.info(f"No tasks in {store.directory}")
        return 0
    for number, task in enumerate(tasks, start=1):
        _print_task_line(number, task)
    return 0


def run_board(store: TaskStore, args: argparse.Namespace) -> int:  # noqa: ARG001
    """Show tasks grouped into workflow columns."""
    positions = {task.id: number for number, task in enumerate(store.tasks, start=1)}
    for category, tasks in store.get_by_category().items():
        output.header(output.category_title(category, len(tasks)))
        for task in tasks:
            _print_task_line(positions[task.id], task)
        print()
    return 0


def run_show(store: TaskStore, args: argparse.Namespace) -> int:
    """Show a task with its description and to-dos."""
    task = _select_task(store, args.task)
    if task is None:
        return 1

    output.header(f"* {task.title}")
    print(f"  {task.kanban_category().label}  {output.progress_bar(task.completion_percentage())}")
    if task.due_date is not None:
        print(f"  Due: {task.due_date.isoformat()}")
    print()
    print(task.description or "No description provided.")
    print()
    if not task.todos:
        print("No TODO items")
    for number, todo in enumerate(task.todos, start=1):
        indent = "  " * todo.level
        print(f"{number:3d}. {indent}{output.todo_marker(todo.state)} {todo.text}")
    return 0


def run_new(store: TaskStore, args: argparse.Namespace) -> int:
    """Create a task."""
    task = store.create(args.title, args.description or "", args.todo or [])
    output.success(f"Created {task.file_path.name}")
    return 0


def run_toggle(store: TaskStore, args: argparse.Namespace) -> int:
    """Advance one to-do through the toggle cycle."""
    task = _select_task(store, args.task)
    if task is None:
        return 1
    if not 1 <= args.todo <= len(task.todos):
        output.error(f"No to-do #{args.todo} in {task.title!r}")
        return 1

    store.toggle_todo_state(task.id, args.todo - 1)
    todo = task.todos[args.todo - 1]
    output.success(f"{output.todo_marker(todo.state)} {todo.text} -> {todo.state.label}")
    return 0


def run_add_todo(store: TaskStore, args: argparse.Namespace) -> int:
    """Append a to-do to a task."""
    task = _select_task(store, args.task)
    if task is None:
        return 1
    todo = store.add_todo(task.id, args.text, level=args.level)
    if todo is None:
        return 1
    output.success(f"Added to-do to {task.title!r}: {todo.text}")
    return 0


def run_delete(store: TaskStore, args: argparse.Namespace) -> int:
    """Delete a task and its document."""
    task = _select_task(store, args.task)
    if task is None:
        return 1
    store.delete(task.id)
    output.success(f"Deleted {task.file_path.name}")
    return 0


def run_search(store: TaskStore, args: argparse.Namespace) -> int:
    """List tasks matching a query."""
    positions = {task.id: number for number, task in enumerate(store.tasks, start=1)}
    matches = store.search(args.query)
    if not matches:
        output.info(f"No tasks match {args.query!r}")
        return 0
    for task in matches:
        _print_task_line(positions[task.id], task)
    return 0
