"""In-memory task collection backed by .norg documents."""

from __future__ import annotations

import logging
from pathlib import Path

from ..markup import NestingStyle, NorgParser, NorgWriter
from ..models import DEFAULT_TITLE, KanbanCategory, Task, TodoItem, TodoState
from ..repositories import FilesystemRepository
from ..utils import generate_filename, now_utc

logger = logging.getLogger(__name__)

# State a to-do moves to when toggled
TOGGLE_CYCLE: dict[TodoState, TodoState] = {
    TodoState.UNDONE: TodoState.PENDING,
    TodoState.PENDING: TodoState.DONE,
    TodoState.DONE: TodoState.UNDONE,
    TodoState.URGENT: TodoState.DONE,
    TodoState.UNCERTAIN: TodoState.PENDING,
    TodoState.ON_HOLD: TodoState.PENDING,
    TodoState.CANCELLED: TodoState.UNDONE,
    TodoState.RECURRING: TodoState.DONE,
}


def next_state(state: TodoState) -> TodoState:
    """State following the given one in the toggle cycle."""
    return TOGGLE_CYCLE[state]


def single_line(text: str) -> str:
    """Join the lines of a title or to-do text with spaces.

    Headings and to-dos occupy exactly one line of a document, so embedded
    line breaks would otherwise turn into description text or extra to-dos
    on the next load.
    """
    return " ".join(part.strip() for part in text.splitlines() if part.strip())


class TaskStore:
    """
    Owns the loaded tasks and mediates every change with their files.

    Tasks are keyed by an id generated when they are parsed or created. Ids
    do not survive a reload, so callers holding on to a task across
    ``reload()`` should rebind by position.

    Mutating methods write the affected document before returning. Unknown
    task ids and out-of-range to-do indexes are ignored. I/O errors
    (``OSError``) propagate to the caller.
    """

    def __init__(
        self,
        directory: Path,
        repository: FilesystemRepository | None = None,
        nesting_style: NestingStyle = NestingStyle.INDENT,
    ) -> None:
        self.directory = directory
        self.repository = repository or FilesystemRepository(directory)
        self._parser = NorgParser()
        self._writer = NorgWriter(nesting_style)
        self._tasks: list[Task] = []

    @property
    def tasks(self) -> list[Task]:
        """Loaded tasks in load/creation order."""
        return list(self._tasks)

    def get(self, task_id: str) -> Task | None:
        """Get a loaded task by ID."""
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # --- Loading ---

    def load_all(self, directory: Path | None = None) -> list[Task]:
        """
        Replace the loaded tasks with every document in the directory.

        A document that cannot be read is logged and skipped; the others
        still load.
        """
        if directory is not None and directory != self.directory:
            self.directory = directory
            self.repository = FilesystemRepository(directory)

        tasks: list[Task] = []
        for filepath in self.repository.iter_task_files():
            try:
                raw_text = self.repository.read(filepath)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable task file %s: %s", filepath, e)
                continue

            try:
                task, diagnostics = self._parser.parse_with_diagnostics(raw_text, filepath)
            except Exception as e:
                # Parsing is total, so this is a bug confined to one document
                logger.warning("Skipping task file %s: %s: %s", filepath, type(e).__name__, e)
                continue
            for note in diagnostics:
                logger.warning("%s: %s", filepath.name, note)
            tasks.append(task)

        self._tasks = tasks
        logger.info("Loaded %d task(s) from %s", len(tasks), self.directory)
        return self.tasks

    def reload(self) -> list[Task]:
        """Reload all tasks from the current directory."""
        return self.load_all()

    # --- Mutations ---

    def create(
        self,
        title: str,
        description: str = "",
        todos: list[str] | None = None,
    ) -> Task:
        """
        Create a task and write its document immediately.

        The file name is derived from the title. If a file with that name
        already exists a numeric suffix is added rather than overwriting it.
        Blank to-do strings are skipped. Line breaks in the title and to-do
        texts are replaced with spaces.
        """
        title = single_line(title) or DEFAULT_TITLE
        self.repository.ensure_directory()
        filepath = self.repository.unique_path(generate_filename(title))

        items = [
            TodoItem(text=single_line(text), state=TodoState.UNDONE)
            for text in (todos or [])
            if text.strip()
        ]
        task = Task(
            title=title,
            description=description.strip(),
            todos=items,
            file_path=filepath,
        )
        task.renumber_todos()

        self.repository.write(filepath, self._writer.write(task))
        self._tasks.append(task)
        logger.info("Task created: %s (%d to-dos)", filepath.name, len(items))
        return task

    def save(self, task_id: str) -> None:
        """Re-serialize a task and overwrite its document."""
        task = self.get(task_id)
        if task is None:
            logger.debug("save: task not found: %s", task_id)
            return
        task.updated_at = now_utc()
        self.repository.write(task.file_path, self._writer.write(task))

    def delete(self, task_id: str) -> None:
        """Delete a task's document and drop it from the collection."""
        task = self.get(task_id)
        if task is None:
            logger.debug("delete: task not found: %s", task_id)
            return
        self.repository.delete(task.file_path)
        self._tasks.remove(task)
        logger.info("Task deleted: %s", task.file_path.name)

    def toggle_todo_state(self, task_id: str, todo_index: int) -> None:
        """Advance a to-do through the toggle cycle and save the task."""
        todo = self._get_todo(task_id, todo_index)
        if todo is None:
            return
        self.set_todo_state(task_id, todo_index, next_state(todo.state))

    def set_todo_state(self, task_id: str, todo_index: int, state: TodoState) -> None:
        """Set a to-do to a specific state and save the task."""
        todo = self._get_todo(task_id, todo_index)
        if todo is None:
            return
        old_state = todo.state
        todo.state = state
        self.save(task_id)
        logger.debug(
            "To-do %s of %s: %s -> %s", todo.id, task_id, old_state.value, state.value
        )

    def add_todo(self, task_id: str, text: str, level: int = 0) -> TodoItem | None:
        """Append a to-do to a task and save it.

        Line breaks in the text are replaced with spaces and a negative level
        is treated as top level.
        """
        task = self.get(task_id)
        if task is None:
            logger.debug("add_todo: task not found: %s", task_id)
            return None
        todo = TodoItem(
            id=f"todo_{len(task.todos)}", text=single_line(text), level=max(level, 0)
        )
        task.todos.append(todo)
        self.save(task_id)
        return todo

    # --- Queries ---

    def search(self, query: str) -> list[Task]:
        """Tasks whose title, description or to-do text contains the query."""
        return [task for task in self._tasks if task.matches(query)]

    def get_by_category(self) -> dict[KanbanCategory, list[Task]]:
        """Group the loaded tasks by workflow column, in load order."""
        grouped: dict[KanbanCategory, list[Task]] = {category: [] for category in KanbanCategory}
        for task in self._tasks:
            grouped[task.kanban_category()].append(task)
        return grouped

    def _get_todo(self, task_id: str, todo_index: int) -> TodoItem | None:
        task = self.get(task_id)
        if task is None:
            logger.debug("task not found: %s", task_id)
            return None
        if not 0 <= todo_index < len(task.todos):
            logger.debug("to-do index %d out of range for %s", todo_index, task_id)
            return None
        return task.todos[todo_index]
