"""Integration tests for TaskStore."""

import logging
from pathlib import Path

import pytest

from norgdo.markup import NestingStyle
from norgdo.models import KanbanCategory, TodoState
from norgdo.services import TOGGLE_CYCLE, TaskStore, next_state

GROCERIES = "* Buy groceries\n\nWeekly shop\n\n- ( ) milk\n- (x) eggs\n"


@pytest.fixture
def task_dir(tmp_path: Path) -> Path:
    """Create a temporary task directory."""
    task_root = tmp_path / "norgdo"
    task_root.mkdir()
    return task_root


@pytest.fixture
def store(task_dir: Path) -> TaskStore:
    """Create a store over the temporary directory."""
    return TaskStore(task_dir)


def create_task_file(task_dir: Path, filename: str, content: str = GROCERIES) -> Path:
    """Helper to create a task file directly."""
    filepath = task_dir / filename
    filepath.write_text(content, encoding="utf-8")
    return filepath


class TestLoadAll:
    """Tests for loading documents."""

    def test_empty_directory(self, store: TaskStore):
        """An empty directory loads nothing."""
        assert store.load_all() == []

    def test_missing_directory(self, tmp_path: Path):
        """A directory that does not exist yet loads nothing."""
        assert TaskStore(tmp_path / "missing").load_all() == []

    def test_loads_norg_files_only(self, store: TaskStore, task_dir: Path):
        """Only .norg files directly in the directory are tasks."""
        create_task_file(task_dir, "a.norg", "* A\n")
        create_task_file(task_dir, "b.norg", "* B\n")
        create_task_file(task_dir, "notes.md", "* Not a task\n")
        (task_dir / "sub").mkdir()
        create_task_file(task_dir / "sub", "c.norg", "* Nested\n")

        tasks = store.load_all()

        assert [task.title for task in tasks] == ["A", "B"]
        assert tasks[0].file_path == task_dir / "a.norg"

    def test_unreadable_file_is_skipped(
        self, store: TaskStore, task_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        """One broken file does not stop the others from loading."""
        create_task_file(task_dir, "good.norg")
        (task_dir / "bad.norg").write_bytes(b"\xff\xfe* not utf-8 \x80\n")

        with caplog.at_level(logging.WARNING, logger="norgdo"):
            tasks = store.load_all()

        assert [task.title for task in tasks] == ["Buy groceries"]
        assert any("bad.norg" in record.getMessage() for record in caplog.records)

        # Still usable afterwards
        assert store.search("milk") == tasks

    def test_bad_relations_do_not_abort_load(
        self, store: TaskStore, task_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        """A metadata block with the wrong shape degrades that one document."""
        create_task_file(task_dir, "a.norg")
        create_task_file(
            task_dir, "b.norg", "@document.meta\nrelations: true\n@end\n* B\n- ( ) b1\n"
        )

        with caplog.at_level(logging.WARNING, logger="norgdo"):
            tasks = store.load_all()

        assert [task.title for task in tasks] == ["Buy groceries", "B"]
        assert tasks[1].relations == []
        assert any(
            "b.norg" in r.getMessage() and "invalid relations" in r.getMessage()
            for r in caplog.records
        )

    def test_parser_failure_skips_only_that_file(
        self,
        store: TaskStore,
        task_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ):
        """An exception while parsing one document is logged and the rest load."""
        create_task_file(task_dir, "a.norg")
        create_task_file(task_dir, "b.norg", "* B\n")
        real_parse = store._parser.parse_with_diagnostics

        def flaky_parse(raw_text, file_path=None):
            if file_path.name == "b.norg":
                raise RuntimeError("boom")
            return real_parse(raw_text, file_path)

        monkeypatch.setattr(store._parser, "parse_with_diagnostics", flaky_parse)

        with caplog.at_level(logging.WARNING, logger="norgdo"):
            tasks = store.load_all()

        assert [task.title for task in tasks] == ["Buy groceries"]
        assert any("b.norg" in r.getMessage() and "boom" in r.getMessage() for r in caplog.records)

    def test_diagnostics_are_logged(
        self, store: TaskStore, task_dir: Path, caplog: pytest.LogCaptureFixture
    ):
        """Degraded documents load and are reported as warnings."""
        create_task_file(task_dir, "odd.norg", "no heading here\n- (z) thing\n")

        with caplog.at_level(logging.WARNING, logger="norgdo"):
            tasks = store.load_all()

        assert tasks[0].title == "Untitled Task"
        messages = [record.getMessage() for record in caplog.records]
        assert any("odd.norg" in m and "no heading" in m for m in messages)
        assert any("unknown status" in m for m in messages)

    def test_reload_replaces_tasks(self, store: TaskStore, task_dir: Path):
        """Reload picks up added and removed files with fresh ids."""
        first = create_task_file(task_dir, "a.norg", "* A\n")
        old_id = store.load_all()[0].id

        first.unlink()
        create_task_file(task_dir, "b.norg", "* B\n")
        tasks = store.reload()

        assert [task.title for task in tasks] == ["B"]
        assert store.get(old_id) is None

    def test_load_other_directory(self, store: TaskStore, tmp_path: Path):
        """load_all can switch directories."""
        other = tmp_path / "other"
        other.mkdir()
        create_task_file(other, "x.norg", "* Elsewhere\n")

        tasks = store.load_all(other)

        assert [task.title for task in tasks] == ["Elsewhere"]
        assert store.directory == other


class TestCreate:
    """Tests for task creation."""

    def test_create_writes_file(self, store: TaskStore, task_dir: Path):
        """create writes the document and keeps the task."""
        task = store.create("Buy groceries", "Weekly shop", ["milk", "eggs"])

        assert task.file_path == task_dir / "Buy_groceries.norg"
        assert task.file_path.read_text(encoding="utf-8") == (
            "* Buy groceries\n\nWeekly shop\n\n- ( ) milk\n- ( ) eggs\n"
        )
        assert store.tasks == [task]
        assert store.get(task.id) is task
        assert [todo.id for todo in task.todos] == ["todo_0", "todo_1"]

    def test_create_joins_line_breaks(self, store: TaskStore):
        """Titles and to-dos with line breaks reload unchanged."""
        task = store.create("a\nb", todos=["first\r\nsecond"])

        assert task.title == "a b"
        reloaded = store.reload()[0]
        assert reloaded.title == "a b"
        assert reloaded.description == ""
        assert [todo.text for todo in reloaded.todos] == ["first second"]

    def test_create_title_only(self, store: TaskStore):
        """A bare title makes a task with no to-dos."""
        task = store.create("Someday")
        assert task.todos == []
        assert task.file_path.read_text(encoding="utf-8") == "* Someday\n\n"

    def test_blank_todos_skipped(self, store: TaskStore):
        """Blank to-do strings are ignored."""
        task = store.create("T", todos=["one", "  ", ""])
        assert [todo.text for todo in task.todos] == ["one"]

    def test_filename_sanitized(self, store: TaskStore, task_dir: Path):
        """Unsafe characters become underscores and are trimmed at the ends."""
        task = store.create("  Fix: bug #42 (urgent)! ")
        assert task.file_path == task_dir / "Fix__bug__42__urgent.norg"
        assert task.title == "Fix: bug #42 (urgent)!"

    def test_name_collision_gets_suffix(self, store: TaskStore, task_dir: Path):
        """Creating the same title twice keeps both files."""
        first = store.create("Same")
        second = store.create("Same")
        third = store.create("Same")

        assert first.file_path == task_dir / "Same.norg"
        assert second.file_path == task_dir / "Same-1.norg"
        assert third.file_path == task_dir / "Same-2.norg"

    def test_empty_title(self, store: TaskStore, task_dir: Path):
        """An empty title falls back to the placeholder."""
        task = store.create("")
        assert task.title == "Untitled Task"
        assert task.file_path == task_dir / "Untitled_Task.norg"

    def test_creates_missing_directory(self, tmp_path: Path):
        """The directory is created on first write."""
        store = TaskStore(tmp_path / "new" / "dir")
        task = store.create("First")
        assert task.file_path.exists()

    def test_created_task_reloads(self, store: TaskStore):
        """A created task loads back with the same content."""
        store.create("Buy groceries", "Weekly shop", ["milk"])
        reloaded = store.reload()[0]
        assert reloaded.title == "Buy groceries"
        assert reloaded.description == "Weekly shop"
        assert [todo.text for todo in reloaded.todos] == ["milk"]


class TestSaveAndDelete:
    """Tests for save and delete."""

    def test_save_writes_changes(self, store: TaskStore, task_dir: Path):
        """Edited fields are written on save."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]
        before = task.updated_at

        task.title = "Buy food"
        store.save(task.id)

        assert filepath.read_text(encoding="utf-8").startswith("* Buy food\n")
        assert task.updated_at >= before

    def test_save_with_prefix_style(self, task_dir: Path):
        """The configured nesting style is used when writing."""
        filepath = create_task_file(task_dir, "n.norg", "* N\n\n- ( ) a\n  - ( ) b\n")
        store = TaskStore(task_dir, nesting_style=NestingStyle.PREFIX)
        task = store.load_all()[0]

        store.save(task.id)

        assert filepath.read_text(encoding="utf-8") == "* N\n\n- ( ) a\n-- ( ) b\n"

    def test_save_unknown_id_is_noop(self, store: TaskStore, task_dir: Path):
        """Unknown ids are ignored."""
        store.save("nope")
        assert list(task_dir.iterdir()) == []

    def test_delete_removes_file_and_task(self, store: TaskStore, task_dir: Path):
        """delete removes both the document and the entry."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.delete(task.id)

        assert not filepath.exists()
        assert store.tasks == []

    def test_delete_with_missing_file(self, store: TaskStore, task_dir: Path):
        """A task whose file is already gone is still dropped."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]
        filepath.unlink()

        store.delete(task.id)

        assert store.tasks == []

    def test_delete_unknown_id_is_noop(self, store: TaskStore, task_dir: Path):
        """Unknown ids are ignored."""
        create_task_file(task_dir, "g.norg")
        store.load_all()

        store.delete("nope")

        assert len(store.tasks) == 1

    def test_save_error_propagates(self, store: TaskStore, task_dir: Path):
        """Write failures reach the caller."""
        create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]
        task.file_path = task_dir / "blocker" / "g.norg"
        (task_dir / "blocker").write_text("a file, not a directory")

        with pytest.raises(OSError):
            store.save(task.id)


class TestToggle:
    """Tests for to-do state toggling."""

    def test_full_cycle(self, store: TaskStore, task_dir: Path):
        """Undone -> pending -> done -> undone, writing each time."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.toggle_todo_state(task.id, 0)
        assert task.todos[0].state is TodoState.PENDING
        assert "- (-) milk" in filepath.read_text(encoding="utf-8")

        store.toggle_todo_state(task.id, 0)
        assert task.todos[0].state is TodoState.DONE
        assert "- (x) milk" in filepath.read_text(encoding="utf-8")

        store.toggle_todo_state(task.id, 0)
        assert task.todos[0].state is TodoState.UNDONE
        assert "- ( ) milk" in filepath.read_text(encoding="utf-8")

    def test_toggle_changes_category(self, store: TaskStore, task_dir: Path):
        """Completing the last open to-do completes the task."""
        create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.toggle_todo_state(task.id, 0)
        store.toggle_todo_state(task.id, 0)

        assert task.kanban_category() is KanbanCategory.COMPLETED
        assert store.reload()[0].kanban_category() is KanbanCategory.COMPLETED

    def test_out_of_range_is_noop(self, store: TaskStore, task_dir: Path):
        """Bad indexes change nothing and write nothing."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.toggle_todo_state(task.id, 2)
        store.toggle_todo_state(task.id, -1)
        store.toggle_todo_state("nope", 0)

        assert filepath.read_text(encoding="utf-8") == GROCERIES

    @pytest.mark.parametrize(
        ("state", "expected"),
        [
            (TodoState.URGENT, TodoState.DONE),
            (TodoState.UNCERTAIN, TodoState.PENDING),
            (TodoState.ON_HOLD, TodoState.PENDING),
            (TodoState.CANCELLED, TodoState.UNDONE),
            (TodoState.RECURRING, TodoState.DONE),
        ],
    )
    def test_other_states(self, state: TodoState, expected: TodoState):
        """Non-cycle states jump to their designated next state."""
        assert next_state(state) is expected

    def test_cycle_covers_every_state(self):
        """Every state has a successor."""
        assert set(TOGGLE_CYCLE) == set(TodoState)

    def test_set_todo_state(self, store: TaskStore, task_dir: Path):
        """A state can be set directly."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.set_todo_state(task.id, 1, TodoState.CANCELLED)

        assert "- (_) eggs" in filepath.read_text(encoding="utf-8")


class TestAddTodo:
    """Tests for add_todo."""

    def test_appends_and_saves(self, store: TaskStore, task_dir: Path):
        """The new to-do is written at the end."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        todo = store.add_todo(task.id, "bread", level=1)

        assert todo is not None
        assert todo.id == "todo_2"
        assert filepath.read_text(encoding="utf-8").endswith("- (x) eggs\n  - ( ) bread\n")

    def test_unknown_task(self, store: TaskStore):
        """Unknown ids return None."""
        assert store.add_todo("nope", "bread") is None

    def test_negative_level_is_top_level(self, store: TaskStore, task_dir: Path):
        """A negative level is clamped to zero instead of failing validation."""
        filepath = create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        todo = store.add_todo(task.id, "bread", level=-1)

        assert todo is not None
        assert todo.level == 0
        assert filepath.read_text(encoding="utf-8").endswith("- (x) eggs\n- ( ) bread\n")

    def test_line_breaks_in_text_are_joined(self, store: TaskStore, task_dir: Path):
        """Multi-line text stays a single to-do after a reload."""
        create_task_file(task_dir, "g.norg")
        task = store.load_all()[0]

        store.add_todo(task.id, "bread\n- ( ) butter")
        reloaded = store.reload()[0]

        assert [todo.text for todo in reloaded.todos] == ["milk", "eggs", "bread - ( ) butter"]


class TestQueries:
    """Tests for search and category grouping."""

    def test_search_case_insensitive(self, store: TaskStore, task_dir: Path):
        """Search ignores case."""
        create_task_file(task_dir, "g.norg")
        create_task_file(task_dir, "h.norg", "* Fix bike\n\n- ( ) tyre\n")
        tasks = store.load_all()

        assert store.search("milk") == [tasks[0]]
        assert store.search("MILK") == [tasks[0]]
        assert store.search("weekly") == [tasks[0]]
        assert store.search("bike") == [tasks[1]]
        assert store.search("zzz") == []

    def test_search_keeps_order(self, store: TaskStore, task_dir: Path):
        """Matches come back in load order."""
        create_task_file(task_dir, "a.norg", "* Shared one\n")
        create_task_file(task_dir, "b.norg", "* Other\n")
        create_task_file(task_dir, "c.norg", "* Shared two\n")
        store.load_all()

        assert [task.title for task in store.search("shared")] == ["Shared one", "Shared two"]

    def test_get_by_category(self, store: TaskStore, task_dir: Path):
        """Tasks are grouped by their derived column."""
        create_task_file(task_dir, "a.norg", "* Empty\n")
        create_task_file(task_dir, "b.norg")
        create_task_file(task_dir, "c.norg", "* Done\n\n- (x) a\n- (_) b\n")
        create_task_file(task_dir, "d.norg", "* Fresh\n\n- ( ) a\n")
        store.load_all()

        grouped = store.get_by_category()

        assert list(grouped) == list(KanbanCategory)
        assert [t.title for t in grouped[KanbanCategory.YET_TO_BE_DONE]] == ["Empty", "Fresh"]
        assert [t.title for t in grouped[KanbanCategory.IN_PROGRESS]] == ["Buy groceries"]
        assert [t.title for t in grouped[KanbanCategory.COMPLETED]] == ["Done"]

    def test_get_by_category_is_recomputed(self, store: TaskStore, task_dir: Path):
        """Grouping reflects changes immediately."""
        create_task_file(task_dir, "d.norg", "* Fresh\n\n- ( ) a\n")
        task = store.load_all()[0]
        assert store.get_by_category()[KanbanCategory.YET_TO_BE_DONE] == [task]

        store.toggle_todo_state(task.id, 0)

        assert store.get_by_category()[KanbanCategory.IN_PROGRESS] == [task]
        assert store.get_by_category()[KanbanCategory.YET_TO_BE_DONE] == []
