"""Parser for .norg task documents.

A document looks like::

    * Buy groceries

    Weekly shop

    - ( ) milk
      - (x) oat milk
    -- (!) eggs

The first non-empty heading is the title. Text between the title and the
first to-do is the description. To-do nesting is read from both the
indentation (two columns per level) and the number of list dashes (one per
level beyond the first), so files written in either style parse alike.

Parsing never fails: missing pieces fall back to defaults and are reported
as diagnostics instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import yaml

from ..models import DEFAULT_TITLE, Task, TodoItem, TodoState
from .meta import apply_meta, load_meta, split_meta

INDENT_WIDTH = 2
TAB_WIDTH = 4


class LineKind(Enum):
    """Kinds of lines the parser distinguishes."""

    HEADING = "heading"
    BLANK = "blank"
    TODO = "todo"
    TEXT = "text"


@dataclass(frozen=True)
class ParsedLine:
    """One classified source line."""

    kind: LineKind
    number: int  # 1-based position in the raw document
    raw: str
    text: str = ""  # Heading or to-do text
    status: str = ""  # To-do status character
    level: int = 0


class NorgParser:
    """Turns raw document text into a Task."""

    TODO_PATTERN = re.compile(
        r"^(?P<indent>[ \t]*)(?P<dashes>-+)[ \t]+\((?P<status>.)\)(?P<text>.*)$"
    )

    def parse(self, raw_text: str, file_path: Path | None = None) -> Task:
        """Parse a document, discarding diagnostics."""
        task, _ = self.parse_with_diagnostics(raw_text, file_path)
        return task

    def parse_with_diagnostics(
        self, raw_text: str, file_path: Path | None = None
    ) -> tuple[Task, list[str]]:
        """Parse a document.

        Returns:
            The task and a list of notes describing anything that had to be
            guessed or dropped. An empty list means the document was clean.
        """
        diagnostics: list[str] = []

        raw_meta, body, line_offset = split_meta(raw_text)
        metadata = {}
        if raw_meta is not None:
            try:
                metadata = load_meta(raw_meta)
            except (yaml.YAMLError, ValueError) as e:
                diagnostics.append(f"unreadable metadata block: {e}")

        lines = [
            self.classify(line.removesuffix("\r"), line_offset + index + 1)
            for index, line in enumerate(body.split("\n"))
        ]

        title: str | None = None
        description_lines: list[str] = []
        todos: list[TodoItem] = []
        dropped = 0

        for line in lines:
            if line.kind is LineKind.TODO:
                if not TodoState.is_known_char(line.status):
                    diagnostics.append(
                        f"line {line.number}: unknown status {line.status!r}, using undone"
                    )
                todos.append(
                    TodoItem(
                        id=f"todo_{len(todos)}",
                        text=line.text,
                        state=TodoState.from_char(line.status),
                        level=line.level,
                        line_number=line.number,
                    )
                )
            elif line.kind is LineKind.HEADING and title is None and line.text:
                title = line.text
            elif title is None:
                # Anything ahead of the title is not part of the task
                continue
            elif todos:
                if line.kind is not LineKind.BLANK:
                    dropped += 1
            elif line.kind is LineKind.BLANK and not description_lines:
                continue
            elif line.kind in (LineKind.HEADING, LineKind.BLANK, LineKind.TEXT):
                description_lines.append(line.raw)
            else:
                diagnostics.append(f"line {line.number}: unrecognized line kind {line.kind}")

        if title is None:
            diagnostics.append(f"no heading found, using {DEFAULT_TITLE!r}")
        if dropped:
            diagnostics.append(f"dropped {dropped} line(s) after the first to-do")

        task = Task(
            title=title or DEFAULT_TITLE,
            description="\n".join(description_lines).strip(),
            todos=todos,
            file_path=file_path or Path(),
        )
        diagnostics.extend(apply_meta(task, metadata))
        return task, diagnostics

    def classify(self, line: str, number: int) -> ParsedLine:
        """Work out what a single line is."""
        stripped = line.strip()
        if not stripped:
            return ParsedLine(LineKind.BLANK, number, line)

        match = self.TODO_PATTERN.match(line)
        if match:
            indent = match.group("indent").expandtabs(TAB_WIDTH)
            level = len(indent) // INDENT_WIDTH + len(match.group("dashes")) - 1
            return ParsedLine(
                LineKind.TODO,
                number,
                line,
                text=match.group("text").strip(),
                status=match.group("status"),
                level=level,
            )

        if stripped.startswith("*"):
            return ParsedLine(LineKind.HEADING, number, line, text=stripped.lstrip("*").strip())

        return ParsedLine(LineKind.TEXT, number, line)


_parser = NorgParser()


def parse(raw_text: str, file_path: Path | None = None) -> Task:
    """Parse document text into a Task."""
    return _parser.parse(raw_text, file_path)


def parse_with_diagnostics(
    raw_text: str, file_path: Path | None = None
) -> tuple[Task, list[str]]:
    """Parse document text into a Task plus degradation notes."""
    return _parser.parse_with_diagnostics(raw_text, file_path)
