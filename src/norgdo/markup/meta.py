"""Reading and writing the optional ``@document.meta`` block of a document."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from frontmatter.default_handlers import YAMLHandler

from ..models import RelationType, Task, TaskRelation
from ..utils import from_iso, to_iso

META_START = "@document.meta"
META_END = "@end"


class NorgMetaHandler(YAMLHandler):
    """
    Front matter handler for Neorg metadata blocks.

    The block is delimited by ``@document.meta`` and ``@end`` lines and
    holds YAML-compatible ``key: value`` pairs::

        @document.meta
        due: 2026-10-20
        @end
    """

    FM_BOUNDARY = re.compile(r"^@(?:document\.meta|end)[ \t]*$", re.MULTILINE)
    START_DELIMITER = META_START
    END_DELIMITER = META_END

    def detect(self, text: str) -> bool:
        return text.startswith(META_START) and self.FM_BOUNDARY.match(text) is not None


_handler = NorgMetaHandler()


def split_meta(text: str) -> tuple[str | None, str, int]:
    """
    Separate a leading metadata block from the document body.

    Returns ``(raw_meta, body, line_offset)`` where ``line_offset`` is the
    number of lines before the first body line. ``raw_meta`` is None when the
    document has no (complete) block.
    """
    if not _handler.detect(text):
        return None, text, 0
    try:
        raw_meta, body = _handler.split(text)
    except ValueError:
        # Opening delimiter without a closing @end
        return None, text, 0
    offset = text.count("\n", 0, len(text) - len(body))
    return raw_meta, body, offset


def load_meta(raw_meta: str) -> dict[str, Any]:
    """Parse the block contents. Raises yaml.YAMLError or ValueError."""
    data = _handler.load(raw_meta)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"metadata block is a {type(data).__name__}, not a mapping")
    return data


def apply_meta(task: Task, metadata: dict[str, Any]) -> list[str]:
    """
    Copy recognized metadata fields onto a task.

    Returns notes for values that could not be understood; those fields
    keep their defaults.
    """
    notes: list[str] = []

    due = metadata.get("due")
    if due is not None:
        try:
            task.due_date = _parse_date(due)
        except (TypeError, ValueError):
            notes.append(f"ignored invalid due date {due!r}")

    for key, attr in (("created", "created_at"), ("updated", "updated_at")):
        value = metadata.get(key)
        if value is None:
            continue
        try:
            setattr(task, attr, _parse_datetime(value))
        except (TypeError, ValueError):
            notes.append(f"ignored invalid {key} timestamp {value!r}")

    relations = metadata.get("relations")
    if relations is None:
        relations = []
    elif not isinstance(relations, list):
        notes.append(f"ignored invalid relations {relations!r}, expected a list")
        relations = []

    for entry in relations:
        try:
            task.relations.append(
                TaskRelation(
                    target_task_id=str(entry["target"]),
                    relation_type=RelationType(entry.get("type", RelationType.RELATED.value)),
                )
            )
        except (KeyError, TypeError, AttributeError, ValueError):
            notes.append(f"ignored invalid relation {entry!r}")

    return notes


def needs_meta(task: Task) -> bool:
    """Only tasks carrying data the plain grammar cannot hold get a block."""
    return task.due_date is not None or bool(task.relations)


def dump_meta(task: Task) -> str:
    """Render the metadata block for a task, delimiters included."""
    data: dict[str, Any] = {}
    if task.due_date is not None:
        data["due"] = to_iso(task.due_date)
    data["created"] = to_iso(task.created_at)
    data["updated"] = to_iso(task.updated_at)
    if task.relations:
        data["relations"] = [
            {"target": rel.target_task_id, "type": rel.relation_type.value}
            for rel in task.relations
        ]
    body = _handler.export(data, sort_keys=False)
    return f"{META_START}\n{body}\n{META_END}\n"


def _parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _parse_datetime(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return from_iso(str(value))


__all__ = [
    "META_END",
    "META_START",
    "NorgMetaHandler",
    "apply_meta",
    "dump_meta",
    "load_meta",
    "needs_meta",
    "split_meta",
]
