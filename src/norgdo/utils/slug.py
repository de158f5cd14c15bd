"""Utilities for generating filesystem-safe task file names."""

import re

NORG_SUFFIX = ".norg"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_filename(title: str) -> str:
    """
    Convert a task title to a filesystem-safe file stem.

    Every character outside ``[A-Za-z0-9_-]`` becomes ``_``, then leading and
    trailing underscores are trimmed.

    Example: "Buy groceries!" -> "Buy_groceries"
    """
    return _UNSAFE_CHARS.sub("_", title).strip("_")


def generate_filename(title: str) -> str:
    """Generate a .norg filename from a title."""
    stem = sanitize_filename(title)
    if not stem:
        stem = "untitled"
    return f"{stem}{NORG_SUFFIX}"
