"""Filesystem-based repository for task documents."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..utils import NORG_SUFFIX

logger = logging.getLogger(__name__)


class FilesystemRepository:
    """
    Raw access to task documents stored on the filesystem.

    Tasks are stored as individual .norg files in a single flat directory.
    This class only moves text in and out of files; parsing lives in the
    markup package and the in-memory collection in the task store.
    """

    def __init__(self, task_root: Path) -> None:
        """
        Initialize repository.

        Args:
            task_root: Path to the directory holding the .norg files
        """
        self.task_root = task_root

    def ensure_directory(self) -> None:
        """Create the task directory if it doesn't exist."""
        self.task_root.mkdir(parents=True, exist_ok=True)

    def iter_task_files(self) -> Iterator[Path]:
        """Iterate over the .norg files directly inside the task root, by name."""
        if not self.task_root.is_dir():
            return
        for filepath in sorted(self.task_root.glob(f"*{NORG_SUFFIX}")):
            if filepath.is_file():
                yield filepath

    def read(self, filepath: Path) -> str:
        """Read a document. Raises OSError or UnicodeDecodeError."""
        return filepath.read_text(encoding="utf-8")

    def write(self, filepath: Path, content: str) -> None:
        """Create or overwrite a document."""
        self.ensure_directory()
        with filepath.open("w", encoding="utf-8") as f:
            f.write(content)
        logger.debug("Wrote %s (%d bytes)", filepath, len(content))

    def delete(self, filepath: Path) -> None:
        """Delete a document. Missing files are ignored."""
        if filepath.exists():
            filepath.unlink()
            logger.debug("Deleted %s", filepath)

    def unique_path(self, filename: str) -> Path:
        """Path for filename in the task root, suffixed -1, -2, ... if taken."""
        base = filename.removesuffix(NORG_SUFFIX)
        candidate = self.task_root / filename
        counter = 1

        while candidate.exists():
            candidate = self.task_root / f"{base}-{counter}{NORG_SUFFIX}"
            counter += 1

        return candidate
