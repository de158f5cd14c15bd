"""Shared helpers."""

from .datetime import from_iso, now_utc, to_iso
from .slug import NORG_SUFFIX, generate_filename, sanitize_filename

__all__ = [
    "NORG_SUFFIX",
    "from_iso",
    "generate_filename",
    "now_utc",
    "sanitize_filename",
    "to_iso",
]
