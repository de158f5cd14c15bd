"""Reading and writing .norg task documents."""

from .parser import LineKind, NorgParser, parse, parse_with_diagnostics
from .writer import NestingStyle, NorgWriter, write

__all__ = [
    "LineKind",
    "NestingStyle",
    "NorgParser",
    "NorgWriter",
    "parse",
    "parse_with_diagnostics",
    "write",
]
