"""Colored terminal output for the command line front end."""

import sys

from ..models import KanbanCategory, TodoState

# ANSI color codes
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"
MAGENTA = "\033[35m"
DIM = "\033[2m"
RESET = "\033[0m"
CHECK = "\u2713"  # ✓
BULLET = "\u2022"  # •
CROSS = "\u2717"  # ✗

STATE_COLORS: dict[TodoState, str] = {
    TodoState.DONE: GREEN,
    TodoState.CANCELLED: DIM,
    TodoState.PENDING: YELLOW,
    TodoState.URGENT: RED,
    TodoState.UNCERTAIN: MAGENTA,
    TodoState.ON_HOLD: DIM,
    TodoState.RECURRING: BLUE,
}

CATEGORY_COLORS: dict[KanbanCategory, str] = {
    KanbanCategory.YET_TO_BE_DONE: RED,
    KanbanCategory.IN_PROGRESS: YELLOW,
    KanbanCategory.COMPLETED: GREEN,
}


def _supports_color() -> bool:
    """Check if terminal supports color output."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _colorize(text: str, color: str | None) -> str:
    """Apply color to text if terminal supports it."""
    if color and _supports_color():
        return f"{color}{text}{RESET}"
    return text


def success(message: str) -> None:
    """Print success message with green checkmark."""
    print(f"{_colorize(CHECK, GREEN)} {message}")


def info(message: str) -> None:
    """Print info message with yellow bullet."""
    print(f"{_colorize(BULLET, YELLOW)} {message}")


def header(message: str) -> None:
    """Print header message in blue."""
    print(_colorize(message, BLUE))


def error(message: str) -> None:
    """Print error message with red cross."""
    print(f"{_colorize(CROSS, RED)} {message}", file=sys.stderr)


def todo_marker(state: TodoState) -> str:
    """Status marker as written in documents, e.g. '(x)'."""
    return _colorize(f"({state.char})", STATE_COLORS.get(state))


def category_title(category: KanbanCategory, count: int) -> str:
    return _colorize(f"{category.label} ({count})", CATEGORY_COLORS[category])


def progress_bar(percentage: float, width: int = 20) -> str:
    """Text progress bar such as '[#####---------------]  25%'."""
    filled = int(percentage / 100 * width)
    bar = "#" * filled + "-" * (width - filled)
    return f"[{bar}] {percentage:3.0f}%"
