"""CLI entry point for norgdo."""

import argparse
from collections.abc import Sequence
from pathlib import Path

from . import __version__
from .cli import commands, output
from .config import Settings
from .logging import setup_logging
from .markup import NestingStyle
from .services import TaskStore


def non_negative_int(value: str) -> int:
    """argparse type for counts and depths that cannot go below zero."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="norgdo",
        description="Personal task manager for .norg to-do documents",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the .norg task files (default: ~/.local/share/norgdo)",
    )
    parser.add_argument(
        "--nesting-style",
        choices=[style.value for style in NestingStyle],
        default=None,
        help="How nested to-dos are written: indent (default) or prefix",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("list", help="List tasks with completion")
    p.set_defaults(handler=commands.run_list)

    p = sub.add_parser("board", help="Show tasks grouped by workflow column")
    p.set_defaults(handler=commands.run_board)

    p = sub.add_parser("show", help="Show a task")
    p.add_argument("task", type=int, help="Task number from 'list'")
    p.set_defaults(handler=commands.run_show)

    p = sub.add_parser("new", help="Create a task")
    p.add_argument("title")
    p.add_argument("-d", "--description", default="")
    p.add_argument("-t", "--todo", action="append", help="To-do item (repeatable)")
    p.set_defaults(handler=commands.run_new)

    p = sub.add_parser("toggle", help="Toggle the state of a to-do")
    p.add_argument("task", type=int, help="Task number from 'list'")
    p.add_argument("todo", type=int, help="To-do number from 'show'")
    p.set_defaults(handler=commands.run_toggle)

    p = sub.add_parser("add-todo", help="Append a to-do to a task")
    p.add_argument("task", type=int, help="Task number from 'list'")
    p.add_argument("text")
    p.add_argument("--level", type=non_negative_int, default=0, help="Nesting depth")
    p.set_defaults(handler=commands.run_add_todo)

    p = sub.add_parser("delete", help="Delete a task and its file")
    p.add_argument("task", type=int, help="Task number from 'list'")
    p.set_defaults(handler=commands.run_delete)

    p = sub.add_parser("search", help="Find tasks containing text")
    p.add_argument("query")
    p.set_defaults(handler=commands.run_search)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.data_dir:
        settings_kwargs["data_dir"] = args.data_dir
    if args.nesting_style:
        settings_kwargs["nesting_style"] = args.nesting_style
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)
    setup_logging(settings.verbose, settings.log_file)

    store = TaskStore(settings.data_dir, nesting_style=settings.nesting_style)
    handler = getattr(args, "handler", commands.run_list)
    try:
        store.repository.ensure_directory()
        store.load_all()
        return handler(store, args)
    except OSError as e:
        output.error(f"File error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
