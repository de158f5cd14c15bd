"""Logging configuration for norgdo.

Warnings about skipped or degraded task files always reach stderr, even
without ``-v``, as a short ``norgdo: warning: ...`` line. Verbosity adds
timestamped INFO/DEBUG records on top of that, and ``--log-file`` copies
everything at the chosen level to a file.
"""

import logging
import sys
from datetime import UTC, datetime
from pathlib import Path

LOGGER_NAME = "norgdo"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COMPACT_FORMAT = "norgdo: %(levelname_lower)s: %(message)s"


class _CompactFormatter(logging.Formatter):
    """One-line ``norgdo: warning: ...`` records for the quiet default."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname_lower = record.levelname.lower()
        return super().format(record)


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def _remove_own_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, "_norgdo_handler", False):
            logger.removeHandler(handler)
            handler.close()


def _own(handler: logging.Handler) -> logging.Handler:
    handler._norgdo_handler = True  # type: ignore[attr-defined]
    return handler


def setup_logging(verbose: int = 0, log_file: Path | None = None) -> None:
    """Configure logging based on verbosity level and optional file output.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        verbose: Verbosity level (0=warnings only, 1=INFO, 2+=DEBUG)
        log_file: Optional path to write logs to file
    """
    logger = logging.getLogger(LOGGER_NAME)
    _remove_own_handlers(logger)

    if verbose == 0 and log_file is None:
        # Leave the level to the root logger; the handler only passes warnings
        logger.setLevel(logging.NOTSET)
        quiet = _own(_StderrHandler())
        quiet.setLevel(logging.WARNING)
        quiet.setFormatter(_CompactFormatter(COMPACT_FORMAT))
        logger.addHandler(quiet)
        return

    level = logging.DEBUG if verbose >= 2 else logging.INFO
    logger.setLevel(level)

    formatter = logging.Formatter(DETAILED_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    stderr_handler = _own(_StderrHandler())
    if verbose > 0:
        stderr_handler.setLevel(level)
        stderr_handler.setFormatter(formatter)
    else:
        # File logging only: the terminal still gets the warnings
        stderr_handler.setLevel(logging.WARNING)
        stderr_handler.setFormatter(_CompactFormatter(COMPACT_FORMAT))
    logger.addHandler(stderr_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = _own(logging.FileHandler(log_file, encoding="utf-8"))
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")
    logger.info("=" * 60)
    logger.info(
        "norgdo starting | %s | level=%s | log_file=%s",
        timestamp,
        logging.getLevelName(level),
        log_file or "-",
    )
    logger.info("=" * 60)
