"""Logging bootstrap for applications hosting formwidgets.

A full-screen Textual app owns the terminal, so records go to a rotating file
and to the Textual devtools console (``textual console``) rather than stderr.
Library modules only ever call ``logging.getLogger(__name__)``; wiring
handlers is the host's decision, made once through ``configure()``.

// [LAW:single-enforcer] Logger handler wiring is enforced in this module only.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from textual.logging import TextualHandler

LOGGER_NAME = "formwidgets"
LEVEL_ENV = "FORMWIDGETS_LOG_LEVEL"
FILE_ENV = "FORMWIDGETS_LOG_FILE"
DIR_ENV = "FORMWIDGETS_LOG_DIR"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass(frozen=True)
class LoggingRuntime:
    """Where records go once configure() has run."""

    level_name: str
    level: int
    file_path: str
    devtools: bool
    stderr: bool


_RUNTIME: LoggingRuntime | None = None


def parse_level(raw: str | None) -> tuple[str, int]:
    """Map a level name to (name, number); unknown names mean INFO."""
    level = logging.getLevelName(str(raw or "INFO").strip().upper())
    if not isinstance(level, int):
        level = logging.INFO
    return logging.getLevelName(level), level


def log_path_for(app_name: str, log_dir: str | os.PathLike[str] | None = None) -> str:
    slug = "".join(ch if (ch.isalnum() or ch in "-_") else "-" for ch in app_name).strip("-_")
    directory = Path(log_dir or os.environ.get(DIR_ENV) or "~/.local/share/formwidgets/logs")
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return str(directory.expanduser() / f"{slug or LOGGER_NAME}-{stamp}-{os.getpid()}.log")


def _file_handler(file_path: str) -> logging.Handler:
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(file_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def configure(
    app_name: str = LOGGER_NAME,
    *,
    level: str | None = None,
    devtools: bool = True,
    stderr: bool = False,
) -> LoggingRuntime:
    """Attach handlers to the ``formwidgets`` logger.

    ``level`` wins over ``FORMWIDGETS_LOG_LEVEL``; ``FORMWIDGETS_LOG_FILE``
    pins the file, otherwise one is created per run under
    ``FORMWIDGETS_LOG_DIR``. Repeated calls return the first runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level_no = parse_level(level or os.environ.get(LEVEL_ENV))
    file_path = os.environ.get(FILE_ENV) or log_path_for(app_name)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level_no)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(_file_handler(file_path))
    if devtools:
        logger.addHandler(TextualHandler())
    if stderr:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
        logger.addHandler(stream)

    _RUNTIME = LoggingRuntime(level_name, level_no, file_path, devtools, stderr)
    logger.debug("logging configured: %s", _RUNTIME)
    return _RUNTIME


def reset() -> None:
    """Detach every handler and forget the runtime."""
    global _RUNTIME
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _RUNTIME = None
