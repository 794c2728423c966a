"""Logger bootstrap for the binview CLI and viewer.

One call to ``configure()`` wires the ``binview`` logger: a stderr handler
that only lets warnings through (the TUI owns the terminal) and a rotating
file that gets everything at the configured level. Environment:

  BINVIEW_LOG_LEVEL  level name, default INFO
  BINVIEW_LOG_DIR    directory for per-run log files
  BINVIEW_LOG_FILE   exact log file, overrides the directory

// [LAW:single-enforcer] Logger handler wiring is enforced in this module only.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "binview"

_STDERR_FORMAT = "[%(name)s] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 20 * 1024 * 1024
_FILE_BACKUPS = 5


@dataclass(frozen=True)
class LoggingRuntime:
    """Where and how loudly this run logs."""

    level_name: str
    level: int
    file_path: str
    source_name: str


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str) -> tuple[str, int]:
    # getLevelName maps a known name to its number and anything else to a string.
    level = logging.getLevelName(str(raw).strip().upper())
    if not isinstance(level, int):
        level = logging.INFO
    return logging.getLevelName(level), level


def _safe_name(value: str) -> str:
    cleaned = re.sub(r"[^\w.-]", "-", value, flags=re.ASCII).strip("-_.")
    return cleaned or "buffer"


def log_dir() -> Path:
    return Path(os.environ.get("BINVIEW_LOG_DIR") or Path.home() / ".local/share/binview/logs")


def _log_path(source_name: str) -> Path:
    override = os.environ.get("BINVIEW_LOG_FILE")
    if override:
        return Path(override)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return log_dir() / f"{_safe_name(source_name)}-{stamp}-{os.getpid()}.log"


def _handlers(level: int, path: Path) -> list[logging.Handler]:
    stderr = logging.StreamHandler()
    stderr.setLevel(max(level, logging.WARNING))
    stderr.setFormatter(logging.Formatter(_STDERR_FORMAT))

    rotating = RotatingFileHandler(
        path, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8"
    )
    rotating.setLevel(level)
    rotating.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return [stderr, rotating]


def configure(source_name: str = "buffer") -> LoggingRuntime:
    """Attach handlers to the ``binview`` logger; later calls return the first runtime."""
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level = _parse_level(os.environ.get("BINVIEW_LOG_LEVEL") or "INFO")
    path = _log_path(source_name)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()
    for handler in _handlers(level, path):
        logger.addHandler(handler)

    _RUNTIME = LoggingRuntime(
        level_name=level_name, level=level, file_path=str(path), source_name=source_name
    )
    return _RUNTIME


def get_runtime() -> LoggingRuntime | None:
    return _RUNTIME


def reset() -> None:
    """Drop handlers and forget the runtime so configure() can run again."""
    global _RUNTIME
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    _RUNTIME = None
