"""Loguru setup for the UMMS backend.

Every record carries the correlation id of the request that produced it and
passes through :func:`sanitize_record` before reaching a sink, so tokens,
password hashes and email local-parts never land on disk.
"""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)
DEFAULT_LOG_FILE = Path(__file__).resolve().parents[2] / "instance" / "umms.log"

_NO_CORRELATION = "-"
_correlation_id: ContextVar[str] = ContextVar("umms_correlation_id", default=_NO_CORRELATION)

# Chatty third-party loggers routed through loguru at a reduced level.
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}


def resolve_log_file(explicit: str | None = None) -> Path:
    return Path(explicit or os.getenv("LOG_FILE") or DEFAULT_LOG_FILE)


class _StdlibBridge(logging.Handler):
    """Forwards stdlib ``logging`` records (Flask, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(correlation_id=_correlation_id.get()).opt(
            depth=6, exception=record.exc_info
        ).log(level, record.getMessage())


class ContextualLogger:
    """Loguru proxy that binds the current correlation id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(correlation_id=_correlation_id.get()), name)


def set_correlation_id(value: str | None) -> None:
    _correlation_id.set(value or _NO_CORRELATION)


def get_correlation_id() -> str:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(_NO_CORRELATION)


def setup_logging(level: str | None = None, *, log_file: str | None = None) -> Path:
    """(Re)install the stderr and file sinks; returns the log file path."""
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    path = resolve_log_file(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    _logger.remove()
    _logger.configure(extra={"correlation_id": _NO_CORRELATION})
    common = {"level": level, "format": LOG_FORMAT, "backtrace": False, "diagnose": False}
    _logger.add(sys.stderr, colorize=True, filter=sanitize_record, **common)
    _logger.add(
        str(path),
        colorize=False,
        enqueue=True,
        encoding="utf-8",
        filter=sanitize_record,
        **common,
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    for name, stdlib_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(stdlib_level)
    return path


logger = ContextualLogger()

__all__ = [
    "DEFAULT_LOG_FILE",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "resolve_log_file",
    "set_correlation_id",
    "setup_logging",
]
