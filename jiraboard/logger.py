"""Structured JSON application logging enriched with request context."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime
from typing import Any, TextIO

from jiraboard.constants import ContextKey
from jiraboard.utils.errors import InternalError

LOG_LABEL = "application-log"

_LOGGER = logging.getLogger("jiraboard")

_LEVEL_NAMES = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
}


class _JSONFormatter(logging.Formatter):
    def __init__(self, add_source: bool) -> None:
        super().__init__()
        self._add_source = add_source

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname),
        }
        if self._add_source:
            entry["source"] = {
                "function": record.funcName,
                "file": record.pathname,
                "line": record.lineno,
            }
        entry["msg"] = record.getMessage()
        entry.update(getattr(record, "attrs", {}))
        return json.dumps(entry, default=str)


def get_log_level(level: str | None) -> int:
    """Map a level name to a logging level; unknown names give INFO."""
    return {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "ERROR": logging.ERROR,
    }.get((level or "").upper(), logging.INFO)


def new_logger(level: str | None = None, source: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """Configure the package logger to write JSON lines and return it."""
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(_JSONFormatter(source))
    for existing in list(_LOGGER.handlers):
        _LOGGER.removeHandler(existing)
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(get_log_level(level))
    _LOGGER.propagate = False
    return _LOGGER


def _context_value(ctx: Mapping[Any, Any] | None, key: ContextKey) -> str:
    if not ctx:
        return ""
    value = ctx.get(key)
    return value if isinstance(value, str) else ""


def _emit(ctx: Mapping[Any, Any] | None, level: int, msg: str, source: str | None = None) -> None:
    attrs: dict[str, Any] = {
        "label": LOG_LABEL,
        "request_id": _context_value(ctx, ContextKey.REQUEST_ID),
        "user_id": _context_value(ctx, ContextKey.USER_ID),
        "user_name": _context_value(ctx, ContextKey.USER_NAME),
    }
    if source is not None:
        attrs["source"] = source
    attrs["message"] = msg
    _LOGGER.log(level, "Application Log", extra={"attrs": attrs}, stacklevel=3)


def log(ctx: Mapping[Any, Any] | None, level: int, msg: str) -> None:
    """Log ``msg`` at ``level`` with request id and user details from ``ctx``."""
    _emit(ctx, level, msg)


def _find_internal(err: BaseException | None) -> InternalError | None:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, InternalError):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


def error(ctx: Mapping[Any, Any] | None, err: BaseException) -> None:
    """Log an error; wrapped internal errors also report their origin."""
    internal = _find_internal(err)
    if internal is not None:
        _emit(ctx, logging.ERROR, str(err), internal.location())
    else:
        _emit(ctx, logging.ERROR, str(err))


def warn(ctx: Mapping[Any, Any] | None, msg: str) -> None:
    """Log at warning level."""
    _emit(ctx, logging.WARNING, msg)


def info(ctx: Mapping[Any, Any] | None, msg: str) -> None:
    """Log at info level."""
    _emit(ctx, logging.INFO, msg)


def debug(ctx: Mapping[Any, Any] | None, msg: str) -> None:
    """Log at debug level."""
    _emit(ctx, logging.DEBUG, msg)