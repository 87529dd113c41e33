"""Loguru setup plus a request-scoped context (correlation id, authenticated user)."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[correlation_id]}</magenta> "
    "<yellow>user={extra[user_id]}</yellow> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_UNSET = "-"
_CORRELATION_ID: ContextVar[str] = ContextVar("correlation_id", default=_UNSET)
_USER_ID: ContextVar[str] = ContextVar("user_id", default=_UNSET)

_logger.configure(extra={"correlation_id": _UNSET, "user_id": _UNSET})

# Third-party loggers that are too chatty at DEBUG
_QUIET_LOGGERS = {"werkzeug": logging.INFO, "sqlalchemy.engine": logging.WARNING}


def _context() -> dict[str, str]:
    return {"correlation_id": _CORRELATION_ID.get(), "user_id": _USER_ID.get()}


class _InterceptHandler(logging.Handler):
    """Route stdlib logging (werkzeug, SQLAlchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.bind(**_context()).opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Loguru proxy that stamps every record with the current request context."""

    def __getattr__(self, name: str) -> Any:  # pragma: no cover
        return getattr(_logger.bind(**_context()), name)


def set_correlation_id(value: str | None) -> None:
    _CORRELATION_ID.set(value or _UNSET)


def get_correlation_id() -> str:
    return _CORRELATION_ID.get()


def bind_user_id(user_id: int | None) -> None:
    _USER_ID.set(_UNSET if user_id is None else str(user_id))


def clear_correlation_id() -> None:
    _CORRELATION_ID.set(_UNSET)
    _USER_ID.set(_UNSET)


def _sink_options(level: str) -> dict[str, Any]:
    # diagnose=False: tracebacks must not render local variables (passwords, tokens)
    return {
        "level": level,
        "format": _FMT,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
    }


def setup_logging(level: str | None = None, log_file: str | None = None) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_file = log_file or os.getenv("LOG_FILE")

    _logger.remove()
    _logger.add(sys.stderr, colorize=True, **_sink_options(level))
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        _logger.add(
            log_file,
            colorize=False,
            enqueue=True,
            encoding="utf-8",
            **_sink_options(level),
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


logger = ContextualLogger()

__all__ = [
    "bind_user_id",
    "clear_correlation_id",
    "get_correlation_id",
    "logger",
    "set_correlation_id",
    "setup_logging",
]
