"""
Bridges from the standard library and structlog into a Dispatcher.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import structlog
from structlog.typing import EventDict, WrappedLogger

from .dispatcher import Dispatcher
from .levels import Level

# =============================================================================
# Standard Library
# =============================================================================


def level_for_stdlib(levelno: int) -> Level:
    if levelno >= logging.ERROR:
        return Level.ERROR
    if levelno >= logging.WARNING:
        return Level.WARN
    if levelno >= logging.INFO:
        return Level.INFO
    return Level.DEBUG


class DispatcherHandler(logging.Handler):
    """
    Forward standard library logging records to a Dispatcher.

    CRITICAL maps to Error, anything below INFO to Debug. The record's logger
    name is prefixed to the message.
    """

    def __init__(self, dispatcher: Dispatcher, level: int = logging.NOTSET):
        super().__init__(level)
        self.dispatcher = dispatcher

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            self.dispatcher.emit(level_for_stdlib(record.levelno), f"{record.name}: {msg}")
        except Exception:
            self.handleError(record)


# =============================================================================
# Structlog
# =============================================================================

_METHOD_LEVELS = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "msg": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "exception": Level.ERROR,
    "critical": Level.ERROR,
    "fatal": Level.ERROR,
}


def dispatcher_processor(dispatcher: Dispatcher) -> Callable[[WrappedLogger, str, EventDict], str]:
    """
    Build a final structlog processor that hands each event to ``dispatcher``.

    The ``event`` key becomes the message; the remaining keys are passed as a
    single space-separated ``key=value`` value. Returns an empty string so the
    wrapped logger prints nothing.
    """

    def render(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        level = _METHOD_LEVELS.get(method_name, Level.INFO)
        message = event_dict.pop("event", "")
        if event_dict:
            dispatcher.emit(level, message, " ".join(f"{k}={v}" for k, v in event_dict.items()))
        else:
            dispatcher.emit(level, message)
        return ""

    return render


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


def configure_structlog(dispatcher: Dispatcher, *processors: Any) -> None:
    """Route ``structlog.get_logger()`` calls through ``dispatcher``.

    Extra processors run before the dispatcher processor. Level filtering is
    left to the dispatcher's mask.
    """
    structlog.configure(
        processors=[*processors, dispatcher_processor(dispatcher)],
        wrapper_class=structlog.BoundLogger,
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
