"""
Fallback diagnostic channel.

Failures inside the logging infrastructure (sink I/O, missing sinks, retention
sweep problems) are reported here instead of through a Dispatcher, so a broken
sink can never recurse into itself. Output goes to ``sys.__stderr__`` through a
dedicated structlog PrintLogger, which survives ``sys.stderr`` being redirected.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, TextIO

import structlog
from structlog.typing import EventDict, WrappedLogger

_lock = threading.Lock()
_stream: TextIO | None = None
_logger: Any = None


def _render_error(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace exception objects with their repr."""
    error = event_dict.get("error")
    if isinstance(error, BaseException):
        event_dict["error"] = repr(error)
    return event_dict


def _build_logger(stream: TextIO | None) -> Any:
    return structlog.wrap_logger(
        structlog.PrintLogger(file=stream or sys.__stderr__),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=False),
            _render_error,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "event"],
                drop_missing=True,
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_name="logfan.fallback",
    )


def _get_logger() -> Any:
    global _logger
    with _lock:
        if _logger is None:
            _logger = _build_logger(_stream)
        return _logger


def set_fallback_stream(stream: TextIO | None) -> None:
    """Redirect fallback output; ``None`` restores ``sys.__stderr__``."""
    global _stream, _logger
    with _lock:
        _stream = stream
        _logger = _build_logger(stream)


def report(event: str, **context: Any) -> None:
    """Write one diagnostic line. Never raises."""
    try:
        _get_logger().error(event, **context)
    except Exception:
        pass  # Last resort: nowhere left to report to
