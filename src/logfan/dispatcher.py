"""
Level-gated fan-out of log calls to registered sinks.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Iterable, Union

from . import fallback
from .levels import Level
from .sinks import ConsoleSink, SupportsLog

Sink = Union[SupportsLog, Callable[..., Any]]

_SINGLE_LEVELS = (Level.DEBUG, Level.INFO, Level.WARN, Level.ERROR)


class Dispatcher:
    """Routes enabled-level calls to every registered sink.

    Sinks are kept in registration order with identity-set semantics. Each
    sink invocation is isolated: an exception from one sink is reported on the
    fallback channel and delivery moves on to the next one. Nothing raised by
    a sink reaches the caller of ``log``/``info``/``warn``/``error``.

    Args:
        level: Enabled-level mask (default: all four levels)
        sinks: Initial sinks, registered in order
        console_fallback: Install a ConsoleSink when no sinks are given
    """

    def __init__(
        self,
        level: int | Level | None = None,
        sinks: Iterable[Sink] = (),
        *,
        console_fallback: bool = False,
    ):
        self._level = Level.coerce(level)
        self._sinks: list[Sink] = []
        self._lock = threading.Lock()

        for sink in sinks:
            self.add(sink)

        if console_fallback and not self._sinks:
            self.add(ConsoleSink())
            self.warn("No log sink specified, using console as target")

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def level(self) -> Level:
        return self._level

    def set_level(self, mask: int | Level) -> None:
        self._level = Level.coerce(mask)

    def is_enabled(self, level: Level) -> bool:
        return bool(self._level & level)

    @property
    def sinks(self) -> tuple[Sink, ...]:
        with self._lock:
            return tuple(self._sinks)

    def add(self, sink: Sink) -> None:
        """Register ``sink``; registering the same object again is a no-op."""
        if not callable(getattr(sink, "log", None)) and not callable(sink):
            raise TypeError(f"Not a log sink: {sink!r}")
        with self._lock:
            if not any(existing is sink for existing in self._sinks):
                self._sinks.append(sink)

    def remove(self, sink: Sink) -> None:
        """Unregister ``sink`` if present."""
        with self._lock:
            self._sinks = [existing for existing in self._sinks if existing is not sink]

    def clear(self) -> list[Sink]:
        """Unregister every sink and return them in registration order."""
        with self._lock:
            removed, self._sinks = self._sinks, []
        return removed

    def close(self) -> None:
        """Close every registered sink that supports it."""
        for sink in self.sinks:
            close = getattr(sink, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as exc:
                fallback.report("failed to close log sink", sink=sink, error=exc)

    # =========================================================================
    # Logging
    # =========================================================================

    def log(self, message: Any, *values: Any) -> None:
        """A message usually intended for development purposes (Debug)."""
        if self._level & Level.DEBUG:
            self._write_sinks(Level.DEBUG, message, values)

    debug = log

    def info(self, message: Any, *values: Any) -> None:
        """General information about the program's runtime."""
        if self._level & Level.INFO:
            self._write_sinks(Level.INFO, message, values)

    def warn(self, message: Any, *values: Any) -> None:
        """Conditions outside of the happy path."""
        if self._level & Level.WARN:
            self._write_sinks(Level.WARN, message, values)

    warning = warn

    def error(self, message: Any, *values: Any) -> None:
        """Unrecoverable situations."""
        if self._level & Level.ERROR:
            self._write_sinks(Level.ERROR, message, values)

    def emit(self, level: int | Level, message: Any, *values: Any) -> None:
        """Dispatch at an explicit level; anything but one of the four flags is dropped."""
        try:
            level = Level(level)
        except (TypeError, ValueError):
            pass
        if level not in _SINGLE_LEVELS:
            fallback.report("invalid log level, message dropped", level=level, message=message)
            return
        if self._level & level:
            self._write_sinks(level, message, values)

    def _write_sinks(self, level: Level, message: Any, values: tuple[Any, ...]) -> None:
        sinks = self.sinks
        if not sinks:
            fallback.report("no log sink configured, message dropped", level=level.display_name, message=message)
            return

        for sink in sinks:
            try:
                target = getattr(sink, "log", None)
                if callable(target):
                    target(level, message, *values)
                else:
                    sink(level, message, *values)
            except Exception as exc:
                fallback.report("log sink failed", sink=sink, error=exc)
