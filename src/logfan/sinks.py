"""
Log sink abstractions and concrete implementations.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Literal, Protocol, TextIO

from . import fallback
from .formatters import DATE_FORMAT, format_console_line, format_file_record, format_json_line
from .levels import Level

LogFormat = Literal["console", "json"]
Clock = Callable[[], datetime]

LOG_SUFFIX = ".log"


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class SupportsLog(Protocol):
    """Anything with a ``log(level, message, *values)`` method can act as a sink."""

    def log(self, level: Level, message: Any, *values: Any) -> None: ...


class BaseSink(ABC):
    """Abstract base class for log sinks.

    Implementations must never raise out of ``log``; failures belong on the
    fallback channel.
    """

    @abstractmethod
    def log(self, level: Level, message: Any, *values: Any) -> None:
        """Emit one record to the sink."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Close the sink and release resources."""
        ...


class ConsoleSink(BaseSink):
    """Standard I/O sink.

    Debug and Info records go to stdout, Warn and Error to stderr.

    Args:
        fmt: Output format - "console" (human-readable) or "json"
        stdout: Stream for Debug/Info (default: ``sys.stdout`` at call time)
        stderr: Stream for Warn/Error (default: ``sys.stderr`` at call time)
    """

    def __init__(
        self,
        fmt: LogFormat = "console",
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        clock: Clock | None = None,
    ):
        self._fmt = fmt
        self._stdout = stdout
        self._stderr = stderr
        self._clock = clock or local_now

    def _stream_for(self, level: Level) -> TextIO:
        if level in (Level.DEBUG, Level.INFO):
            return self._stdout or sys.stdout
        # all undefined levels are handled as error
        return self._stderr or sys.stderr

    def log(self, level: Level, message: Any, *values: Any) -> None:
        try:
            now = self._clock()
            if self._fmt == "json":
                output = format_json_line(now, level, message, values)
            else:
                output = format_console_line(now, message, values)

            stream = self._stream_for(level)
            stream.write(output + "\n")
            stream.flush()
        except Exception as exc:
            fallback.report("console sink failed", error=exc)

    def close(self) -> None:
        pass


class CallableSink(BaseSink):
    """Adapts a plain function ``func(level, message, *values)`` to a sink."""

    def __init__(self, func: Callable[..., Any]):
        self._func = func

    @property
    def func(self) -> Callable[..., Any]:
        return self._func

    def log(self, level: Level, message: Any, *values: Any) -> None:
        try:
            self._func(level, message, *values)
        except Exception as exc:
            fallback.report("callable sink failed", sink=self._func, error=exc)

    def close(self) -> None:
        pass


# =============================================================================
# Daily Rotating File Sink
# =============================================================================


def parse_file_date(name: str) -> date | None:
    """Leading ``YYYY-MM-DD`` of a log file name, or None if it does not parse."""
    try:
        return datetime.strptime(name[:10], DATE_FORMAT).date()
    except ValueError:
        return None


class DailyFileSink(BaseSink):
    """Append records to ``<base_path>/<YYYY-MM-DD>.log``, one file per local day.

    Appends and the retention sweep run on a single worker thread, so writes
    from one sink are serialized in ``log`` call order and never block the
    caller. The active date is switched lazily, on the first record whose local
    calendar date differs from the stored one.

    Args:
        base_path: Directory holding the daily files (created if missing)
        retention_days: Files dated on or before ``today - retention_days`` are
            deleted by the sweep run at construction
        clock: Returns the current local time (default: ``local_now``)
        newline: Record terminator
    """

    def __init__(
        self,
        base_path: str | Path,
        retention_days: int = 10,
        *,
        clock: Clock | None = None,
        newline: str = "\n",
    ):
        if retention_days < 0:
            raise ValueError(f"retention_days must be non-negative, got {retention_days}")

        self._base_path = Path(base_path)
        self._retention_days = int(retention_days)
        self._clock = clock or local_now
        self._newline = newline

        self._lock = threading.Lock()
        self._closed = False
        self._current_date: date | None = None
        self._active_file_path: Path | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="logfan-file")

        try:
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            fallback.report("log directory unavailable", path=str(self._base_path), error=exc)

        now = self._clock()
        with self._lock:
            self._update_file_name(now)
        self._executor.submit(self._cleanup_old_files, now.date())

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def base_path(self) -> Path:
        return self._base_path

    @property
    def retention_days(self) -> int:
        return self._retention_days

    @property
    def current_date(self) -> date | None:
        with self._lock:
            return self._current_date

    @property
    def active_file_path(self) -> Path | None:
        with self._lock:
            return self._active_file_path

    def file_path_for(self, day: date) -> Path:
        return self._base_path / f"{day.strftime(DATE_FORMAT)}{LOG_SUFFIX}"

    def _update_file_name(self, now: datetime) -> None:
        # Caller holds self._lock
        today = now.date()
        if self._current_date != today or self._active_file_path is None:
            self._current_date = today
            self._active_file_path = self.file_path_for(today)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def log(self, level: Level, message: Any, *values: Any) -> None:
        try:
            with self._lock:
                if self._closed:
                    path = None
                else:
                    now = self._clock()
                    self._update_file_name(now)
                    record = format_file_record(now, level, message, values, self._newline)
                    path = self._active_file_path
                    self._executor.submit(self._append, path, record)
        except Exception as exc:
            fallback.report("failed to queue log record", path=str(self._base_path), error=exc)
            return

        if path is None:
            fallback.report("log file sink is closed, record dropped", path=str(self._base_path))

    def _append(self, path: Path, record: str) -> None:
        try:
            with open(path, "a", encoding="utf-8", newline="") as handle:
                handle.write(record)
        except Exception as exc:
            fallback.report("failed to write log file", path=str(path), error=exc)

    # -------------------------------------------------------------------------
    # Retention
    # -------------------------------------------------------------------------

    def _cleanup_old_files(self, today: date) -> None:
        threshold = today - timedelta(days=self._retention_days)

        try:
            entries = list(self._base_path.iterdir())
        except OSError as exc:
            fallback.report("failed to list log directory", path=str(self._base_path), error=exc)
            return

        for entry in entries:
            if not entry.name.endswith(LOG_SUFFIX):
                continue
            file_date = parse_file_date(entry.name)
            if file_date is None or file_date > threshold:
                continue
            try:
                entry.unlink()
            except OSError as exc:
                fallback.report("failed to delete old log file", path=str(entry), error=exc)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def drain(self, timeout: float | None = None) -> None:
        """Block until every write and sweep submitted so far has finished."""
        with self._lock:
            if self._closed:
                return
            marker = self._executor.submit(lambda: None)
        marker.result(timeout=timeout)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)
