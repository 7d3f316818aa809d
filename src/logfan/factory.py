"""
Sink construction and the process-wide default dispatcher.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from .config import LoggingSettings
from .dispatcher import Dispatcher, Sink
from .levels import Level
from .sinks import ConsoleSink, DailyFileSink

# =============================================================================
# Global State
# =============================================================================

_default_dispatcher: Dispatcher | None = None
_default_lock = threading.Lock()


def get_dispatcher(level: int | Level | None = None) -> Dispatcher:
    """
    Return the process-wide dispatcher, creating it on first access.

    ``level`` only applies to the call that creates the instance; there is no
    re-initialization path. The default instance falls back to a console sink.
    """
    global _default_dispatcher
    with _default_lock:
        if _default_dispatcher is None:
            _default_dispatcher = Dispatcher(level, console_fallback=True)
        return _default_dispatcher


# =============================================================================
# Sink Factories
# =============================================================================


def create_console_sink(**kwargs: Any) -> ConsoleSink:
    return ConsoleSink(**kwargs)


def create_file_sink(base_path: str | Path, retention_days: int = 10) -> DailyFileSink:
    return DailyFileSink(base_path, retention_days)


def _build_sinks(settings: LoggingSettings) -> list[Sink]:
    sinks: list[Sink] = []
    for name in settings.sink_names:
        if name == "console":
            sinks.append(create_console_sink(fmt=settings.format.value))
        elif name == "file":
            sinks.append(create_file_sink(settings.file_dir, settings.retention_days))
        else:
            raise ValueError(f"Unknown log sink: {name!r}")
    return sinks


def configure_logging(
    settings: LoggingSettings | None = None,
    dispatcher: Dispatcher | None = None,
) -> Dispatcher:
    """
    Apply ``settings`` to a dispatcher.

    Builds the sinks named in ``settings.sinks`` and sets the level mask. On an
    existing dispatcher the sinks it already holds are closed and replaced, so
    configuring twice never duplicates output. Without an explicit dispatcher a
    fresh one is created.

    Args:
        settings: Configuration (default: read from the environment)
        dispatcher: Dispatcher to configure (default: a new instance)
    """
    settings = settings or LoggingSettings()
    sinks = _build_sinks(settings)

    if dispatcher is None:
        dispatcher = Dispatcher(settings.level_mask)
    else:
        # Close existing sinks
        dispatcher.close()
        dispatcher.clear()
        dispatcher.set_level(settings.level_mask)

    for sink in sinks:
        dispatcher.add(sink)
    return dispatcher
