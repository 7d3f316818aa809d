"""
logfan: leveled log dispatch with pluggable sinks.

Provides a Dispatcher that fans leveled messages out to multiple sinks:
- console: stdout/stderr by level (console/json format)
- file: one file per local calendar day with retention cleanup
- callables: any ``func(level, message, *values)``

Design Pattern: Strategy Pattern for sink abstraction.
"""

from .dispatcher import Dispatcher
from .factory import configure_logging, create_console_sink, create_file_sink, get_dispatcher
from .levels import Level
from .sinks import BaseSink, CallableSink, ConsoleSink, DailyFileSink

__all__ = [
    "BaseSink",
    "CallableSink",
    "ConsoleSink",
    "DailyFileSink",
    "Dispatcher",
    "Level",
    "configure_logging",
    "create_console_sink",
    "create_file_sink",
    "get_dispatcher",
]
