"""
Record formatters for the built-in sinks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

import orjson

from .levels import Level

# =============================================================================
# File Records
# =============================================================================

FIELD_SEPARATOR = "\t"
DATE_FORMAT = "%Y-%m-%d"


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 local time with milliseconds and UTC offset."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.isoformat(timespec="milliseconds")


def join_values(values: Sequence[Any]) -> str:
    """Concatenate extra values with no separator."""
    return "".join(str(v) for v in values)


def format_file_record(
    moment: datetime,
    level: Level,
    message: Any,
    values: Sequence[Any],
    newline: str = "\n",
) -> str:
    """
    Render one line of a daily log file.

    ``<timestamp>\\t<Level>\\t<message>[\\t<values>]<newline>``
    """
    fields = [format_timestamp(moment), Level(level).display_name, str(message)]
    if values:
        fields.append(join_values(values))
    return FIELD_SEPARATOR.join(fields) + newline


# =============================================================================
# Console Records
# =============================================================================

CONSOLE_TIME_FORMAT = "%H:%M:%S"


def format_console_line(moment: datetime, message: Any, values: Sequence[Any]) -> str:
    """``HH:MM:SS.mmm<TAB>message`` followed by space-separated values."""
    time_text = f"{moment.strftime(CONSOLE_TIME_FORMAT)}.{moment.microsecond // 1000:03d}"
    parts = [f"{time_text}{FIELD_SEPARATOR}{message}"]
    parts.extend(str(v) for v in values)
    return " ".join(parts)


def format_json_line(moment: datetime, level: Level, message: Any, values: Sequence[Any]) -> str:
    """Single-line JSON object for machine consumers."""
    payload = {
        "timestamp": format_timestamp(moment),
        "level": Level(level).display_name,
        "message": str(message),
        "values": list(values),
    }
    return orjson.dumps(payload, default=str).decode()
