"""
Log level flags.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Iterable


class Level(IntFlag):
    """Independent severity flags; a dispatcher mask is any OR of them."""

    NONE = 0
    DEBUG = 1
    INFO = 2
    WARN = 4
    ERROR = 8
    ALL = DEBUG | INFO | WARN | ERROR

    @property
    def display_name(self) -> str:
        """Name written into records, e.g. ``Error``."""
        return _DISPLAY_NAMES.get(self, str(int(self)))

    @classmethod
    def coerce(cls, mask: int | Level | None) -> Level:
        """Normalize an int or flag to a mask containing only the four known bits."""
        if mask is None:
            return cls.ALL
        return cls(int(mask) & int(cls.ALL))

    @classmethod
    def parse(cls, names: str | Iterable[str]) -> Level:
        """
        Build a mask from level names.

        Accepts a comma-separated string or an iterable of names. Names are
        case-insensitive; ``warning`` is accepted for ``warn`` and ``all`` /
        ``none`` for the whole set and the empty set.
        """
        if isinstance(names, str):
            names = names.split(",")

        mask = cls.NONE
        for raw in names:
            name = raw.strip().lower()
            if not name:
                continue
            try:
                mask |= _NAME_ALIASES[name]
            except KeyError:
                raise ValueError(f"Unknown log level: {raw!r}") from None
        return mask


_DISPLAY_NAMES = {
    Level.DEBUG: "Debug",
    Level.INFO: "Info",
    Level.WARN: "Warn",
    Level.ERROR: "Error",
}

_NAME_ALIASES = {
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "all": Level.ALL,
    "none": Level.NONE,
}
