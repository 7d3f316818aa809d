import io
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from logfan.fallback import set_fallback_stream

LOCAL_TZ = timezone(timedelta(hours=2))


class FakeClock:
    """Settable clock returning aware local datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def fallback_output():
    """
    Captures the fallback channel for every test.
    Keeps infrastructure diagnostics off the real stderr.
    """
    stream = io.StringIO()
    set_fallback_stream(stream)
    yield stream
    set_fallback_stream(None)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 14, 15, 9, 26, 535000, tzinfo=LOCAL_TZ))


@pytest.fixture
def spy_sink():
    """A sink whose ``log`` records every call."""
    return Mock()
