"""
Fallback channel unit tests.
"""

from __future__ import annotations

import io

from logfan import fallback


class TestFallbackChannel:
    def test_report_writes_key_value_line(self, fallback_output: io.StringIO) -> None:
        """One key=value line with level, event, context and the error repr"""
        fallback.report("failed to write log file", path="/var/log/x.log", error=OSError("full"))

        (line,) = fallback_output.getvalue().splitlines()
        assert "level='error'" in line
        assert "event='failed to write log file'" in line
        assert "path='/var/log/x.log'" in line
        assert "OSError('full')" in line

    def test_stream_can_be_swapped(self, fallback_output: io.StringIO) -> None:
        """set_fallback_stream redirects later reports"""
        other = io.StringIO()
        fallback.set_fallback_stream(other)

        fallback.report("elsewhere")

        assert "elsewhere" in other.getvalue()
        assert fallback_output.getvalue() == ""

    def test_report_never_raises(self) -> None:
        """A broken fallback stream is swallowed"""

        class Broken:
            def write(self, s):
                raise OSError("closed")

            def flush(self):
                raise OSError("closed")

        fallback.set_fallback_stream(Broken())

        fallback.report("still fine")
