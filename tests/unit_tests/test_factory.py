"""
Factory and settings unit tests.
"""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from logfan import factory
from logfan.config import LogFormat, LoggingSettings
from logfan.dispatcher import Dispatcher
from logfan.levels import Level
from logfan.sinks import ConsoleSink, DailyFileSink


class TestLoggingSettings:
    """Settings loading and validation"""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unset variables give all levels, console only, 10 days"""
        for name in ("LEVEL", "SINKS", "FORMAT", "FILE_DIR", "RETENTION_DAYS"):
            monkeypatch.delenv(f"LOGFAN_{name}", raising=False)

        settings = LoggingSettings(_env_file=None)

        assert settings.level_mask == Level.ALL
        assert settings.sink_names == ["console"]
        assert settings.format is LogFormat.CONSOLE
        assert settings.retention_days == 10

    def test_environment_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """LOGFAN_* variables override the defaults"""
        monkeypatch.setenv("LOGFAN_LEVEL", "warn,error")
        monkeypatch.setenv("LOGFAN_SINKS", "File, console")
        monkeypatch.setenv("LOGFAN_RETENTION_DAYS", "3")

        settings = LoggingSettings(_env_file=None)

        assert settings.level_mask == Level.WARN | Level.ERROR
        assert settings.sink_names == ["file", "console"]
        assert settings.retention_days == 3

    def test_unknown_level_rejected(self) -> None:
        """Unknown level names fail validation"""
        with pytest.raises(ValidationError):
            LoggingSettings(level="loud", _env_file=None)

    def test_negative_retention_rejected(self) -> None:
        """Retention must be non-negative"""
        with pytest.raises(ValidationError):
            LoggingSettings(retention_days=-2, _env_file=None)


class TestConfigureLogging:
    """Building dispatchers from settings"""

    def test_builds_named_sinks(self, tmp_path: Path) -> None:
        """Each named sink is built in order with the configured options"""
        settings = LoggingSettings(
            level="info,error",
            sinks="console,file",
            file_dir=str(tmp_path),
            retention_days=5,
            _env_file=None,
        )

        dispatcher = factory.configure_logging(settings)

        console, daily = dispatcher.sinks
        assert isinstance(console, ConsoleSink)
        assert isinstance(daily, DailyFileSink)
        assert daily.base_path == tmp_path
        assert daily.retention_days == 5
        assert dispatcher.level == Level.INFO | Level.ERROR
        dispatcher.close()

    def test_replaces_sinks_of_given_dispatcher(self, spy_sink: Mock) -> None:
        """Existing sinks are closed and removed before the new ones are added"""
        dispatcher = Dispatcher(sinks=[spy_sink])
        settings = LoggingSettings(level="error", sinks="console", _env_file=None)

        result = factory.configure_logging(settings, dispatcher)

        assert result is dispatcher
        assert dispatcher.level == Level.ERROR
        spy_sink.close.assert_called_once()
        (sink,) = dispatcher.sinks
        assert isinstance(sink, ConsoleSink)

    def test_configuring_twice_does_not_duplicate_output(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Reconfiguring the default dispatcher prints each record once"""
        monkeypatch.setattr(factory, "_default_dispatcher", None)
        settings = LoggingSettings(sinks="console", _env_file=None)
        dispatcher = factory.get_dispatcher()

        factory.configure_logging(settings, dispatcher)
        factory.configure_logging(settings, dispatcher)
        capsys.readouterr()
        dispatcher.info("once")

        assert len(dispatcher.sinks) == 1
        assert capsys.readouterr().out.count("once") == 1

    def test_reconfigured_file_sink_is_closed(self, tmp_path: Path, fallback_output: io.StringIO) -> None:
        """The previous file sink's worker is shut down on reconfigure"""
        settings = LoggingSettings(sinks="file", file_dir=str(tmp_path), _env_file=None)
        dispatcher = factory.configure_logging(settings)
        (old,) = dispatcher.sinks

        factory.configure_logging(settings, dispatcher)
        (new,) = dispatcher.sinks

        assert new is not old
        old.log(Level.INFO, "after close")
        assert "record dropped" in fallback_output.getvalue()
        dispatcher.close()

    def test_unknown_sink_rejected(self, spy_sink: Mock) -> None:
        """Unknown sink names raise and leave the dispatcher untouched"""
        dispatcher = Dispatcher(sinks=[spy_sink])
        settings = LoggingSettings(sinks="console,syslog", _env_file=None)

        with pytest.raises(ValueError, match="syslog"):
            factory.configure_logging(settings, dispatcher)

        assert dispatcher.sinks == (spy_sink,)
        spy_sink.close.assert_not_called()


class TestDefaultDispatcher:
    """Process-wide instance is created once"""

    @pytest.fixture(autouse=True)
    def fresh_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(factory, "_default_dispatcher", None)
        monkeypatch.setattr("sys.stderr", io.StringIO())

    def test_same_instance_returned(self) -> None:
        """Later calls return the first instance and ignore their level"""
        first = factory.get_dispatcher(Level.ERROR)
        second = factory.get_dispatcher(Level.DEBUG)

        assert first is second
        assert second.level == Level.ERROR

    def test_default_has_console_sink(self) -> None:
        """The default instance falls back to a console sink"""
        dispatcher = factory.get_dispatcher(Level.ERROR)

        assert len(dispatcher.sinks) == 1
        assert isinstance(dispatcher.sinks[0], ConsoleSink)

    def test_sink_factories(self, tmp_path: Path) -> None:
        """Factory helpers build the matching sink types"""
        assert isinstance(factory.create_console_sink(fmt="json"), ConsoleSink)

        daily = factory.create_file_sink(tmp_path, 2)

        assert isinstance(daily, DailyFileSink)
        assert daily.retention_days == 2
        daily.close()
