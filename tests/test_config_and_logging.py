from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError
from typer.testing import CliRunner

from roomclimate.core.config import AgentSettings, Settings, load_agent_settings, load_settings
from roomclimate.core.logging import ContextualFormatter
from roomclimate.sensor.cli import app


def test_formatter_appends_known_extras() -> None:
    formatter = ContextualFormatter(fmt="%(levelname)s %(message)s", extra_keys=["sensor", "rows"])
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "Stored reading", None, None)
    record.sensor = "indoor"
    record.rows = 3
    record.ignored = "nope"

    assert formatter.format(record) == "INFO Stored reading | sensor=indoor rows=3"


def test_formatter_without_extras_is_plain() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)

    assert formatter.format(record) == "hello"


def test_api_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_INFLUX_TOKEN", "token-from-env-123")
    monkeypatch.setenv("APP_INFLUX_ORG", "home")
    monkeypatch.setenv("APP_INFLUX_BUCKET", "climate")
    monkeypatch.setenv("APP_HISTORY_HOURS", "12")

    settings = load_settings()

    assert settings.influx_bucket == "climate"
    assert settings.history_hours == 12
    assert settings.readings_measurement == "sensor_readings"
    assert settings.cors_origins


def test_agent_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SENSOR_WINDOW_SIZE", raising=False)
    settings = AgentSettings(_env_file=None)

    assert settings.window_size == 10
    assert settings.temperature_threshold == 0.2
    assert settings.humidity_threshold == 0.5
    assert settings.force_interval_seconds == 900.0


def test_cli_config_reflects_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENSOR_WINDOW_SIZE", "7")

    result = CliRunner().invoke(app, ["config"])

    assert result.exit_code == 0, result.output
    assert "window_size=7" in result.output
    assert load_agent_settings().window_size == 7


def test_unknown_display_timezone_rejected_at_load(settings: Settings) -> None:
    with pytest.raises(ValidationError):
        Settings(**{**settings.model_dump(), "display_timezone": "Mars/Olympus_Mons"})


def test_display_timezone_accepts_iana_names(settings: Settings) -> None:
    data = settings.model_dump()

    assert Settings(**{**data, "display_timezone": "Europe/Oslo"}).display_timezone == "Europe/Oslo"
    assert Settings(**{**data, "display_timezone": " utc "}).display_timezone == "UTC"
