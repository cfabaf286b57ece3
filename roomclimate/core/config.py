from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

OPEN_METEO_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
        extra="ignore",
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    influx_url: AnyHttpUrl = Field(default="http://influxdb:8086")
    influx_token: str = Field(min_length=10)
    influx_org: str = Field(min_length=1)
    influx_bucket: str = Field(min_length=1)
    influx_timeout_ms: int = Field(default=10_000, ge=1000, le=120_000)
    readings_measurement: str = Field(default="sensor_readings", min_length=1, max_length=64)
    sensor_id: str = Field(default="indoor", min_length=1, max_length=64)

    weather_base_url: str = Field(default=OPEN_METEO_FORECAST_URL, min_length=8)
    weather_latitude: float = Field(default=50.0, ge=-90.0, le=90.0)
    weather_longitude: float = Field(default=15.0, ge=-180.0, le=180.0)
    weather_user_agent: str = Field(
        default="roomclimate/0.1 (contact: you@example.com)",
        min_length=3,
        max_length=256,
    )
    weather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)
    weather_min_refresh_interval_seconds: int = Field(default=300, ge=0, le=3600)

    indoor_data_max_age_seconds: int = Field(default=60, ge=1)
    history_hours: int = Field(default=24, ge=1, le=24 * 7)
    history_interval_seconds: int = Field(default=15 * 60, ge=1)
    interpolation_subinterval_minutes: int = Field(default=15, ge=1, le=60)
    interpolation_points: int = Field(default=3, ge=0, le=59)
    display_timezone: str = Field(default="UTC", min_length=1)

    band_cold_below: float = Field(default=15.0)
    band_cool_below: float = Field(default=20.0)
    band_normal_below: float = Field(default=25.0)
    band_warm_below: float = Field(default=30.0)

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        name = v.strip()
        if name.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown IANA timezone: {v!r}") from e
        return name

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


class AgentSettings(BaseSettings):
    """Configuration for the sensor agent process (``SENSOR_*`` variables)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SENSOR_",
        case_sensitive=False,
        extra="ignore",
    )

    api_url: AnyHttpUrl = Field(default="http://localhost:8000")
    timeout_seconds: float = Field(default=10.0, ge=0.5, le=60.0)
    log_level: str = Field(default="INFO")

    window_size: int = Field(default=10, ge=1, le=1000)
    temperature_threshold: float = Field(default=0.2, gt=0.0)
    humidity_threshold: float = Field(default=0.5, gt=0.0)
    force_interval_seconds: float = Field(default=900.0, gt=0.0)
    sample_interval_seconds: float = Field(default=2.0, ge=0.1, le=3600.0)

    simulated_temperature: float = Field(default=21.0, ge=-40.0, le=80.0)
    simulated_humidity: float = Field(default=45.0, ge=0.0, le=100.0)
    simulated_fault_rate: float = Field(default=0.0, ge=0.0, le=1.0)


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings


def load_agent_settings() -> AgentSettings:
    return AgentSettings()
