from __future__ import annotations

from influxdb_client import InfluxDBClient

from roomclimate.core.config import Settings
from roomclimate.repositories.influx import InfluxReadingRepository


def create_influx_client(settings: Settings) -> InfluxDBClient:
    return InfluxDBClient(
        url=str(settings.influx_url),
        token=settings.influx_token,
        org=settings.influx_org,
        timeout=settings.influx_timeout_ms,
        enable_gzip=True,
    )


def build_reading_repository(
    client: InfluxDBClient, settings: Settings
) -> InfluxReadingRepository:
    return InfluxReadingRepository(
        client=client,
        org=settings.influx_org,
        bucket=settings.influx_bucket,
        measurement=settings.readings_measurement,
        sensor_id=settings.sensor_id,
    )
