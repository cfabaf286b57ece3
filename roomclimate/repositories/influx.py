from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from roomclimate.models.reading import Sample
from roomclimate.repositories.flux import flux_range, flux_str, to_utc

logger = logging.getLogger(__name__)

READING_FIELDS = ("temperature", "humidity")

# Far enough back to cover any retained data for "latest" lookups.
_LATEST_LOOKBACK = "-3650d"


class InfluxReadingRepository:
    def __init__(
        self,
        *,
        client: InfluxDBClient,
        org: str,
        bucket: str,
        measurement: str,
        sensor_id: str,
    ) -> None:
        self._client = client
        self._org = org
        self._bucket = bucket
        self._measurement = measurement
        self._sensor_id = sensor_id

    def ping(self) -> None:
        self._client.ping()

    def write_reading(self, sample: Sample) -> None:
        point = (
            Point(self._measurement)
            .tag("sensor", self._sensor_id)
            .field("temperature", float(sample.temperature))
            .field("humidity", float(sample.humidity))
            .time(to_utc(sample.timestamp), WritePrecision.NS)
        )
        write_api = self._client.write_api(write_options=SYNCHRONOUS)
        write_api.write(bucket=self._bucket, org=self._org, record=point)

    def query_latest(self) -> Sample | None:
        query = f"""
from(bucket: {flux_str(self._bucket)})
  |> range(start: {_LATEST_LOOKBACK})
  |> filter(fn: (r) => r["_measurement"] == {flux_str(self._measurement)})
  |> filter(fn: (r) => r["sensor"] == {flux_str(self._sensor_id)})
  |> filter(fn: (r) => {self._field_predicate()})
  |> group(columns: ["_field"])
  |> last()
  |> pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")
  |> group()
  |> sort(columns: ["_time"], desc: true)
  |> limit(n: 1)
"""
        samples = self._run(query)
        return samples[0] if samples else None

    def query_range(self, *, start: datetime, stop: datetime) -> list[Sample]:
        query = f"""
from(bucket: {flux_str(self._bucket)})
  |> {flux_range(start, stop)}
  |> filter(fn: (r) => r["_measurement"] == {flux_str(self._measurement)})
  |> filter(fn: (r) => r["sensor"] == {flux_str(self._sensor_id)})
  |> filter(fn: (r) => {self._field_predicate()})
  |> pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")
  |> group()
  |> sort(columns: ["_time"])
"""
        return self._run(query)

    def _field_predicate(self) -> str:
        return " or ".join(f'r["_field"] == {flux_str(f)}' for f in READING_FIELDS)

    def _run(self, query: str) -> list[Sample]:
        query_api = self._client.query_api()
        tables = query_api.query(query=query, org=self._org)

        results: list[Sample] = []
        skipped = 0
        for table in tables:
            for record in table.records:
                values: dict[str, Any] = record.values
                ts = record.get_time()
                temperature = _float_or_none(values.get("temperature"))
                humidity = _float_or_none(values.get("humidity"))
                if ts is None or temperature is None or humidity is None:
                    skipped += 1
                    continue
                results.append(
                    Sample(
                        timestamp=ts.astimezone(timezone.utc),
                        temperature=temperature,
                        humidity=humidity,
                    )
                )
        if skipped:
            logger.debug("Skipped incomplete reading rows", extra={"rows": skipped})
        return results


def _float_or_none(v: Any) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None
