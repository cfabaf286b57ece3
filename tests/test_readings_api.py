from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from roomclimate.models.reading import Sample
from tests.fakes import FakeReadingRepository


def test_root_reports_ok(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"name": "roomclimate", "status": "ok"}
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_write_then_read_current(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    write = client.post("/api/v1/readings", json={"temperature": 21.5, "humidity": 44.0})
    assert write.status_code == 201, write.text
    written_at = datetime.fromisoformat(write.json()["written_at"].replace("Z", "+00:00"))
    assert written_at.tzinfo is not None

    resp = client.get("/api/v1/readings/current")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["temperature"] == 21.5
    assert body["humidity"] == 44.0
    assert len(fake_repo._records) == 1


def test_server_assigns_timestamp(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    before = datetime.now(tz=timezone.utc)
    client.post(
        "/api/v1/readings",
        json={"temperature": 20.0, "humidity": 40.0, "timestamp": "2001-01-01T00:00:00Z"},
    )
    after = datetime.now(tz=timezone.utc)

    assert before <= fake_repo._records[0].timestamp <= after


def test_current_without_data_is_404(client: TestClient) -> None:
    resp = client.get("/api/v1/readings/current")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No readings yet"


def test_non_finite_values_rejected(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    resp = client.post(
        "/api/v1/readings",
        content='{"temperature": NaN, "humidity": 40}',
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 422
    assert fake_repo._records == []


def test_missing_field_rejected(client: TestClient) -> None:
    resp = client.post("/api/v1/readings", json={"temperature": 20.0})
    assert resp.status_code == 422


def test_range_applies_min_interval(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    t0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    for minutes, temp in [(0, 20.0), (5, 20.1), (16, 20.4), (20, 20.5), (31, 21.0)]:
        fake_repo.write_reading(
            Sample(timestamp=t0 + timedelta(minutes=minutes), temperature=temp, humidity=40.0)
        )

    resp = client.get(
        "/api/v1/readings/range",
        params={
            "start": t0.isoformat(),
            "end": (t0 + timedelta(hours=1)).isoformat(),
            "interval": 900,
        },
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["interval_seconds"] == 900
    assert [r["temperature"] for r in body["readings"]] == [20.0, 20.4, 21.0]


def test_range_end_is_inclusive(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    t0 = datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
    fake_repo.write_reading(Sample(timestamp=t0, temperature=19.0, humidity=41.0))

    resp = client.get(
        "/api/v1/readings/range",
        params={"start": t0.isoformat(), "end": t0.isoformat(), "interval": 60},
    )
    assert resp.status_code == 200
    assert len(resp.json()["readings"]) == 1


def test_range_rejects_non_positive_interval(client: TestClient) -> None:
    t0 = datetime(2024, 3, 1, tzinfo=timezone.utc)
    resp = client.get(
        "/api/v1/readings/range",
        params={"start": t0.isoformat(), "end": t0.isoformat(), "interval": 0},
    )
    assert resp.status_code == 400
    assert "positive" in resp.json()["detail"]


def test_range_rejects_inverted_window(client: TestClient) -> None:
    t0 = datetime(2024, 3, 1, tzinfo=timezone.utc)
    resp = client.get(
        "/api/v1/readings/range",
        params={
            "start": t0.isoformat(),
            "end": (t0 - timedelta(hours=1)).isoformat(),
            "interval": 60,
        },
    )
    assert resp.status_code == 400


def test_storage_failure_maps_to_503(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    fake_repo.fail = True

    write = client.post("/api/v1/readings", json={"temperature": 21.0, "humidity": 40.0})
    current = client.get("/api/v1/readings/current")

    assert write.status_code == 503
    assert current.status_code == 503
    assert write.json()["detail"] == "InfluxDB unavailable"


def test_health(client: TestClient, fake_repo: FakeReadingRepository) -> None:
    assert client.get("/api/v1/readings/health").json() == {"status": "ok"}

    fake_repo.fail = True
    assert client.get("/api/v1/readings/health").status_code == 503
