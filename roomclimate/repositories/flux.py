from __future__ import annotations

from datetime import datetime, timedelta, timezone


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    return to_utc(dt).isoformat().replace("+00:00", "Z")


def flux_str(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def flux_range(start: datetime, stop: datetime, *, inclusive_stop: bool = True) -> str:
    # range() treats stop as exclusive.
    stop_utc = to_utc(stop)
    if inclusive_stop:
        stop_utc = stop_utc + timedelta(microseconds=1)
    return (
        f"range(start: time(v: {flux_str(to_rfc3339(start))}), "
        f"stop: time(v: {flux_str(to_rfc3339(stop_utc))}))"
    )
