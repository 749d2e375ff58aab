from __future__ import annotations

from datetime import datetime, timezone


def to_rfc3339(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def flux_str(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def flux_time(dt: datetime) -> str:
    return f"time(v: {flux_str(to_rfc3339(dt))})"


def flux_any_equal(column: str, values: list[str]) -> str:
    """Predicate body matching rows whose ``column`` equals any of ``values``."""
    return " or ".join(f"r[{flux_str(column)}] == {flux_str(v)}" for v in values)
