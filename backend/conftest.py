"""Shared pytest fixtures.

Time is always injected, so every test runs against the same fixed ``now``.
"""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import TypeAlias

import pytest

from core.readings import Reading
from core.sensors import Sensor
from core.zone import Zone

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

ZoneFactory: TypeAlias = Callable[..., Zone]


@pytest.fixture
def now() -> datetime:
    return NOW


def sensor_at(
    sensor_id: str,
    temp_f: float | None,
    age_minutes: float = 1.0,
    battery_pct: float | None = None,
    humidity_pct: float | None = None,
    now: datetime = NOW,
) -> Sensor:
    """A sensor whose latest reading is ``age_minutes`` old (no readings if temp is None)."""
    sensor = Sensor(sensor_id)
    if temp_f is not None:
        sensor.ingest_readings(
            [
                Reading(
                    sensor_id=sensor_id,
                    timestamp=now - timedelta(minutes=age_minutes),
                    temp_f=temp_f,
                    humidity_pct=humidity_pct,
                    battery_pct=battery_pct,
                )
            ]
        )
    return sensor


@pytest.fixture
def make_zone() -> ZoneFactory:
    """Build a zone with one fresh sensor per temperature given."""

    def _make(
        zone_id: str,
        temps: Iterable[float | None] = (),
        adjacent: Iterable[str] = (),
        name: str | None = None,
    ) -> Zone:
        zone = Zone(zone_id=zone_id, name=name or zone_id.title(), adjacent_zone_ids=adjacent)
        for i, temp in enumerate(temps):
            zone.add_sensor(sensor_at(f"{zone_id}_{i}", temp))
        return zone

    return _make
