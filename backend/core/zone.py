"""Zone aggregate - a room or HVAC area and the sensors inside it."""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

from core.sensors import STALE_MINUTES, Sensor

DEFAULT_BUCKET_MINUTES: float = 5.0


class CoverageStatus(StrEnum):
    COVERED = "covered"
    PARTIAL = "partial"
    UNCOVERED = "uncovered"


@dataclass(frozen=True)
class SeriesPoint:
    """One bucket of a zone time series."""

    timestamp: datetime
    temp_f: float
    sensor_count: int


class Zone:
    """A logical room holding zero or more sensors.

    A zone whose sensors are all offline reports as ``uncovered``, exactly like
    a zone with no sensors; ``sensor_count`` still tells the two apart.
    Adjacency is declared by configuration and not checked for symmetry here.
    """

    def __init__(
        self,
        zone_id: str,
        name: str,
        hvac_zone: str | None = None,
        adjacent_zone_ids: Iterable[str] = (),
        layout: dict[str, Any] | None = None,
    ) -> None:
        self.zone_id = zone_id
        self.name = name
        self.hvac_zone = hvac_zone
        self.adjacent_zone_ids: tuple[str, ...] = tuple(adjacent_zone_ids)
        self.layout = layout
        self._sensors: dict[str, Sensor] = {}

    def __repr__(self) -> str:
        return f"Zone(zone_id={self.zone_id!r}, sensors={list(self._sensors)})"

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add_sensor(self, sensor: Sensor) -> None:
        self._sensors.setdefault(sensor.sensor_id, sensor)

    def remove_sensor(self, sensor_id: str) -> None:
        self._sensors.pop(sensor_id, None)

    def get_sensor(self, sensor_id: str) -> Sensor | None:
        return self._sensors.get(sensor_id)

    @property
    def sensors(self) -> list[Sensor]:
        return list(self._sensors.values())

    @property
    def sensor_count(self) -> int:
        return len(self._sensors)

    # ------------------------------------------------------------------
    # Coverage
    # ------------------------------------------------------------------

    def online_sensors(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> list[Sensor]:
        return [s for s in self._sensors.values() if s.is_online(now, stale_minutes)]

    def offline_count(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> int:
        """Number of sensors not currently online (stale or silent)."""
        return self.sensor_count - len(self.online_sensors(now, stale_minutes))

    def coverage_status(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> CoverageStatus:
        online = len(self.online_sensors(now, stale_minutes))
        if online == 0:
            return CoverageStatus.UNCOVERED
        if online < self.sensor_count:
            return CoverageStatus.PARTIAL
        return CoverageStatus.COVERED

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def _current_temps(self, now: datetime | None, stale_minutes: float) -> list[float]:
        temps = (s.current_temp_f(now, stale_minutes) for s in self._sensors.values())
        return [t for t in temps if t is not None]

    def current_temp_f(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        temps = self._current_temps(now, stale_minutes)
        return sum(temps) / len(temps) if temps else None

    def current_humidity(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        values = (s.current_humidity(now, stale_minutes) for s in self._sensors.values())
        present = [v for v in values if v is not None]
        return sum(present) / len(present) if present else None

    def min_temp_f(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        temps = self._current_temps(now, stale_minutes)
        return min(temps) if temps else None

    def max_temp_f(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        temps = self._current_temps(now, stale_minutes)
        return max(temps) if temps else None

    def temp_spread_f(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        temps = self._current_temps(now, stale_minutes)
        return max(temps) - min(temps) if temps else None

    # ------------------------------------------------------------------
    # Time series
    # ------------------------------------------------------------------

    def time_series(
        self,
        hours: float,
        bucket_minutes: float = DEFAULT_BUCKET_MINUTES,
        now: datetime | None = None,
    ) -> list[SeriesPoint]:
        """Average all in-window readings into fixed-width time buckets.

        Sensors poll independently, so their timestamps never line up exactly.
        Each bucket is keyed by ``floor(epoch / width)`` and reported at its
        midpoint with the mean of every reading that fell into it.
        """
        now = now or datetime.now(UTC)
        width_s = bucket_minutes * 60.0

        buckets: dict[int, list[float]] = {}
        for sensor in self._sensors.values():
            for reading in sensor.readings_in_window(hours, now):
                key = math.floor(reading.timestamp.timestamp() / width_s)
                buckets.setdefault(key, []).append(reading.temp_f)

        points = [
            SeriesPoint(
                timestamp=datetime.fromtimestamp(key * width_s, tz=UTC) + timedelta(seconds=width_s / 2),
                temp_f=sum(temps) / len(temps),
                sensor_count=len(temps),
            )
            for key, temps in buckets.items()
        ]
        points.sort(key=lambda p: p.timestamp)
        return points
