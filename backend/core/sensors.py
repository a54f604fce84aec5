"""Sensor entity and its reading history."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from core.readings import Reading

logger = logging.getLogger(__name__)

STALE_MINUTES: float = 15.0

# Readings closer together than this are the same poll reported twice.
_DUPLICATE_WINDOW = timedelta(seconds=1)


class SensorStatus(StrEnum):
    ONLINE = "online"
    STALE = "stale"
    OFFLINE = "offline"


class Sensor:
    """A physical temperature sensor with an ordered reading history.

    The history is kept sorted by timestamp (newest last). Every derived value
    looks at the latest reading only; a stale latest reading means no current
    values at all.
    """

    def __init__(self, sensor_id: str, label: str | None = None, device_id: str | None = None) -> None:
        self.sensor_id = sensor_id
        self.label = label or sensor_id
        self.device_id = device_id
        self._readings: list[Reading] = []

    def __repr__(self) -> str:
        return f"Sensor(sensor_id={self.sensor_id!r}, readings={len(self._readings)})"

    # ------------------------------------------------------------------
    # History management
    # ------------------------------------------------------------------

    def ingest_readings(self, readings: Iterable[Reading]) -> None:
        """Add this sensor's readings, then re-sort and drop duplicates."""
        self._readings.extend(r for r in readings if r.sensor_id == self.sensor_id)
        ordered = sorted(self._readings, key=lambda r: r.timestamp)

        kept: list[Reading] = []
        for i, reading in enumerate(ordered):
            if i == 0 or reading.timestamp - ordered[i - 1].timestamp > _DUPLICATE_WINDOW:
                kept.append(reading)

        dropped = len(ordered) - len(kept)
        if dropped:
            logger.debug("%s: dropped %d duplicate reading(s)", self.sensor_id, dropped)
        self._readings = kept

    def clear_readings(self) -> None:
        self._readings = []

    def readings_in_window(self, hours: float, now: datetime | None = None) -> list[Reading]:
        """Readings no older than ``hours`` before ``now``."""
        now = now or datetime.now(UTC)
        cutoff = now - timedelta(hours=hours)
        return [r for r in self._readings if r.timestamp >= cutoff]

    @property
    def readings(self) -> list[Reading]:
        return list(self._readings)

    @property
    def reading_count(self) -> int:
        return len(self._readings)

    @property
    def latest_reading(self) -> Reading | None:
        return self._readings[-1] if self._readings else None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    def status(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> SensorStatus:
        latest = self.latest_reading
        if latest is None:
            return SensorStatus.OFFLINE
        if latest.is_stale(stale_minutes, now):
            return SensorStatus.STALE
        return SensorStatus.ONLINE

    def is_online(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> bool:
        return self.status(now, stale_minutes) is SensorStatus.ONLINE

    def _fresh_reading(self, now: datetime | None, stale_minutes: float) -> Reading | None:
        latest = self.latest_reading
        if latest is None or latest.is_stale(stale_minutes, now):
            return None
        return latest

    def current_temp_f(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        reading = self._fresh_reading(now, stale_minutes)
        return reading.temp_f if reading else None

    def current_humidity(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        reading = self._fresh_reading(now, stale_minutes)
        return reading.humidity_pct if reading else None

    def current_battery(self, now: datetime | None = None, stale_minutes: float = STALE_MINUTES) -> float | None:
        reading = self._fresh_reading(now, stale_minutes)
        return reading.battery_pct if reading else None
