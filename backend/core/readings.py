"""Measurement value objects: sensor readings and outdoor weather."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


def _as_utc(timestamp: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


@dataclass(frozen=True)
class Reading:
    """A single temperature/humidity/battery measurement from one sensor.

    Only ``temp_f`` is validated. Out-of-range values are left for anomaly
    detection to judge.
    """

    sensor_id: str
    timestamp: datetime
    temp_f: float
    humidity_pct: float | None = None
    battery_pct: float | None = None

    def __post_init__(self) -> None:
        temp = self.temp_f
        if isinstance(temp, bool) or not isinstance(temp, (int, float)) or not math.isfinite(temp):
            raise ValueError(f"Reading requires a finite numeric temp_f, got: {temp!r}")
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))

    def age_minutes(self, now: datetime | None = None) -> float:
        now = now or datetime.now(UTC)
        return (now - self.timestamp) / timedelta(minutes=1)

    def is_stale(self, threshold_minutes: float = 15.0, now: datetime | None = None) -> bool:
        return self.age_minutes(now) > threshold_minutes


@dataclass(frozen=True)
class WeatherSnapshot:
    """Outdoor conditions at a point in time.

    Every field except the timestamp may be missing; upstream weather feeds
    do not always report all of them.
    """

    timestamp: datetime
    outdoor_temp_f: float | None = None
    outdoor_humidity: float | None = None
    wind_speed_mph: float | None = None
    wind_direction: str | None = None
    gust_speed_mph: float | None = None
    barometric_pressure_pa: float | None = None
    dewpoint_f: float | None = None
    cloud_cover_pct: float | None = None
    precipitation_in: float | None = None
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))

    @property
    def wind_chill_f(self) -> float | None:
        """NWS wind chill; only defined below 50°F with at least 3 mph of wind."""
        temp = self.outdoor_temp_f
        wind = self.wind_speed_mph
        if temp is None or wind is None:
            return None
        if temp > 50 or wind < 3:
            return temp
        factor = wind**0.16
        return 35.74 + 0.6215 * temp - 35.75 * factor + 0.4275 * temp * factor

    @property
    def is_extreme_weather(self) -> bool:
        if self.outdoor_temp_f is not None and (self.outdoor_temp_f < 20 or self.outdoor_temp_f > 95):
            return True
        if self.wind_speed_mph is not None and self.wind_speed_mph > 25:
            return True
        return self.gust_speed_mph is not None and self.gust_speed_mph > 40
