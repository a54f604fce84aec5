"""Raw store records and their hydration into domain value objects.

Records arrive in the backing store's snake_case wire shape. Hydration is
per-record: a bad record is dropped and counted, the rest of the batch loads.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ValidationError

from core.readings import Reading, WeatherSnapshot

logger = logging.getLogger(__name__)


class RawReading(BaseModel):
    sensor_id: str
    timestamp: datetime
    temp_f: float
    humidity_pct: float | None = None
    battery_pct: float | None = None


class RawWeather(BaseModel):
    timestamp: datetime
    outdoor_temp_f: float | None = None
    outdoor_humidity: float | None = None
    wind_speed_mph: float | None = None
    wind_direction: str | None = None
    wind_gust_mph: float | None = None
    barometric_pressure_pa: float | None = None
    dewpoint_f: float | None = None
    cloud_cover_pct: float | None = None
    precipitation_last_hour_in: float | None = None
    description: str = ""


@dataclass
class HydrationResult:
    readings: list[Reading] = field(default_factory=list)
    total: int = 0
    dropped: int = 0

    @property
    def loaded(self) -> int:
        return self.total - self.dropped


def hydrate_reading(raw: RawReading | Mapping[str, Any]) -> Reading:
    """Build a Reading from one raw record.

    Raises:
        ValueError: If the record is malformed or its temperature is not finite.
            ``pydantic.ValidationError`` is a ``ValueError`` subclass.
    """
    record = raw if isinstance(raw, RawReading) else RawReading.model_validate(raw)
    return Reading(
        sensor_id=record.sensor_id,
        timestamp=record.timestamp,
        temp_f=record.temp_f,
        humidity_pct=record.humidity_pct,
        battery_pct=record.battery_pct,
    )


def hydrate_readings(raw_records: Iterable[RawReading | Mapping[str, Any]]) -> HydrationResult:
    """Hydrate a batch of raw readings, dropping the ones that fail."""
    result = HydrationResult()
    for raw in raw_records:
        result.total += 1
        try:
            result.readings.append(hydrate_reading(raw))
        except (ValidationError, ValueError) as exc:
            result.dropped += 1
            logger.warning("Dropping invalid reading record %r: %s", raw, exc)
    return result


def hydrate_weather(raw: RawWeather | Mapping[str, Any] | None) -> WeatherSnapshot | None:
    if raw is None:
        return None
    record = raw if isinstance(raw, RawWeather) else RawWeather.model_validate(raw)
    return WeatherSnapshot(
        timestamp=record.timestamp,
        outdoor_temp_f=record.outdoor_temp_f,
        outdoor_humidity=record.outdoor_humidity,
        wind_speed_mph=record.wind_speed_mph,
        wind_direction=record.wind_direction,
        gust_speed_mph=record.wind_gust_mph,
        barometric_pressure_pa=record.barometric_pressure_pa,
        dewpoint_f=record.dewpoint_f,
        cloud_cover_pct=record.cloud_cover_pct,
        precipitation_in=record.precipitation_last_hour_in,
        description=record.description,
    )
