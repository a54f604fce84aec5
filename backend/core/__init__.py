"""Core domain entities: readings, sensors and zones."""

from core.readings import Reading, WeatherSnapshot
from core.records import HydrationResult, RawReading, RawWeather, hydrate_readings, hydrate_weather
from core.sensors import STALE_MINUTES, Sensor, SensorStatus
from core.zone import CoverageStatus, SeriesPoint, Zone

__all__ = [
    "STALE_MINUTES",
    "CoverageStatus",
    "HydrationResult",
    "RawReading",
    "RawWeather",
    "Reading",
    "Sensor",
    "SensorStatus",
    "SeriesPoint",
    "WeatherSnapshot",
    "Zone",
    "hydrate_readings",
    "hydrate_weather",
]
