"""Dashboard service - turns fetched raw records into an analysed snapshot.

The service is handed already-fetched records; fetching and the polling
cadence belong to the caller. Each refresh clears every sensor history and
re-ingests the full batch.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from analysis import DEFAULT, AnalysisConfig, AnalysisResult, analyze_zones
from core.readings import WeatherSnapshot
from core.records import RawReading, RawWeather, hydrate_readings, hydrate_weather
from core.zone import Zone

logger = logging.getLogger(__name__)


@dataclass
class LoadStats:
    total: int = 0
    loaded: int = 0
    dropped: int = 0
    failed: list[str] = field(default_factory=list)


@dataclass
class DashboardSnapshot:
    zones: list[Zone]
    weather: WeatherSnapshot | None
    loaded_at: datetime
    stats: LoadStats


def load_snapshot(
    zones: Sequence[Zone],
    raw_readings: Iterable[RawReading | Mapping[str, Any]],
    raw_weather: RawWeather | Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> DashboardSnapshot:
    """Hydrate raw records and distribute the readings to their sensors."""
    now = now or datetime.now(UTC)
    stats = LoadStats()

    hydrated = hydrate_readings(raw_readings)
    stats.total = hydrated.total
    stats.dropped = hydrated.dropped

    weather: WeatherSnapshot | None = None
    try:
        weather = hydrate_weather(raw_weather)
    except ValueError as exc:
        logger.warning("Ignoring invalid weather record: %s", exc)
        stats.failed.append("weather")

    for zone in zones:
        for sensor in zone.sensors:
            sensor.clear_readings()
            sensor.ingest_readings(hydrated.readings)
            stats.loaded += sensor.reading_count

    logger.info(
        "Loaded %d of %d readings (%d invalid) into %d zones",
        stats.loaded,
        stats.total,
        stats.dropped,
        len(zones),
    )
    return DashboardSnapshot(zones=list(zones), weather=weather, loaded_at=now, stats=stats)


class DashboardService:
    """Holds the zone graph and the most recent analysis."""

    def __init__(
        self,
        zones: Sequence[Zone],
        thermal_resistances: Mapping[str, float] | None = None,
        config: AnalysisConfig = DEFAULT,
    ) -> None:
        self.zones = list(zones)
        self.thermal_resistances = dict(thermal_resistances or {})
        self.config = config
        self._latest: AnalysisResult | None = None
        self._latest_snapshot: DashboardSnapshot | None = None

    @property
    def latest(self) -> AnalysisResult | None:
        return self._latest

    @property
    def latest_snapshot(self) -> DashboardSnapshot | None:
        return self._latest_snapshot

    def get_zone(self, zone_id: str) -> Zone | None:
        return next((z for z in self.zones if z.zone_id == zone_id), None)

    def refresh(
        self,
        raw_readings: Iterable[RawReading | Mapping[str, Any]],
        raw_weather: RawWeather | Mapping[str, Any] | None = None,
        now: datetime | None = None,
    ) -> AnalysisResult:
        """Load a fresh batch of records and re-run the analysis."""
        now = now or datetime.now(UTC)
        snapshot = load_snapshot(self.zones, raw_readings, raw_weather, now)
        result = analyze_zones(
            snapshot.zones,
            weather=snapshot.weather,
            thermal_resistances=self.thermal_resistances,
            config=self.config,
            now=now,
        )
        self._latest_snapshot = snapshot
        self._latest = result
        return result
