"""analyze_zones - one full analysis pass over a dashboard snapshot.

Steps:
1. Per zone: bucketed series -> rate of change, indoor/outdoor delta, heat loss
2. Temperature deltas across each adjacent zone pair (once per pair)
3. Whole-house spread and uniformity
4. Anomaly detection, fed the same rates, and the overall status

Pure given its inputs: nothing is cached or persisted here.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType

from analysis.adjacency import build_zone_edges
from analysis.anomaly import Anomaly, OverallStatus, detect_anomalies, worst_level
from analysis.config import DEFAULT, AnalysisConfig
from analysis.thermal import (
    HouseSpread,
    RateOfChange,
    ZoneDelta,
    calc_rate_of_change,
    calc_uniformity_score,
    calc_whole_house_spread,
    calc_zone_delta,
    estimate_heat_loss,
)
from core.readings import WeatherSnapshot
from core.zone import CoverageStatus, Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneAnalysis:
    zone_id: str
    current_temp_f: float | None
    coverage: CoverageStatus
    rate_of_change: RateOfChange | None
    indoor_outdoor_delta_f: float | None
    heat_loss_btu_hr: float | None


@dataclass(frozen=True)
class ZonePairDelta:
    """Delta across one adjacent pair; ``delta`` is None if either side lacks data."""

    zone_a_id: str
    zone_b_id: str
    zone_a_name: str
    zone_b_name: str
    delta: ZoneDelta | None


@dataclass(frozen=True)
class AnalysisResult:
    zone_analyses: Mapping[str, ZoneAnalysis]
    deltas: tuple[ZonePairDelta, ...]
    house_spread: HouseSpread | None
    uniformity_score: float | None
    anomalies: tuple[Anomaly, ...]
    overall_status: OverallStatus
    generated_at: datetime


def analyze_zones(
    zones: Sequence[Zone],
    weather: WeatherSnapshot | None = None,
    thermal_resistances: Mapping[str, float] | None = None,
    config: AnalysisConfig = DEFAULT,
    now: datetime | None = None,
) -> AnalysisResult:
    """Run the full thermal analysis pipeline on a snapshot.

    Args:
        zones: Zones with sensor histories already ingested
        weather: Latest outdoor conditions, if known
        thermal_resistances: zone_id -> R (°F·hr/BTU) overriding the default
        config: Analysis tunables
        now: Reference time for staleness and series windows

    Returns:
        AnalysisResult bundling per-zone analysis, pair deltas, whole-house
        metrics, anomalies and the overall status

    Raises:
        ValueError: If ``config.strict_adjacency`` is set and a zone declares a
            one-sided adjacency.
    """
    now = now or datetime.now(UTC)
    resistances = thermal_resistances or {}
    stale = config.thresholds.stale_sensor_minutes
    outdoor = weather.outdoor_temp_f if weather is not None else None

    # 1. Per-zone analysis
    zone_analyses: dict[str, ZoneAnalysis] = {}
    rates: dict[str, RateOfChange] = {}

    for zone in zones:
        series = zone.time_series(config.series_hours, config.bucket_minutes, now)
        rate = calc_rate_of_change(series, config.rate_window_minutes, config.stable_rate_per_hour)
        if rate is not None:
            rates[zone.zone_id] = rate

        temp = zone.current_temp_f(now, stale)
        delta_out: float | None = None
        heat_loss: float | None = None
        if temp is not None and outdoor is not None:
            resistance = resistances.get(zone.zone_id, config.default_thermal_resistance)
            delta_out = round(temp - outdoor, 1)
            heat_loss = round(estimate_heat_loss(temp, outdoor, resistance), 1)

        zone_analyses[zone.zone_id] = ZoneAnalysis(
            zone_id=zone.zone_id,
            current_temp_f=round(temp, 1) if temp is not None else None,
            coverage=zone.coverage_status(now, stale),
            rate_of_change=rate,
            indoor_outdoor_delta_f=delta_out,
            heat_loss_btu_hr=heat_loss,
        )

    # 2. Adjacent pair deltas
    deltas = tuple(
        ZonePairDelta(
            zone_a_id=edge.zone_a.zone_id,
            zone_b_id=edge.zone_b.zone_id,
            zone_a_name=edge.zone_a.name,
            zone_b_name=edge.zone_b.name,
            delta=calc_zone_delta(edge.zone_a, edge.zone_b, now, stale),
        )
        for edge in build_zone_edges(zones, strict=config.strict_adjacency)
    )

    # 3. Whole-house metrics
    house_spread = calc_whole_house_spread(zones, now, stale)
    uniformity = calc_uniformity_score(zones, config.uniformity_tolerance_f, now, stale)

    # 4. Anomalies
    anomalies = tuple(detect_anomalies(zones, weather, rates, config.thresholds, now))
    overall = worst_level(anomalies)

    logger.info(
        "Analysed %d zones: %d pair deltas, %d anomalies, status=%s",
        len(zone_analyses),
        len(deltas),
        len(anomalies),
        overall,
    )

    return AnalysisResult(
        zone_analyses=MappingProxyType(zone_analyses),
        deltas=deltas,
        house_spread=house_spread,
        uniformity_score=uniformity,
        anomalies=anomalies,
        overall_status=overall,
        generated_at=now,
    )
