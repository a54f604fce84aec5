"""Threshold-based anomaly detection over the current zone state.

Each finding is a leveled, coded record. Levels form a strict order
(info < warning < danger); the worst level present in a cycle becomes the
overall status shown to the user.

Per zone, at most one temperature-band anomaly is raised, checked
most-severe-first. The remaining checks (rate, coverage, spread, battery)
are independent and may all fire in the same cycle.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from analysis.config import DEFAULT_THRESHOLDS, AnomalyThresholds
from analysis.thermal.types import RateOfChange
from core.readings import WeatherSnapshot
from core.zone import CoverageStatus, Zone

logger = logging.getLogger(__name__)

# Pseudo zone id for house-wide findings.
HOUSE_ZONE_ID = "__house__"


class AnomalyLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK: dict[AnomalyLevel, int] = {
    AnomalyLevel.INFO: 0,
    AnomalyLevel.WARNING: 1,
    AnomalyLevel.DANGER: 2,
}


class OverallStatus(StrEnum):
    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


class AnomalyCode(StrEnum):
    TEMP_DANGER_LOW = "TEMP_DANGER_LOW"
    TEMP_LOW = "TEMP_LOW"
    TEMP_DANGER_HIGH = "TEMP_DANGER_HIGH"
    TEMP_HIGH = "TEMP_HIGH"
    RAPID_CHANGE = "RAPID_CHANGE"
    ALL_SENSORS_OFFLINE = "ALL_SENSORS_OFFLINE"
    PARTIAL_COVERAGE = "PARTIAL_COVERAGE"
    INTRA_ZONE_SPREAD = "INTRA_ZONE_SPREAD"
    LOW_BATTERY = "LOW_BATTERY"
    HOUSE_SPREAD = "HOUSE_SPREAD"


@dataclass(frozen=True)
class Anomaly:
    level: AnomalyLevel
    zone_id: str
    code: AnomalyCode
    message: str
    value: float | None = None


# -----------------------------------------------------------------------------
# Detection
# -----------------------------------------------------------------------------


def detect_anomalies(
    zones: Sequence[Zone],
    weather: WeatherSnapshot | None = None,
    rates: Mapping[str, RateOfChange] | None = None,
    thresholds: AnomalyThresholds = DEFAULT_THRESHOLDS,
    now: datetime | None = None,
) -> list[Anomaly]:
    """Run every anomaly check against the current zone state.

    Args:
        zones: Zones to evaluate, with sensor histories already ingested
        weather: Outdoor snapshot (not used by the current checks)
        rates: zone_id -> rate of change computed for this cycle
        thresholds: Detection limits
        now: Reference time for sensor staleness

    Returns:
        Anomalies in zone order, house-wide findings last
    """
    _ = weather  # weather unused but kept for API consistency
    now = now or datetime.now(UTC)
    rates = rates or {}
    stale = thresholds.stale_sensor_minutes
    anomalies: list[Anomaly] = []

    for zone in zones:
        temp = zone.current_temp_f(now, stale)
        if temp is not None:
            band = _check_temperature_band(zone, temp, thresholds)
            if band is not None:
                anomalies.append(band)

        rate = rates.get(zone.zone_id)
        if rate is not None and abs(rate.rate_per_hour) > thresholds.max_rate_per_hour:
            direction = "rising" if rate.rate_per_hour > 0 else "falling"
            anomalies.append(
                Anomaly(
                    level=AnomalyLevel.WARNING,
                    zone_id=zone.zone_id,
                    code=AnomalyCode.RAPID_CHANGE,
                    message=f"{zone.name} is {direction} at {abs(rate.rate_per_hour):.1f}°F/hr",
                    value=rate.rate_per_hour,
                )
            )

        anomalies.extend(_check_coverage(zone, now, stale))

        spread = zone.temp_spread_f(now, stale)
        if zone.sensor_count > 1 and spread is not None and spread > thresholds.max_zone_delta_f:
            anomalies.append(
                Anomaly(
                    level=AnomalyLevel.WARNING,
                    zone_id=zone.zone_id,
                    code=AnomalyCode.INTRA_ZONE_SPREAD,
                    message=f"{zone.name} has {spread:.1f}°F spread between sensors",
                    value=round(spread, 1),
                )
            )

        anomalies.extend(_check_batteries(zone, thresholds, now))

    house = _check_house_spread(zones, thresholds, now)
    if house is not None:
        anomalies.append(house)

    if anomalies:
        logger.debug("Detected %d anomalies across %d zones", len(anomalies), len(zones))
    return anomalies


def _check_temperature_band(zone: Zone, temp: float, t: AnomalyThresholds) -> Anomaly | None:
    """Most severe band breach for a zone temperature, if any."""
    if temp < t.danger_low_f:
        level, code, text = AnomalyLevel.DANGER, AnomalyCode.TEMP_DANGER_LOW, "dangerously cold"
    elif temp < t.comfort_low_f:
        level, code, text = AnomalyLevel.WARNING, AnomalyCode.TEMP_LOW, "below comfort range"
    elif temp > t.danger_high_f:
        level, code, text = AnomalyLevel.DANGER, AnomalyCode.TEMP_DANGER_HIGH, "dangerously hot"
    elif temp > t.comfort_high_f:
        level, code, text = AnomalyLevel.WARNING, AnomalyCode.TEMP_HIGH, "above comfort range"
    else:
        return None

    return Anomaly(
        level=level,
        zone_id=zone.zone_id,
        code=code,
        message=f"{zone.name} is {temp:.1f}°F - {text}",
        value=round(temp, 1),
    )


def _check_coverage(zone: Zone, now: datetime, stale_minutes: float) -> list[Anomaly]:
    if zone.sensor_count == 0:
        return []

    coverage = zone.coverage_status(now, stale_minutes)
    if coverage is CoverageStatus.UNCOVERED:
        return [
            Anomaly(
                level=AnomalyLevel.WARNING,
                zone_id=zone.zone_id,
                code=AnomalyCode.ALL_SENSORS_OFFLINE,
                message=f"{zone.name} - all {zone.sensor_count} sensor(s) offline",
            )
        ]
    if coverage is CoverageStatus.PARTIAL:
        offline = zone.offline_count(now, stale_minutes)
        return [
            Anomaly(
                level=AnomalyLevel.INFO,
                zone_id=zone.zone_id,
                code=AnomalyCode.PARTIAL_COVERAGE,
                message=f"{zone.name} - {offline} of {zone.sensor_count} sensor(s) offline",
                value=float(offline),
            )
        ]
    return []


def _check_batteries(zone: Zone, t: AnomalyThresholds, now: datetime) -> list[Anomaly]:
    found: list[Anomaly] = []
    for sensor in zone.sensors:
        battery = sensor.current_battery(now, t.stale_sensor_minutes)
        if battery is None or battery >= t.low_battery_pct:
            continue
        level = AnomalyLevel.WARNING if battery < t.critical_battery_pct else AnomalyLevel.INFO
        found.append(
            Anomaly(
                level=level,
                zone_id=zone.zone_id,
                code=AnomalyCode.LOW_BATTERY,
                message=f"{sensor.label} battery at {battery:g}%",
                value=battery,
            )
        )
    return found


def _check_house_spread(zones: Sequence[Zone], t: AnomalyThresholds, now: datetime) -> Anomaly | None:
    temps = [temp for z in zones if (temp := z.current_temp_f(now, t.stale_sensor_minutes)) is not None]
    if len(temps) < 2:
        return None

    spread = max(temps) - min(temps)
    if spread <= t.max_whole_house_spread_f:
        return None

    return Anomaly(
        level=AnomalyLevel.WARNING,
        zone_id=HOUSE_ZONE_ID,
        code=AnomalyCode.HOUSE_SPREAD,
        message=f"Whole-house spread is {spread:.1f}°F",
        value=round(spread, 1),
    )


# -----------------------------------------------------------------------------
# Severity
# -----------------------------------------------------------------------------


def filter_by_level(anomalies: Iterable[Anomaly], min_level: AnomalyLevel | str) -> list[Anomaly]:
    """Anomalies at or above ``min_level``."""
    floor = AnomalyLevel(min_level).rank
    return [a for a in anomalies if a.level.rank >= floor]


def worst_level(anomalies: Iterable[Anomaly]) -> OverallStatus:
    """Highest level present, or 'ok' when there are no anomalies."""
    worst: AnomalyLevel | None = None
    for anomaly in anomalies:
        if worst is None or anomaly.level.rank > worst.rank:
            worst = anomaly.level
    return OverallStatus.OK if worst is None else OverallStatus(worst.value)
