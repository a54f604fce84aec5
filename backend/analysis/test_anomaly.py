"""Tests for threshold-based anomaly detection and severity ranking."""

import pytest

from analysis.anomaly import (
    HOUSE_ZONE_ID,
    Anomaly,
    AnomalyCode,
    AnomalyLevel,
    OverallStatus,
    detect_anomalies,
    filter_by_level,
    worst_level,
)
from analysis.config import DEFAULT_THRESHOLDS
from analysis.thermal import RateOfChange, TrendDirection
from conftest import NOW, ZoneFactory, sensor_at
from core.zone import Zone


def _codes(anomalies: list[Anomaly], zone_id: str | None = None) -> list[AnomalyCode]:
    return [a.code for a in anomalies if zone_id is None or a.zone_id == zone_id]


def _anomaly(level: AnomalyLevel) -> Anomaly:
    return Anomaly(level=level, zone_id="z", code=AnomalyCode.TEMP_LOW, message="m")


# -----------------------------------------------------------------------------
# Temperature bands
# -----------------------------------------------------------------------------


def test_dangerously_cold_zone_emits_single_danger_anomaly(make_zone: ZoneFactory) -> None:
    zone = make_zone("nursery", [58.0], name="Nursery")

    anomalies = detect_anomalies([zone], thresholds=DEFAULT_THRESHOLDS.with_overrides(danger_low_f=60), now=NOW)

    band = [a for a in anomalies if a.code in {AnomalyCode.TEMP_DANGER_LOW, AnomalyCode.TEMP_LOW}]
    assert len(band) == 1
    assert band[0].level is AnomalyLevel.DANGER
    assert band[0].code is AnomalyCode.TEMP_DANGER_LOW
    assert "dangerously cold" in band[0].message
    assert band[0].value == 58.0


@pytest.mark.parametrize(
    ("temp", "code", "level"),
    [
        (62.0, AnomalyCode.TEMP_LOW, AnomalyLevel.WARNING),
        (80.0, AnomalyCode.TEMP_HIGH, AnomalyLevel.WARNING),
        (88.0, AnomalyCode.TEMP_DANGER_HIGH, AnomalyLevel.DANGER),
    ],
)
def test_temperature_bands(make_zone: ZoneFactory, temp: float, code: AnomalyCode, level: AnomalyLevel) -> None:
    anomalies = detect_anomalies([make_zone("z", [temp])], now=NOW)
    assert len(anomalies) == 1
    assert anomalies[0].code is code
    assert anomalies[0].level is level


@pytest.mark.parametrize("temp", [65.0, 70.0, 78.0])
def test_comfortable_zone_has_no_anomalies(make_zone: ZoneFactory, temp: float) -> None:
    assert detect_anomalies([make_zone("z", [temp])], now=NOW) == []


def test_zone_without_data_skips_band_check() -> None:
    zone = Zone("z", "Empty")
    assert detect_anomalies([zone], now=NOW) == []


# -----------------------------------------------------------------------------
# Rate, coverage, spread, battery
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(("rate", "word"), [(4.5, "rising"), (-3.2, "falling")])
def test_rapid_change(make_zone: ZoneFactory, rate: float, word: str) -> None:
    zone = make_zone("z", [70.0], name="Den")
    direction = TrendDirection.RISING if rate > 0 else TrendDirection.FALLING
    rates = {"z": RateOfChange(rate_per_hour=rate, r2=0.9, direction=direction)}

    anomalies = detect_anomalies([zone], rates=rates, now=NOW)

    assert _codes(anomalies) == [AnomalyCode.RAPID_CHANGE]
    assert anomalies[0].level is AnomalyLevel.WARNING
    assert word in anomalies[0].message
    assert anomalies[0].value == rate


def test_rate_at_threshold_is_not_rapid(make_zone: ZoneFactory) -> None:
    rates = {"z": RateOfChange(rate_per_hour=3.0, r2=1.0, direction=TrendDirection.RISING)}
    assert detect_anomalies([make_zone("z", [70.0])], rates=rates, now=NOW) == []


def test_rapid_change_combines_with_band_anomaly(make_zone: ZoneFactory) -> None:
    rates = {"z": RateOfChange(rate_per_hour=-5.0, r2=0.95, direction=TrendDirection.FALLING)}
    anomalies = detect_anomalies([make_zone("z", [59.0])], rates=rates, now=NOW)
    assert _codes(anomalies) == [AnomalyCode.TEMP_DANGER_LOW, AnomalyCode.RAPID_CHANGE]


def test_all_sensors_offline(make_zone: ZoneFactory) -> None:
    zone = make_zone("z", [None, None], name="Attic")
    anomalies = detect_anomalies([zone], now=NOW)

    assert _codes(anomalies) == [AnomalyCode.ALL_SENSORS_OFFLINE]
    assert anomalies[0].level is AnomalyLevel.WARNING
    assert "all 2 sensor(s)" in anomalies[0].message


def test_stale_sensors_count_as_offline() -> None:
    zone = Zone("z", "Garage")
    zone.add_sensor(sensor_at("s", 70.0, age_minutes=30))
    assert _codes(detect_anomalies([zone], now=NOW)) == [AnomalyCode.ALL_SENSORS_OFFLINE]

    lenient = DEFAULT_THRESHOLDS.with_overrides(stale_sensor_minutes=60)
    assert detect_anomalies([zone], thresholds=lenient, now=NOW) == []


def test_partial_coverage_names_offline_count(make_zone: ZoneFactory) -> None:
    zone = make_zone("z", [70.0, None, None])
    anomalies = detect_anomalies([zone], now=NOW)

    assert _codes(anomalies) == [AnomalyCode.PARTIAL_COVERAGE]
    assert anomalies[0].level is AnomalyLevel.INFO
    assert "2 of 3" in anomalies[0].message


def test_intra_zone_spread(make_zone: ZoneFactory) -> None:
    anomalies = detect_anomalies([make_zone("z", [66.0, 72.0])], now=NOW)
    assert _codes(anomalies) == [AnomalyCode.INTRA_ZONE_SPREAD]
    assert anomalies[0].value == 6.0

    assert detect_anomalies([make_zone("y", [68.0, 72.0])], now=NOW) == []


@pytest.mark.parametrize(
    ("battery", "level"),
    [(19.0, AnomalyLevel.INFO), (10.0, AnomalyLevel.INFO), (9.0, AnomalyLevel.WARNING)],
)
def test_low_battery(battery: float, level: AnomalyLevel) -> None:
    zone = Zone("z", "Den")
    zone.add_sensor(sensor_at("s", 70.0, battery_pct=battery))

    anomalies = detect_anomalies([zone], now=NOW)

    assert _codes(anomalies) == [AnomalyCode.LOW_BATTERY]
    assert anomalies[0].level is level


def test_healthy_battery_and_unknown_battery_are_quiet() -> None:
    zone = Zone("z", "Den")
    zone.add_sensor(sensor_at("a", 70.0, battery_pct=20.0))
    zone.add_sensor(sensor_at("b", 70.0))
    assert detect_anomalies([zone], now=NOW) == []


# -----------------------------------------------------------------------------
# Whole house
# -----------------------------------------------------------------------------


def test_house_spread_uses_pseudo_zone(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [66.0]), make_zone("b", [75.0])]
    anomalies = detect_anomalies(zones, now=NOW)

    assert _codes(anomalies, HOUSE_ZONE_ID) == [AnomalyCode.HOUSE_SPREAD]
    assert anomalies[-1].value == 9.0


def test_house_spread_within_limit(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [67.0]), make_zone("b", [75.0])]
    assert _codes(detect_anomalies(zones, now=NOW), HOUSE_ZONE_ID) == []


# -----------------------------------------------------------------------------
# Severity
# -----------------------------------------------------------------------------


def test_worst_level_empty_is_ok() -> None:
    assert worst_level([]) is OverallStatus.OK
    assert worst_level([]) == "ok"


def test_worst_level_is_order_independent() -> None:
    mixed = [_anomaly(AnomalyLevel.INFO), _anomaly(AnomalyLevel.DANGER), _anomaly(AnomalyLevel.WARNING)]
    assert worst_level(mixed) == "danger"
    assert worst_level(list(reversed(mixed))) == "danger"
    assert worst_level([_anomaly(AnomalyLevel.INFO)]) == "info"


def test_filter_by_level() -> None:
    mixed = [_anomaly(AnomalyLevel.INFO), _anomaly(AnomalyLevel.DANGER), _anomaly(AnomalyLevel.WARNING)]

    assert [a.level for a in filter_by_level(mixed, "warning")] == [AnomalyLevel.DANGER, AnomalyLevel.WARNING]
    assert len(filter_by_level(mixed, AnomalyLevel.INFO)) == 3
    assert [a.level for a in filter_by_level(mixed, "danger")] == [AnomalyLevel.DANGER]


def test_unknown_threshold_override_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_rate"):
        DEFAULT_THRESHOLDS.with_overrides(max_rate=1.0)
