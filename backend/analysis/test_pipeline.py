"""Tests for the full analysis pass."""

from collections.abc import Iterable
from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from analysis.anomaly import AnomalyCode, OverallStatus
from analysis.config import DEFAULT_THRESHOLDS, AnalysisConfig
from analysis.pipeline import analyze_zones
from analysis.thermal import TrendDirection
from conftest import NOW, ZoneFactory
from core.readings import Reading, WeatherSnapshot
from core.sensors import Sensor
from core.zone import CoverageStatus, Zone

WEATHER = WeatherSnapshot(timestamp=NOW, outdoor_temp_f=30.0)


def _ramp_zone(zone_id: str, end_temp: float, rate_per_hour: float, adjacent: Iterable[str] = ()) -> Zone:
    """One sensor polled every 5 minutes for the past hour along a straight line."""
    zone = Zone(zone_id=zone_id, name=zone_id.title(), adjacent_zone_ids=adjacent)
    sensor = Sensor(f"{zone_id}_s")
    sensor.ingest_readings(
        Reading(
            sensor_id=sensor.sensor_id,
            timestamp=NOW - timedelta(minutes=m),
            temp_f=end_temp - rate_per_hour * m / 60,
        )
        for m in range(0, 60, 5)
    )
    zone.add_sensor(sensor)
    return zone


def test_all_comfortable_house_is_ok(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [70.0], adjacent=["b"]), make_zone("b", [71.0], adjacent=["a"])]

    result = analyze_zones(zones, WEATHER, now=NOW)

    assert result.overall_status is OverallStatus.OK
    assert result.anomalies == ()
    assert result.generated_at == NOW
    assert set(result.zone_analyses) == {"a", "b"}
    assert result.house_spread is not None
    assert result.house_spread.spread_f == 1.0
    assert result.uniformity_score == 0.75


def test_zone_analysis_fields(make_zone: ZoneFactory) -> None:
    result = analyze_zones([make_zone("a", [70.04, 70.0])], WEATHER, now=NOW)

    za = result.zone_analyses["a"]
    assert za.current_temp_f == 70.0
    assert za.coverage is CoverageStatus.COVERED
    assert za.indoor_outdoor_delta_f == 40.0
    assert za.heat_loss_btu_hr == 40.0
    # A single reading per sensor gives one bucket and no slope
    assert za.rate_of_change is None


def test_heat_loss_uses_resistance_override(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [70.0]), make_zone("b", [70.0]), make_zone("c", [70.0])]
    config = AnalysisConfig(default_thermal_resistance=2.0)

    result = analyze_zones(zones, WEATHER, thermal_resistances={"a": 0.8, "c": 0.0}, config=config, now=NOW)

    assert result.zone_analyses["a"].heat_loss_btu_hr == 50.0
    assert result.zone_analyses["b"].heat_loss_btu_hr == 20.0
    # Non-positive resistance means unknown, not infinite
    assert result.zone_analyses["c"].heat_loss_btu_hr == 0.0


def test_no_weather_means_no_outdoor_metrics(make_zone: ZoneFactory) -> None:
    result = analyze_zones([make_zone("a", [70.0])], now=NOW)

    za = result.zone_analyses["a"]
    assert za.indoor_outdoor_delta_f is None
    assert za.heat_loss_btu_hr is None


def test_weather_without_outdoor_temp(make_zone: ZoneFactory) -> None:
    result = analyze_zones([make_zone("a", [70.0])], WeatherSnapshot(timestamp=NOW), now=NOW)
    assert result.zone_analyses["a"].heat_loss_btu_hr is None


def test_uncovered_zone_is_reported_without_temperature(make_zone: ZoneFactory) -> None:
    result = analyze_zones([make_zone("a", [None]), make_zone("b", [70.0])], WEATHER, now=NOW)

    za = result.zone_analyses["a"]
    assert za.current_temp_f is None
    assert za.coverage is CoverageStatus.UNCOVERED
    assert za.heat_loss_btu_hr is None
    assert result.house_spread is None
    assert result.uniformity_score is None
    assert result.overall_status is OverallStatus.WARNING


def test_pair_deltas_once_per_adjacent_pair(make_zone: ZoneFactory) -> None:
    zones = [
        make_zone("nursery", [66.0], adjacent=["elijah", "master"], name="Nursery"),
        make_zone("elijah", [70.5], adjacent=["nursery", "master"], name="Elijah"),
        make_zone("master", [71.0], adjacent=["nursery", "elijah"], name="Master"),
        make_zone("downstairs", [72.0], name="Downstairs"),
    ]

    result = analyze_zones(zones, WEATHER, now=NOW)

    pairs = {(d.zone_a_id, d.zone_b_id): d for d in result.deltas}
    assert set(pairs) == {("nursery", "elijah"), ("nursery", "master"), ("elijah", "master")}

    nursery_elijah = pairs[("nursery", "elijah")]
    assert nursery_elijah.zone_a_name == "Nursery"
    assert nursery_elijah.delta is not None
    assert nursery_elijah.delta.delta_f == -4.5
    assert nursery_elijah.delta.warmer == "elijah"


def test_pair_delta_missing_when_a_side_is_silent(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [70.0], adjacent=["b"]), make_zone("b", [None], adjacent=["a"])]

    result = analyze_zones(zones, now=NOW)

    assert len(result.deltas) == 1
    assert result.deltas[0].delta is None


def test_strict_adjacency_propagates(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [70.0], adjacent=["b"]), make_zone("b", [70.0])]
    with pytest.raises(ValueError):
        analyze_zones(zones, config=AnalysisConfig(strict_adjacency=True), now=NOW)


def test_rate_feeds_rapid_change_anomaly() -> None:
    zone = _ramp_zone("den", end_temp=70.0, rate_per_hour=-6.0)

    result = analyze_zones([zone], WEATHER, now=NOW)

    rate = result.zone_analyses["den"].rate_of_change
    assert rate is not None
    assert rate.rate_per_hour == pytest.approx(-6.0)
    assert rate.direction is TrendDirection.FALLING
    assert [a.code for a in result.anomalies] == [AnomalyCode.RAPID_CHANGE]
    assert result.anomalies[0].value == rate.rate_per_hour
    assert result.overall_status is OverallStatus.WARNING


def test_gentle_ramp_is_not_anomalous() -> None:
    zone = _ramp_zone("den", end_temp=70.0, rate_per_hour=1.2)

    result = analyze_zones([zone], WEATHER, now=NOW)

    rate = result.zone_analyses["den"].rate_of_change
    assert rate is not None
    assert rate.direction is TrendDirection.RISING
    assert result.anomalies == ()


def test_overall_status_is_worst_anomaly(make_zone: ZoneFactory) -> None:
    zones = [make_zone("a", [58.0]), make_zone("b", [70.0, None])]

    result = analyze_zones(zones, now=NOW)

    assert {a.code for a in result.anomalies} == {
        AnomalyCode.TEMP_DANGER_LOW,
        AnomalyCode.PARTIAL_COVERAGE,
        AnomalyCode.HOUSE_SPREAD,
    }
    assert result.overall_status is OverallStatus.DANGER


def test_config_thresholds_are_honoured(make_zone: ZoneFactory) -> None:
    config = AnalysisConfig(thresholds=DEFAULT_THRESHOLDS.with_overrides(comfort_low_f=72.0))

    result = analyze_zones([make_zone("a", [70.0])], config=config, now=NOW)

    assert [a.code for a in result.anomalies] == [AnomalyCode.TEMP_LOW]


def test_result_is_read_only(make_zone: ZoneFactory) -> None:
    result = analyze_zones([make_zone("a", [70.0])], now=NOW)

    with pytest.raises(FrozenInstanceError):
        result.overall_status = OverallStatus.DANGER  # type: ignore[misc]
    with pytest.raises(TypeError):
        result.zone_analyses["b"] = result.zone_analyses["a"]  # type: ignore[index]


def test_empty_house() -> None:
    result = analyze_zones([], now=NOW)

    assert result.zone_analyses == {}
    assert result.deltas == ()
    assert result.house_spread is None
    assert result.uniformity_score is None
    assert result.overall_status is OverallStatus.OK
