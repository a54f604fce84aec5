"""Centralised analysis tunables.

Every threshold the analytics pipeline compares against lives here. Build a
custom config to tweak values for a household or a test::

    thresholds = DEFAULT_THRESHOLDS.with_overrides(danger_low_f=58.0)
    cfg = AnalysisConfig(thresholds=thresholds, rate_window_minutes=20)
    result = analyze_zones(zones, weather, config=cfg)
"""

from dataclasses import dataclass, field, fields, replace
from typing import Self


@dataclass(frozen=True)
class AnomalyThresholds:
    """Anomaly detection limits, all in °F unless noted."""

    # --- Absolute temperature bands ---
    comfort_low_f: float = 65.0
    comfort_high_f: float = 78.0
    danger_low_f: float = 60.0
    danger_high_f: float = 85.0

    # --- Dynamics ---
    max_rate_per_hour: float = 3.0  # °F/hr; faster than this is suspicious
    max_zone_delta_f: float = 5.0  # spread between sensors of one zone
    max_whole_house_spread_f: float = 8.0

    # --- Sensor health ---
    stale_sensor_minutes: float = 15.0
    low_battery_pct: float = 20.0  # below: info
    critical_battery_pct: float = 10.0  # below: warning

    def with_overrides(self, **overrides: float) -> Self:
        """Copy with a subset of thresholds replaced."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ValueError(f"Unknown threshold option(s): {', '.join(unknown)}")
        return replace(self, **overrides)


DEFAULT_THRESHOLDS = AnomalyThresholds()


@dataclass(frozen=True)
class AnalysisConfig:
    """Everything analyze_zones needs besides the snapshot itself."""

    thresholds: AnomalyThresholds = field(default_factory=AnomalyThresholds)

    # --- Series aggregation ---
    series_hours: float = 1.0
    bucket_minutes: float = 5.0  # tracks the upstream poll interval

    # --- Rate of change ---
    rate_window_minutes: float = 30.0
    stable_rate_per_hour: float = 0.3

    # --- Heat transfer ---
    default_thermal_resistance: float = 1.0  # °F·hr/BTU

    # --- Whole-house comfort ---
    uniformity_tolerance_f: float = 2.0

    # Raise on one-sided adjacency declarations instead of symmetrising them
    strict_adjacency: bool = False


DEFAULT = AnalysisConfig()
