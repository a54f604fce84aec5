"""Household configuration."""

from data.registry import (
    DEFAULT_HISTORY_HOURS,
    POLL_INTERVAL_MINUTES,
    THERMAL_RESISTANCES,
    build_zone_graph,
    sensor_ids,
)

__all__ = [
    "DEFAULT_HISTORY_HOURS",
    "POLL_INTERVAL_MINUTES",
    "THERMAL_RESISTANCES",
    "build_zone_graph",
    "sensor_ids",
]
