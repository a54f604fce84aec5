"""Synthetic reading and weather generation.

Produces raw records in the store's wire shape so the rest of the pipeline
cannot tell them from live data. Generates realistic data with:
- Diurnal pattern (warmer afternoons, setback at night)
- Per-sensor noise
- One problem sensor (``nursery_bed``) running cold, worse at night
"""

import math
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import numpy as np

POLL_INTERVAL = timedelta(minutes=5)

_WIND_DIRECTIONS = ("N", "NE", "NW", "W")


def generate_readings(
    sensor_ids: Sequence[str],
    hours: float,
    now: datetime | None = None,
    seed: int | None = None,
) -> list[dict[str, Any]]:
    """Raw reading records every 5 minutes for ``hours`` up to ``now``."""
    now = now or datetime.now(UTC)
    rng = np.random.default_rng(seed)
    n_points = int(timedelta(hours=hours) / POLL_INTERVAL)

    records: list[dict[str, Any]] = []
    for i in range(n_points):
        timestamp = now - (n_points - 1 - i) * POLL_INTERVAL
        hour = timestamp.hour + timestamp.minute / 60
        for sensor_id in sensor_ids:
            temp = _base_temp(sensor_id, hour) + rng.uniform(-0.3, 0.3)
            records.append(
                {
                    "sensor_id": sensor_id,
                    "timestamp": timestamp.isoformat(),
                    "temp_f": round(float(temp), 2),
                    "humidity_pct": round(float(rng.uniform(42, 50)), 1),
                    "battery_pct": int(rng.integers(85, 101)),
                }
            )
    return records


def generate_weather(now: datetime | None = None, seed: int | None = None) -> dict[str, Any]:
    """Raw weather record: winter day swinging around 32°F, warmest at 14:00."""
    now = now or datetime.now(UTC)
    rng = np.random.default_rng(seed)
    hour = now.hour + now.minute / 60

    return {
        "timestamp": now.isoformat(),
        "outdoor_temp_f": round(32 + 8 * _diurnal(hour), 1),
        "outdoor_humidity": round(float(rng.uniform(55, 75))),
        "wind_speed_mph": round(float(rng.uniform(5, 20)), 1),
        "wind_direction": _WIND_DIRECTIONS[int(rng.integers(len(_WIND_DIRECTIONS)))],
        "wind_gust_mph": round(float(rng.uniform(10, 30)), 1),
        "barometric_pressure_pa": round(101325 + float(rng.uniform(-1000, 1000))),
        "dewpoint_f": round(float(rng.uniform(25, 31)), 1),
        "cloud_cover_pct": round(float(rng.uniform(0, 100))),
        "precipitation_last_hour_in": 0.0,
    }


def _diurnal(hour: float) -> float:
    """+1 at 14:00, -1 at 02:00."""
    return math.sin((hour - 8) * math.pi / 12)


def _is_night(hour: float) -> bool:
    return hour >= 22 or hour < 6


def _base_temp(sensor_id: str, hour: float) -> float:
    """Per-sensor thermal behaviour, °F."""
    setback = -1.5 if _is_night(hour) else 0.0

    match sensor_id:
        case "nursery_bed":
            # Runs 3-6°F cold, worse at night
            night_penalty = 3.0 if _is_night(hour) else 0.0
            return 68 + setback - 3 - night_penalty + 1.5 * _diurnal(hour)
        case "elijah_mid":
            # Same HVAC zone as the nursery but closer to the duct
            return 71 + setback + 0.8 * _diurnal(hour)
        case "master_bassinet":
            return 72 + setback * 0.5 + 0.5 * _diurnal(hour)
        case "downstairs_thermo":
            # Next to the thermostat: very stable
            return 72 + 0.3 * _diurnal(hour)
        case _:
            return 71 + setback + _diurnal(hour)
