"""Zone-to-zone and whole-house temperature comparisons."""

from collections.abc import Sequence
from datetime import datetime

import numpy as np

from analysis.thermal.types import HouseSpread, ZoneDelta
from core.sensors import STALE_MINUTES
from core.zone import Zone

EQUAL = "equal"


def calc_zone_delta(
    zone_a: Zone,
    zone_b: Zone,
    now: datetime | None = None,
    stale_minutes: float = STALE_MINUTES,
) -> ZoneDelta | None:
    """Signed difference A - B; None if either zone has no current temperature."""
    temp_a = zone_a.current_temp_f(now, stale_minutes)
    temp_b = zone_b.current_temp_f(now, stale_minutes)
    if temp_a is None or temp_b is None:
        return None

    delta = temp_a - temp_b
    if delta > 0:
        warmer = zone_a.zone_id
    elif delta < 0:
        warmer = zone_b.zone_id
    else:
        warmer = EQUAL

    return ZoneDelta(
        delta_f=round(delta, 1),
        abs_delta_f=round(abs(delta), 1),
        warmer=warmer,
    )


def _zone_temps(zones: Sequence[Zone], now: datetime | None, stale_minutes: float) -> list[tuple[Zone, float]]:
    reporting: list[tuple[Zone, float]] = []
    for zone in zones:
        temp = zone.current_temp_f(now, stale_minutes)
        if temp is not None:
            reporting.append((zone, temp))
    return reporting


def calc_whole_house_spread(
    zones: Sequence[Zone],
    now: datetime | None = None,
    stale_minutes: float = STALE_MINUTES,
) -> HouseSpread | None:
    """Warmest minus coldest zone; None with fewer than two reporting zones."""
    reporting = _zone_temps(zones, now, stale_minutes)
    if len(reporting) < 2:
        return None

    coldest, cold_temp = min(reporting, key=lambda zt: zt[1])
    warmest, warm_temp = max(reporting, key=lambda zt: zt[1])

    return HouseSpread(
        spread_f=round(warm_temp - cold_temp, 1),
        coldest=coldest.name,
        warmest=warmest.name,
        coldest_zone_id=coldest.zone_id,
        warmest_zone_id=warmest.zone_id,
    )


def calc_uniformity_score(
    zones: Sequence[Zone],
    tolerance_f: float = 2.0,
    now: datetime | None = None,
    stale_minutes: float = STALE_MINUTES,
) -> float | None:
    """Comfort uniformity in [0, 1]: 1 - σ/tolerance, clamped.

    1.0 means every reporting zone sits at the same temperature; 0.0 means the
    standard deviation is at or beyond the tolerance. This is a relative
    comfort metric, not a physical quantity.
    """
    reporting = _zone_temps(zones, now, stale_minutes)
    if len(reporting) < 2:
        return None

    temps = np.array([t for _, t in reporting], dtype=np.float64)
    std_dev = 0.0 if np.ptp(temps) == 0 else float(np.std(temps))
    if tolerance_f <= 0:
        return 1.0 if std_dev == 0 else 0.0

    score = float(np.clip(1.0 - std_dev / tolerance_f, 0.0, 1.0))
    return round(score, 2)
