"""Rate-of-change estimation on irregularly sampled temperature series.

The slope is an ordinary least-squares fit of temperature against elapsed
hours, so uneven poll spacing is handled without resampling:

    slope = (n·Σxy − Σx·Σy) / (n·Σx² − (Σx)²)

The window is anchored on the series' own last timestamp rather than the wall
clock, which keeps results reproducible when replaying stored data.
"""

from collections.abc import Sequence
from datetime import timedelta

import numpy as np

from analysis.thermal.types import RateOfChange, TimedTemperature, TrendDirection

STABLE_RATE_PER_HOUR: float = 0.3

# Below this the regression denominator is treated as zero.
_DEGENERATE_DENOMINATOR: float = 1e-10


def calc_rate_of_change(
    series: Sequence[TimedTemperature],
    window_minutes: float = 30.0,
    stable_threshold: float = STABLE_RATE_PER_HOUR,
) -> RateOfChange | None:
    """Estimate the temperature trend over the tail of a series.

    Args:
        series: Time-ordered points with ``timestamp`` and ``temp_f``
        window_minutes: Look-back from the last point in the series
        stable_threshold: |slope| below this (°F/hr) is reported as stable

    Returns:
        RateOfChange, or None if fewer than two points fall in the window or
        the timestamps are too close together to fit a slope
    """
    if len(series) < 2:
        return None

    cutoff = series[-1].timestamp - timedelta(minutes=window_minutes)
    window = [p for p in series if p.timestamp >= cutoff]
    if len(window) < 2:
        return None

    t0 = window[0].timestamp
    x = np.array([(p.timestamp - t0).total_seconds() / 3600.0 for p in window], dtype=np.float64)
    y = np.array([p.temp_f for p in window], dtype=np.float64)
    n = len(window)

    sum_x = float(np.sum(x))
    sum_y = float(np.sum(y))
    denom = n * float(np.sum(x * x)) - sum_x * sum_x
    if abs(denom) < _DEGENERATE_DENOMINATOR:
        return None

    slope = (n * float(np.sum(x * y)) - sum_x * sum_y) / denom

    # Fitted line passes through (mean x, mean y)
    y_hat = sum_y / n + slope * (x - sum_x / n)
    ss_res = float(np.sum((y - y_hat) ** 2))
    # A flat window has no variance to explain
    ss_tot = 0.0 if np.ptp(y) == 0 else float(np.sum((y - sum_y / n) ** 2))
    r2 = 1.0 - ss_res / ss_tot if ss_tot > 0 else 0.0

    if abs(slope) < stable_threshold:
        direction = TrendDirection.STABLE
    elif slope > 0:
        direction = TrendDirection.RISING
    else:
        direction = TrendDirection.FALLING

    return RateOfChange(
        rate_per_hour=round(slope, 2),
        r2=round(r2, 2),
        direction=direction,
    )
