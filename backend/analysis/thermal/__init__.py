"""Thermal analysis functions.

Pure numeric routines over zone state and temperature series: trend
regression, heat loss, RC prediction and zone comparisons. No shared state,
no I/O.

Example usage:

    from analysis.thermal import calc_rate_of_change, estimate_heat_loss

    series = zone.time_series(hours=1, now=now)
    trend = calc_rate_of_change(series, window_minutes=30)
    if trend is not None:
        print(f"{trend.rate_per_hour:+.2f} °F/hr ({trend.direction})")

    heat_loss = estimate_heat_loss(indoor_temp_f=70.0, outdoor_temp_f=30.0, thermal_resistance=0.8)
"""

from analysis.thermal.comparison import (
    EQUAL,
    calc_uniformity_score,
    calc_whole_house_spread,
    calc_zone_delta,
)
from analysis.thermal.rc_model import (
    compute_time_constant,
    estimate_heat_loss,
    fit_time_constant,
    rc_predict,
)
from analysis.thermal.trend import STABLE_RATE_PER_HOUR, calc_rate_of_change
from analysis.thermal.types import (
    DecayFit,
    HouseSpread,
    RateOfChange,
    TimedTemperature,
    TrendDirection,
    ZoneDelta,
)

__all__ = [
    "EQUAL",
    "STABLE_RATE_PER_HOUR",
    "DecayFit",
    "HouseSpread",
    "RateOfChange",
    "TimedTemperature",
    "TrendDirection",
    "ZoneDelta",
    "calc_rate_of_change",
    "calc_uniformity_score",
    "calc_whole_house_spread",
    "calc_zone_delta",
    "compute_time_constant",
    "estimate_heat_loss",
    "fit_time_constant",
    "rc_predict",
]
