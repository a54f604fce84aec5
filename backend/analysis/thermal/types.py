"""Result types for the thermal analysis functions.

All values are rounded once, at the boundary of the function producing them:
rates and fit quality to hundredths, temperatures and deltas to tenths.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Protocol


class TimedTemperature(Protocol):
    """Anything with a timestamp and a °F temperature (e.g. a SeriesPoint)."""

    @property
    def timestamp(self) -> datetime: ...

    @property
    def temp_f(self) -> float: ...


class TrendDirection(StrEnum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


# -----------------------------------------------------------------------------
# Trend
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class RateOfChange:
    """Least-squares temperature trend over a recent window.

    Attributes:
        rate_per_hour: Regression slope in °F/hr
        r2: Coefficient of determination (0 when the window has no variance)
        direction: 'stable' below the stability cutoff, else the slope sign
    """

    rate_per_hour: float
    r2: float
    direction: TrendDirection


@dataclass(frozen=True)
class DecayFit:
    """Fitted exponential relaxation toward a driving temperature.

    T(t) = T_source + (T_0 - T_source) * exp(-t/τ)
    """

    time_constant_hours: float  # τ = R*C
    initial_temp_f: float
    r2: float


# -----------------------------------------------------------------------------
# Zone comparisons
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ZoneDelta:
    """Temperature difference between two zones (A minus B)."""

    delta_f: float
    abs_delta_f: float
    warmer: str  # zone id, or "equal"


@dataclass(frozen=True)
class HouseSpread:
    """Coldest-to-warmest spread across every zone reporting a temperature."""

    spread_f: float
    coldest: str
    warmest: str
    coldest_zone_id: str
    warmest_zone_id: str
