"""First-order RC thermal model for a single zone.

A zone is treated as one thermal mass C coupled through a resistance R to a
driving temperature (outdoors, or supply air):

    C * dT/dt = (T_source - T) / R

Solution for a constant driving temperature:

    T(t) = T_source + (T_0 - T_source) * exp(-t/τ),    τ = R*C

Units follow the imperial convention used by the dashboard: °F, hours,
R in °F·hr/BTU, C in BTU/°F, heat flow in BTU/hr.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.optimize import curve_fit  # pyright: ignore[reportUnknownVariableType]

from analysis.thermal.types import DecayFit, TimedTemperature

logger = logging.getLogger(__name__)


def estimate_heat_loss(
    indoor_temp_f: float,
    outdoor_temp_f: float,
    thermal_resistance: float = 1.0,
) -> float:
    """Newton's law of cooling: Q = (T_indoor - T_outdoor) / R.

    R is an uncalibrated estimate, so a non-positive value is treated as
    "unknown" and yields no heat flow instead of a sign flip or infinity.

    Args:
        indoor_temp_f: Zone temperature (°F)
        outdoor_temp_f: Outdoor temperature (°F)
        thermal_resistance: Envelope resistance R (°F·hr/BTU)

    Returns:
        Heat loss in BTU/hr (positive = losing heat, negative = gaining)
    """
    if thermal_resistance <= 0:
        return 0.0
    return (indoor_temp_f - outdoor_temp_f) / thermal_resistance


def compute_time_constant(resistance: float, capacitance: float) -> float:
    """Compute the RC time constant τ = R * C (hours)."""
    return resistance * capacitance


def rc_predict(
    current_temp_f: float,
    source_temp_f: float,
    resistance: float,
    capacitance: float,
    dt_hours: float,
) -> float:
    """Predict zone temperature after ``dt_hours`` of relaxing toward a source.

    A non-positive τ means infinitely fast equilibration, so the source
    temperature is returned directly.

    Args:
        current_temp_f: Current zone temperature (°F)
        source_temp_f: Driving temperature, e.g. outdoor or supply air (°F)
        resistance: Thermal resistance R (°F·hr/BTU)
        capacitance: Thermal capacitance C (BTU/°F)
        dt_hours: Prediction horizon (hours)

    Returns:
        Predicted temperature (°F)
    """
    tau = compute_time_constant(resistance, capacitance)
    if tau <= 0:
        return source_temp_f
    return source_temp_f + (current_temp_f - source_temp_f) * math.exp(-dt_hours / tau)


# -----------------------------------------------------------------------------
# Time Constant Fitting
# -----------------------------------------------------------------------------


def _relaxation(
    t: NDArray[np.float64],
    initial_temp: float,
    tau: float,
    source_temp: float,
) -> NDArray[np.float64]:
    return source_temp + (initial_temp - source_temp) * np.exp(-t / tau)


def fit_time_constant(
    series: Sequence[TimedTemperature],
    source_temp_f: float,
    max_tau_hours: float = 1000.0,
) -> DecayFit | None:
    """Fit τ from a free-running stretch of a zone series.

    Useful when HVAC is off (e.g. overnight setback): the zone then relaxes
    toward the outdoor temperature and the curvature of that relaxation pins
    down τ = R*C. The result feeds back into ``rc_predict``.

    Args:
        series: Time-ordered points with ``timestamp`` and ``temp_f``
        source_temp_f: Driving temperature held constant over the stretch (°F)
        max_tau_hours: Upper bound for the fitted time constant

    Returns:
        DecayFit, or None with fewer than three points, no temperature change,
        or if the optimiser fails to converge
    """
    if len(series) < 3:
        return None

    t0 = series[0].timestamp
    t = np.array([(p.timestamp - t0).total_seconds() / 3600.0 for p in series], dtype=np.float64)
    temps = np.array([p.temp_f for p in series], dtype=np.float64)
    if np.ptp(temps) == 0 or t[-1] <= 0:
        return None

    def model(t_hours: NDArray[np.float64], initial_temp: float, tau: float) -> NDArray[np.float64]:
        return _relaxation(t_hours, initial_temp, tau, source_temp_f)

    # Initial guess: half the observed duration
    tau_guess = min(max(float(t[-1]) / 2, 0.1), max_tau_hours)

    try:
        popt, _ = curve_fit(  # pyright: ignore[reportUnknownVariableType]
            model,
            t,
            temps,
            p0=[float(temps[0]), tau_guess],
            bounds=([-np.inf, 1e-3], [np.inf, max_tau_hours]),
            maxfev=5000,
        )
    except RuntimeError:
        logger.debug("Time constant fit did not converge (%d points)", len(series))
        return None

    initial_fit = float(popt[0])  # pyright: ignore[reportUnknownArgumentType]
    tau_fit = float(popt[1])  # pyright: ignore[reportUnknownArgumentType]

    predicted = model(t, initial_fit, tau_fit)
    ss_res = float(np.sum((temps - predicted) ** 2))
    ss_tot = float(np.sum((temps - np.mean(temps)) ** 2))
    r_squared = 1 - ss_res / ss_tot if ss_tot > 0 else 0.0

    return DecayFit(
        time_constant_hours=round(tau_fit, 2),
        initial_temp_f=round(initial_fit, 1),
        r2=round(r_squared, 2),
    )
