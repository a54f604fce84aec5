"""Simulation module - synthetic sensor and weather data."""

from simulation.generator import POLL_INTERVAL, generate_readings, generate_weather

__all__ = [
    "POLL_INTERVAL",
    "generate_readings",
    "generate_weather",
]
