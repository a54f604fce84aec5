"""Application services."""

from services.dashboard import DashboardService, DashboardSnapshot, LoadStats, load_snapshot

__all__ = ["DashboardService", "DashboardSnapshot", "LoadStats", "load_snapshot"]
