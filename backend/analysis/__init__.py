"""Analysis utilities - thermal analysis, anomaly detection and the per-cycle pipeline."""

from analysis.adjacency import ZoneEdge, build_zone_edges, pair_key
from analysis.anomaly import (
    HOUSE_ZONE_ID,
    Anomaly,
    AnomalyCode,
    AnomalyLevel,
    OverallStatus,
    detect_anomalies,
    filter_by_level,
    worst_level,
)
from analysis.config import DEFAULT, DEFAULT_THRESHOLDS, AnalysisConfig, AnomalyThresholds
from analysis.pipeline import AnalysisResult, ZoneAnalysis, ZonePairDelta, analyze_zones

__all__ = [
    "DEFAULT",
    "DEFAULT_THRESHOLDS",
    "HOUSE_ZONE_ID",
    "AnalysisConfig",
    "AnalysisResult",
    "Anomaly",
    "AnomalyCode",
    "AnomalyLevel",
    "AnomalyThresholds",
    "OverallStatus",
    "ZoneAnalysis",
    "ZoneEdge",
    "ZonePairDelta",
    "analyze_zones",
    "build_zone_edges",
    "detect_anomalies",
    "filter_by_level",
    "pair_key",
    "worst_level",
]
