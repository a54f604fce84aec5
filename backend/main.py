"""FastAPI entry point - thin read-only layer over the analytics engine."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from analysis import AnalysisResult
from core.sensors import Sensor
from core.zone import Zone
from data import DEFAULT_HISTORY_HOURS, THERMAL_RESISTANCES, build_zone_graph, sensor_ids
from services import DashboardService
from simulation import generate_readings, generate_weather

logging.basicConfig(level=logging.WARNING, format="%(name)s | %(message)s")
logging.getLogger("services.dashboard").setLevel(logging.INFO)
logging.getLogger("analysis.adjacency").setLevel(logging.INFO)

app = FastAPI(title="Home Thermal API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

dashboard = DashboardService(build_zone_graph(), thermal_resistances=THERMAL_RESISTANCES)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SensorStatusResponse(BaseModel):
    sensor_id: str
    label: str
    status: str
    current_temp_f: float | None
    current_humidity: float | None
    current_battery: float | None
    reading_count: int


class ZoneResponse(BaseModel):
    zone_id: str
    name: str
    hvac_zone: str | None
    adjacent_zone_ids: list[str]
    coverage: str
    current_temp_f: float | None
    current_humidity: float | None
    temp_spread_f: float | None
    sensors: list[SensorStatusResponse]


class SeriesPointResponse(BaseModel):
    timestamp: datetime
    temp_f: float
    sensor_count: int


class RateOfChangeResponse(BaseModel):
    rate_per_hour: float
    r2: float
    direction: str


class ZoneAnalysisResponse(BaseModel):
    zone_id: str
    current_temp_f: float | None
    coverage: str
    rate_of_change: RateOfChangeResponse | None
    indoor_outdoor_delta_f: float | None
    heat_loss_btu_hr: float | None


class ZoneDeltaResponse(BaseModel):
    zone_a_id: str
    zone_b_id: str
    zone_a_name: str
    zone_b_name: str
    delta_f: float | None
    abs_delta_f: float | None
    warmer: str | None


class HouseSpreadResponse(BaseModel):
    spread_f: float
    coldest: str
    warmest: str


class AnomalyResponse(BaseModel):
    level: str
    zone_id: str
    code: str
    message: str
    value: float | None


class AnalysisResponse(BaseModel):
    generated_at: datetime
    overall_status: str
    zones: dict[str, ZoneAnalysisResponse]
    deltas: list[ZoneDeltaResponse]
    house_spread: HouseSpreadResponse | None
    uniformity_score: float | None
    anomalies: list[AnomalyResponse]


class HealthResponse(BaseModel):
    status: str
    zones: int
    last_analysis: datetime | None


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def _sensor_response(sensor: Sensor, now: datetime) -> SensorStatusResponse:
    return SensorStatusResponse(
        sensor_id=sensor.sensor_id,
        label=sensor.label,
        status=sensor.status(now),
        current_temp_f=sensor.current_temp_f(now),
        current_humidity=sensor.current_humidity(now),
        current_battery=sensor.current_battery(now),
        reading_count=sensor.reading_count,
    )


def _zone_response(zone: Zone, now: datetime) -> ZoneResponse:
    temp = zone.current_temp_f(now)
    spread = zone.temp_spread_f(now)
    return ZoneResponse(
        zone_id=zone.zone_id,
        name=zone.name,
        hvac_zone=zone.hvac_zone,
        adjacent_zone_ids=list(zone.adjacent_zone_ids),
        coverage=zone.coverage_status(now),
        current_temp_f=round(temp, 1) if temp is not None else None,
        current_humidity=zone.current_humidity(now),
        temp_spread_f=round(spread, 1) if spread is not None else None,
        sensors=[_sensor_response(s, now) for s in zone.sensors],
    )


def _analysis_response(result: AnalysisResult) -> AnalysisResponse:
    zones: dict[str, ZoneAnalysisResponse] = {}
    for zone_id, za in result.zone_analyses.items():
        rate = za.rate_of_change
        zones[zone_id] = ZoneAnalysisResponse(
            zone_id=za.zone_id,
            current_temp_f=za.current_temp_f,
            coverage=za.coverage,
            rate_of_change=(
                RateOfChangeResponse(rate_per_hour=rate.rate_per_hour, r2=rate.r2, direction=rate.direction)
                if rate
                else None
            ),
            indoor_outdoor_delta_f=za.indoor_outdoor_delta_f,
            heat_loss_btu_hr=za.heat_loss_btu_hr,
        )

    spread = result.house_spread
    return AnalysisResponse(
        generated_at=result.generated_at,
        overall_status=result.overall_status,
        zones=zones,
        deltas=[
            ZoneDeltaResponse(
                zone_a_id=d.zone_a_id,
                zone_b_id=d.zone_b_id,
                zone_a_name=d.zone_a_name,
                zone_b_name=d.zone_b_name,
                delta_f=d.delta.delta_f if d.delta else None,
                abs_delta_f=d.delta.abs_delta_f if d.delta else None,
                warmer=d.delta.warmer if d.delta else None,
            )
            for d in result.deltas
        ],
        house_spread=(
            HouseSpreadResponse(spread_f=spread.spread_f, coldest=spread.coldest, warmest=spread.warmest)
            if spread
            else None
        ),
        uniformity_score=result.uniformity_score,
        anomalies=[
            AnomalyResponse(level=a.level, zone_id=a.zone_id, code=a.code, message=a.message, value=a.value)
            for a in result.anomalies
        ],
    )


def _refresh(now: datetime) -> AnalysisResult:
    """Re-analyse from the synthetic data source."""
    ids = sensor_ids(dashboard.zones)
    return dashboard.refresh(
        generate_readings(ids, DEFAULT_HISTORY_HOURS, now=now),
        generate_weather(now=now),
        now=now,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
def get_health() -> HealthResponse:
    latest = dashboard.latest
    return HealthResponse(
        status="ok",
        zones=len(dashboard.zones),
        last_analysis=latest.generated_at if latest else None,
    )


@app.get("/analysis")
def get_analysis() -> AnalysisResponse:
    """Refresh the snapshot and return the full analysis."""
    return _analysis_response(_refresh(datetime.now(UTC)))


@app.get("/zones")
def get_zones() -> list[ZoneResponse]:
    now = datetime.now(UTC)
    return [_zone_response(zone, now) for zone in dashboard.zones]


@app.get("/zones/{zone_id}/series")
def get_zone_series(
    zone_id: str,
    hours: float = Query(24.0, gt=0),
    bucket_minutes: float = Query(5.0, gt=0),
) -> list[SeriesPointResponse]:
    zone = dashboard.get_zone(zone_id)
    if zone is None:
        raise HTTPException(status_code=404, detail=f"Unknown zone: {zone_id}")
    now = datetime.now(UTC)
    return [
        SeriesPointResponse(timestamp=p.timestamp, temp_f=round(p.temp_f, 1), sensor_count=p.sensor_count)
        for p in zone.time_series(hours, bucket_minutes, now)
    ]
