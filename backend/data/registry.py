"""Household zone graph - the single place sensors and rooms are declared.

To add a sensor, create it in ``build_zone_graph`` and attach it to its zone.
Adjacency must be declared from both sides.
"""

from core.sensors import Sensor
from core.zone import Zone

POLL_INTERVAL_MINUTES: float = 5.0
DEFAULT_HISTORY_HOURS: float = 24.0

# Envelope resistance estimates (°F·hr/BTU); higher is better insulated.
THERMAL_RESISTANCES: dict[str, float] = {
    "nursery": 0.8,  # exterior wall, suspect damper
    "elijah": 0.9,
    "master": 1.0,
    "downstairs": 1.1,  # ground floor, more mass
}


def build_zone_graph() -> list[Zone]:
    """Create the household's zones with their sensors attached."""
    nursery = Zone(
        zone_id="nursery",
        name="Nursery",
        hvac_zone="boys_rooms",
        adjacent_zone_ids=["elijah", "master"],
        layout={"floor": 2, "x": 10, "y": 10, "w": 180, "h": 130},
    )
    nursery.add_sensor(Sensor("nursery_bed", label="Nursery (Bed Level)"))

    elijah = Zone(
        zone_id="elijah",
        name="Elijah's Room",
        hvac_zone="boys_rooms",
        adjacent_zone_ids=["nursery", "master"],
        layout={"floor": 2, "x": 200, "y": 10, "w": 180, "h": 130},
    )
    elijah.add_sensor(Sensor("elijah_mid", label="Elijah's Room (Mid)"))

    master = Zone(
        zone_id="master",
        name="Master Bedroom",
        hvac_zone="master",
        adjacent_zone_ids=["nursery", "elijah"],
        layout={"floor": 2, "x": 10, "y": 150, "w": 180, "h": 130},
    )
    master.add_sensor(Sensor("master_bassinet", label="Master (Bassinet)"))

    # Connected to the bedrooms only through the stairwell
    downstairs = Zone(
        zone_id="downstairs",
        name="Downstairs",
        hvac_zone="downstairs",
        layout={"floor": 1, "x": 200, "y": 150, "w": 180, "h": 130},
    )
    downstairs.add_sensor(Sensor("downstairs_thermo", label="Downstairs (Thermostat)"))

    return [nursery, elijah, master, downstairs]


def sensor_ids(zones: list[Zone]) -> list[str]:
    return [s.sensor_id for zone in zones for s in zone.sensors]
