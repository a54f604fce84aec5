"""Zone adjacency: per-zone declarations canonicalised into undirected edges."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from core.zone import Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneEdge:
    """An undirected adjacency between two zones.

    ``zone_a`` is the zone whose declaration was seen first.
    """

    zone_a: Zone
    zone_b: Zone

    @property
    def key(self) -> tuple[str, str]:
        return pair_key(self.zone_a.zone_id, self.zone_b.zone_id)


def pair_key(zone_id_a: str, zone_id_b: str) -> tuple[str, str]:
    """Order-independent key for an unordered zone pair."""
    return (min(zone_id_a, zone_id_b), max(zone_id_a, zone_id_b))


def build_zone_edges(zones: Sequence[Zone], strict: bool = False) -> list[ZoneEdge]:
    """Collapse declared adjacency into one edge per unordered pair.

    Declarations pointing at unknown zones, or at the declaring zone itself,
    are skipped. A pair declared from one side only is kept (symmetrised) and
    logged, or rejected when ``strict`` is set.

    Raises:
        ValueError: In strict mode, if any adjacency is declared one-sidedly.
    """
    by_id = {z.zone_id: z for z in zones}
    declared: set[tuple[str, str]] = set()
    edges: dict[tuple[str, str], ZoneEdge] = {}

    for zone in zones:
        for adj_id in zone.adjacent_zone_ids:
            if adj_id == zone.zone_id:
                logger.warning("Zone %s declares itself adjacent; ignoring", zone.zone_id)
                continue
            neighbour = by_id.get(adj_id)
            if neighbour is None:
                logger.warning("Zone %s declares unknown adjacent zone %s; skipping", zone.zone_id, adj_id)
                continue

            declared.add((zone.zone_id, adj_id))
            key = pair_key(zone.zone_id, adj_id)
            if key not in edges:
                edges[key] = ZoneEdge(zone_a=zone, zone_b=neighbour)

    one_sided = sorted((a, b) for a, b in declared if (b, a) not in declared)
    if one_sided:
        listing = ", ".join(f"{a} -> {b}" for a, b in one_sided)
        if strict:
            raise ValueError(f"Asymmetric zone adjacency: {listing}")
        logger.warning("Asymmetric zone adjacency, treating as undirected: %s", listing)

    return list(edges.values())


def adjacency_map(edges: Sequence[ZoneEdge]) -> dict[str, list[str]]:
    """Symmetric neighbour lists for every zone touched by an edge."""
    neighbours: dict[str, list[str]] = {}
    for edge in edges:
        a, b = edge.zone_a.zone_id, edge.zone_b.zone_id
        neighbours.setdefault(a, []).append(b)
        neighbours.setdefault(b, []).append(a)
    return neighbours
