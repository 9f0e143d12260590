"""Building geometry and the append-only building cache.

A building is its axis-aligned bounding box plus the ordered ring of walls
fetched from a geometry source. The cache is populated on first reference
and never invalidated: the scenario geometry is assumed static for the
whole run, so a later load of the same id returns the first cached entry.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .geometry import Point, Segment
from .sources import BuildingRecord, GeometrySource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Offset:
    """Translation from the geometry source's frame to the simulation frame."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Corner:
    id: int
    x: float
    y: float

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class Wall:
    from_corner: Corner
    to_corner: Corner

    @property
    def segment(self) -> Segment:
        return Segment(self.from_corner.point, self.to_corner.point)

    def touches(self, corner: Corner) -> bool:
        return corner.id in (self.from_corner.id, self.to_corner.id)


@dataclass(frozen=True)
class Building:
    id: int
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    walls: Tuple[Wall, ...]

    def bounding_edges(self) -> List[Segment]:
        """Box edges in the order right, top, left, bottom."""
        return [
            Segment(Point(self.max_x, self.max_y), Point(self.max_x, self.min_y)),
            Segment(Point(self.max_x, self.max_y), Point(self.min_x, self.max_y)),
            Segment(Point(self.min_x, self.min_y), Point(self.min_x, self.max_y)),
            Segment(Point(self.min_x, self.min_y), Point(self.max_x, self.min_y)),
        ]

    def corners(self) -> List[Corner]:
        return [w.from_corner for w in self.walls]


def build_from_source(record: BuildingRecord, source: GeometrySource, offset: Offset = Offset()) -> Optional[Building]:
    """Fetch and validate the walls of one building.

    Returns None when the from/to corner counts differ or the building has no
    walls. A pair whose sequence numbers disagree drops that wall only.
    """
    from_rows = source.from_corners(record.id)
    to_rows = source.to_corners(record.id)
    if len(from_rows) != len(to_rows):
        logger.error(
            "building %s: unequal number of from and to corners (%d != %d)",
            record.id, len(from_rows), len(to_rows),
        )
        return None
    if not from_rows:
        logger.warning("building %s has no walls", record.id)
        return None

    walls: List[Wall] = []
    for fc, tc in zip(from_rows, to_rows):
        if fc.sequence_number != tc.sequence_number:
            logger.error(
                "building %s: unequal sequence numbers %d/%d",
                record.id, fc.sequence_number, tc.sequence_number,
            )
            continue
        walls.append(Wall(
            Corner(fc.corner_id, fc.x + offset.x, fc.y + offset.y),
            Corner(tc.corner_id, tc.x + offset.x, tc.y + offset.y),
        ))
    return Building(
        id=record.id,
        min_x=record.min_x + offset.x,
        min_y=record.min_y + offset.y,
        max_x=record.max_x + offset.x,
        max_y=record.max_y + offset.y,
        walls=tuple(walls),
    )


class BuildingCache:
    """Id -> Building, populated lazily and never evicted.

    Population (check, fetch, insert) is serialised with a lock so that
    several threads sharing one cache never load a building twice or see a
    half-built entry. Lookups of cached buildings are lock-free.
    """

    def __init__(self, offset: Offset = Offset()) -> None:
        self.offset = offset
        self._buildings: Dict[int, Building] = {}
        self._lock = threading.Lock()

    def __contains__(self, building_id: int) -> bool:
        return building_id in self._buildings

    def __len__(self) -> int:
        return len(self._buildings)

    def ids(self) -> List[int]:
        return list(self._buildings)

    def get(self, building_id: int) -> Optional[Building]:
        return self._buildings.get(building_id)

    def ensure_loaded(self, record: BuildingRecord, source: GeometrySource) -> Optional[Building]:
        cached = self._buildings.get(record.id)
        if cached is not None:
            return cached
        with self._lock:
            cached = self._buildings.get(record.id)
            if cached is not None:
                return cached
            building = build_from_source(record, source, self.offset)
            if building is not None:
                self._buildings[record.id] = building
                logger.debug("cached building %s with %d walls", record.id, len(building.walls))
            return building
