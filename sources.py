"""Geometry data sources (building outlines).

A source answers two questions, always in its own coordinate frame:
- which buildings have a bounding-box corner inside a circle, and
- what the ordered from/to corners of a building's walls are.

The simulation-frame offset is applied by the consumers (`BuildingCache`,
`OcclusionEngine`), never by the source. `InMemoryGeometrySource` is the
reference implementation; `database.SqlGeometrySource` reads the same data
from a relational store.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple


@dataclass(frozen=True)
class BuildingRecord:
    id: int
    min_x: float
    min_y: float
    max_x: float
    max_y: float


@dataclass(frozen=True)
class CornerRow:
    sequence_number: int
    corner_id: int
    x: float
    y: float


class GeometrySource(Protocol):
    def buildings_in_circle(self, center_x: float, center_y: float, radius: float) -> List[BuildingRecord]:
        ...

    def from_corners(self, building_id: int) -> List[CornerRow]:
        ...

    def to_corners(self, building_id: int) -> List[CornerRow]:
        ...


def box_corner_in_circle(rec: BuildingRecord, center_x: float, center_y: float, radius: float) -> bool:
    """True when any corner of the bounding box lies inside or on the circle."""
    sqr_radius = radius * radius
    for bx in (rec.min_x, rec.max_x):
        for by in (rec.min_y, rec.max_y):
            if sqr_radius >= (bx - center_x) ** 2 + (by - center_y) ** 2:
                return True
    return False


class InMemoryGeometrySource:
    """Dictionary-backed source.

    Buildings are stored as a record plus two corner-row lists, mirroring the
    relational layout so malformed data (unequal from/to lists, empty walls)
    can be represented and rejected downstream.
    """

    def __init__(self) -> None:
        self._records: Dict[int, BuildingRecord] = {}
        self._from: Dict[int, List[CornerRow]] = {}
        self._to: Dict[int, List[CornerRow]] = {}
        self._next_corner_id = 1

    def __len__(self) -> int:
        return len(self._records)

    def add_record(
        self,
        record: BuildingRecord,
        from_rows: Iterable[CornerRow] = (),
        to_rows: Iterable[CornerRow] = (),
    ) -> None:
        self._records[record.id] = record
        self._from[record.id] = sorted(from_rows, key=lambda r: r.sequence_number)
        self._to[record.id] = sorted(to_rows, key=lambda r: r.sequence_number)

    def add_building(self, building_id: int, outline: Sequence[Tuple[float, float]]) -> BuildingRecord:
        """Add a closed ring of corners; wall i runs from corner i to corner i+1.

        The bounding box is derived from the outline. A repeated first vertex
        at the end is dropped. Corner ids are allocated per source so that two
        buildings never share an id.
        """
        pts = [(float(x), float(y)) for x, y in outline]
        if len(pts) > 1 and pts[-1] == pts[0]:
            pts.pop()
        ids = list(range(self._next_corner_id, self._next_corner_id + len(pts)))
        self._next_corner_id += len(pts)
        from_rows = []
        to_rows = []
        for seq, (cid, (x, y)) in enumerate(zip(ids, pts)):
            nxt = (seq + 1) % len(pts)
            from_rows.append(CornerRow(seq, cid, x, y))
            to_rows.append(CornerRow(seq, ids[nxt], pts[nxt][0], pts[nxt][1]))
        if pts:
            xs = [p[0] for p in pts]
            ys = [p[1] for p in pts]
            record = BuildingRecord(building_id, min(xs), min(ys), max(xs), max(ys))
        else:
            record = BuildingRecord(building_id, 0.0, 0.0, 0.0, 0.0)
        self.add_record(record, from_rows, to_rows)
        return record

    def buildings_in_circle(self, center_x: float, center_y: float, radius: float) -> List[BuildingRecord]:
        return [r for r in self._records.values() if box_corner_in_circle(r, center_x, center_y, radius)]

    def from_corners(self, building_id: int) -> List[CornerRow]:
        return list(self._from.get(building_id, []))

    def to_corners(self, building_id: int) -> List[CornerRow]:
        return list(self._to.get(building_id, []))

    def add_walls(
        self,
        building_id: int,
        walls: Sequence[Tuple[Tuple[float, float], Tuple[float, float]]],
        box: Optional[Tuple[float, float, float, float]] = None,
    ) -> BuildingRecord:
        """Add a building from explicit (start, end) wall pairs.

        Walls keep the given order. Endpoints at the same position share one
        corner id. ``box`` is (min_x, min_y, max_x, max_y); without it the box
        is derived from the wall endpoints.
        """
        corner_ids: Dict[Tuple[float, float], int] = {}
        from_rows = []
        to_rows = []
        for seq, (start, end) in enumerate(walls):
            rows = []
            for x, y in (start, end):
                key = (float(x), float(y))
                if key not in corner_ids:
                    corner_ids[key] = self._next_corner_id
                    self._next_corner_id += 1
                rows.append(CornerRow(seq, corner_ids[key], key[0], key[1]))
            from_rows.append(rows[0])
            to_rows.append(rows[1])
        if box is not None:
            record = BuildingRecord(building_id, *(float(v) for v in box))
        elif corner_ids:
            xs = [p[0] for p in corner_ids]
            ys = [p[1] for p in corner_ids]
            record = BuildingRecord(building_id, min(xs), min(ys), max(xs), max(ys))
        else:
            record = BuildingRecord(building_id, 0.0, 0.0, 0.0, 0.0)
        self.add_record(record, from_rows, to_rows)
        return record
