"""Loaders for building outlines and link lists.

Building files are JSON, either a list of buildings or ``{"buildings": [...]}``.
Each building needs an id and an outline (closed ring, last corner connects
back to the first):

    {"id": 7, "outline": [[0, 0], [10, 0], [10, 5], [0, 5]]}

Instead of an outline a building may list explicit walls, optionally with
its bounding box, or give only a box (a rectangular building):

    {"id": 8, "walls": [[[0, 0], [10, 0]], [[10, 0], [10, 5]]], "box": [0, 0, 10, 5]}
    {"id": 9, "box": [20, 0, 30, 8]}

``corners``/``polygon`` are accepted as aliases for ``outline`` and
``building_id`` for ``id``. Lines starting with ``//`` are ignored so that
annotated example files load unchanged.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from .geometry import Point
from .scenario import Link
from .sources import InMemoryGeometrySource


def _read_json(path: str | Path) -> Any:
    text = Path(path).read_text(encoding="utf-8", errors="ignore")
    lines = [line for line in text.splitlines() if not line.strip().startswith("//")]
    return json.loads("\n".join(lines))


def normalize_building_record(rec: Dict[str, Any]) -> Dict[str, Any]:
    """Map field aliases onto ``id`` and ``outline``."""
    out = dict(rec)
    if "building_id" in out and "id" not in out:
        out["id"] = out.pop("building_id")
    for alias in ("corners", "polygon"):
        if alias in out and "outline" not in out:
            out["outline"] = out.pop(alias)
    out.setdefault("outline", [])
    return out


def buildings_from_data(data: Any) -> InMemoryGeometrySource:
    if isinstance(data, dict):
        data = data.get("buildings", [])
    source = InMemoryGeometrySource()
    for raw in data:
        rec = normalize_building_record(raw)
        bid = int(rec["id"])
        box = rec.get("box")
        if rec.get("walls"):
            walls = [((float(a[0]), float(a[1])), (float(b[0]), float(b[1]))) for a, b in rec["walls"]]
            source.add_walls(bid, walls, box=tuple(box) if box else None)
        elif not rec["outline"] and box:
            min_x, min_y, max_x, max_y = (float(v) for v in box)
            source.add_building(bid, [(min_x, min_y), (max_x, min_y), (max_x, max_y), (min_x, max_y)])
        else:
            source.add_building(bid, [(float(x), float(y)) for x, y in rec["outline"]])
    return source


def load_buildings_json(path: str | Path) -> InMemoryGeometrySource:
    return buildings_from_data(_read_json(path))


def links_from_data(data: Any) -> List[Link]:
    if isinstance(data, dict):
        data = data.get("links", [])
    links = []
    for raw in data:
        sx, sy = raw["sender"]
        rx, ry = raw["receiver"]
        links.append(Link(
            sender=Point(float(sx), float(sy)),
            receiver=Point(float(rx), float(ry)),
            frequency_hz=float(raw.get("frequency_hz", Link.frequency_hz)),
            p_send_mw=float(raw.get("p_send_mw", Link.p_send_mw)),
        ))
    return links


def load_links_json(path: str | Path) -> List[Link]:
    return links_from_data(_read_json(path))
