"""Planar geometry primitives for the occlusion engine.

All coordinates are meters in the simulation frame. The only non-trivial
operation is `intersect`, which solves

    P1 + a (P2 - P1) = P3 + b (P4 - P3)

with Cramer's rule and accepts the solution only when both a and b lie in
[0, 1], i.e. the crossing lies on both segments rather than on their
extensions.
"""

import math
import sys
from dataclasses import dataclass
from typing import Optional

_EPS = sys.float_info.epsilon


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def distance_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class Segment:
    start: Point
    end: Point

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


def distance(a: Point, b: Point) -> float:
    return a.distance_to(b)


def midpoint(a: Point, b: Point) -> Point:
    return Point(a.x + (b.x - a.x) / 2.0, a.y + (b.y - a.y) / 2.0)


def intersect(seg_a: Segment, seg_b: Segment) -> Optional[Point]:
    """Return the crossing point of two segments, or None.

    A near-zero determinant (parallel or collinear segments) reports no
    intersection; collinear overlaps are not resolved.
    """
    p1, p2 = seg_a.start, seg_a.end
    p3, p4 = seg_b.start, seg_b.end

    det = (p2.x - p1.x) * (p3.y - p4.y) - (p2.y - p1.y) * (p3.x - p4.x)
    if abs(det) < _EPS:
        return None

    det_a = (p3.x - p1.x) * (p3.y - p4.y) - (p3.y - p1.y) * (p3.x - p4.x)
    det_b = (p2.x - p1.x) * (p3.y - p1.y) - (p2.y - p1.y) * (p3.x - p1.x)
    a = det_a / det
    b = det_b / det
    if not (0.0 <= a <= 1.0 and 0.0 <= b <= 1.0):
        return None
    return Point(p1.x + a * (p2.x - p1.x), p1.y + a * (p2.y - p1.y))


def segments_cross(seg_a: Segment, seg_b: Segment) -> bool:
    return intersect(seg_a, seg_b) is not None
