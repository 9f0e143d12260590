import pytest

from shadowing.geometry import Point, Segment, intersect, midpoint, segments_cross


def test_crossing_segments():
    p = intersect(Segment(Point(0, 0), Point(10, 0)), Segment(Point(5, -5), Point(5, 5)))
    assert p == Point(5.0, 0.0)


def test_intersection_is_symmetric():
    a = Segment(Point(0, 0), Point(7, 3))
    b = Segment(Point(1, 4), Point(6, -2))
    p_ab = intersect(a, b)
    p_ba = intersect(b, a)
    assert p_ab is not None and p_ba is not None
    assert p_ab.x == pytest.approx(p_ba.x)
    assert p_ab.y == pytest.approx(p_ba.y)


def test_shared_endpoint_is_reported():
    a = Segment(Point(0, 0), Point(1, 0))
    b = Segment(Point(1, 0), Point(1, 1))
    assert intersect(a, b) == Point(1.0, 0.0)
    assert intersect(b, a) == Point(1.0, 0.0)


def test_parallel_and_collinear_have_no_intersection():
    assert intersect(Segment(Point(0, 0), Point(10, 0)), Segment(Point(0, 1), Point(10, 1))) is None
    # Overlapping collinear segments are not resolved.
    assert intersect(Segment(Point(0, 0), Point(10, 0)), Segment(Point(5, 0), Point(15, 0))) is None


def test_crossing_outside_segment_extent():
    # Lines cross at (5, 0) but the second segment stops at y=-1.
    assert intersect(Segment(Point(0, 0), Point(10, 0)), Segment(Point(5, -5), Point(5, -1))) is None
    assert not segments_cross(Segment(Point(0, 0), Point(4, 0)), Segment(Point(5, -5), Point(5, 5)))


def test_crossing_at_origin_is_a_real_point():
    p = intersect(Segment(Point(-1, 0), Point(1, 0)), Segment(Point(0, -1), Point(0, 1)))
    assert p == Point(0.0, 0.0)


def test_midpoint_and_distance():
    a, b = Point(0, 0), Point(6, 8)
    assert midpoint(a, b) == Point(3.0, 4.0)
    assert a.distance_to(b) == 10.0
