from shadowing.geometry import Point
from shadowing.occlusion import OcclusionEngine
from shadowing.sources import InMemoryGeometrySource


SENDER = Point(0, 0)
RECEIVER = Point(100, 0)


def _engine(*outlines):
    src = InMemoryGeometrySource()
    for i, outline in enumerate(outlines, start=1):
        src.add_building(i, outline)
    return OcclusionEngine(src)


def test_square_on_the_path_is_between():
    engine = _engine([(40, -10), (60, -10), (60, 10), (40, 10)])
    assert engine.buildings_near(SENDER, RECEIVER) == [1]
    assert engine.is_area_between(SENDER, RECEIVER, 1)
    assert engine.is_building_between(SENDER, RECEIVER, 1)


def test_intersections_come_in_wall_order():
    engine = _engine([(40, -10), (60, -10), (60, 10), (40, 10)])
    assert engine.buildings_near(SENDER, RECEIVER) == [1]
    # Right wall is listed before the left wall, so the far crossing comes first.
    assert engine.intersections_with_building(SENDER, RECEIVER, 1) == [Point(60.0, 0.0), Point(40.0, 0.0)]


def test_box_test_is_a_superset_of_wall_test():
    # Triangle whose box reaches the short link while its walls do not.
    engine = _engine([(40, -10), (60, -10), (60, 10)])
    receiver = Point(45, 0)
    assert engine.buildings_near(SENDER, receiver) == [1]
    assert engine.is_area_between(SENDER, receiver, 1)
    assert not engine.is_building_between(SENDER, receiver, 1)
    assert engine.intersections_with_building(SENDER, receiver, 1) == []


def test_nearby_building_off_the_path():
    engine = _engine([(40, 20), (60, 20), (60, 30), (40, 30)])
    assert engine.buildings_near(SENDER, RECEIVER) == [1]
    assert not engine.is_area_between(SENDER, RECEIVER, 1)
    assert not engine.is_building_between(SENDER, RECEIVER, 1)


def test_far_building_is_not_near():
    engine = _engine([(400, 400), (410, 400), (410, 410)])
    assert engine.buildings_near(SENDER, RECEIVER) == []


def test_unknown_building_is_transparent():
    engine = _engine()
    assert engine.building(42) is None
    assert not engine.is_area_between(SENDER, RECEIVER, 42)
    assert not engine.is_building_between(SENDER, RECEIVER, 42)
    assert engine.intersections_with_building(SENDER, RECEIVER, 42) == []
    assert engine.diffraction_corners(SENDER, RECEIVER, 42) == []


def test_rectangle_straddling_the_path_has_no_diffraction_corner():
    engine = _engine([(40, -10), (60, -10), (60, 10), (40, 10)])
    engine.buildings_near(SENDER, RECEIVER)
    assert engine.diffraction_corners(SENDER, RECEIVER, 1) == []


def test_downward_triangle_exposes_its_tip():
    engine = _engine([(40, 10), (60, 10), (50, -5)])
    engine.buildings_near(SENDER, RECEIVER)
    assert engine.diffraction_corners(SENDER, RECEIVER, 1) == [Point(50.0, -5.0)]


def test_every_corner_qualifies_when_no_other_wall_exists():
    # Two-corner ring: both walls end in both corners.
    engine = _engine([(50, -10), (50, 30)])
    engine.buildings_near(SENDER, RECEIVER)
    assert engine.diffraction_corners(SENDER, RECEIVER, 1) == [Point(50.0, -10.0), Point(50.0, 30.0)]
