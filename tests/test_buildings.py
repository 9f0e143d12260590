from concurrent.futures import ThreadPoolExecutor

from shadowing.buildings import BuildingCache, Offset, build_from_source
from shadowing.sources import BuildingRecord, CornerRow, InMemoryGeometrySource


SQUARE = [(40.0, -10.0), (60.0, -10.0), (60.0, 10.0), (40.0, 10.0)]


class CountingSource(InMemoryGeometrySource):
    def __init__(self):
        super().__init__()
        self.fetches = 0

    def from_corners(self, building_id):
        self.fetches += 1
        return super().from_corners(building_id)


def test_walls_follow_outline_order_and_close_the_ring():
    src = InMemoryGeometrySource()
    rec = src.add_building(1, SQUARE)
    b = build_from_source(rec, src)
    assert b is not None
    assert len(b.walls) == 4
    assert (b.walls[0].from_corner.x, b.walls[0].from_corner.y) == SQUARE[0]
    assert (b.walls[-1].to_corner.x, b.walls[-1].to_corner.y) == SQUARE[0]
    assert (b.min_x, b.min_y, b.max_x, b.max_y) == (40.0, -10.0, 60.0, 10.0)


def test_offset_translates_box_and_corners():
    src = InMemoryGeometrySource()
    rec = src.add_building(1, SQUARE)
    b = build_from_source(rec, src, Offset(100.0, -5.0))
    assert (b.min_x, b.min_y, b.max_x, b.max_y) == (140.0, -15.0, 160.0, 5.0)
    assert (b.walls[0].from_corner.x, b.walls[0].from_corner.y) == (140.0, -15.0)


def test_mismatched_corner_counts_are_rejected():
    src = InMemoryGeometrySource()
    rec = BuildingRecord(5, 0, 0, 1, 1)
    src.add_record(rec, [CornerRow(0, 1, 0, 0), CornerRow(1, 2, 1, 0)], [CornerRow(0, 2, 1, 0)])
    cache = BuildingCache()
    assert cache.ensure_loaded(rec, src) is None
    assert 5 not in cache


def test_building_without_walls_is_rejected():
    src = InMemoryGeometrySource()
    rec = BuildingRecord(6, 0, 0, 1, 1)
    src.add_record(rec)
    cache = BuildingCache()
    assert cache.ensure_loaded(rec, src) is None
    assert len(cache) == 0


def test_unequal_sequence_numbers_drop_only_that_wall():
    src = InMemoryGeometrySource()
    rec = BuildingRecord(7, 0, 0, 1, 1)
    src.add_record(
        rec,
        [CornerRow(0, 1, 0, 0), CornerRow(1, 2, 1, 0)],
        [CornerRow(0, 2, 1, 0), CornerRow(2, 1, 0, 0)],
    )
    b = build_from_source(rec, src)
    assert b is not None
    assert len(b.walls) == 1


def test_cache_keeps_first_geometry():
    src = InMemoryGeometrySource()
    rec = src.add_building(1, SQUARE)
    cache = BuildingCache()
    first = cache.ensure_loaded(rec, src)
    # Same id, different outline: the cached entry wins.
    rec2 = src.add_building(1, [(0, 0), (1, 0), (1, 1)])
    again = cache.ensure_loaded(rec2, src)
    assert again is first
    assert len(cache.get(1).walls) == 4


def test_concurrent_population_fetches_once():
    src = CountingSource()
    rec = src.add_building(1, SQUARE)
    cache = BuildingCache()
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: cache.ensure_loaded(rec, src), range(64)))
    assert src.fetches == 1
    assert all(r is results[0] for r in results)
