import math

import pytest

from smartbolt.charts import Bounds, EmptyDataSet, SeriesNormalizer


def test_maps_corners_and_midpoint():
    normalizer = SeriesNormalizer.from_points([(0.0, 0.0), (10.0, 100.0)])
    assert normalizer.map(0.0, 0.0, 200.0, 100.0) == pytest.approx((0.0, 100.0))
    assert normalizer.map(10.0, 100.0, 200.0, 100.0) == pytest.approx((200.0, 0.0))
    assert normalizer.map(5.0, 50.0, 200.0, 100.0) == pytest.approx((100.0, 50.0))


def test_x_monotonic_and_y_inverted():
    points = [(3.0, 7.0), (-2.0, 1.5), (8.0, -4.0), (0.5, 12.0), (5.0, 3.0)]
    normalizer = SeriesNormalizer.from_points(points)

    by_x = sorted(points)
    xs = [normalizer.map(x, y, 320.0, 240.0)[0] for x, y in by_x]
    assert xs == sorted(xs)

    by_y = sorted(points, key=lambda p: p[1])
    ys = [normalizer.map(x, y, 320.0, 240.0)[1] for x, y in by_y]
    assert ys == sorted(ys, reverse=True)


def test_flat_x_axis_maps_to_midline():
    normalizer = SeriesNormalizer.from_points([(3.0, 1.0), (3.0, 5.0), (3.0, 9.0)])
    for y in (1.0, 5.0, 9.0):
        px, py = normalizer.map(3.0, y, 300.0, 120.0)
        assert px == pytest.approx(150.0)
        assert math.isfinite(py)


def test_single_point_lands_in_centre():
    normalizer = SeriesNormalizer.from_points([(4.0, 42.0)])
    px, py = normalizer.map(4.0, 42.0, 80.0, 60.0)
    assert (px, py) == pytest.approx((40.0, 30.0))
    assert normalizer.bounds.x_degenerate and normalizer.bounds.y_degenerate


def test_empty_input_is_rejected():
    with pytest.raises(EmptyDataSet):
        SeriesNormalizer.from_points([])
    with pytest.raises(EmptyDataSet):
        SeriesNormalizer.from_series({"a": [], "b": []})


def test_series_bounds_are_shared():
    normalizer = SeriesNormalizer.from_series({"a": [(0, 10), (1, 20)], "b": [(0, 100), (2, 200)]})
    assert normalizer.bounds == Bounds(min_x=0.0, max_x=2.0, min_y=10.0, max_y=200.0)


def test_map_all_keeps_order():
    normalizer = SeriesNormalizer.from_points([(0.0, 0.0), (4.0, 8.0)])
    mapped = normalizer.map_all([(4.0, 8.0), (0.0, 0.0)], 40.0, 80.0)
    assert mapped[0] == pytest.approx((40.0, 0.0))
    assert mapped[1] == pytest.approx((0.0, 80.0))
