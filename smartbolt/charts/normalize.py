"""Map data-space points to plot-space pixel coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple

from smartbolt.charts.errors import EmptyDataSet

Point = Tuple[float, float]

# A flat axis is widened to this span, centred on its single value.
DEGENERATE_SPAN = 1.0


@dataclass(frozen=True, slots=True)
class Bounds:
    """Raw data extent of a point set."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def of(cls, points: Iterable[Point]) -> "Bounds":
        xs = []
        ys = []
        for x, y in points:
            xs.append(float(x))
            ys.append(float(y))
        if not xs:
            raise EmptyDataSet("cannot compute bounds of an empty point set")
        return cls(min(xs), max(xs), min(ys), max(ys))

    @property
    def x_degenerate(self) -> bool:
        return self.max_x == self.min_x

    @property
    def y_degenerate(self) -> bool:
        return self.max_y == self.min_y


def _axis_range(lo: float, hi: float) -> Tuple[float, float]:
    if hi == lo:
        half = DEGENERATE_SPAN / 2.0
        return lo - half, hi + half
    return lo, hi


class SeriesNormalizer:
    """Maps ``(x, y)`` into a ``width x height`` rect with the origin top-left.

    ``px = width * (x - min_x) / (max_x - min_x)``
    ``py = height * (1 - (y - min_y) / (max_y - min_y))``

    A degenerate axis is treated as one unit wide around its value, so points
    land on the midline instead of producing NaN.
    """

    def __init__(self, bounds: Bounds) -> None:
        self.bounds = bounds
        self._x0, self._x1 = _axis_range(bounds.min_x, bounds.max_x)
        self._y0, self._y1 = _axis_range(bounds.min_y, bounds.max_y)

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "SeriesNormalizer":
        return cls(Bounds.of(points))

    @classmethod
    def from_series(cls, series: Mapping[str, Sequence[Point]]) -> "SeriesNormalizer":
        """Shared bounds over every series combined."""
        return cls(Bounds.of(point for points in series.values() for point in points))

    def map(self, x: float, y: float, width: float, height: float) -> Point:
        px = width * (x - self._x0) / (self._x1 - self._x0)
        py = height * (1.0 - (y - self._y0) / (self._y1 - self._y0))
        return px, py

    def map_all(self, points: Iterable[Point], width: float, height: float) -> List[Point]:
        return [self.map(x, y, width, height) for x, y in points]
