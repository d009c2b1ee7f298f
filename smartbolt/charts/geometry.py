"""Plot-space geometry for the dashboard charts.

Every function here is pure: data in, frozen primitives out. The Qt widgets
only draw what these return, so all the numeric behaviour lives (and is
tested) here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence, Tuple

from smartbolt.charts.errors import InvalidChartData
from smartbolt.charts.normalize import Bounds, Point, SeriesNormalizer

GRID_DIVISIONS = 4
BAR_FILL_RATIO = 0.8
BAR_HEIGHT_RATIO = 0.8
PIE_RADIUS_RATIO = 0.8
PIE_START_ANGLE = -90.0

Color = str
ChartItem = Tuple[str, float, Color]


def grid_lines(height: float, divisions: int = GRID_DIVISIONS) -> Tuple[float, ...]:
    """Horizontal grid line offsets at fixed equal divisions, edges included."""
    return tuple(height * i / divisions for i in range(divisions + 1))


@dataclass(frozen=True, slots=True)
class LineChartGeometry:
    polyline: Tuple[Point, ...]
    area: Tuple[Point, ...]
    markers: Tuple[Point, ...]
    grid: Tuple[float, ...]
    bounds: Bounds


def line_chart(points: Sequence[Point], width: float, height: float) -> LineChartGeometry:
    """Polyline, filled area and markers for a single series.

    Points are plotted in the order given; callers sort them if they need to.
    """
    normalizer = SeriesNormalizer.from_points(points)
    mapped = tuple(normalizer.map_all(points, width, height))
    first_x = mapped[0][0]
    last_x = mapped[-1][0]
    area = ((first_x, float(height)),) + mapped + ((last_x, float(height)),)
    return LineChartGeometry(
        polyline=mapped,
        area=area,
        markers=mapped,
        grid=grid_lines(height),
        bounds=normalizer.bounds,
    )


@dataclass(frozen=True, slots=True)
class Bar:
    label: str
    value: float
    color: Color
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class BarChartGeometry:
    bars: Tuple[Bar, ...]
    slot_width: float
    max_value: float


def bar_chart(items: Sequence[ChartItem], width: float, height: float) -> BarChartGeometry:
    """Bottom-aligned bars scaled against the largest value.

    When every value is zero the bars collapse to zero height.
    """
    if not items:
        return BarChartGeometry(bars=(), slot_width=0.0, max_value=0.0)
    count = len(items)
    slot = width / count
    bar_width = slot * BAR_FILL_RATIO
    gap = (slot - bar_width) / 2.0
    max_value = max(value for _, value, _ in items)
    bars = []
    for index, (label, value, color) in enumerate(items):
        if max_value > 0:
            bar_height = max(0.0, height * BAR_HEIGHT_RATIO * value / max_value)
        else:
            bar_height = 0.0
        bars.append(
            Bar(
                label=label,
                value=value,
                color=color,
                x=index * slot + gap,
                y=height - bar_height,
                width=bar_width,
                height=bar_height,
            )
        )
    return BarChartGeometry(bars=tuple(bars), slot_width=slot, max_value=max_value)


@dataclass(frozen=True, slots=True)
class PieSlice:
    label: str
    value: float
    color: Color
    start_angle: float
    sweep: float

    @property
    def end_angle(self) -> float:
        return self.start_angle + self.sweep


@dataclass(frozen=True, slots=True)
class PieChartGeometry:
    center: Point
    radius: float
    inner_radius: float
    slices: Tuple[PieSlice, ...]
    total: float


def pie_chart(items: Sequence[ChartItem], width: float, height: float) -> PieChartGeometry:
    """Consecutive slices from 12 o'clock, in input order.

    Angles are in degrees, measured in plot space (y grows downward), so a
    positive sweep turns clockwise on screen.
    """
    total = sum(value for _, value, _ in items)
    if total <= 0:
        raise InvalidChartData(f"pie chart needs a positive total, got {total}")
    radius = min(width, height) / 2.0 * PIE_RADIUS_RATIO
    start = PIE_START_ANGLE
    slices = []
    for label, value, color in items:
        sweep = 360.0 * value / total
        slices.append(PieSlice(label=label, value=value, color=color, start_angle=start, sweep=sweep))
        start += sweep
    return PieChartGeometry(
        center=(width / 2.0, height / 2.0),
        radius=radius,
        inner_radius=radius / 2.0,
        slices=tuple(slices),
        total=total,
    )


@dataclass(frozen=True, slots=True)
class SeriesLine:
    series_id: str
    color: Color
    points: Tuple[Point, ...]


@dataclass(frozen=True, slots=True)
class MultiSeriesGeometry:
    lines: Tuple[SeriesLine, ...]
    grid: Tuple[float, ...]
    bounds: Bounds

    @property
    def legend(self) -> Tuple[Tuple[str, Color], ...]:
        return tuple((line.series_id, line.color) for line in self.lines)


def multi_series_chart(
    series: Mapping[str, Sequence[Point]],
    width: float,
    height: float,
    palette: Sequence[Color],
) -> MultiSeriesGeometry:
    """One polyline per series on a shared scale.

    Each series is sorted by x before plotting. Bounds cover all series
    combined, and colors cycle through ``palette`` in the mapping's key order.
    """
    if not palette:
        raise ValueError("palette must contain at least one color")
    normalizer = SeriesNormalizer.from_series(series)
    lines = []
    for index, (series_id, points) in enumerate(series.items()):
        ordered = sorted(points, key=lambda point: point[0])
        lines.append(
            SeriesLine(
                series_id=series_id,
                color=palette[index % len(palette)],
                points=tuple(normalizer.map_all(ordered, width, height)),
            )
        )
    return MultiSeriesGeometry(lines=tuple(lines), grid=grid_lines(height), bounds=normalizer.bounds)
