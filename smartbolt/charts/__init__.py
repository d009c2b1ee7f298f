"""Chart geometry: normalization and per-chart primitives."""

from .errors import ChartError, EmptyDataSet, InvalidChartData
from .geometry import (
    BarChartGeometry,
    LineChartGeometry,
    MultiSeriesGeometry,
    PieChartGeometry,
    bar_chart,
    grid_lines,
    line_chart,
    multi_series_chart,
    pie_chart,
)
from .normalize import Bounds, SeriesNormalizer

__all__ = [
    "BarChartGeometry",
    "Bounds",
    "ChartError",
    "EmptyDataSet",
    "InvalidChartData",
    "LineChartGeometry",
    "MultiSeriesGeometry",
    "PieChartGeometry",
    "SeriesNormalizer",
    "bar_chart",
    "grid_lines",
    "line_chart",
    "multi_series_chart",
    "pie_chart",
]
