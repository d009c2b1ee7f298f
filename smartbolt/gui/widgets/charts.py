"""Chart widgets embedded in Qt, drawn from precomputed plot-space geometry."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from PySide6.QtWidgets import QSizePolicy, QVBoxLayout, QWidget
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from matplotlib.patches import Polygon, Rectangle, Wedge

from smartbolt.charts import ChartError, bar_chart, line_chart, multi_series_chart, pie_chart
from smartbolt.charts.geometry import ChartItem, Color
from smartbolt.charts.normalize import Point

logger = logging.getLogger(__name__)

GRID_COLOR = "#c8c8c8"
TEXT_COLOR = "#5f6b7a"
BACKGROUND_COLOR = "#ffffff"
PLACEHOLDER_TEXT = "No data to display"
BAR_LABEL_BAND = 18.0


class ChartCanvas(QWidget):
    """Base widget: a Matplotlib canvas whose axes are the pixel rect itself.

    Subclasses implement :meth:`draw_chart`; any :class:`ChartError` it raises
    is replaced by a placeholder instead of propagating into the event loop.
    """

    def __init__(self, parent: Optional[QWidget] = None, min_height: int = 200) -> None:
        super().__init__(parent)
        self._figure = Figure(figsize=(4, 2.5), facecolor=BACKGROUND_COLOR)
        self._canvas = FigureCanvas(self._figure)
        self._canvas.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self._canvas.setMinimumHeight(min_height)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._canvas)
        self.setLayout(layout)

        self._ax = self._figure.add_axes([0.0, 0.0, 1.0, 1.0])

    def plot_size(self) -> Tuple[float, float]:
        return float(max(self._canvas.width(), 1)), float(max(self._canvas.height(), 1))

    def _reset_axes(self, width: float, height: float) -> None:
        self._ax.clear()
        self._ax.set_axis_off()
        self._ax.set_xlim(0.0, width)
        # Plot space has its origin top-left.
        self._ax.set_ylim(height, 0.0)

    def _draw_grid(self, grid: Sequence[float], width: float) -> None:
        for y in grid:
            self._ax.plot([0.0, width], [y, y], color=GRID_COLOR, linewidth=0.5)

    def draw_chart(self, width: float, height: float) -> None:
        raise NotImplementedError

    def refresh(self) -> None:
        width, height = self.plot_size()
        self._reset_axes(width, height)
        try:
            self.draw_chart(width, height)
        except ChartError as exc:
            logger.debug("%s declined to render: %s", type(self).__name__, exc)
            self._reset_axes(width, height)
            self._ax.text(width / 2.0, height / 2.0, PLACEHOLDER_TEXT, ha="center", va="center", color=TEXT_COLOR)
        self._canvas.draw_idle()

    def resizeEvent(self, event) -> None:  # noqa: N802 - Qt API
        super().resizeEvent(event)
        self.refresh()


class LineChart(ChartCanvas):
    """Single series with filled area and point markers."""

    def __init__(self, color: Color, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.color = color
        self._points: List[Point] = []

    def set_points(self, points: Sequence[Point]) -> None:
        self._points = list(points)
        self.refresh()

    def draw_chart(self, width: float, height: float) -> None:
        geometry = line_chart(self._points, width, height)
        self._draw_grid(geometry.grid, width)
        self._ax.add_patch(Polygon(geometry.area, closed=True, facecolor=self.color, alpha=0.2, edgecolor="none"))
        xs = [p[0] for p in geometry.polyline]
        ys = [p[1] for p in geometry.polyline]
        self._ax.plot(xs, ys, color=self.color, linewidth=3, solid_capstyle="round", solid_joinstyle="round")
        self._ax.scatter(xs, ys, s=36, color=self.color, zorder=3)


class BarChart(ChartCanvas):
    """Labelled bars, one per item."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._items: List[ChartItem] = []

    def set_items(self, items: Sequence[ChartItem]) -> None:
        self._items = list(items)
        self.refresh()

    def draw_chart(self, width: float, height: float) -> None:
        plot_height = max(height - BAR_LABEL_BAND, 1.0)
        geometry = bar_chart(self._items, width, plot_height)
        for bar in geometry.bars:
            self._ax.add_patch(Rectangle((bar.x, bar.y), bar.width, bar.height, facecolor=bar.color, edgecolor="none"))
            self._ax.text(
                bar.x + bar.width / 2.0,
                plot_height + BAR_LABEL_BAND / 2.0,
                bar.label,
                ha="center",
                va="center",
                fontsize=7,
                color=TEXT_COLOR,
            )


class PieChart(ChartCanvas):
    """Donut chart with the total in the middle."""

    def __init__(self, caption: str = "Total", unit: str = "%", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.caption = caption
        self.unit = unit
        self._items: List[ChartItem] = []

    def set_items(self, items: Sequence[ChartItem]) -> None:
        self._items = list(items)
        self.refresh()

    def draw_chart(self, width: float, height: float) -> None:
        geometry = pie_chart(self._items, width, height)
        ring = geometry.radius - geometry.inner_radius
        for piece in geometry.slices:
            self._ax.add_patch(
                Wedge(geometry.center, geometry.radius, piece.start_angle, piece.end_angle, width=ring, facecolor=piece.color)
            )
        cx, cy = geometry.center
        self._ax.text(cx, cy - 8, self.caption, ha="center", va="center", fontsize=8, color=TEXT_COLOR)
        self._ax.text(cx, cy + 8, f"{int(geometry.total)}{self.unit}", ha="center", va="center", fontsize=12, fontweight="bold")


class MultiSeriesChart(ChartCanvas):
    """Several series on a shared scale with a legend in the top-right corner."""

    def __init__(self, palette: Sequence[Color], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.palette = list(palette)
        self._series: Dict[str, List[Point]] = {}

    def set_series(self, series: Mapping[str, Sequence[Point]]) -> None:
        self._series = {key: list(points) for key, points in series.items()}
        self.refresh()

    def draw_chart(self, width: float, height: float) -> None:
        geometry = multi_series_chart(self._series, width, height, self.palette)
        self._draw_grid(geometry.grid, width)
        for line in geometry.lines:
            xs = [p[0] for p in line.points]
            ys = [p[1] for p in line.points]
            self._ax.plot(xs, ys, color=line.color, linewidth=2, solid_capstyle="round")
        for row, (series_id, color) in enumerate(geometry.legend):
            y = 12.0 + row * 14.0
            self._ax.scatter([width - 60.0], [y], s=20, color=color, zorder=4)
            self._ax.text(width - 52.0, y, series_id, va="center", fontsize=7, color=TEXT_COLOR)
