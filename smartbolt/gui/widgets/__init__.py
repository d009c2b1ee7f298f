"""Reusable widgets for the dashboard."""

from .charts import BarChart, ChartCanvas, LineChart, MultiSeriesChart, PieChart

__all__ = ["BarChart", "ChartCanvas", "LineChart", "MultiSeriesChart", "PieChart"]
