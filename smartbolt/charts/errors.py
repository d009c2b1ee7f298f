"""Exceptions raised while computing chart geometry."""


class ChartError(Exception):
    """Base class for data a chart declines to render."""


class EmptyDataSet(ChartError):
    """No points were supplied to a chart or normalizer."""


class InvalidChartData(ChartError):
    """Data cannot be turned into geometry, e.g. a pie whose values sum to zero."""
