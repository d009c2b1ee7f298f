"""Telemetry data model, sources and series helpers."""

from .mock import MockTelemetryGenerator, PipelineForm
from .models import (
    DashboardSnapshot,
    DuplicateEntityError,
    Pipeline,
    PipelineStats,
    PipelineStatus,
    Sensor,
    SensorStatus,
    TelemetrySample,
)
from .series import group_by_entity
from .source import TelemetrySource

__all__ = [
    "DashboardSnapshot",
    "DuplicateEntityError",
    "MockTelemetryGenerator",
    "Pipeline",
    "PipelineForm",
    "PipelineStats",
    "PipelineStatus",
    "Sensor",
    "SensorStatus",
    "TelemetrySample",
    "TelemetrySource",
    "group_by_entity",
]
