"""Data models for pipelines, smart-bolt sensors and their telemetry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Dict, Iterable, Optional, Tuple

LOW_BATTERY_THRESHOLD = 20.0


class DuplicateEntityError(ValueError):
    """Raised when a pipeline collection contains the same id twice."""


class SensorStatus(Enum):
    """Display status of a smart bolt, derived from its readings."""

    NORMAL = auto()
    ALERT = auto()
    LOW_BATTERY = auto()
    OFFLINE = auto()


class PipelineStatus(Enum):
    """Operational status assigned to a pipeline."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"
    MAINTENANCE = "maintenance"

    @property
    def display_name(self) -> str:
        return self.value.title()


class AlertType(Enum):
    HIGH_TEMPERATURE = "High Temperature"
    HIGH_PRESSURE = "High Pressure"
    LOW_BATTERY = "Low Battery"
    OFFLINE = "Device Offline"
    MAINTENANCE = "Maintenance Due"


class AlertSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class TrendDirection(Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class TimeRange(Enum):
    """Selectable windows on the statistics page."""

    HOUR = "1H"
    DAY = "24H"
    WEEK = "7D"
    MONTH = "30D"


@dataclass(frozen=True, slots=True)
class TelemetrySample:
    """Single timestamped reading for one pipeline (temperature or pressure)."""

    timestamp: datetime
    entity_id: str
    value: float
    is_alert: bool = False


@dataclass(frozen=True, slots=True)
class Sensor:
    """A smart bolt mounted on a pipeline."""

    id: str
    serial_number: str
    position: str
    installation_date: datetime
    current_temperature: float
    current_pressure: float
    battery_level: float
    last_update: datetime
    is_online: bool = True
    has_alert: bool = False
    alert_message: Optional[str] = None

    @property
    def status(self) -> SensorStatus:
        # Order matters: offline > alert > low battery > normal.
        if not self.is_online:
            return SensorStatus.OFFLINE
        if self.has_alert:
            return SensorStatus.ALERT
        if self.battery_level < LOW_BATTERY_THRESHOLD:
            return SensorStatus.LOW_BATTERY
        return SensorStatus.NORMAL


@dataclass(frozen=True, slots=True)
class Pipeline:
    """A monitored gas line and the sensors attached to it."""

    id: str
    name: str
    location: str
    installation_date: datetime
    max_pressure: float
    max_temperature: float
    diameter: float
    length: float
    sensors: Tuple[Sensor, ...] = ()
    status: PipelineStatus = PipelineStatus.NORMAL

    @property
    def average_temperature(self) -> float:
        """Mean temperature over every sensor, offline ones included."""
        if not self.sensors:
            return 0.0
        return sum(s.current_temperature for s in self.sensors) / len(self.sensors)

    @property
    def average_pressure(self) -> float:
        if not self.sensors:
            return 0.0
        return sum(s.current_pressure for s in self.sensors) / len(self.sensors)

    @property
    def active_count(self) -> int:
        return sum(1 for s in self.sensors if s.is_online)

    @property
    def alert_count(self) -> int:
        return sum(1 for s in self.sensors if s.has_alert)


@dataclass(frozen=True, slots=True)
class AlertSummary:
    type: AlertType
    count: int
    severity: AlertSeverity


@dataclass(frozen=True, slots=True)
class PerformanceMetric:
    name: str
    value: float
    unit: str
    trend: TrendDirection


@dataclass(frozen=True, slots=True)
class PipelineOverview:
    """Row of the statistics page pipeline table."""

    pipeline_id: str
    name: str
    avg_temperature: float
    avg_pressure: float
    active_sensors: int
    total_sensors: int
    efficiency: float


@dataclass(frozen=True, slots=True)
class SensorMetric:
    sensor_id: str
    pipeline_id: str
    temperature: float
    pressure: float
    battery_level: float
    signal_strength: float


@dataclass(frozen=True, slots=True)
class AlertItem:
    """Alert entry shown in the overview feed."""

    id: str
    pipeline_id: str
    message: str
    type: AlertType
    severity: AlertSeverity
    age: str


@dataclass(frozen=True, slots=True)
class PipelineStats:
    """Aggregated data behind the statistics page."""

    temperature_history: Tuple[TelemetrySample, ...] = ()
    pressure_history: Tuple[TelemetrySample, ...] = ()
    pipeline_overview: Tuple[PipelineOverview, ...] = ()
    sensor_metrics: Tuple[SensorMetric, ...] = ()
    alert_summary: Tuple[AlertSummary, ...] = ()
    performance_metrics: Tuple[PerformanceMetric, ...] = ()


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    """Everything the dashboard displays at one moment; replaced wholesale on refresh."""

    generated_at: datetime
    pipelines: Tuple[Pipeline, ...] = ()
    stats: PipelineStats = field(default_factory=PipelineStats)

    def with_pipeline(self, pipeline: Pipeline) -> "DashboardSnapshot":
        """Return a new snapshot with ``pipeline`` appended to the collection."""
        pipelines = pipeline_collection(list(self.pipelines) + [pipeline])
        return DashboardSnapshot(generated_at=self.generated_at, pipelines=pipelines, stats=self.stats)


def pipeline_collection(pipelines: Iterable[Pipeline]) -> Tuple[Pipeline, ...]:
    """Freeze ``pipelines`` into a tuple, rejecting duplicate ids."""
    seen = set()
    result = []
    for pipeline in pipelines:
        if pipeline.id in seen:
            raise DuplicateEntityError(f"duplicate pipeline id: {pipeline.id}")
        seen.add(pipeline.id)
        result.append(pipeline)
    return tuple(result)


def total_sensors(pipelines: Iterable[Pipeline]) -> int:
    return sum(len(p.sensors) for p in pipelines)


def online_sensors(pipelines: Iterable[Pipeline]) -> int:
    return sum(p.active_count for p in pipelines)


def alerting_sensors(pipelines: Iterable[Pipeline]) -> int:
    return sum(p.alert_count for p in pipelines)


def count_by_status(pipelines: Iterable[Pipeline]) -> Dict[PipelineStatus, int]:
    counts = {status: 0 for status in PipelineStatus}
    for pipeline in pipelines:
        counts[pipeline.status] += 1
    return counts
