"""Pure projections from a dashboard snapshot to what each page shows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Mapping, Sequence, Tuple

from smartbolt.telemetry.models import (
    AlertItem,
    AlertSeverity,
    AlertType,
    DashboardSnapshot,
    Pipeline,
    PipelineStats,
    PipelineStatus,
    SensorStatus,
    TimeRange,
    alerting_sensors,
    count_by_status,
    online_sensors,
    total_sensors,
)
from smartbolt.telemetry.series import Point, group_by_entity, within

UPTIME_TARGET_PCT = 95.0
BATTERY_COMFORT_PCT = 50.0

_MESSAGE_TYPES = (
    ("temperature", AlertType.HIGH_TEMPERATURE),
    ("pressure", AlertType.HIGH_PRESSURE),
    ("battery", AlertType.LOW_BATTERY),
    ("maintenance", AlertType.MAINTENANCE),
)

_SEVERITY_BY_PIPELINE = {
    PipelineStatus.CRITICAL: AlertSeverity.CRITICAL,
    PipelineStatus.WARNING: AlertSeverity.WARNING,
}


@dataclass(frozen=True)
class MetricCard:
    title: str
    value: str
    caption: str
    positive: bool


@dataclass(frozen=True)
class StatusRow:
    pipeline_id: str
    name: str
    location: str
    status: PipelineStatus
    active_sensors: int
    total_sensors: int


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def overview_cards(snapshot: DashboardSnapshot) -> List[MetricCard]:
    """Headline metrics for the overview page."""
    pipelines = snapshot.pipelines
    sensors = [s for p in pipelines for s in p.sensors]
    total = total_sensors(pipelines)
    online = online_sensors(pipelines)
    alerts = alerting_sensors(pipelines)
    uptime = 100.0 * online / total if total else 0.0
    battery = _mean([s.battery_level for s in sensors])
    return [
        MetricCard("Active Pipelines", str(len(pipelines)), f"{total} smart bolts installed", True),
        MetricCard("Online Smart Bolts", f"{online}/{total}", f"{uptime:.1f}% uptime", uptime > UPTIME_TARGET_PCT),
        MetricCard("Active Alerts", str(alerts), "bolts reporting alerts", alerts == 0),
        MetricCard(
            "Avg Temperature",
            f"{_mean([s.current_temperature for s in sensors]):.1f}°C",
            "across all bolts",
            True,
        ),
        MetricCard(
            "Avg Pressure",
            f"{_mean([s.current_pressure for s in sensors]):.0f} PSI",
            "across all bolts",
            True,
        ),
        MetricCard("Avg Battery", f"{battery:.0f}%", "fleet battery level", battery >= BATTERY_COMFORT_PCT),
    ]


def overview_rows(pipelines: Sequence[Pipeline]) -> List[StatusRow]:
    return [
        StatusRow(
            pipeline_id=p.id,
            name=p.name,
            location=p.location,
            status=p.status,
            active_sensors=p.active_count,
            total_sensors=len(p.sensors),
        )
        for p in pipelines
    ]


def _age(now: datetime, then: datetime) -> str:
    minutes = max(0, int((now - then).total_seconds() // 60))
    if minutes == 0:
        return "just now"
    return f"{minutes} min ago"


def _alert_type(message: str) -> AlertType:
    lowered = message.lower()
    for needle, alert_type in _MESSAGE_TYPES:
        if needle in lowered:
            return alert_type
    return AlertType.OFFLINE


def recent_alerts(snapshot: DashboardSnapshot) -> List[AlertItem]:
    """Alert feed built from bolts that are offline or reporting an alert."""
    items: List[AlertItem] = []
    for pipeline in snapshot.pipelines:
        severity = _SEVERITY_BY_PIPELINE.get(pipeline.status, AlertSeverity.INFO)
        for sensor in pipeline.sensors:
            status = sensor.status
            if status is SensorStatus.OFFLINE:
                message, alert_type = f"{sensor.id} is not reporting", AlertType.OFFLINE
            elif status is SensorStatus.ALERT:
                message = sensor.alert_message or "System alert"
                alert_type = _alert_type(message)
            else:
                continue
            items.append(
                AlertItem(
                    id=str(len(items) + 1),
                    pipeline_id=pipeline.id,
                    message=message,
                    type=alert_type,
                    severity=severity,
                    age=_age(snapshot.generated_at, sensor.last_update),
                )
            )
    return items


def pipeline_counts(pipelines: Sequence[Pipeline]) -> Dict[str, int]:
    """Status breakdown plus bolt totals for the pipelines page header."""
    counts = {status.value: n for status, n in count_by_status(pipelines).items()}
    counts["total_sensors"] = total_sensors(pipelines)
    counts["online_sensors"] = online_sensors(pipelines)
    counts["alert_sensors"] = alerting_sensors(pipelines)
    return counts


def alert_bar_items(stats: PipelineStats, colors: Mapping[str, str]) -> List[Tuple[str, float, str]]:
    return [(entry.type.value, float(entry.count), colors[entry.severity.value]) for entry in stats.alert_summary]


def temperature_series(snapshot: DashboardSnapshot, time_range: TimeRange = TimeRange.DAY) -> Dict[str, List[Point]]:
    return group_by_entity(within(snapshot.stats.temperature_history, time_range, snapshot.generated_at))


def pressure_series(snapshot: DashboardSnapshot, time_range: TimeRange = TimeRange.DAY) -> Dict[str, List[Point]]:
    return group_by_entity(within(snapshot.stats.pressure_history, time_range, snapshot.generated_at))


def fleet_temperature_trend(snapshot: DashboardSnapshot) -> List[Point]:
    """Mean temperature per hour of day across all pipelines, sorted by hour.

    The line chart plots points as given, so the ordering is done here.
    """
    buckets: Dict[float, List[float]] = {}
    for hour, value in (p for points in temperature_series(snapshot).values() for p in points):
        buckets.setdefault(hour, []).append(value)
    return [(hour, _mean(values)) for hour, values in sorted(buckets.items())]


def sensor_status_items(snapshot: DashboardSnapshot, colors: Mapping[str, str]) -> List[Tuple[str, float, str]]:
    """Bolt counts per status for the overview donut; empty statuses are skipped."""
    counts = {status: 0 for status in SensorStatus}
    for pipeline in snapshot.pipelines:
        for sensor in pipeline.sensors:
            counts[sensor.status] += 1
    return [
        (status.name.replace("_", " ").title(), float(n), sensor_status_color(status, colors))
        for status, n in counts.items()
        if n
    ]


def pipeline_status_color(status: PipelineStatus, colors: Mapping[str, str]) -> str:
    return colors[status.value]


def sensor_status_color(status: SensorStatus, colors: Mapping[str, str]) -> str:
    return colors[status.name.lower()]
