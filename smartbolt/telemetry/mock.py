"""Mock telemetry provider used in place of a real smart-bolt feed."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Collection, List, Optional, Sequence, Tuple

from smartbolt.telemetry.models import (
    AlertSeverity,
    AlertSummary,
    AlertType,
    DashboardSnapshot,
    PerformanceMetric,
    Pipeline,
    PipelineOverview,
    PipelineStats,
    PipelineStatus,
    Sensor,
    SensorMetric,
    TelemetrySample,
    TrendDirection,
    pipeline_collection,
)

logger = logging.getLogger(__name__)

ONLINE_PROBABILITY = 0.95
ALERT_PROBABILITY = 0.20

TEMPERATURE_RANGE = (15.0, 45.0)
PRESSURE_RANGE = (200.0, 800.0)
BATTERY_RANGE = (15.0, 100.0)
INSTALLED_DAYS_AGO = (30.0, 365.0)
LAST_UPDATE_SECONDS_AGO = (0.0, 300.0)

TEMPERATURE_ALERT_ABOVE = 40.0
PRESSURE_ALERT_ABOVE = 750.0
HISTORY_HOURS = 24

ALERT_MESSAGES = (
    "Temperature exceeding safe limits",
    "Pressure reading above threshold",
    "Low battery warning",
    "Signal strength degraded",
    "Maintenance required",
)

# id, name, location, age in days, max pressure, max temperature, diameter, length, status
DEMO_PIPELINES: Tuple[Tuple[str, str, str, int, float, float, float, float, PipelineStatus], ...] = (
    ("GP001", "Main Distribution Line", "North Sector A", 365, 1000.0, 80.0, 24.0, 1500.0, PipelineStatus.NORMAL),
    ("GP002", "Emergency Backup Line", "South Sector B", 180, 800.0, 75.0, 18.0, 800.0, PipelineStatus.WARNING),
    ("GP003", "Industrial Feed Line", "East Sector C", 90, 1200.0, 85.0, 30.0, 2000.0, PipelineStatus.CRITICAL),
    ("GP004", "Residential Distribution", "West Sector D", 60, 600.0, 70.0, 12.0, 1200.0, PipelineStatus.NORMAL),
)

ALERT_SUMMARY = (
    AlertSummary(AlertType.HIGH_TEMPERATURE, 3, AlertSeverity.WARNING),
    AlertSummary(AlertType.HIGH_PRESSURE, 1, AlertSeverity.CRITICAL),
    AlertSummary(AlertType.LOW_BATTERY, 5, AlertSeverity.INFO),
    AlertSummary(AlertType.OFFLINE, 2, AlertSeverity.WARNING),
)

PERFORMANCE_METRICS = (
    PerformanceMetric("System Efficiency", 94.2, "%", TrendDirection.UP),
    PerformanceMetric("Average Response Time", 0.8, "s", TrendDirection.DOWN),
    PerformanceMetric("Data Accuracy", 99.1, "%", TrendDirection.STABLE),
    PerformanceMetric("Uptime", 99.7, "%", TrendDirection.UP),
)


@dataclass
class PipelineForm:
    """Values entered in the "add pipeline" dialog."""

    name: str
    location: str
    diameter: float = 12.0
    length: float = 1000.0
    max_pressure: float = 800.0
    max_temperature: float = 75.0

    def errors(self) -> List[str]:
        problems = []
        if not self.name.strip():
            problems.append("Pipeline name is required.")
        if not self.location.strip():
            problems.append("Location is required.")
        for label, value in (
            ("Diameter", self.diameter),
            ("Length", self.length),
            ("Max pressure", self.max_pressure),
            ("Max temperature", self.max_temperature),
        ):
            if value <= 0:
                problems.append(f"{label} must be positive.")
        return problems


class MockTelemetryGenerator:
    """Seedable stand-in for a real telemetry feed.

    ``rng`` and ``clock`` are injectable so tests can pin both the random draws
    and the timestamps.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random(seed)
        self.clock = clock or datetime.now

    def _uniform(self, bounds: Tuple[float, float]) -> float:
        return self.rng.uniform(*bounds)

    def _serial_number(self) -> str:
        return f"SB-{self.rng.randint(10000, 99999)}"

    def sensors_for_pipeline(self, pipeline_id: str) -> Tuple[Sensor, ...]:
        """One smart bolt per pipeline; an offline bolt never reports an alert."""
        now = self.clock()
        has_alert = self.rng.random() < ALERT_PROBABILITY
        is_online = self.rng.random() < ONLINE_PROBABILITY
        alerting = has_alert and is_online
        sensor = Sensor(
            id=f"{pipeline_id}-SB01",
            serial_number=self._serial_number(),
            position="Center",
            installation_date=now - timedelta(days=self._uniform(INSTALLED_DAYS_AGO)),
            current_temperature=self._uniform(TEMPERATURE_RANGE),
            current_pressure=self._uniform(PRESSURE_RANGE),
            battery_level=self._uniform(BATTERY_RANGE),
            last_update=now - timedelta(seconds=self._uniform(LAST_UPDATE_SECONDS_AGO)),
            is_online=is_online,
            has_alert=alerting,
            alert_message=self.rng.choice(ALERT_MESSAGES) if alerting else None,
        )
        return (sensor,)

    def pipelines(self) -> Tuple[Pipeline, ...]:
        now = self.clock()
        return pipeline_collection(
            Pipeline(
                id=pipeline_id,
                name=name,
                location=location,
                installation_date=now - timedelta(days=age_days),
                max_pressure=max_pressure,
                max_temperature=max_temperature,
                diameter=diameter,
                length=length,
                sensors=self.sensors_for_pipeline(pipeline_id),
                status=status,
            )
            for pipeline_id, name, location, age_days, max_pressure, max_temperature, diameter, length, status in DEMO_PIPELINES
        )

    def _history(
        self,
        pipeline_ids: Sequence[str],
        bounds: Tuple[float, float],
        alert_above: float,
    ) -> Tuple[TelemetrySample, ...]:
        now = self.clock()
        samples = []
        for hour in range(HISTORY_HOURS):
            timestamp = now - timedelta(hours=hour)
            for pipeline_id in pipeline_ids:
                value = self._uniform(bounds)
                samples.append(
                    TelemetrySample(timestamp=timestamp, entity_id=pipeline_id, value=value, is_alert=value > alert_above)
                )
        return tuple(samples)

    def temperature_history(self, pipeline_ids: Optional[Sequence[str]] = None) -> Tuple[TelemetrySample, ...]:
        ids = pipeline_ids or [entry[0] for entry in DEMO_PIPELINES]
        return self._history(ids, TEMPERATURE_RANGE, TEMPERATURE_ALERT_ABOVE)

    def pressure_history(self, pipeline_ids: Optional[Sequence[str]] = None) -> Tuple[TelemetrySample, ...]:
        ids = pipeline_ids or [entry[0] for entry in DEMO_PIPELINES]
        return self._history(ids, PRESSURE_RANGE, PRESSURE_ALERT_ABOVE)

    def stats(self, pipelines: Sequence[Pipeline]) -> PipelineStats:
        overview = tuple(
            PipelineOverview(
                pipeline_id=p.id,
                name=p.name,
                avg_temperature=p.average_temperature,
                avg_pressure=p.average_pressure,
                active_sensors=p.active_count,
                total_sensors=len(p.sensors),
                efficiency=self.rng.uniform(85.0, 98.0),
            )
            for p in pipelines
        )
        metrics = tuple(
            SensorMetric(
                sensor_id=s.id,
                pipeline_id=p.id,
                temperature=s.current_temperature,
                pressure=s.current_pressure,
                battery_level=s.battery_level,
                signal_strength=self.rng.uniform(60.0, 100.0),
            )
            for p in pipelines
            for s in p.sensors
        )
        return PipelineStats(
            temperature_history=self.temperature_history(),
            pressure_history=self.pressure_history(),
            pipeline_overview=overview,
            sensor_metrics=metrics,
            alert_summary=ALERT_SUMMARY,
            performance_metrics=PERFORMANCE_METRICS,
        )

    def new_pipeline(self, form: PipelineForm, existing_ids: Collection[str] = ()) -> Pipeline:
        """Build a freshly installed pipeline from a validated form.

        The random id is redrawn until it does not clash with ``existing_ids``.
        """
        problems = form.errors()
        if problems:
            raise ValueError("; ".join(problems))
        now = self.clock()
        pipeline_id = f"GP{self.rng.randint(100, 999):03d}"
        while pipeline_id in existing_ids:
            pipeline_id = f"GP{self.rng.randint(100, 999):03d}"
        sensor = Sensor(
            id=f"{pipeline_id}-SB01",
            serial_number=self._serial_number(),
            position=f"KM {form.length / 2000.0:.1f}",
            installation_date=now,
            current_temperature=self.rng.uniform(15.0, 25.0),
            current_pressure=self.rng.uniform(200.0, 400.0),
            battery_level=self.rng.uniform(85.0, 100.0),
            last_update=now,
        )
        logger.info("Created pipeline %s (%s)", pipeline_id, form.name)
        return Pipeline(
            id=pipeline_id,
            name=form.name.strip(),
            location=form.location.strip(),
            installation_date=now,
            max_pressure=form.max_pressure,
            max_temperature=form.max_temperature,
            diameter=form.diameter,
            length=form.length,
            sensors=(sensor,),
            status=PipelineStatus.NORMAL,
        )

    def snapshot(self) -> DashboardSnapshot:
        pipelines = self.pipelines()
        snapshot = DashboardSnapshot(generated_at=self.clock(), pipelines=pipelines, stats=self.stats(pipelines))
        logger.debug(
            "Generated snapshot: %d pipelines, %d temperature samples",
            len(snapshot.pipelines),
            len(snapshot.stats.temperature_history),
        )
        return snapshot
