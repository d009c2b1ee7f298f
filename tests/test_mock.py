import random
from datetime import datetime, timedelta

import pytest

from smartbolt.telemetry import MockTelemetryGenerator, PipelineForm, PipelineStatus
from smartbolt.telemetry.mock import (
    BATTERY_RANGE,
    DEMO_PIPELINES,
    HISTORY_HOURS,
    PRESSURE_ALERT_ABOVE,
    PRESSURE_RANGE,
    TEMPERATURE_ALERT_ABOVE,
    TEMPERATURE_RANGE,
)

NOW = datetime(2024, 6, 1, 12, 0, 0)


def make_generator(seed=1234):
    return MockTelemetryGenerator(rng=random.Random(seed), clock=lambda: NOW)


def test_offline_sensors_never_alert_and_rates_match():
    generator = make_generator(seed=42)
    sensors = [generator.sensors_for_pipeline(f"GP{i:05d}")[0] for i in range(10_000)]

    assert not any(s.has_alert and not s.is_online for s in sensors)
    assert all(s.alert_message is not None for s in sensors if s.has_alert)
    assert all(s.alert_message is None for s in sensors if not s.has_alert)

    online = [s for s in sensors if s.is_online]
    online_rate = len(online) / len(sensors)
    alert_rate = sum(s.has_alert for s in online) / len(online)
    assert online_rate == pytest.approx(0.95, abs=0.015)
    assert alert_rate == pytest.approx(0.20, abs=0.02)


def test_sensor_readings_within_ranges():
    generator = make_generator()
    for _ in range(500):
        (sensor,) = generator.sensors_for_pipeline("GP001")
        assert sensor.id == "GP001-SB01"
        assert sensor.serial_number.startswith("SB-")
        assert 10000 <= int(sensor.serial_number[3:]) <= 99999
        assert TEMPERATURE_RANGE[0] <= sensor.current_temperature <= TEMPERATURE_RANGE[1]
        assert PRESSURE_RANGE[0] <= sensor.current_pressure <= PRESSURE_RANGE[1]
        assert BATTERY_RANGE[0] <= sensor.battery_level <= BATTERY_RANGE[1]
        assert NOW - timedelta(seconds=300) <= sensor.last_update <= NOW
        assert NOW - timedelta(days=365) <= sensor.installation_date <= NOW - timedelta(days=30)


def test_same_seed_same_snapshot():
    first = make_generator(seed=7).snapshot()
    second = make_generator(seed=7).snapshot()
    assert first == second


def test_demo_pipelines():
    pipelines = make_generator().pipelines()
    assert [p.id for p in pipelines] == [entry[0] for entry in DEMO_PIPELINES]
    assert [p.status for p in pipelines] == [
        PipelineStatus.NORMAL,
        PipelineStatus.WARNING,
        PipelineStatus.CRITICAL,
        PipelineStatus.NORMAL,
    ]
    assert all(len(p.sensors) == 1 for p in pipelines)
    assert pipelines[0].installation_date == NOW - timedelta(days=365)


def test_history_shape_and_alert_flags():
    generator = make_generator()
    temperatures = generator.temperature_history()
    pressures = generator.pressure_history(["GP001", "GP002"])

    assert len(temperatures) == HISTORY_HOURS * len(DEMO_PIPELINES)
    assert len(pressures) == HISTORY_HOURS * 2
    assert {s.timestamp for s in temperatures} == {NOW - timedelta(hours=h) for h in range(HISTORY_HOURS)}
    assert all(s.is_alert == (s.value > TEMPERATURE_ALERT_ABOVE) for s in temperatures)
    assert all(s.is_alert == (s.value > PRESSURE_ALERT_ABOVE) for s in pressures)
    assert all(PRESSURE_RANGE[0] <= s.value <= PRESSURE_RANGE[1] for s in pressures)


def test_snapshot_stats_cover_every_pipeline():
    snapshot = make_generator().snapshot()
    assert snapshot.generated_at == NOW
    ids = [p.id for p in snapshot.pipelines]
    assert [row.pipeline_id for row in snapshot.stats.pipeline_overview] == ids
    assert [m.pipeline_id for m in snapshot.stats.sensor_metrics] == ids
    assert all(85.0 <= row.efficiency <= 98.0 for row in snapshot.stats.pipeline_overview)
    assert all(60.0 <= m.signal_strength <= 100.0 for m in snapshot.stats.sensor_metrics)
    assert [a.count for a in snapshot.stats.alert_summary] == [3, 1, 5, 2]


def test_new_pipeline_from_form():
    generator = make_generator()
    pipeline = generator.new_pipeline(PipelineForm(name="  Harbour Spur ", location="Dock 4", length=3000.0))
    assert pipeline.id.startswith("GP") and 100 <= int(pipeline.id[2:]) <= 999
    assert pipeline.name == "Harbour Spur"
    assert pipeline.status is PipelineStatus.NORMAL
    assert pipeline.installation_date == NOW
    (sensor,) = pipeline.sensors
    assert sensor.id == f"{pipeline.id}-SB01"
    assert sensor.position == "KM 1.5"
    assert sensor.is_online and not sensor.has_alert
    assert 85.0 <= sensor.battery_level <= 100.0
    assert 15.0 <= sensor.current_temperature <= 25.0


def test_new_pipeline_avoids_existing_ids():
    taken = {f"GP{n}" for n in range(100, 999)}
    pipeline = make_generator().new_pipeline(PipelineForm(name="Spur", location="Dock"), existing_ids=taken)
    assert pipeline.id == "GP999"


@pytest.mark.parametrize(
    "form",
    [
        PipelineForm(name="", location="Dock"),
        PipelineForm(name="Spur", location="   "),
        PipelineForm(name="Spur", location="Dock", diameter=0.0),
        PipelineForm(name="Spur", location="Dock", max_pressure=-1.0),
    ],
)
def test_new_pipeline_rejects_invalid_form(form):
    assert form.errors()
    with pytest.raises(ValueError):
        make_generator().new_pipeline(form)


def test_seed_argument_builds_own_rng():
    a = MockTelemetryGenerator(seed=3, clock=lambda: NOW).pipelines()
    b = MockTelemetryGenerator(seed=3, clock=lambda: NOW).pipelines()
    assert a == b
