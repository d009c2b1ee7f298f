import dataclasses
from datetime import datetime

import pytest

from smartbolt.telemetry import (
    DashboardSnapshot,
    DuplicateEntityError,
    Pipeline,
    PipelineStatus,
    Sensor,
    SensorStatus,
)
from smartbolt.telemetry.models import (
    alerting_sensors,
    count_by_status,
    online_sensors,
    pipeline_collection,
    total_sensors,
)

NOW = datetime(2024, 6, 1, 12, 0, 0)


def make_sensor(sensor_id="GP001-SB01", temperature=20.0, pressure=400.0, battery=80.0, online=True, alert=False):
    return Sensor(
        id=sensor_id,
        serial_number="SB-12345",
        position="Center",
        installation_date=NOW,
        current_temperature=temperature,
        current_pressure=pressure,
        battery_level=battery,
        last_update=NOW,
        is_online=online,
        has_alert=alert,
        alert_message="Maintenance required" if alert else None,
    )


def make_pipeline(pipeline_id="GP001", sensors=(), status=PipelineStatus.NORMAL):
    return Pipeline(
        id=pipeline_id,
        name="Main Distribution Line",
        location="North Sector A",
        installation_date=NOW,
        max_pressure=1000.0,
        max_temperature=80.0,
        diameter=24.0,
        length=1500.0,
        sensors=tuple(sensors),
        status=status,
    )


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        ({}, SensorStatus.NORMAL),
        ({"battery": 19.9}, SensorStatus.LOW_BATTERY),
        ({"battery": 20.0}, SensorStatus.NORMAL),
        ({"battery": 5.0, "alert": True}, SensorStatus.ALERT),
        ({"battery": 5.0, "alert": True, "online": False}, SensorStatus.OFFLINE),
        ({"online": False}, SensorStatus.OFFLINE),
    ],
)
def test_sensor_status_priority(kwargs, expected):
    assert make_sensor(**kwargs).status is expected


def test_averages_include_offline_sensors():
    pipeline = make_pipeline(
        sensors=[
            make_sensor("a", temperature=10.0, pressure=100.0),
            make_sensor("b", temperature=30.0, pressure=300.0, online=False),
        ]
    )
    assert pipeline.average_temperature == pytest.approx(20.0)
    assert pipeline.average_pressure == pytest.approx(200.0)
    assert pipeline.active_count == 1
    assert pipeline.alert_count == 0


def test_pipeline_without_sensors():
    pipeline = make_pipeline()
    assert pipeline.average_temperature == 0.0
    assert pipeline.average_pressure == 0.0
    assert pipeline.active_count == 0


def test_models_are_frozen():
    sensor = make_sensor()
    with pytest.raises(dataclasses.FrozenInstanceError):
        sensor.battery_level = 1.0


def test_pipeline_collection_rejects_duplicates():
    with pytest.raises(DuplicateEntityError):
        pipeline_collection([make_pipeline("GP001"), make_pipeline("GP002"), make_pipeline("GP001")])


def test_fleet_counters():
    pipelines = [
        make_pipeline("GP001", [make_sensor(alert=True)], PipelineStatus.CRITICAL),
        make_pipeline("GP002", [make_sensor(online=False)], PipelineStatus.WARNING),
        make_pipeline("GP003", [make_sensor(), make_sensor("x")]),
    ]
    assert total_sensors(pipelines) == 4
    assert online_sensors(pipelines) == 3
    assert alerting_sensors(pipelines) == 1
    counts = count_by_status(pipelines)
    assert counts[PipelineStatus.NORMAL] == 1
    assert counts[PipelineStatus.WARNING] == 1
    assert counts[PipelineStatus.CRITICAL] == 1
    assert counts[PipelineStatus.MAINTENANCE] == 0


def test_with_pipeline_returns_new_snapshot():
    snapshot = DashboardSnapshot(generated_at=NOW, pipelines=(make_pipeline("GP001"),))
    updated = snapshot.with_pipeline(make_pipeline("GP500"))
    assert [p.id for p in snapshot.pipelines] == ["GP001"]
    assert [p.id for p in updated.pipelines] == ["GP001", "GP500"]
    assert updated.generated_at == NOW

    with pytest.raises(DuplicateEntityError):
        updated.with_pipeline(make_pipeline("GP500"))


def test_status_display_name():
    assert PipelineStatus.MAINTENANCE.display_name == "Maintenance"
