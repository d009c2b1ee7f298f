import random
from datetime import datetime, timedelta

from smartbolt.gui.presenters import (
    alert_bar_items,
    fleet_temperature_trend,
    overview_cards,
    overview_rows,
    pipeline_counts,
    recent_alerts,
    sensor_status_items,
    temperature_series,
)
from smartbolt.io.settings import DEFAULT_STATUS_COLORS
from smartbolt.telemetry import DashboardSnapshot, MockTelemetryGenerator, Pipeline, PipelineStatus, Sensor
from smartbolt.telemetry.models import AlertSeverity, AlertType, TimeRange

NOW = datetime(2024, 6, 1, 12, 0, 0)


def make_sensor(sensor_id, temperature=20.0, pressure=400.0, battery=80.0, online=True, message=None, minutes_ago=0):
    return Sensor(
        id=sensor_id,
        serial_number="SB-10001",
        position="Center",
        installation_date=NOW - timedelta(days=100),
        current_temperature=temperature,
        current_pressure=pressure,
        battery_level=battery,
        last_update=NOW - timedelta(minutes=minutes_ago),
        is_online=online,
        has_alert=message is not None,
        alert_message=message,
    )


def make_snapshot():
    pipelines = (
        Pipeline(
            "GP001", "Main Distribution Line", "North Sector A", NOW, 1000.0, 80.0, 24.0, 1500.0,
            (make_sensor("GP001-SB01", temperature=30.0, pressure=500.0, battery=90.0),),
            PipelineStatus.NORMAL,
        ),
        Pipeline(
            "GP002", "Emergency Backup Line", "South Sector B", NOW, 800.0, 75.0, 18.0, 800.0,
            (make_sensor("GP002-SB01", battery=10.0, online=False, minutes_ago=7),),
            PipelineStatus.WARNING,
        ),
        Pipeline(
            "GP003", "Industrial Feed Line", "East Sector C", NOW, 1200.0, 85.0, 30.0, 2000.0,
            (make_sensor("GP003-SB01", temperature=40.0, pressure=700.0, battery=30.0,
                         message="Pressure reading above threshold"),),
            PipelineStatus.CRITICAL,
        ),
    )
    return DashboardSnapshot(generated_at=NOW, pipelines=pipelines)


def test_overview_cards():
    cards = {card.title: card for card in overview_cards(make_snapshot())}
    assert cards["Active Pipelines"].value == "3"
    assert cards["Online Smart Bolts"].value == "2/3"
    assert cards["Online Smart Bolts"].caption == "66.7% uptime"
    assert not cards["Online Smart Bolts"].positive
    assert cards["Active Alerts"].value == "1"
    # offline bolts count towards the averages
    assert cards["Avg Temperature"].value == "30.0°C"
    assert cards["Avg Pressure"].value == "533 PSI"
    assert cards["Avg Battery"].value == "43%"
    assert not cards["Avg Battery"].positive


def test_overview_cards_empty_fleet():
    cards = overview_cards(DashboardSnapshot(generated_at=NOW))
    assert cards[1].value == "0/0"
    assert cards[3].value == "0.0°C"


def test_overview_rows():
    rows = overview_rows(make_snapshot().pipelines)
    assert [(r.pipeline_id, r.active_sensors, r.total_sensors) for r in rows] == [
        ("GP001", 1, 1),
        ("GP002", 0, 1),
        ("GP003", 1, 1),
    ]


def test_recent_alerts_from_offline_and_alerting_bolts():
    alerts = recent_alerts(make_snapshot())
    assert [a.pipeline_id for a in alerts] == ["GP002", "GP003"]
    offline, pressure = alerts
    assert offline.type is AlertType.OFFLINE
    assert offline.severity is AlertSeverity.WARNING
    assert offline.age == "7 min ago"
    assert pressure.type is AlertType.HIGH_PRESSURE
    assert pressure.severity is AlertSeverity.CRITICAL
    assert pressure.message == "Pressure reading above threshold"
    assert pressure.age == "just now"
    assert [a.id for a in alerts] == ["1", "2"]


def test_pipeline_counts():
    counts = pipeline_counts(make_snapshot().pipelines)
    assert counts == {
        "normal": 1,
        "warning": 1,
        "critical": 1,
        "maintenance": 0,
        "total_sensors": 3,
        "online_sensors": 2,
        "alert_sensors": 1,
    }


def test_sensor_status_items_skip_empty_statuses():
    items = sensor_status_items(make_snapshot(), DEFAULT_STATUS_COLORS)
    assert items == [
        ("Normal", 1.0, DEFAULT_STATUS_COLORS["normal"]),
        ("Alert", 1.0, DEFAULT_STATUS_COLORS["alert"]),
        ("Offline", 1.0, DEFAULT_STATUS_COLORS["offline"]),
    ]


def test_alert_bar_items_use_severity_colors():
    snapshot = MockTelemetryGenerator(rng=random.Random(5), clock=lambda: NOW).snapshot()
    items = alert_bar_items(snapshot.stats, DEFAULT_STATUS_COLORS)
    assert [label for label, _, _ in items] == ["High Temperature", "High Pressure", "Low Battery", "Device Offline"]
    assert [value for _, value, _ in items] == [3.0, 1.0, 5.0, 2.0]
    assert items[1][2] == DEFAULT_STATUS_COLORS["critical"]
    assert items[2][2] == DEFAULT_STATUS_COLORS["info"]


def test_series_follow_time_range():
    snapshot = MockTelemetryGenerator(rng=random.Random(5), clock=lambda: NOW).snapshot()
    day = temperature_series(snapshot)
    hour = temperature_series(snapshot, TimeRange.HOUR)
    assert list(day) == ["GP001", "GP002", "GP003", "GP004"]
    assert all(len(points) == 24 for points in day.values())
    assert all(len(points) == 2 for points in hour.values())


def test_fleet_trend_sorted_by_hour():
    snapshot = MockTelemetryGenerator(rng=random.Random(5), clock=lambda: NOW).snapshot()
    trend = fleet_temperature_trend(snapshot)
    assert [hour for hour, _ in trend] == [float(h) for h in range(24)]
    noon = [s.value for s in snapshot.stats.temperature_history if s.timestamp == NOW]
    assert trend[12][1] == sum(noon) / len(noon)
