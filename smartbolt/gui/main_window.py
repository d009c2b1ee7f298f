"""Qt-based main window: splash, login and the monitoring dashboard."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from PySide6.QtCore import Qt, QTimer, Signal, Slot
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QStackedWidget,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from smartbolt.gui.presenters import (
    MetricCard,
    alert_bar_items,
    fleet_temperature_trend,
    overview_cards,
    overview_rows,
    pipeline_counts,
    pipeline_status_color,
    pressure_series,
    recent_alerts,
    sensor_status_color,
    sensor_status_items,
    temperature_series,
)
from smartbolt.gui.state import AppScreen, AppState, DashboardSection, SnapshotCell, validate_login
from smartbolt.gui.widgets import BarChart, LineChart, MultiSeriesChart, PieChart
from smartbolt.io import AppSettings
from smartbolt.telemetry import DashboardSnapshot, Pipeline, PipelineForm, TelemetrySource
from smartbolt.telemetry.models import TimeRange

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Layout constants
SIDEBAR_WIDTH = 200
METRIC_COLUMNS = 3
SPLASH_TITLE = "SmartBolt"
SPLASH_SUBTITLE = "Gas pipeline monitoring"

PipelineFactory = Callable[[PipelineForm, Sequence[str]], Pipeline]


def _fill_table(table: QTableWidget, rows: List[List[str]]) -> None:
    table.setRowCount(len(rows))
    for row_idx, row in enumerate(rows):
        for col, text in enumerate(row):
            item = QTableWidgetItem(text)
            item.setTextAlignment(Qt.AlignCenter)
            table.setItem(row_idx, col, item)
    table.resizeColumnsToContents()


def _make_table(headers: List[str]) -> QTableWidget:
    table = QTableWidget(0, len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.verticalHeader().setVisible(False)
    table.setEditTriggers(QTableWidget.NoEditTriggers)
    return table


class SplashPane(QWidget):
    """Logo and loading text shown at start-up."""

    def __init__(self) -> None:
        super().__init__()
        title = QLabel(SPLASH_TITLE)
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet("font-size: 42px; font-weight: bold;")
        subtitle = QLabel(SPLASH_SUBTITLE)
        subtitle.setAlignment(Qt.AlignCenter)
        self.loading_label = QLabel("Loading...")
        self.loading_label.setAlignment(Qt.AlignCenter)

        layout = QVBoxLayout()
        layout.addStretch()
        layout.addWidget(title)
        layout.addWidget(subtitle)
        layout.addWidget(self.loading_label)
        layout.addStretch()
        self.setLayout(layout)


class LoginPane(QWidget):
    """Email/password form. Only checks that both fields are filled in."""

    login_accepted = Signal(str)

    def __init__(self) -> None:
        super().__init__()
        self.email_edit = QLineEdit()
        self.email_edit.setPlaceholderText("Enter your email address")
        self.password_edit = QLineEdit()
        self.password_edit.setPlaceholderText("Enter your password")
        self.password_edit.setEchoMode(QLineEdit.Password)
        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #e74c3c;")
        self.login_btn = QPushButton("Sign In")
        self.login_btn.setEnabled(False)

        form = QFormLayout()
        form.addRow("Email", self.email_edit)
        form.addRow("Password", self.password_edit)

        box = QGroupBox("Welcome back")
        box_layout = QVBoxLayout()
        box_layout.addLayout(form)
        box_layout.addWidget(self.error_label)
        box_layout.addWidget(self.login_btn)
        box.setLayout(box_layout)
        box.setMaximumWidth(420)

        layout = QHBoxLayout()
        layout.addStretch()
        layout.addWidget(box)
        layout.addStretch()
        self.setLayout(layout)

        self.email_edit.textChanged.connect(self._update_button)
        self.password_edit.textChanged.connect(self._update_button)
        self.password_edit.returnPressed.connect(self._submit)
        self.login_btn.clicked.connect(self._submit)

    def _update_button(self) -> None:
        self.login_btn.setEnabled(bool(self.email_edit.text()) and bool(self.password_edit.text()))

    def _submit(self) -> None:
        error = validate_login(self.email_edit.text(), self.password_edit.text())
        if error:
            self.error_label.setText(error)
            return
        self.error_label.clear()
        self.login_accepted.emit(self.email_edit.text().strip())

    def reset(self) -> None:
        self.password_edit.clear()
        self.error_label.clear()


class MetricGrid(QGroupBox):
    """Grid of headline metric cards."""

    def __init__(self, title: str) -> None:
        super().__init__(title)
        self.grid = QGridLayout()
        self.setLayout(self.grid)
        self._labels: List[QLabel] = []

    def update_cards(self, cards: List[MetricCard]) -> None:
        while len(self._labels) < len(cards):
            label = QLabel()
            label.setTextFormat(Qt.RichText)
            idx = len(self._labels)
            self.grid.addWidget(label, idx // METRIC_COLUMNS, idx % METRIC_COLUMNS)
            self._labels.append(label)
        for label, card in zip(self._labels, cards):
            tone = "#1acc66" if card.positive else "#ff9900"
            label.setText(
                f"<b style='font-size:18px'>{card.value}</b><br>{card.title}<br>"
                f"<span style='color:{tone}'>{card.caption}</span>"
            )


class OverviewPage(QWidget):
    """Fleet metrics, temperature trend, bolt status and the alert feed."""

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self._settings = settings
        self.metrics = MetricGrid("Smart Bolt Network")
        self.trend_chart = LineChart(color=settings.palette[0])
        self.status_chart = PieChart(caption="Bolts", unit="")
        self.status_table = _make_table(["Pipeline", "Location", "Status", "Bolts"])
        self.alert_list = QListWidget()

        trend_box = QGroupBox("Average Temperature (24H)")
        trend_layout = QVBoxLayout()
        trend_layout.addWidget(self.trend_chart)
        trend_box.setLayout(trend_layout)

        status_box = QGroupBox("Bolt Status")
        status_layout = QVBoxLayout()
        status_layout.addWidget(self.status_chart)
        status_box.setLayout(status_layout)

        pipelines_box = QGroupBox("Pipelines")
        pipelines_layout = QVBoxLayout()
        pipelines_layout.addWidget(self.status_table)
        pipelines_box.setLayout(pipelines_layout)

        alerts_box = QGroupBox("Recent Alerts")
        alerts_layout = QVBoxLayout()
        alerts_layout.addWidget(self.alert_list)
        alerts_box.setLayout(alerts_layout)

        charts_row = QHBoxLayout()
        charts_row.addWidget(trend_box, stretch=2)
        charts_row.addWidget(status_box, stretch=1)
        lists_row = QHBoxLayout()
        lists_row.addWidget(pipelines_box, stretch=2)
        lists_row.addWidget(alerts_box, stretch=1)

        layout = QVBoxLayout()
        layout.addWidget(self.metrics)
        layout.addLayout(charts_row)
        layout.addLayout(lists_row)
        self.setLayout(layout)

    def update_snapshot(self, snapshot: DashboardSnapshot) -> None:
        colors = self._settings.status_colors
        self.metrics.update_cards(overview_cards(snapshot))
        self.trend_chart.set_points(fleet_temperature_trend(snapshot))
        self.status_chart.set_items(sensor_status_items(snapshot, colors))

        rows = overview_rows(snapshot.pipelines)
        _fill_table(
            self.status_table,
            [[r.name, r.location, r.status.display_name, f"{r.active_sensors}/{r.total_sensors}"] for r in rows],
        )
        for idx, row in enumerate(rows):
            self.status_table.item(idx, 2).setForeground(QColor(pipeline_status_color(row.status, colors)))

        self.alert_list.clear()
        alerts = recent_alerts(snapshot)
        if not alerts:
            self.alert_list.addItem("No active alerts")
        for alert in alerts:
            self.alert_list.addItem(f"[{alert.severity.value.upper()}] {alert.pipeline_id}: {alert.message} ({alert.age})")


class PipelinesPage(QWidget):
    """Pipeline list with per-pipeline bolt details."""

    add_requested = Signal()

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self._settings = settings
        self._pipelines: List[Pipeline] = []
        self.summary_label = QLabel()
        self.add_btn = QPushButton("Add Pipeline")
        self.table = _make_table(
            ["ID", "Name", "Location", "Status", "Diameter [in]", "Length [m]", "Avg Temp", "Avg Pressure", "Bolts", "Alerts"]
        )
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setSelectionMode(QTableWidget.SingleSelection)
        self.sensor_table = _make_table(["Bolt", "Serial", "Position", "Temp [°C]", "Pressure [PSI]", "Battery", "Status", "Message"])

        header = QHBoxLayout()
        header.addWidget(self.summary_label)
        header.addStretch()
        header.addWidget(self.add_btn)

        details = QGroupBox("Smart Bolts")
        details_layout = QVBoxLayout()
        details_layout.addWidget(self.sensor_table)
        details.setLayout(details_layout)

        layout = QVBoxLayout()
        layout.addLayout(header)
        layout.addWidget(self.table, stretch=2)
        layout.addWidget(details, stretch=1)
        self.setLayout(layout)

        self.add_btn.clicked.connect(self.add_requested.emit)
        self.table.itemSelectionChanged.connect(self._show_selected)

    def set_add_enabled(self, enabled: bool) -> None:
        self.add_btn.setEnabled(enabled)

    def update_snapshot(self, snapshot: DashboardSnapshot) -> None:
        selected = self._selected_id()
        self._pipelines = list(snapshot.pipelines)
        counts = pipeline_counts(self._pipelines)
        self.summary_label.setText(
            f"{len(self._pipelines)} pipelines | normal {counts['normal']}, warning {counts['warning']}, "
            f"critical {counts['critical']}, maintenance {counts['maintenance']} | "
            f"bolts online {counts['online_sensors']}/{counts['total_sensors']}, alerts {counts['alert_sensors']}"
        )
        _fill_table(
            self.table,
            [
                [
                    p.id,
                    p.name,
                    p.location,
                    p.status.display_name,
                    f"{p.diameter:.0f}",
                    f"{p.length:.0f}",
                    f"{p.average_temperature:.1f}°C",
                    f"{p.average_pressure:.0f} PSI",
                    f"{p.active_count}/{len(p.sensors)}",
                    str(p.alert_count),
                ]
                for p in self._pipelines
            ],
        )
        for idx, pipeline in enumerate(self._pipelines):
            if pipeline.id == selected:
                self.table.selectRow(idx)
                break
        self._show_selected()

    def _selected_id(self) -> Optional[str]:
        rows = self.table.selectionModel().selectedRows() if self.table.selectionModel() else []
        if not rows:
            return None
        item = self.table.item(rows[0].row(), 0)
        return item.text() if item else None

    def _show_selected(self) -> None:
        selected = self._selected_id()
        pipeline = next((p for p in self._pipelines if p.id == selected), None)
        if pipeline is None:
            self.sensor_table.setRowCount(0)
            return
        _fill_table(
            self.sensor_table,
            [
                [
                    s.id,
                    s.serial_number,
                    s.position,
                    f"{s.current_temperature:.1f}",
                    f"{s.current_pressure:.0f}",
                    f"{s.battery_level:.0f}%",
                    s.status.name.replace("_", " ").title(),
                    s.alert_message or "-",
                ]
                for s in pipeline.sensors
            ],
        )
        for idx, sensor in enumerate(pipeline.sensors):
            self.sensor_table.item(idx, 6).setForeground(QColor(sensor_status_color(sensor.status, self._settings.status_colors)))


class StatisticsPage(QWidget):
    """Temperature/pressure trends, alert summary and performance metrics."""

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self._settings = settings
        self._snapshot: Optional[DashboardSnapshot] = None

        self.range_combo = QComboBox()
        for time_range in TimeRange:
            self.range_combo.addItem(time_range.value, time_range)
        self.range_combo.setCurrentIndex(list(TimeRange).index(TimeRange.DAY))

        self.temperature_chart = MultiSeriesChart(settings.palette)
        self.pressure_chart = MultiSeriesChart(settings.palette)
        self.alert_chart = BarChart()
        self.metrics_label = QLabel()
        self.metrics_label.setTextFormat(Qt.RichText)
        self.overview_table = _make_table(["Pipeline", "Avg Temp", "Avg Pressure", "Smart Bolts", "Efficiency"])

        range_row = QHBoxLayout()
        range_row.addWidget(QLabel("Time Range:"))
        range_row.addStretch()
        range_row.addWidget(self.range_combo)

        top = QHBoxLayout()
        top.addWidget(self._boxed("Temperature Trends", self.temperature_chart))
        top.addWidget(self._boxed("Pressure Monitoring", self.pressure_chart))
        middle = QHBoxLayout()
        middle.addWidget(self._boxed("Alert Summary", self.alert_chart))
        middle.addWidget(self._boxed("Performance Metrics", self.metrics_label))

        layout = QVBoxLayout()
        layout.addLayout(range_row)
        layout.addLayout(top)
        layout.addLayout(middle)
        layout.addWidget(self._boxed("Pipeline Overview", self.overview_table))
        self.setLayout(layout)

        self.range_combo.currentIndexChanged.connect(self._redraw_trends)

    @staticmethod
    def _boxed(title: str, widget: QWidget) -> QGroupBox:
        box = QGroupBox(title)
        box_layout = QVBoxLayout()
        box_layout.addWidget(widget)
        box.setLayout(box_layout)
        return box

    def selected_range(self) -> TimeRange:
        return self.range_combo.currentData() or TimeRange.DAY

    def _redraw_trends(self) -> None:
        if self._snapshot is None:
            return
        time_range = self.selected_range()
        self.temperature_chart.set_series(temperature_series(self._snapshot, time_range))
        self.pressure_chart.set_series(pressure_series(self._snapshot, time_range))

    def update_snapshot(self, snapshot: DashboardSnapshot) -> None:
        self._snapshot = snapshot
        stats = snapshot.stats
        self._redraw_trends()
        self.alert_chart.set_items(alert_bar_items(stats, self._settings.status_colors))
        self.metrics_label.setText(
            "<br>".join(
                f"{m.name}: <b>{m.value:.1f} {m.unit}</b> ({m.trend.value})" for m in stats.performance_metrics
            )
        )
        _fill_table(
            self.overview_table,
            [
                [
                    row.name,
                    f"{row.avg_temperature:.1f}°C",
                    f"{row.avg_pressure:.0f} PSI",
                    f"{row.active_sensors}/{row.total_sensors}",
                    f"{row.efficiency:.1f}%",
                ]
                for row in stats.pipeline_overview
            ],
        )


class AddPipelineDialog(QDialog):
    """Collects the fields needed to register a new pipeline."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Add Gas Pipeline")
        self.name_edit = QLineEdit()
        self.location_edit = QLineEdit()
        self.diameter_spin = self._spin(1.0, 60.0, 12.0)
        self.length_spin = self._spin(10.0, 100_000.0, 1000.0)
        self.pressure_spin = self._spin(10.0, 5000.0, 800.0)
        self.temperature_spin = self._spin(1.0, 200.0, 75.0)

        form = QFormLayout()
        form.addRow("Name", self.name_edit)
        form.addRow("Location", self.location_edit)
        form.addRow("Diameter [in]", self.diameter_spin)
        form.addRow("Length [m]", self.length_spin)
        form.addRow("Max pressure [PSI]", self.pressure_spin)
        form.addRow("Max temperature [°C]", self.temperature_spin)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        layout = QVBoxLayout()
        layout.addLayout(form)
        layout.addWidget(self.buttons)
        self.setLayout(layout)

        self.name_edit.textChanged.connect(self._update_save)
        self.location_edit.textChanged.connect(self._update_save)
        self._update_save()

    @staticmethod
    def _spin(lo: float, hi: float, value: float) -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setRange(lo, hi)
        spin.setDecimals(1)
        spin.setValue(value)
        return spin

    def _update_save(self) -> None:
        self.buttons.button(QDialogButtonBox.Save).setEnabled(not self.form().errors())

    def form(self) -> PipelineForm:
        return PipelineForm(
            name=self.name_edit.text(),
            location=self.location_edit.text(),
            diameter=self.diameter_spin.value(),
            length=self.length_spin.value(),
            max_pressure=self.pressure_spin.value(),
            max_temperature=self.temperature_spin.value(),
        )


class DashboardPane(QWidget):
    """Sidebar navigation plus the three dashboard pages."""

    section_requested = Signal(object)
    refresh_requested = Signal()
    logout_requested = Signal()

    def __init__(self, settings: AppSettings) -> None:
        super().__init__()
        self.overview_page = OverviewPage(settings)
        self.pipelines_page = PipelinesPage(settings)
        self.statistics_page = StatisticsPage(settings)
        self._pages: Dict[DashboardSection, QWidget] = {
            DashboardSection.OVERVIEW: self.overview_page,
            DashboardSection.PIPELINES: self.pipelines_page,
            DashboardSection.STATISTICS: self.statistics_page,
        }
        self.stack = QStackedWidget()
        for page in self._pages.values():
            self.stack.addWidget(page)

        sidebar = QWidget()
        sidebar.setFixedWidth(SIDEBAR_WIDTH)
        sidebar_layout = QVBoxLayout()
        sidebar_layout.addWidget(QLabel(f"<b>{SPLASH_TITLE}</b>"))
        self._section_buttons: Dict[DashboardSection, QPushButton] = {}
        for section in DashboardSection:
            btn = QPushButton(section.value)
            btn.setCheckable(True)
            btn.clicked.connect(lambda _, s=section: self.section_requested.emit(s))
            sidebar_layout.addWidget(btn)
            self._section_buttons[section] = btn
        sidebar_layout.addStretch()
        self.updated_label = QLabel("Last update: --")
        refresh_btn = QPushButton("Refresh")
        refresh_btn.clicked.connect(self.refresh_requested.emit)
        logout_btn = QPushButton("Sign Out")
        logout_btn.clicked.connect(self.logout_requested.emit)
        sidebar_layout.addWidget(self.updated_label)
        sidebar_layout.addWidget(refresh_btn)
        sidebar_layout.addWidget(logout_btn)
        sidebar.setLayout(sidebar_layout)

        layout = QHBoxLayout()
        layout.addWidget(sidebar)
        layout.addWidget(self.stack, stretch=1)
        self.setLayout(layout)

    def show_section(self, section: DashboardSection) -> None:
        self.stack.setCurrentWidget(self._pages[section])
        for key, btn in self._section_buttons.items():
            btn.setChecked(key is section)

    def update_snapshot(self, snapshot: DashboardSnapshot) -> None:
        self.updated_label.setText(f"Last update: {snapshot.generated_at:%H:%M:%S}")
        self.overview_page.update_snapshot(snapshot)
        self.pipelines_page.update_snapshot(snapshot)
        self.statistics_page.update_snapshot(snapshot)


class MainWindow(QMainWindow):
    """Main UI window switching between splash, login and dashboard."""

    def __init__(
        self,
        source: TelemetrySource,
        settings: Optional[AppSettings] = None,
        pipeline_factory: Optional[PipelineFactory] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("SmartBolt Monitor")
        self._settings = settings or AppSettings()
        self.resize(*self._settings.window_size)

        self.source = source
        self.pipeline_factory = pipeline_factory
        self.state = AppState()
        self.snapshot = SnapshotCell()
        # Pipelines added by the operator survive refreshes for the session.
        self._added: List[Pipeline] = []

        self.splash_pane = SplashPane()
        self.login_pane = LoginPane()
        self.dashboard_pane = DashboardPane(self._settings)
        self._screens: Dict[AppScreen, QWidget] = {
            AppScreen.SPLASH: self.splash_pane,
            AppScreen.LOGIN: self.login_pane,
            AppScreen.DASHBOARD: self.dashboard_pane,
        }
        self.stack = QStackedWidget()
        for screen in self._screens.values():
            self.stack.addWidget(screen)
        self.setCentralWidget(self.stack)

        self.login_pane.login_accepted.connect(self._on_login)
        self.dashboard_pane.section_requested.connect(self._on_section)
        self.dashboard_pane.refresh_requested.connect(self.refresh_snapshot)
        self.dashboard_pane.logout_requested.connect(self._on_logout)
        self.dashboard_pane.pipelines_page.add_requested.connect(self._on_add_pipeline)
        self.dashboard_pane.pipelines_page.set_add_enabled(pipeline_factory is not None)

        self.apply_state(self.state)

    def apply_state(self, state: AppState) -> None:
        self.state = state
        self.stack.setCurrentWidget(self._screens[state.screen])
        if state.screen is AppScreen.DASHBOARD:
            self.dashboard_pane.show_section(state.section)
        logger.debug("Screen %s (section %s)", state.screen.name, state.section.name)

    def show_login(self) -> None:
        if self.state.screen is AppScreen.SPLASH:
            self.apply_state(self.state.to_login())

    @Slot()
    def refresh_snapshot(self) -> None:
        snapshot = self.source.snapshot()
        for pipeline in self._added:
            snapshot = snapshot.with_pipeline(pipeline)
        self.snapshot.replace(snapshot)
        if self.state.screen is AppScreen.DASHBOARD:
            self.dashboard_pane.update_snapshot(snapshot)

    def _on_login(self, email: str) -> None:
        logger.info("Signed in as %s", email)
        self.apply_state(self.state.to_dashboard())
        if self.snapshot.current is None:
            self.refresh_snapshot()
        else:
            self.dashboard_pane.update_snapshot(self.snapshot.current)

    def _on_section(self, section: DashboardSection) -> None:
        self.apply_state(self.state.select_section(section))

    def _on_logout(self) -> None:
        logger.info("Signed out")
        self.login_pane.reset()
        self.apply_state(self.state.logout())

    def _on_add_pipeline(self) -> None:
        if self.pipeline_factory is None:
            return
        dialog = AddPipelineDialog(self)
        if dialog.exec() != QDialog.Accepted:
            return
        current = self.snapshot.current
        existing = [p.id for p in current.pipelines] if current else []
        try:
            pipeline = self.pipeline_factory(dialog.form(), existing)
        except ValueError as exc:
            QMessageBox.warning(self, "Invalid Pipeline", str(exc))
            return
        self._added.append(pipeline)
        if current is not None:
            self.snapshot.replace(current.with_pipeline(pipeline))
            self.dashboard_pane.update_snapshot(self.snapshot.current)


def run_gui(
    source: TelemetrySource,
    settings: Optional[AppSettings] = None,
    pipeline_factory: Optional[PipelineFactory] = None,
    skip_splash: bool = False,
) -> None:
    """Launch the GUI and periodically pull snapshots from ``source``."""
    settings = settings or AppSettings()
    app = QApplication.instance() or QApplication([])
    window = MainWindow(source, settings=settings, pipeline_factory=pipeline_factory)

    timer = QTimer()
    timer.timeout.connect(window.refresh_snapshot)
    timer.start(settings.refresh_interval_ms)

    if skip_splash:
        window.show_login()
    else:
        QTimer.singleShot(settings.splash_duration_ms, window.show_login)

    logger.info("Dashboard refresh every %d ms", settings.refresh_interval_ms)
    window.show()
    window.refresh_snapshot()
    app.exec()
