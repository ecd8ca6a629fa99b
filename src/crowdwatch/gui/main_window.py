"""
Main Window for the Crowd Watch operator console.
"""

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QStatusBar, QToolBar, QMessageBox,
    QLabel, QSplitter, QFrame, QPushButton
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QAction

from ..console import OperatorConsole
from ..models import AnalysisState
from .event_log import EventLogWidget
from .source_panel import SourcePanel


CRITICAL_STYLE = "QMainWindow { background-color: #dc2626; }"


class MainWindow(QMainWindow):
    """Main application window for the operator console."""

    def __init__(self, console: OperatorConsole):
        super().__init__()
        self.console = console
        self.setWindowTitle("Crowd Watch - Operator Console")
        self.setMinimumSize(1100, 700)

        # Setup UI
        self._setup_toolbar()
        self._setup_central_widget()
        self._setup_statusbar()

        self.console.subscribe(self._update_status)
        self._update_status()

    def _setup_toolbar(self):
        """Create the toolbar."""
        toolbar = QToolBar("Main Toolbar")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.action_start = QAction("▶ Start", self)
        self.action_start.triggered.connect(self.console.start_analysis)
        toolbar.addAction(self.action_start)

        self.action_stop = QAction("⬛ Stop", self)
        self.action_stop.triggered.connect(self.console.stop_analysis)
        toolbar.addAction(self.action_stop)

        toolbar.addSeparator()

        action_about = QAction("About", self)
        action_about.triggered.connect(self._show_about)
        toolbar.addAction(action_about)

    def _setup_central_widget(self):
        """Create the central widget with main layout."""
        central = QWidget()
        self.setCentralWidget(central)

        layout = QVBoxLayout(central)
        layout.setContentsMargins(5, 5, 5, 5)

        # Critical alert banner
        self.banner = QLabel("🚨 CRITICAL ALERT - Security breach detected - Immediate action required")
        self.banner.setAlignment(Qt.AlignCenter)
        self.banner.setStyleSheet(
            "background-color: #b91c1c; color: white; font-size: 20px; font-weight: bold; padding: 12px;"
        )
        self.banner.setVisible(False)
        layout.addWidget(self.banner)

        splitter = QSplitter(Qt.Horizontal)

        # Left panel - Source, density and alerts
        left_panel = QFrame()
        left_panel.setFrameStyle(QFrame.StyledPanel)
        left_layout = QVBoxLayout(left_panel)

        left_layout.addWidget(QLabel("<b>Media Source</b>"))
        self.source_panel = SourcePanel(self.console)
        left_layout.addWidget(self.source_panel)

        left_layout.addWidget(QLabel("<b>Crowd Density</b>"))
        self.label_density = QLabel()
        left_layout.addWidget(self.label_density)
        self.label_zones = QLabel()
        self.label_zones.setStyleSheet("color: gray;")
        left_layout.addWidget(self.label_zones)

        alert_row = QHBoxLayout()
        self.btn_alert = QPushButton("Send Alert")
        self.btn_alert.clicked.connect(self.console.send_alert)
        alert_row.addWidget(self.btn_alert)

        self.btn_critical = QPushButton("CRITICAL ALERT")
        self.btn_critical.setStyleSheet("background-color: #991b1b; color: white; font-weight: bold;")
        self.btn_critical.clicked.connect(self.console.send_critical_alert)
        alert_row.addWidget(self.btn_critical)
        left_layout.addLayout(alert_row)

        left_layout.addStretch()
        splitter.addWidget(left_panel)

        # Right panel - Activity log
        right_panel = QFrame()
        right_panel.setFrameStyle(QFrame.StyledPanel)
        right_layout = QVBoxLayout(right_panel)

        self.event_log = EventLogWidget(self.console)
        right_layout.addWidget(self.event_log)
        splitter.addWidget(right_panel)

        # Set initial splitter sizes (40% controls, 60% log)
        splitter.setSizes([400, 600])
        layout.addWidget(splitter)

    def _setup_statusbar(self):
        """Create the status bar."""
        self.statusbar = QStatusBar()
        self.setStatusBar(self.statusbar)

        self.status_label = QLabel("Ready")
        self.statusbar.addWidget(self.status_label)

        # Spacer
        self.statusbar.addPermanentWidget(QWidget(), 1)

        self.operator_label = QLabel(f"Operator: {self.console.settings.operator_name}")
        self.statusbar.addPermanentWidget(self.operator_label)

        self.event_count_label = QLabel("Events: 0")
        self.statusbar.addPermanentWidget(self.event_count_label)

    @Slot()
    def _update_status(self):
        """Update banner, density and status bar from the console."""
        running = self.console.analysis_state is AnalysisState.RUNNING
        self.action_start.setEnabled(not running)
        self.action_stop.setEnabled(running)

        if running:
            self.status_label.setText("Analysis Running...")
            self.status_label.setStyleSheet("color: green; font-weight: bold;")
        else:
            self.status_label.setText("Idle")
            self.status_label.setStyleSheet("")

        alert = self.console.alert_active
        self.banner.setVisible(alert)
        self.setStyleSheet(CRITICAL_STYLE if alert else "")

        density = self.console.density
        if density is None:
            self.label_density.setText("No readings yet")
            self.label_zones.setText("")
        else:
            self.label_density.setText(f"{density.total_count} / {density.capacity} people")
            self.label_zones.setText("\n".join(density.describe_zones()))

        self.event_count_label.setText(f"Events: {len(self.console.entries)}")

    @Slot()
    def _show_about(self):
        """Show about dialog."""
        QMessageBox.about(
            self,
            "About Crowd Watch",
            "<h3>Crowd Watch</h3>"
            "<p>Operator console for live security telemetry.</p>"
            "<ul>"
            "<li>Live activity log with follow-the-tail scrolling</li>"
            "<li>Timed critical alerts</li>"
            "<li>Stream URL or video file sources</li>"
            "<li>Simulated per-zone occupancy</li>"
            "</ul>"
        )

    def closeEvent(self, event):
        """Handle window close event."""
        if self.console.analysis_state is AnalysisState.RUNNING:
            reply = QMessageBox.question(
                self,
                "Confirm Exit",
                "Analysis is currently running. Are you sure you want to exit?",
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No
            )
            if reply == QMessageBox.No:
                event.ignore()
                return

        # Tear down timers and release any uploaded file
        self.console.close()
        event.accept()
