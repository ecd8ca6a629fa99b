"""
Source Panel - Choose the media source and start/stop analysis.
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QLineEdit, QLabel, QFileDialog, QFormLayout
)
from PySide6.QtCore import Slot

from ..console import OperatorConsole
from ..models import RemoteUrl, UploadedFile


class SourcePanel(QWidget):
    """Panel for selecting a stream URL or video file and gating analysis."""

    def __init__(self, console: OperatorConsole):
        super().__init__()
        self.console = console
        self._setup_ui()
        self.console.subscribe(self.refresh)
        self.refresh()

    def _setup_ui(self):
        """Setup the panel UI."""
        layout = QVBoxLayout(self)

        form = QFormLayout()

        # Stream URL (parsed on every read, so partial input is fine)
        self.edit_url = QLineEdit()
        self.edit_url.setPlaceholderText("https://www.youtube.com/watch?v=...")
        self.edit_url.textEdited.connect(self._on_url_edited)
        form.addRow("Stream URL:", self.edit_url)

        # Uploaded file
        file_row = QHBoxLayout()
        self.label_file = QLabel("No file selected")
        file_row.addWidget(self.label_file, 1)
        self.btn_browse = QPushButton("Browse...")
        self.btn_browse.clicked.connect(self._browse_file)
        file_row.addWidget(self.btn_browse)
        form.addRow("Video file:", file_row)

        layout.addLayout(form)

        self.label_status = QLabel()
        self.label_status.setStyleSheet("color: gray; font-style: italic;")
        layout.addWidget(self.label_status)

        buttons = QHBoxLayout()
        self.btn_start = QPushButton("▶ Start Analysis")
        self.btn_start.clicked.connect(self.console.start_analysis)
        buttons.addWidget(self.btn_start)

        self.btn_stop = QPushButton("⬛ Stop")
        self.btn_stop.clicked.connect(self.console.stop_analysis)
        buttons.addWidget(self.btn_stop)

        self.btn_clear = QPushButton("Clear Source")
        self.btn_clear.clicked.connect(self._clear_source)
        buttons.addWidget(self.btn_clear)
        layout.addLayout(buttons)

        layout.addStretch()

    @Slot(str)
    def _on_url_edited(self, text):
        if text.strip():
            self.console.select_remote_source(text)
        elif isinstance(self.console.media_source, RemoteUrl):
            self.console.clear_source()

    @Slot()
    def _browse_file(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Select Video", "", "Video Files (*.mp4 *.avi *.mov *.mkv *.webm);;All Files (*)"
        )
        if not path:
            return

        self.console.select_local_file(path)

    @Slot()
    def _clear_source(self):
        self.console.clear_source()

    @Slot()
    def refresh(self):
        """Sync widgets with the console's source and analysis state."""
        source = self.console.media_source
        running = self.console.sources.running

        if isinstance(source, UploadedFile):
            self.label_file.setText(f"{source.file_name} ({source.size_bytes / (1024 * 1024):.1f} MB)")
            self.edit_url.clear()
        else:
            self.label_file.setText("No file selected")
            if not isinstance(source, RemoteUrl):
                self.edit_url.clear()

        if isinstance(source, RemoteUrl):
            if source.is_valid:
                self.label_status.setText(f"Stream id: {source.parsed_id}")
            else:
                self.label_status.setText("Not a recognized stream URL yet")
        elif isinstance(source, UploadedFile):
            self.label_status.setText(f"Ready to analyze {source.file_name}")
        else:
            self.label_status.setText("Add a stream URL or a video file")

        # Adding sources is hidden while analysis runs
        self.edit_url.setEnabled(not running)
        self.btn_browse.setEnabled(not running)
        self.btn_clear.setEnabled(not running)
        self.btn_start.setEnabled(not running)
        self.btn_stop.setEnabled(running)
