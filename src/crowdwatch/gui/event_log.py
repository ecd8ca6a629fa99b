"""
Event Log Widget - Live activity feed with follow-the-tail scrolling.
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QListWidget, QListWidgetItem, QAbstractItemView,
    QLabel, QLineEdit
)
from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QColor

from ..console import OperatorConsole
from ..models import Severity


SEVERITY_COLORS = {
    Severity.INFO: QColor(0, 0, 139),  # Dark blue
    Severity.WARNING: QColor(184, 134, 11),  # Dark yellow
    Severity.ERROR: QColor(139, 0, 0),  # Dark red
}


class EventLogWidget(QWidget):
    """
    Widget showing the console's activity log.

    Scroll positions are reported to the console, which decides whether new
    entries scroll into view or raise the "New messages" button.
    """

    def __init__(self, console: OperatorConsole):
        super().__init__()
        self.console = console
        self._shown_ids = []  # ids currently rendered, oldest first
        self._syncing = False
        self._scroll_pending = False

        self._setup_ui()

        self.console.follow.on_auto_scroll = self._request_scroll
        self.console.subscribe(self.refresh)
        self.refresh()

    def _setup_ui(self):
        """Setup the widget UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        header = QHBoxLayout()
        header.addWidget(QLabel("<b>Live Activity Logs</b>"))
        header.addStretch()

        self.btn_new_messages = QPushButton("↓ New messages")
        self.btn_new_messages.setVisible(False)
        self.btn_new_messages.clicked.connect(self.console.jump_to_latest)
        header.addWidget(self.btn_new_messages)
        layout.addLayout(header)

        self.list = QListWidget()
        self.list.setVerticalScrollMode(QAbstractItemView.ScrollPerPixel)
        self.list.setSelectionMode(QAbstractItemView.NoSelection)
        self.list.verticalScrollBar().valueChanged.connect(self._on_scrolled)
        layout.addWidget(self.list)

        # Chat entry
        chat_layout = QHBoxLayout()
        self.edit_message = QLineEdit()
        self.edit_message.setPlaceholderText("Type a message...")
        self.edit_message.returnPressed.connect(self._send_message)
        chat_layout.addWidget(self.edit_message)

        self.btn_send = QPushButton("Send")
        self.btn_send.clicked.connect(self._send_message)
        chat_layout.addWidget(self.btn_send)
        layout.addLayout(chat_layout)

    @Slot()
    def refresh(self):
        """Bring the list in line with the console's log."""
        entries = self.console.entries
        kept_ids = {entry.id for entry in entries}

        self._syncing = True
        try:
            # Drop evicted entries from the top
            while self._shown_ids and self._shown_ids[0] not in kept_ids:
                self._shown_ids.pop(0)
                self.list.takeItem(0)

            last_id = self._shown_ids[-1] if self._shown_ids else 0
            for entry in entries:
                if entry.id > last_id:
                    self._add_entry(entry)
        finally:
            self._syncing = False

        self.btn_new_messages.setVisible(self.console.follow.new_messages_available)

        if self._scroll_pending:
            self._scroll_pending = False
            # Wait for the list to lay out the new rows
            QTimer.singleShot(0, self.list.scrollToBottom)

    def _add_entry(self, entry):
        time_str = entry.timestamp.astimezone().strftime("%H:%M:%S")
        item = QListWidgetItem(f"[{time_str}] {entry.message}")
        item.setForeground(SEVERITY_COLORS[entry.severity])
        item.setData(Qt.UserRole, entry.id)
        self.list.addItem(item)
        self._shown_ids.append(entry.id)

    def _request_scroll(self):
        self._scroll_pending = True

    @Slot(int)
    def _on_scrolled(self, value):
        if self._syncing or self.console.closed:
            return
        bar = self.list.verticalScrollBar()
        self.console.scroll_sampled(
            scroll_top=value,
            scroll_height=bar.maximum() + bar.pageStep(),
            client_height=bar.pageStep(),
        )

    @Slot()
    def _send_message(self):
        if self.console.send_chat_message(self.edit_message.text()):
            self.edit_message.clear()

    def get_event_count(self):
        """Return number of entries shown."""
        return len(self._shown_ids)
