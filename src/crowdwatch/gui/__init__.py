"""
Crowd Watch - GUI Module
PySide6-based desktop window for the operator console.
"""

from .event_log import EventLogWidget
from .main_window import MainWindow
from .scheduler import QtScheduler
from .source_panel import SourcePanel

__all__ = ['EventLogWidget', 'MainWindow', 'QtScheduler', 'SourcePanel']
