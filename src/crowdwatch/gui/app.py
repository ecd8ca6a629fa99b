"""
Desktop launcher for the operator console.
"""

import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from ..config import ConsoleSettings
from ..console import OperatorConsole
from .main_window import MainWindow
from .scheduler import QtScheduler


def launch(cfg: ConsoleSettings) -> int:
    """Open the console window and run the Qt event loop."""
    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Crowd Watch")
    app.setApplicationVersion("0.1.0")
    app.setStyle("Fusion")

    console = OperatorConsole(QtScheduler(), settings=cfg)
    window = MainWindow(console)
    window.show()

    try:
        return app.exec()
    finally:
        console.close()
