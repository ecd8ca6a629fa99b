"""
Crowd Watch - operator console package.

This package contains the operator console core that:
- keeps a bounded, ordered activity log
- tracks whether the viewer follows the tail of that log
- raises and times out critical alerts
- gates simulated occupancy analysis on a selected media source
"""

from .console import OperatorConsole
from .errors import ConsoleClosedError, ConsoleError, SourceValidationError, ValidationError
from .models import DensitySnapshot, LogEntry, Severity

__all__ = [
    "OperatorConsole",
    "ConsoleError",
    "ConsoleClosedError",
    "ValidationError",
    "SourceValidationError",
    "DensitySnapshot",
    "LogEntry",
    "Severity",
]
