"""
Crowd Watch - Main Application Entry Point

Launch the operator console GUI.
"""

import sys

from crowdwatch.config import ConsoleSettings
from crowdwatch.gui.app import launch
from crowdwatch.logging import configure_logging


def main():
    """Launch the application."""
    cfg = ConsoleSettings()
    configure_logging(cfg.log_level, debug=cfg.debug)
    sys.exit(launch(cfg))


if __name__ == "__main__":
    main()
