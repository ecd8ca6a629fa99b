from __future__ import annotations

import argparse
import logging

from .config import ConsoleSettings
from .logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crowd Watch - Operator Console")
    parser.add_argument("--print-config", action="store_true", help="Print resolved configuration and exit.")
    parser.add_argument("--http-serve", action="store_true", help="Serve the console over HTTP (/health, /console, ...).")
    parser.add_argument("--gui", action="store_true", help="Open the desktop console window.")
    return parser


def run(argv: list[str] | None = None, cfg: ConsoleSettings | None = None) -> int:
    """
    Operator console entrypoint.
    """
    try:
        args = build_parser().parse_args(argv)

        # Load settings from environment / .env
        cfg = cfg or ConsoleSettings()

        # Setup logging using configured level
        configure_logging(cfg.log_level, debug=cfg.debug)

        logger.info("Operator console starting")
        logger.info(
            "Resolved config: operator=%s capacity=%s threshold=%spx alert=%ss",
            cfg.operator_name, cfg.log_capacity, cfg.follow_threshold_px, cfg.alert_duration_sec
        )

        if args.print_config:
            print(cfg.model_dump())
            return 0

        if args.http_serve:
            import uvicorn
            from .api import create_app

            app = create_app(cfg)

            logger.info("Starting console HTTP API at http://%s:%s", cfg.http_host, cfg.http_port)
            uvicorn.run(
                app,
                host=cfg.http_host,
                port=cfg.http_port,
                log_level=cfg.log_level.lower(),
            )
            return 0

        if args.gui:
            from .gui.app import launch

            return launch(cfg)

        logger.info("Nothing to do. Use --print-config, --http-serve or --gui.")
        return 0

    except Exception:
        # Log unexpected exceptions so the console is diagnosable.
        logger.exception("Operator console crashed due to an unexpected error")
        if cfg is not None and (cfg.debug or cfg.log_level.upper() == "DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    raise SystemExit(run())
