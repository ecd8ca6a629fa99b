import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Per-request access lines drown out console entries at INFO.
_NOISY_LOGGERS = ("uvicorn.access",)


def configure_logging(level: str = "INFO", debug: bool = False) -> int:
    """
    Configure logging for the operator console.

    `debug` forces DEBUG everywhere and keeps uvicorn's access log; otherwise
    access lines are only shown at WARNING and above. Returns the level
    applied to the console's loggers.
    """

    # Convert "INFO" -> logging.INFO etc.
    numeric_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    # Configure root logger.
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    # basicConfig is a no-op once the root logger has handlers; the package
    # logger still has to follow the configured level.
    logging.getLogger("crowdwatch").setLevel(numeric_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)

    return numeric_level
