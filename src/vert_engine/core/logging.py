"""Logging setup for the vert_engine namespace.

The engine is a library: until a host calls ``setup_logging`` its records go
to a NullHandler, so embedding applications keep control of their own output.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from vert_engine.core.config import LoggingSettings

NAMESPACE = "vert_engine"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logging.getLogger(NAMESPACE).addHandler(logging.NullHandler())


def setup_logging(
    settings: LoggingSettings | None = None,
    level: str | None = None,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the engine logger.

    Calling again replaces the handlers installed by the previous call.

    Args:
        settings: Level and log file (uses defaults if None)
        level: Overrides ``settings.level``, e.g. from a ``--verbose`` flag

    Returns:
        The configured ``vert_engine`` logger
    """
    settings = settings or LoggingSettings()
    log_level = getattr(logging, (level or settings.level).upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    engine_logger = logging.getLogger(NAMESPACE)
    engine_logger.setLevel(log_level)
    for handler in list(engine_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            engine_logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.file:
        log_path = Path(settings.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        engine_logger.addHandler(handler)

    return engine_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the engine namespace.

    Args:
        name: Module name (typically __name__)
    """
    if not name.startswith(NAMESPACE):
        name = f"{NAMESPACE}.{name}"
    return logging.getLogger(name)
