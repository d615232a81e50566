"""Tests for engine logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from vert_engine.core.config import LoggingSettings
from vert_engine.core.logging import get_logger, setup_logging


class TestLogging:
    """Tests for setup_logging and get_logger."""

    def test_get_logger_uses_namespace(self) -> None:
        """Loggers are always placed under vert_engine."""
        assert get_logger("vert_engine.analysis").name == "vert_engine.analysis"
        assert get_logger("replay").name == "vert_engine.replay"

    def test_setup_writes_to_file(self, tmp_path: Path) -> None:
        """A configured log file receives engine records."""
        log_file = tmp_path / "logs" / "engine.log"

        logger = setup_logging(LoggingSettings(level="DEBUG", file=str(log_file)))
        get_logger(__name__).debug("calibration finished")
        for handler in logger.handlers:
            handler.flush()

        assert logger.level == logging.DEBUG
        assert "calibration finished" in log_file.read_text()

        # Detach the file handler so later tests do not write to tmp_path
        setup_logging(LoggingSettings())

    def test_level_override(self) -> None:
        """An explicit level wins over settings."""
        logger = setup_logging(LoggingSettings(level="INFO"), level="warning")

        assert logger.level == logging.WARNING
        stream_handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len([h for h in stream_handlers if not isinstance(h, logging.FileHandler)]) == 1
