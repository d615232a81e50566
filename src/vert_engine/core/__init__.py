"""Core infrastructure: config, types, exceptions, and logging."""

from vert_engine.core.config import Settings, get_settings
from vert_engine.core.exceptions import (
    CalibrationError,
    ConfigurationError,
    DegenerateCalibrationError,
    VertEngineError,
)
from vert_engine.core.logging import get_logger, setup_logging
from vert_engine.core.types import (
    Baseline,
    DebugSnapshot,
    EnginePhase,
    Landmark,
    LandmarkFrame,
    LandmarkIndex,
    MeasurementState,
    ScaleModel,
    UserAnthropometry,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Landmark",
    "LandmarkIndex",
    "LandmarkFrame",
    "UserAnthropometry",
    "Baseline",
    "ScaleModel",
    "MeasurementState",
    "EnginePhase",
    "DebugSnapshot",
    # Exceptions
    "VertEngineError",
    "CalibrationError",
    "DegenerateCalibrationError",
    "ConfigurationError",
    # Logging
    "setup_logging",
    "get_logger",
]
