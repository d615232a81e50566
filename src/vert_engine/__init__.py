"""Standing vertical jump height estimation from 2D pose landmarks."""

from vert_engine.core import (
    DebugSnapshot,
    EnginePhase,
    Landmark,
    LandmarkFrame,
    LandmarkIndex,
    MeasurementState,
    Settings,
    UserAnthropometry,
    get_settings,
    setup_logging,
)
from vert_engine.pipeline import JumpEngine, SnapshotChannel, estimate_session

__version__ = "0.1.0"

__all__ = [
    "JumpEngine",
    "SnapshotChannel",
    "estimate_session",
    "Landmark",
    "LandmarkIndex",
    "LandmarkFrame",
    "UserAnthropometry",
    "MeasurementState",
    "DebugSnapshot",
    "EnginePhase",
    "Settings",
    "get_settings",
    "setup_logging",
]
