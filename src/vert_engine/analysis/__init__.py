"""Pure analysis logic: stability, calibration, scale, tracking, and diagnostics.

This module contains NO I/O operations.
All functions operate on typed dataclasses and return results.
"""

from vert_engine.analysis.calibration import CalibrationEngine
from vert_engine.analysis.diagnostics import DiagnosticsEmitter
from vert_engine.analysis.scale import ScaleConverter
from vert_engine.analysis.stability import StabilityDetector
from vert_engine.analysis.tracker import HeightTracker

__all__ = [
    "StabilityDetector",
    "CalibrationEngine",
    "ScaleConverter",
    "HeightTracker",
    "DiagnosticsEmitter",
]
