"""Diagnostics snapshot assembly and positioning warnings.

This module is pure logic with NO I/O. Nothing here mutates engine state,
so snapshots can be rebuilt at any time for UI polling.
"""

from __future__ import annotations

from vert_engine.core.config import PositionSettings
from vert_engine.core.types import (
    Baseline,
    CalibrationStatus,
    DebugSnapshot,
    EnginePhase,
    LandmarkFrame,
    MeasurementState,
    ScaleModel,
    StabilityStatus,
    UserAnthropometry,
)

WARNING_HEAD_CUT = "Head is out of frame - step back or tilt the camera up"
WARNING_FEET_CUT = "Feet are out of frame - step back or tilt the camera down"
WARNING_SIDE_CUT = "Body is not fully in frame - move to the center"
WARNING_TOO_CLOSE = "Too close to the camera - step back"
WARNING_TOO_FAR = "Too far from the camera - move closer"
WARNING_DRIFT = "Return to your calibration position"
WARNING_DEGENERATE = "Make sure your whole body is visible to calibrate"


class DiagnosticsEmitter:
    """Builds DebugSnapshots from the state of the other components."""

    def __init__(self, settings: PositionSettings | None = None) -> None:
        """Initialize emitter with settings.

        Args:
            settings: Positioning warning thresholds (uses defaults if None)
        """
        self.settings = settings or PositionSettings()

    def position_warning(
        self,
        frame: LandmarkFrame | None,
        baseline: Baseline | None = None,
        degenerate: bool = False,
    ) -> str | None:
        """Derive a positioning hint from the frame and the calibrated baseline.

        Args:
            frame: Current landmark frame
            baseline: Calibrated baseline, if any
            degenerate: Whether the last calibration attempt was degenerate

        Returns:
            Warning text, or None when positioning looks fine
        """
        if frame is None or not frame.landmarks:
            return None

        warning = self._framing_warning(frame)
        if warning is not None:
            return warning

        if baseline is not None and baseline.upper_body_px:
            upper_body = frame.upper_body_px()
            if upper_body is not None:
                drift = abs(upper_body - baseline.upper_body_px) / baseline.upper_body_px
                if drift > self.settings.drift_warning_fraction:
                    return WARNING_DRIFT

        if degenerate:
            return WARNING_DEGENERATE
        return None

    def _framing_warning(self, frame: LandmarkFrame) -> str | None:
        extent = frame.vertical_extent()
        if extent is None:
            return None
        top, bottom = extent
        margin = self.settings.edge_margin_fraction

        if frame.height:
            if top < frame.height * margin:
                return WARNING_HEAD_CUT
            if bottom > frame.height * (1 - margin):
                return WARNING_FEET_CUT

        if frame.width:
            xs = [lm.x for lm in frame.landmarks.values()]
            if min(xs) < frame.width * margin or max(xs) > frame.width * (1 - margin):
                return WARNING_SIDE_CUT

        if frame.height:
            body_fraction = (bottom - top) / frame.height
            if body_fraction > self.settings.max_body_fraction:
                return WARNING_TOO_CLOSE
            if body_fraction < self.settings.min_body_fraction:
                return WARNING_TOO_FAR

        return None

    def emit(
        self,
        frame: LandmarkFrame | None,
        phase: EnginePhase,
        stability: StabilityStatus,
        calibration: CalibrationStatus,
        baseline: Baseline | None = None,
        scale: ScaleModel | None = None,
        anthropometry: UserAnthropometry | None = None,
        measurement: MeasurementState | None = None,
        movement_px: float = 0.0,
        degenerate: bool = False,
        awaiting_anthropometry: bool = False,
    ) -> DebugSnapshot:
        """Assemble a snapshot.

        Returns:
            Immutable DebugSnapshot
        """
        hip = frame.hip_center if frame is not None else None

        if baseline is not None:
            body_height: float | None = baseline.body_height_px
        elif frame is not None:
            body_height = frame.body_height_px()
        else:
            body_height = None

        return DebugSnapshot(
            phase=phase,
            pose_detected=frame is not None and frame.landmark_count > 0,
            landmark_count=frame.landmark_count if frame is not None else 0,
            average_confidence=frame.average_confidence if frame is not None else 0.0,
            is_stable=stability.is_stable,
            stability_progress=stability.progress,
            calibration_frames=calibration.frames_accumulated,
            calibration_frames_needed=calibration.frames_needed,
            current_hip_y_px=hip.y if hip is not None else None,
            baseline_hip_y_px=baseline.hip_y_px if baseline is not None else None,
            hip_movement_px=movement_px if scale is not None else 0.0,
            body_height_px=body_height,
            px_to_cm=scale.px_to_cm if scale is not None else None,
            is_precise=scale.is_precise if scale is not None else False,
            user_height_cm=anthropometry.height_cm if anthropometry is not None else None,
            measurement=measurement or MeasurementState(),
            calibration_degenerate=degenerate,
            awaiting_anthropometry=awaiting_anthropometry,
            position_warning=self.position_warning(frame, baseline, degenerate),
        )
