"""Tests for diagnostics snapshots and positioning warnings."""

from __future__ import annotations

import pytest

from vert_engine.analysis.diagnostics import (
    WARNING_DEGENERATE,
    WARNING_DRIFT,
    WARNING_FEET_CUT,
    WARNING_HEAD_CUT,
    WARNING_SIDE_CUT,
    WARNING_TOO_CLOSE,
    WARNING_TOO_FAR,
    DiagnosticsEmitter,
)
from vert_engine.core.config import PositionSettings
from vert_engine.core.types import (
    Baseline,
    CalibrationStatus,
    EnginePhase,
    LandmarkFrame,
    MeasurementState,
    ScaleModel,
    StabilityStatus,
    UserAnthropometry,
)


class TestPositionWarning:
    """Tests for the positioning hint."""

    @pytest.fixture
    def emitter(self, position_settings: PositionSettings) -> DiagnosticsEmitter:
        return DiagnosticsEmitter(position_settings)

    def test_well_framed_subject_has_no_warning(
        self, emitter: DiagnosticsEmitter, frame_factory
    ) -> None:
        """A centered subject filling most of the frame is fine."""
        frame = frame_factory(width=640, height=1000)

        assert emitter.position_warning(frame) is None

    def test_no_pose_has_no_warning(self, emitter: DiagnosticsEmitter) -> None:
        """Nothing to judge without landmarks."""
        assert emitter.position_warning(None) is None
        assert emitter.position_warning(LandmarkFrame(landmarks={})) is None

    def test_head_cut_off(self, emitter: DiagnosticsEmitter, frame_factory) -> None:
        """Landmarks at the top edge mean the head is cut off."""
        frame = frame_factory(eye_y=10.0, height=1000)

        assert emitter.position_warning(frame) == WARNING_HEAD_CUT

    def test_feet_cut_off(self, emitter: DiagnosticsEmitter, frame_factory) -> None:
        """Landmarks at the bottom edge mean the feet are cut off."""
        frame = frame_factory(foot_y=990.0, height=1000)

        assert emitter.position_warning(frame) == WARNING_FEET_CUT

    def test_side_cut_off(self, emitter: DiagnosticsEmitter, frame_factory) -> None:
        """Landmarks at a side edge mean the body is not fully framed."""
        frame = frame_factory(width=350, height=1000)

        assert emitter.position_warning(frame) == WARNING_SIDE_CUT

    def test_too_close(self, emitter: DiagnosticsEmitter, frame_factory) -> None:
        """A body filling nearly the whole frame is too close."""
        frame = frame_factory(eye_y=22.0, foot_y=975.0, height=1000)

        assert emitter.position_warning(frame) == WARNING_TOO_CLOSE

    def test_too_far(self, emitter: DiagnosticsEmitter, frame_factory) -> None:
        """A small body in a tall frame is too far."""
        frame = frame_factory(height=3000)

        assert emitter.position_warning(frame) == WARNING_TOO_FAR

    def test_unknown_frame_size_skips_framing(
        self, emitter: DiagnosticsEmitter, frame_factory
    ) -> None:
        """Margins cannot be judged without frame dimensions."""
        frame = frame_factory(eye_y=1.0)

        assert emitter.position_warning(frame) is None

    def test_drift_from_calibration_position(
        self, emitter: DiagnosticsEmitter, frame_factory, baseline: Baseline
    ) -> None:
        """A torso much larger than at calibration asks the user to return."""
        frame = frame_factory(eye_y=40.0)

        warning = emitter.position_warning(frame, baseline)

        assert warning == WARNING_DRIFT
        assert "position" in warning

    def test_leg_tuck_is_not_drift(
        self, emitter: DiagnosticsEmitter, frame_factory, baseline: Baseline
    ) -> None:
        """Feet pulled up shorten the body without moving the eye-to-hip span."""
        frame = frame_factory(hip_y=440.0, eye_y=40.0, foot_y=600.0)

        assert emitter.position_warning(frame, baseline) is None

    def test_degenerate_calibration_hint(
        self, emitter: DiagnosticsEmitter, frame_factory
    ) -> None:
        """A degenerate calibration asks for a full body view."""
        frame = frame_factory()

        assert emitter.position_warning(frame, degenerate=True) == WARNING_DEGENERATE


class TestEmit:
    """Tests for snapshot assembly."""

    def test_searching_snapshot_without_frame(self) -> None:
        """A snapshot with nothing known is empty but valid."""
        emitter = DiagnosticsEmitter()

        snapshot = emitter.emit(
            frame=None,
            phase=EnginePhase.SEARCHING,
            stability=StabilityStatus(is_stable=False, progress=0.0),
            calibration=CalibrationStatus(0, 30, False),
        )

        assert not snapshot.pose_detected
        assert snapshot.landmark_count == 0
        assert snapshot.current_hip_y_px is None
        assert snapshot.px_to_cm is None
        assert snapshot.measurement == MeasurementState()
        assert snapshot.position_warning is None

    def test_active_snapshot_projects_state(
        self, frame_factory, baseline: Baseline, bounded_scale: ScaleModel
    ) -> None:
        """An active snapshot carries baseline, scale and measurement."""
        emitter = DiagnosticsEmitter()
        measurement = MeasurementState(max_height_cm=11.25)

        snapshot = emitter.emit(
            frame=frame_factory(hip_y=450.0, eye_y=50.0, foot_y=850.0),
            phase=EnginePhase.ACTIVE,
            stability=StabilityStatus(is_stable=True, progress=1.0),
            calibration=CalibrationStatus(3, 3, True),
            baseline=baseline,
            scale=bounded_scale,
            anthropometry=UserAnthropometry(height_cm=180.0),
            measurement=measurement,
            movement_px=50.0,
        )

        assert snapshot.pose_detected
        assert snapshot.landmark_count == 9
        assert snapshot.average_confidence == pytest.approx(0.9)
        assert snapshot.current_hip_y_px == pytest.approx(450.0)
        assert snapshot.baseline_hip_y_px == pytest.approx(500.0)
        assert snapshot.hip_movement_px == pytest.approx(50.0)
        assert snapshot.body_height_px == pytest.approx(800.0)
        assert snapshot.px_to_cm == pytest.approx(0.225)
        assert snapshot.user_height_cm == pytest.approx(180.0)
        assert snapshot.measurement is measurement

    def test_movement_hidden_without_scale(self, frame_factory) -> None:
        """Movement is only meaningful once a scale exists."""
        emitter = DiagnosticsEmitter()

        snapshot = emitter.emit(
            frame=frame_factory(),
            phase=EnginePhase.CALIBRATING,
            stability=StabilityStatus(is_stable=True, progress=1.0),
            calibration=CalibrationStatus(1, 3, False),
            movement_px=42.0,
        )

        assert snapshot.hip_movement_px == 0.0
        assert snapshot.body_height_px == pytest.approx(800.0)
