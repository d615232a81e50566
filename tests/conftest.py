"""Pytest fixtures for jump engine tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from vert_engine.core.config import (
    CalibrationSettings,
    PositionSettings,
    ScaleSettings,
    Settings,
    StabilitySettings,
    TrackingSettings,
)
from vert_engine.core.types import (
    Baseline,
    Landmark,
    LandmarkFrame,
    LandmarkIndex,
    ScaleModel,
    UserAnthropometry,
)
from vert_engine.pipeline.processor import JumpEngine

FrameFactory = Callable[..., LandmarkFrame]


def _create_frame(
    hip_y: float = 500.0,
    eye_y: float = 100.0,
    foot_y: float = 900.0,
    confidence: float = 0.9,
    frame_idx: int = 0,
    width: int | None = None,
    height: int | None = None,
) -> LandmarkFrame:
    """Create a standing subject with hips, eyes, nose, ankles and heels."""
    landmarks = {
        LandmarkIndex.NOSE.value: Landmark(x=320.0, y=eye_y + 15, confidence=confidence),
        LandmarkIndex.LEFT_EYE.value: Landmark(x=310.0, y=eye_y, confidence=confidence),
        LandmarkIndex.RIGHT_EYE.value: Landmark(x=330.0, y=eye_y, confidence=confidence),
        LandmarkIndex.LEFT_HIP.value: Landmark(x=300.0, y=hip_y, confidence=confidence),
        LandmarkIndex.RIGHT_HIP.value: Landmark(x=340.0, y=hip_y, confidence=confidence),
        LandmarkIndex.LEFT_ANKLE.value: Landmark(x=300.0, y=foot_y - 10, confidence=confidence),
        LandmarkIndex.RIGHT_ANKLE.value: Landmark(x=340.0, y=foot_y - 10, confidence=confidence),
        LandmarkIndex.LEFT_HEEL.value: Landmark(x=295.0, y=foot_y, confidence=confidence),
        LandmarkIndex.RIGHT_HEEL.value: Landmark(x=345.0, y=foot_y, confidence=confidence),
    }
    return LandmarkFrame(
        landmarks=landmarks,
        frame_idx=frame_idx,
        timestamp=frame_idx / 30.0,
        width=width,
        height=height,
    )


@pytest.fixture
def frame_factory() -> FrameFactory:
    """Factory for synthetic landmark frames (defaults: hip 500 px, body 800 px)."""
    return _create_frame


@pytest.fixture
def standing_frame() -> LandmarkFrame:
    """A single standing frame with hip at 500 px and body height 800 px."""
    return _create_frame()


@pytest.fixture
def stability_settings() -> StabilitySettings:
    """Small stability window for fast tests."""
    return StabilitySettings(window_size=5, movement_threshold_px=10.0, min_confidence=0.5)


@pytest.fixture
def calibration_settings() -> CalibrationSettings:
    """Short calibration for fast tests."""
    return CalibrationSettings(frames_needed=3, min_body_height_px=50.0)


@pytest.fixture
def scale_settings() -> ScaleSettings:
    """Scale settings with a 5% uncertainty band."""
    return ScaleSettings(uncertainty_fraction=0.05)


@pytest.fixture
def tracking_settings() -> TrackingSettings:
    """Raw hip tracking with drift rejection."""
    return TrackingSettings(smoothing_window_size=1, max_body_drift_fraction=0.25)


@pytest.fixture
def position_settings() -> PositionSettings:
    """Default positioning thresholds."""
    return PositionSettings()


@pytest.fixture
def engine_settings(
    stability_settings: StabilitySettings,
    calibration_settings: CalibrationSettings,
    scale_settings: ScaleSettings,
    tracking_settings: TrackingSettings,
    position_settings: PositionSettings,
) -> Settings:
    """Engine settings needing 5 + 3 - 1 = 7 standing frames to calibrate."""
    return Settings(
        stability=stability_settings,
        calibration=calibration_settings,
        scale=scale_settings,
        tracking=tracking_settings,
        position=position_settings,
    )


@pytest.fixture
def anthropometry() -> UserAnthropometry:
    """A 180 cm user without optional measurements."""
    return UserAnthropometry(height_cm=180.0)


@pytest.fixture
def engine(engine_settings: Settings, anthropometry: UserAnthropometry) -> JumpEngine:
    """Engine with a 180 cm user already configured."""
    return JumpEngine(engine_settings, anthropometry=anthropometry)


@pytest.fixture
def baseline() -> Baseline:
    """Baseline with hip at 500 px, body height 800 px and eye-to-hip 400 px."""
    return Baseline(hip_y_px=500.0, body_height_px=800.0, upper_body_px=400.0)


@pytest.fixture
def bounded_scale() -> ScaleModel:
    """Scale for a 180 cm user over 800 px, with a 5% band."""
    return ScaleModel(
        px_to_cm=0.225,
        lower_px_to_cm=0.225 * 0.95,
        upper_px_to_cm=0.225 * 1.05,
        is_precise=False,
    )
