"""Core data types and structures."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import ClassVar

import numpy as np


@dataclass(frozen=True, slots=True)
class Landmark:
    """A single body landmark in pixel space with a detection confidence.

    Coordinates are in pixels; y grows downward.
    """

    x: float
    y: float
    confidence: float


# MediaPipe / ML Kit pose landmark indices
class LandmarkIndex(Enum):
    """Pose landmark indices shared by MediaPipe and ML Kit (33 joints)."""

    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


_EYE_INDICES = (LandmarkIndex.LEFT_EYE.value, LandmarkIndex.RIGHT_EYE.value)
_FOOT_INDICES = (
    LandmarkIndex.LEFT_ANKLE.value,
    LandmarkIndex.RIGHT_ANKLE.value,
    LandmarkIndex.LEFT_HEEL.value,
    LandmarkIndex.RIGHT_HEEL.value,
)


@dataclass(slots=True)
class LandmarkFrame:
    """Detection result for a single video frame.

    Attributes:
        landmarks: Mapping of joint index to Landmark
        frame_idx: Frame sequence number
        timestamp: Frame timestamp in seconds
        width: Image width in pixels, if known
        height: Image height in pixels, if known
    """

    landmarks: dict[int, Landmark]
    frame_idx: int = 0
    timestamp: float = 0.0
    width: int | None = None
    height: int | None = None

    @classmethod
    def from_points(
        cls,
        points: Iterable[tuple[int, float, float, float]],
        frame_idx: int = 0,
        timestamp: float = 0.0,
        width: int | None = None,
        height: int | None = None,
    ) -> LandmarkFrame:
        """Build a frame from (joint_id, x_px, y_px, confidence) tuples."""
        landmarks = {
            int(joint_id): Landmark(x=float(x), y=float(y), confidence=float(conf))
            for joint_id, x, y, conf in points
        }
        return cls(
            landmarks=landmarks,
            frame_idx=frame_idx,
            timestamp=timestamp,
            width=width,
            height=height,
        )

    @property
    def landmark_count(self) -> int:
        """Number of detected landmarks."""
        return len(self.landmarks)

    @property
    def average_confidence(self) -> float:
        """Mean confidence over all detected landmarks (0 when empty)."""
        if not self.landmarks:
            return 0.0
        return float(np.mean([lm.confidence for lm in self.landmarks.values()]))

    def get_landmark(self, index: LandmarkIndex) -> Landmark | None:
        """Get a specific landmark by its enum index."""
        return self.landmarks.get(index.value)

    @property
    def hip_center(self) -> Landmark | None:
        """Midpoint of the two hips, carrying the weaker of the two confidences."""
        left_hip = self.landmarks.get(LandmarkIndex.LEFT_HIP.value)
        right_hip = self.landmarks.get(LandmarkIndex.RIGHT_HIP.value)

        if left_hip is None or right_hip is None:
            return None

        return Landmark(
            x=(left_hip.x + right_hip.x) / 2,
            y=(left_hip.y + right_hip.y) / 2,
            confidence=min(left_hip.confidence, right_hip.confidence),
        )

    def head_y(self, min_confidence: float = 0.0) -> float | None:
        """Y coordinate of the eye line, falling back to the nose."""
        eyes = [
            self.landmarks[idx].y
            for idx in _EYE_INDICES
            if idx in self.landmarks and self.landmarks[idx].confidence >= min_confidence
        ]
        if eyes:
            return sum(eyes) / len(eyes)

        nose = self.landmarks.get(LandmarkIndex.NOSE.value)
        if nose is not None and nose.confidence >= min_confidence:
            return nose.y
        return None

    def lowest_foot_y(self, min_confidence: float = 0.0) -> float | None:
        """Y coordinate of the lowest ankle/heel point (highest value = lowest position)."""
        y_values = [
            self.landmarks[idx].y
            for idx in _FOOT_INDICES
            if idx in self.landmarks and self.landmarks[idx].confidence >= min_confidence
        ]
        return max(y_values) if y_values else None

    def body_height_px(self, min_confidence: float = 0.0) -> float | None:
        """Vertical extent from the eye line to the floor, or None if not measurable."""
        head_y = self.head_y(min_confidence)
        feet_y = self.lowest_foot_y(min_confidence)
        if head_y is None or feet_y is None:
            return None
        return max(0.0, feet_y - head_y)

    def upper_body_px(self, min_confidence: float = 0.0) -> float | None:
        """Vertical span from the eye line down to the hip midpoint."""
        head_y = self.head_y(min_confidence)
        hip = self.hip_center
        if head_y is None or hip is None or hip.confidence < min_confidence:
            return None
        return max(0.0, hip.y - head_y)

    def vertical_extent(self) -> tuple[float, float] | None:
        """Topmost and bottommost landmark Y over the whole frame."""
        if not self.landmarks:
            return None
        ys = [lm.y for lm in self.landmarks.values()]
        return min(ys), max(ys)


@dataclass(frozen=True, slots=True)
class UserAnthropometry:
    """Caller-supplied body measurements.

    Attributes:
        height_cm: Standing height
        eye_to_head_vertex_cm: Vertical distance from the eyes to the top of the head
        heel_to_hand_reach_cm: Standing reach from heel to raised fingertips
    """

    height_cm: float
    eye_to_head_vertex_cm: float | None = None
    heel_to_hand_reach_cm: float | None = None


@dataclass(frozen=True, slots=True)
class StabilityStatus:
    """Result of feeding one sample to the stability detector."""

    is_stable: bool
    progress: float
    movement_px: float = 0.0


@dataclass(frozen=True, slots=True)
class CalibrationStatus:
    """Calibration accumulation progress."""

    frames_accumulated: int
    frames_needed: int
    is_complete: bool


@dataclass(frozen=True, slots=True)
class Baseline:
    """Resting hip position and body height established during calibration.

    ``upper_body_px`` is the eye-line to hip span. Unlike the full body height
    it does not shrink when the knees tuck, so it is the reference for
    detecting a subject who walked toward or away from the camera.
    """

    hip_y_px: float
    body_height_px: float
    upper_body_px: float | None = None


@dataclass(frozen=True, slots=True)
class ScaleModel:
    """Pixel to centimeter conversion with its uncertainty band."""

    px_to_cm: float
    lower_px_to_cm: float
    upper_px_to_cm: float
    is_precise: bool

    def to_cm(self, pixels: float) -> tuple[float, float, float]:
        """Convert a pixel distance to (point, lower, upper) centimeters."""
        return (
            pixels * self.px_to_cm,
            pixels * self.lower_px_to_cm,
            pixels * self.upper_px_to_cm,
        )


@dataclass(frozen=True, slots=True)
class MeasurementState:
    """Best jump height and spike reach of the current calibrated session."""

    max_height_cm: float = 0.0
    max_height_lower_cm: float = 0.0
    max_height_upper_cm: float = 0.0
    max_spike_reach_cm: float = 0.0
    max_spike_reach_lower_cm: float = 0.0
    max_spike_reach_upper_cm: float = 0.0


class EnginePhase(Enum):
    """States in the calibration state machine."""

    SEARCHING = auto()
    STABILIZING = auto()
    CALIBRATING = auto()
    ACTIVE = auto()


@dataclass(frozen=True, slots=True)
class Searching:
    """No usable pose."""

    phase: ClassVar[EnginePhase] = EnginePhase.SEARCHING


@dataclass(frozen=True, slots=True)
class Stabilizing:
    """Pose present, waiting for the subject to hold still."""

    phase: ClassVar[EnginePhase] = EnginePhase.STABILIZING


@dataclass(frozen=True, slots=True)
class Calibrating:
    """Stable and accumulating, or holding a baseline until anthropometry arrives."""

    phase: ClassVar[EnginePhase] = EnginePhase.CALIBRATING

    pending: Baseline | None = None


@dataclass(frozen=True, slots=True)
class Active:
    """Calibrated: baseline and scale are fixed until reset."""

    phase: ClassVar[EnginePhase] = EnginePhase.ACTIVE

    baseline: Baseline
    scale: ScaleModel
    anthropometry: UserAnthropometry


EngineState = Searching | Stabilizing | Calibrating | Active


@dataclass(frozen=True, slots=True)
class DebugSnapshot:
    """Read-only view of the engine after a processed frame.

    Attributes:
        phase: Current state machine phase
        pose_detected: Whether any landmark was supplied
        landmark_count: Number of landmarks in the frame
        average_confidence: Mean landmark confidence
        is_stable: Stability detector verdict
        stability_progress: Progress toward stability [0, 1]
        calibration_frames: Stable frames accumulated so far
        calibration_frames_needed: Frames required to finish calibration
        current_hip_y_px: Hip midpoint Y of this frame (None if absent)
        baseline_hip_y_px: Calibrated hip Y (None before calibration)
        hip_movement_px: Rise of the hip above baseline (0 before calibration)
        body_height_px: Calibrated body height, or this frame's if not calibrated
        px_to_cm: Scale factor (None before calibration)
        is_precise: Whether the scale came from an eye-to-head-vertex measurement
        user_height_cm: Configured user height (None if not set)
        measurement: Best jump height and spike reach so far
        calibration_degenerate: Last calibration attempt had a collapsed body height
        awaiting_anthropometry: Baseline ready but user height missing or unusable
        position_warning: Human-readable positioning hint, if any
    """

    phase: EnginePhase = EnginePhase.SEARCHING
    pose_detected: bool = False
    landmark_count: int = 0
    average_confidence: float = 0.0
    is_stable: bool = False
    stability_progress: float = 0.0
    calibration_frames: int = 0
    calibration_frames_needed: int = 0
    current_hip_y_px: float | None = None
    baseline_hip_y_px: float | None = None
    hip_movement_px: float = 0.0
    body_height_px: float | None = None
    px_to_cm: float | None = None
    is_precise: bool = False
    user_height_cm: float | None = None
    measurement: MeasurementState = field(default_factory=MeasurementState)
    calibration_degenerate: bool = False
    awaiting_anthropometry: bool = False
    position_warning: str | None = None
