"""Post-calibration hip displacement and best-jump tracking.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections import deque
from dataclasses import replace

import numpy as np

from vert_engine.core.config import TrackingSettings
from vert_engine.core.logging import get_logger
from vert_engine.core.types import Baseline, MeasurementState, ScaleModel

logger = get_logger(__name__)


class HeightTracker:
    """Converts hip rise above baseline into jump height and keeps the best.

    Maxima never regress within a session, so the subject can return to
    baseline between jumps. Spike reach is the best height plus the user's
    heel-to-hand reach; it equals the reach alone until the first rise and
    stays zero when no reach was supplied.

    Hip Y is averaged over the last ``smoothing_window_size`` accepted frames
    before conversion.
    """

    def __init__(
        self,
        baseline: Baseline,
        scale: ScaleModel,
        heel_to_hand_reach_cm: float | None = None,
        settings: TrackingSettings | None = None,
    ) -> None:
        """Initialize tracker for one calibrated session.

        Args:
            baseline: Calibrated resting hip position and body spans
            scale: Pixel to centimeter conversion
            heel_to_hand_reach_cm: Standing reach, if known
            settings: Tracking parameters (uses defaults if None)
        """
        self.settings = settings or TrackingSettings()
        self.baseline = baseline
        self.scale = scale
        self.reach_cm = heel_to_hand_reach_cm or 0.0
        self._recent_hip_y: deque[float] = deque(maxlen=self.settings.smoothing_window_size)
        self._state = self._initial_state()
        self._movement_px = 0.0
        self._last_rejected = False

    @property
    def state(self) -> MeasurementState:
        """Best measurement so far."""
        return self._state

    @property
    def movement_px(self) -> float:
        """Hip rise above baseline for the last accepted frame (negative = below)."""
        return self._movement_px

    @property
    def last_frame_rejected(self) -> bool:
        """Whether the last frame was ignored for drift from the calibration spot."""
        return self._last_rejected

    def reset(self) -> None:
        """Clear the best measurement and the smoothing buffer."""
        self._recent_hip_y.clear()
        self._state = self._initial_state()
        self._movement_px = 0.0
        self._last_rejected = False

    def is_drifted(self, upper_body_px: float | None) -> bool:
        """Check if the eye-to-hip span moved too far from baseline to trust the frame.

        Leg tucks at the top of a jump leave this span unchanged, so only a
        change of distance to the camera trips it.
        """
        limit = self.settings.max_body_drift_fraction
        reference = self.baseline.upper_body_px
        if limit <= 0 or upper_body_px is None or not reference:
            return False
        return abs(upper_body_px - reference) / reference > limit

    def update(self, hip_y: float, upper_body_px: float | None = None) -> MeasurementState:
        """Process one frame's hip position.

        Args:
            hip_y: Hip midpoint Y in pixels
            upper_body_px: This frame's eye-to-hip span, used to reject frames
                where the subject moved toward or away from the camera

        Returns:
            Best measurement so far
        """
        if self.is_drifted(upper_body_px):
            self._last_rejected = True
            logger.debug(
                "Upper body %.1f px drifted from baseline %.1f px - ignoring frame",
                upper_body_px,
                self.baseline.upper_body_px,
            )
            return self._state

        self._last_rejected = False
        self._recent_hip_y.append(hip_y)
        smoothed_y = float(np.mean(self._recent_hip_y))

        # Image Y grows downward, so a rise is baseline minus current
        self._movement_px = self.baseline.hip_y_px - smoothed_y
        height, lower, upper = self.scale.to_cm(max(0.0, self._movement_px))

        if height <= self._state.max_height_cm:
            return self._state

        state = replace(
            self._state,
            max_height_cm=height,
            max_height_lower_cm=max(self._state.max_height_lower_cm, lower),
            max_height_upper_cm=max(self._state.max_height_upper_cm, upper),
        )
        self._state = self._with_spike_reach(state)
        logger.info("New max height: %.1f cm", height)
        return self._state

    def _initial_state(self) -> MeasurementState:
        return self._with_spike_reach(MeasurementState())

    def _with_spike_reach(self, state: MeasurementState) -> MeasurementState:
        if self.reach_cm <= 0:
            return state
        return replace(
            state,
            max_spike_reach_cm=state.max_height_cm + self.reach_cm,
            max_spike_reach_lower_cm=state.max_height_lower_cm + self.reach_cm,
            max_spike_reach_upper_cm=state.max_height_upper_cm + self.reach_cm,
        )
