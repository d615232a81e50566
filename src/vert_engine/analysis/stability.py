"""Stillness detection over a sliding window of hip positions.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from collections import deque

import numpy as np

from vert_engine.core.config import StabilitySettings
from vert_engine.core.logging import get_logger
from vert_engine.core.types import StabilityStatus

logger = get_logger(__name__)


class StabilityDetector:
    """Decides whether the subject is still enough to calibrate.

    The window only ever holds a run of consistent samples: whenever the
    peak-to-peak spread of the buffered hip Y exceeds the movement
    threshold, the oldest samples are dropped until it no longer does.
    Progress is the filled fraction of that run, and the subject is stable
    once the run spans the whole window.

    A frame with no hip or with confidence below the detection threshold
    clears the window.
    """

    def __init__(self, settings: StabilitySettings | None = None) -> None:
        """Initialize detector with settings.

        Args:
            settings: Stability parameters (uses defaults if None)
        """
        self.settings = settings or StabilitySettings()
        self._window: deque[float] = deque(maxlen=self.settings.window_size)
        self._was_stable = False

    @property
    def sample_count(self) -> int:
        """Number of consistent samples currently buffered."""
        return len(self._window)

    @property
    def status(self) -> StabilityStatus:
        """Stability verdict for the current window, without feeding a sample."""
        return self._status()

    def reset(self) -> None:
        """Clear the window."""
        self._window.clear()
        self._was_stable = False

    def observe(self, hip_y: float | None, confidence: float) -> StabilityStatus:
        """Feed one frame's hip position.

        Args:
            hip_y: Hip midpoint Y in pixels, or None if not detected
            confidence: Aggregate confidence of the hip landmarks

        Returns:
            Current stability status
        """
        if hip_y is None or confidence < self.settings.min_confidence:
            if self._window:
                logger.debug("Hip not usable (confidence %.2f) - clearing window", confidence)
            self.reset()
            return StabilityStatus(is_stable=False, progress=0.0)

        self._window.append(hip_y)

        # Keep only the most recent run of low-movement samples
        while len(self._window) > 1 and self._spread() > self.settings.movement_threshold_px:
            self._window.popleft()

        status = self._status()
        if status.is_stable != self._was_stable:
            if status.is_stable:
                logger.info("Subject stable over %d frames", len(self._window))
            else:
                logger.info("Stability lost (movement %.1f px)", status.movement_px)
            self._was_stable = status.is_stable

        return status

    def _spread(self) -> float:
        """Peak-to-peak hip Y within the window."""
        if not self._window:
            return 0.0
        return float(np.ptp(np.fromiter(self._window, dtype=np.float64)))

    def _status(self) -> StabilityStatus:
        progress = min(len(self._window) / self.settings.window_size, 1.0)
        return StabilityStatus(
            is_stable=len(self._window) >= self.settings.window_size,
            progress=progress,
            movement_px=self._spread(),
        )
