"""Baseline calibration from consecutive stable frames.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from dataclasses import dataclass

from vert_engine.core.config import CalibrationSettings
from vert_engine.core.exceptions import CalibrationError, DegenerateCalibrationError
from vert_engine.core.logging import get_logger
from vert_engine.core.types import Baseline, CalibrationStatus

logger = get_logger(__name__)


@dataclass(frozen=True)
class CalibrationAccumulator:
    """Running sums over the frames accepted so far."""

    frames: int = 0
    hip_y_sum: float = 0.0
    body_height_sum: float = 0.0
    upper_body_sum: float = 0.0
    upper_body_frames: int = 0

    def add(
        self, hip_y: float, body_height: float, upper_body: float | None = None
    ) -> CalibrationAccumulator:
        """Return a new accumulator including one more frame."""
        return CalibrationAccumulator(
            frames=self.frames + 1,
            hip_y_sum=self.hip_y_sum + hip_y,
            body_height_sum=self.body_height_sum + body_height,
            upper_body_sum=self.upper_body_sum + (upper_body or 0.0),
            upper_body_frames=self.upper_body_frames + (0 if upper_body is None else 1),
        )

    @property
    def mean_hip_y(self) -> float:
        return self.hip_y_sum / self.frames if self.frames else 0.0

    @property
    def mean_body_height(self) -> float:
        return self.body_height_sum / self.frames if self.frames else 0.0

    @property
    def mean_upper_body(self) -> float | None:
        """Mean eye-to-hip span, or None if no frame measured it."""
        if not self.upper_body_frames:
            return None
        return self.upper_body_sum / self.upper_body_frames


class CalibrationEngine:
    """Averages hip Y and body height over a fixed number of stable frames.

    Callers feed frames only while the subject is stable and call
    ``interrupt()`` as soon as stability is lost; accumulation then restarts
    from zero. Completion is signalled exactly once per cycle.
    """

    def __init__(self, settings: CalibrationSettings | None = None) -> None:
        """Initialize calibration engine with settings.

        Args:
            settings: Calibration parameters (uses defaults if None)
        """
        self.settings = settings or CalibrationSettings()
        self._accumulator = CalibrationAccumulator()
        self._baseline: Baseline | None = None

    @property
    def frames_needed(self) -> int:
        """Frames required to finish calibration."""
        return self.settings.frames_needed

    @property
    def frames_accumulated(self) -> int:
        """Frames accumulated in the current attempt."""
        if self._baseline is not None:
            return self.frames_needed
        return self._accumulator.frames

    @property
    def baseline(self) -> Baseline | None:
        """Finalized baseline, if calibration completed."""
        return self._baseline

    @property
    def is_complete(self) -> bool:
        """Check if a baseline has been finalized."""
        return self._baseline is not None

    @property
    def status(self) -> CalibrationStatus:
        """Current progress."""
        return CalibrationStatus(
            frames_accumulated=self.frames_accumulated,
            frames_needed=self.frames_needed,
            is_complete=self.is_complete,
        )

    def interrupt(self) -> None:
        """Discard partial progress after stability was lost."""
        if self._accumulator.frames and self._baseline is None:
            logger.info(
                "Calibration interrupted after %d/%d frames",
                self._accumulator.frames,
                self.frames_needed,
            )
        self._accumulator = CalibrationAccumulator()

    def reset(self) -> None:
        """Discard partial progress and any finalized baseline."""
        self._accumulator = CalibrationAccumulator()
        self._baseline = None

    def accept(
        self, hip_y: float, body_height: float, upper_body: float | None = None
    ) -> CalibrationStatus:
        """Accumulate one stable frame.

        Args:
            hip_y: Hip midpoint Y in pixels
            body_height: Eye-line to floor extent in pixels
            upper_body: Eye-line to hip span in pixels, if measurable

        Returns:
            Progress after this frame; ``is_complete`` is True on the frame
            that finalizes the baseline

        Raises:
            DegenerateCalibrationError: If the averaged body height is too
                small to finalize; the accumulator is cleared
            CalibrationError: If a baseline was already finalized
        """
        if self._baseline is not None:
            raise CalibrationError("Calibration already complete; reset before recalibrating")

        self._accumulator = self._accumulator.add(hip_y, body_height, upper_body)
        logger.debug(
            "Calibration frame %d/%d - hip_y: %.1f, body: %.1f",
            self._accumulator.frames,
            self.frames_needed,
            hip_y,
            body_height,
        )

        if self._accumulator.frames < self.frames_needed:
            return self.status

        mean_body_height = self._accumulator.mean_body_height
        if mean_body_height < max(self.settings.min_body_height_px, 1e-6):
            self._accumulator = CalibrationAccumulator()
            raise DegenerateCalibrationError(mean_body_height)

        self._baseline = Baseline(
            hip_y_px=self._accumulator.mean_hip_y,
            body_height_px=mean_body_height,
            upper_body_px=self._accumulator.mean_upper_body,
        )
        logger.info(
            "Calibration complete: baseline hip_y %.1f px, body height %.1f px",
            self._baseline.hip_y_px,
            self._baseline.body_height_px,
        )
        self._accumulator = CalibrationAccumulator()
        return self.status
