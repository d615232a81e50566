"""Pixel to centimeter scale derivation.

This module is pure logic with NO I/O.
"""

from __future__ import annotations

from vert_engine.core.config import ScaleSettings
from vert_engine.core.exceptions import CalibrationError, ConfigurationError
from vert_engine.core.logging import get_logger
from vert_engine.core.types import Baseline, ScaleModel, UserAnthropometry

logger = get_logger(__name__)


class ScaleConverter:
    """Derives a pixel to centimeter ratio from the calibrated body height.

    Body height in pixels spans the eye line to the floor. Two modes:
    - Precise: the eye-to-head-vertex distance is known, so the pixel span
      maps exactly to ``height_cm - eye_to_head_vertex_cm``. Bounds equal
      the point estimate.
    - Bounded: the span is mapped to the full standing height and the
      unknown head offset is carried as a symmetric percentage band.
    """

    def __init__(self, settings: ScaleSettings | None = None) -> None:
        """Initialize converter with settings.

        Args:
            settings: Scale parameters (uses defaults if None)
        """
        self.settings = settings or ScaleSettings()

    def compute(self, baseline: Baseline, anthropometry: UserAnthropometry) -> ScaleModel:
        """Compute the scale model for a finalized baseline.

        Args:
            baseline: Calibrated hip position and body height
            anthropometry: User body measurements

        Returns:
            ScaleModel with point estimate and bounds

        Raises:
            ConfigurationError: If the anthropometry cannot be used
            CalibrationError: If the baseline body height is not positive
        """
        height_cm = anthropometry.height_cm
        if height_cm <= 0:
            raise ConfigurationError(f"User height must be positive, got {height_cm}")
        if baseline.body_height_px <= 0:
            raise CalibrationError("Baseline body height must be positive")

        eye_offset = anthropometry.eye_to_head_vertex_cm
        if eye_offset is not None:
            if not 0 <= eye_offset < height_cm:
                raise ConfigurationError(
                    f"Eye-to-head-vertex {eye_offset} cm must lie in [0, {height_cm})"
                )
            px_to_cm = (height_cm - eye_offset) / baseline.body_height_px
            scale = ScaleModel(
                px_to_cm=px_to_cm,
                lower_px_to_cm=px_to_cm,
                upper_px_to_cm=px_to_cm,
                is_precise=True,
            )
        else:
            px_to_cm = height_cm / baseline.body_height_px
            band = self.settings.uncertainty_fraction
            scale = ScaleModel(
                px_to_cm=px_to_cm,
                lower_px_to_cm=px_to_cm * (1 - band),
                upper_px_to_cm=px_to_cm * (1 + band),
                is_precise=False,
            )

        logger.info(
            "Scale: %.4f cm/px [%.4f, %.4f] (height: %.0f cm -> %.0f px, precise: %s)",
            scale.px_to_cm,
            scale.lower_px_to_cm,
            scale.upper_px_to_cm,
            height_cm,
            baseline.body_height_px,
            scale.is_precise,
        )
        return scale


def compute_scale(
    baseline: Baseline,
    anthropometry: UserAnthropometry,
    settings: ScaleSettings | None = None,
) -> ScaleModel:
    """Pure function to compute a scale model.

    Args:
        baseline: Calibrated baseline
        anthropometry: User body measurements
        settings: Scale settings

    Returns:
        ScaleModel for the baseline
    """
    return ScaleConverter(settings).compute(baseline, anthropometry)
