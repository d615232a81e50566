"""Custom exceptions for the jump height engine."""


class VertEngineError(Exception):
    """Base exception for all engine errors."""

    pass


class CalibrationError(VertEngineError):
    """Calibration could not produce a usable baseline or scale."""

    def __init__(self, message: str = "Calibration failed") -> None:
        self.message = message
        super().__init__(self.message)


class DegenerateCalibrationError(CalibrationError):
    """Measured body height collapsed, so the baseline cannot be trusted."""

    def __init__(
        self,
        body_height_px: float,
        message: str = "Degenerate calibration: body height too small",
    ) -> None:
        self.body_height_px = body_height_px
        super().__init__(f"{message} ({body_height_px:.1f} px)")


class ConfigurationError(VertEngineError):
    """User anthropometry is missing or unusable."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        self.message = message
        super().__init__(self.message)
