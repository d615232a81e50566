"""Engine configuration via Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StabilitySettings(BaseSettings):
    """Stillness detection before calibration."""

    model_config = SettingsConfigDict(env_prefix="STABILITY_")

    window_size: int = Field(default=60, ge=2)
    movement_threshold_px: float = Field(default=15.0, gt=0)
    min_confidence: float = Field(default=0.5, ge=0, le=1)


class CalibrationSettings(BaseSettings):
    """Baseline accumulation parameters."""

    model_config = SettingsConfigDict(env_prefix="CALIBRATION_")

    frames_needed: int = Field(default=30, ge=1)
    min_body_height_px: float = Field(default=50.0, ge=0)


class ScaleSettings(BaseSettings):
    """Pixel to centimeter conversion parameters."""

    model_config = SettingsConfigDict(env_prefix="SCALE_")

    # Must cover the eye-to-vertex share of stature (about 6-7%)
    uncertainty_fraction: float = Field(default=0.10, ge=0, lt=1)


class TrackingSettings(BaseSettings):
    """Post-calibration hip tracking parameters."""

    model_config = SettingsConfigDict(env_prefix="TRACKING_")

    smoothing_window_size: int = Field(default=1, ge=1)
    max_body_drift_fraction: float = Field(default=0.25, ge=0)


class PositionSettings(BaseSettings):
    """Thresholds for positioning warnings."""

    model_config = SettingsConfigDict(env_prefix="POSITION_")

    edge_margin_fraction: float = 0.02
    min_body_fraction: float = 0.35
    max_body_fraction: float = 0.95
    drift_warning_fraction: float = 0.10


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    stability: StabilitySettings = Field(default_factory=StabilitySettings)
    calibration: CalibrationSettings = Field(default_factory=CalibrationSettings)
    scale: ScaleSettings = Field(default_factory=ScaleSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    position: PositionSettings = Field(default_factory=PositionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached engine settings instance."""
    return Settings()
