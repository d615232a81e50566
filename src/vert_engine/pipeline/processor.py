"""Per-frame jump height estimation pipeline."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from vert_engine.analysis.calibration import CalibrationEngine
from vert_engine.analysis.diagnostics import DiagnosticsEmitter
from vert_engine.analysis.scale import ScaleConverter
from vert_engine.analysis.stability import StabilityDetector
from vert_engine.analysis.tracker import HeightTracker
from vert_engine.core.config import Settings, get_settings
from vert_engine.core.exceptions import (
    CalibrationError,
    ConfigurationError,
    DegenerateCalibrationError,
)
from vert_engine.core.logging import get_logger
from vert_engine.core.types import (
    Active,
    Baseline,
    Calibrating,
    DebugSnapshot,
    EnginePhase,
    EngineState,
    LandmarkFrame,
    MeasurementState,
    Searching,
    Stabilizing,
    StabilityStatus,
    UserAnthropometry,
)
from vert_engine.pipeline.channel import SnapshotChannel

logger = get_logger(__name__)


class JumpEngine:
    """Orchestrates stability, calibration, scale and height tracking.

    State machine:
        SEARCHING: no hip landmarks, or hip confidence below threshold
        STABILIZING: pose present, subject not yet still for a full window
        CALIBRATING: still, accumulating baseline frames (or holding a
            finished baseline until user height is available)
        ACTIVE: baseline and scale fixed, every frame updates the best jump

    Frames must be fed sequentially by one producer. Control calls
    (``reset_calibration``, ``set_user_anthropometry``) may come from another
    thread; all entry points share one lock so a frame never observes a
    half-reset engine.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        anthropometry: UserAnthropometry | None = None,
        channel: SnapshotChannel | None = None,
    ) -> None:
        """Initialize engine with settings.

        Args:
            settings: Engine settings (uses cached defaults if None)
            anthropometry: User body measurements, if already known
            channel: Snapshot publisher (a private one is created if None)
        """
        self.settings = settings or get_settings()
        self.channel = channel or SnapshotChannel()

        # Components
        self._stability = StabilityDetector(self.settings.stability)
        self._calibration = CalibrationEngine(self.settings.calibration)
        self._scale_converter = ScaleConverter(self.settings.scale)
        self._diagnostics = DiagnosticsEmitter(self.settings.position)
        self._tracker: HeightTracker | None = None

        # State
        self._lock = threading.RLock()
        self._anthropometry = anthropometry
        self._state: EngineState = Searching()
        self._stability_status = StabilityStatus(is_stable=False, progress=0.0)
        self._last_frame: LandmarkFrame | None = None
        self._degenerate = False
        self._awaiting_anthropometry = False

    @property
    def state(self) -> EngineState:
        """Current state machine variant."""
        with self._lock:
            return self._state

    @property
    def phase(self) -> EnginePhase:
        """Current state machine phase."""
        with self._lock:
            return self._state.phase

    @property
    def is_calibrated(self) -> bool:
        """Check if baseline and scale are finalized."""
        return self.phase == EnginePhase.ACTIVE

    @property
    def anthropometry(self) -> UserAnthropometry | None:
        """Configured user measurements."""
        with self._lock:
            return self._anthropometry

    @property
    def measurement(self) -> MeasurementState:
        """Best jump height and spike reach of the current session."""
        with self._lock:
            if self._tracker is None:
                return MeasurementState()
            return self._tracker.state

    @property
    def snapshot(self) -> DebugSnapshot:
        """Diagnostics recomputed from the current state."""
        with self._lock:
            return self._build_snapshot()

    def process_frame(self, frame: LandmarkFrame) -> DebugSnapshot:
        """Process a single landmark frame.

        Never raises for bad or missing landmarks; problems are reported
        through the returned snapshot.

        Args:
            frame: Landmarks detected in one video frame

        Returns:
            Snapshot taken after the frame was processed
        """
        with self._lock:
            self._last_frame = frame

            if isinstance(self._state, Active):
                self._track(frame)
            else:
                self._advance(frame)

            snapshot = self._build_snapshot()
            self.channel.publish(snapshot)
            return snapshot

    def set_user_anthropometry(
        self,
        height_cm: float,
        eye_to_head_vertex_cm: float | None = None,
        heel_to_hand_reach_cm: float | None = None,
    ) -> None:
        """Set the user's body measurements.

        Must be set before or during stabilizing/calibrating. Once ACTIVE,
        new values are only stored for the next calibration: call
        ``reset_calibration()`` first to apply them.

        Args:
            height_cm: Standing height
            eye_to_head_vertex_cm: Eye-to-head-top distance, enables precise scale
            heel_to_hand_reach_cm: Standing reach, enables spike reach
        """
        anthropometry = UserAnthropometry(
            height_cm=height_cm,
            eye_to_head_vertex_cm=eye_to_head_vertex_cm,
            heel_to_hand_reach_cm=heel_to_hand_reach_cm,
        )

        with self._lock:
            self._anthropometry = anthropometry

            if isinstance(self._state, Active):
                logger.warning(
                    "Anthropometry changed while active; call reset_calibration() to apply it"
                )
                return

            logger.info(
                "User anthropometry set: height %.1f cm, eye-to-vertex %s, reach %s",
                height_cm,
                eye_to_head_vertex_cm,
                heel_to_hand_reach_cm,
            )

            if isinstance(self._state, Calibrating) and self._state.pending is not None:
                self._awaiting_anthropometry = False
                self._activate(self._state.pending)
                self.channel.publish(self._build_snapshot())

    def reset_calibration(self) -> None:
        """Return to SEARCHING and discard all accumulated and derived state.

        User anthropometry is kept. Safe to call at any time, repeatedly.
        """
        with self._lock:
            self._stability.reset()
            self._calibration.reset()
            self._tracker = None
            self._state = Searching()
            self._stability_status = StabilityStatus(is_stable=False, progress=0.0)
            self._last_frame = None
            self._degenerate = False
            self._awaiting_anthropometry = False
            logger.info("Calibration reset")
            self.channel.publish(self._build_snapshot())

    def _advance(self, frame: LandmarkFrame) -> None:
        """Run one frame through stability and calibration."""
        min_confidence = self.settings.stability.min_confidence
        hip = frame.hip_center

        if hip is None or hip.confidence < min_confidence:
            self._stability_status = self._stability.observe(None, 0.0)
            self._restart_calibration()
            self._set_state(Searching())
            return

        self._stability_status = self._stability.observe(hip.y, hip.confidence)
        if not self._stability_status.is_stable:
            self._restart_calibration()
            self._set_state(Stabilizing())
            return

        if isinstance(self._state, Calibrating) and self._state.pending is not None:
            self._activate(self._state.pending)
            return

        self._set_state(Calibrating())

        body_height = frame.body_height_px(min_confidence)
        if body_height is None:
            logger.debug("Head or feet not visible - restarting calibration")
            self._calibration.interrupt()
            return

        try:
            status = self._calibration.accept(
                hip.y, body_height, frame.upper_body_px(min_confidence)
            )
        except DegenerateCalibrationError as e:
            logger.warning("%s - waiting for a clearer view", e)
            self._degenerate = True
            return

        if status.is_complete and self._calibration.baseline is not None:
            self._degenerate = False
            self._activate(self._calibration.baseline)

    def _activate(self, baseline: Baseline) -> None:
        """Finalize the scale for a baseline, or hold it until that is possible."""
        if self._anthropometry is None:
            if not self._awaiting_anthropometry:
                logger.warning("Calibration finished but user height not set - waiting")
            self._awaiting_anthropometry = True
            self._set_state(Calibrating(pending=baseline))
            return

        try:
            scale = self._scale_converter.compute(baseline, self._anthropometry)
        except (ConfigurationError, CalibrationError) as e:
            if not self._awaiting_anthropometry:
                logger.warning("Cannot finalize scale: %s", e)
            self._awaiting_anthropometry = True
            self._set_state(Calibrating(pending=baseline))
            return

        self._awaiting_anthropometry = False
        self._tracker = HeightTracker(
            baseline,
            scale,
            self._anthropometry.heel_to_hand_reach_cm,
            self.settings.tracking,
        )
        self._set_state(Active(baseline=baseline, scale=scale, anthropometry=self._anthropometry))

    def _track(self, frame: LandmarkFrame) -> None:
        """Update the best jump from an ACTIVE frame."""
        min_confidence = self.settings.stability.min_confidence
        hip = frame.hip_center
        if self._tracker is None or hip is None or hip.confidence < min_confidence:
            return

        self._tracker.update(hip.y, frame.upper_body_px(min_confidence))

    def _restart_calibration(self) -> None:
        """Drop partial progress, the degenerate flag and any pending baseline."""
        self._calibration.interrupt()
        self._degenerate = False
        if isinstance(self._state, Calibrating) and self._state.pending is not None:
            logger.info("Stability lost - discarding pending baseline")
            self._calibration.reset()
            self._awaiting_anthropometry = False

    def _set_state(self, state: EngineState) -> None:
        if state.phase != self._state.phase:
            logger.info("Phase: %s -> %s", self._state.phase.name, state.phase.name)
        self._state = state

    def _build_snapshot(self) -> DebugSnapshot:
        state = self._state
        baseline: Baseline | None = None
        scale = None
        anthropometry = self._anthropometry

        if isinstance(state, Active):
            baseline = state.baseline
            scale = state.scale
            anthropometry = state.anthropometry
        elif isinstance(state, Calibrating):
            baseline = state.pending

        return self._diagnostics.emit(
            frame=self._last_frame,
            phase=state.phase,
            stability=self._stability_status,
            calibration=self._calibration.status,
            baseline=baseline,
            scale=scale,
            anthropometry=anthropometry,
            measurement=self._tracker.state if self._tracker is not None else None,
            movement_px=self._tracker.movement_px if self._tracker is not None else 0.0,
            degenerate=self._degenerate,
            awaiting_anthropometry=self._awaiting_anthropometry,
        )


def estimate_session(
    frames: Iterable[LandmarkFrame],
    anthropometry: UserAnthropometry,
    settings: Settings | None = None,
) -> DebugSnapshot:
    """Run a fresh engine over a recorded frame sequence.

    Pure function for batch processing recorded data.

    Args:
        frames: Landmark frames in capture order
        anthropometry: User body measurements
        settings: Engine settings

    Returns:
        Snapshot after the last frame
    """
    engine = JumpEngine(settings, anthropometry=anthropometry)
    snapshot = engine.snapshot

    for frame in frames:
        snapshot = engine.process_frame(frame)

    return snapshot
