"""Frame processing pipeline orchestration."""

from vert_engine.pipeline.channel import SnapshotChannel
from vert_engine.pipeline.processor import JumpEngine, estimate_session
from vert_engine.pipeline.recording import iter_session, load_session, parse_frame_record

__all__ = [
    "JumpEngine",
    "SnapshotChannel",
    "estimate_session",
    "iter_session",
    "load_session",
    "parse_frame_record",
]
