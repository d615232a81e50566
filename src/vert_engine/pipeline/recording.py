"""Loading recorded landmark sessions (JSON Lines)."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from vert_engine.core.exceptions import VertEngineError
from vert_engine.core.logging import get_logger
from vert_engine.core.types import LandmarkFrame

logger = get_logger(__name__)


def parse_frame_record(record: dict[str, Any], default_idx: int = 0) -> LandmarkFrame:
    """Convert one recorded frame to a LandmarkFrame.

    Expected keys: ``landmarks`` as a list of ``[joint_id, x_px, y_px, confidence]``,
    and optionally ``frame_idx``, ``timestamp``, ``width`` and ``height``.

    Args:
        record: Decoded JSON object
        default_idx: Frame index used when the record has none

    Returns:
        LandmarkFrame for the record
    """
    points = [
        (int(p[0]), float(p[1]), float(p[2]), float(p[3])) for p in record.get("landmarks", [])
    ]
    width = record.get("width")
    height = record.get("height")
    return LandmarkFrame.from_points(
        points,
        frame_idx=int(record.get("frame_idx", default_idx)),
        timestamp=float(record.get("timestamp", 0.0)),
        width=int(width) if width is not None else None,
        height=int(height) if height is not None else None,
    )


def iter_session(path: Path) -> Iterator[LandmarkFrame]:
    """Lazily read frames from a JSON Lines recording.

    Args:
        path: Recording file, one JSON object per line

    Yields:
        LandmarkFrame per non-empty line

    Raises:
        VertEngineError: If a line cannot be parsed
    """
    with open(path) as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                yield parse_frame_record(json.loads(line), default_idx=line_no - 1)
            except (ValueError, TypeError, IndexError, KeyError) as e:
                raise VertEngineError(f"{path}:{line_no}: invalid frame record: {e}") from e


def load_session(path: Path) -> list[LandmarkFrame]:
    """Read a whole JSON Lines recording.

    Args:
        path: Recording file

    Returns:
        Frames in file order
    """
    frames = list(iter_session(path))
    logger.info("Loaded %d frames from %s", len(frames), path)
    return frames
