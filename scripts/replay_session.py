#!/usr/bin/env python3
"""Replay a recorded landmark session through the jump height engine.

Useful for tuning stability, calibration and scale settings against
sessions with a known reference jump height.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from vert_engine.core.config import get_settings
from vert_engine.core.exceptions import VertEngineError
from vert_engine.core.logging import get_logger, setup_logging
from vert_engine.core.types import DebugSnapshot, EnginePhase, UserAnthropometry
from vert_engine.pipeline.processor import estimate_session
from vert_engine.pipeline.recording import iter_session

logger = get_logger(__name__)


def print_results(snapshot: DebugSnapshot, reference_cm: float | None) -> None:
    """Print the final measurement to console."""
    m = snapshot.measurement

    print("\n" + "=" * 60)
    print("SESSION RESULT")
    print("=" * 60)
    print(f"Final phase:         {snapshot.phase.name}")

    if snapshot.phase != EnginePhase.ACTIVE:
        print("Engine never finished calibrating.")
        if snapshot.awaiting_anthropometry:
            print("Baseline was ready but the user height could not be used.")
        if snapshot.calibration_degenerate:
            print("Last calibration attempt was degenerate (body height too small).")
        return

    print(f"Baseline hip Y:      {snapshot.baseline_hip_y_px:.1f} px")
    print(f"Body height:         {snapshot.body_height_px:.1f} px")
    print(f"Scale:               {snapshot.px_to_cm:.4f} cm/px (precise: {snapshot.is_precise})")
    print(
        f"Max height:          {m.max_height_cm:.1f} cm "
        f"[{m.max_height_lower_cm:.1f}, {m.max_height_upper_cm:.1f}]"
    )
    if m.max_spike_reach_cm > 0:
        print(
            f"Max spike reach:     {m.max_spike_reach_cm:.1f} cm "
            f"[{m.max_spike_reach_lower_cm:.1f}, {m.max_spike_reach_upper_cm:.1f}]"
        )

    if reference_cm is not None and reference_cm > 0:
        error = m.max_height_cm - reference_cm
        print(f"\nReference:           {reference_cm:.1f} cm")
        print(f"Error:               {error:+.1f} cm ({error / reference_cm * 100:+.1f}%)")
        inside = m.max_height_lower_cm <= reference_cm <= m.max_height_upper_cm
        print(f"Reference in bounds: {'yes' if inside else 'no'}")


def main() -> int:
    """Run replay script."""
    parser = argparse.ArgumentParser(description="Replay a recorded landmark session")
    parser.add_argument(
        "session",
        type=Path,
        help="Path to JSON Lines recording of landmark frames",
    )
    parser.add_argument(
        "--height-cm",
        type=float,
        required=True,
        help="Subject standing height in cm",
    )
    parser.add_argument(
        "--eye-to-vertex-cm",
        type=float,
        help="Eye-to-head-vertex distance in cm (enables precise scale)",
    )
    parser.add_argument(
        "--reach-cm",
        type=float,
        help="Heel-to-hand standing reach in cm (enables spike reach)",
    )
    parser.add_argument(
        "--reference-cm",
        "-r",
        type=float,
        help="Known jump height for error reporting",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log per-frame engine details",
    )

    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging, "DEBUG" if args.verbose else None)

    if not args.session.exists():
        logger.error("Recording not found: %s", args.session)
        return 1

    anthropometry = UserAnthropometry(
        height_cm=args.height_cm,
        eye_to_head_vertex_cm=args.eye_to_vertex_cm,
        heel_to_hand_reach_cm=args.reach_cm,
    )

    try:
        snapshot = estimate_session(iter_session(args.session), anthropometry, settings)
    except VertEngineError as e:
        logger.error("Replay failed: %s", e)
        return 1

    print_results(snapshot, args.reference_cm)
    return 0 if snapshot.phase == EnginePhase.ACTIVE else 2


if __name__ == "__main__":
    sys.exit(main())
