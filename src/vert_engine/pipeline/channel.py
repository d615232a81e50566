"""Single-slot publisher for the latest engine snapshot."""

from __future__ import annotations

import threading

from vert_engine.core.types import DebugSnapshot


class SnapshotChannel:
    """Holds only the most recent DebugSnapshot.

    Publishing overwrites the slot and bumps a version counter. Readers
    either poll ``latest`` or block in ``wait_for`` until a version newer
    than the one they last saw is published. Snapshots are immutable, so
    any number of readers can share them.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition()
        self._snapshot = DebugSnapshot()
        self._version = 0

    @property
    def latest(self) -> DebugSnapshot:
        """Most recently published snapshot."""
        with self._condition:
            return self._snapshot

    @property
    def version(self) -> int:
        """Number of snapshots published so far."""
        with self._condition:
            return self._version

    def publish(self, snapshot: DebugSnapshot) -> int:
        """Replace the current snapshot and wake waiting readers.

        Args:
            snapshot: New snapshot

        Returns:
            Version assigned to the snapshot
        """
        with self._condition:
            self._snapshot = snapshot
            self._version += 1
            self._condition.notify_all()
            return self._version

    def wait_for(
        self,
        after_version: int,
        timeout: float | None = None,
    ) -> tuple[int, DebugSnapshot] | None:
        """Block until a snapshot newer than ``after_version`` is available.

        Args:
            after_version: Last version the reader has seen
            timeout: Maximum seconds to wait (None waits indefinitely)

        Returns:
            (version, snapshot), or None if the timeout expired
        """
        with self._condition:
            ready = self._condition.wait_for(lambda: self._version > after_version, timeout)
            if not ready:
                return None
            return self._version, self._snapshot
