"""In-memory OCR progress tracking shared with the polling endpoint."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional


@dataclass(frozen=True)
class Progress:
    """Snapshot of the OCR progress of one session."""

    completed: int = 0
    total: int = 0
    expires_at: Optional[float] = None

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.completed / self.total * 100)


class ProgressStore:
    """Map session ids to progress snapshots.

    Snapshots are immutable and replaced on every write, so a single writer
    and any number of readers need no locking. Finished sessions expire after
    ``ttl_seconds`` and are purged lazily on read.
    """

    def __init__(self, ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Progress] = {}

    def set(self, session_id: str, completed: int, total: int) -> None:
        self._entries[session_id] = Progress(completed=completed, total=total)

    def finish(self, session_id: str) -> None:
        """Mark the session complete and start its expiry countdown."""

        current = self._entries.get(session_id, Progress())
        self._entries[session_id] = Progress(
            completed=current.total,
            total=current.total,
            expires_at=self._clock() + self._ttl,
        )

    def clear(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    def get(self, session_id: str) -> Progress:
        progress = self._entries.get(session_id)
        if progress is None:
            return Progress()
        if progress.expires_at is not None and self._clock() >= progress.expires_at:
            self.clear(session_id)
            return Progress()
        return progress
