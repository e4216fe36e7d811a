"""Linear undo/redo over frame-sequence snapshots."""

from __future__ import annotations

import logging
from collections import deque
from typing import Optional

from bitruvius.animation.sequence import FrameSequence, SequenceState

logger = logging.getLogger(__name__)


class HistoryManager:
    """Two stacks of :class:`SequenceState`.

    ``past`` holds older snapshots (most recent last). ``future`` holds
    undone states (most recently undone first). Any new record discards
    the future branch.
    """

    def __init__(self) -> None:
        self._past: list[SequenceState] = []
        self._future: deque[SequenceState] = deque()

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def past(self) -> tuple[SequenceState, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[SequenceState, ...]:
        return tuple(self._future)

    def record(self, state: SequenceState) -> None:
        self._past.append(state)
        self._future.clear()

    def undo(self, current: SequenceState) -> Optional[SequenceState]:
        """Pop the latest snapshot; *current* moves to the front of future."""
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.appendleft(current)
        return previous

    def redo(self, current: SequenceState) -> Optional[SequenceState]:
        """Pop the front of future; *current* goes back onto past."""
        if not self._future:
            return None
        following = self._future.popleft()
        self._past.append(current)
        return following

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()


class SequenceHistory:
    """Binds a :class:`HistoryManager` to the sequence it snapshots."""

    def __init__(self, sequence: FrameSequence, manager: HistoryManager | None = None) -> None:
        self.sequence = sequence
        self.manager = manager if manager is not None else HistoryManager()
        sequence.history = self.manager

    @property
    def can_undo(self) -> bool:
        return self.manager.can_undo

    @property
    def can_redo(self) -> bool:
        return self.manager.can_redo

    def snapshot(self) -> None:
        """Mark an edit boundary (start of a gesture, mode toggle, ...)."""
        self.manager.record(self.sequence.state)

    def undo(self) -> Optional[SequenceState]:
        restored = self.manager.undo(self.sequence.state)
        if restored is None:
            return None
        self.sequence.restore(restored)
        logger.debug("Undo -> %d frames, index %d", len(restored.frames), restored.index)
        return restored

    def redo(self) -> Optional[SequenceState]:
        restored = self.manager.redo(self.sequence.state)
        if restored is None:
            return None
        self.sequence.restore(restored)
        logger.debug("Redo -> %d frames, index %d", len(restored.frames), restored.index)
        return restored
