"""Bounded, looping frame sequence with a current-frame cursor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bitruvius.animation.interpolation import interpolate_pose
from bitruvius.constants import MAX_FRAMES
from bitruvius.core.state import DEFAULT_POSE, Pose

if TYPE_CHECKING:
    from bitruvius.animation.history import HistoryManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SequenceState:
    """Immutable snapshot of ``(frames, index)``."""

    frames: tuple[Pose, ...]
    index: int

    @property
    def current(self) -> Pose:
        return self.frames[self.index]


class FrameSequence:
    """Ordered, non-empty list of poses plus a current index.

    Mutations that would break the bounds (capacity, last remaining
    frame) are rejected as no-ops. When a :class:`HistoryManager` is
    attached, every accepted mutation except selection and in-place
    editing records the pre-mutation state first.
    """

    def __init__(
        self,
        frames: list[Pose] | None = None,
        max_frames: int = MAX_FRAMES,
        history: HistoryManager | None = None,
    ) -> None:
        self._frames: list[Pose] = list(frames) if frames else [DEFAULT_POSE]
        self._index: int = 0
        self.max_frames = max(1, max_frames)
        self.history = history

    # ── Queries ───────────────────────────────────────────────────

    @property
    def frames(self) -> tuple[Pose, ...]:
        return tuple(self._frames)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> Pose:
        return self._frames[self._index]

    @property
    def state(self) -> SequenceState:
        return SequenceState(tuple(self._frames), self._index)

    @property
    def is_full(self) -> bool:
        return len(self._frames) >= self.max_frames

    @property
    def can_delete(self) -> bool:
        return len(self._frames) > 1

    def __len__(self) -> int:
        return len(self._frames)

    def __getitem__(self, i: int) -> Pose:
        return self._frames[i]

    # ── Mutations ─────────────────────────────────────────────────

    def add_frame(self) -> SequenceState:
        """Append a duplicate of the current frame and select it."""
        if self.is_full:
            logger.debug("add_frame rejected: sequence at capacity (%d)", self.max_frames)
            return self.state
        self._record()
        self._frames.append(self.current)
        self._index = len(self._frames) - 1
        return self.state

    def insert_between(self) -> SequenceState:
        """Insert the midpoint of current and next (wrapping) after current."""
        if self.is_full:
            logger.debug("insert_between rejected: sequence at capacity (%d)", self.max_frames)
            return self.state
        self._record()
        nxt = self._frames[(self._index + 1) % len(self._frames)]
        midpoint = interpolate_pose(self.current, nxt, 0.5)
        self._frames.insert(self._index + 1, midpoint)
        self._index += 1
        return self.state

    def delete_frame(self) -> SequenceState:
        """Remove the current frame; the last remaining frame is kept."""
        if not self.can_delete:
            logger.debug("delete_frame rejected: only one frame left")
            return self.state
        self._record()
        del self._frames[self._index]
        if self._index >= len(self._frames):
            self._index = len(self._frames) - 1
        return self.state

    def select_frame(self, index: int) -> SequenceState:
        """Move the cursor; out-of-range indices are clamped."""
        self._index = max(0, min(len(self._frames) - 1, index))
        return self.state

    def advance(self, step: int = 1) -> SequenceState:
        """Move the cursor by *step*, wrapping around the loop."""
        self._index = (self._index + step) % len(self._frames)
        return self.state

    def replace_current(self, pose: Pose) -> SequenceState:
        """Overwrite the current frame as one undoable step."""
        self._record()
        self._frames[self._index] = pose
        return self.state

    def update_current(self, pose: Pose) -> SequenceState:
        """Overwrite the current frame without a snapshot.

        Used for continuous edits inside a gesture whose snapshot was
        already taken.
        """
        self._frames[self._index] = pose
        return self.state

    def commit_current(self, pose: Pose) -> SequenceState:
        """Store *pose* in the current slot and continue on a duplicate.

        The duplicate is inserted right after the current frame and
        becomes the working frame. While recording at the end of the
        sequence that makes it the new trailing frame; from a frame in
        the middle the recording continues in place instead of jumping
        to the end. Rejected at capacity.
        """
        if self.is_full:
            return self.state
        self._record()
        self._frames[self._index] = pose
        self._frames.insert(self._index + 1, pose)
        self._index += 1
        return self.state

    def restore(self, state: SequenceState) -> None:
        """Replace the whole sequence with a snapshot."""
        self._frames = list(state.frames) or [DEFAULT_POSE]
        self._index = max(0, min(len(self._frames) - 1, state.index))

    def _record(self) -> None:
        if self.history is not None:
            self.history.record(self.state)


# ── Serialization ─────────────────────────────────────────────────

def frames_to_data(frames: tuple[Pose, ...] | list[Pose]) -> Any:
    """Export payload: a list of pose records, or one record for a single frame."""
    if len(frames) > 1:
        return [pose.to_dict() for pose in frames]
    return frames[0].to_dict()


def frames_from_data(data: Any) -> list[Pose]:
    """Inverse of :func:`frames_to_data`; accepts a record or a list of records."""
    if isinstance(data, dict):
        return [Pose.from_dict(data)]
    if isinstance(data, list):
        if not data:
            raise ValueError("Frame list is empty")
        return [Pose.from_dict(item) for item in data]
    raise ValueError(f"Expected a pose record or a list of records, got {type(data).__name__}")
