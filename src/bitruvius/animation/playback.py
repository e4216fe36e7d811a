"""Tick-driven playback of a frame sequence.

Provides PlaybackScheduler, which a host event loop advances by calling
``tick(now)`` once per display frame (timestamps in milliseconds).
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from bitruvius.animation.interpolation import interpolate_pose
from bitruvius.animation.sequence import FrameSequence
from bitruvius.constants import DEFAULT_FPS, MAX_FPS, MIN_FPS
from bitruvius.core.state import Pose

logger = logging.getLogger(__name__)


class PlaybackScheduler:
    """Loops a FrameSequence either frame by frame or tweened.

    Stepped mode advances the sequence cursor every ``1000 / fps`` ms.
    Tweened mode maps a running time onto the loop and blends the two
    frames around it; the cursor follows the lower frame.

    Callbacks:
      on_frame(index, pose)   after every tick that ran while playing
    """

    def __init__(self, sequence: FrameSequence, fps: int = DEFAULT_FPS) -> None:
        self.sequence = sequence
        self._playing: bool = False
        self._tweening: bool = False
        self._fps: int = self._clamp_fps(fps)

        self._last_time: Optional[float] = None
        self._accumulator: float = 0.0   # stepped: ms spent on the current frame
        self._elapsed: float = 0.0       # tweened: ms along the loop
        self._interpolated: Optional[Pose] = None

        self.on_frame: Callable | None = None

    # ── Properties ────────────────────────────────────────────────

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def is_tweening(self) -> bool:
        return self._tweening

    @property
    def fps(self) -> int:
        return self._fps

    @property
    def frame_duration(self) -> float:
        """Milliseconds per frame."""
        return 1000.0 / self._fps

    @property
    def interpolated_pose(self) -> Optional[Pose]:
        return self._interpolated

    @property
    def display_pose(self) -> Pose:
        """Pose a renderer should show right now."""
        if self._playing and self._tweening and self._interpolated is not None:
            return self._interpolated
        return self.sequence.current

    # ── Control ───────────────────────────────────────────────────

    def play(self, now: Optional[float] = None) -> None:
        """Start (or restart) the loop from the selected frame.

        Without *now* the timing is seeded by the next tick.
        """
        self._playing = True
        self._interpolated = None
        self._seed(now)
        logger.info("Playback started at frame %d (%d fps, %s)",
                    self.sequence.index, self._fps,
                    "tweened" if self._tweening else "stepped")

    def pause(self) -> None:
        """Stop the loop and fall back to the literal current frame."""
        if self._playing:
            logger.info("Playback paused at frame %d", self.sequence.index)
        self._playing = False
        self._interpolated = None
        self._last_time = None

    stop = pause

    def toggle(self, now: Optional[float] = None) -> None:
        if self._playing:
            self.pause()
        else:
            self.play(now)

    def set_tweening(self, enabled: bool, now: Optional[float] = None) -> None:
        self._tweening = bool(enabled)
        self._interpolated = None
        self.resync(now)

    def set_fps(self, fps: int, now: Optional[float] = None) -> None:
        self._fps = self._clamp_fps(fps)
        self.resync(now)

    def resync(self, now: Optional[float] = None) -> None:
        """Re-seed timing after the sequence or settings changed mid-play."""
        if self._playing:
            self._seed(now)

    # ── Per-frame tick ────────────────────────────────────────────

    def tick(self, now: float) -> Optional[Pose]:
        """Advance playback to time *now* (ms). Returns the display pose,
        or None when not playing."""
        if not self._playing:
            return None

        if self._last_time is None:
            dt = 0.0
        else:
            dt = max(0.0, now - self._last_time)
        self._last_time = now

        if self._tweening:
            self._advance_tweened(dt)
        else:
            self._advance_stepped(dt)

        pose = self.display_pose
        if self.on_frame:
            self.on_frame(self.sequence.index, pose)
        return pose

    def _advance_stepped(self, dt: float) -> None:
        self._accumulator += dt
        if self._accumulator >= self.frame_duration:
            self.sequence.advance(1)
            self._accumulator = 0.0

    def _advance_tweened(self, dt: float) -> None:
        count = len(self.sequence)
        duration = self.frame_duration
        self._elapsed = (self._elapsed + dt) % (count * duration)

        exact = self._elapsed / duration
        frame_index = min(int(math.floor(exact)), count - 1)
        t = exact - frame_index

        if frame_index != self.sequence.index:
            self.sequence.select_frame(frame_index)
        self._interpolated = interpolate_pose(
            self.sequence[frame_index],
            self.sequence[(frame_index + 1) % count],
            t,
        )

    def _seed(self, now: Optional[float]) -> None:
        self._last_time = now
        # Stepped mode does not take the seed: the first step comes one
        # full frame after play, whichever frame is selected
        self._accumulator = 0.0
        self._elapsed = self.sequence.index * self.frame_duration

    @staticmethod
    def _clamp_fps(fps: int) -> int:
        return max(MIN_FPS, min(MAX_FPS, int(fps)))
