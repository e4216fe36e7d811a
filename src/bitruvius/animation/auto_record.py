"""Deviation-triggered keyframe recording."""

import logging
from typing import Optional

from bitruvius.animation.interpolation import pose_deviation
from bitruvius.animation.sequence import FrameSequence
from bitruvius.constants import RECORDING_THRESHOLD
from bitruvius.core.state import DEFAULT_POSE, Pose

logger = logging.getLogger(__name__)


class AutoRecorder:
    """Commits a new frame whenever a live edit moves far enough.

    The candidate is compared against the frame before the cursor, or
    against the initial pose while the sequence still has a single frame.
    Below the threshold the edit just overwrites the working frame.
    """

    def __init__(self, threshold: float = RECORDING_THRESHOLD, initial_pose: Pose = DEFAULT_POSE):
        self.enabled = False
        self.threshold = threshold
        self.initial_pose = initial_pose
        self.last_deviation = 0.0

    def reference_for(self, sequence: FrameSequence) -> Optional[Pose]:
        if sequence.index > 0:
            return sequence[sequence.index - 1]
        if len(sequence) == 1:
            return self.initial_pose
        return None

    def update(self, sequence: FrameSequence, candidate: Pose) -> bool:
        """Apply *candidate* to the sequence; True if a frame was recorded."""
        if self.enabled and not sequence.is_full:
            reference = self.reference_for(sequence)
            if reference is not None:
                self.last_deviation = pose_deviation(candidate, reference)
                if self.last_deviation > self.threshold:
                    sequence.commit_current(candidate)
                    logger.debug("Recorded frame %d (deviation %.1f)",
                                 sequence.index, self.last_deviation)
                    return True
        sequence.update_current(candidate)
        return False
