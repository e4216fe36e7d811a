"""Animation subsystem -- keyframe sequence, history, recording and playback."""

from bitruvius.animation.activity import ActivityMonitor, OverlayMode
from bitruvius.animation.auto_record import AutoRecorder
from bitruvius.animation.cartridges import CartridgeLibrary
from bitruvius.animation.history import HistoryManager, SequenceHistory
from bitruvius.animation.interpolation import interpolate_pose, pose_deviation
from bitruvius.animation.playback import PlaybackScheduler
from bitruvius.animation.sequence import FrameSequence, SequenceState

__all__ = [
    "ActivityMonitor",
    "AutoRecorder",
    "CartridgeLibrary",
    "FrameSequence",
    "HistoryManager",
    "OverlayMode",
    "PlaybackScheduler",
    "SequenceHistory",
    "SequenceState",
    "interpolate_pose",
    "pose_deviation",
]
