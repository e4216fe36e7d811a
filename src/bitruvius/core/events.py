"""EventBus for decoupled publish/subscribe communication."""

from enum import Enum, auto
from typing import Any, Callable
from collections import defaultdict


class EventType(Enum):
    # Pose / sequence state
    POSE_CHANGED = auto()         # data: pose (Pose)
    FRAMES_CHANGED = auto()       # data: count (int), index (int)
    FRAME_SELECTED = auto()       # data: index (int)
    FRAME_RECORDED = auto()       # data: index (int), deviation (float)

    # History
    HISTORY_CHANGED = auto()      # data: can_undo (bool), can_redo (bool)

    # Modes
    RECORDING_TOGGLED = auto()    # data: enabled (bool)
    TWEEN_TOGGLED = auto()        # data: enabled (bool)
    FPS_CHANGED = auto()          # data: fps (int)

    # Playback
    ANIM_PLAY = auto()
    ANIM_PAUSE = auto()
    ANIM_PROGRESS = auto()        # data: index (int), pose (Pose)

    # Library
    CARTRIDGE_LOADED = auto()     # data: name (str), count (int)

    # Display
    OVERLAY_MODE_CHANGED = auto()  # data: mode (OverlayMode)
    VISIBILITY_CHANGED = auto()    # data: hidden (set[str])


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
