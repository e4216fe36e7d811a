"""Rig overlay visibility driven by recent pose activity."""

from enum import Enum
from typing import Optional

from bitruvius.constants import ACTIVITY_TIMEOUT_MS
from bitruvius.core.state import Pose


class OverlayMode(Enum):
    AUTO = "auto"
    ON = "on"
    OFF = "off"


class ActivityMonitor:
    """Tracks when the displayed pose last changed.

    In AUTO mode the overlay shows for ``timeout_ms`` after each change.
    """

    def __init__(self, timeout_ms: float = ACTIVITY_TIMEOUT_MS):
        self.mode = OverlayMode.AUTO
        self.timeout_ms = timeout_ms
        self._last_pose: Optional[Pose] = None
        self._active_until: Optional[float] = None

    def observe(self, pose: Pose, now: float) -> None:
        """Feed the currently displayed pose; restarts the timeout on change."""
        if self._last_pose is None or pose != self._last_pose:
            self._last_pose = pose
            self._active_until = now + self.timeout_ms

    def is_active(self, now: float) -> bool:
        return self._active_until is not None and now < self._active_until

    def show_overlay(self, now: float) -> bool:
        if self.mode is OverlayMode.ON:
            return True
        if self.mode is OverlayMode.OFF:
            return False
        return self.is_active(now)
