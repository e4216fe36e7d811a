"""Qt host loop that drives an EditingSession at display rate."""

from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal

from bitruvius.constants import TIMER_INTERVAL_MS
from bitruvius.coordination.session import EditingSession
from bitruvius.core.clock import FrameClock


class PlaybackTimer(QObject):
    """Calls ``session.tick(now)`` every ~16 ms while there is work to do.

    The timer idles itself once playback is stopped and the overlay
    activity window has run out; ``poke()`` wakes it after an edit.
    """

    ticked = Signal(object)  # display pose

    def __init__(self, session: EditingSession, clock: Optional[FrameClock] = None, parent=None):
        super().__init__(parent)
        self.session = session
        self.clock = clock if clock is not None else FrameClock()

        self._timer = QTimer(self)
        self._timer.setInterval(TIMER_INTERVAL_MS)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        # Never run two loops at once
        if self._timer.isActive():
            self._timer.stop()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def play(self) -> None:
        self.session.play(self.clock.now())
        self.start()

    def pause(self) -> None:
        self.session.pause()

    def poke(self) -> None:
        """Restart the loop after an edit so the overlay timeout is tracked."""
        if not self._timer.isActive():
            self.start()

    def _on_timeout(self) -> None:
        now = self.clock.now()
        pose = self.session.tick(now)
        self.ticked.emit(pose)
        if not self.session.is_playing and not self.session.activity.is_active(now):
            self._timer.stop()
