"""Tests for the Qt playback timer."""

import pytest

from PySide6.QtCore import QCoreApplication

from bitruvius.coordination.session import EditingSession
from bitruvius.ui.playback_timer import PlaybackTimer


class FakeClock:
    def __init__(self):
        self.t = 0.0

    def now(self):
        return self.t


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


@pytest.fixture
def timer(qapp):
    session = EditingSession()
    session.add_frame()
    session.select_frame(0)
    return PlaybackTimer(session, clock=FakeClock())


def test_play_starts_loop(timer):
    timer.play()
    assert timer.is_active
    assert timer.session.is_playing
    timer.stop()


def test_timeout_ticks_session(timer):
    ticks = []
    timer.ticked.connect(lambda pose: ticks.append(pose))
    timer.play()
    timer._on_timeout()
    timer.clock.t = 1000.0 / 6
    timer._on_timeout()
    assert timer.session.index == 1
    assert len(ticks) == 2
    timer.stop()


def test_start_twice_keeps_single_loop(timer):
    timer.start()
    timer.start()
    assert timer.is_active
    timer.stop()
    assert not timer.is_active


def test_idles_after_playback_and_activity_end(timer):
    timer.play()
    timer._on_timeout()
    timer.pause()
    timer.clock.t = 10_000.0
    timer._on_timeout()
    assert not timer.is_active


def test_poke_restarts(timer):
    timer.poke()
    assert timer.is_active
    timer.stop()
