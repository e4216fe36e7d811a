"""Tests for deviation-triggered recording."""

import pytest

from bitruvius.animation.auto_record import AutoRecorder
from bitruvius.animation.history import SequenceHistory
from bitruvius.animation.sequence import FrameSequence
from bitruvius.core.state import DEFAULT_POSE, apply_edit


def _recorder():
    rec = AutoRecorder(threshold=22.5)
    rec.enabled = True
    return rec


def test_below_threshold_updates_in_place():
    seq = FrameSequence()
    rec = _recorder()
    recorded = rec.update(seq, apply_edit(DEFAULT_POSE, {"l_calf": 22.4}))
    assert recorded is False
    assert len(seq) == 1
    assert seq.current.l_calf == 22.4
    assert rec.last_deviation == pytest.approx(22.4)


def test_above_threshold_appends_one_frame():
    seq = FrameSequence()
    rec = _recorder()
    candidate = apply_edit(DEFAULT_POSE, {"l_calf": 22.6})
    assert rec.update(seq, candidate) is True
    assert len(seq) == 2
    assert seq.index == 1
    assert seq.frames == (candidate, candidate)


def test_reference_is_previous_frame():
    a = apply_edit(DEFAULT_POSE, {"torso": 100})
    seq = FrameSequence([a, a])
    seq.select_frame(1)
    rec = _recorder()
    # Far from the default pose but close to the previous frame
    assert rec.update(seq, apply_edit(a, {"neck": 10})) is False
    assert len(seq) == 2
    assert rec.update(seq, apply_edit(a, {"neck": 30})) is True
    assert len(seq) == 3
    assert seq.index == 2


def test_first_frame_of_longer_sequence_never_records():
    seq = FrameSequence([DEFAULT_POSE, DEFAULT_POSE])
    rec = _recorder()
    assert rec.reference_for(seq) is None
    assert rec.update(seq, apply_edit(DEFAULT_POSE, {"neck": 90})) is False
    assert len(seq) == 2


def test_disabled_recorder_only_updates():
    seq = FrameSequence()
    rec = AutoRecorder()
    assert rec.update(seq, apply_edit(DEFAULT_POSE, {"neck": 90})) is False
    assert len(seq) == 1
    assert seq.current.neck == 90


def test_full_sequence_only_updates():
    seq = FrameSequence(max_frames=1)
    rec = _recorder()
    assert rec.update(seq, apply_edit(DEFAULT_POSE, {"neck": 90})) is False
    assert len(seq) == 1


def test_recorded_frame_is_undoable():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    rec = _recorder()
    rec.update(seq, apply_edit(DEFAULT_POSE, {"r_thigh": 40}))
    assert len(seq) == 2
    history.undo()
    assert seq.frames == (DEFAULT_POSE,)
