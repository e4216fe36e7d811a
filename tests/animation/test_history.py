"""Tests for undo/redo history."""

from bitruvius.animation.history import HistoryManager, SequenceHistory
from bitruvius.animation.sequence import FrameSequence, SequenceState
from bitruvius.core.state import DEFAULT_POSE, apply_edit


def _edit(seq, history, neck):
    history.snapshot()
    seq.update_current(apply_edit(seq.current, {"neck": neck}))


def test_empty_history_is_noop():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    assert not history.can_undo
    assert not history.can_redo
    assert history.undo() is None
    assert history.redo() is None
    assert seq.state == SequenceState((DEFAULT_POSE,), 0)


def test_three_undos_restore_initial_state():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    initial = seq.state
    for neck in (10, 20, 30):
        _edit(seq, history, neck)
    final = seq.state

    for _ in range(3):
        assert history.undo() is not None
    assert seq.state == initial

    # Bottom of the stack
    assert history.undo() is None
    assert seq.state == initial

    for _ in range(3):
        assert history.redo() is not None
    assert seq.state == final
    assert history.redo() is None


def test_redo_pops_most_recently_undone_first():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    for neck in (10, 20, 30):
        _edit(seq, history, neck)
    history.undo()
    history.undo()
    assert seq.current.neck == 10
    history.redo()
    assert seq.current.neck == 20


def test_new_edit_discards_future():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    _edit(seq, history, 10)
    _edit(seq, history, 20)
    history.undo()
    assert history.can_redo
    _edit(seq, history, 99)
    assert not history.can_redo
    assert history.redo() is None
    assert seq.current.neck == 99


def test_structural_ops_are_undoable():
    seq = FrameSequence()
    history = SequenceHistory(seq)
    seq.add_frame()
    seq.add_frame()
    seq.select_frame(0)
    seq.delete_frame()
    assert len(seq) == 2
    history.undo()
    assert seq.state == SequenceState((DEFAULT_POSE,) * 3, 0)
    history.undo()
    history.undo()
    assert seq.state == SequenceState((DEFAULT_POSE,), 0)


def test_manager_stacks():
    mgr = HistoryManager()
    a = SequenceState((DEFAULT_POSE,), 0)
    b = SequenceState((DEFAULT_POSE, DEFAULT_POSE), 1)
    c = SequenceState((DEFAULT_POSE,) * 3, 2)
    mgr.record(a)
    mgr.record(b)
    assert mgr.undo(c) == b
    assert mgr.future == (c,)
    assert mgr.undo(b) == a
    assert mgr.future == (b, c)
    assert mgr.redo(a) == b
    assert mgr.past == (a,)
    mgr.clear()
    assert not mgr.can_undo and not mgr.can_redo
