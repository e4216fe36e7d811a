"""Tests for the visibility map."""

from bitruvius.coordination.visibility import VisibilityMap


def test_everything_visible_by_default():
    vis = VisibilityMap()
    assert all(vis.as_dict().values())
    assert vis.hidden() == []


def test_toggle():
    vis = VisibilityMap()
    assert vis.toggle("l_calf") is False
    assert not vis.is_visible("l_calf")
    assert vis.toggle("l_calf") is True
    assert vis.is_visible("l_calf")


def test_isolate_hides_all_others():
    vis = VisibilityMap(["torso", "neck", "l_calf", "r_calf"])
    vis.isolate("neck")
    assert vis.is_visible("neck")
    assert sorted(vis.hidden()) == ["l_calf", "r_calf", "torso"]


def test_isolate_again_restores_all():
    vis = VisibilityMap(["torso", "neck", "l_calf", "r_calf"])
    vis.isolate("neck")
    vis.isolate("torso")
    assert vis.hidden() == []


def test_isolate_with_few_hidden_still_isolates():
    vis = VisibilityMap(["torso", "neck", "l_calf", "r_calf"])
    vis.toggle("torso")
    vis.toggle("neck")
    vis.isolate("l_calf")
    assert vis.hidden() != []
    assert vis.is_visible("l_calf")
    assert not vis.is_visible("neck")
