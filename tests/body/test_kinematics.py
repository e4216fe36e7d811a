"""Tests for the skeleton schema and forward kinematics."""

import numpy as np
import pytest

from bitruvius.body.kinematics import (
    resolve_bones, resolve_joints, forward_two_bone, local_rotation,
)
from bitruvius.body.skeleton import (
    SKELETON, BONES, LIMBS, children_of, chain_to, joint_names,
)
from bitruvius.constants import FLOOR_Y
from bitruvius.core.math_utils import rotate_vec2, vec2
from bitruvius.core.state import DEFAULT_POSE, apply_edit


# Default pose with the cosmetic correctives removed
STRAIGHT = apply_edit(DEFAULT_POSE, {
    "l_bicep_corrective": 0, "r_bicep_corrective": 0,
    "l_thigh_corrective": 0, "r_thigh_corrective": 0,
})


# ── Schema ──

def test_parents_precede_children():
    seen = set()
    for bone in SKELETON:
        if bone.parent is not None:
            assert bone.parent in seen, f"{bone.name} listed before {bone.parent}"
        seen.add(bone.name)


def test_children_of_torso():
    names = {b.name for b in children_of("torso")}
    assert names == {"neck", "r_upper_arm", "l_upper_arm"}


def test_chain_to_foot():
    assert [b.name for b in chain_to("l_foot")] == [
        "pelvis", "l_upper_leg", "l_lower_leg", "l_foot",
    ]


def test_joint_names_cover_required_points():
    names = set(joint_names())
    for side in ("l", "r"):
        for j in ("hip", "knee", "ankle", "toe_tip", "shoulder", "elbow", "wrist", "hand_tip"):
            assert f"{side}_{j}" in names
    assert {"neck_base", "head_top"} <= names


def test_limb_effectors():
    assert LIMBS["r_arm"].effector == "r_wrist"
    assert LIMBS["l_leg"].effector == "l_ankle"


def test_arm_mirror_sign():
    assert local_rotation(BONES["r_upper_arm"], apply_edit(STRAIGHT, {"r_shoulder": 10})) == 100
    assert local_rotation(BONES["l_upper_arm"], apply_edit(STRAIGHT, {"l_shoulder": 10})) == -100


# ── Forward kinematics ──

def test_spine_positions():
    j = resolve_joints(DEFAULT_POSE)
    np.testing.assert_array_almost_equal(j["navel"], [0, 0])
    np.testing.assert_array_almost_equal(j["chest"], [0, -104])
    np.testing.assert_array_almost_equal(j["neck_base"], [0, -89])
    np.testing.assert_array_almost_equal(j["head_base"], [0, -109])
    np.testing.assert_array_almost_equal(j["head_top"], [0, -149])
    np.testing.assert_array_almost_equal(j["pelvis_base"], [0, 80])


def test_t_pose_arms_horizontal():
    j = resolve_joints(STRAIGHT)
    np.testing.assert_array_almost_equal(j["r_shoulder"], [55, -92])
    np.testing.assert_array_almost_equal(j["r_elbow"], [135, -92])
    np.testing.assert_array_almost_equal(j["r_wrist"], [215, -92])
    np.testing.assert_array_almost_equal(j["r_hand_tip"], [247, -92])
    np.testing.assert_array_almost_equal(j["l_wrist"], [-215, -92])


def test_straight_legs_reach_floor():
    j = resolve_joints(STRAIGHT)
    np.testing.assert_array_almost_equal(j["r_hip"], [18, 80])
    np.testing.assert_array_almost_equal(j["r_knee"], [18, 180])
    np.testing.assert_array_almost_equal(j["r_ankle"], [18, FLOOR_Y])
    # Foot base angle: ankle 0 means flat, pointing outward
    np.testing.assert_array_almost_equal(j["r_toe_base"], [42, FLOOR_Y])
    np.testing.assert_array_almost_equal(j["r_toe_tip"], [58, FLOOR_Y])
    np.testing.assert_array_almost_equal(j["l_toe_tip"], [-58, FLOOR_Y])


def test_default_pose_is_mirror_symmetric():
    j = resolve_joints(DEFAULT_POSE)
    for name, pos in j.items():
        if name.startswith("r_"):
            other = j["l_" + name[2:]]
            assert other[0] == pytest.approx(-pos[0], abs=1e-9)
            assert other[1] == pytest.approx(pos[1], abs=1e-9)


def test_corrective_does_not_rotate_children():
    base = resolve_bones(STRAIGHT)
    for c in (-30.0, 12.0, 40.0):
        bones = resolve_bones(apply_edit(STRAIGHT, {"r_bicep_corrective": c}))
        assert bones["r_lower_arm"].angle == pytest.approx(base["r_lower_arm"].angle)
        assert bones["r_hand"].angle == pytest.approx(base["r_hand"].angle)
        forearm = bones["r_lower_arm"].tip - bones["r_lower_arm"].pivot
        np.testing.assert_array_almost_equal(forearm, [80, 0])


def test_corrective_shifts_own_pivot_and_angle():
    bones = resolve_bones(apply_edit(STRAIGHT, {"r_thigh_corrective": 20}))
    thigh = bones["r_upper_leg"]
    assert thigh.angle == pytest.approx(20.0)
    assert thigh.child_angle == pytest.approx(0.0)
    assert not np.allclose(thigh.pivot, thigh.anchor)
    np.testing.assert_array_almost_equal(thigh.anchor, [18, 80])


def test_root_translation_moves_everything():
    moved = apply_edit(DEFAULT_POSE, {"root": (30, -12)})
    a = resolve_joints(DEFAULT_POSE)
    b = resolve_joints(moved)
    for name in a:
        np.testing.assert_array_almost_equal(b[name], a[name] + vec2(30, -12))


def test_root_rotation_rotates_about_root():
    turned = apply_edit(DEFAULT_POSE, {"root_rotation": 35})
    a = resolve_joints(DEFAULT_POSE)
    b = resolve_joints(turned)
    for name in a:
        np.testing.assert_array_almost_equal(b[name], rotate_vec2(a[name], 35))


def test_hips_rotate_only_lower_body():
    bent = apply_edit(DEFAULT_POSE, {"hips": 25})
    a = resolve_joints(DEFAULT_POSE)
    b = resolve_joints(bent)
    np.testing.assert_array_almost_equal(b["r_wrist"], a["r_wrist"])
    assert not np.allclose(b["r_ankle"], a["r_ankle"])


def test_forward_two_bone_straight():
    mid, end = forward_two_bone(0.0, vec2(0, 0), 0.0, 0.0, 100, 100)
    np.testing.assert_array_almost_equal(mid, [0, 100])
    np.testing.assert_array_almost_equal(end, [0, 200])


def test_forward_two_bone_right_angle():
    mid, end = forward_two_bone(0.0, vec2(10, 10), 0.0, 90.0, 50, 30)
    np.testing.assert_array_almost_equal(mid, [10, 60])
    np.testing.assert_array_almost_equal(end, [-20, 60])
