"""Forward kinematics: global joint positions from a Pose.

Walks the skeleton schema root-outward. Each bone's child frame carries
the accumulated primary rotation only; a bone's corrective angle shifts
that bone's own pivot (rotation about its distal end) and is undone for
its children, so descendants never inherit it.
"""

from dataclasses import dataclass

import numpy as np

from bitruvius.body.skeleton import BONES, SKELETON, BoneDef
from bitruvius.core.math_utils import (
    Vec2, bone_vector, corrective_shift, rotate_vec2, vec2,
)
from bitruvius.core.state import Pose


@dataclass(frozen=True)
class BoneTransform:
    """Resolved global placement of one bone."""
    name: str
    anchor: Vec2         # attachment point before the corrective shift
    pivot: Vec2          # proximal joint (shifted anchor)
    tip: Vec2            # distal end
    parent_angle: float  # orientation of the parent's child frame
    angle: float         # drawn orientation, corrective included
    child_angle: float   # orientation handed to children, corrective excluded


def local_rotation(bone: BoneDef, pose: Pose) -> float:
    """Primary rotation of *bone* relative to its parent's child frame."""
    value = pose.get(bone.joint) if bone.joint else 0.0
    return bone.rest_angle + bone.mirror * value


def corrective_angle(bone: BoneDef, pose: Pose) -> float:
    return pose.get(bone.corrective) if bone.corrective else 0.0


def resolve_bones(pose: Pose) -> dict[str, BoneTransform]:
    """Resolve every bone of the schema for *pose*."""
    root = vec2(*pose.root)
    frames: dict[str, tuple[Vec2, float]] = {}
    result: dict[str, BoneTransform] = {}

    for bone in SKELETON:
        if bone.parent is None:
            origin, parent_angle = root, pose.root_rotation
        else:
            origin, parent_angle = frames[bone.parent]

        anchor = origin + rotate_vec2(vec2(*bone.offset), parent_angle)
        rotation = local_rotation(bone, pose)
        corrective = corrective_angle(bone, pose)

        if corrective != 0.0:
            pivot = anchor + rotate_vec2(corrective_shift(bone.length, corrective), parent_angle)
        else:
            pivot = anchor
        angle = parent_angle + rotation + corrective
        tip = pivot + bone_vector(bone.length, angle)
        child_angle = parent_angle + rotation

        frames[bone.name] = (tip, child_angle)
        result[bone.name] = BoneTransform(
            name=bone.name,
            anchor=anchor,
            pivot=pivot,
            tip=tip,
            parent_angle=parent_angle,
            angle=angle,
            child_angle=child_angle,
        )
    return result


def resolve_joints(pose: Pose) -> dict[str, Vec2]:
    """Global position of every named joint (see ``skeleton.joint_names``)."""
    joints: dict[str, Vec2] = {}
    for name, transform in resolve_bones(pose).items():
        bone = BONES[name]
        if bone.proximal and bone.proximal not in joints:
            joints[bone.proximal] = transform.pivot
        if bone.distal:
            joints[bone.distal] = transform.tip
    return joints


def forward_two_bone(
    ancestor_rotation: float,
    chain_root: Vec2,
    angle1: float,
    angle2: float,
    length1: float,
    length2: float,
) -> tuple[Vec2, Vec2]:
    """Middle joint and end effector of a planar two-link chain."""
    root = np.asarray(chain_root, dtype=np.float64)
    a1 = ancestor_rotation + angle1
    mid = root + bone_vector(length1, a1)
    end = mid + bone_vector(length2, a1 + angle2)
    return mid, end
