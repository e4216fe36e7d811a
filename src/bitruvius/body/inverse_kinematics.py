"""Analytic two-bone inverse kinematics.

Planar law-of-cosines solver plus a limb-level wrapper that maps the
solution back onto pose fields (base angle, mirror sign and corrective
pivot shift of the upper bone included).
"""

import math
from typing import NamedTuple, Optional

import numpy as np

from bitruvius.body.kinematics import corrective_angle, resolve_bones
from bitruvius.body.skeleton import BONES, LIMBS
from bitruvius.constants import IK_MIN_DISTANCE, IK_REACH_EPSILON
from bitruvius.core.math_utils import (
    Vec2, clamp, nearest_equivalent, rad_to_deg, wrap_degrees,
)
from bitruvius.core.state import Pose, apply_edit


class IKSolution(NamedTuple):
    angle1: float  # first joint, local to the accumulated ancestor rotation
    angle2: float  # second joint, relative to the first segment


def bend_sign(relative_angle: float) -> int:
    """Bend direction implied by the current middle-joint angle."""
    return 1 if relative_angle >= 0.0 else -1


def solve_two_bone_ik(
    ancestor_rotation: float,
    chain_root: Vec2,
    target: Vec2,
    length1: float,
    length2: float,
    bend: int,
    current: Optional[IKSolution] = None,
) -> IKSolution:
    """Local angles (degrees) that put the chain end on *target*.

    Targets beyond ``length1 + length2`` are clamped so the chain fully
    extends toward them. A target on the chain root has no defined
    direction; *current* (or zeros) is returned unchanged in that case.
    """
    delta = np.asarray(target, dtype=np.float64) - np.asarray(chain_root, dtype=np.float64)
    dist = math.hypot(delta[0], delta[1])
    if dist < IK_MIN_DISTANCE:
        return current if current is not None else IKSolution(0.0, 0.0)

    bend = 1 if bend >= 0 else -1
    reach = min(dist, length1 + length2 - IK_REACH_EPSILON)

    # Angle between the first segment and the root-to-target vector
    cos_alpha = (length1 ** 2 + reach ** 2 - length2 ** 2) / (2.0 * length1 * reach)
    alpha = math.acos(clamp(cos_alpha, -1.0, 1.0))

    # Internal angle at the middle joint
    cos_mid = (length1 ** 2 + length2 ** 2 - reach ** 2) / (2.0 * length1 * length2)
    mid = math.acos(clamp(cos_mid, -1.0, 1.0))

    reach_angle = math.atan2(delta[1], delta[0]) - math.pi / 2
    first_global = rad_to_deg(reach_angle - alpha * bend)
    second_local = rad_to_deg((math.pi - mid) * bend)

    return IKSolution(wrap_degrees(first_global - ancestor_rotation), second_local)


def effector_position(pose: Pose, limb: str) -> Vec2:
    """Current global position of the end of *limb* (wrist or ankle)."""
    return resolve_bones(pose)[LIMBS[limb].lower].tip


def solve_limb_ik(
    pose: Pose,
    limb: str,
    target: Vec2,
    bend: Optional[int] = None,
) -> Pose:
    """Return *pose* with the limb's two joints re-solved to reach *target*.

    The bend direction defaults to the one the pose already has, so small
    target moves never flip the elbow/knee. Solved values are kept on the
    branch nearest to the current ones.
    """
    chain = LIMBS[limb]
    upper = BONES[chain.upper]
    lower = BONES[chain.lower]
    upper_xf = resolve_bones(pose)[upper.name]

    c = corrective_angle(upper, pose)
    # The drawn upper bone turns about its shifted pivot by rest + value + c
    ancestor = upper_xf.parent_angle + upper.rest_angle + c
    upper_value = pose.get(upper.joint)
    lower_value = pose.get(lower.joint)
    relative = lower.rest_angle + lower.mirror * lower_value - c

    if bend is None:
        bend = bend_sign(relative)

    solution = solve_two_bone_ik(
        ancestor, upper_xf.pivot, target, upper.length, lower.length, bend,
        current=IKSolution(upper.mirror * upper_value, relative),
    )

    new_upper = upper.mirror * solution.angle1
    new_lower = lower.mirror * (solution.angle2 + c - lower.rest_angle)
    return apply_edit(pose, {
        upper.joint: nearest_equivalent(new_upper, upper_value),
        lower.joint: nearest_equivalent(new_lower, lower_value),
    })
