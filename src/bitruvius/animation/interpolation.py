"""Pose blending and change measurement."""

import math
from dataclasses import replace

from bitruvius.core.math_utils import clamp, lerp
from bitruvius.core.state import ANGLE_FIELDS, Pose


def interpolate_pose(a: Pose, b: Pose, t: float) -> Pose:
    """Blend two poses field by field.

    *t* is clamped to [0, 1]. Angles are blended linearly with no
    shortest-path wrap, so 170 -> -170 sweeps through 0.
    """
    t = clamp(t, 0.0, 1.0)
    if t == 0.0:
        return a
    if t == 1.0:
        return b
    changes = {name: lerp(getattr(a, name), getattr(b, name), t) for name in ANGLE_FIELDS}
    changes["root"] = (lerp(a.root[0], b.root[0], t), lerp(a.root[1], b.root[1], t))
    return replace(a, **changes)


def pose_deviation(a: Pose, b: Pose) -> float:
    """Largest single change between two poses.

    The root displacement (pixels, Euclidean) and every angle difference
    (degrees) are compared on the same scale.
    """
    max_diff = math.hypot(a.root[0] - b.root[0], a.root[1] - b.root[1])
    for name in ANGLE_FIELDS:
        max_diff = max(max_diff, abs(getattr(a, name) - getattr(b, name)))
    return max_diff
