"""NumPy-backed 2D math utilities for the planar rig.

Vectors are plain numpy arrays of shape (2,). Angles passed across the
public API are in degrees, clockwise-positive in screen space (+y down),
with 0 pointing along +y. A bone of length L at global angle a therefore
spans the vector ``L * (-sin a, cos a)``.
"""

import math

import numpy as np
from numpy.typing import NDArray

# Type alias
Vec2 = NDArray[np.float64]


def vec2(x: float = 0.0, y: float = 0.0) -> Vec2:
    return np.array([x, y], dtype=np.float64)


def deg_to_rad(deg: float) -> float:
    return deg * math.pi / 180.0


def rad_to_deg(rad: float) -> float:
    return rad * 180.0 / math.pi


def rotate_vec2(v: Vec2, angle_deg: float) -> Vec2:
    """Rotate a 2D vector by angle_deg (same sense as an SVG ``rotate``)."""
    rad = deg_to_rad(angle_deg)
    c, s = math.cos(rad), math.sin(rad)
    return np.array([v[0] * c - v[1] * s, v[0] * s + v[1] * c], dtype=np.float64)


def bone_vector(length: float, angle_deg: float) -> Vec2:
    """Vector spanned by a bone of *length* at global angle *angle_deg*."""
    rad = deg_to_rad(angle_deg)
    return np.array([-length * math.sin(rad), length * math.cos(rad)], dtype=np.float64)


def vector_angle(v: Vec2) -> float:
    """Inverse of :func:`bone_vector`: the global angle (degrees) of *v*.

    Returns 0.0 for a zero vector.
    """
    if v[0] == 0.0 and v[1] == 0.0:
        return 0.0
    return rad_to_deg(math.atan2(v[1], v[0]) - math.pi / 2)


def corrective_shift(length: float, corrective_deg: float) -> Vec2:
    """Displacement of a bone's proximal pivot when it is swung about its
    distal end by *corrective_deg* (bone's unrotated frame)."""
    rad = deg_to_rad(corrective_deg)
    return np.array(
        [length * math.sin(rad), length * (1.0 - math.cos(rad))],
        dtype=np.float64,
    )


def distance(a: Vec2, b: Vec2) -> float:
    return float(np.linalg.norm(np.asarray(b, dtype=np.float64) - np.asarray(a, dtype=np.float64)))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def wrap_degrees(angle: float) -> float:
    """Wrap an angle into [-180, 180)."""
    return (angle + 180.0) % 360.0 - 180.0


def nearest_equivalent(angle: float, reference: float) -> float:
    """The angle congruent to *angle* (mod 360) closest to *reference*."""
    return angle + 360.0 * round((reference - angle) / 360.0)
