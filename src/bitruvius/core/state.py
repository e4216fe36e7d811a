"""Pose model and session configuration."""

import logging
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from bitruvius.constants import (
    ACTIVITY_TIMEOUT_MS, DEFAULT_FPS, MAX_FRAMES, RECORDING_THRESHOLD,
)
from bitruvius.core.config_loader import load_json

logger = logging.getLogger(__name__)


# All per-joint rotation fields, in schema order
JOINT_IDS = [
    "hips", "torso", "neck",
    "l_shoulder", "l_bicep_corrective", "l_forearm", "l_wrist",
    "r_shoulder", "r_bicep_corrective", "r_forearm", "r_wrist",
    "l_thigh", "l_thigh_corrective", "l_calf", "l_ankle", "l_toes",
    "r_thigh", "r_thigh_corrective", "r_calf", "r_ankle", "r_toes",
]

CORRECTIVE_IDS = [
    "l_bicep_corrective", "r_bicep_corrective",
    "l_thigh_corrective", "r_thigh_corrective",
]

# Every scalar angle of a pose (global root rotation first)
ANGLE_FIELDS = ["root_rotation"] + JOINT_IDS

# Mapping from interchange camelCase keys to Python snake_case
JS_KEY_MAP: dict[str, str] = {
    "rootRotation": "root_rotation",
    "hips": "hips", "torso": "torso", "neck": "neck",
    "lShoulder": "l_shoulder", "lBicepCorrective": "l_bicep_corrective",
    "lForearm": "l_forearm", "lWrist": "l_wrist",
    "rShoulder": "r_shoulder", "rBicepCorrective": "r_bicep_corrective",
    "rForearm": "r_forearm", "rWrist": "r_wrist",
    "lThigh": "l_thigh", "lThighCorrective": "l_thigh_corrective",
    "lCalf": "l_calf", "lAnkle": "l_ankle", "lToes": "l_toes",
    "rThigh": "r_thigh", "rThighCorrective": "r_thigh_corrective",
    "rCalf": "r_calf", "rAnkle": "r_ankle", "rToes": "r_toes",
}
PY_KEY_MAP: dict[str, str] = {v: k for k, v in JS_KEY_MAP.items()}


@dataclass(frozen=True)
class Pose:
    """One complete body configuration.

    ``root`` is the global anchor (navel) in pixels, every other field is
    an angle in degrees. Defaults are the factory T-pose. Instances are
    immutable; edits produce new poses via :func:`apply_edit`.
    """
    root: tuple[float, float] = (0.0, 0.0)
    root_rotation: float = 0.0

    # Waist / spine
    hips: float = 0.0
    torso: float = 180.0  # Upright
    neck: float = 0.0

    # Left arm
    l_shoulder: float = 0.0
    l_bicep_corrective: float = -12.0
    l_forearm: float = 0.0
    l_wrist: float = 0.0

    # Right arm
    r_shoulder: float = 0.0
    r_bicep_corrective: float = 12.0
    r_forearm: float = 0.0
    r_wrist: float = 0.0

    # Left leg
    l_thigh: float = 0.0
    l_thigh_corrective: float = 5.0
    l_calf: float = 0.0
    l_ankle: float = 0.0
    l_toes: float = 0.0

    # Right leg
    r_thigh: float = 0.0
    r_thigh_corrective: float = -5.0
    r_calf: float = 0.0
    r_ankle: float = 0.0
    r_toes: float = 0.0

    def get(self, name: str) -> float:
        """Return the angle stored under *name* (snake_case or camelCase)."""
        return getattr(self, JS_KEY_MAP.get(name, name))

    def angles(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in ANGLE_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the interchange record (camelCase, nested root)."""
        d: dict[str, Any] = {"root": {"x": self.root[0], "y": self.root[1]}}
        for name in ANGLE_FIELDS:
            d[PY_KEY_MAP[name]] = getattr(self, name)
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], base: "Pose | None" = None) -> "Pose":
        """Build a pose from an interchange record.

        Missing fields are taken from *base* (the default pose if omitted),
        unknown keys are ignored.
        """
        if not isinstance(d, Mapping):
            raise ValueError(f"Pose record must be an object, got {type(d).__name__}")
        return apply_edit(base if base is not None else DEFAULT_POSE, d)


DEFAULT_POSE = Pose()


def _coerce_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Pose field {key!r} must be numeric, got {value!r}")
    result = float(value)
    if not math.isfinite(result):
        raise ValueError(f"Pose field {key!r} must be finite, got {value!r}")
    return result


def _coerce_root(value: Any, current: tuple[float, float]) -> tuple[float, float]:
    if isinstance(value, Mapping):
        return (
            _coerce_float("root.x", value.get("x", current[0])),
            _coerce_float("root.y", value.get("y", current[1])),
        )
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (_coerce_float("root.x", value[0]), _coerce_float("root.y", value[1]))
    raise ValueError(f"Pose root must be {{x, y}} or a pair, got {value!r}")


def apply_edit(pose: Pose, updates: Mapping[str, Any]) -> Pose:
    """Return a new pose with *updates* applied.

    Keys may be snake_case or camelCase; ``root`` accepts ``{"x", "y"}``
    (partial allowed) or an ``(x, y)`` pair.
    """
    changes: dict[str, Any] = {}
    for key, value in updates.items():
        if key == "root":
            changes["root"] = _coerce_root(value, pose.root)
            continue
        name = JS_KEY_MAP.get(key, key)
        if name not in ANGLE_FIELDS:
            logger.debug("Ignoring unknown pose field %r", key)
            continue
        changes[name] = _coerce_float(key, value)
    if not changes:
        return pose
    return replace(pose, **changes)


@dataclass
class SessionConfig:
    """Tunable editing-session settings."""
    max_frames: int = MAX_FRAMES
    recording_threshold: float = RECORDING_THRESHOLD
    fps: int = DEFAULT_FPS
    tweening: bool = False
    clamp_to_limits: bool = True
    activity_timeout_ms: float = ACTIVITY_TIMEOUT_MS

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "SessionConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})

    @classmethod
    def load(cls, path: Path) -> "SessionConfig":
        """Load settings from a JSON file, falling back to defaults."""
        try:
            data = load_json(path)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Session config not loaded, using defaults: %s", e)
            return cls()
        if not isinstance(data, Mapping):
            logger.warning("Session config %s is not an object, using defaults", path)
            return cls()
        return cls.from_dict(data)
