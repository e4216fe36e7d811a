"""Joint limit enforcement via simple clamping.

Clamps edited Pose values to the ranges of the manipulation controls,
loaded from config. Root offsets are limited per axis (``root_x`` /
``root_y``), every other key names a pose angle.
"""

import logging
from typing import Iterable, Optional

from bitruvius.core.config_loader import load_config
from bitruvius.core.math_utils import clamp
from bitruvius.core.state import ANGLE_FIELDS, Pose, apply_edit

logger = logging.getLogger(__name__)


class JointLimits:
    """Clamp pose angles and root offsets to configured limits."""

    def __init__(self):
        self._limits: dict[str, tuple[float, float]] = {}

    @property
    def enabled(self) -> bool:
        return bool(self._limits)

    def load(self, name: str = "joint_limits.json") -> None:
        """Load joint limits from config.  Graceful no-op on failure."""
        try:
            data = load_config(name)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Joint limits config not found, limits disabled: %s", e)
            return
        self.set_limits(data.get("limits", {}))

    def set_limits(self, raw: dict) -> None:
        self._limits.clear()
        for key, bounds in raw.items():
            lo = float(bounds.get("min", -180.0))
            hi = float(bounds.get("max", 180.0))
            if "{s}" in key:
                # Expand bilateral template for both sides
                for side in ("r", "l"):
                    self._limits[key.replace("{s}", side)] = (lo, hi)
            else:
                self._limits[key] = (lo, hi)

    def get(self, name: str) -> Optional[tuple[float, float]]:
        return self._limits.get(name)

    def clamp(self, pose: Pose, names: Optional[Iterable[str]] = None) -> Pose:
        """Return *pose* with limited values clamped.

        With *names* only those pose fields are limited (``"root"``
        covers both root axes); anything else keeps its value even when
        it lies outside its range.
        """
        if not self._limits:
            return pose
        wanted = None if names is None else set(names)
        updates: dict = {}
        for name in ANGLE_FIELDS:
            if wanted is not None and name not in wanted:
                continue
            bounds = self._limits.get(name)
            if bounds is None:
                continue
            value = getattr(pose, name)
            clamped = clamp(value, *bounds)
            if clamped != value:
                updates[name] = clamped

        if wanted is None or "root" in wanted:
            x, y = pose.root
            x_bounds = self._limits.get("root_x")
            y_bounds = self._limits.get("root_y")
            cx = clamp(x, *x_bounds) if x_bounds else x
            cy = clamp(y, *y_bounds) if y_bounds else y
            if (cx, cy) != (x, y):
                updates["root"] = (cx, cy)

        return apply_edit(pose, updates) if updates else pose
