"""Named pose collections ("cartridges") loaded from JSON."""

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from bitruvius.core.config_loader import load_config, load_json
from bitruvius.core.state import DEFAULT_POSE, Pose

logger = logging.getLogger(__name__)


class CartridgeLibrary:
    """Holds named poses; each record is merged over the default pose."""

    def __init__(self):
        self.poses: dict[str, Pose] = {}

    def load(self, path: Optional[Path] = None) -> None:
        """Load a cartridge file (the bundled one if *path* is omitted)."""
        if path is None:
            data = load_config("cartridges.json")
        else:
            data = load_json(path)
        self.set_records(data)
        logger.info("Loaded cartridge with %d poses", len(self.poses))

    def set_records(self, data: Any) -> None:
        if not isinstance(data, Mapping):
            raise ValueError(f"Cartridge must be an object of named poses, got {type(data).__name__}")
        self.poses = {
            str(name): Pose.from_dict(record, base=DEFAULT_POSE)
            for name, record in data.items()
        }

    def names(self) -> list[str]:
        return list(self.poses.keys())

    def get_pose(self, name: str) -> Optional[Pose]:
        return self.poses.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self.poses

    def __len__(self) -> int:
        return len(self.poses)
