"""JSON config file loading utilities."""

import json
from pathlib import Path
from typing import Any

from bitruvius.constants import CONFIG_DIR


def load_json(path: Path) -> Any:
    """Load and return parsed JSON from a file."""
    with open(path) as f:
        return json.load(f)


def save_json(path: Path, data: Any) -> None:
    """Write *data* as indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def load_config(name: str) -> Any:
    """Load a config file from the package config directory."""
    return load_json(CONFIG_DIR / name)
