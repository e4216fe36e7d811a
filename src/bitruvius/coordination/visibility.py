"""Per-segment visibility toggles for the rig display."""

from bitruvius.core.state import ANGLE_FIELDS


class VisibilityMap:
    """Maps pose field names to a visible flag.

    A key that was never set is visible. Isolating keeps only one key
    shown; isolating again while more than two keys are hidden restores
    everything.
    """

    def __init__(self, keys: list[str] | None = None):
        self._keys: list[str] = list(keys) if keys is not None else list(ANGLE_FIELDS)
        self._hidden: dict[str, bool] = {}

    def get_keys(self) -> list[str]:
        return list(self._keys)

    def is_visible(self, key: str) -> bool:
        return not self._hidden.get(key, False)

    def set_visible(self, key: str, visible: bool) -> None:
        self._hidden[key] = not visible

    def toggle(self, key: str) -> bool:
        """Flip *key*; returns the new visibility."""
        visible = not self.is_visible(key)
        self.set_visible(key, visible)
        return visible

    def hidden(self) -> list[str]:
        return [k for k, h in self._hidden.items() if h]

    def isolate(self, key: str) -> None:
        if len(self.hidden()) > 2:
            self.show_all()
            return
        self._hidden = {k: k != key for k in self._keys}

    def show_all(self) -> None:
        self._hidden.clear()

    def as_dict(self) -> dict[str, bool]:
        return {k: self.is_visible(k) for k in self._keys}
