"""Preset storage interface."""

from typing import Protocol

from wellplan.core.presets import Preset


class PresetStore(Protocol):
    """Interface for loading and saving presets from any backend."""

    def get(self, preset_id: str) -> Preset | None:
        """Fetch a preset by id. Returns None if not found."""
        ...

    def save(self, preset: Preset) -> None:
        """Create or overwrite a preset."""
        ...

    def list(self, owner_id: str | None = None, include_archived: bool = False) -> list[Preset]:
        """List presets, optionally for one owner."""
        ...
