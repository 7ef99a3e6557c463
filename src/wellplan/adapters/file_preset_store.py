"""File-based preset storage adapter."""

import json
import logging
from pathlib import Path

from wellplan.core.presets import Preset

logger = logging.getLogger(__name__)


class FilePresetStore:
    """
    File-based preset storage.

    Implements PresetStore protocol. Each preset gets a JSON file.
    """

    def __init__(self, presets_dir: Path | str):
        self.presets_dir = Path(presets_dir).expanduser()
        self.presets_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_id(self, preset_id: str) -> Path:
        """Get the file path for a preset id."""
        return self.presets_dir / f"{preset_id}.json"

    def _load(self, path: Path) -> Preset | None:
        try:
            return Preset.from_record(json.loads(path.read_text()))
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError) as e:
            logger.warning(f"Skipping unreadable preset file {path}: {e}")
            return None

    def get(self, preset_id: str) -> Preset | None:
        """Fetch a preset by id. Returns None if not found."""
        path = self._path_for_id(preset_id)
        if not path.exists():
            return None
        return self._load(path)

    def save(self, preset: Preset) -> None:
        """Create or overwrite a preset."""
        path = self._path_for_id(preset.id)
        path.write_text(json.dumps(preset.to_record(), indent=2, ensure_ascii=False))
        logger.debug(f"Saved preset {preset.id} to {path}")

    def list(self, owner_id: str | None = None, include_archived: bool = False) -> list[Preset]:
        """List presets sorted by name, optionally for one owner."""
        presets = []
        for path in sorted(self.presets_dir.glob("*.json")):
            preset = self._load(path)
            if preset is None:
                continue
            if owner_id and preset.owner_id != owner_id:
                continue
            if preset.is_archived and not include_archived:
                continue
            presets.append(preset)
        return sorted(presets, key=lambda p: p.name.lower())
