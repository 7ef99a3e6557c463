"""File-based planned activity storage adapter."""

import json
import logging
from collections import defaultdict
from datetime import date
from pathlib import Path
from typing import Iterable

from wellplan.core.presets import ActivityInstance

logger = logging.getLogger(__name__)


class FileActivityStore:
    """
    File-based activity storage.

    Implements ActivityStore protocol. Each day gets a JSON list.
    """

    def __init__(self, activities_dir: Path | str):
        self.activities_dir = Path(activities_dir).expanduser()
        self.activities_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_date(self, target_date: date) -> Path:
        """Get the file path for a given date."""
        return self.activities_dir / f"{target_date.isoformat()}.json"

    def _read_records(self, target_date: date) -> list[dict]:
        path = self._path_for_date(target_date)
        if not path.exists():
            return []
        try:
            records = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable activity file {path}: {e}")
            return []
        return records if isinstance(records, list) else []

    def add_many(self, instances: Iterable[ActivityInstance]) -> int:
        """Append instances to their day files. Returns the number stored."""
        by_day: dict[date, list[ActivityInstance]] = defaultdict(list)
        for instance in instances:
            by_day[instance.date].append(instance)

        stored = 0
        for day, day_instances in sorted(by_day.items()):
            records = self._read_records(day)
            records.extend(i.to_record() for i in day_instances)
            self._path_for_date(day).write_text(json.dumps(records, indent=2))
            stored += len(day_instances)

        logger.debug(f"Stored {stored} activities across {len(by_day)} days")
        return stored

    def for_day(self, target_date: date) -> list[ActivityInstance]:
        """All instances planned on a date."""
        instances = []
        for record in self._read_records(target_date):
            try:
                instances.append(ActivityInstance.from_record(record))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed activity on {target_date}: {e}")
        return instances


    def remove_for_preset(self, preset_id: str, since: date | None = None) -> int:
        """Delete a preset's instances, optionally only on or after a date.

        Returns the number removed.
        """
        removed = 0
        for path in sorted(self.activities_dir.glob("*.json")):
            try:
                day = date.fromisoformat(path.stem)
            except ValueError:
                continue
            if since and day < since:
                continue

            records = self._read_records(day)
            kept = [r for r in records if not (isinstance(r, dict) and r.get("preset_id") == preset_id)]
            if len(kept) == len(records):
                continue

            removed += len(records) - len(kept)
            if kept:
                path.write_text(json.dumps(kept, indent=2))
            else:
                path.unlink()

        logger.debug(f"Removed {removed} activities of preset {preset_id}")
        return removed
