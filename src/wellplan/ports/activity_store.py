"""Planned activity storage interface."""

from datetime import date
from typing import Iterable, Protocol

from wellplan.core.presets import ActivityInstance


class ActivityStore(Protocol):
    """Interface for persisting materialized activity instances."""

    def add_many(self, instances: Iterable[ActivityInstance]) -> int:
        """Store instances. Returns the number stored."""
        ...

    def for_day(self, target_date: date) -> list[ActivityInstance]:
        """All instances planned on a date."""
        ...

    def remove_for_preset(self, preset_id: str, since: date | None = None) -> int:
        """Delete a preset's instances, optionally only on or after a date. Returns the number removed."""
        ...
