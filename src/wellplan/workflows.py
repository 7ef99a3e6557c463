"""Shared workflow layer for the CLI.

Each function loads what it needs from storage, runs the pure core, and
persists the result.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from .adapters.file_activity_store import FileActivityStore
from .adapters.file_preset_store import FilePresetStore
from .config import Config
from .core.presets import (
    ActivationWindow,
    ActivityInstance,
    Preset,
    PresetNotFoundError,
    activate,
    apply_activation,
    archive,
    plan_instances,
)
from .core.recurrence import RecurrenceRule
from .core.time_slots import DayPart, group_by_slot
from .ports import ActivityStore, PresetStore

logger = logging.getLogger(__name__)


@dataclass
class ActivationResult:
    """Outcome of activating a preset."""

    preset: Preset
    window: ActivationWindow
    instances: list[ActivityInstance]


def get_preset_store(config: Config) -> FilePresetStore:
    """Resolve preset storage from config."""
    return FilePresetStore(config.presets_dir)


def get_activity_store(config: Config) -> FileActivityStore:
    """Resolve activity storage from config."""
    return FileActivityStore(config.activities_dir)


def _require_preset(presets: PresetStore, preset_id: str) -> Preset:
    preset = presets.get(preset_id)
    if preset is None:
        raise PresetNotFoundError(f"No preset with id '{preset_id}'")
    return preset


def list_presets(
    config: Config,
    include_archived: bool = False,
    presets: PresetStore | None = None,
) -> list[Preset]:
    """List the configured owner's presets (all owners if none configured)."""
    presets = presets or get_preset_store(config)
    return presets.list(owner_id=config.owner_id or None, include_archived=include_archived)


def activate_preset(
    config: Config,
    preset_id: str,
    anchor: date,
    rule: RecurrenceRule,
    now: datetime | None = None,
    presets: PresetStore | None = None,
    activities: ActivityStore | None = None,
    dry_run: bool = False,
) -> ActivationResult:
    """Activate a preset: compute its window, save it, and plan its activities.

    With dry_run nothing is written.
    """
    presets = presets or get_preset_store(config)
    now = now or datetime.now()

    preset = _require_preset(presets, preset_id)
    window = activate(preset, anchor, rule, max_occurrences=config.max_occurrences)

    if preset.is_active:
        logger.info(
            f"Replacing window {preset.activation_start} - {preset.activation_end} of preset {preset.id}"
        )

    updated = apply_activation(preset, window, now)
    instances = plan_instances(updated, window.occurrences)

    if dry_run:
        return ActivationResult(preset=updated, window=window, instances=instances)

    activities = activities or get_activity_store(config)
    presets.save(updated)
    if preset.is_active:
        activities.remove_for_preset(preset.id)
    activities.add_many(instances)
    logger.info(f"Activated preset {preset.id}: {window.format()}, {len(instances)} activities planned")

    return ActivationResult(preset=updated, window=window, instances=instances)


def archive_preset(
    config: Config,
    preset_id: str,
    presets: PresetStore | None = None,
) -> Preset:
    """Archive a preset so it can no longer be activated."""
    presets = presets or get_preset_store(config)
    archived = archive(_require_preset(presets, preset_id))
    presets.save(archived)
    logger.info(f"Archived preset {preset_id}")
    return archived


def day_agenda(
    config: Config,
    target_date: date,
    activities: ActivityStore | None = None,
) -> dict[DayPart, list[ActivityInstance]]:
    """Planned activities for a day, grouped by day-part."""
    activities = activities or get_activity_store(config)
    return group_by_slot(activities.for_day(target_date))
