"""Tests for the shared workflow layer."""

from datetime import date, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from wellplan.config import Config
from wellplan.core.presets import (
    ActivityTemplateRef,
    Preset,
    PresetArchivedError,
    PresetNotFoundError,
)
from wellplan.core.recurrence import Daily, NoRecurrence
from wellplan.core.time_slots import DayPart
from wellplan.workflows import (
    activate_preset,
    archive_preset,
    day_agenda,
    get_activity_store,
    get_preset_store,
    list_presets,
)


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def config(tmp_path):
    return Config(data_dir=str(tmp_path), owner_id="u1")


@pytest.fixture
def preset(config):
    preset = Preset(
        id="p1",
        owner_id="u1",
        name="Morning routine",
        activities=[
            ActivityTemplateRef("t1", "stretching", DayPart.EARLY_MORNING, 15, 1),
            ActivityTemplateRef("t2", "hydration", DayPart.ANYTIME, 5, 2),
        ],
    )
    get_preset_store(config).save(preset)
    return preset


class TestActivatePreset:
    def test_persists_window_and_instances(self, config, preset, today):
        now = datetime(2025, 1, 15, 8, 0)
        result = activate_preset(config, "p1", today, Daily(count=10), now=now)

        assert result.window.start == today
        assert result.window.end == today + timedelta(days=9)
        assert len(result.instances) == 30

        saved = get_preset_store(config).get("p1")
        assert saved.is_active is True
        assert saved.last_activated_at == now
        assert saved.activation_end == today + timedelta(days=9)

        planned = get_activity_store(config).for_day(today + timedelta(days=9))
        assert [i.category for i in planned] == ["stretching", "hydration", "hydration"]

    def test_dry_run_writes_nothing(self, config, preset, today):
        result = activate_preset(config, "p1", today, Daily(count=3), dry_run=True)

        assert result.preset.is_active is True
        assert get_preset_store(config).get("p1").is_active is False
        assert get_activity_store(config).for_day(today) == []

    def test_reactivation_replaces_window(self, config, preset, today):
        activate_preset(config, "p1", today, Daily(count=30))
        later = today + timedelta(days=40)
        activate_preset(config, "p1", later, NoRecurrence())

        saved = get_preset_store(config).get("p1")
        assert saved.activation_start == later
        assert saved.activation_end == later

    def test_reactivation_drops_old_window_activities(self, config, preset, today):
        activate_preset(config, "p1", today, Daily(count=30))
        later = today + timedelta(days=40)
        activate_preset(config, "p1", later, NoRecurrence())

        store = get_activity_store(config)
        assert store.for_day(today + timedelta(days=5)) == []
        assert len(store.for_day(later)) == 3

    def test_reactivation_same_anchor_no_duplicates(self, config, preset, today):
        activate_preset(config, "p1", today, Daily(count=3))
        activate_preset(config, "p1", today, Daily(count=3))

        planned = get_activity_store(config).for_day(today)
        assert [i.category for i in planned] == ["stretching", "hydration", "hydration"]

    def test_first_activation_does_not_clear(self, config, preset, today):
        activities = MagicMock()
        activate_preset(config, "p1", today, Daily(count=1), activities=activities)
        activities.remove_for_preset.assert_not_called()

    def test_respects_configured_ceiling(self, tmp_path, today):
        from wellplan.core.recurrence import Custom

        config = Config(data_dir=str(tmp_path), max_occurrences=5)
        get_preset_store(config).save(Preset(id="p", owner_id="u1", name="x"))
        result = activate_preset(config, "p", today, Custom())
        assert len(result.window.occurrences) == 5

    def test_missing_preset(self, config, today):
        with pytest.raises(PresetNotFoundError):
            activate_preset(config, "missing", today, Daily())

    def test_archived_preset_not_saved(self, config, today):
        presets = MagicMock()
        presets.get.return_value = Preset(id="p", owner_id="u1", name="old", is_archived=True)
        activities = MagicMock()

        with pytest.raises(PresetArchivedError):
            activate_preset(config, "p", today, Daily(), presets=presets, activities=activities)

        presets.save.assert_not_called()
        activities.add_many.assert_not_called()

    def test_uses_injected_stores(self, config, today):
        presets = MagicMock()
        presets.get.return_value = Preset(
            id="p", owner_id="u1", name="walk",
            activities=[ActivityTemplateRef("t", "walk", DayPart.EVENING, 30, 1)],
        )
        activities = MagicMock()

        result = activate_preset(config, "p", today, Daily(count=2), presets=presets, activities=activities)

        presets.save.assert_called_once_with(result.preset)
        activities.add_many.assert_called_once_with(result.instances)


class TestArchivePreset:
    def test_archives_and_hides(self, config, preset):
        archived = archive_preset(config, "p1")
        assert archived.is_archived is True
        assert list_presets(config) == []
        assert [p.id for p in list_presets(config, include_archived=True)] == ["p1"]

    def test_archived_cannot_be_activated(self, config, preset, today):
        archive_preset(config, "p1")
        with pytest.raises(PresetArchivedError):
            activate_preset(config, "p1", today, Daily())

    def test_missing_preset(self, config):
        with pytest.raises(PresetNotFoundError):
            archive_preset(config, "missing")


class TestListPresets:
    def test_filters_by_configured_owner(self, config, preset):
        get_preset_store(config).save(Preset(id="p2", owner_id="someone-else", name="theirs"))
        assert [p.id for p in list_presets(config)] == ["p1"]

    def test_all_owners_without_owner_id(self, tmp_path, config, preset):
        get_preset_store(config).save(Preset(id="p2", owner_id="someone-else", name="theirs"))
        anyone = Config(data_dir=str(tmp_path))
        assert len(list_presets(anyone)) == 2


class TestDayAgenda:
    def test_groups_planned_activities(self, config, preset, today):
        activate_preset(config, "p1", today, NoRecurrence())
        groups = day_agenda(config, today)

        assert [i.category for i in groups[DayPart.EARLY_MORNING]] == ["stretching"]
        assert [i.category for i in groups[DayPart.ANYTIME]] == ["hydration", "hydration"]
        assert groups[DayPart.NIGHT] == []
