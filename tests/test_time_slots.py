"""Tests for core day-part logic."""

from dataclasses import dataclass

import pytest

from wellplan.core.time_slots import (
    SLOTS,
    DayPart,
    adjacent_time,
    classify,
    filter_by_slot,
    group_by_slot,
    slot_config,
    slot_default_time,
    sort_by_start_time,
)


@dataclass
class Item:
    name: str
    start_time: str | None


class TestSlotTable:
    def test_slots_cover_every_hour_once(self):
        for hour in range(24):
            matches = [s.key for s in SLOTS if s.contains(hour)]
            assert len(matches) == 1, f"hour {hour} matched {matches}"

    def test_night_wraps_midnight(self):
        night = slot_config(DayPart.NIGHT)
        assert night.wraps_midnight is True
        assert night.format() == "22:00-05:00"

    def test_anytime_has_no_config(self):
        assert slot_config(DayPart.ANYTIME) is None

    def test_parse_unknown_key(self):
        assert DayPart.parse("brunch") == DayPart.ANYTIME
        assert DayPart.parse(None) == DayPart.ANYTIME
        assert DayPart.parse("evening") == DayPart.EVENING


class TestClassify:
    @pytest.mark.parametrize(
        "time, expected",
        [
            ("23:30", DayPart.NIGHT),
            ("00:00", DayPart.NIGHT),
            ("04:59", DayPart.NIGHT),
            ("05:00", DayPart.EARLY_MORNING),
            ("08:59", DayPart.EARLY_MORNING),
            ("09:00", DayPart.LATE_MORNING),
            ("11:59", DayPart.LATE_MORNING),
            ("12:00", DayPart.MIDDAY),
            ("15:00", DayPart.AFTERNOON),
            ("18:00", DayPart.EVENING),
            ("21:59", DayPart.EVENING),
            ("22:00", DayPart.NIGHT),
            ("07:30:00", DayPart.EARLY_MORNING),
        ],
    )
    def test_boundaries(self, time, expected):
        assert classify(time) == expected

    @pytest.mark.parametrize("time", [None, "", "noon", "25:00", "-1:00", "ab:cd"])
    def test_missing_or_malformed_is_anytime(self, time):
        assert classify(time) == DayPart.ANYTIME

    @pytest.mark.parametrize("time", ["08:75", "08:xx", "8", "08:"])
    def test_minutes_ignored(self, time):
        assert classify(time) == DayPart.EARLY_MORNING


class TestSlotDefaultTime:
    def test_anytime_is_none(self):
        assert slot_default_time(DayPart.ANYTIME) is None

    @pytest.mark.parametrize(
        "slot, expected",
        [
            (DayPart.EARLY_MORNING, "05:00"),
            (DayPart.LATE_MORNING, "09:00"),
            (DayPart.MIDDAY, "12:00"),
            (DayPart.AFTERNOON, "15:00"),
            (DayPart.EVENING, "18:00"),
            (DayPart.NIGHT, "22:00"),
        ],
    )
    def test_slot_start(self, slot, expected):
        assert slot_default_time(slot) == expected

    def test_default_time_classifies_back_to_slot(self):
        for slot in SLOTS:
            assert classify(slot_default_time(slot.key)) == slot.key

    def test_accepts_string_key(self):
        assert slot_default_time("midday") == "12:00"


class TestFilterBySlot:
    def test_anytime_keeps_untimed_only(self):
        activities = [{"start_time": None}, {"start_time": "08:00"}]
        assert filter_by_slot(activities, DayPart.ANYTIME) == [{"start_time": None}]

    def test_timed_slot_preserves_order(self):
        activities = [
            {"id": 1, "start_time": "07:00"},
            {"id": 2, "start_time": "13:00"},
            {"id": 3, "start_time": "05:30"},
            {"id": 4, "start_time": None},
        ]
        result = filter_by_slot(activities, DayPart.EARLY_MORNING)
        assert [a["id"] for a in result] == [1, 3]

    def test_missing_key_counts_as_untimed(self):
        activities = [{"title": "walk"}]
        assert filter_by_slot(activities, DayPart.ANYTIME) == activities
        assert filter_by_slot(activities, DayPart.NIGHT) == []

    def test_objects_with_start_time(self):
        items = [Item("a", "23:00"), Item("b", "10:00"), Item("c", "02:00")]
        assert [i.name for i in filter_by_slot(items, DayPart.NIGHT)] == ["a", "c"]

    def test_returns_new_list(self):
        activities = [{"start_time": None}]
        result = filter_by_slot(activities, DayPart.ANYTIME)
        assert result is not activities


class TestSortAndGroup:
    def test_sort_untimed_last(self):
        items = [Item("a", None), Item("b", "10:00"), Item("c", "06:00")]
        assert [i.name for i in sort_by_start_time(items)] == ["c", "b", "a"]

    def test_sort_by_clock_not_string(self):
        items = [Item("ten", "10:00"), Item("eight", "8:00"), Item("bad", "late"), Item("seven", "07:30")]
        assert [i.name for i in sort_by_start_time(items)] == ["seven", "eight", "ten", "bad"]

    def test_group_by_slot_keys_and_order(self):
        items = [Item("late", "10:30"), Item("early", "09:15"), Item("free", None), Item("sleep", "23:00")]
        groups = group_by_slot(items)

        assert list(groups) == [s.key for s in SLOTS] + [DayPart.ANYTIME]
        assert [i.name for i in groups[DayPart.LATE_MORNING]] == ["early", "late"]
        assert [i.name for i in groups[DayPart.NIGHT]] == ["sleep"]
        assert [i.name for i in groups[DayPart.ANYTIME]] == ["free"]
        assert groups[DayPart.MIDDAY] == []


class TestAdjacentTime:
    def test_before_target(self):
        assert adjacent_time("10:00", 30, DayPart.LATE_MORNING) == "09:30"

    def test_after_target(self):
        assert adjacent_time("10:00", 45, DayPart.LATE_MORNING, position="after") == "10:45"

    def test_before_clamps_at_midnight(self):
        assert adjacent_time("00:30", 60, DayPart.NIGHT) == "00:00"

    def test_after_wraps_midnight(self):
        assert adjacent_time("23:30", 60, DayPart.NIGHT, position="after") == "00:30"

    def test_missing_duration_defaults_to_hour(self):
        assert adjacent_time("14:00", None, DayPart.MIDDAY) == "13:00"
        assert adjacent_time("14:00", 0, DayPart.MIDDAY) == "13:00"

    def test_untimed_target_uses_slot_default(self):
        assert adjacent_time(None, 30, DayPart.EVENING) == "18:00"
        assert adjacent_time("whenever", 30, DayPart.EVENING) == "18:00"
        assert adjacent_time(None, 30, DayPart.ANYTIME) is None
