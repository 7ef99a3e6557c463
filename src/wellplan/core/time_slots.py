"""Pure day-part classification logic - no I/O dependencies."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, TypeVar

A = TypeVar("A")

DEFAULT_DURATION = 60


class DayPart(Enum):
    """Named bucket of the 24-hour clock."""

    EARLY_MORNING = "early_morning"
    LATE_MORNING = "late_morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    ANYTIME = "anytime"

    @classmethod
    def parse(cls, value: Any) -> "DayPart":
        """Parse a slot key, falling back to ANYTIME."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return cls.ANYTIME


@dataclass(frozen=True)
class SlotConfig:
    """A timed day-part covering the half-open hour range [start_hour, end_hour)."""

    key: DayPart
    start_hour: int
    end_hour: int
    emoji: str

    @property
    def wraps_midnight(self) -> bool:
        return self.end_hour < self.start_hour

    def contains(self, hour: int) -> bool:
        if self.wraps_midnight:
            return hour >= self.start_hour or hour < self.end_hour
        return self.start_hour <= hour < self.end_hour

    def format(self) -> str:
        return f"{self.start_hour:02d}:00-{self.end_hour:02d}:00"


SLOTS: tuple[SlotConfig, ...] = (
    SlotConfig(DayPart.EARLY_MORNING, 5, 9, "🌅"),
    SlotConfig(DayPart.LATE_MORNING, 9, 12, "☕"),
    SlotConfig(DayPart.MIDDAY, 12, 15, "☀️"),
    SlotConfig(DayPart.AFTERNOON, 15, 18, "🌤️"),
    SlotConfig(DayPart.EVENING, 18, 22, "🌆"),
    SlotConfig(DayPart.NIGHT, 22, 5, "🌙"),
)

_SLOTS_BY_KEY = {s.key: s for s in SLOTS}


def slot_config(slot: DayPart) -> SlotConfig | None:
    """Slot table entry for a day-part (None for ANYTIME)."""
    return _SLOTS_BY_KEY.get(slot)


def _parse_minutes(time: str) -> int | None:
    """Minutes since midnight for an HH:MM[:SS] string, or None if malformed."""
    parts = time.strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 and parts[1] else 0
    except ValueError:
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes


def _parse_hour(time: str) -> int | None:
    """Hour component of an HH[:MM] string, or None if malformed. Minutes are ignored."""
    try:
        hour = int(time.strip().split(":")[0])
    except ValueError:
        return None
    return hour if 0 <= hour < 24 else None


def _format_minutes(total: int) -> str:
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def classify(time: str | None) -> DayPart:
    """
    Map an HH:MM clock time to its day-part.

    Pure function - no I/O. Missing or malformed times yield ANYTIME.
    """
    if not time or not isinstance(time, str):
        return DayPart.ANYTIME

    hour = _parse_hour(time)
    if hour is None:
        return DayPart.ANYTIME

    for slot in SLOTS:
        if slot.contains(hour):
            return slot.key
    return DayPart.ANYTIME


def slot_default_time(slot: DayPart) -> str | None:
    """Start of the slot as HH:00, or None for ANYTIME."""
    config = slot_config(DayPart.parse(slot))
    if config is None:
        return None
    return f"{config.start_hour:02d}:00"


def _start_time(activity: Any) -> str | None:
    if isinstance(activity, Mapping):
        return activity.get("start_time")
    return getattr(activity, "start_time", None)


def filter_by_slot(activities: Iterable[A], slot: DayPart) -> list[A]:
    """
    Keep activities whose start time falls in the slot.

    ANYTIME keeps only untimed activities. Input order is preserved.
    Accepts mappings or objects exposing ``start_time``.
    """
    slot = DayPart.parse(slot)
    if slot == DayPart.ANYTIME:
        return [a for a in activities if not _start_time(a)]
    return [a for a in activities if _start_time(a) and classify(_start_time(a)) == slot]


def sort_by_start_time(activities: Iterable[A]) -> list[A]:
    """Sort by clock time ascending; untimed or unparseable activities go last."""

    def sort_key(a: A) -> tuple[int, int]:
        start = _start_time(a)
        minutes = _parse_minutes(start) if isinstance(start, str) else None
        return (0, minutes) if minutes is not None else (1, 0)

    return sorted(activities, key=sort_key)


def group_by_slot(activities: Iterable[A]) -> dict[DayPart, list[A]]:
    """
    Bucket activities into day-parts for a day view.

    Keys follow slot order with ANYTIME last; every day-part is present.
    """
    items = list(activities)
    groups = {slot.key: sort_by_start_time(filter_by_slot(items, slot.key)) for slot in SLOTS}
    groups[DayPart.ANYTIME] = filter_by_slot(items, DayPart.ANYTIME)
    return groups


def adjacent_time(
    target_start: str | None,
    duration_minutes: int | None,
    slot: DayPart,
    position: str = "before",
) -> str | None:
    """
    Start time for an activity dropped next to a target activity.

    "before" ends the new activity where the target starts (clamped at
    00:00); "after" starts it where the target ends, wrapping past midnight.
    An untimed or malformed target falls back to the slot's default time.
    """
    if not target_start:
        return slot_default_time(slot)

    start = _parse_minutes(target_start)
    if start is None:
        return slot_default_time(slot)

    duration = duration_minutes if duration_minutes and duration_minutes > 0 else DEFAULT_DURATION

    if position == "after":
        return _format_minutes(start + duration)
    return _format_minutes(max(0, start - duration))
