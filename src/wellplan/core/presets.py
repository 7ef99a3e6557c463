"""Pure preset activation logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Iterable

from .recurrence import (
    MAX_ITERATIONS,
    MAX_OCCURRENCES,
    RecurrenceRule,
    as_day,
    expand,
    parse_date,
)
from .time_slots import DayPart, classify, slot_default_time


class PresetError(Exception):
    """Base class for preset lifecycle errors."""

    pass


class PresetNotFoundError(PresetError):
    """Raised when a preset id does not resolve."""

    pass


class PresetArchivedError(PresetError):
    """Raised when activating an archived preset."""

    pass


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class ActivityTemplateRef:
    """An activity template scheduled into a day-part of a preset."""

    template_id: str
    category: str
    day_part: DayPart = DayPart.ANYTIME
    duration: int = 30
    repetitions: int = 1

    @classmethod
    def from_record(cls, data: dict) -> "ActivityTemplateRef":
        return cls(
            template_id=str(data.get("template_id", "")),
            category=data.get("category", ""),
            day_part=DayPart.parse(data.get("day_part")),
            duration=_int_or(data.get("duration"), 30),
            repetitions=_int_or(data.get("repetitions"), 1),
        )

    def to_record(self) -> dict:
        return {
            "template_id": self.template_id,
            "category": self.category,
            "day_part": self.day_part.value,
            "duration": self.duration,
            "repetitions": self.repetitions,
        }


@dataclass
class Preset:
    """A reusable bundle of activity templates."""

    id: str
    owner_id: str
    name: str
    emoji: str = ""
    activities: list[ActivityTemplateRef] = field(default_factory=list)
    is_active: bool = False
    is_archived: bool = False
    last_activated_at: datetime | None = None
    activation_start: date | None = None
    activation_end: date | None = None
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Each preset owns its own sequence
        self.activities = list(self.activities)
        self.tags = list(self.tags)

    def with_activities(self, activities: Iterable[ActivityTemplateRef]) -> "Preset":
        """Copy of this preset with a new activity sequence."""
        return replace(self, activities=list(activities))

    @classmethod
    def from_record(cls, data: dict) -> "Preset":
        """Create Preset from a stored record."""
        return cls(
            id=str(data["id"]),
            owner_id=str(data.get("user_id") or data.get("owner_id") or ""),
            name=data.get("name", ""),
            emoji=data.get("emoji", "") or "",
            activities=[ActivityTemplateRef.from_record(a) for a in data.get("activities") or []],
            is_active=bool(data.get("is_active", False)),
            is_archived=bool(data.get("is_archived", False)),
            last_activated_at=_parse_datetime(data.get("last_activated_at")),
            activation_start=parse_date(data.get("activation_start_date")),
            activation_end=parse_date(data.get("activation_end_date")),
            tags=list(data.get("tags") or []),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.owner_id,
            "name": self.name,
            "emoji": self.emoji,
            "activities": [a.to_record() for a in self.activities],
            "is_active": self.is_active,
            "is_archived": self.is_archived,
            "last_activated_at": self.last_activated_at.isoformat() if self.last_activated_at else None,
            "activation_start_date": self.activation_start.isoformat() if self.activation_start else None,
            "activation_end_date": self.activation_end.isoformat() if self.activation_end else None,
            "tags": list(self.tags),
        }


@dataclass(frozen=True)
class ActivationWindow:
    """Date range over which a preset's recurrence is in effect."""

    preset_id: str
    start: date
    end: date
    occurrences: tuple[date, ...] = ()

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    def format(self) -> str:
        return f"{self.start.isoformat()} - {self.end.isoformat()} ({len(self.occurrences)} occurrences)"


@dataclass
class ActivityInstance:
    """One planned activity materialized on a concrete date."""

    preset_id: str
    template_id: str
    category: str
    date: date
    start_time: str | None
    duration_minutes: int
    status: str = "planned"

    @property
    def day_part(self) -> DayPart:
        return classify(self.start_time)

    @classmethod
    def from_record(cls, data: dict) -> "ActivityInstance":
        return cls(
            preset_id=data.get("preset_id", ""),
            template_id=data.get("template_id", ""),
            category=data.get("category", ""),
            date=date.fromisoformat(data["date"]),
            start_time=data.get("start_time"),
            duration_minutes=_int_or(data.get("duration_minutes"), 30),
            status=data.get("status", "planned"),
        )

    def to_record(self) -> dict:
        return {
            "preset_id": self.preset_id,
            "template_id": self.template_id,
            "category": self.category,
            "date": self.date.isoformat(),
            "start_time": self.start_time,
            "duration_minutes": self.duration_minutes,
            "status": self.status,
        }


def activate(
    preset: Preset,
    anchor: date | datetime,
    rule: RecurrenceRule | None,
    *,
    max_occurrences: int = MAX_OCCURRENCES,
    max_iterations: int = MAX_ITERATIONS,
) -> ActivationWindow:
    """
    Compute the activation window of a preset.

    Pure function - no I/O, no clock reads. Never raises. The preset is
    not modified; see apply_activation for the state change.
    """
    start = as_day(anchor)
    occurrences = expand(start, rule, max_occurrences=max_occurrences, max_iterations=max_iterations)
    end = occurrences[-1] if occurrences else start
    return ActivationWindow(
        preset_id=preset.id,
        start=start,
        end=end,
        occurrences=tuple(occurrences),
    )


def apply_activation(preset: Preset, window: ActivationWindow, now: datetime) -> Preset:
    """
    Return the preset marked active over the window.

    Any previous window is overwritten. Archived presets cannot be activated.
    """
    if preset.is_archived:
        raise PresetArchivedError(f"Preset '{preset.name}' ({preset.id}) is archived")
    return replace(
        preset,
        is_active=True,
        last_activated_at=now,
        activation_start=window.start,
        activation_end=window.end,
    )


def archive(preset: Preset) -> Preset:
    """Return the preset archived and deactivated."""
    return replace(preset, is_archived=True, is_active=False)


def plan_instances(preset: Preset, occurrences: Iterable[date]) -> list[ActivityInstance]:
    """
    Materialize the preset's activities on every occurrence date.

    Each template ref yields ``repetitions`` instances (at least one) at the
    default time of its day-part.
    """
    instances = []
    for day in occurrences:
        for ref in preset.activities:
            start_time = slot_default_time(ref.day_part)
            for _ in range(max(ref.repetitions, 1)):
                instances.append(
                    ActivityInstance(
                        preset_id=preset.id,
                        template_id=ref.template_id,
                        category=ref.category,
                        date=day,
                        start_time=start_time,
                        duration_minutes=ref.duration,
                    )
                )
    return instances
