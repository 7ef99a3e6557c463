"""Pure recurrence expansion logic - no I/O dependencies.

A recurrence rule is one of five variants (none, daily, weekly, monthly,
custom). Expanding a rule against an anchor date yields the ordered calendar
dates on which a preset's activities are materialized.

Month and year arithmetic uses ``dateutil.relativedelta``, which clamps to
the last day of the target month (2024-01-31 + 1 month = 2024-02-29).
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Mapping

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 7
DEFAULT_END_COUNT = 30

# Safety ceilings for custom rules. Policy values, overridable per call.
MAX_OCCURRENCES = 365
MAX_ITERATIONS = 365

DATE_FORMAT = "%Y-%m-%d"


class Unit(Enum):
    """Step unit for custom rules."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class NoRecurrence:
    """Single occurrence on the anchor date."""


@dataclass(frozen=True)
class Daily:
    count: int = DEFAULT_COUNT


@dataclass(frozen=True)
class Weekly:
    count: int = DEFAULT_COUNT


@dataclass(frozen=True)
class Monthly:
    count: int = DEFAULT_COUNT


@dataclass(frozen=True)
class EndNever:
    """Open-ended; bounded only by MAX_OCCURRENCES."""


@dataclass(frozen=True)
class EndOnDate:
    end_date: date


@dataclass(frozen=True)
class EndAfterCount:
    count: int = DEFAULT_END_COUNT


CustomEnd = EndNever | EndOnDate | EndAfterCount


@dataclass(frozen=True)
class Custom:
    """Every ``interval`` units from the anchor until ``end`` is reached."""

    interval: int = 1
    unit: Unit = Unit.DAY
    end: CustomEnd = field(default_factory=EndNever)


RecurrenceRule = NoRecurrence | Daily | Weekly | Monthly | Custom


def as_day(value: date | datetime) -> date:
    """Truncate a datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _advance(current: date, unit: Unit, amount: int) -> date:
    match unit:
        case Unit.WEEK:
            return current + timedelta(weeks=amount)
        case Unit.MONTH:
            return current + relativedelta(months=amount)
        case Unit.YEAR:
            return current + relativedelta(years=amount)
        case _:
            return current + timedelta(days=amount)


def _offsets(start: date, count: int, unit: Unit) -> list[date]:
    """``start + i units`` for i in [0, count), each offset taken from start."""
    dates = []
    for i in range(count):
        try:
            dates.append(_advance(start, unit, i))
        except (OverflowError, ValueError):
            # Past date.max
            break
    return dates


def _should_stop(end: CustomEnd, current: date, produced: int, max_occurrences: int) -> bool:
    match end:
        case EndOnDate(end_date=end_date):
            return current > as_day(end_date)
        case EndAfterCount(count=limit):
            return produced >= limit
        case _:
            return produced >= max_occurrences


def _expand_custom(
    start: date,
    rule: Custom,
    max_occurrences: int,
    max_iterations: int,
) -> list[date]:
    step = rule.interval if rule.interval > 0 else 1
    dates: list[date] = []
    current = start

    for _ in range(max_iterations):
        if _should_stop(rule.end, current, len(dates), max_occurrences):
            break
        dates.append(current)
        try:
            current = _advance(current, rule.unit, step)
        except (OverflowError, ValueError):
            break

    return dates


def expand(
    anchor: date | datetime,
    rule: RecurrenceRule | None,
    *,
    max_occurrences: int = MAX_OCCURRENCES,
    max_iterations: int = MAX_ITERATIONS,
) -> list[date]:
    """
    Expand a recurrence rule into ordered occurrence dates.

    Pure function - no I/O. Never raises for malformed rules: anything that
    is not a known variant behaves like NoRecurrence.

    Daily/weekly/monthly occurrences are offsets from the anchor, so a
    monthly series anchored on the 31st returns to the 31st whenever the
    month has one. Custom occurrences chain from the previous occurrence,
    so a clamp carries forward (Jan 31, Feb 29, Mar 29).

    Args:
        anchor: First occurrence; any time-of-day component is dropped.
        rule: The recurrence variant.
        max_occurrences: Ceiling for open-ended custom rules.
        max_iterations: Loop ceiling for custom rules of any end type.

    Returns:
        Strictly increasing list of dates without duplicates.
    """
    start = as_day(anchor)

    match rule:
        case Daily(count=count):
            return _offsets(start, count, Unit.DAY)
        case Weekly(count=count):
            return _offsets(start, count, Unit.WEEK)
        case Monthly(count=count):
            return _offsets(start, count, Unit.MONTH)
        case Custom():
            return _expand_custom(start, rule, max_occurrences, max_iterations)
        case _:
            return [start]


def activation_end(anchor: date | datetime, rule: RecurrenceRule | None, **limits: int) -> date:
    """Last occurrence of the rule, or the anchor when nothing expands."""
    dates = expand(anchor, rule, **limits)
    return dates[-1] if dates else as_day(anchor)


def format_dates(dates: list[date]) -> list[str]:
    """Format dates as yyyy-mm-dd strings."""
    return [d.strftime(DATE_FORMAT) for d in dates]


# ============== Wire format ==============

# Persisted records use snake_case; rules built from the UI use camelCase.
_ALIASES = {
    "recurrence_type": ("recurrence_type", "type"),
    "recurrence_count": ("recurrence_count", "count"),
    "custom_interval": ("custom_interval", "customInterval"),
    "custom_unit": ("custom_unit", "customUnit"),
    "custom_end_type": ("custom_end_type", "customEndType"),
    "custom_end_date": ("custom_end_date", "customEndDate"),
    "custom_end_count": ("custom_end_count", "customEndCount"),
}


def _pick(settings: Mapping[str, Any], name: str) -> Any:
    for key in _ALIASES[name]:
        value = settings.get(key)
        if value is not None:
            return value
    return None


def _int_or(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-integer recurrence value: {value!r}")
        return default


def parse_date(value: Any) -> date | None:
    """Parse a date, datetime, or ISO string. Returns None if unparseable."""
    if isinstance(value, date):
        return as_day(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        logger.debug(f"Ignoring unparseable date: {value!r}")
        return None


def _parse_unit(value: Any) -> Unit:
    try:
        return Unit(value)
    except ValueError:
        return Unit.DAY


def _parse_end(settings: Mapping[str, Any]) -> CustomEnd:
    end_type = _pick(settings, "custom_end_type")

    if end_type == "count":
        return EndAfterCount(_int_or(_pick(settings, "custom_end_count"), DEFAULT_END_COUNT))

    if end_type == "date":
        end_date = parse_date(_pick(settings, "custom_end_date"))
        if end_date is not None:
            return EndOnDate(end_date)
        logger.debug("Custom end type 'date' without a usable date, treating as 'never'")

    return EndNever()


def rule_from_settings(settings: Mapping[str, Any] | None) -> RecurrenceRule:
    """
    Build a recurrence rule from a flat settings record.

    Fail-soft: missing or garbled fields fall back to their defaults and an
    unknown type yields NoRecurrence.
    """
    if not settings:
        return NoRecurrence()

    count = _int_or(_pick(settings, "recurrence_count"), DEFAULT_COUNT)

    match _pick(settings, "recurrence_type"):
        case "daily":
            return Daily(count)
        case "weekly":
            return Weekly(count)
        case "monthly":
            return Monthly(count)
        case "custom":
            interval = _int_or(_pick(settings, "custom_interval"), 1)
            return Custom(
                interval=interval if interval > 0 else 1,
                unit=_parse_unit(_pick(settings, "custom_unit")),
                end=_parse_end(settings),
            )
        case _:
            return NoRecurrence()


def rule_to_settings(rule: RecurrenceRule) -> dict[str, Any]:
    """Flatten a rule into the snake_case settings record."""
    match rule:
        case Daily(count=count):
            return {"recurrence_type": "daily", "recurrence_count": count}
        case Weekly(count=count):
            return {"recurrence_type": "weekly", "recurrence_count": count}
        case Monthly(count=count):
            return {"recurrence_type": "monthly", "recurrence_count": count}
        case Custom(interval=interval, unit=unit, end=end):
            settings: dict[str, Any] = {
                "recurrence_type": "custom",
                "custom_interval": interval,
                "custom_unit": unit.value,
            }
            match end:
                case EndOnDate(end_date=end_date):
                    settings["custom_end_type"] = "date"
                    settings["custom_end_date"] = end_date.isoformat()
                case EndAfterCount(count=limit):
                    settings["custom_end_type"] = "count"
                    settings["custom_end_count"] = limit
                case _:
                    settings["custom_end_type"] = "never"
            return settings
        case _:
            return {"recurrence_type": "none"}
