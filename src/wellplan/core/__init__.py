"""Functional core - pure scheduling logic with no I/O."""

from .recurrence import (
    Custom,
    Daily,
    EndAfterCount,
    EndNever,
    EndOnDate,
    Monthly,
    NoRecurrence,
    RecurrenceRule,
    Unit,
    Weekly,
    expand,
    rule_from_settings,
)
from .time_slots import DayPart, SLOTS, classify, filter_by_slot, slot_default_time
from .presets import (
    ActivationWindow,
    ActivityInstance,
    ActivityTemplateRef,
    Preset,
    activate,
    plan_instances,
)

__all__ = [
    # Recurrence
    "Custom",
    "Daily",
    "EndAfterCount",
    "EndNever",
    "EndOnDate",
    "Monthly",
    "NoRecurrence",
    "RecurrenceRule",
    "Unit",
    "Weekly",
    "expand",
    "rule_from_settings",
    # Time slots
    "DayPart",
    "SLOTS",
    "classify",
    "filter_by_slot",
    "slot_default_time",
    # Presets
    "ActivationWindow",
    "ActivityInstance",
    "ActivityTemplateRef",
    "Preset",
    "activate",
    "plan_instances",
]
