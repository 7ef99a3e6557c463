"""Ports - interfaces/protocols for external dependencies."""

from .preset_store import PresetStore
from .activity_store import ActivityStore

__all__ = [
    "PresetStore",
    "ActivityStore",
]
