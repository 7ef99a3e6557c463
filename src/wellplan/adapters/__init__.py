"""Adapters - I/O implementations of ports."""

from .file_preset_store import FilePresetStore
from .file_activity_store import FileActivityStore

__all__ = [
    "FilePresetStore",
    "FileActivityStore",
]
