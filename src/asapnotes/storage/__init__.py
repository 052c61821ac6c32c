#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Note and settings persistence for asapnotes."""

from asapnotes.storage.notes import (
    Folder,
    NoteInfo,
    NoteStore,
    sanitize_folder_name,
    sanitize_note_name,
)
from asapnotes.storage.settings import Settings, SettingsStore

__all__ = [
    "Folder",
    "NoteInfo",
    "NoteStore",
    "Settings",
    "SettingsStore",
    "sanitize_folder_name",
    "sanitize_note_name",
]
