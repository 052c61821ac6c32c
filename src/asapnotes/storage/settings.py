#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/storage/settings.py
"""Persisted application settings.

Settings live in a small JSON document next to the application::

    {
      "notes_folder": "/home/me/Documents/ASAPNotes",
      "font_family": "monospace",
      "font_size": "16"
    }

All values are strings; the editor front end owns their interpretation.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from asapnotes.constants import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_FONT_SIZE,
    DEFAULT_NOTES_FOLDER,
    DEFAULT_SETTINGS_FILENAME,
)
from asapnotes.exceptions import SettingsError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Application settings shared by the server and the editor.

    Parameters
    ----------
    notes_folder : str
        Absolute path of the folder holding every note
    font_family : str, default "monospace"
        CSS font family of the editor
    font_size : str, default "16"
        Editor font size in pixels, as a string

    """

    notes_folder: str = field(default_factory=lambda: str(DEFAULT_NOTES_FOLDER))
    font_family: str = DEFAULT_FONT_FAMILY
    font_size: str = DEFAULT_FONT_SIZE

    def to_dict(self) -> dict[str, str]:
        """Return the JSON-serializable form."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Settings:
        """Build settings from a decoded JSON object.

        Unknown keys are ignored and missing or empty keys keep their defaults.
        """
        known = {f.name for f in fields(cls)}
        values = {key: str(value) for key, value in data.items() if key in known and value not in (None, "")}
        return cls(**values)


class SettingsStore:
    """Load, update and persist settings in a JSON file.

    The store is safe to share between server request threads.

    Parameters
    ----------
    path : str or Path, optional
        Location of the settings file; defaults to ``config.json`` in the
        current directory

    Examples
    --------
        >>> store = SettingsStore("config.json")
        >>> settings = store.load()
        >>> store.update(font_size="18").font_size
        '18'

    """

    def __init__(self, path: str | Path | None = None):
        """Initialize the store without touching the filesystem."""
        self.path = Path(path) if path is not None else Path(DEFAULT_SETTINGS_FILENAME)
        self._settings = Settings()
        self._lock = threading.Lock()

    @property
    def settings(self) -> Settings:
        """Return the current settings snapshot."""
        with self._lock:
            return self._settings

    def load(self) -> Settings:
        """Read the settings file, falling back to defaults.

        A missing file is replaced by the defaults, which are written back
        immediately. An unparseable file is left alone and the defaults are
        used for this session. Either way the notes folder is created when
        it does not exist yet.

        Returns
        -------
        Settings
            The loaded settings

        Raises
        ------
        SettingsError
            If the defaults cannot be written or the notes folder cannot be created

        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No settings file at %s; writing defaults", self.path)
            with self._lock:
                self._settings = Settings()
            self.save()
        except OSError as e:
            logger.warning("Could not read settings file %s: %s", self.path, e)
            with self._lock:
                self._settings = Settings()
        else:
            with self._lock:
                self._settings = self._parse(raw)

        settings = self.settings
        _ensure_folder(settings.notes_folder)
        return settings

    def save(self) -> None:
        """Write the current settings as indented JSON.

        Raises
        ------
        SettingsError
            If the file cannot be written

        """
        with self._lock:
            data = json.dumps(self._settings.to_dict(), indent=2)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(data, encoding="utf-8")
            except OSError as e:
                raise SettingsError(
                    f"Failed to save settings: {e}", settings_path=str(self.path), original_error=e
                ) from e
        logger.debug("Saved settings to %s", self.path)

    def update(self, **changes: Any) -> Settings:
        """Apply a partial update and persist it.

        Only non-empty values change the stored settings. A new notes folder
        is created before it is accepted.

        Parameters
        ----------
        **changes : Any
            Any of ``notes_folder``, ``font_family`` and ``font_size``

        Returns
        -------
        Settings
            The settings after the update

        Raises
        ------
        ValidationError
            If an unknown setting name is given
        SettingsError
            If the new notes folder cannot be created or the file cannot be saved

        """
        known = {f.name for f in fields(Settings)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValidationError(
                f"Unknown setting(s): {', '.join(unknown)}", parameter_name=unknown[0], parameter_value=changes[unknown[0]]
            )

        effective = {key: str(value) for key, value in changes.items() if value not in (None, "")}
        if "notes_folder" in effective:
            _ensure_folder(effective["notes_folder"])

        with self._lock:
            self._settings = replace(self._settings, **effective)
        self.save()

        logger.info("Updated settings: %s", ", ".join(sorted(effective)) or "(no changes)")
        return self.settings

    def _parse(self, raw: str) -> Settings:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Settings file %s is not valid JSON (%s); using defaults", self.path, e)
            return Settings()

        if not isinstance(data, dict):
            logger.warning("Settings file %s does not hold a JSON object; using defaults", self.path)
            return Settings()

        return Settings.from_dict(data)


def _ensure_folder(folder: str) -> None:
    path = Path(folder).expanduser()
    if path.is_dir():
        return
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SettingsError(f"Failed to create notes folder: {folder}", original_error=e) from e
    logger.info("Created notes folder %s", path)
