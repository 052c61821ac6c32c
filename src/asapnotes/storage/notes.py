#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/storage/notes.py
"""Notes stored as plain files under a single root folder.

Every path accepted from a caller is relative to the notes root. Paths are
normalized and resolved before use, and any path that would land outside the
root is refused with PathTraversalError.

Only ``.md`` and ``.txt`` files count as notes; everything else in the folder
is ignored by the tree listing and by search.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any

from asapnotes.constants import (
    DEFAULT_NOTE_EXTENSION,
    FOLDER_NAME_ALLOWED_PATTERN,
    NOTE_EXTENSIONS,
    NOTE_NAME_ALLOWED_PATTERN,
    ROOT_FOLDER_NAME,
)
from asapnotes.exceptions import (
    NoteAccessError,
    NoteNotFoundError,
    NoteWriteError,
    PathTraversalError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_NOTE_NAME_STRIP = re.compile(NOTE_NAME_ALLOWED_PATTERN)
_FOLDER_NAME_STRIP = re.compile(FOLDER_NAME_ALLOWED_PATTERN)


def is_note_file(name: str) -> bool:
    """Return True for file names with a note extension."""
    return name.endswith(NOTE_EXTENSIONS)


def sanitize_note_name(name: str) -> str:
    """Clean up a user-supplied note file name.

    The name is trimmed, given a ``.md`` extension when it has none, checked
    for a note extension, and stripped of every character other than ASCII
    letters, digits, space, underscore, hyphen and dot.

    Parameters
    ----------
    name : str
        Name as typed by the user

    Returns
    -------
    str
        Safe file name

    Raises
    ------
    ValidationError
        If the extension is not ``.md`` or ``.txt`` or nothing usable remains

    Examples
    --------
        >>> sanitize_note_name("  groceries ")
        'groceries.md'
        >>> sanitize_note_name("todo/list?.txt")
        'todolist.txt'

    """
    cleaned = name.strip()
    if "." not in cleaned:
        cleaned += DEFAULT_NOTE_EXTENSION

    if not is_note_file(cleaned):
        raise ValidationError(
            f"Note names must end in {' or '.join(NOTE_EXTENSIONS)}", parameter_name="name", parameter_value=name
        )

    cleaned = _NOTE_NAME_STRIP.sub("", cleaned).strip()
    if not cleaned or cleaned in NOTE_EXTENSIONS or set(cleaned) == {"."}:
        raise ValidationError("Invalid note name", parameter_name="name", parameter_value=name)
    return cleaned


def sanitize_folder_name(name: str) -> str:
    """Strip a folder name down to ASCII letters, digits, space, underscore and hyphen.

    Raises
    ------
    ValidationError
        If nothing usable remains

    """
    cleaned = _FOLDER_NAME_STRIP.sub("", name.strip()).strip()
    if not cleaned:
        raise ValidationError("Invalid folder name", parameter_name="name", parameter_value=name)
    return cleaned


@dataclass
class NoteInfo:
    """A note file as listed in the folder tree."""

    name: str
    modified: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "modified": self.modified.isoformat()}


@dataclass
class Folder:
    """A folder in the notes tree.

    Parameters
    ----------
    name : str
        Folder name; ``"Root"`` for the notes root
    path : str
        POSIX path relative to the notes root; empty for the root
    notes : list[NoteInfo]
        Notes directly in this folder, most recently modified first
    subfolders : list[Folder]
        Child folders in name order

    """

    name: str
    path: str
    notes: list[NoteInfo] = field(default_factory=list)
    subfolders: list[Folder] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON shape served to the editor."""
        return {
            "name": self.name,
            "path": self.path,
            "notes": [note.to_dict() for note in self.notes],
            "subfolders": [sub.to_dict() for sub in self.subfolders],
        }


class NoteStore:
    """Read, write, list and search notes under one root folder.

    Parameters
    ----------
    root : str or Path
        The notes folder

    """

    def __init__(self, root: str | Path):
        """Initialize the store; the root is resolved once."""
        self.root = Path(root).expanduser().resolve()

    def resolve(self, path: str) -> Path:
        """Resolve a caller-supplied relative path inside the notes root.

        Parameters
        ----------
        path : str
            Path relative to the notes root, using ``/`` separators

        Returns
        -------
        Path
            Absolute path inside the root

        Raises
        ------
        ValidationError
            If the path is empty or absolute
        PathTraversalError
            If the normalized path escapes the notes root

        """
        if not path or not path.strip():
            raise ValidationError("Path parameter is required", parameter_name="path", parameter_value=path)

        candidate = PurePosixPath(path)
        if candidate.is_absolute() or Path(path).is_absolute() or re.match(r"^[A-Za-z]:", path):
            raise ValidationError(
                "Path must be relative to notes folder", parameter_name="path", parameter_value=path
            )

        target = self.root.joinpath(*candidate.parts).resolve()
        if target != self.root and self.root not in target.parents:
            logger.warning("Rejected path outside notes folder: %s", path)
            raise PathTraversalError(path, str(self.root))
        return target

    def relative(self, target: Path) -> str:
        """Return the POSIX path of ``target`` relative to the root."""
        return target.relative_to(self.root).as_posix()

    def read_note(self, path: str) -> str:
        """Return the text of a note.

        Raises
        ------
        NoteNotFoundError
            If the note does not exist
        NoteAccessError
            If the path exists but cannot be read as a file

        """
        target = self.resolve(path)
        try:
            data = target.read_bytes()
        except FileNotFoundError as e:
            raise NoteNotFoundError(path, original_error=e) from e
        except OSError as e:
            raise NoteAccessError(path, original_error=e) from e

        logger.debug("Read note %s (%d bytes)", path, len(data))
        return data.decode("utf-8", errors="replace")

    def write_note(self, path: str, text: str) -> None:
        """Write a note, creating missing parent folders.

        Raises
        ------
        NoteWriteError
            If the folder or file cannot be written

        """
        target = self.resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(text.encode("utf-8"))
        except OSError as e:
            logger.error("Error writing note %s: %s", path, e)
            raise NoteWriteError(path, original_error=e) from e
        logger.info("Saved note %s", path)

    def create_note(self, name: str, folder: str = "") -> str:
        """Create an empty note from a user-supplied name.

        An existing note with the same name is left untouched.

        Parameters
        ----------
        name : str
            Note name; see ``sanitize_note_name``
        folder : str, default ""
            Relative folder to create the note in; empty for the root

        Returns
        -------
        str
            Relative path of the note

        """
        filename = sanitize_note_name(name)
        path = f"{folder.strip('/')}/{filename}" if folder.strip("/") else filename
        if not self.resolve(path).exists():
            self.write_note(path, "")
        return path

    def create_folder(self, path: str) -> str:
        """Create a folder (and any missing parents).

        The last path component is sanitized with ``sanitize_folder_name``.

        Returns
        -------
        str
            Relative path of the created folder

        Raises
        ------
        NoteWriteError
            If the folder cannot be created

        """
        if not path or not path.strip("/ "):
            raise ValidationError("Folder path is required", parameter_name="path", parameter_value=path)

        parent, _, name = path.strip().rstrip("/").rpartition("/")
        relative_path = f"{parent}/{sanitize_folder_name(name)}" if parent else sanitize_folder_name(name)
        target = self.resolve(relative_path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise NoteWriteError(relative_path, message=f"Failed to create folder: {relative_path}", original_error=e) from e

        logger.info("Created folder %s", relative_path)
        return self.relative(target)

    def list_tree(self) -> Folder:
        """List every folder and note under the root.

        Returns
        -------
        Folder
            The root folder, named ``"Root"`` with an empty path

        Raises
        ------
        NoteAccessError
            If the root itself cannot be read

        """
        try:
            return self._walk(self.root)
        except OSError as e:
            raise NoteAccessError(str(self.root), message=f"Cannot list notes folder: {e}", original_error=e) from e

    def _walk(self, directory: Path) -> Folder:
        if directory == self.root:
            folder = Folder(name=ROOT_FOLDER_NAME, path="")
        else:
            folder = Folder(name=directory.name, path=self.relative(directory))

        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)

        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                try:
                    folder.subfolders.append(self._walk(Path(entry.path)))
                except OSError as e:
                    logger.warning("Skipping unreadable folder %s: %s", entry.path, e)
            elif is_note_file(entry.name):
                try:
                    mtime = entry.stat().st_mtime
                except OSError as e:
                    logger.warning("Skipping unreadable note %s: %s", entry.path, e)
                    continue
                folder.notes.append(NoteInfo(entry.name, datetime.fromtimestamp(mtime, tz=timezone.utc)))

        folder.notes.sort(key=lambda note: note.modified, reverse=True)
        return folder

    def search(self, query: str) -> list[str]:
        """Find notes whose contents contain ``query``, ignoring case.

        Parameters
        ----------
        query : str
            Text to look for; an empty query matches every note

        Returns
        -------
        list[str]
            Relative POSIX paths, folder by folder; within a folder, files
            come before subfolders and both are in name order

        """
        needle = query.lower()
        results: list[str] = []

        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            for filename in sorted(filenames):
                if not is_note_file(filename):
                    continue
                path = Path(dirpath) / filename
                try:
                    text = path.read_bytes().decode("utf-8", errors="replace")
                except OSError as e:
                    logger.debug("Skipping unreadable note %s: %s", path, e)
                    continue
                if needle in text.lower():
                    results.append(self.relative(path))

        logger.debug("Search for %r matched %d note(s)", query, len(results))
        return results
