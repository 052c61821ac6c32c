#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the asapnotes package.

The markdown renderer is total over every input string and never raises;
these exceptions cover the surrounding note storage, settings, server and
file output layers.

Exception Hierarchy
-------------------
- AsapNotesError (base exception)

  - ValidationError (bad request parameters, note names, paths)

  - NoteError (note storage and I/O)
    - NoteNotFoundError (note doesn't exist)
    - NoteAccessError (permissions, unreadable files)
    - NoteWriteError (write or folder creation failures)

  - SecurityError (security violations)
    - PathTraversalError (resolved path escapes the notes root)

  - SettingsError (settings file or notes folder problems)

  - RenderingError (output generation failures)
    - OutputWriteError (rendered HTML could not be written)

"""

from typing import Any


class AsapNotesError(Exception):
    """Base exception class for all asapnotes-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(AsapNotesError):
    """Exception raised for invalid request parameters.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class NoteError(AsapNotesError):
    """Base exception for note storage errors.

    Parameters
    ----------
    message : str
        Description of the storage error
    file_path : str, optional
        Path of the note or folder involved
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the note error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class NoteNotFoundError(NoteError):
    """Exception raised when a note cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the note not found error."""
        if message is None:
            message = f"Note not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class NoteAccessError(NoteError):
    """Exception raised when a note exists but cannot be read."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the note access error."""
        if message is None:
            message = f"Cannot access note: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class NoteWriteError(NoteError):
    """Exception raised when a note or folder cannot be written."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the note write error."""
        if message is None:
            message = f"Failed to save note: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class SecurityError(AsapNotesError):
    """Base exception for security violations."""


class PathTraversalError(SecurityError):
    """Exception raised when a requested path resolves outside the notes root.

    Parameters
    ----------
    requested_path : str
        The path as supplied by the caller
    root : str
        The notes root the path was resolved against

    """

    def __init__(self, requested_path: str, root: str, original_error: Exception | None = None):
        """Initialize the path traversal error."""
        super().__init__(f"Access denied: {requested_path} is not within {root}", original_error=original_error)
        self.requested_path = requested_path
        self.root = root


class SettingsError(AsapNotesError):
    """Exception raised when settings cannot be loaded, saved or applied.

    Parameters
    ----------
    message : str
        Description of the settings failure
    settings_path : str, optional
        Path to the settings file involved

    """

    def __init__(self, message: str, settings_path: str | None = None, original_error: Exception | None = None):
        """Initialize the settings error."""
        super().__init__(message, original_error=original_error)
        self.settings_path = settings_path


class RenderingError(AsapNotesError):
    """Exception raised when rendered output cannot be produced or delivered.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class OutputWriteError(RenderingError):
    """Exception raised when writing an output file fails."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the output write error."""
        if message is None:
            message = f"Failed to write output file: {file_path}"
        super().__init__(message, rendering_stage="file_write", original_error=original_error)
        self.file_path = file_path
