"""Unit tests for the asapnotes exception hierarchy."""

import pytest

from asapnotes.exceptions import (
    AsapNotesError,
    NoteAccessError,
    NoteError,
    NoteNotFoundError,
    NoteWriteError,
    OutputWriteError,
    PathTraversalError,
    RenderingError,
    SecurityError,
    SettingsError,
    ValidationError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test inheritance and attributes of every exception."""

    @pytest.mark.parametrize(
        "error, parents",
        [
            (ValidationError("x"), (AsapNotesError,)),
            (NoteNotFoundError("a.md"), (NoteError, AsapNotesError)),
            (NoteAccessError("a.md"), (NoteError, AsapNotesError)),
            (NoteWriteError("a.md"), (NoteError, AsapNotesError)),
            (PathTraversalError("../a", "/n"), (SecurityError, AsapNotesError)),
            (SettingsError("x"), (AsapNotesError,)),
            (OutputWriteError("o.html"), (RenderingError, AsapNotesError)),
        ],
    )
    def test_inheritance(self, error, parents):
        """Test that each error can be caught through its families."""
        for parent in parents:
            assert isinstance(error, parent)

    def test_original_error_kept(self):
        """Test that the wrapped exception is available."""
        cause = OSError("disk full")
        error = NoteWriteError("a.md", original_error=cause)

        assert error.original_error is cause
        assert error.file_path == "a.md"
        assert str(error) == "Failed to save note: a.md"

    def test_default_messages(self):
        """Test the generated messages."""
        assert NoteNotFoundError("a.md").message == "Note not found: a.md"
        assert NoteAccessError("a.md").message == "Cannot access note: a.md"
        assert OutputWriteError("o.html").message == "Failed to write output file: o.html"
        assert PathTraversalError("../a", "/n").message == "Access denied: ../a is not within /n"

    def test_custom_message(self):
        """Test that an explicit message replaces the default."""
        assert NoteWriteError("d", message="Failed to create folder: d").message == "Failed to create folder: d"

    def test_validation_details(self):
        """Test the parameter details on validation errors."""
        error = ValidationError("bad", parameter_name="path", parameter_value="")

        assert error.parameter_name == "path"
        assert error.parameter_value == ""

    def test_settings_path(self):
        """Test the settings path attribute."""
        assert SettingsError("x", settings_path="c.json").settings_path == "c.json"
