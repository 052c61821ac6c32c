#  Copyright (c) 2025 Tom Villani, Ph.D.
"""asapnotes - a plain-folder note keeper with a live markdown preview.

asapnotes stores notes as ``.md`` and ``.txt`` files in an ordinary folder,
serves them to a browser editor over a small local HTTP API, and renders a
practical markdown subset to HTML for the preview pane.

Rendering
---------
    >>> from asapnotes import render
    >>> render("# Shopping\\n\\n- [x] milk\\n- [ ] eggs")
    '<h1>Shopping</h1><div class="task-item"><input type="checkbox" checked disabled> milk</div>\\n<div class="task-item"><input type="checkbox" disabled> eggs</div>'

Options are frozen dataclasses:

    >>> from asapnotes import MarkdownRendererOptions
    >>> render("- a", MarkdownRendererOptions(wrap_lists=True))
    '<ul><li>a</li></ul>'

Storage
-------
``asapnotes.storage`` contains ``NoteStore`` (notes under one root folder)
and ``SettingsStore`` (the persisted JSON settings file).

Command line
------------
``asapnotes render``, ``asapnotes serve``, ``asapnotes tree`` and
``asapnotes search``; see ``asapnotes --help``.
"""

from asapnotes.exceptions import (
    AsapNotesError,
    NoteError,
    NoteNotFoundError,
    OutputWriteError,
    PathTraversalError,
    RenderingError,
    SecurityError,
    SettingsError,
    ValidationError,
)
from asapnotes.options import MarkdownRendererOptions
from asapnotes.renderers import MarkdownHtmlRenderer, render

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "render",
    "MarkdownHtmlRenderer",
    "MarkdownRendererOptions",
    "AsapNotesError",
    "ValidationError",
    "NoteError",
    "NoteNotFoundError",
    "SecurityError",
    "PathTraversalError",
    "SettingsError",
    "RenderingError",
    "OutputWriteError",
]
