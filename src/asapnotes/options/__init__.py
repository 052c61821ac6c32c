#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for asapnotes rendering.

Options are frozen dataclasses; see ``CloneFrozenMixin.create_updated`` for
deriving modified copies.
"""

from __future__ import annotations

from asapnotes.options.base import BaseRendererOptions, CloneFrozenMixin
from asapnotes.options.markdown import MarkdownRendererOptions

__all__ = [
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownRendererOptions",
]
