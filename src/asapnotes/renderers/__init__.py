#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Markdown preview renderers for asapnotes.

The renderer is split into stages, one module each:

- fences: fenced code extraction and restoration
- blocks: blank-line segmentation and block classification
- rules: ordered structural rules and plain paragraph rendering
- tables: pipe-row conversion and table assembly
- html: the MarkdownHtmlRenderer tying the stages together
"""

from asapnotes.renderers.html import MarkdownHtmlRenderer, render

__all__ = ["MarkdownHtmlRenderer", "render"]
