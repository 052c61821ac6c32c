#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/renderers/html.py
"""Markdown-subset to HTML rendering for the live note preview.

This module provides the MarkdownHtmlRenderer class, which turns the full
text of a note into an HTML fragment. Rendering is a strict left-to-right
pipeline with no state kept between calls:

1. fence extraction - fenced code is swapped for placeholder tokens
2. block segmentation - the text is split on blank-line gaps
3. block rendering - each block becomes a code, structural or paragraph fragment
4. table assembly - adjacent rows are wrapped into ``<table><tbody>``
5. fence restoration - placeholders are replaced by escaped ``<pre><code>``

Rendering is total: any input string produces an HTML string.

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

from asapnotes.exceptions import OutputWriteError
from asapnotes.options.markdown import MarkdownRendererOptions
from asapnotes.renderers.blocks import BlockKind, classify_block, normalize_newlines, segment_blocks
from asapnotes.renderers.fences import FencedDocument, extract_fences
from asapnotes.renderers.rules import apply_rules, build_inline_rules, build_structural_rules, render_plain_block
from asapnotes.renderers.tables import assemble_tables

logger = logging.getLogger(__name__)


class MarkdownHtmlRenderer:
    """Render note markdown to a preview HTML fragment.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Rendering options; defaults reproduce the classic preview output

    Examples
    --------
    Basic usage:

        >>> renderer = MarkdownHtmlRenderer()
        >>> renderer.render_to_string("# Title\\n\\nHello")
        '<h1>Title</h1><p>Hello</p>'

    Wrapping list items in containers:

        >>> renderer = MarkdownHtmlRenderer(MarkdownRendererOptions(wrap_lists=True))
        >>> renderer.render_to_string("- a\\n- b")
        '<ul><li>a</li>\\n<li>b</li></ul>'

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the renderer with options."""
        self.options: MarkdownRendererOptions = options or MarkdownRendererOptions()
        self._rules = build_structural_rules(self.options)
        self._inline_rules = build_inline_rules(self.options) if self.options.paragraph_inline else ()

    def render_to_string(self, document: str) -> str:
        """Render a complete document to HTML.

        Parameters
        ----------
        document : str
            The entire note text

        Returns
        -------
        str
            HTML fragment; the empty string for empty or blank input

        """
        fenced = extract_fences(normalize_newlines(document))
        blocks = segment_blocks(fenced.text)
        fragments = [self._render_block(block, fenced) for block in blocks]

        html = assemble_tables("".join(fragments))
        html = fenced.restore(html)

        logger.debug("Rendered %d block(s), %d fenced code block(s)", len(blocks), len(fenced.code_blocks))
        return html

    def render_to_file(self, document: str, output: Union[str, Path, IO[bytes]]) -> None:
        """Render a document and write the HTML to a file or binary stream.

        Parameters
        ----------
        document : str
            The entire note text
        output : str, Path, or IO[bytes]
            Output destination

        Raises
        ------
        OutputWriteError
            If the output cannot be written

        """
        html_text = self.render_to_string(document)
        data = html_text.encode("utf-8")

        if isinstance(output, (str, Path)):
            path = Path(output)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
            except OSError as e:
                raise OutputWriteError(str(path), original_error=e) from e
            logger.info("Wrote preview HTML to %s", path)
            return

        try:
            output.write(data)
        except OSError as e:
            raise OutputWriteError(getattr(output, "name", "<stream>"), original_error=e) from e

    def _render_block(self, block: str, fenced: FencedDocument) -> str:
        kind, code_index = classify_block(block, fenced)

        if kind is BlockKind.EMPTY:
            return ""
        if code_index is not None:
            return fenced.code_fragment(code_index)
        if kind is BlockKind.STRUCTURAL:
            return apply_rules(block, self._rules)
        return render_plain_block(block, self._inline_rules)


def render(document: str, options: MarkdownRendererOptions | None = None) -> str:
    """Render note markdown to HTML in one call.

    Parameters
    ----------
    document : str
        The entire note text
    options : MarkdownRendererOptions, optional
        Rendering options

    Returns
    -------
    str
        HTML fragment

    Examples
    --------
        >>> render("**bold *and italic* still bold**")
        '<p><b>bold <i>and italic</i> still bold</b></p>'
        >>> render("- **bold**", MarkdownRendererOptions(wrap_lists=True))
        '<ul><li><b>bold</b></li></ul>'

    """
    return MarkdownHtmlRenderer(options).render_to_string(document)
