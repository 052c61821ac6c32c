#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/renderers/fences.py
"""Fenced code extraction and restoration.

Fenced regions are pulled out of the document before any other rule sees
the text, replaced by placeholder tokens, and spliced back (escaped) as the
very last rendering step. Placeholder tokens are framed by a private-use
code point that does not occur anywhere in the source document, so user text
can never be mistaken for a token.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from itertools import chain

from asapnotes.constants import (
    FENCE_MARKER,
    PLACEHOLDER_LABEL,
    PLACEHOLDER_SENTINEL_END,
    PLACEHOLDER_SENTINEL_START,
)
from asapnotes.utils.escape import escape_code_html

logger = logging.getLogger(__name__)

# BMP private-use area first, then the two supplementary private-use planes
_SENTINEL_RANGES = (
    range(PLACEHOLDER_SENTINEL_START, PLACEHOLDER_SENTINEL_END + 1),
    range(0xF0000, 0xFFFFE),
    range(0x100000, 0x10FFFE),
)


def choose_sentinel(text: str) -> str | None:
    """Return the first private-use character that does not occur in ``text``.

    Parameters
    ----------
    text : str
        Document about to be scanned for fences

    Returns
    -------
    str or None
        A single-character sentinel, or None when the document already uses
        every private-use code point

    """
    used = set(text)
    for codepoint in chain.from_iterable(_SENTINEL_RANGES):
        candidate = chr(codepoint)
        if candidate not in used:
            return candidate
    return None


def render_code_fragment(body: str) -> str:
    """Wrap a verbatim code body in a preformatted fragment."""
    return f"<pre><code>{escape_code_html(body)}</code></pre>"


@dataclass
class FencedDocument:
    """A document whose fenced regions have been swapped for placeholder tokens.

    Parameters
    ----------
    text : str
        Document text with every fenced region replaced by a token
    code_blocks : list[str]
        Extracted fence bodies, verbatim, indexed by token number
    sentinel : str
        Character framing each token; empty when no extraction happened

    """

    text: str
    code_blocks: list[str] = field(default_factory=list)
    sentinel: str = ""

    def token(self, index: int) -> str:
        """Return the placeholder token for code block ``index``."""
        return f"{self.sentinel}{PLACEHOLDER_LABEL}_{index}{self.sentinel}"

    @property
    def _token_pattern(self) -> re.Pattern[str]:
        sentinel = re.escape(self.sentinel)
        return re.compile(f"{sentinel}{PLACEHOLDER_LABEL}_(\\d+){sentinel}")

    def sole_index(self, block: str) -> int | None:
        """Return the code block index when ``block`` is nothing but one token.

        Parameters
        ----------
        block : str
            A segmented block of the substituted document

        Returns
        -------
        int or None
            Index into ``code_blocks``, or None if the block holds anything else

        """
        if not self.code_blocks:
            return None
        match = self._token_pattern.fullmatch(block.strip())
        if match is None:
            return None
        return int(match.group(1))

    def code_fragment(self, index: int) -> str:
        """Render code block ``index`` as an escaped ``<pre><code>`` fragment."""
        return render_code_fragment(self.code_blocks[index])

    def restore(self, html: str) -> str:
        """Splice every remaining placeholder token back as a code fragment.

        Parameters
        ----------
        html : str
            Rendered output that may still contain placeholder tokens

        Returns
        -------
        str
            Output with all tokens resolved

        """
        if not self.code_blocks:
            return html
        return self._token_pattern.sub(lambda m: self.code_fragment(int(m.group(1))), html)


def extract_fences(text: str) -> FencedDocument:
    """Replace every terminated fenced region with a placeholder token.

    The scan is a single forward pass: find an opening marker, then the next
    marker at or after the end of the opener. An opener with no closer is not
    a fence; it and everything after it stay ordinary text.

    Parameters
    ----------
    text : str
        Raw document text

    Returns
    -------
    FencedDocument
        Substituted text plus the extracted bodies

    Examples
    --------
        >>> doc = extract_fences("a ```x``` b")
        >>> doc.code_blocks
        ['x']
        >>> doc.restore(doc.text)
        'a <pre><code>x</code></pre> b'

    """
    sentinel = choose_sentinel(text)
    if sentinel is None:
        logger.warning("Document uses every private-use code point; fenced code left unextracted")
        return FencedDocument(text=text)

    document = FencedDocument(text=text, sentinel=sentinel)
    marker_len = len(FENCE_MARKER)
    pieces: list[str] = []
    position = 0

    while True:
        start = text.find(FENCE_MARKER, position)
        if start == -1:
            break
        end = text.find(FENCE_MARKER, start + marker_len)
        if end == -1:
            # Unterminated fence
            break
        pieces.append(text[position:start])
        document.code_blocks.append(text[start + marker_len : end])
        pieces.append(document.token(len(document.code_blocks) - 1))
        position = end + marker_len

    if not document.code_blocks:
        return FencedDocument(text=text)

    pieces.append(text[position:])
    document.text = "".join(pieces)
    logger.debug("Extracted %d fenced code block(s)", len(document.code_blocks))
    return document
