#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/utils/escape.py
"""HTML escaping helpers used by the preview renderer.

Two escaping levels exist on purpose: plain paragraphs escape the ampersand
as well as angle brackets, while restored fenced code only neutralizes angle
brackets so entity-looking text inside code survives untouched.

"""

from __future__ import annotations


def escape_html_text(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for plain paragraph text.

    Parameters
    ----------
    text : str
        Raw text to escape

    Returns
    -------
    str
        Text safe to place inside an HTML element

    Examples
    --------
        >>> escape_html_text("a < b && c > d")
        'a &lt; b &amp;&amp; c &gt; d'

    """
    if not text:
        return text

    # Ampersand first so the entities produced below are not re-escaped
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_code_html(text: str) -> str:
    """Escape only ``<`` and ``>`` in a fenced code body.

    Parameters
    ----------
    text : str
        Verbatim code block body

    Returns
    -------
    str
        Body with angle brackets replaced by entities

    Examples
    --------
        >>> escape_code_html("<b>&amp;</b>")
        '&lt;b&gt;&amp;&lt;/b&gt;'

    """
    if not text:
        return text

    return text.replace("<", "&lt;").replace(">", "&gt;")


__all__ = ["escape_html_text", "escape_code_html"]
