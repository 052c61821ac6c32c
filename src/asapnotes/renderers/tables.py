#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/renderers/tables.py
"""Pipe-table rows and table assembly.

Tables are built in two steps. Each line that opens with a pipe becomes a ``<tr>``
independently; afterwards every run of adjacent rows is wrapped in a single
``<table>`` and given a ``<tbody>``. There is no header or separator-row
handling: a ``|---|---|`` line is just another row.

"""

from __future__ import annotations

import re

# A line whose content starts with a pipe; the closing pipe is optional
TABLE_ROW_PATTERN = re.compile(r"^[ \t]*\|(.*)$", re.MULTILINE)

# Rendered rows never span lines; a row ends before any later <tr> so an
# unclosed opener costs no more than the text up to the next one
_RENDERED_ROW = re.compile(r"<tr>(?:(?!<tr>).)*?</tr>")

_WRAPPED_PREFIXES = ("<table>", "<tbody>")


def split_cells(content: str) -> list[str]:
    """Split the inside of a pipe row into stripped cell strings.

    Examples
    --------
        >>> split_cells(" a | b |c")
        ['a', 'b', 'c']

    """
    return [cell.strip() for cell in content.split("|")]


def render_table_row(match: re.Match[str]) -> str:
    """Turn one matched pipe line into a ``<tr>`` of ``<td>`` cells.

    A closing pipe ends the row; without one the last cell runs to the end
    of the line.
    """
    content = match.group(1).rstrip(" \t")
    if content.endswith("|"):
        content = content[:-1]
    cells = "".join(f"<td>{cell}</td>" for cell in split_cells(content))
    return f"<tr>{cells}</tr>"


def convert_table_rows(text: str) -> str:
    """Replace every pipe-delimited line with a ``<tr>`` row."""
    return TABLE_ROW_PATTERN.sub(render_table_row, text)


def wrap_table_rows(html: str) -> str:
    """Wrap each run of adjacent ``<tr>`` rows in ``<table>...</table>``.

    Rows separated only by whitespace belong to the same run. A run that is
    already preceded by ``<table>`` or ``<tbody>`` is left alone, which makes
    the function idempotent.

    Parameters
    ----------
    html : str
        Rendered HTML containing ``<tr>`` rows

    Returns
    -------
    str
        HTML with every run of rows inside a table

    Examples
    --------
        >>> wrap_table_rows("<tr><td>a</td></tr>\\n<tr><td>b</td></tr>")
        '<table><tr><td>a</td></tr>\\n<tr><td>b</td></tr></table>'

    """
    rows = list(_RENDERED_ROW.finditer(html))
    if not rows:
        return html

    pieces: list[str] = []
    position = 0
    index = 0

    while index < len(rows):
        last = index
        while last + 1 < len(rows) and not html[rows[last].end() : rows[last + 1].start()].strip():
            last += 1

        start, end = rows[index].start(), rows[last].end()
        pieces.append(html[position:start])
        run = html[start:end]
        if html.endswith(_WRAPPED_PREFIXES, 0, start):
            pieces.append(run)
        else:
            pieces.append(f"<table>{run}</table>")

        position = end
        index = last + 1

    pieces.append(html[position:])
    return "".join(pieces)


def normalize_table_bodies(html: str) -> str:
    """Insert a ``<tbody>`` wrapper inside every table that lacks one."""
    html = html.replace("<table><tr>", "<table><tbody><tr>")
    return html.replace("</tr></table>", "</tr></tbody></table>")


def assemble_tables(html: str) -> str:
    """Run the document-level table pass: wrap loose row runs, then add bodies.

    Applying this function twice gives the same result as applying it once.

    Parameters
    ----------
    html : str
        Concatenated block fragments

    Returns
    -------
    str
        HTML where every table is ``<table><tbody>...</tbody></table>``

    """
    return normalize_table_bodies(wrap_table_rows(html))
