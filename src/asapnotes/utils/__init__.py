#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Utility helpers for asapnotes."""

from asapnotes.utils.escape import escape_code_html, escape_html_text

__all__ = ["escape_code_html", "escape_html_text"]
