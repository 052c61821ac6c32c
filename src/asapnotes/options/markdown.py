#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for rendering note markdown to preview HTML."""

from __future__ import annotations

from dataclasses import dataclass, field

from asapnotes.constants import (
    DEFAULT_IMAGE_STYLE,
    DEFAULT_LINK_TARGET,
    DEFAULT_PARAGRAPH_INLINE,
    DEFAULT_WRAP_LISTS,
)
from asapnotes.options.base import BaseRendererOptions


# src/asapnotes/options/markdown.py
@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    """Configuration options for the markdown preview renderer.

    Parameters
    ----------
    wrap_lists : bool, default False
        Wrap each run of consecutive list items in ``<ul>`` (bullets) or
        ``<ol>`` (ordinals). When False, list items are emitted as bare
        ``<li>`` fragments, which is the classic preview output.
    paragraph_inline : bool, default True
        Apply the inline rules (images, links, bold, italic, strikethrough,
        inline code) to plain paragraphs after escaping. When False, plain
        paragraphs are escaped text only, as in the classic preview.
    link_target : str or None, default "_blank"
        Value of the ``target`` attribute on rendered links. None omits
        the attribute so links open in the same frame.
    image_style : str or None, default "max-width: 100%; height: auto;"
        Inline ``style`` attribute for rendered images. None omits it.

    Examples
    --------
        >>> options = MarkdownRendererOptions(wrap_lists=True)
        >>> options.create_updated(link_target=None).link_target is None
        True

    """

    wrap_lists: bool = field(
        default=DEFAULT_WRAP_LISTS,
        metadata={"help": "Wrap consecutive list items in <ul>/<ol> containers", "importance": "core"},
    )
    paragraph_inline: bool = field(
        default=DEFAULT_PARAGRAPH_INLINE,
        metadata={"help": "Format inline markup inside plain paragraphs", "importance": "core"},
    )
    link_target: str | None = field(
        default=DEFAULT_LINK_TARGET,
        metadata={"help": "target attribute for links (None to omit)", "importance": "advanced"},
    )
    image_style: str | None = field(
        default=DEFAULT_IMAGE_STYLE,
        metadata={"help": "Inline style attribute for images (None to omit)", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate attribute values.

        Raises
        ------
        ValueError
            If an attribute value would break out of its quoted HTML attribute.

        """
        super().__post_init__()

        if self.link_target is not None and '"' in self.link_target:
            raise ValueError(f"link_target must not contain double quotes, got {self.link_target!r}")
        if self.image_style is not None and '"' in self.image_style:
            raise ValueError(f"image_style must not contain double quotes, got {self.image_style!r}")
