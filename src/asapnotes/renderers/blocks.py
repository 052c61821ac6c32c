#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/renderers/blocks.py
"""Block segmentation and classification.

A block is a run of text separated from its neighbours by two or more
consecutive line breaks. Blocks are classified independently; no state
flows from one block to the next.

"""

from __future__ import annotations

import re
from enum import Enum
from typing import NamedTuple, Optional

from asapnotes.renderers.fences import FencedDocument

_BLOCK_SEPARATOR = re.compile(r"\n{2,}")
_LINE_ENDINGS = re.compile(r"\r\n?")

# Leading markers that make a block structural rather than a plain paragraph
_STRUCTURAL_START = re.compile(
    r"""
    \A\s*
    (?:
        \#{1,6}[ ]          # heading, levels 1-6
      | >[ ]                # blockquote
      | -[ ]\[[ xX]\]       # task item
      | [-*+][ ]            # bullet item
      | \d+\.[ ]            # ordinal item
      | \|                  # table row
    )
    """,
    re.VERBOSE,
)


class BlockKind(Enum):
    """How a segmented block is rendered."""

    EMPTY = "empty"
    CODE = "code"
    STRUCTURAL = "structural"
    PLAIN = "plain"


class BlockClass(NamedTuple):
    """Classification of one block."""

    kind: BlockKind
    # Index into ``FencedDocument.code_blocks`` for CODE blocks
    code_index: Optional[int] = None


def normalize_newlines(text: str) -> str:
    """Convert ``\\r\\n`` and lone ``\\r`` line endings to ``\\n``."""
    return _LINE_ENDINGS.sub("\n", text)


def segment_blocks(text: str) -> list[str]:
    """Split text on every run of two or more line breaks, preserving order.

    Parameters
    ----------
    text : str
        Fence-substituted document text

    Returns
    -------
    list[str]
        Ordered block strings; empty strings are kept

    Examples
    --------
        >>> segment_blocks("a\\n\\n\\nb\\nc")
        ['a', 'b\\nc']

    """
    return _BLOCK_SEPARATOR.split(text)


def is_structural(block: str) -> bool:
    """Return True when the block starts with a heading, quote, list, task or table marker."""
    return _STRUCTURAL_START.match(block) is not None


def classify_block(block: str, document: FencedDocument) -> BlockClass:
    """Decide how a block is rendered.

    Parameters
    ----------
    block : str
        One segmented block
    document : FencedDocument
        The fence extraction result the block came from

    Returns
    -------
    BlockClass
        EMPTY for blank blocks, CODE with the code block index for a lone
        placeholder token, STRUCTURAL or PLAIN otherwise

    """
    if not block.strip():
        return BlockClass(BlockKind.EMPTY)
    index = document.sole_index(block)
    if index is not None:
        return BlockClass(BlockKind.CODE, index)
    if is_structural(block):
        return BlockClass(BlockKind.STRUCTURAL)
    return BlockClass(BlockKind.PLAIN)
