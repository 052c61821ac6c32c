#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/renderers/rules.py
"""Ordered transformation rules for structural and plain blocks.

Structural blocks run through a fixed pipeline of substitution passes. The
order is part of the output contract:

- headings are tried from level 6 down to level 1;
- images are matched before links, since an image is ``!`` plus link syntax;
- bold is matched before italic, since ``**`` would otherwise be split into
  two italic delimiters;
- task items are matched before generic list items, since ``- [ ] x`` is
  also a bullet line.

Plain blocks are escaped and wrapped in a paragraph instead; the inline
subset of the pipeline (images through inline code) can optionally run over
the escaped paragraph text as well.

"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, NamedTuple, Union

from asapnotes.constants import MAX_HEADING_LEVEL
from asapnotes.options.markdown import MarkdownRendererOptions
from asapnotes.renderers.tables import convert_table_rows, wrap_table_rows
from asapnotes.utils.escape import escape_html_text

Replacement = Union[str, Callable[[re.Match[str]], str]]

_WHITESPACE_RUN = re.compile(r"\s{2,}")

# Labels stop at any bracket and targets at any parenthesis, so a failed
# match never rescans past the next opener
IMAGE_PATTERN = re.compile(r"!\[([^\[\]\n]*)\]\(([^()\n]*)\)")
LINK_PATTERN = re.compile(r"\[([^\[\]\n]*)\]\(([^()\n]*)\)")
BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
# An opening asterisk followed by a blank is a bullet, not emphasis
ITALIC_PATTERN = re.compile(r"\*(?!\s)(.*?)\*")
STRIKETHROUGH_PATTERN = re.compile(r"~~(.*?)~~")
INLINE_CODE_PATTERN = re.compile(r"`([^`]+)`")
BLOCKQUOTE_PATTERN = re.compile(r"^> (.*)$", re.MULTILINE)
TASK_ITEM_PATTERN = re.compile(r"^[ \t]*- \[([ xX])\](?: (.*))?$", re.MULTILINE)
LIST_ITEM_PATTERN = re.compile(r"^[ \t]*([-*+]|\d+\.) (.*)$")


class Rule(NamedTuple):
    """A named, self-contained transformation pass."""

    name: str
    transform: Callable[[str], str]

    def apply(self, text: str) -> str:
        """Run the pass over ``text``."""
        return self.transform(text)


def substitution(name: str, pattern: re.Pattern[str], replacement: Replacement) -> Rule:
    """Build a rule that performs one global regex substitution."""
    return Rule(name, lambda text: pattern.sub(replacement, text))


def heading_rule(level: int) -> Rule:
    """Build the rule converting ``#``-prefixed lines of one level to ``<hN>``."""
    pattern = re.compile(rf"^#{{{level}}} (.*)$", re.MULTILINE)
    return substitution(f"heading_{level}", pattern, rf"<h{level}>\1</h{level}>")


def _image_replacement(image_style: str | None) -> Callable[[re.Match[str]], str]:
    style = f' style="{image_style}"' if image_style is not None else ""

    def replace(match: re.Match[str]) -> str:
        return f'<img src="{match.group(2)}" alt="{match.group(1)}"{style}>'

    return replace


def _link_replacement(link_target: str | None) -> Callable[[re.Match[str]], str]:
    target = f' target="{link_target}"' if link_target is not None else ""

    def replace(match: re.Match[str]) -> str:
        return f'<a href="{match.group(2)}"{target}>{match.group(1)}</a>'

    return replace


def _task_item(match: re.Match[str]) -> str:
    checked = " checked" if match.group(1) in "xX" else ""
    label = match.group(2) or ""
    return f'<div class="task-item"><input type="checkbox"{checked} disabled> {label}</div>'


def convert_list_items(text: str, wrap: bool = False) -> str:
    """Convert bullet and ordinal lines to ``<li>`` items.

    Parameters
    ----------
    text : str
        Block text after every earlier rule has run
    wrap : bool, default False
        Wrap each run of consecutive items of the same kind in ``<ul>``
        (bullets) or ``<ol>`` (ordinals)

    Returns
    -------
    str
        Text with list lines replaced

    Examples
    --------
        >>> convert_list_items("- a\\n- b")
        '<li>a</li>\\n<li>b</li>'
        >>> convert_list_items("1. a\\n2. b", wrap=True)
        '<ol><li>a</li>\\n<li>b</li></ol>'

    """
    output: list[str] = []
    run: list[str] = []
    run_tag = ""

    def flush() -> None:
        if run:
            output.append(f"<{run_tag}>" + "\n".join(run) + f"</{run_tag}>")
            run.clear()

    for line in text.split("\n"):
        match = LIST_ITEM_PATTERN.match(line)
        if match is None:
            flush()
            output.append(line)
            continue

        item = f"<li>{match.group(2)}</li>"
        if not wrap:
            output.append(item)
            continue

        tag = "ol" if match.group(1)[0].isdigit() else "ul"
        if tag != run_tag:
            flush()
            run_tag = tag
        run.append(item)

    flush()
    return "\n".join(output)


@lru_cache(maxsize=16)
def build_inline_rules(options: MarkdownRendererOptions) -> tuple[Rule, ...]:
    """Return the inline span rules in application order.

    Images come before links, bold before italic.
    """
    return (
        substitution("image", IMAGE_PATTERN, _image_replacement(options.image_style)),
        substitution("link", LINK_PATTERN, _link_replacement(options.link_target)),
        substitution("bold", BOLD_PATTERN, r"<b>\1</b>"),
        substitution("italic", ITALIC_PATTERN, r"<i>\1</i>"),
        substitution("strikethrough", STRIKETHROUGH_PATTERN, r"<del>\1</del>"),
        substitution("inline_code", INLINE_CODE_PATTERN, r"<code>\1</code>"),
    )


@lru_cache(maxsize=16)
def build_structural_rules(options: MarkdownRendererOptions) -> tuple[Rule, ...]:
    """Return the ordered structural pipeline for a set of options.

    Parameters
    ----------
    options : MarkdownRendererOptions
        Renderer options (hashable, so pipelines are cached per options)

    Returns
    -------
    tuple[Rule, ...]
        Rules in application order

    """
    headings = tuple(heading_rule(level) for level in range(MAX_HEADING_LEVEL, 0, -1))
    return (
        headings
        + (
            substitution("blockquote", BLOCKQUOTE_PATTERN, r"<blockquote>\1</blockquote>"),
            Rule("table_rows", convert_table_rows),
            Rule("table_wrap", wrap_table_rows),
        )
        + build_inline_rules(options)
        + (
            substitution("task_item", TASK_ITEM_PATTERN, _task_item),
            Rule("list_item", lambda text: convert_list_items(text, wrap=options.wrap_lists)),
        )
    )


def apply_rules(block: str, rules: tuple[Rule, ...]) -> str:
    """Run ``block`` through every rule in order."""
    for rule in rules:
        block = rule.apply(block)
    return block


def render_structural_block(block: str, options: MarkdownRendererOptions | None = None) -> str:
    """Render a heading, quote, list, task or table block."""
    return apply_rules(block, build_structural_rules(options or MarkdownRendererOptions()))


def render_plain_block(block: str, inline_rules: tuple[Rule, ...] = ()) -> str:
    """Render a prose block as one escaped paragraph.

    The block is escaped first, so inline rules only ever see entity-escaped
    text and cannot let raw markup through.

    Parameters
    ----------
    block : str
        Block that starts with no structural marker
    inline_rules : tuple[Rule, ...], default ()
        Span rules to run over the escaped text, line by line

    Returns
    -------
    str
        ``<p>`` fragment with line breaks as ``<br>`` and whitespace runs collapsed

    Examples
    --------
        >>> render_plain_block("a  <b>\\nc")
        '<p>a &lt;b&gt;<br>c</p>'
        >>> render_plain_block("**x**", build_inline_rules(MarkdownRendererOptions()))
        '<p><b>x</b></p>'

    """
    text = apply_rules(escape_html_text(block), inline_rules).replace("\n", "<br>")
    return f"<p>{_WHITESPACE_RUN.sub(' ', text)}</p>"
