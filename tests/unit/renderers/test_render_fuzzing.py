"""Property-based fuzzing tests for the preview renderer.

This test module uses Hypothesis to generate arbitrary documents and
fragments and validate the renderer's global properties.

Test Coverage:
- Property: rendering is total and deterministic
- Property: fenced code is isolated from every other rule
- Property: the table pass is idempotent
- Property: plain paragraphs never emit raw angle brackets from the source
- Unbalanced delimiters render in linear time
"""

import time

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from asapnotes import render
from asapnotes.options import MarkdownRendererOptions
from asapnotes.renderers.tables import assemble_tables
from asapnotes.utils.escape import escape_code_html

MARKDOWN_PIECES = st.sampled_from(
    ["# ", "## ", "> ", "- ", "* ", "1. ", "- [ ] ", "- [x] ", "|", "**", "*", "~~", "`", "```",
     "[", "](", ")", "![", "\n", "\n\n", "\r\n", " ", "text", "<b>", "&"]
)

HTML_PIECES = st.sampled_from(
    ["<tr>", "</tr>", "<table>", "</table>", "<tbody>", "</tbody>", "<td>x</td>", "x", " ", "\n", "|"]
)


@pytest.mark.unit
@pytest.mark.fuzzing
class TestRenderTotality:
    """Property-based tests for rendering arbitrary input."""

    @given(st.text(max_size=300))
    @settings(suppress_health_check=[HealthCheck.too_slow])
    def test_arbitrary_text_renders(self, document):
        """Property: any string renders to a string without raising."""
        assert isinstance(render(document), str)

    @given(st.lists(MARKDOWN_PIECES, max_size=40).map("".join))
    def test_markdown_like_text_is_deterministic(self, document):
        """Property: rendering the same document twice gives the same output."""
        assert render(document) == render(document)

    @given(st.lists(MARKDOWN_PIECES, max_size=40).map("".join), st.booleans(), st.booleans())
    def test_all_option_combinations_render(self, document, wrap_lists, paragraph_inline):
        """Property: every option combination is total."""
        options = MarkdownRendererOptions(wrap_lists=wrap_lists, paragraph_inline=paragraph_inline)
        assert isinstance(render(document, options), str)


@pytest.mark.unit
@pytest.mark.fuzzing
class TestFenceIsolation:
    """Property-based tests for fenced code."""

    @given(st.text(alphabet=st.characters(exclude_characters="`\r"), max_size=200))
    def test_lone_fence_is_verbatim(self, body):
        """Property: a document that is one fence renders its body escaped and unchanged."""
        assert render(f"```{body}```") == f"<pre><code>{escape_code_html(body)}</code></pre>"

    @given(st.text(alphabet=st.characters(exclude_characters="`\r"), max_size=100))
    def test_fence_after_heading(self, body):
        """Property: surrounding structure never leaks into the code body."""
        html = render(f"# Title\n\n```{body}```")
        assert html == f"<h1>Title</h1><pre><code>{escape_code_html(body)}</code></pre>"


@pytest.mark.unit
@pytest.mark.fuzzing
class TestTablePass:
    """Property-based tests for table assembly."""

    @given(st.lists(HTML_PIECES, max_size=30).map("".join))
    def test_assemble_tables_idempotent(self, html):
        """Property: running the table pass twice equals running it once."""
        once = assemble_tables(html)
        assert assemble_tables(once) == once

    @given(st.lists(st.sampled_from(["|a|b|", "|c|", "text", "- item"]), min_size=1, max_size=8).map("\n".join))
    def test_rendered_tables_always_have_bodies(self, document):
        """Property: every rendered table opens with a tbody."""
        html = render(document)
        assert html.count("<table>") == html.count("<table><tbody>")


@pytest.mark.unit
@pytest.mark.fuzzing
class TestParagraphEscaping:
    """Property-based tests for plain paragraph escaping."""

    @given(st.text(alphabet="abc <>&\t", min_size=1, max_size=80).filter(lambda s: s[:1].isalpha()))
    def test_no_raw_brackets_from_source(self, document):
        """Property: source angle brackets in prose always come out escaped."""
        html = render(document, MarkdownRendererOptions(paragraph_inline=False))

        assert html.startswith("<p>")
        assert html.endswith("</p>")
        assert "<" not in html[3:-4]
        assert ">" not in html[3:-4]


# Large single-line documents full of openers that never close
UNBALANCED_DOCUMENTS = [
    "[" * 50000,
    "![a](" * 20000,
    "[a](b" * 20000,
    "![" * 50000,
    "](" * 50000,
    "**a" * 30000 + "*",
    "~~a" * 30000 + "~",
    "|" + "[x" * 50000,
    "- " + "<tr>" * 25000,
]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestUnbalancedDelimiters:
    """Test that rendering cost stays linear on pathological inputs."""

    @pytest.mark.parametrize("document", UNBALANCED_DOCUMENTS, ids=lambda d: repr(d[:6]))
    @pytest.mark.parametrize("paragraph_inline", [True, False])
    def test_renders_quickly(self, document, paragraph_inline):
        """Test that a 100 KB line of unclosed delimiters renders within a fixed time bound."""
        options = MarkdownRendererOptions(paragraph_inline=paragraph_inline)

        start = time.perf_counter()
        html = render(document, options)
        elapsed = time.perf_counter() - start

        assert html
        assert elapsed < 5.0

