"""Unit tests for pipe-table rows and table assembly."""

import pytest

from asapnotes.renderers.tables import (
    assemble_tables,
    convert_table_rows,
    normalize_table_bodies,
    split_cells,
    wrap_table_rows,
)

ROW_A = "<tr><td>a</td></tr>"
ROW_B = "<tr><td>b</td></tr>"


@pytest.mark.unit
class TestRows:
    """Test conversion of pipe lines to rows."""

    def test_split_cells(self):
        """Test cell splitting and stripping."""
        assert split_cells(" a | b |c") == ["a", "b", "c"]

    def test_empty_cells_kept(self):
        """Test that empty cells are preserved."""
        assert split_cells("a||b") == ["a", "", "b"]

    def test_convert_each_line(self):
        """Test that every pipe line becomes its own row."""
        assert convert_table_rows("|a|\n|b|") == f"{ROW_A}\n{ROW_B}"

    def test_non_table_lines_untouched(self):
        """Test that other lines in the block are left alone."""
        assert convert_table_rows("- x\n|a|") == f"- x\n{ROW_A}"

    @pytest.mark.parametrize("line", ["|a", "|a|", "  | a |  ", "|a \t"])
    def test_closing_pipe_optional(self, line):
        """Test that a row needs only its opening pipe."""
        assert convert_table_rows(line) == ROW_A

    def test_empty_last_cell_from_closing_pipe_dropped(self):
        """Test that the closing pipe does not add an extra empty cell."""
        assert convert_table_rows("|a|b|") == "<tr><td>a</td><td>b</td></tr>"


@pytest.mark.unit
class TestAssembly:
    """Test wrapping row runs into tables."""

    def test_wrap_adjacent_rows(self):
        """Test that rows separated by whitespace share one table."""
        assert wrap_table_rows(f"{ROW_A}\n{ROW_B}") == f"<table>{ROW_A}\n{ROW_B}</table>"

    def test_rows_split_by_text_get_separate_tables(self):
        """Test that non-whitespace between rows starts a new table."""
        assert wrap_table_rows(f"{ROW_A}<p>x</p>{ROW_B}") == f"<table>{ROW_A}</table><p>x</p><table>{ROW_B}</table>"

    def test_already_wrapped_rows_untouched(self):
        """Test that a run preceded by <table> is not wrapped again."""
        html = f"<table>{ROW_A}</table>"
        assert wrap_table_rows(html) == html

    def test_unclosed_row_opener_ignored(self):
        """Test that a stray <tr> before a complete row is not part of it."""
        assert wrap_table_rows(f"<tr>x {ROW_A}") == f"<tr>x <table>{ROW_A}</table>"

    def test_no_rows(self):
        """Test that text without rows is unchanged."""
        assert wrap_table_rows("<p>x</p>") == "<p>x</p>"

    def test_normalize_bodies(self):
        """Test tbody insertion."""
        assert normalize_table_bodies(f"<table>{ROW_A}</table>") == f"<table><tbody>{ROW_A}</tbody></table>"

    def test_assemble_loose_rows(self):
        """Test the full table pass over loose rows."""
        assert assemble_tables(f"{ROW_A}\n{ROW_B}") == f"<table><tbody>{ROW_A}\n{ROW_B}</tbody></table>"

    @pytest.mark.parametrize(
        "html",
        [
            f"{ROW_A}\n{ROW_B}",
            f"<table>{ROW_A}</table><table>{ROW_B}</table>",
            f"{ROW_A}</table>",
            f"<tbody>{ROW_A}</table>",
            f"{ROW_A} <table>{ROW_B}",
        ],
    )
    def test_assemble_is_idempotent(self, html):
        """Test that a second table pass changes nothing."""
        once = assemble_tables(html)
        assert assemble_tables(once) == once
