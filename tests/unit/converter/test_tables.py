"""Tests for table conversion."""

from __future__ import annotations

from notionpress.converter.math import make_placeholder
from notionpress.converter.tables import align_table_rows, build_table
from notionpress.models import RichText


def cell(value: str) -> dict:
    return {"type": "tableCell", "children": [{"type": "text", "value": value}] if value else []}


def row(*values: str) -> dict:
    return {"type": "tableRow", "children": [cell(v) for v in values]}


class TestBuildTable:
    def test_width_and_header(self):
        table = build_table({"type": "table", "children": [row("a", "b"), row("1", "2")]})
        assert table.table_width == 2
        assert table.has_column_header is True
        assert table.has_row_header is False
        assert table.rows[1].cells == [[RichText("1")], [RichText("2")]]

    def test_short_row_padded(self):
        table = build_table({"type": "table", "children": [row("a", "b", "c"), row("1")]})
        assert len(table.rows[1].cells) == 3
        assert table.rows[1].cells[1:] == [[], []]

    def test_long_row_truncated(self):
        table = build_table({"type": "table", "children": [row("a"), row("1", "2")]})
        assert table.rows[1].cells == [[RichText("1")]]

    def test_empty_cell(self):
        table = build_table({"type": "table", "children": [row("a", "")]})
        assert table.rows[0].cells[1] == []

    def test_math_restored(self):
        token = make_placeholder(0)
        table = build_table({"type": "table", "children": [row(token)]}, {token: "$y$"})
        assert table.rows[0].cells[0] == [RichText("$y$")]

    def test_serialized_shape(self):
        payload = build_table({"type": "table", "children": [row("a")]}).to_notion()
        assert payload["type"] == "table"
        (child,) = payload["table"]["children"]
        assert child["type"] == "table_row"
        assert child["table_row"]["cells"] == [[{"type": "text", "text": {"content": "a"}}]]


class TestAlignTableRows:
    def test_short_row_padded(self):
        assert align_table_rows("| a | b |\n|---|---|\n| 1 |") == "| a | b |\n|---|---|\n| 1 |  |"

    def test_long_row_trimmed(self):
        assert align_table_rows("| a |\n|---|\n| 1 | 2 |") == "| a |\n|---|\n| 1 |"

    def test_fitting_rows_unchanged(self):
        source = "| a | b |\n|:--|--:|\n|1|2|"
        assert align_table_rows(source) == source

    def test_pipeless_style_kept(self):
        assert align_table_rows("a | b\n--- | ---\n1 | 2 | 3") == "a | b\n--- | ---\n1 | 2"

    def test_escaped_pipe_is_not_a_separator(self):
        source = "| a | b |\n|---|---|\n| x \\| y | z |"
        assert align_table_rows(source) == source

    def test_header_width_mismatch_left_alone(self):
        source = "| a | b | c |\n|---|---|\n| 1 |"
        assert align_table_rows(source) == source

    def test_table_ends_at_blank_line(self):
        source = "| a | b |\n|---|---|\n| 1 | 2 |\n\nplain | text | here"
        assert align_table_rows(source) == source

    def test_text_without_tables(self):
        assert align_table_rows("# Title\n\nBody") == "# Title\n\nBody"
