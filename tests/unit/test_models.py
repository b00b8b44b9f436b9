"""Tests for block serialisation and result containers."""

from __future__ import annotations

import pytest

from notionpress.models import (
    Annotations,
    BookmarkBlock,
    BulletedListItemBlock,
    CodeBlock,
    ConversionWarning,
    DividerBlock,
    EquationBlock,
    HeadingBlock,
    ParagraphBlock,
    PublishResult,
    RichText,
    TableBlock,
    TableRowBlock,
    plain_text,
)


class TestRichText:
    def test_plain_span(self):
        assert RichText("hi").to_notion() == {"type": "text", "text": {"content": "hi"}}

    def test_link_and_annotations(self):
        span = RichText("x").annotate(bold=True).with_link("https://e.com")
        assert span.to_notion() == {
            "type": "text",
            "text": {"content": "x", "link": {"url": "https://e.com"}},
            "annotations": {
                "bold": True,
                "italic": False,
                "strikethrough": False,
                "underline": False,
                "code": False,
                "color": "default",
            },
        }

    def test_annotations_merge_is_or(self):
        merged = Annotations(bold=True).merged(bold=False, italic=True)
        assert merged == Annotations(bold=True, italic=True)

    def test_plain_text(self):
        assert plain_text([RichText("a"), RichText("b")]) == "ab"


class TestBlocks:
    def test_heading(self):
        block = HeadingBlock(rich_text=[RichText("T")], level=2, is_toggleable=True)
        assert block.to_notion() == {
            "object": "block",
            "type": "heading_2",
            "heading_2": {"rich_text": [{"type": "text", "text": {"content": "T"}}], "is_toggleable": True},
        }

    def test_heading_level_bounds(self):
        with pytest.raises(ValueError):
            HeadingBlock(level=4)

    def test_list_item_children(self):
        item = BulletedListItemBlock(rich_text=[RichText("a")], children=[DividerBlock()])
        body = item.to_notion()["bulleted_list_item"]
        assert body["children"] == [{"object": "block", "type": "divider", "divider": {}}]

    def test_list_item_without_children_omits_key(self):
        assert "children" not in BulletedListItemBlock().to_notion()["bulleted_list_item"]

    def test_code(self):
        block = CodeBlock(rich_text=[RichText("print()")], language="python")
        assert block.code_text == "print()"
        assert block.to_notion()["code"]["language"] == "python"

    def test_simple_payloads(self):
        assert BookmarkBlock(url="https://x.y").to_notion()["bookmark"] == {"url": "https://x.y"}
        assert EquationBlock(expression="E=mc^2").to_notion()["equation"] == {"expression": "E=mc^2"}

    def test_table(self):
        row = TableRowBlock(cells=[[RichText("a")], []])
        table = TableBlock(table_width=2, has_column_header=True, rows=[row])
        body = table.to_notion()["table"]
        assert body["table_width"] == 2
        assert body["children"][0]["table_row"]["cells"] == [
            [{"type": "text", "text": {"content": "a"}}],
            [],
        ]


class TestPublishResult:
    def test_merge(self):
        first = PublishResult(added_count=1, chunk_count=1, responses=[{"a": 1}])
        second = PublishResult(
            added_count=2,
            chunk_count=3,
            warnings=[ConversionWarning("BLOCK_SKIPPED", "dropped")],
            responses=[{"b": 2}],
        )
        first.merge(second)
        assert (first.added_count, first.chunk_count) == (3, 4)
        assert first.warning_messages == ["dropped"]
        assert first.responses == [{"a": 1}, {"b": 2}]

    def test_paragraph_plain_text(self):
        assert ParagraphBlock(rich_text=[RichText("x"), RichText("y")]).plain_text == "xy"
