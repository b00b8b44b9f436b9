"""Tests for inline node -> rich text conversion."""

from __future__ import annotations

from notionpress.converter.math import make_placeholder
from notionpress.converter.rich_text import inline_to_rich_text
from notionpress.models import Annotations, RichText


def text(value: str) -> dict:
    return {"type": "text", "value": value}


class TestInlineToRichText:
    def test_plain_text(self):
        assert inline_to_rich_text([text("hello")], {}) == [RichText("hello")]

    def test_empty_text_skipped(self):
        assert inline_to_rich_text([text("")], {}) == []

    def test_bold(self):
        (span,) = inline_to_rich_text([{"type": "strong", "children": [text("b")]}], {})
        assert span.annotations == Annotations(bold=True)

    def test_nested_annotations_compose(self):
        node = {
            "type": "emphasis",
            "children": [{"type": "strong", "children": [text("x")]}],
        }
        (span,) = inline_to_rich_text([node], {})
        assert span.annotations.bold and span.annotations.italic

    def test_strikethrough(self):
        (span,) = inline_to_rich_text([{"type": "delete", "children": [text("s")]}], {})
        assert span.annotations.strikethrough

    def test_inline_code(self):
        (span,) = inline_to_rich_text([{"type": "inlineCode", "value": "a_b"}], {})
        assert span.content == "a_b"
        assert span.annotations.code

    def test_link_applies_to_every_child_span(self):
        node = {
            "type": "link",
            "url": "https://example.com",
            "children": [text("go "), {"type": "strong", "children": [text("now")]}],
        }
        spans = inline_to_rich_text([node], {})
        assert [s.link for s in spans] == ["https://example.com"] * 2
        assert spans[1].annotations.bold

    def test_break(self):
        assert inline_to_rich_text([{"type": "break"}], {}) == [RichText("\n")]

    def test_math_restored_in_text(self):
        token = make_placeholder(0)
        spans = inline_to_rich_text([text(f"is {token}.")], {token: "$x_1$"})
        assert spans == [RichText("is $x_1$.")]

    def test_unknown_node_falls_back_to_plain_text(self):
        spans = inline_to_rich_text([{"type": "image", "alt": "pic", "url": "u"}], {})
        assert spans == [RichText("pic")]

    def test_serialization_omits_default_annotations(self):
        assert RichText("a").to_notion() == {"type": "text", "text": {"content": "a"}}
