"""Tests for mistune token normalization."""

from __future__ import annotations

import pytest

from notionpress.converter.ast_normalizer import ASTNormalizer, to_plain_text


@pytest.fixture
def normalizer() -> ASTNormalizer:
    return ASTNormalizer()


class TestASTNormalizer:
    def test_heading_depth(self, normalizer):
        (node,) = normalizer.parse("## Title")
        assert node["type"] == "heading"
        assert node["depth"] == 2
        assert to_plain_text(node) == "Title"

    def test_paragraph_with_inline_nodes(self, normalizer):
        (node,) = normalizer.parse("plain **bold** *it* ~~gone~~ `code`")
        types = [child["type"] for child in node["children"]]
        assert node["type"] == "paragraph"
        for expected in ("strong", "emphasis", "delete", "inlineCode"):
            assert expected in types

    def test_fenced_code(self, normalizer):
        (node,) = normalizer.parse("```python extra\nprint(1)\n```")
        assert node == {"type": "code", "lang": "python", "value": "print(1)"}

    def test_code_without_language(self, normalizer):
        (node,) = normalizer.parse("```\nx\n```")
        assert node["lang"] is None

    def test_lists(self, normalizer):
        (bullets,) = normalizer.parse("- a\n- b")
        (numbers,) = normalizer.parse("1. a\n2. b")
        assert bullets["type"] == "list" and bullets["ordered"] is False
        assert numbers["ordered"] is True
        assert [item["type"] for item in bullets["children"]] == ["listItem", "listItem"]
        # Tight items wrap their text in a paragraph.
        assert bullets["children"][0]["children"][0]["type"] == "paragraph"

    def test_task_list_item(self, normalizer):
        (node,) = normalizer.parse("- [x] done\n- [ ] todo")
        assert node["children"][0]["checked"] is True
        assert node["children"][1]["checked"] is False

    def test_blockquote(self, normalizer):
        (node,) = normalizer.parse("> quoted")
        assert node["type"] == "blockquote"
        assert node["children"][0]["type"] == "paragraph"

    def test_thematic_break(self, normalizer):
        nodes = normalizer.parse("a\n\n***\n\nb")
        assert [n["type"] for n in nodes] == ["paragraph", "thematicBreak", "paragraph"]

    def test_table_rows_include_header(self, normalizer):
        (node,) = normalizer.parse("| a | b |\n|---|---|\n| 1 | 2 |")
        assert node["type"] == "table"
        assert len(node["children"]) == 2
        header = node["children"][0]
        assert [to_plain_text(cell) for cell in header["children"]] == ["a", "b"]

    def test_link(self, normalizer):
        (node,) = normalizer.parse("[site](https://example.com)")
        (link,) = node["children"]
        assert link["type"] == "link"
        assert link["url"] == "https://example.com"
        assert to_plain_text(link) == "site"

    def test_image_alt(self, normalizer):
        (node,) = normalizer.parse("![a cat](cat.png)")
        (image,) = node["children"]
        assert image["type"] == "image"
        assert image["alt"] == "a cat"

    def test_html_block(self, normalizer):
        (node,) = normalizer.parse("<div>raw</div>")
        assert node["type"] == "html"
        assert "<div>" in node["value"]

    def test_soft_break_becomes_newline_text(self, normalizer):
        (node,) = normalizer.parse("one\ntwo")
        assert to_plain_text(node) == "one\ntwo"

    def test_empty_document(self, normalizer):
        assert normalizer.parse("") == []


class TestToPlainText:
    def test_nested(self):
        node = {"type": "strong", "children": [{"type": "text", "value": "a"}, {"type": "break"}]}
        assert to_plain_text(node) == "a\n"

    def test_image_uses_alt(self):
        assert to_plain_text({"type": "image", "alt": "pic", "url": "x"}) == "pic"
