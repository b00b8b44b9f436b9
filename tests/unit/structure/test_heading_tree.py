"""Tests for heading-forest construction."""

from __future__ import annotations

from notionpress.models import (
    HeadingBlock,
    HeadingNode,
    ParagraphBlock,
    RichText,
    ToggleStructure,
)
from notionpress.structure.heading_tree import build_toggle_structure


def h(level: int, title: str) -> HeadingBlock:
    return HeadingBlock(rich_text=[RichText(title)], level=level, is_toggleable=True)


def p(value: str) -> ParagraphBlock:
    return ParagraphBlock(rich_text=[RichText(value)])


def walk(structure: ToggleStructure) -> list[HeadingNode]:
    nodes: list[HeadingNode] = []
    pending = list(reversed(structure.root_nodes))
    while pending:
        node = pending.pop()
        nodes.append(node)
        pending.extend(reversed(node.sub_headings))
    return nodes


class TestBuildToggleStructure:
    def test_scenario_outline_grouping(self):
        blocks = [p("Intro"), h(1, "A"), p("a1"), h(2, "A.1"), p("a11"), h(1, "B"), p("b1")]
        structure = build_toggle_structure(blocks)

        assert structure.orphan_blocks == [p("Intro")]
        a, b = structure.root_nodes
        assert a.heading.plain_text == "A"
        assert a.children == [p("a1")]
        (a1,) = a.sub_headings
        assert a1.heading.plain_text == "A.1"
        assert a1.children == [p("a11")]
        assert b.children == [p("b1")]
        assert b.sub_headings == []

    def test_sibling_headings_close_each_other(self):
        structure = build_toggle_structure([h(2, "x"), h(2, "y")])
        assert [n.heading.plain_text for n in structure.root_nodes] == ["x", "y"]

    def test_skipped_level_nests_under_nearest_shallower(self):
        structure = build_toggle_structure([h(1, "top"), h(3, "deep"), h(2, "mid")])
        (top,) = structure.root_nodes
        assert [n.heading.plain_text for n in top.sub_headings] == ["deep", "mid"]

    def test_deeper_first_heading_is_root(self):
        structure = build_toggle_structure([h(3, "c"), h(1, "a")])
        assert [n.level for n in structure.root_nodes] == [3, 1]

    def test_no_headings(self):
        structure = build_toggle_structure([p("x"), p("y")])
        assert structure.root_nodes == []
        assert len(structure.orphan_blocks) == 2

    def test_empty(self):
        structure = build_toggle_structure([])
        assert structure.root_nodes == [] and structure.orphan_blocks == []

    def test_deep_document_does_not_recurse(self):
        blocks = [h(1 + i % 3, f"t{i}") for i in range(5000)]
        structure = build_toggle_structure(blocks)
        assert len(walk(structure)) == 5000

    def test_walk_follows_document_order(self):
        blocks = [h(1, "a"), h(2, "b"), h(3, "c"), h(2, "d"), h(1, "e")]
        titles = [n.heading.plain_text for n in walk(build_toggle_structure(blocks))]
        assert titles == ["a", "b", "c", "d", "e"]
