"""Property-based tests for notionpress using Hypothesis.

These tests verify invariants of the converter helpers, the heading tree,
the normalizer and bisection over a wide range of generated inputs.  They
complement the example-based unit tests.
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
from conftest import FakeBlockAPI, sync_api

from notionpress.config import NotionpressConfig
from notionpress.converter.fences import balance_fences
from notionpress.converter.math import hide_math, restore_math
from notionpress.models import (
    Block,
    BulletedListItemBlock,
    HeadingBlock,
    HeadingNode,
    ParagraphBlock,
    RichText,
    RichTextBlock,
)
from notionpress.publish.batch import BatchPublisher
from notionpress.publish.normalizer import normalize_blocks
from notionpress.structure.heading_tree import build_toggle_structure

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

_line_st = st.sampled_from(["```", "```python", "~~~", "text", "", "  ```  ", "# h"])
_markdown_lines_st = st.lists(_line_st, max_size=30).map("\n".join)

_math_text_st = st.text(alphabet="ab $x^{}_\n*", max_size=80)

_span_st = st.builds(RichText, st.text(alphabet="abc", max_size=40))

_leaf_st = st.builds(ParagraphBlock, rich_text=st.lists(_span_st, max_size=12))
_item_st = st.builds(
    BulletedListItemBlock,
    rich_text=st.lists(_span_st, max_size=12),
    children=st.lists(_leaf_st, max_size=3),
)
_content_st = st.one_of(_leaf_st, _item_st)


def _heading(level: int) -> HeadingBlock:
    return HeadingBlock(rich_text=[RichText(f"h{level}")], level=level)


_doc_st = st.lists(
    st.one_of(st.integers(min_value=1, max_value=3).map(_heading), _leaf_st),
    max_size=40,
)


def _flatten(node: HeadingNode) -> list[Block]:
    blocks: list[Block] = [node.heading, *node.children]
    for sub in node.sub_headings:
        blocks.extend(_flatten(sub))
    return blocks


def _heading_nodes(node: HeadingNode) -> list[HeadingNode]:
    nodes = [node]
    for sub in node.sub_headings:
        nodes.extend(_heading_nodes(sub))
    return nodes


def _walk(blocks: list[Block]):
    for block in blocks:
        yield block
        yield from _walk(getattr(block, "children", []))


# ---------------------------------------------------------------------------
# Converter helpers
# ---------------------------------------------------------------------------

@given(_markdown_lines_st)
def test_balance_fences_is_idempotent_and_appends_only(markdown):
    balanced = balance_fences(markdown)
    assert balance_fences(balanced) == balanced
    assert balanced.startswith(markdown)


@given(_math_text_st)
def test_math_placeholders_round_trip(text):
    hidden, placeholders = hide_math(text)
    assert all(span.startswith("$") and span.endswith("$") for span in placeholders.values())
    assert restore_math(hidden, placeholders) == text


@given(_math_text_st)
def test_disabled_math_is_identity(text):
    assert hide_math(text, enabled=False) == (text, {})


# ---------------------------------------------------------------------------
# Heading tree
# ---------------------------------------------------------------------------

@given(_doc_st)
def test_heading_tree_preserves_document_order(blocks):
    structure = build_toggle_structure(blocks)
    flattened = list(structure.orphan_blocks)
    for node in structure.root_nodes:
        flattened.extend(_flatten(node))
    assert flattened == blocks


@given(_doc_st)
def test_sub_headings_are_deeper(blocks):
    structure = build_toggle_structure(blocks)
    nodes = [n for root in structure.root_nodes for n in _heading_nodes(root)]
    for node in nodes:
        assert all(sub.level > node.level for sub in node.sub_headings)
    assert not any(isinstance(b, HeadingBlock) for b in structure.orphan_blocks)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

@settings(max_examples=60)
@given(
    st.lists(_content_st, max_size=6),
    st.integers(min_value=3, max_value=25),
    st.integers(min_value=2, max_value=6),
)
def test_normalizer_limits_text_and_idempotence(blocks, text_limit, array_limit):
    first = normalize_blocks(blocks, text_limit=text_limit, array_limit=array_limit)

    for block in _walk(first.blocks):
        if isinstance(block, RichTextBlock):
            assert len(block.rich_text) <= array_limit
            assert all(len(span.content) <= text_limit for span in block.rich_text)

    def top_text(items):
        return "".join(b.plain_text for b in items)

    assert top_text(first.blocks) == top_text(blocks)

    second = normalize_blocks(first.blocks, text_limit=text_limit, array_limit=array_limit)
    assert second.blocks == first.blocks
    assert second.warnings == []


# ---------------------------------------------------------------------------
# Bisection
# ---------------------------------------------------------------------------

@settings(max_examples=50)
@given(st.integers(min_value=1, max_value=60).flatmap(
    lambda n: st.tuples(st.just(n), st.sets(st.integers(min_value=0, max_value=n - 1)))
))
def test_bisection_drops_exactly_the_bad_blocks(case):
    size, bad = case
    labels = [("BAD" if i in bad else "ok") + str(i) for i in range(size)]
    blocks = [ParagraphBlock(rich_text=[RichText(label)]) for label in labels]

    def reject(children):
        return any(
            c["paragraph"]["rich_text"][0]["text"]["content"].startswith("BAD") for c in children
        )

    fake = FakeBlockAPI(reject=reject)
    result = BatchPublisher(sync_api(fake), NotionpressConfig(token="t")).publish("p", blocks)

    assert result.added_count == size - len(bad)
    assert len(result.warnings) == len(bad)
    # Each payload is a node of the bisection tree, visited at most once.
    assert len(fake.calls) <= 2 * size - 1

    created = [
        c["paragraph"]["rich_text"][0]["text"]["content"]
        for _, children in fake.calls
        if not reject(children)
        for c in children
    ]
    assert created == [label for label in labels if not label.startswith("BAD")]
