"""Rewrite blocks so every payload field fits the Notion limits.

Notion rejects a block whose ``rich_text`` array holds more than 100
entries or whose spans exceed 2000 characters.  :func:`normalize_blocks`
fixes such blocks before they are sent, emitting one warning per rewrite:

1. An oversized code block is cut into several code blocks of the same
   language.
2. A block whose span array is too long is cut into several blocks of the
   same type and fields.
3. An oversized span is split in place into several spans carrying the
   same annotations and link.

Children of list items and toggles, and cells of table rows, are checked
the same way.  Running the normalizer on its own output changes nothing.
"""

from __future__ import annotations

import dataclasses

from notionpress.config import MAX_RICH_TEXT_ARRAY_LENGTH, MAX_RICH_TEXT_LENGTH
from notionpress.models import (
    Block,
    CodeBlock,
    ConversionWarning,
    NormalizationResult,
    ParentBlock,
    RichText,
    RichTextBlock,
    TableBlock,
)
from notionpress.utils.chunk import chunk_children
from notionpress.utils.text_split import split_string


def normalize_blocks(
    blocks: list[Block],
    *,
    text_limit: int = MAX_RICH_TEXT_LENGTH,
    array_limit: int = MAX_RICH_TEXT_ARRAY_LENGTH,
) -> NormalizationResult:
    """Return *blocks* rewritten to satisfy the per-field limits.

    Parameters
    ----------
    blocks:
        Blocks in publish order.
    text_limit:
        Maximum characters per rich-text span.
    array_limit:
        Maximum spans per rich-text array.

    Returns
    -------
    NormalizationResult
        The compliant blocks (order preserved) and one
        :class:`ConversionWarning` per block that had to be rewritten.
    """
    result = NormalizationResult()
    for block in blocks:
        result.blocks.extend(_normalize_block(block, text_limit, array_limit, result.warnings))
    return result


def split_spans(spans: list[RichText], limit: int) -> list[RichText]:
    """Split any span longer than *limit*, keeping annotations and link."""
    output: list[RichText] = []
    for span in spans:
        if len(span.content) <= limit:
            output.append(span)
            continue
        output.extend(span.with_content(piece) for piece in split_string(span.content, limit))
    return output


def _normalize_block(
    block: Block,
    text_limit: int,
    array_limit: int,
    warnings: list[ConversionWarning],
) -> list[Block]:
    if isinstance(block, ParentBlock) and block.children:
        nested = normalize_blocks(block.children, text_limit=text_limit, array_limit=array_limit)
        warnings.extend(nested.warnings)
        if nested.blocks != block.children:
            block = dataclasses.replace(block, children=nested.blocks)

    if isinstance(block, CodeBlock) and len(block.code_text) > text_limit:
        return _split_code_block(block, text_limit, warnings)

    if isinstance(block, RichTextBlock):
        return _split_rich_text_block(block, text_limit, array_limit, warnings)

    if isinstance(block, TableBlock):
        return [_split_table_cells(block, text_limit, warnings)]

    return [block]


def _split_code_block(
    block: CodeBlock,
    text_limit: int,
    warnings: list[ConversionWarning],
) -> list[Block]:
    content = block.code_text
    first = block.rich_text[0]
    pieces = split_string(content, text_limit)
    warnings.append(ConversionWarning(
        code="CODE_BLOCK_SPLIT",
        message=f"Split code block with {len(content)} characters into {len(pieces)} blocks",
        context={"length": len(content), "blocks": len(pieces), "language": block.language},
    ))
    return [dataclasses.replace(block, rich_text=[first.with_content(piece)]) for piece in pieces]


def _split_rich_text_block(
    block: RichTextBlock,
    text_limit: int,
    array_limit: int,
    warnings: list[ConversionWarning],
) -> list[Block]:
    block_type = block.block_type.value
    spans = split_spans(block.rich_text, text_limit)

    if len(spans) > array_limit:
        groups = chunk_children(spans, array_limit)
        warnings.append(ConversionWarning(
            code="RICH_TEXT_ARRAY_SPLIT",
            message=(
                f"Split {block_type} block with {len(spans)} rich_text elements "
                f"into {len(groups)} blocks"
            ),
            context={"block_type": block_type, "elements": len(spans), "blocks": len(groups)},
        ))
        pieces: list[Block] = []
        for index, group in enumerate(groups):
            piece = dataclasses.replace(block, rich_text=group)
            # Nested content follows the last piece of text.
            if isinstance(piece, ParentBlock) and index < len(groups) - 1:
                piece = dataclasses.replace(piece, children=[])
            pieces.append(piece)
        return pieces

    if len(spans) != len(block.rich_text):
        warnings.append(ConversionWarning(
            code="TEXT_SPLIT",
            message=f"Split long text content in {block_type} block",
            context={"block_type": block_type, "elements": len(spans)},
        ))
        return [dataclasses.replace(block, rich_text=spans)]

    return [block]


def _split_table_cells(
    block: TableBlock,
    text_limit: int,
    warnings: list[ConversionWarning],
) -> TableBlock:
    rows = []
    changed = False
    for row in block.rows:
        cells = [split_spans(cell, text_limit) for cell in row.cells]
        if cells != row.cells:
            changed = True
            row = dataclasses.replace(row, cells=cells)
        rows.append(row)

    if not changed:
        return block
    warnings.append(ConversionWarning(
        code="TEXT_SPLIT",
        message="Split long text content in table block",
        context={"block_type": "table"},
    ))
    return dataclasses.replace(block, rows=rows)
