"""Convert a canonical ``table`` node to a Notion table block.

Each cell becomes a single plain span holding the cell's flattened text;
inline formatting and links inside cells are not carried over.  The table
width is taken from the first row, and shorter rows are padded with empty
cells because Notion rejects rows whose cell count differs from
``table_width``.

The parser only recognises a pipe table when every body row has exactly as
many cells as the delimiter row, so :func:`align_table_rows` first pads or
trims body rows in the markdown source.
"""

from __future__ import annotations

import re

from notionpress.converter.ast_normalizer import to_plain_text
from notionpress.converter.math import MathPlaceholderMap, restore_math
from notionpress.models import RichText, TableBlock, TableRowBlock


def build_table(node: dict, placeholders: MathPlaceholderMap | None = None) -> TableBlock:
    """Build a :class:`TableBlock` from a canonical table node.

    Math placeholders hidden before parsing are restored in each cell.
    """
    placeholders = placeholders or {}
    rows = node.get("children") or []
    table_width = len(rows[0].get("children") or []) if rows else 1
    table_width = max(table_width, 1)

    row_blocks: list[TableRowBlock] = []
    for row in rows:
        cells = [_cell_spans(cell, placeholders) for cell in row.get("children") or []]
        if not cells:
            continue
        cells = cells[:table_width]
        while len(cells) < table_width:
            cells.append([])
        row_blocks.append(TableRowBlock(cells=cells))

    return TableBlock(
        table_width=table_width,
        # GFM tables always carry a header row.
        has_column_header=bool(rows),
        has_row_header=False,
        rows=row_blocks,
    )


def _cell_spans(cell: dict, placeholders: MathPlaceholderMap) -> list[RichText]:
    text = restore_math(to_plain_text(cell), placeholders).strip()
    return [RichText(text)] if text else []


_DELIMITER_ROW_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?\s*$")
_CELL_SPLIT_RE = re.compile(r"(?<!\\)\|")


def _split_row(line: str) -> list[str]:
    inner = line.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    return [cell.strip() for cell in _CELL_SPLIT_RE.split(inner)]


def _join_row(cells: list[str], piped: bool) -> str:
    body = " | ".join(cells)
    return f"| {body} |" if piped else body


def align_table_rows(markdown: str) -> str:
    """Pad or trim pipe-table body rows to the width of their header.

    Rows with missing cells get empty ones and surplus cells are dropped,
    as GFM renders them.  Rows that already fit are left as written.

    Examples
    --------
    >>> align_table_rows("| a | b |\\n|---|---|\\n| 1 |")
    '| a | b |\\n|---|---|\\n| 1 |  |'
    >>> align_table_rows("| a |\\n|---|\\n| 1 | 2 |")
    '| a |\\n|---|\\n| 1 |'
    """
    lines = markdown.split("\n")
    i = 0
    while i + 1 < len(lines):
        header, delimiter = lines[i], lines[i + 1]
        if "|" not in header or not _DELIMITER_ROW_RE.match(delimiter):
            i += 1
            continue
        width = len(_split_row(delimiter))
        if len(_split_row(header)) != width:
            i += 1
            continue

        piped = header.strip().startswith("|")
        j = i + 2
        while j < len(lines) and lines[j].strip() and "|" in lines[j]:
            row = lines[j].strip()
            cells = _split_row(row)
            if len(cells) != width or (piped and not (row.startswith("|") and row.endswith("|"))):
                lines[j] = _join_row((cells + [""] * width)[:width], piped)
            j += 1
        i = j
    return "\n".join(lines)
