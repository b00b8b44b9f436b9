"""Full Markdown-to-Notion conversion pipeline.

:class:`MarkdownToNotionConverter` orchestrates four stages:

1. **Hide math** -- formula spans are swapped for placeholder tokens.
2. **Balance fences** -- unterminated code fences are closed; outside code,
   ragged table rows are aligned and multi-paragraph ``<details>`` blocks
   are joined so the parser sees each as one unit.
3. **Parse** -- mistune parses the text and :class:`ASTNormalizer` maps
   its tokens to canonical node types.
4. **Build** -- :func:`build_blocks` turns each top-level node into typed
   blocks, restoring math spans as it goes.

The result is a :class:`ConversionResult` holding the blocks and any
non-fatal warnings.  Nothing here performs I/O.
"""

from __future__ import annotations

import json
import sys

from notionpress.config import ConversionOptions, NotionpressConfig
from notionpress.converter.ast_normalizer import ASTNormalizer
from notionpress.converter.block_builder import build_blocks, join_details_blocks
from notionpress.converter.fences import balance_fences, rewrite_outside_fences
from notionpress.converter.math import hide_math
from notionpress.models import ConversionResult
from notionpress.converter.tables import align_table_rows
from notionpress.observability import get_logger

log = get_logger("notionpress.converter")


def _fix_block_syntax(text: str) -> str:
    return align_table_rows(join_details_blocks(text))


class MarkdownToNotionConverter:
    """Convert Markdown text to typed Notion blocks.

    Parameters
    ----------
    config:
        Client configuration (only the debug switches are used here).

    Examples
    --------
    >>> converter = MarkdownToNotionConverter(NotionpressConfig())
    >>> result = converter.convert("# Hello\\n\\nWorld")
    >>> [block.block_type.value for block in result.blocks]
    ['heading_1', 'paragraph']
    """

    def __init__(self, config: NotionpressConfig | None = None) -> None:
        self._config = config or NotionpressConfig()
        self._normalizer = ASTNormalizer()

    def convert(
        self,
        markdown: str,
        options: ConversionOptions | None = None,
    ) -> ConversionResult:
        """Run the full pipeline on *markdown*.

        Parameters
        ----------
        markdown:
            Raw Markdown text to convert.
        options:
            Per-document options; defaults to :class:`ConversionOptions()`.

        Returns
        -------
        ConversionResult
        """
        options = options or ConversionOptions()

        text, placeholders = hide_math(
            markdown,
            delimiter=options.math_delimiter,
            enabled=options.preserve_math,
        )
        text = rewrite_outside_fences(balance_fences(text), _fix_block_syntax)
        nodes = self._normalizer.parse(text)

        if self._config.debug_dump_ast:
            print(
                "[notionpress] Normalized AST:",
                json.dumps(nodes, indent=2, ensure_ascii=False),
                file=sys.stderr,
            )

        blocks, warnings = build_blocks(nodes, placeholders, options)

        log.debug(
            "markdown converted",
            extra={
                "extra_fields": {
                    "op": "convert",
                    "nodes": len(nodes),
                    "blocks": len(blocks),
                    "math_spans": len(placeholders),
                    "warnings": len(warnings),
                }
            },
        )

        return ConversionResult(blocks=blocks, warnings=warnings)
