"""Markdown -> Notion block conversion pipeline.

Public API:

- :class:`MarkdownToNotionConverter` -- Markdown -> typed blocks.
- :class:`ASTNormalizer` -- parse Markdown to canonical syntax nodes.
- :func:`build_blocks` / :func:`transform` -- syntax nodes -> blocks.
- :func:`inline_to_rich_text` -- inline nodes -> rich-text spans.
- :func:`hide_math` / :func:`restore_math` -- math placeholder codec.
- :func:`balance_fences` -- close unterminated code fences.
"""

from notionpress.converter.ast_normalizer import ASTNormalizer
from notionpress.converter.block_builder import build_blocks, transform
from notionpress.converter.fences import balance_fences
from notionpress.converter.math import hide_math, restore_math
from notionpress.converter.md_to_notion import MarkdownToNotionConverter
from notionpress.converter.rich_text import inline_to_rich_text

__all__ = [
    "ASTNormalizer",
    "MarkdownToNotionConverter",
    "balance_fences",
    "build_blocks",
    "hide_math",
    "inline_to_rich_text",
    "restore_math",
    "transform",
]
