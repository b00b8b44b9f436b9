"""Publishing of converted blocks to Notion.

- :func:`normalize_blocks` -- fit blocks to the per-field limits.
- :class:`BatchPublisher` / :class:`AsyncBatchPublisher` -- chunked
  appends with bisection recovery.
- :class:`OutlinePublisher` / :class:`AsyncOutlinePublisher` -- nested
  heading outlines.
- :func:`parse_notion_error` -- readable Notion error messages.
"""

from notionpress.publish.batch import AsyncBatchPublisher, BatchPublisher
from notionpress.publish.error_messages import parse_notion_error
from notionpress.publish.normalizer import normalize_blocks, split_spans
from notionpress.publish.outline import AsyncOutlinePublisher, OutlinePublisher

__all__ = [
    "AsyncBatchPublisher",
    "AsyncOutlinePublisher",
    "BatchPublisher",
    "OutlinePublisher",
    "normalize_blocks",
    "parse_notion_error",
    "split_spans",
]
