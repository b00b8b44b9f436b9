"""Collapsible-outline publishing.

In outline mode each heading becomes a toggleable heading that owns the
content under it.  Notion needs the heading to exist before anything can be
appended inside it, so :class:`OutlinePublisher` walks the heading forest
depth-first, one request at a time:

1. Blocks before the first heading are appended to the page.
2. Each heading is appended alone; the id of the created block becomes the
   parent of the heading's own content and then of its sub-headings.
3. When a heading is not created (dropped by bisection, or the response
   lists no id) its content and sub-headings go to the enclosing parent
   instead and a ``HEADING_NOT_CREATED`` warning is recorded.

This costs one request per heading plus one per content chunk, which is
much slower than flat publishing for documents with many headings.
"""

from __future__ import annotations

from typing import Any

from notionpress.config import NotionpressConfig
from notionpress.models import Block, ConversionWarning, HeadingNode, PublishResult
from notionpress.notion_api.blocks import created_block_ids
from notionpress.observability import get_logger
from notionpress.publish.batch import AsyncBatchPublisher, BatchPublisher
from notionpress.structure.heading_tree import build_toggle_structure

log = get_logger("notionpress.publish")


def _content_parent(
    heading: PublishResult,
    fallback_id: str,
    node: HeadingNode,
    total: PublishResult,
) -> str:
    """Return the id that *node*'s content should be appended to."""
    ids = created_block_ids(heading.responses[-1]) if heading.responses else []
    if ids:
        # A split heading keeps its content under the last piece.
        return ids[-1]
    total.warnings.append(ConversionWarning(
        code="HEADING_NOT_CREATED",
        message=(
            f"Heading '{node.heading.plain_text}' was not created; "
            "its content was appended to the enclosing parent"
        ),
        context={"level": node.level, "parent_id": fallback_id},
    ))
    return fallback_id


def _log_outline(parent_id: str, blocks: int, result: PublishResult) -> None:
    log.info(
        "outline published",
        extra={
            "extra_fields": {
                "op": "publish_outline",
                "parent_id": parent_id,
                "blocks": blocks,
                "requests": result.chunk_count,
                "added": result.added_count,
            }
        },
    )


class OutlinePublisher:
    """Publish blocks as a nested heading outline.

    Parameters
    ----------
    block_api:
        Sync block API (see :class:`~notionpress.publish.batch.BatchPublisher`).
    config:
        Client configuration.
    """

    def __init__(self, block_api: Any, config: NotionpressConfig | None = None) -> None:
        self._batch = BatchPublisher(block_api, config)

    def publish_outline(self, parent_id: str, blocks: list[Block]) -> PublishResult:
        """Append *blocks* under *parent_id*, nesting content under headings.

        Returns
        -------
        PublishResult
            Totals over every request issued; ``chunk_count`` is the number
            of top-level requests.
        """
        structure = build_toggle_structure(blocks)
        total = PublishResult()

        if structure.orphan_blocks:
            total.merge(self._batch.publish(parent_id, structure.orphan_blocks))

        stack = [(node, parent_id) for node in reversed(structure.root_nodes)]
        while stack:
            node, target = stack.pop()
            heading = self._batch.publish(target, [node.heading])
            total.merge(heading)
            content_parent = _content_parent(heading, target, node, total)
            if node.children:
                total.merge(self._batch.publish(content_parent, node.children))
            stack.extend((sub, content_parent) for sub in reversed(node.sub_headings))

        _log_outline(parent_id, len(blocks), total)
        return total


class AsyncOutlinePublisher:
    """Asynchronous twin of :class:`OutlinePublisher`."""

    def __init__(self, block_api: Any, config: NotionpressConfig | None = None) -> None:
        self._batch = AsyncBatchPublisher(block_api, config)

    async def publish_outline(self, parent_id: str, blocks: list[Block]) -> PublishResult:
        """See :meth:`OutlinePublisher.publish_outline`."""
        structure = build_toggle_structure(blocks)
        total = PublishResult()

        if structure.orphan_blocks:
            total.merge(await self._batch.publish(parent_id, structure.orphan_blocks))

        stack = [(node, parent_id) for node in reversed(structure.root_nodes)]
        while stack:
            node, target = stack.pop()
            heading = await self._batch.publish(target, [node.heading])
            total.merge(heading)
            content_parent = _content_parent(heading, target, node, total)
            if node.children:
                total.merge(await self._batch.publish(content_parent, node.children))
            stack.extend((sub, content_parent) for sub in reversed(node.sub_headings))

        _log_outline(parent_id, len(blocks), total)
        return total
