"""Asynchronous notionpress client.

:class:`AsyncNotionpressClient` mirrors :class:`NotionpressClient`; every
network-bound method is a coroutine.  Requests for one document are still
issued one at a time, in order.

Usage::

    import asyncio
    from notionpress import AsyncNotionpressClient

    async def main():
        async with AsyncNotionpressClient(token="secret_xxx") as client:
            result = await client.append_markdown(page_id, "# Hello")
            print(result.added_count)

    asyncio.run(main())
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from notionpress.client import (
    finish_publish,
    item_failure,
    item_success,
    parse_item,
    resolve_options,
    validate_markdown,
)
from notionpress.config import ConversionOptions, NotionpressConfig
from notionpress.converter.md_to_notion import MarkdownToNotionConverter
from notionpress.errors import NotionpressError
from notionpress.models import PublishResult
from notionpress.notion_api.blocks import AsyncBlockAPI
from notionpress.notion_api.transport import AsyncNotionTransport
from notionpress.observability import get_logger, resolve_metrics
from notionpress.publish.batch import AsyncBatchPublisher
from notionpress.publish.outline import AsyncOutlinePublisher
from notionpress.utils.ids import validate_page_id

log = get_logger("notionpress.client")


class AsyncNotionpressClient:
    """Asynchronous markdown-to-Notion publishing client.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**
    **kwargs:
        Forwarded to :class:`NotionpressConfig`.
    """

    def __init__(self, token: str, **kwargs: Any) -> None:
        self._config = NotionpressConfig(token=token, **kwargs)
        self._metrics = resolve_metrics(self._config.metrics)
        self._transport = AsyncNotionTransport(self._config)
        self._blocks = AsyncBlockAPI(self._transport)
        self._converter = MarkdownToNotionConverter(self._config)
        self._batch = AsyncBatchPublisher(self._blocks, self._config)
        self._outline = AsyncOutlinePublisher(self._blocks, self._config)

    @property
    def config(self) -> NotionpressConfig:
        return self._config

    async def append_markdown(
        self,
        page_id: str,
        markdown: str,
        options: ConversionOptions | Mapping[str, Any] | None = None,
    ) -> PublishResult:
        """Convert *markdown* and append it to *page_id* (async).

        See :meth:`NotionpressClient.append_markdown`.
        """
        page_id = validate_page_id(page_id)
        markdown = validate_markdown(markdown)
        resolved = resolve_options(options)

        conversion = self._converter.convert(markdown, resolved)
        if conversion.warnings:
            self._metrics.increment(
                "notionpress.conversion_warnings_total", len(conversion.warnings)
            )

        if resolved.toggle_headings:
            published = await self._outline.publish_outline(page_id, conversion.blocks)
        else:
            published = await self._batch.publish(page_id, conversion.blocks)
        return finish_publish(page_id, conversion, published, resolved)

    async def process_items(
        self,
        items: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> list[dict[str, Any]]:
        """Publish host items one after another (async).

        See :meth:`NotionpressClient.process_items`.
        """
        output: list[dict[str, Any]] = []
        for index, item in enumerate(items):
            try:
                page_id, markdown, options = parse_item(item)
                result = await self.append_markdown(page_id, markdown, options)
                output.append(item_success(page_id, result))
            except Exception as exc:
                if not continue_on_fail:
                    raise
                failure = item_failure(exc)
                log.warning(
                    "item failed",
                    exc_info=not isinstance(exc, NotionpressError),
                    extra={"extra_fields": {"op": "process_items", "item": index, "error": failure["error"]}},
                )
                output.append(failure)
        return output

    async def close(self) -> None:
        """Release the HTTP connection pool."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncNotionpressClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
