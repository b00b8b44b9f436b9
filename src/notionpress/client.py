"""Synchronous notionpress client.

:class:`NotionpressClient` is the entry point for hosts: it validates the
target page and the markdown, converts the markdown to blocks and publishes
them, either flat (chunked appends) or as a collapsible outline.

Usage::

    from notionpress import NotionpressClient

    with NotionpressClient(token="secret_xxx") as client:
        result = client.append_markdown(
            "59833787-2cf9-4fdf-8782-e53db20768a5",
            "# Notes\\n\\nEuler: $e^{i\\pi} + 1 = 0$",
        )
        print(result.added_count, result.warning_messages)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from notionpress.config import ConversionOptions, NotionpressConfig
from notionpress.converter.md_to_notion import MarkdownToNotionConverter
from notionpress.errors import NotionpressError, NotionpressValidationError
from notionpress.models import ConversionResult, PublishResult
from notionpress.notion_api.blocks import BlockAPI
from notionpress.notion_api.transport import NotionTransport
from notionpress.observability import get_logger, resolve_metrics
from notionpress.publish.batch import BatchPublisher
from notionpress.publish.outline import OutlinePublisher
from notionpress.utils.ids import validate_page_id

log = get_logger("notionpress.client")

APPEND_OPERATION = "appendToPage"


def validate_markdown(markdown: object) -> str:
    """Return *markdown* if it is a non-blank string, else raise."""
    if not isinstance(markdown, str) or not markdown.strip():
        raise NotionpressValidationError(
            "Markdown content is required and cannot be empty.",
            context={"field": "markdown"},
        )
    return markdown


def resolve_options(options: ConversionOptions | Mapping[str, Any] | None) -> ConversionOptions:
    """Accept options as a dataclass or as a host mapping with camelCase keys."""
    if isinstance(options, ConversionOptions):
        return options
    try:
        return ConversionOptions.from_mapping(options)
    except ValueError as exc:
        raise NotionpressValidationError(
            f"Invalid options: {exc}", context={"options": dict(options or {})}, cause=exc
        ) from exc


def parse_item(item: Mapping[str, Any]) -> tuple[str, str, ConversionOptions]:
    """Validate one host item and return ``(page_id, markdown, options)``.

    Raises
    ------
    NotionpressValidationError
        For an unsupported ``operation``, a malformed page id or blank
        markdown.
    """
    operation = item.get("operation", APPEND_OPERATION)
    if operation != APPEND_OPERATION:
        raise NotionpressValidationError(
            f"Unsupported operation: {operation}",
            context={"field": "operation", "value": operation},
        )
    page_id = validate_page_id(item.get("pageId"))
    markdown = validate_markdown(item.get("markdownContent"))
    return page_id, markdown, resolve_options(item.get("options"))


def item_success(page_id: str, result: PublishResult) -> dict[str, Any]:
    """Render a publish result as a host output item."""
    messages = result.warning_messages
    return {
        "success": True,
        "pageId": page_id,
        "addedCount": result.added_count,
        "chunkCount": result.chunk_count,
        "totalBlocksProduced": result.total_blocks,
        "warnings": messages or None,
        "rawResponses": result.responses,
    }


def item_failure(exc: Exception) -> dict[str, Any]:
    message = exc.message if isinstance(exc, NotionpressError) else str(exc)
    return {"success": False, "error": message or type(exc).__name__}


def finish_publish(
    page_id: str,
    conversion: ConversionResult,
    published: PublishResult,
    options: ConversionOptions,
) -> PublishResult:
    """Fold the conversion outcome into *published* and log the summary."""
    published.total_blocks = len(conversion.blocks)
    published.warnings[:0] = conversion.warnings
    log.info(
        "markdown appended",
        extra={
            "extra_fields": {
                "op": "append_markdown",
                "page_id": page_id,
                "mode": "outline" if options.toggle_headings else "flat",
                "blocks": published.total_blocks,
                "added": published.added_count,
                "requests": published.chunk_count,
                "warnings": len(published.warnings),
            }
        },
    )
    return published


class NotionpressClient:
    """Synchronous markdown-to-Notion publishing client.

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
        self._transport = NotionTransport(self._config)
        self._blocks = BlockAPI(self._transport)
        self._converter = MarkdownToNotionConverter(self._config)
        self._batch = BatchPublisher(self._blocks, self._config)
        self._outline = OutlinePublisher(self._blocks, self._config)

    @property
    def config(self) -> NotionpressConfig:
        return self._config

    def append_markdown(
        self,
        page_id: str,
        markdown: str,
        options: ConversionOptions | Mapping[str, Any] | None = None,
    ) -> PublishResult:
        """Convert *markdown* and append it to the page *page_id*.

        Parameters
        ----------
        page_id:
            Target page id, compact or dashed.
        markdown:
            Non-blank markdown text.
        options:
            :class:`ConversionOptions` or a host mapping
            (``preserveMath``, ``mathDelimiter``, ``supportLatex``,
            ``toggleHeadings``).

        Returns
        -------
        PublishResult

        Raises
        ------
        NotionpressValidationError
            If the page id or markdown is invalid.
        NotionpressError
            When publishing fails in a way bisection cannot recover.
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
            published = self._outline.publish_outline(page_id, conversion.blocks)
        else:
            published = self._batch.publish(page_id, conversion.blocks)
        return finish_publish(page_id, conversion, published, resolved)

    def process_items(
        self,
        items: Iterable[Mapping[str, Any]],
        continue_on_fail: bool = False,
    ) -> list[dict[str, Any]]:
        """Publish a batch of host items in order.

        Each item carries ``operation`` (``appendToPage``), ``pageId``,
        ``markdownContent`` and an optional ``options`` mapping.

        Parameters
        ----------
        items:
            Host items.
        continue_on_fail:
            Record a failing item as ``{"success": False, "error": ...}``
            and go on with the next one instead of raising.  Any exception
            is captured, not only :class:`NotionpressError`.

        Returns
        -------
        list[dict]
            One output dict per item, in input order.
        """
        output: list[dict[str, Any]] = []
        for index, item in enumerate(items):
            try:
                page_id, markdown, options = parse_item(item)
                output.append(item_success(page_id, self.append_markdown(page_id, markdown, options)))
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

    def close(self) -> None:
        """Release the HTTP connection pool."""
        self._transport.close()

    def __enter__(self) -> NotionpressClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
