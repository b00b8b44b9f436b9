"""Chunked publishing with bisection recovery.

:class:`BatchPublisher` appends a list of blocks to one parent:

1. The blocks are normalized so every field fits the API limits.
2. They are sent in chunks of at most ``max_blocks_per_request``, one
   request at a time and in order.
3. A chunk rejected with a structured Notion error (returned in the body or
   carried by the raised :class:`NotionpressError`) is bisected: it is split
   at ``len // 2`` and each half is sent again, first half first.  A half
   that fails is split again.  A single block that still fails is dropped
   with a ``Skipping problematic block`` warning and publishing continues.

Failures without a structured body (network errors, unexpected response
shapes) and access failures (``401``/``403``/``404``) abort the publish.

Bisection keeps an explicit work stack, so a chunk of ``N`` blocks with one
bad block costs at most ``2 * ceil(log2(N))`` extra requests and no
recursion.  :class:`AsyncBatchPublisher` is the ``await``-based twin.
"""

from __future__ import annotations

from typing import Any

from notionpress.config import NotionpressConfig
from notionpress.errors import (
    NotionpressAuthError,
    NotionpressConversionError,
    NotionpressError,
    NotionpressNotFoundError,
    NotionpressPermissionError,
)
from notionpress.models import Block, ConversionWarning, PublishResult
from notionpress.observability import get_logger, resolve_metrics
from notionpress.publish.error_messages import parse_notion_error
from notionpress.publish.normalizer import normalize_blocks
from notionpress.utils.chunk import chunk_children

log = get_logger("notionpress.publish")

# Failures that concern the parent or the credentials, not a block.
_NON_BISECTABLE = (NotionpressAuthError, NotionpressPermissionError, NotionpressNotFoundError)

# Work items: ("send", payload) issues a request, ("split", payload, body)
# bisects a payload known to fail with *body*.
_WorkItem = tuple


class _BatchRun:
    """Book-keeping for one ``publish`` call, shared by both publishers."""

    def __init__(self, parent_id: str, config: NotionpressConfig) -> None:
        self.parent_id = parent_id
        self.config = config
        self.metrics = resolve_metrics(config.metrics)
        self.result = PublishResult()

    def prepare(self, blocks: list[Block]) -> list[list[dict[str, Any]]]:
        """Normalize *blocks* and cut the serialized payload into chunks."""
        normalized = normalize_blocks(
            blocks,
            text_limit=self.config.rich_text_limit,
            array_limit=self.config.rich_text_array_limit,
        )
        if normalized.warnings:
            self.result.warnings.extend(normalized.warnings)
            self.metrics.increment(
                "notionpress.conversion_warnings_total", len(normalized.warnings)
            )
        payload = [block.to_notion() for block in normalized.blocks]
        return chunk_children(payload, self.config.max_blocks_per_request)

    def error_body(self, response: Any) -> dict[str, Any] | None:
        """Return the in-band error body of *response*, or ``None`` on success.

        Raises
        ------
        NotionpressConversionError
            If *response* is not a JSON object.
        """
        if not isinstance(response, dict):
            raise NotionpressConversionError(
                f"Unexpected Notion API response: {response!r}",
                context={"parent_id": self.parent_id, "response": response},
            )
        if response.get("object") == "error":
            return response
        return None

    def raised_body(self, exc: NotionpressError) -> dict[str, Any] | None:
        """Return the structured body of a raised error if it can be bisected."""
        if isinstance(exc, _NON_BISECTABLE):
            return None
        return exc.structured_body

    def results_of(self, response: dict[str, Any]) -> list[Any]:
        results = response.get("results")
        return results if isinstance(results, list) else []

    def record_chunk(self, index: int, response: dict[str, Any], added: int) -> None:
        self.result.chunk_count += 1
        self.result.added_count += added
        self.result.responses.append(response)
        self.metrics.increment("notionpress.blocks_created_total", added)
        log.debug(
            "chunk published",
            extra={
                "extra_fields": {
                    "op": "publish_chunk",
                    "parent_id": self.parent_id,
                    "chunk": index + 1,
                    "added": added,
                }
            },
        )

    def drop(self, payload: list[dict[str, Any]], body: dict[str, Any]) -> None:
        reason = parse_notion_error(body)
        self.result.warnings.append(ConversionWarning(
            code="BLOCK_SKIPPED",
            message=f"Skipping problematic block: {reason}",
            context={
                "parent_id": self.parent_id,
                "block_type": payload[0].get("type"),
                "notion_code": body.get("code"),
            },
        ))
        self.metrics.increment("notionpress.blocks_dropped_total")
        log.warning(
            "block dropped after bisection",
            extra={
                "extra_fields": {
                    "op": "bisect",
                    "parent_id": self.parent_id,
                    "block_type": payload[0].get("type"),
                    "reason": reason,
                }
            },
        )

    def split(
        self,
        payload: list[dict[str, Any]],
        body: dict[str, Any],
        stack: list[_WorkItem],
    ) -> None:
        """Resolve a failing *payload*: drop a single block or push both halves."""
        if len(payload) == 1:
            self.drop(payload, body)
            return
        mid = len(payload) // 2
        log.debug(
            "bisecting failed chunk",
            extra={
                "extra_fields": {
                    "op": "bisect",
                    "parent_id": self.parent_id,
                    "blocks": len(payload),
                    "reason": parse_notion_error(body),
                }
            },
        )
        # The first half is popped first.
        stack.append(("send", payload[mid:]))
        stack.append(("send", payload[:mid]))


class BatchPublisher:
    """Publish blocks to a parent in limit-respecting chunks.

    Parameters
    ----------
    block_api:
        An object with ``append_children(block_id, children)``, normally
        :class:`~notionpress.notion_api.blocks.BlockAPI`.
    config:
        Supplies the request and field limits and the metrics hook.
    """

    def __init__(self, block_api: Any, config: NotionpressConfig | None = None) -> None:
        self._block_api = block_api
        self._config = config or NotionpressConfig()

    def publish(self, parent_id: str, blocks: list[Block]) -> PublishResult:
        """Append *blocks* under *parent_id*.

        Returns
        -------
        PublishResult
            ``added_count`` is the number of blocks the API created,
            ``chunk_count`` the number of top-level chunk requests and
            ``responses`` one raw response per chunk (a synthesized
            ``{"object": "list", "results": [...]}`` for bisected chunks).
        """
        run = _BatchRun(parent_id, self._config)
        if not blocks:
            return run.result

        for index, chunk in enumerate(run.prepare(blocks)):
            response, body = self._send(run, chunk)
            if body is None:
                run.record_chunk(index, response, len(run.results_of(response)))
                continue
            results = self._bisect(run, chunk, body)
            run.record_chunk(index, {"object": "list", "results": results}, len(results))

        return run.result

    def _send(
        self,
        run: _BatchRun,
        payload: list[dict[str, Any]],
    ) -> tuple[Any, dict[str, Any] | None]:
        """Send one payload; return ``(response, error_body)``."""
        try:
            response = self._block_api.append_children(run.parent_id, payload)
        except NotionpressError as exc:
            body = run.raised_body(exc)
            if body is None:
                raise
            return None, body
        return response, run.error_body(response)

    def _bisect(
        self,
        run: _BatchRun,
        payload: list[dict[str, Any]],
        body: dict[str, Any],
    ) -> list[Any]:
        results: list[Any] = []
        stack: list[_WorkItem] = [("split", payload, body)]
        while stack:
            item = stack.pop()
            if item[0] == "split":
                run.split(item[1], item[2], stack)
                continue
            response, failure = self._send(run, item[1])
            if failure is None:
                results.extend(run.results_of(response))
            else:
                stack.append(("split", item[1], failure))
        return results


class AsyncBatchPublisher:
    """Asynchronous twin of :class:`BatchPublisher`.

    *block_api* must provide ``async append_children(block_id, children)``.
    """

    def __init__(self, block_api: Any, config: NotionpressConfig | None = None) -> None:
        self._block_api = block_api
        self._config = config or NotionpressConfig()

    async def publish(self, parent_id: str, blocks: list[Block]) -> PublishResult:
        """Append *blocks* under *parent_id* (async).

        See :meth:`BatchPublisher.publish`.
        """
        run = _BatchRun(parent_id, self._config)
        if not blocks:
            return run.result

        for index, chunk in enumerate(run.prepare(blocks)):
            response, body = await self._send(run, chunk)
            if body is None:
                run.record_chunk(index, response, len(run.results_of(response)))
                continue
            results = await self._bisect(run, chunk, body)
            run.record_chunk(index, {"object": "list", "results": results}, len(results))

        return run.result

    async def _send(
        self,
        run: _BatchRun,
        payload: list[dict[str, Any]],
    ) -> tuple[Any, dict[str, Any] | None]:
        try:
            response = await self._block_api.append_children(run.parent_id, payload)
        except NotionpressError as exc:
            body = run.raised_body(exc)
            if body is None:
                raise
            return None, body
        return response, run.error_body(response)

    async def _bisect(
        self,
        run: _BatchRun,
        payload: list[dict[str, Any]],
        body: dict[str, Any],
    ) -> list[Any]:
        results: list[Any] = []
        stack: list[_WorkItem] = [("split", payload, body)]
        while stack:
            item = stack.pop()
            if item[0] == "split":
                run.split(item[1], item[2], stack)
                continue
            response, failure = await self._send(run, item[1])
            if failure is None:
                results.extend(run.results_of(response))
            else:
                stack.append(("split", item[1], failure))
        return results
