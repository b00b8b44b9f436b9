"""notionpress -- publish Markdown documents to Notion pages.

Public re-exports
-----------------

* **Clients:** :class:`NotionpressClient`, :class:`AsyncNotionpressClient`
* **Configuration:** :class:`NotionpressConfig`, :class:`ConversionOptions`
* **Errors:** Every :class:`NotionpressError` subclass and :class:`ErrorCode`
* **Models:** Block types, rich text and result dataclasses

Usage::

    from notionpress import NotionpressClient

    client = NotionpressClient(token="secret_xxx")
    result = client.append_markdown(
        "59833787-2cf9-4fdf-8782-e53db20768a5",
        "# Hello\\n\\nWorld",
        {"toggleHeadings": True},
    )
"""

from __future__ import annotations

from notionpress.async_client import AsyncNotionpressClient

# ── Clients ────────────────────────────────────────────────────────────
from notionpress.client import NotionpressClient

# ── Configuration ───────────────────────────────────────────────────────
from notionpress.config import ConversionOptions, NotionpressConfig

# ── Conversion ──────────────────────────────────────────────────────────
from notionpress.converter import MarkdownToNotionConverter

# ── Errors ──────────────────────────────────────────────────────────────
from notionpress.errors import (
    ErrorCode,
    NotionpressAPIError,
    NotionpressAuthError,
    NotionpressConversionError,
    NotionpressError,
    NotionpressNetworkError,
    NotionpressNotFoundError,
    NotionpressPermissionError,
    NotionpressRateLimitError,
    NotionpressRequestError,
    NotionpressRetryExhaustedError,
    NotionpressValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionpress.models import (
    Annotations,
    Block,
    BlockType,
    ConversionResult,
    ConversionWarning,
    HeadingNode,
    NormalizationResult,
    PublishResult,
    RichText,
    ToggleStructure,
)

# ── Publishing ──────────────────────────────────────────────────────────
from notionpress.publish import (
    AsyncBatchPublisher,
    AsyncOutlinePublisher,
    BatchPublisher,
    OutlinePublisher,
    normalize_blocks,
    parse_notion_error,
)
from notionpress.structure import build_toggle_structure

__all__ = [
    # Clients
    "NotionpressClient",
    "AsyncNotionpressClient",
    # Configuration
    "NotionpressConfig",
    "ConversionOptions",
    # Pipeline
    "MarkdownToNotionConverter",
    "build_toggle_structure",
    "normalize_blocks",
    "BatchPublisher",
    "AsyncBatchPublisher",
    "OutlinePublisher",
    "AsyncOutlinePublisher",
    "parse_notion_error",
    # Errors
    "NotionpressError",
    "ErrorCode",
    "NotionpressValidationError",
    "NotionpressAPIError",
    "NotionpressRequestError",
    "NotionpressAuthError",
    "NotionpressPermissionError",
    "NotionpressNotFoundError",
    "NotionpressRateLimitError",
    "NotionpressRetryExhaustedError",
    "NotionpressNetworkError",
    "NotionpressConversionError",
    # Models
    "Annotations",
    "Block",
    "BlockType",
    "RichText",
    "ConversionResult",
    "ConversionWarning",
    "NormalizationResult",
    "PublishResult",
    "HeadingNode",
    "ToggleStructure",
]
