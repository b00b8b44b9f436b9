"""notionpress.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.rate_limit` -- token-bucket pacing (sync and async).
* :mod:`.retries` -- retry decision and backoff.
* :mod:`.transport` -- HTTP transport with auth, retries and pacing.
* :mod:`.blocks` -- the block-children append endpoint.
"""

from __future__ import annotations

from .blocks import AsyncBlockAPI, BlockAPI, created_block_ids
from .rate_limit import AsyncTokenBucket, TokenBucket
from .retries import compute_backoff, should_retry
from .transport import AsyncNotionTransport, NotionTransport

__all__ = [
    "AsyncBlockAPI",
    "AsyncNotionTransport",
    "AsyncTokenBucket",
    "BlockAPI",
    "NotionTransport",
    "TokenBucket",
    "compute_backoff",
    "created_block_ids",
    "should_retry",
]
