"""Configuration for notionpress.

:class:`NotionpressConfig` captures every client-level knob: credentials,
API limits, retry and pacing behaviour, and debug switches.  Instances are
passed to both :class:`NotionpressClient` and
:class:`AsyncNotionpressClient`.

:class:`ConversionOptions` holds the per-document options a host supplies
with each markdown item (math handling, LaTeX support, outline mode).
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# ---------------------------------------------------------------------------
# Notion API limits
# ---------------------------------------------------------------------------

MAX_BLOCKS_PER_REQUEST: int = 100
"""Children accepted by one ``PATCH /blocks/{id}/children`` call."""

MAX_RICH_TEXT_LENGTH: int = 2000
"""Characters allowed in a single ``rich_text[].text.content``."""

MAX_RICH_TEXT_ARRAY_LENGTH: int = 100
"""Entries allowed in one block's ``rich_text`` array."""


# ---------------------------------------------------------------------------
# Per-document options
# ---------------------------------------------------------------------------

@dataclass
class ConversionOptions:
    """Options controlling how one markdown document is converted.

    Parameters
    ----------
    preserve_math:
        Hide ``delimiter``-bounded formula spans from the markdown parser
        and restore them verbatim in the produced rich text.
    math_delimiter:
        Formula delimiter character.  Defaults to ``$``.
    support_latex:
        Promote paragraphs that consist of a single formula to ``equation``
        blocks.
    toggle_headings:
        Publish in collapsible-outline mode: headings become toggleable and
        own the content that follows them.
    """

    preserve_math: bool = True

    math_delimiter: str = "$"

    support_latex: bool = False

    toggle_headings: bool = False

    def __post_init__(self) -> None:
        if self.preserve_math and not self.math_delimiter:
            raise ValueError("math_delimiter must be a non-empty string when preserve_math is on")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> ConversionOptions:
        """Build options from a host options bag.

        Accepts the camelCase keys ``preserveMath``, ``mathDelimiter``,
        ``supportLatex`` and ``toggleHeadings``; unknown keys are ignored.
        """
        if not options:
            return cls()
        delimiter = options.get("mathDelimiter")
        return cls(
            preserve_math=bool(options.get("preserveMath", True)),
            math_delimiter="$" if delimiter is None else str(delimiter),
            support_latex=bool(options.get("supportLatex", False)),
            toggle_headings=bool(options.get("toggleHeadings", False)),
        )


# ---------------------------------------------------------------------------
# Client configuration
# ---------------------------------------------------------------------------

@dataclass
class NotionpressConfig:
    """Complete configuration for a notionpress client.

    Every parameter has a sensible default so that the only *required*
    value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  **Required.**  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    max_blocks_per_request:
        Chunk size used by the batch publisher.
    rich_text_limit:
        Maximum characters per rich-text span enforced by the normalizer.
    rich_text_array_limit:
        Maximum spans per rich-text array enforced by the normalizer.
    retry_max_attempts:
        Maximum number of attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Add random jitter to backoff intervals.
    rate_limit_rps:
        Target requests per second for client-side pacing (token bucket).
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notionpress.observability.MetricsHook` backend.
    debug_dump_ast:
        Write the normalised syntax tree to *stderr* on each conversion.
    debug_dump_payload:
        Write the (redacted) request/response payloads to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Limits ──────────────────────────────────────────────────────────
    max_blocks_per_request: int = MAX_BLOCKS_PER_REQUEST

    rich_text_limit: int = MAX_RICH_TEXT_LENGTH

    rich_text_array_limit: int = MAX_RICH_TEXT_ARRAY_LENGTH

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_ast: bool = False

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if not 1 <= self.max_blocks_per_request <= MAX_BLOCKS_PER_REQUEST:
            raise ValueError(
                f"max_blocks_per_request must be in 1..{MAX_BLOCKS_PER_REQUEST}, "
                f"got {self.max_blocks_per_request}"
            )
        if not 1 <= self.rich_text_limit <= MAX_RICH_TEXT_LENGTH:
            raise ValueError(
                f"rich_text_limit must be in 1..{MAX_RICH_TEXT_LENGTH}, got {self.rich_text_limit}"
            )
        if not 1 <= self.rich_text_array_limit <= MAX_RICH_TEXT_ARRAY_LENGTH:
            raise ValueError(
                f"rich_text_array_limit must be in 1..{MAX_RICH_TEXT_ARRAY_LENGTH}, "
                f"got {self.rich_text_array_limit}"
            )
        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.rate_limit_rps <= 0:
            raise ValueError(f"rate_limit_rps must be > 0, got {self.rate_limit_rps}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 4 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionpressConfig({', '.join(parts)})"
