"""Notion page id validation.

Notion ids are 32 hexadecimal digits, written either compactly or in the
8-4-4-4-12 UUID form.  Both forms are accepted and passed to the API
unchanged.
"""

from __future__ import annotations

import re

from notionpress.errors import NotionpressValidationError

_COMPACT_RE = re.compile(r"^[0-9a-fA-F]{32}$")
_DASHED_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def is_page_id(value: str) -> bool:
    """Return ``True`` if *value* is a compact or dashed Notion id.

    >>> is_page_id("59833787-2cf9-4fdf-8782-e53db20768a5")
    True
    >>> is_page_id("598337872cf94fdf8782e53db20768a5")
    True
    >>> is_page_id("not-an-id")
    False
    """
    return bool(_COMPACT_RE.match(value) or _DASHED_RE.match(value))


def validate_page_id(value: object) -> str:
    """Return *value* stripped of surrounding whitespace, or raise.

    Raises
    ------
    NotionpressValidationError
        If *value* is not a string holding a valid Notion id.
    """
    if not isinstance(value, str) or not value.strip():
        raise NotionpressValidationError(
            "Page ID is required",
            context={"page_id": value},
        )
    page_id = value.strip()
    if not is_page_id(page_id):
        raise NotionpressValidationError(
            "Invalid page ID format. Expected a 32-character hexadecimal UUID "
            "(with or without dashes).",
            context={"page_id": page_id},
        )
    return page_id

