"""Human-readable rendering of Notion error bodies.

Notion reports failures as ``{"object": "error", "status", "code",
"message"}``.  :func:`parse_notion_error` turns such a body into the text
used in bisection warnings.
"""

from __future__ import annotations

from typing import Any

_TEMPLATES: dict[str, str] = {
    "validation_error": "Validation Error: {message}",
    "invalid_request_url": "Invalid Request URL: {message}",
    "invalid_request": "Invalid Request: {message}",
    "unauthorized": "Unauthorized: {message}. Please check your Notion API key.",
    "restricted_resource": (
        "Restricted Resource: {message}. The integration may not have access to this page."
    ),
    "object_not_found": (
        "Object Not Found: {message}. The page may not exist or the integration "
        "doesn't have access."
    ),
    "rate_limited": "Rate Limited: {message}. Please try again later.",
    "internal_server_error": "Internal Server Error: {message}. This is a Notion API issue.",
    "service_unavailable": (
        "Service Unavailable: {message}. Notion API is temporarily unavailable."
    ),
}


def parse_notion_error(body: Any) -> str:
    """Describe the Notion error *body*.

    Parameters
    ----------
    body:
        A decoded error body.  Anything that is not a dict yields
        ``"Unknown error format"``.

    Returns
    -------
    str
        A known ``code`` gets a descriptive prefix (and a hint for
        access and availability problems); other codes render as
        ``"{code}: {message}"``.

    Examples
    --------
    >>> parse_notion_error({"code": "validation_error", "message": "bad block"})
    'Validation Error: bad block'
    >>> parse_notion_error({"code": "conflict_error", "message": "retry"})
    'conflict_error: retry'
    >>> parse_notion_error({})
    'unknown_error: No error message provided'
    """
    if not isinstance(body, dict):
        return "Unknown error format"

    code = body.get("code") or "unknown_error"
    message = body.get("message") or "No error message provided"
    template = _TEMPLATES.get(code, "{code}: {message}")
    return template.format(code=code, message=message)
