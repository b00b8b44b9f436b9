"""Scrub credentials from request data before it is logged or dumped.

:func:`redact` returns a copy of a header or payload mapping where

* values under credential-like keys (``Authorization``, ``token`` ...)
  are masked, and
* any occurrence of the integration token inside a string is replaced
  by a marker showing only its last four characters.

The input is never mutated.
"""

from __future__ import annotations

import re
from typing import Any

_SENSITIVE_KEYS: tuple[str, ...] = (
    "authorization",
    "token",
    "secret",
    "password",
    "api_key",
    "cookie",
)

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def mask_token(token: str) -> str:
    """Return a display-safe form of *token*.

    >>> mask_token("secret_abcdef1234")
    '<redacted:...1234>'
    >>> mask_token("")
    '<redacted>'
    """
    if len(token) < 8:
        return "<redacted>"
    return f"<redacted:...{token[-4:]}>"


def _scrub(value: str, token: str | None) -> str:
    if token and token in value:
        value = value.replace(token, mask_token(token))
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return redact(value, token)
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _scrub(value, token)
    return value


def redact(payload: dict[str, Any], token: str | None = None) -> dict[str, Any]:
    """Return a copy of *payload* with credentials removed.

    Parameters
    ----------
    payload:
        Request headers or a JSON body.
    token:
        The integration token.  When given, it is scrubbed from every
        string in the tree.

    Returns
    -------
    dict
        A new mapping; nested dicts and lists are copied as well.

    Examples
    --------
    >>> redact({"Authorization": "Bearer secret_abc", "page": "x"})
    {'Authorization': 'Bearer <redacted>', 'page': 'x'}
    """
    result: dict[str, Any] = {}
    for key, value in payload.items():
        lowered = key.lower() if isinstance(key, str) else ""
        if any(marker in lowered for marker in _SENSITIVE_KEYS):
            result[key] = _scrub(value, token) if isinstance(value, str) else "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result
