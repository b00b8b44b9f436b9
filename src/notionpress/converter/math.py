"""Math placeholder codec.

Formula spans such as ``$a_1 * b_2$`` contain characters the markdown
parser would otherwise read as emphasis or escapes.  Before parsing,
:func:`hide_math` swaps every delimiter-bounded span for an opaque token::

    MATHPLACEHOLDER0MATHPLACEHOLDER

and records ``token -> original span`` (delimiters included) in a
:data:`MathPlaceholderMap`.  After parsing, :func:`restore_math` is applied
to each text node's value to put the formulas back verbatim.

Restoration is plain substring replacement: a token typed literally by a
user is replaced as well.  The map lives for a single conversion and is
always passed explicitly.

:func:`detect_equation` recognises paragraphs made of exactly one formula
so they can be published as ``equation`` blocks when LaTeX support is on.
"""

from __future__ import annotations

import re

MathPlaceholderMap = dict[str, str]

PLACEHOLDER_MARKER = "MATHPLACEHOLDER"

EQUATION_CHAR_LIMIT: int = 1000

_DISPLAY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\$\$(.+?)\$\$$", re.DOTALL),
    re.compile(r"^\\\[(.+?)\\\]$", re.DOTALL),
    re.compile(r"^\\\((.+?)\\\)$", re.DOTALL),
)


def make_placeholder(index: int) -> str:
    return f"{PLACEHOLDER_MARKER}{index}{PLACEHOLDER_MARKER}"


def _span_pattern(delimiter: str) -> re.Pattern[str]:
    d = re.escape(delimiter)
    # Characters allowed inside the span: anything but the delimiter's
    # first character, so spans never nest or run into each other.
    inner = re.escape(delimiter[0])
    return re.compile(f"{d}([^{inner}]+?){d}")


def hide_math(
    markdown: str,
    delimiter: str = "$",
    enabled: bool = True,
) -> tuple[str, MathPlaceholderMap]:
    """Replace formula spans with placeholder tokens.

    Parameters
    ----------
    markdown:
        Raw markdown text.
    delimiter:
        Character (or string) opening and closing a formula span.
    enabled:
        When ``False`` the markdown is returned unchanged with an empty map.

    Returns
    -------
    tuple[str, MathPlaceholderMap]
        The rewritten markdown and the ``token -> span`` map.

    Examples
    --------
    >>> hide_math("a $x^2$ b")
    ('a MATHPLACEHOLDER0MATHPLACEHOLDER b', {'MATHPLACEHOLDER0MATHPLACEHOLDER': '$x^2$'})
    """
    placeholders: MathPlaceholderMap = {}
    if not enabled or not delimiter:
        return markdown, placeholders

    def _swap(match: re.Match[str]) -> str:
        token = make_placeholder(len(placeholders))
        placeholders[token] = match.group(0)
        return token

    return _span_pattern(delimiter).sub(_swap, markdown), placeholders


def restore_math(text: str, placeholders: MathPlaceholderMap) -> str:
    """Put the original formula spans back into *text*."""
    if not placeholders or PLACEHOLDER_MARKER not in text:
        return text
    for token, span in placeholders.items():
        text = text.replace(token, span)
    return text


def detect_equation(text: str, delimiter: str = "$") -> str | None:
    """Return the expression if *text* is exactly one formula span.

    Recognises ``$$...$$``, ``\\[...\\]``, ``\\(...\\)`` and a single
    *delimiter*-bounded span.  Expressions over the Notion equation limit
    (1000 characters) are not promoted and ``None`` is returned.
    """
    candidate = text.strip()
    if not candidate:
        return None

    expression: str | None = None
    for pattern in _DISPLAY_PATTERNS:
        match = pattern.match(candidate)
        if match:
            expression = match.group(1)
            break

    if expression is None and delimiter:
        match = _span_pattern(delimiter).fullmatch(candidate)
        if match:
            expression = match.group(1)

    if expression is None:
        return None
    expression = expression.strip()
    if not expression or len(expression) > EQUATION_CHAR_LIMIT:
        return None
    return expression
