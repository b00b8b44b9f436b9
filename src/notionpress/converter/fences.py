"""Close unterminated code fences.

An unclosed ```` ``` ```` swallows the rest of a document into one code
block, and different parsers disagree on where it ends.  :func:`balance_fences`
appends a closing marker for every fence still open at end of input so the
parser always sees a well-formed document.

:func:`rewrite_outside_fences` lets other source-level fix-ups skip the
contents of code blocks.
"""

from __future__ import annotations

from collections.abc import Callable

FENCE_MARKERS: tuple[str, ...] = ("```", "~~~")


def _fence_marker(line: str) -> str | None:
    stripped = line.strip()
    for marker in FENCE_MARKERS:
        if stripped.startswith(marker):
            return marker
    return None


def balance_fences(markdown: str) -> str:
    """Return *markdown* with every open fence closed at the end.

    Fences are matched by marker type only (```` ``` ```` vs ``~~~``); the
    language tag on an opening line is irrelevant.  Input that is already
    balanced is returned unchanged.

    Examples
    --------
    >>> balance_fences("```python\\nprint(1)")
    '```python\\nprint(1)\\n```'
    """
    lines = markdown.split("\n")
    open_fences: list[str] = []

    for line in lines:
        marker = _fence_marker(line)
        if marker is None:
            continue
        if open_fences and open_fences[-1] == marker:
            open_fences.pop()
        else:
            open_fences.append(marker)

    while open_fences:
        lines.append(open_fences.pop())

    return "\n".join(lines)


def rewrite_outside_fences(markdown: str, rewrite: Callable[[str], str]) -> str:
    """Apply *rewrite* to every stretch of *markdown* outside code fences.

    Fence lines and the code between them are passed through untouched, so
    source-level fix-ups never alter code.  Expects balanced fences (see
    :func:`balance_fences`).

    Examples
    --------
    >>> rewrite_outside_fences("a\\n```\\na\\n```\\na", str.upper)
    'A\\n```\\na\\n```\\nA'
    """
    runs: list[tuple[bool, list[str]]] = []
    open_fences: list[str] = []

    for line in markdown.split("\n"):
        marker = _fence_marker(line)
        inside = bool(open_fences) or marker is not None
        if marker is not None:
            if open_fences and open_fences[-1] == marker:
                open_fences.pop()
            else:
                open_fences.append(marker)
        if runs and runs[-1][0] == inside:
            runs[-1][1].append(line)
        else:
            runs.append((inside, [line]))

    return "\n".join(
        "\n".join(lines) if inside else rewrite("\n".join(lines))
        for inside, lines in runs
    )
