"""Character-limit splitting for rich-text content.

A rich-text span may carry at most 2000 characters.  Python ``str``
indexing works on code points, so slicing never cuts a character in half
and no byte-level bookkeeping is needed.
"""

from __future__ import annotations


def split_string(text: str, limit: int = 2000) -> list[str]:
    """Cut *text* into consecutive pieces of at most *limit* characters.

    Parameters
    ----------
    text:
        The string to cut.
    limit:
        Maximum characters per piece.

    Returns
    -------
    list[str]
        Non-empty pieces whose concatenation equals *text*; every piece
        except the last has exactly *limit* characters.  Empty input
        yields ``[]``.

    Raises
    ------
    ValueError
        If *limit* is less than 1.

    Examples
    --------
    >>> split_string("abcdefg", 3)
    ['abc', 'def', 'g']
    >>> [len(piece) for piece in split_string("x" * 5000)]
    [2000, 2000, 1000]
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    return [text[i : i + limit] for i in range(0, len(text), limit)]
