"""Partition a sequence into request-sized groups.

The ``append block children`` endpoint accepts at most 100 blocks per
call and a rich-text array holds at most 100 spans, so both the batch
publisher and the normalizer cut their inputs with :func:`chunk_children`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def chunk_children(items: Sequence[T], size: int = 100) -> list[list[T]]:
    """Split *items* into consecutive groups of at most *size*.

    Parameters
    ----------
    items:
        Blocks (or spans) in order.
    size:
        Maximum group length.  Defaults to **100**.

    Returns
    -------
    list[list]
        Groups whose concatenation equals *items*.  Every group but the
        last holds exactly *size* items.  An empty input returns ``[]``.

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(group) for group in chunk_children(list(range(250)))]
    [100, 100, 50]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    return [list(items[i : i + size]) for i in range(0, len(items), size)]
