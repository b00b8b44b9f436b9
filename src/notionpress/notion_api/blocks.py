"""Block-children endpoint wrapper.

Publishing needs exactly one remote operation: append children to a page
or block (``PATCH /blocks/{id}/children``).  :class:`BlockAPI` and
:class:`AsyncBlockAPI` wrap it over the matching transport.
"""

from __future__ import annotations

from typing import Any

from .transport import AsyncNotionTransport, NotionTransport


def created_block_ids(response: Any) -> list[str]:
    """Return the ids of the blocks listed in an append response.

    Parameters
    ----------
    response:
        The decoded body of ``PATCH /blocks/{id}/children``.

    Returns
    -------
    list[str]
        The ``id`` of each entry in ``results``; empty for any other shape.
    """
    if not isinstance(response, dict):
        return []
    results = response.get("results")
    if not isinstance(results, list):
        return []
    return [item["id"] for item in results if isinstance(item, dict) and item.get("id")]


class BlockAPI:
    """Synchronous wrapper for the block-children endpoint.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def append_children(self, block_id: str, children: list[dict[str, Any]]) -> Any:
        """Append *children* to the page or block *block_id*.

        Parameters
        ----------
        block_id:
            The id of the parent page or block.
        children:
            Serialized blocks; at most 100 per call.

        Returns
        -------
        Any
            The decoded response body, normally
            ``{"object": "list", "results": [...]}``.
        """
        return self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json={"children": children}
        )


class AsyncBlockAPI:
    """Asynchronous wrapper for the block-children endpoint.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncNotionTransport` instance.
    """

    def __init__(self, transport: AsyncNotionTransport) -> None:
        self._transport = transport

    async def append_children(self, block_id: str, children: list[dict[str, Any]]) -> Any:
        """Append *children* to *block_id* (async).

        See :meth:`BlockAPI.append_children`.
        """
        return await self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json={"children": children}
        )
