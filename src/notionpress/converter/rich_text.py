"""Build rich-text spans from canonical inline nodes.

Formatting nodes (``strong``, ``emphasis``, ``delete``, ``link``) are
flattened by converting their children first and then stamping the
corresponding annotation, or link URL, onto every span produced.  A span
inside ``strong`` inside ``emphasis`` therefore ends up bold and italic.

Text nodes have their math placeholders restored; ``inlineCode`` is kept
verbatim.
"""

from __future__ import annotations

from notionpress.converter.ast_normalizer import to_plain_text
from notionpress.converter.math import MathPlaceholderMap, restore_math
from notionpress.models import RichText

_ANNOTATION_FOR: dict[str, str] = {
    "strong": "bold",
    "emphasis": "italic",
    "delete": "strikethrough",
}


def inline_to_rich_text(
    nodes: list[dict],
    placeholders: MathPlaceholderMap,
) -> list[RichText]:
    """Convert inline nodes to a list of :class:`RichText` spans.

    Parameters
    ----------
    nodes:
        Canonical inline nodes (children of a heading, paragraph, ...).
    placeholders:
        Math placeholder map of the current conversion.

    Returns
    -------
    list[RichText]
        Spans in document order.  Empty text nodes produce no span.
    """
    spans: list[RichText] = []

    for node in nodes:
        node_type = node.get("type", "")

        if node_type == "text":
            content = restore_math(node.get("value", ""), placeholders)
            if content:
                spans.append(RichText(content))

        elif node_type in _ANNOTATION_FOR:
            flag = _ANNOTATION_FOR[node_type]
            inner = inline_to_rich_text(node.get("children", []), placeholders)
            spans.extend(span.annotate(**{flag: True}) for span in inner)

        elif node_type == "inlineCode":
            # Formula spans were hidden before parsing, including inside code.
            content = restore_math(node.get("value", ""), placeholders)
            spans.append(RichText(content).annotate(code=True))

        elif node_type == "link":
            url = node.get("url", "")
            inner = inline_to_rich_text(node.get("children", []), placeholders)
            spans.extend(span.with_link(url) if url else span for span in inner)

        elif node_type == "break":
            spans.append(RichText("\n"))

        else:
            fallback = to_plain_text(node)
            if fallback:
                spans.append(RichText(fallback))

    return spans
