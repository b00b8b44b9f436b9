"""Parse Markdown and normalize to canonical syntax nodes.

This module wraps mistune v3's AST renderer and rewrites its token stream
into the node vocabulary used by the block builder.  Every node is a dict
with a ``type`` key.

Canonical block nodes:
    heading (``depth``), paragraph, list (``ordered``), listItem
    (``checked``), code (``lang``, ``value``), blockquote, table
    (``align``), tableRow, tableCell, thematicBreak, html (``value``)

Canonical inline nodes:
    text (``value``), strong, emphasis, delete, inlineCode (``value``),
    link (``url``, ``title``), image (``url``, ``alt``), break, html
    (``value``)
"""

from __future__ import annotations

import mistune

# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_CONTAINER_TYPE_MAP: dict[str, str] = {
    "paragraph": "paragraph",
    # Tight list items wrap their text in block_text
    "block_text": "paragraph",
    "block_quote": "blockquote",
    "strong": "strong",
    "emphasis": "emphasis",
    "strikethrough": "delete",
    "table_row": "tableRow",
}

_VALUE_TYPE_MAP: dict[str, str] = {
    "text": "text",
    "codespan": "inlineCode",
    "block_html": "html",
    "inline_html": "html",
}

# Types that should be silently skipped during normalization
_SKIP_TYPES: frozenset[str] = frozenset({
    "blank_line",
})


class ASTNormalizer:
    """Parse Markdown and normalize to canonical syntax nodes."""

    def __init__(self) -> None:
        self._parser = mistune.create_markdown(
            renderer="ast",
            plugins=[
                "strikethrough",
                "table",
                "task_lists",
                "url",
            ],
        )

    def parse(self, markdown: str) -> list[dict]:
        """Parse markdown and return the top-level canonical nodes."""
        raw_tokens = self._parser(markdown)
        if isinstance(raw_tokens, str):
            return []
        return self._normalize_tokens(raw_tokens)

    def _normalize_tokens(self, tokens: list[dict]) -> list[dict]:
        """Walk the token tree and normalize every node."""
        result: list[dict] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return result

    def _children(self, token: dict) -> list[dict]:
        return self._normalize_tokens(token.get("children") or [])

    def _normalize_token(self, token: dict) -> dict | None:
        """Normalize a single token, returning None if it should be skipped."""
        raw_type = token.get("type", "")
        attrs = token.get("attrs") or {}

        if raw_type in _SKIP_TYPES:
            return None

        if raw_type in _CONTAINER_TYPE_MAP:
            return {"type": _CONTAINER_TYPE_MAP[raw_type], "children": self._children(token)}

        if raw_type in _VALUE_TYPE_MAP:
            return {"type": _VALUE_TYPE_MAP[raw_type], "value": token.get("raw", "")}

        if raw_type == "heading":
            return {
                "type": "heading",
                "depth": attrs.get("level", 1),
                "children": self._children(token),
            }

        if raw_type == "list":
            return {
                "type": "list",
                "ordered": bool(attrs.get("ordered", False)),
                "start": attrs.get("start"),
                "children": self._children(token),
            }

        if raw_type in ("list_item", "task_list_item"):
            node: dict = {"type": "listItem", "children": self._children(token)}
            if raw_type == "task_list_item":
                node["checked"] = bool(attrs.get("checked", False))
            return node

        if raw_type == "block_code":
            # mistune v3 keeps the trailing newline of the fence body
            value = token.get("raw", "")
            if value.endswith("\n"):
                value = value[:-1]
            info = (attrs.get("info") or "").strip()
            return {
                "type": "code",
                "lang": info.split()[0] if info else None,
                "value": value,
            }

        if raw_type == "thematic_break":
            return {"type": "thematicBreak"}

        if raw_type == "table":
            return self._normalize_table(token)

        if raw_type == "link":
            return {
                "type": "link",
                "url": attrs.get("url", ""),
                "title": attrs.get("title"),
                "children": self._children(token),
            }

        if raw_type == "image":
            children = self._children(token)
            return {
                "type": "image",
                "url": attrs.get("url", ""),
                "alt": to_plain_text({"children": children}),
            }

        if raw_type == "softbreak":
            return {"type": "text", "value": "\n"}

        if raw_type == "linebreak":
            return {"type": "break"}

        # Unknown token: skip silently
        return None

    def _normalize_table(self, token: dict) -> dict:
        """Flatten mistune's head/body split into a plain list of rows."""
        rows: list[dict] = []
        align: list[str | None] = []
        for part in token.get("children") or []:
            part_type = part.get("type")
            if part_type == "table_head":
                cells = [self._normalize_cell(cell) for cell in part.get("children") or []]
                align = [(cell.get("attrs") or {}).get("align") for cell in part.get("children") or []]
                rows.append({"type": "tableRow", "children": cells})
            elif part_type == "table_body":
                for row in part.get("children") or []:
                    cells = [self._normalize_cell(cell) for cell in row.get("children") or []]
                    rows.append({"type": "tableRow", "children": cells})
        return {"type": "table", "align": align, "children": rows}

    def _normalize_cell(self, cell: dict) -> dict:
        return {"type": "tableCell", "children": self._children(cell)}


def to_plain_text(node: dict) -> str:
    """Flatten a node to its text content, ignoring all formatting."""
    if "value" in node:
        return node["value"] or ""
    if node.get("type") == "image":
        return node.get("alt", "")
    if node.get("type") == "break":
        return "\n"
    return "".join(to_plain_text(child) for child in node.get("children") or [])
