"""Convert canonical syntax nodes to Notion block objects.

Handled node types:

- heading -> heading_1/2/3 (levels 4+ clamp to heading_3)
- paragraph -> divider (``---``-style lines), bookmark (a bare URL),
  equation (a lone formula, with LaTeX support on) or paragraph
- list -> bulleted_list_item / numbered_list_item, nested via children
- code -> code block with a Notion language name
- blockquote -> quote
- table -> delegate to tables.py
- thematicBreak -> divider
- html -> toggle for ``<details><summary>`` markup, otherwise skipped
"""

from __future__ import annotations

import re
from collections.abc import Callable as _Callable
from urllib.parse import urlparse

from notionpress.config import ConversionOptions
from notionpress.converter.ast_normalizer import to_plain_text
from notionpress.converter.math import MathPlaceholderMap, detect_equation, restore_math
from notionpress.converter.rich_text import inline_to_rich_text
from notionpress.converter.tables import build_table
from notionpress.models import (
    Block,
    BookmarkBlock,
    BulletedListItemBlock,
    CodeBlock,
    ConversionWarning,
    DividerBlock,
    EquationBlock,
    HeadingBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    QuoteBlock,
    RichText,
    ToggleBlock,
)

# ---------------------------------------------------------------------------
# Notion code language mapping
# ---------------------------------------------------------------------------

_LANGUAGE_ALIASES: dict[str, str] = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "yml": "yaml",
    "md": "markdown",
    "mermaid": "plain text",
}


def normalize_language(lang: str | None) -> str:
    """Map a fence language tag to the name Notion expects.

    Unknown tags pass through lower-cased; a missing tag becomes
    ``"plain text"``.
    """
    if not lang or not lang.strip():
        return "plain text"
    lang = lang.strip().lower()
    return _LANGUAGE_ALIASES.get(lang, lang)


_DIVIDER_RE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,}|={3,})$")

_DETAILS_RE = re.compile(
    r"<details[^>]*>.*?<summary>(.*?)</summary>(.*?)</details>",
    re.DOTALL | re.IGNORECASE,
)
_SUMMARY_RE = re.compile(r"<summary>(.*?)</summary>", re.DOTALL | re.IGNORECASE)
_DETAILS_SPAN_RE = re.compile(r"<details[^>]*>.*?</details>", re.DOTALL | re.IGNORECASE)
_BLANK_LINES_RE = re.compile(r"\n[ \t]*(?:\n[ \t]*)+")


def join_details_blocks(markdown: str) -> str:
    """Remove blank lines inside each ``<details>...</details>`` span.

    An HTML block ends at the first blank line, so a disclosure written with
    blank lines around its body would otherwise reach the builder in pieces.

    >>> join_details_blocks("<details>\\n<summary>S</summary>\\n\\nBody\\n\\n</details>")
    '<details>\\n<summary>S</summary>\\nBody\\n</details>'
    """
    return _DETAILS_SPAN_RE.sub(
        lambda match: _BLANK_LINES_RE.sub("\n", match.group(0)), markdown
    )


def is_divider(text: str) -> bool:
    return bool(_DIVIDER_RE.match(text.strip()))


def is_standalone_url(text: str) -> bool:
    """True if *text* is one absolute ``http``/``https`` URL and nothing else."""
    candidate = text.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return False
    parsed = urlparse(candidate)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_blocks(
    nodes: list[dict],
    placeholders: MathPlaceholderMap,
    options: ConversionOptions | None = None,
) -> tuple[list[Block], list[ConversionWarning]]:
    """Convert top-level canonical nodes to blocks.

    Parameters
    ----------
    nodes:
        Nodes from :class:`ASTNormalizer`.
    placeholders:
        Math placeholder map of this conversion.
    options:
        Per-document conversion options.

    Returns
    -------
    tuple[list[Block], list[ConversionWarning]]
        (blocks, warnings)
    """
    ctx = _BuildContext(placeholders, options or ConversionOptions())
    blocks = _transform_all(nodes, ctx)
    return blocks, ctx.warnings


def transform(
    node: dict,
    placeholders: MathPlaceholderMap,
    options: ConversionOptions | None = None,
) -> list[Block]:
    """Map a single syntax node to zero or more blocks."""
    ctx = _BuildContext(placeholders, options or ConversionOptions())
    return _transform(node, ctx)


class _BuildContext:
    """Per-conversion state shared by the block builders."""

    __slots__ = ("options", "placeholders", "warnings")

    def __init__(self, placeholders: MathPlaceholderMap, options: ConversionOptions) -> None:
        self.placeholders = placeholders
        self.options = options
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))

    def rich_text(self, nodes: list[dict]) -> list[RichText]:
        return inline_to_rich_text(nodes, self.placeholders)


# ---------------------------------------------------------------------------
# Node dispatch
# ---------------------------------------------------------------------------

def _transform(node: dict, ctx: _BuildContext) -> list[Block]:
    handler = _BLOCK_HANDLERS.get(node.get("type", ""))
    if handler is None:
        return []
    return handler(node, ctx)


def _transform_all(nodes: list[dict], ctx: _BuildContext) -> list[Block]:
    blocks: list[Block] = []
    for node in nodes:
        blocks.extend(_transform(node, ctx))
    return blocks


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def _build_heading(node: dict, ctx: _BuildContext) -> list[Block]:
    level = min(max(int(node.get("depth", 1)), 1), 3)
    return [HeadingBlock(
        rich_text=ctx.rich_text(node.get("children", [])),
        level=level,
        is_toggleable=ctx.options.toggle_headings,
    )]


def _build_paragraph(node: dict, ctx: _BuildContext) -> list[Block]:
    text = to_plain_text(node).strip()

    if is_divider(text):
        return [DividerBlock()]

    if is_standalone_url(text):
        return [BookmarkBlock(url=text)]

    if ctx.options.support_latex:
        expression = detect_equation(
            restore_math(text, ctx.placeholders),
            ctx.options.math_delimiter,
        )
        if expression is not None:
            return [EquationBlock(expression=expression)]

    return [ParagraphBlock(rich_text=ctx.rich_text(node.get("children", [])))]


def _build_list(node: dict, ctx: _BuildContext) -> list[Block]:
    ordered = bool(node.get("ordered", False))
    return [
        _build_list_item(item, ordered, ctx)
        for item in node.get("children", [])
        if item.get("type") == "listItem"
    ]


def _build_list_item(item: dict, ordered: bool, ctx: _BuildContext) -> Block:
    """The first paragraph is the item text; everything after it nests."""
    block_cls = NumberedListItemBlock if ordered else BulletedListItemBlock
    children = item.get("children", [])

    if children and children[0].get("type") == "paragraph":
        rich_text = ctx.rich_text(children[0].get("children", []))
        nested = _transform_all(children[1:], ctx)
    else:
        rich_text = [RichText("")]
        nested = _transform_all(children, ctx)

    return block_cls(rich_text=rich_text, children=nested)


def _build_code(node: dict, ctx: _BuildContext) -> list[Block]:
    return [CodeBlock(
        rich_text=[RichText(restore_math(node.get("value", ""), ctx.placeholders))],
        language=normalize_language(node.get("lang")),
    )]


def _build_quote(node: dict, ctx: _BuildContext) -> list[Block]:
    rich_text: list[RichText] = []
    for child in node.get("children", []):
        if rich_text:
            rich_text.append(RichText("\n"))
        if child.get("type") == "paragraph":
            rich_text.extend(ctx.rich_text(child.get("children", [])))
        else:
            rich_text.extend(ctx.rich_text([child]))
    return [QuoteBlock(rich_text=rich_text)]


def _build_table(node: dict, ctx: _BuildContext) -> list[Block]:
    return [build_table(node, ctx.placeholders)]


def _build_divider(node: dict, ctx: _BuildContext) -> list[Block]:
    return [DividerBlock()]


def _build_html(node: dict, ctx: _BuildContext) -> list[Block]:
    html = node.get("value", "")
    if "<details" not in html.lower():
        ctx.add_warning(
            "HTML_BLOCK_SKIPPED",
            "HTML block was skipped (not supported by Notion).",
            raw=html[:200],
        )
        return []
    return [_build_toggle(html, ctx)]


def _build_toggle(html: str, ctx: _BuildContext) -> ToggleBlock:
    """Turn ``<details><summary>S</summary>BODY</details>`` into a toggle."""
    summary_match = _SUMMARY_RE.search(html)
    summary = summary_match.group(1).strip() if summary_match else ""
    summary = restore_math(summary, ctx.placeholders) or "Toggle"

    details_match = _DETAILS_RE.search(html)
    body = details_match.group(2).strip() if details_match else ""
    body = restore_math(body, ctx.placeholders)

    children: list[Block] = []
    if body:
        children.append(ParagraphBlock(rich_text=[RichText(body)]))

    return ToggleBlock(rich_text=[RichText(summary)], children=children)


_BlockHandler = _Callable[[dict, _BuildContext], list[Block]]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "list": _build_list,
    "code": _build_code,
    "blockquote": _build_quote,
    "table": _build_table,
    "thematicBreak": _build_divider,
    "html": _build_html,
}
