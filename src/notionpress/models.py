"""Data models for notionpress.

Blocks are a closed family of dataclasses, one per Notion block type the
converter can emit.  Each knows its own :class:`BlockType` tag and how to
serialise itself with :meth:`Block.to_notion`, so no code outside this
module needs to look inside ``block[block["type"]]`` dictionaries.

The remaining types are plain result containers: the heading forest built
for outline mode, conversion/normalization/publish results, and
:class:`ConversionWarning`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BlockType(str, Enum):
    """Notion block types produced by the converter."""

    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    PARAGRAPH = "paragraph"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    CODE = "code"
    QUOTE = "quote"
    DIVIDER = "divider"
    BOOKMARK = "bookmark"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TOGGLE = "toggle"
    EQUATION = "equation"


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotations:
    """Formatting flags of a rich-text span."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False

    def merged(self, **flags: bool) -> Annotations:
        """Return a copy with *flags* OR-merged into the current values."""
        changes = {name: getattr(self, name) or value for name, value in flags.items()}
        return dataclasses.replace(self, **changes)

    def is_default(self) -> bool:
        return not (self.bold or self.italic or self.strikethrough or self.underline or self.code)

    def to_notion(self) -> dict[str, Any]:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "strikethrough": self.strikethrough,
            "underline": self.underline,
            "code": self.code,
            "color": "default",
        }


@dataclass(frozen=True)
class RichText:
    """A run of text with uniform annotations and an optional link."""

    content: str
    link: str | None = None
    annotations: Annotations | None = None

    def with_content(self, content: str) -> RichText:
        return dataclasses.replace(self, content=content)

    def annotate(self, **flags: bool) -> RichText:
        """Return a copy with *flags* stamped onto the annotations."""
        base = self.annotations or Annotations()
        return dataclasses.replace(self, annotations=base.merged(**flags))

    def with_link(self, url: str) -> RichText:
        return dataclasses.replace(self, link=url)

    def to_notion(self) -> dict[str, Any]:
        text: dict[str, Any] = {"content": self.content}
        if self.link:
            text["link"] = {"url": self.link}
        segment: dict[str, Any] = {"type": "text", "text": text}
        if self.annotations is not None and not self.annotations.is_default():
            segment["annotations"] = self.annotations.to_notion()
        return segment


def plain_text(spans: list[RichText]) -> str:
    """Concatenate the content of *spans*."""
    return "".join(span.content for span in spans)


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Block:
    """Base class of every block variant."""

    block_type: ClassVar[BlockType]

    def payload(self) -> dict[str, Any]:
        """The type-specific body sent under ``block[block_type]``."""
        return {}

    def to_notion(self) -> dict[str, Any]:
        """Serialise to the Notion API block shape."""
        key = self.block_type.value
        return {"object": "block", "type": key, key: self.payload()}


@dataclass(frozen=True)
class RichTextBlock(Block):
    """A block whose body is a ``rich_text`` array."""

    rich_text: list[RichText] = field(default_factory=list)

    @property
    def plain_text(self) -> str:
        return plain_text(self.rich_text)

    def payload(self) -> dict[str, Any]:
        return {"rich_text": [span.to_notion() for span in self.rich_text]}


@dataclass(frozen=True)
class ParentBlock(RichTextBlock):
    """A rich-text block that may own nested child blocks."""

    children: list[Block] = field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        if self.children:
            body["children"] = [child.to_notion() for child in self.children]
        return body


@dataclass(frozen=True)
class HeadingBlock(RichTextBlock):
    level: int = 1
    is_toggleable: bool = False

    def __post_init__(self) -> None:
        if self.level not in (1, 2, 3):
            raise ValueError(f"heading level must be 1, 2 or 3, got {self.level}")

    @property
    def block_type(self) -> BlockType:  # type: ignore[override]
        return BlockType(f"heading_{self.level}")

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["is_toggleable"] = self.is_toggleable
        return body


@dataclass(frozen=True)
class ParagraphBlock(RichTextBlock):
    block_type: ClassVar[BlockType] = BlockType.PARAGRAPH


@dataclass(frozen=True)
class BulletedListItemBlock(ParentBlock):
    block_type: ClassVar[BlockType] = BlockType.BULLETED_LIST_ITEM


@dataclass(frozen=True)
class NumberedListItemBlock(ParentBlock):
    block_type: ClassVar[BlockType] = BlockType.NUMBERED_LIST_ITEM


@dataclass(frozen=True)
class CodeBlock(RichTextBlock):
    block_type: ClassVar[BlockType] = BlockType.CODE

    language: str = "plain text"

    @property
    def code_text(self) -> str:
        """The code content (the first span, as built by the converter)."""
        return self.rich_text[0].content if self.rich_text else ""

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["language"] = self.language
        return body


@dataclass(frozen=True)
class QuoteBlock(RichTextBlock):
    block_type: ClassVar[BlockType] = BlockType.QUOTE


@dataclass(frozen=True)
class ToggleBlock(ParentBlock):
    block_type: ClassVar[BlockType] = BlockType.TOGGLE


@dataclass(frozen=True)
class DividerBlock(Block):
    block_type: ClassVar[BlockType] = BlockType.DIVIDER


@dataclass(frozen=True)
class BookmarkBlock(Block):
    block_type: ClassVar[BlockType] = BlockType.BOOKMARK

    url: str = ""

    def payload(self) -> dict[str, Any]:
        return {"url": self.url}


@dataclass(frozen=True)
class EquationBlock(Block):
    block_type: ClassVar[BlockType] = BlockType.EQUATION

    expression: str = ""

    def payload(self) -> dict[str, Any]:
        return {"expression": self.expression}


@dataclass(frozen=True)
class TableRowBlock(Block):
    block_type: ClassVar[BlockType] = BlockType.TABLE_ROW

    cells: list[list[RichText]] = field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        return {"cells": [[span.to_notion() for span in cell] for cell in self.cells]}


@dataclass(frozen=True)
class TableBlock(Block):
    block_type: ClassVar[BlockType] = BlockType.TABLE

    table_width: int = 1
    has_column_header: bool = False
    has_row_header: bool = False
    rows: list[TableRowBlock] = field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        return {
            "table_width": self.table_width,
            "has_column_header": self.has_column_header,
            "has_row_header": self.has_row_header,
            "children": [row.to_notion() for row in self.rows],
        }


# ---------------------------------------------------------------------------
# Outline structure
# ---------------------------------------------------------------------------

@dataclass
class HeadingNode:
    """A heading together with the content and sub-headings it owns.

    Attributes
    ----------
    level:
        Heading level (1-3).
    heading:
        The heading block itself.
    children:
        Non-heading blocks between this heading and the next heading.
    sub_headings:
        Deeper headings nested under this one, in document order.
    """

    level: int
    heading: HeadingBlock
    children: list[Block] = field(default_factory=list)
    sub_headings: list[HeadingNode] = field(default_factory=list)


@dataclass
class ToggleStructure:
    """The heading forest of one document plus content before the first heading."""

    root_nodes: list[HeadingNode] = field(default_factory=list)
    orphan_blocks: list[Block] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Warnings and results
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered while converting or publishing.

    Attributes
    ----------
    code:
        A machine-readable warning code (e.g. ``"BLOCK_SPLIT"``).
    message:
        A human-readable description of the issue.
    context:
        Arbitrary structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class ConversionResult:
    """Output of the markdown-to-blocks conversion phase."""

    blocks: list[Block] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass
class NormalizationResult:
    """Blocks rewritten to fit the per-field limits, plus one warning per split."""

    blocks: list[Block] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass
class PublishResult:
    """Outcome of publishing blocks to one parent.

    Attributes
    ----------
    added_count:
        Blocks the API reported as created.
    chunk_count:
        Top-level append requests issued (bisection retries not counted).
    warnings:
        Normalization splits and blocks dropped during bisection.
    responses:
        Raw API responses, one per top-level request.
    total_blocks:
        Top-level blocks produced by conversion (set by the clients).
    """

    added_count: int = 0
    chunk_count: int = 0
    warnings: list[ConversionWarning] = field(default_factory=list)
    responses: list[dict] = field(default_factory=list)
    total_blocks: int = 0

    def merge(self, other: PublishResult) -> None:
        """Fold *other* into this result."""
        self.added_count += other.added_count
        self.chunk_count += other.chunk_count
        self.total_blocks += other.total_blocks
        self.warnings.extend(other.warnings)
        self.responses.extend(other.responses)

    @property
    def warning_messages(self) -> list[str]:
        return [w.message for w in self.warnings]
