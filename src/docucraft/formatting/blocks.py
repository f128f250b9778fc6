"""Block tree produced by the markup parser.

Textual payloads (heading text, paragraph text, list items, table cells and
quote lines) are stored already formatted as safe inline markup. Code blocks
keep their raw lines untouched.
"""

import base64
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


IMAGE_SIZE_CLASSES = ("img-size-25", "img-size-50", "img-size-75", "img-size-100")
IMAGE_ALIGN_CLASSES = ("img-align-left", "img-align-center", "img-align-right")


@dataclass(frozen=True)
class Heading:
    level: int
    content: str


@dataclass(frozen=True)
class Paragraph:
    content: str


@dataclass(frozen=True)
class ItemList:
    ordered: bool
    items: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Table:
    """A table; header is None when only one row was collected."""

    rows: list[list[str]] = field(default_factory=list)
    header: Optional[list[str]] = None


@dataclass(frozen=True)
class CodeBlock:
    raw_lines: list[str] = field(default_factory=list)

    @property
    def code(self) -> str:
        return "\n".join(self.raw_lines)


class QuoteLineKind(Enum):
    """Kinds of lines inside a blockquote run."""

    TEXT = "text"
    BULLET = "bullet"
    NUMBERED = "numbered"
    BLANK = "blank"


@dataclass(frozen=True)
class QuoteLine:
    """One physical line inside a blockquote.

    Attributes:
        kind: How the line was classified
        text: Formatted inline content (empty for BLANK)
        label: The number of a NUMBERED line, e.g. "2"
    """

    kind: QuoteLineKind
    text: str = ""
    label: Optional[str] = None


@dataclass(frozen=True)
class Blockquote:
    lines: list[QuoteLine] = field(default_factory=list)


@dataclass(frozen=True)
class Rule:
    """Horizontal rule."""


@dataclass(frozen=True)
class Image:
    """An embedded image as the live editor inserts it.

    Attributes:
        source: Image URL, usually a base64 data URI
        size_class: One of IMAGE_SIZE_CLASSES, or None for the default tier
        align_class: One of IMAGE_ALIGN_CLASSES, or None for left
    """

    source: str
    size_class: Optional[str] = None
    align_class: Optional[str] = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_type: str = "image/png",
        size_class: Optional[str] = None,
        align_class: Optional[str] = None,
    ) -> "Image":
        """Build an image block with the bytes inlined as a data URI."""
        if size_class is not None and size_class not in IMAGE_SIZE_CLASSES:
            raise ValueError(f"Unknown image size class: {size_class}")
        if align_class is not None and align_class not in IMAGE_ALIGN_CLASSES:
            raise ValueError(f"Unknown image alignment class: {align_class}")
        encoded = base64.b64encode(data).decode("ascii")
        return cls(
            source=f"data:{mime_type};base64,{encoded}",
            size_class=size_class,
            align_class=align_class,
        )


Block = Union[Heading, Paragraph, ItemList, Table, CodeBlock, Blockquote, Rule, Image]
