"""Intermediate Representation for export-ready content.

This module defines the flattened structures that the document tree walker
produces and every export adapter consumes. The IR is deliberately flatter
than the live document tree: paragraphs never nest, runs carry their style
as a single set of flags plus a few attributes, and images are standalone
blocks.
"""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Optional, Union


# =============================================================================
# Runs
# =============================================================================

class TextStyle(Flag):
    """Text styling flags (combinable with |)."""

    NONE = 0
    BOLD = auto()
    ITALIC = auto()
    UNDERLINE = auto()
    STRIKE = auto()
    CODE = auto()


class Alignment(Enum):
    """Horizontal alignment of a block."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class TextRun:
    """A contiguous run of text with consistent styling.

    Attributes:
        text: The text content
        style: Combined style flags
        font: Font family override (monospace for code), None for default
        color: Hex RGB color without '#', None for default
        shading: Hex RGB background fill without '#', None for none
        line_break: Whether this run is a hard line break instead of text
    """

    text: str = ""
    style: TextStyle = TextStyle.NONE
    font: Optional[str] = None
    color: Optional[str] = None
    shading: Optional[str] = None
    line_break: bool = False

    @property
    def bold(self) -> bool:
        """Check if this run is bold."""
        return TextStyle.BOLD in self.style

    @property
    def italic(self) -> bool:
        """Check if this run is italic."""
        return TextStyle.ITALIC in self.style

    @property
    def underline(self) -> bool:
        return TextStyle.UNDERLINE in self.style

    @property
    def strike(self) -> bool:
        return TextStyle.STRIKE in self.style

    @property
    def code(self) -> bool:
        return TextStyle.CODE in self.style

    def __str__(self) -> str:
        return "\n" if self.line_break else self.text


def runs_text(runs: list[TextRun]) -> str:
    """Get the plain text of a run sequence, line breaks as newlines."""
    return "".join(str(run) for run in runs)


# =============================================================================
# Export blocks
# =============================================================================

@dataclass
class ParagraphBlock:
    """A paragraph of styled runs.

    Attributes:
        runs: TextRun objects making up the paragraph
        alignment: Resolved horizontal alignment
        quote: Whether the paragraph came from a blockquote
    """

    runs: list[TextRun] = field(default_factory=list)
    alignment: Alignment = Alignment.LEFT
    quote: bool = False

    @property
    def plain_text(self) -> str:
        """Get the plain text content without styling."""
        return runs_text(self.runs)


@dataclass
class HeadingBlock:
    """A heading, level clamped to 1-3."""

    level: int
    runs: list[TextRun] = field(default_factory=list)
    alignment: Alignment = Alignment.LEFT

    @property
    def plain_text(self) -> str:
        return runs_text(self.runs)


@dataclass
class ImageBlock:
    """A decoded image with its resolved on-page footprint.

    Attributes:
        data: Raw image bytes
        width: Target width in pixels
        height: Target height in pixels
        alignment: Resolved horizontal alignment
        format: Image format as reported by Pillow (png, jpeg, ...)
    """

    data: bytes
    width: int
    height: int
    alignment: Alignment = Alignment.LEFT
    format: str = "png"


@dataclass
class TableCell(ParagraphBlock):
    """A table cell; header cells carry a distinct shading."""

    header: bool = False
    shading: Optional[str] = None


@dataclass
class TableBlock:
    """A table of cells, header rows included in document order."""

    rows: list[list[TableCell]] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return max((len(row) for row in self.rows), default=0)


@dataclass
class RuleBlock:
    """A horizontal rule drawn as a bottom border of fixed weight."""

    size: int = 12
    color: str = "CBD5E1"


@dataclass
class ListBlock:
    """A list whose items already start with their bullet/number run."""

    ordered: bool = False
    items: list[list[TextRun]] = field(default_factory=list)


ExportBlock = Union[
    ParagraphBlock,
    HeadingBlock,
    ImageBlock,
    TableBlock,
    RuleBlock,
    ListBlock,
]


@dataclass
class FormattedDocument:
    """Complete flattened document ready for rendering.

    Attributes:
        blocks: Export blocks in document order
        metadata: Additional metadata about the source
    """

    blocks: list[ExportBlock] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    @property
    def images(self) -> list[ImageBlock]:
        return [block for block in self.blocks if isinstance(block, ImageBlock)]
