"""Walk a live document tree into flattened export blocks.

The tree handed to the walker is whatever the live document currently holds.
It starts out as the renderer's output but editing can wrap, split and
restyle it freely, so nodes are dispatched by capability category rather
than by a fixed schema:

- Recognised block elements (images, rules, headings, lists, tables,
  blockquotes) map to their own export block.
- Any other element with a block-level child is a wrapper and is unwrapped.
- Everything else is a leaf and becomes one paragraph of styled runs.

Inline styling is threaded downward as an immutable RunStyle that only ever
gains flags, so a run's style is the union of its ancestors' styles.
"""

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction
from PIL import Image, UnidentifiedImageError

from docucraft.config import get_settings
from docucraft.formatting.ir import (
    Alignment,
    ExportBlock,
    HeadingBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    RuleBlock,
    TableBlock,
    TableCell,
    TextRun,
    TextStyle,
)

logger = logging.getLogger(__name__)


BLOCK_TAGS = frozenset({
    "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "table", "blockquote", "hr", "img",
})
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
IGNORED_TAGS = frozenset({"head", "title", "meta", "link", "script", "style", "template"})
IGNORED_STRINGS = (Comment, CData, Declaration, Doctype, ProcessingInstruction)

# Inline tags and the flags they add
STYLE_TAGS = {
    "b": TextStyle.BOLD,
    "strong": TextStyle.BOLD,
    "i": TextStyle.ITALIC,
    "em": TextStyle.ITALIC,
    "u": TextStyle.UNDERLINE,
    "s": TextStyle.STRIKE,
    "strike": TextStyle.STRIKE,
    "del": TextStyle.STRIKE,
}

# Fixed pixel footprints of the image size tiers
SIZE_TIERS = {
    "img-size-25": (125, 80),
    "img-size-50": (250, 165),
    "img-size-75": (375, 245),
}

CODE_SHADING = "F8FAFC"
CODE_COLOR = "4F46E5"
QUOTE_COLOR = "475569"
HEADER_SHADING = "F1F5F9"
RULE_SIZE = 12
RULE_COLOR = "CBD5E1"
BULLET_PREFIX = "• "
MAX_HEADING_LEVEL = 3

TEXT_ALIGN_PATTERN = re.compile(r"text-align\s*:\s*(left|center|right)", re.IGNORECASE)
FONT_WEIGHT_PATTERN = re.compile(r"font-weight\s*:\s*(bold|bolder|[6-9]00)", re.IGNORECASE)
FONT_STYLE_PATTERN = re.compile(r"font-style\s*:\s*(italic|oblique)", re.IGNORECASE)
DECORATION_PATTERN = re.compile(r"text-decoration(?:-line)?\s*:\s*([^;]+)", re.IGNORECASE)

LINE_BREAK = TextRun(line_break=True)

Node = Union[Tag, NavigableString]


class NodeKind(Enum):
    """Capability categories used to dispatch tree nodes."""

    TEXT = "text"
    IMAGE = "image"
    RULE = "rule"
    BREAK = "break"
    HEADING = "heading"
    LIST = "list"
    TABLE = "table"
    BLOCKQUOTE = "blockquote"
    WRAPPER = "wrapper"
    LEAF = "leaf"
    IGNORED = "ignored"


def has_block_children(tag: Tag) -> bool:
    """Check whether any direct child element is block-level."""
    return any(
        isinstance(child, Tag) and child.name in BLOCK_TAGS
        for child in tag.children
    )


def classify(node: Node) -> NodeKind:
    """Decide which capability category a node belongs to."""
    if isinstance(node, NavigableString):
        if isinstance(node, IGNORED_STRINGS):
            return NodeKind.IGNORED
        return NodeKind.TEXT
    if not isinstance(node, Tag):
        return NodeKind.IGNORED

    name = node.name
    if name in IGNORED_TAGS:
        return NodeKind.IGNORED
    if name == "img":
        return NodeKind.IMAGE
    if name == "hr":
        return NodeKind.RULE
    if name == "br":
        return NodeKind.BREAK
    if name in HEADING_TAGS:
        return NodeKind.HEADING
    if name in ("ul", "ol"):
        return NodeKind.LIST
    if name == "table":
        return NodeKind.TABLE
    if name == "blockquote":
        return NodeKind.BLOCKQUOTE
    if has_block_children(node):
        return NodeKind.WRAPPER
    return NodeKind.LEAF


def _classes(tag: Tag) -> list[str]:
    value = tag.get("class") or []
    return value.split() if isinstance(value, str) else list(value)


def resolve_alignment(node: Optional[Node]) -> Alignment:
    """Resolve a node's own alignment from its classes or inline style."""
    if not isinstance(node, Tag):
        return Alignment.LEFT

    classes = _classes(node)
    match = TEXT_ALIGN_PATTERN.search(node.get("style") or "")
    declared = match.group(1).lower() if match else (node.get("align") or "").lower()

    if "img-align-center" in classes or declared == "center":
        return Alignment.CENTER
    if "img-align-right" in classes or declared == "right":
        return Alignment.RIGHT
    return Alignment.LEFT


@dataclass(frozen=True)
class RunStyle:
    """Inherited inline style, merged additively on the way down."""

    flags: TextStyle = TextStyle.NONE
    font: Optional[str] = None
    color: Optional[str] = None
    shading: Optional[str] = None
    preformatted: bool = False

    def merge(self, tag: Tag, code_font: str) -> "RunStyle":
        """Return this style with whatever the tag enables added."""
        flags = self.flags | STYLE_TAGS.get(tag.name, TextStyle.NONE)
        font, color, shading = self.font, self.color, self.shading
        preformatted = self.preformatted

        css = tag.get("style") or ""
        if FONT_WEIGHT_PATTERN.search(css):
            flags |= TextStyle.BOLD
        if FONT_STYLE_PATTERN.search(css):
            flags |= TextStyle.ITALIC
        decoration = DECORATION_PATTERN.search(css)
        if decoration:
            if "underline" in decoration.group(1):
                flags |= TextStyle.UNDERLINE
            if "line-through" in decoration.group(1):
                flags |= TextStyle.STRIKE

        if tag.name == "code":
            flags |= TextStyle.CODE
            font, color, shading = code_font, CODE_COLOR, CODE_SHADING
        elif tag.name == "pre":
            font = code_font
            preformatted = True

        return RunStyle(
            flags=flags,
            font=font,
            color=color,
            shading=shading,
            preformatted=preformatted,
        )

    def run(self, text: str) -> TextRun:
        return TextRun(
            text=text,
            style=self.flags,
            font=self.font,
            color=self.color,
            shading=self.shading,
        )


class DocumentWalker:
    """Convert a live document tree into a flat list of export blocks."""

    def __init__(
        self,
        default_image_size: Optional[tuple[int, int]] = None,
        code_font: Optional[str] = None,
    ) -> None:
        """Initialize the walker.

        Args:
            default_image_size: (width, height) of an image with no size tier
            code_font: Font family applied to code and preformatted runs
        """
        settings = get_settings()
        self.default_image_size = default_image_size or (
            settings.image_width,
            settings.image_height,
        )
        self.code_font = code_font or settings.monospace_font
        self._handlers = {
            NodeKind.TEXT: self._process_text,
            NodeKind.IMAGE: self._process_image,
            NodeKind.RULE: self._process_rule,
            NodeKind.BREAK: self._process_break,
            NodeKind.HEADING: self._process_heading,
            NodeKind.LIST: self._process_list,
            NodeKind.TABLE: self._process_table,
            NodeKind.BLOCKQUOTE: self._process_blockquote,
            NodeKind.WRAPPER: self._process_wrapper,
            NodeKind.LEAF: self._process_leaf,
            NodeKind.IGNORED: lambda node: [],
        }

    def walk(self, root: Tag) -> list[ExportBlock]:
        """Walk the children of the document root in order.

        A full HTML document is walked from its <body>.
        """
        container = root.find("body") or root
        blocks: list[ExportBlock] = []
        for child in container.children:
            blocks.extend(self.process_node(child))
        return blocks

    def process_node(self, node: Node) -> list[ExportBlock]:
        """Convert one block-level node into zero or more export blocks."""
        return self._handlers[classify(node)](node)

    # -------------------------------------------------------------------------
    # Block handlers
    # -------------------------------------------------------------------------

    def _process_text(self, node: NavigableString) -> list[ExportBlock]:
        text = str(node).strip()
        if not text:
            return []
        return [ParagraphBlock(runs=[TextRun(text=text)])]

    def _process_image(self, tag: Tag) -> list[ExportBlock]:
        image = self.decode_image(tag)
        return [image] if image is not None else []

    def _process_rule(self, tag: Tag) -> list[ExportBlock]:
        return [RuleBlock(size=RULE_SIZE, color=RULE_COLOR)]

    def _process_break(self, tag: Tag) -> list[ExportBlock]:
        return [ParagraphBlock()]

    def _process_heading(self, tag: Tag) -> list[ExportBlock]:
        level = int(tag.name[1])
        if level > MAX_HEADING_LEVEL:
            level = MAX_HEADING_LEVEL
        return [
            HeadingBlock(
                level=level,
                runs=self.collect_runs(tag, self._own_style(tag)),
                alignment=resolve_alignment(tag),
            )
        ]

    def _process_list(self, tag: Tag) -> list[ExportBlock]:
        ordered = tag.name == "ol"
        items: list[list[TextRun]] = []
        children = [child for child in tag.children if isinstance(child, Tag)]
        for index, item in enumerate(children, start=1):
            prefix = f"{index}. " if ordered else BULLET_PREFIX
            runs = [TextRun(text=prefix, style=TextStyle.BOLD)]
            runs.extend(self.collect_runs(item, self._own_style(item)))
            items.append(runs)
        return [ListBlock(ordered=ordered, items=items)]

    def _process_table(self, tag: Tag) -> list[ExportBlock]:
        rows: list[list[TableCell]] = []
        for row in tag.find_all("tr"):
            cells: list[TableCell] = []
            for cell in row.find_all(["td", "th"]):
                is_header = cell.name == "th"
                cells.append(
                    TableCell(
                        runs=self.collect_runs(cell, self._own_style(cell)),
                        alignment=resolve_alignment(cell),
                        header=is_header,
                        shading=HEADER_SHADING if is_header else None,
                    )
                )
            rows.append(cells)
        return [TableBlock(rows=rows)]

    def _process_blockquote(self, tag: Tag) -> list[ExportBlock]:
        runs = self.collect_runs(tag, RunStyle(), separate_blocks=True)
        while runs and runs[0].line_break:
            runs.pop(0)
        while runs and runs[-1].line_break:
            runs.pop()
        # Quotes always render uniformly, whatever emphasis they contain
        forced = [
            run if run.line_break
            else replace(run, style=run.style | TextStyle.ITALIC, color=QUOTE_COLOR)
            for run in runs
        ]
        return [ParagraphBlock(runs=forced, quote=True)]

    def _process_wrapper(self, tag: Tag) -> list[ExportBlock]:
        blocks: list[ExportBlock] = []
        for child in tag.children:
            blocks.extend(self.process_node(child))
        return blocks

    def _process_leaf(self, tag: Tag) -> list[ExportBlock]:
        runs = self.collect_runs(tag, self._own_style(tag))
        if not runs and tag.name not in ("p", "div"):
            return []
        return [ParagraphBlock(runs=runs, alignment=resolve_alignment(tag))]

    # -------------------------------------------------------------------------
    # Inline content
    # -------------------------------------------------------------------------

    def _own_style(self, tag: Tag) -> RunStyle:
        return RunStyle().merge(tag, self.code_font)

    def collect_runs(
        self,
        node: Tag,
        style: RunStyle,
        separate_blocks: bool = False,
    ) -> list[TextRun]:
        """Collect styled runs from every descendant of node.

        Args:
            node: Element whose children are walked
            style: Style inherited from node and its ancestors
            separate_blocks: Put a line break between block-level children

        Returns:
            Runs in document order
        """
        runs: list[TextRun] = []
        for child in node.children:
            if isinstance(child, NavigableString):
                if not isinstance(child, IGNORED_STRINGS):
                    runs.extend(self._text_runs(str(child), style))
                continue
            if not isinstance(child, Tag):
                continue

            name = child.name
            if name == "br":
                runs.append(LINE_BREAK)
                continue
            if name == "img" or name in IGNORED_TAGS:
                continue

            child_runs = self.collect_runs(
                child,
                style.merge(child, self.code_font),
                separate_blocks,
            )
            if separate_blocks and name in BLOCK_TAGS | {"li"}:
                if runs and not runs[-1].line_break:
                    runs.append(LINE_BREAK)
                if not child_runs and runs:
                    runs.append(LINE_BREAK)
            runs.extend(child_runs)
        return runs

    def _text_runs(self, text: str, style: RunStyle) -> list[TextRun]:
        if style.preformatted:
            runs: list[TextRun] = []
            for index, line in enumerate(text.split("\n")):
                if index:
                    runs.append(LINE_BREAK)
                if line:
                    runs.append(style.run(line))
            return runs

        text = re.sub(r"\r?\n", " ", text)
        return [style.run(text)] if text else []

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    def decode_image(self, tag: Tag) -> Optional[ImageBlock]:
        """Decode an embedded data-URI image into an ImageBlock.

        Returns None, after logging, when the payload cannot be decoded.
        """
        src = tag.get("src") or ""
        if not src.startswith("data:image"):
            logger.debug("Skipping image without embedded data: %.60s", src)
            return None

        try:
            _, _, payload = src.partition(",")
            data = base64.b64decode(payload, validate=True)
            with Image.open(io.BytesIO(data)) as pil_image:
                pil_image.verify()
                image_format = (pil_image.format or "png").lower()
        except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
            logger.warning("Image export failed, skipping image: %s", e)
            return None

        width, height = self.resolve_image_size(tag)
        return ImageBlock(
            data=data,
            width=width,
            height=height,
            alignment=self.resolve_image_alignment(tag),
            format=image_format,
        )

    def resolve_image_size(self, tag: Tag) -> tuple[int, int]:
        """Map an image's size tier class to its pixel footprint."""
        for css_class in _classes(tag):
            if css_class in SIZE_TIERS:
                return SIZE_TIERS[css_class]
        return self.default_image_size

    def resolve_image_alignment(self, tag: Tag) -> Alignment:
        """Image alignment, falling back to the direct parent's alignment."""
        alignment = resolve_alignment(tag)
        if alignment is Alignment.LEFT and "img-align-left" not in _classes(tag):
            alignment = resolve_alignment(tag.parent)
        return alignment


def walk(root: Tag) -> list[ExportBlock]:
    """Walk a document tree with a default DocumentWalker."""
    return DocumentWalker().walk(root)


def walk_html(markup: str) -> list[ExportBlock]:
    """Parse live HTML and walk it."""
    return walk(BeautifulSoup(markup, "html.parser"))
