"""Formatting utilities for parsing drafts and describing export content."""

from docucraft.formatting.blocks import (
    Block,
    Heading,
    Paragraph,
    ItemList,
    Table,
    CodeBlock,
    Blockquote,
    QuoteLine,
    QuoteLineKind,
    Rule,
    Image,
)
from docucraft.formatting.ir import (
    TextStyle,
    TextRun,
    Alignment,
    ParagraphBlock,
    HeadingBlock,
    ImageBlock,
    TableCell,
    TableBlock,
    RuleBlock,
    ListBlock,
    ExportBlock,
    FormattedDocument,
)
from docucraft.formatting.inline import InlineFormatter, format_inline
from docucraft.formatting.parser import MarkdownParser, parse_markdown
from docucraft.formatting.html_renderer import render_html, load_tree

__all__ = [
    "Block",
    "Heading",
    "Paragraph",
    "ItemList",
    "Table",
    "CodeBlock",
    "Blockquote",
    "QuoteLine",
    "QuoteLineKind",
    "Rule",
    "Image",
    "TextStyle",
    "TextRun",
    "Alignment",
    "ParagraphBlock",
    "HeadingBlock",
    "ImageBlock",
    "TableCell",
    "TableBlock",
    "RuleBlock",
    "ListBlock",
    "ExportBlock",
    "FormattedDocument",
    "InlineFormatter",
    "format_inline",
    "MarkdownParser",
    "parse_markdown",
    "render_html",
    "load_tree",
]
