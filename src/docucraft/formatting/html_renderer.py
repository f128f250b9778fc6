"""Render a parsed block tree into the live document's HTML.

The output is the markup an editing surface hosts after "convert to live":
plain semantic tags plus the small set of presentational classes
(image size tiers, image alignment, quote line kinds) that the walker and
the HTML export stylesheet understand.
"""

from bs4 import BeautifulSoup

from docucraft.formatting.blocks import (
    Block,
    Blockquote,
    CodeBlock,
    Heading,
    Image,
    ItemList,
    Paragraph,
    QuoteLine,
    QuoteLineKind,
    Rule,
    Table,
)
from docucraft.formatting.inline import escape_html


def render_html(blocks: list[Block]) -> str:
    """Render blocks to an HTML fragment, one top-level element per block."""
    return "\n".join(render_block(block) for block in blocks)


def render_block(block: Block) -> str:
    """Render a single block to HTML."""
    if isinstance(block, Heading):
        return f"<h{block.level}>{block.content}</h{block.level}>"
    if isinstance(block, Paragraph):
        return f"<p>{block.content}</p>"
    if isinstance(block, ItemList):
        tag = "ol" if block.ordered else "ul"
        items = "".join(f"<li>{item}</li>" for item in block.items)
        return f"<{tag}>{items}</{tag}>"
    if isinstance(block, Table):
        return _render_table(block)
    if isinstance(block, CodeBlock):
        return f"<pre><code>{escape_html(block.code)}</code></pre>"
    if isinstance(block, Blockquote):
        lines = "".join(_render_quote_line(line) for line in block.lines)
        return f"<blockquote>{lines}</blockquote>"
    if isinstance(block, Rule):
        return "<hr/>"
    if isinstance(block, Image):
        classes = [c for c in (block.size_class, block.align_class) if c]
        class_attr = f' class="{" ".join(classes)}"' if classes else ""
        return f'<img src="{escape_html(block.source)}"{class_attr}/>'
    raise TypeError(f"Cannot render block of type {type(block).__name__}")


def _render_table(table: Table) -> str:
    parts = ["<table>"]
    if table.header is not None:
        cells = "".join(f"<th>{cell}</th>" for cell in table.header)
        parts.append(f"<thead><tr>{cells}</tr></thead>")
    parts.append("<tbody>")
    for row in table.rows:
        cells = "".join(f"<td>{cell}</td>" for cell in row)
        parts.append(f"<tr>{cells}</tr>")
    parts.append("</tbody></table>")
    return "".join(parts)


def _render_quote_line(line: QuoteLine) -> str:
    if line.kind is QuoteLineKind.BLANK:
        return '<div class="bq-blank"></div>'
    if line.kind is QuoteLineKind.BULLET:
        return (
            '<div class="bq-item"><span class="bq-marker">•</span> '
            f"<span>{line.text}</span></div>"
        )
    if line.kind is QuoteLineKind.NUMBERED:
        return (
            f'<div class="bq-item"><span class="bq-marker">{line.label}.</span> '
            f"<span>{line.text}</span></div>"
        )
    return f"<div>{line.text}</div>"


def load_tree(markup: str) -> BeautifulSoup:
    """Parse live-document HTML into a tree the walker can consume."""
    return BeautifulSoup(markup, "html.parser")
