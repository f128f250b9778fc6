"""Markdown parser for converting draft text to a block tree."""

import re
from dataclasses import dataclass, field
from typing import Optional

from docucraft.formatting.blocks import (
    Block,
    Blockquote,
    CodeBlock,
    Heading,
    ItemList,
    Paragraph,
    QuoteLine,
    QuoteLineKind,
    Rule,
    Table,
)
from docucraft.formatting.inline import InlineFormatter


@dataclass
class _ParseState:
    """Carry-over state for one parse call.

    At most one of code, table, list or quote is open at a time.
    """

    blocks: list[Block] = field(default_factory=list)
    in_code: bool = False
    code_lines: list[str] = field(default_factory=list)
    in_table: bool = False
    table_rows: list[list[str]] = field(default_factory=list)
    list_items: list[str] = field(default_factory=list)
    quote_lines: list[str] = field(default_factory=list)


class MarkdownParser:
    """Parse a lightweight markdown dialect into structured blocks."""

    FENCE = "```"
    RULE_MARKERS = ("---", "***", "___")
    LIST_MARKERS = ("- ", "* ")

    # Depth 4+ is matched so it can be dropped; documents stop at level 3
    HEADING_PATTERN = re.compile(r"^(#+) (.*)$")
    MAX_HEADING_LEVEL = 3
    NUMBERED_PATTERN = re.compile(r"^\d+\.\s")

    # A row is a separator when dashes make up this share of its
    # non-whitespace, non-pipe characters
    SEPARATOR_DASH_RATIO = 0.8

    def __init__(self, formatter: Optional[InlineFormatter] = None) -> None:
        self.formatter = formatter or InlineFormatter()

    def parse(self, text: str) -> list[Block]:
        """Convert markdown text to an ordered list of blocks.

        Args:
            text: The markdown draft, newline-delimited

        Returns:
            Blocks in document order
        """
        state = _ParseState()

        for line in text.split("\n"):
            self._parse_line(line, state)

        self._flush_all(state)

        if state.in_code and state.code_lines:
            state.blocks.append(CodeBlock(raw_lines=state.code_lines))

        return state.blocks

    def _parse_line(self, line: str, state: _ParseState) -> None:
        """Classify one physical line and update the state."""
        if self.FENCE in line:
            if state.in_code:
                state.blocks.append(CodeBlock(raw_lines=state.code_lines))
                state.code_lines = []
                state.in_code = False
            else:
                self._flush_all(state)
                state.in_code = True
            return

        if state.in_code:
            state.code_lines.append(line)
            return

        trimmed = line.strip()

        if "|" in trimmed:
            if self.is_separator_row(trimmed):
                return
            self._flush_list(state)
            self._flush_quote(state)
            state.table_rows.append(self.split_cells(trimmed))
            state.in_table = True
            return
        if state.in_table:
            self._flush_table(state)

        if trimmed in self.RULE_MARKERS:
            self._flush_all(state)
            state.blocks.append(Rule())
            return

        heading = self.HEADING_PATTERN.match(trimmed)
        if heading:
            level = len(heading.group(1))
            if level > self.MAX_HEADING_LEVEL:
                return
            self._flush_all(state)
            state.blocks.append(
                Heading(level=level, content=self.formatter.format(heading.group(2)))
            )
            return

        if trimmed.startswith(">"):
            self._flush_list(state)
            self._flush_table(state)
            content = trimmed[2:] if trimmed.startswith("> ") else trimmed[1:]
            state.quote_lines.append(content)
            return

        if trimmed.startswith(self.LIST_MARKERS):
            self._flush_quote(state)
            self._flush_table(state)
            state.list_items.append(trimmed[2:])
            return

        self._flush_all(state)
        if trimmed:
            state.blocks.append(Paragraph(content=self.formatter.format(trimmed)))

    def is_separator_row(self, trimmed: str) -> bool:
        """Check whether a table line is a header separator like |---|---|."""
        dash_count = trimmed.count("-")
        total = len(re.sub(r"[\s|]", "", trimmed))
        return dash_count > 0 and dash_count >= total * self.SEPARATOR_DASH_RATIO

    @staticmethod
    def split_cells(trimmed: str) -> list[str]:
        """Split a table row on pipes, dropping empty edge segments."""
        cells = trimmed.split("|")
        if len(cells) > 1 and not cells[-1].strip():
            cells = cells[:-1]
        if cells and not cells[0].strip():
            cells = cells[1:]
        return cells

    def classify_quote_line(self, line: str) -> QuoteLine:
        """Classify one line of blockquote content."""
        trimmed = line.strip()
        if not trimmed:
            return QuoteLine(kind=QuoteLineKind.BLANK)
        if trimmed.startswith(self.LIST_MARKERS):
            return QuoteLine(
                kind=QuoteLineKind.BULLET,
                text=self.formatter.format(trimmed[2:]),
            )
        if self.NUMBERED_PATTERN.match(trimmed):
            label = trimmed.split(".", 1)[0]
            body = trimmed[trimmed.index(" ") + 1:]
            return QuoteLine(
                kind=QuoteLineKind.NUMBERED,
                text=self.formatter.format(body),
                label=label,
            )
        return QuoteLine(kind=QuoteLineKind.TEXT, text=self.formatter.format(line))

    def _flush_list(self, state: _ParseState) -> None:
        if state.list_items:
            items = [self.formatter.format(item) for item in state.list_items]
            state.blocks.append(ItemList(ordered=False, items=items))
            state.list_items = []

    def _flush_quote(self, state: _ParseState) -> None:
        if state.quote_lines:
            lines = [self.classify_quote_line(line) for line in state.quote_lines]
            state.blocks.append(Blockquote(lines=lines))
            state.quote_lines = []

    def _flush_table(self, state: _ParseState) -> None:
        if state.table_rows:
            rows = [
                [self.formatter.format(cell.strip()) for cell in row]
                for row in state.table_rows
            ]
            if len(rows) > 1:
                state.blocks.append(Table(header=rows[0], rows=rows[1:]))
            else:
                state.blocks.append(Table(header=None, rows=rows))
            state.table_rows = []
        state.in_table = False

    def _flush_all(self, state: _ParseState) -> None:
        self._flush_list(state)
        self._flush_quote(state)
        self._flush_table(state)


def parse_markdown(text: str) -> list[Block]:
    """Parse markdown text with a fresh MarkdownParser."""
    return MarkdownParser().parse(text)
