"""Tests for the markdown parser."""

import pytest

from docucraft.formatting.blocks import (
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
from docucraft.formatting.parser import MarkdownParser, parse_markdown


class TestMarkdownParser:
    """Tests for the MarkdownParser class."""

    @pytest.fixture
    def parser(self) -> MarkdownParser:
        """Create a parser instance."""
        return MarkdownParser()

    def test_parse_plain_text(self, parser: MarkdownParser):
        assert parser.parse("Hello, world!") == [Paragraph("Hello, world!")]

    def test_empty_input(self, parser: MarkdownParser):
        assert parser.parse("") == []
        assert parser.parse("\n\n   \n") == []

    def test_each_line_is_its_own_paragraph(self, parser: MarkdownParser):
        assert parser.parse("one\ntwo") == [Paragraph("one"), Paragraph("two")]

    def test_paragraph_is_trimmed(self, parser: MarkdownParser):
        assert parser.parse("   padded   ") == [Paragraph("padded")]

    def test_end_to_end_document(self, parser: MarkdownParser):
        text = (
            "# Title\n\nSome **bold** and *italic* text.\n\n"
            "- item one\n- item two\n\n| a | b |\n| - | - |\n| 1 | 2 |"
        )

        assert parser.parse(text) == [
            Heading(level=1, content="Title"),
            Paragraph("Some <strong>bold</strong> and <em>italic</em> text."),
            ItemList(ordered=False, items=["item one", "item two"]),
            Table(header=["a", "b"], rows=[["1", "2"]]),
        ]

    def test_parse_is_deterministic(self, parser: MarkdownParser, sample_markdown: str):
        assert parser.parse(sample_markdown) == parser.parse(sample_markdown)
        assert parse_markdown(sample_markdown) == parser.parse(sample_markdown)


class TestHeadings:
    """Tests for heading detection."""

    @pytest.mark.parametrize("level", [1, 2, 3])
    def test_levels_one_to_three(self, level: int):
        assert parse_markdown("#" * level + " x") == [Heading(level=level, content="x")]

    @pytest.mark.parametrize("line", ["#### x", "##### x", "###### x"])
    def test_deeper_levels_are_dropped(self, line: str):
        assert parse_markdown(line) == []

    def test_dropped_heading_does_not_flush_list(self):
        blocks = parse_markdown("- a\n#### hidden\n- b")
        assert blocks == [ItemList(ordered=False, items=["a", "b"])]

    def test_heading_content_is_formatted(self):
        assert parse_markdown("## A *fine* day") == [
            Heading(level=2, content="A <em>fine</em> day")
        ]

    def test_heading_needs_space(self):
        assert parse_markdown("#tag") == [Paragraph("#tag")]


class TestLists:
    """Tests for bullet lists."""

    def test_dash_and_star_markers(self):
        assert parse_markdown("- one\n* two") == [
            ItemList(ordered=False, items=["one", "two"])
        ]

    def test_blank_line_ends_list(self):
        assert parse_markdown("- one\n\n- two") == [
            ItemList(ordered=False, items=["one"]),
            ItemList(ordered=False, items=["two"]),
        ]

    def test_numbered_lines_are_paragraphs(self):
        assert parse_markdown("1. first") == [Paragraph("1. first")]


class TestTables:
    """Tests for pipe tables."""

    def test_single_row_has_no_header(self):
        assert parse_markdown("| a | b |") == [Table(header=None, rows=[["a", "b"]])]

    def test_rows_without_edge_pipes(self):
        assert parse_markdown("a | b\nc | d") == [
            Table(header=["a", "b"], rows=[["c", "d"]])
        ]

    def test_cells_are_formatted(self):
        assert parse_markdown("| **x** | y |") == [
            Table(header=None, rows=[["<strong>x</strong>", "y"]])
        ]

    def test_non_table_line_ends_table(self):
        assert parse_markdown("| a |\nafter") == [
            Table(header=None, rows=[["a"]]),
            Paragraph("after"),
        ]

    @pytest.mark.parametrize("row", ["|---|---|", "| --- | --- |", "|-|"])
    def test_separator_rows_are_skipped(self, row: str):
        parser = MarkdownParser()
        assert parser.is_separator_row(row)
        assert parser.parse(row) == []

    def test_separator_threshold(self):
        parser = MarkdownParser()
        at_threshold = "|" + "-" * 80 + "x" * 20 + "|"
        below_threshold = "|" + "-" * 79 + "x" * 21 + "|"

        assert parser.is_separator_row(at_threshold)
        assert not parser.is_separator_row(below_threshold)
        assert parser.parse(below_threshold) == [
            Table(header=None, rows=[["-" * 79 + "x" * 21]])
        ]

    def test_pipe_without_dashes_is_data(self):
        assert not MarkdownParser().is_separator_row("| |")

    def test_split_cells_keeps_inner_empty_cells(self):
        assert MarkdownParser.split_cells("| a || b |") == [" a ", "", " b "]


class TestCodeBlocks:
    """Tests for fenced code."""

    def test_code_block_keeps_raw_lines(self):
        blocks = parse_markdown("```\n**not bold**\n  <tag>\n```")
        assert blocks == [CodeBlock(raw_lines=["**not bold**", "  <tag>"])]
        assert blocks[0].code == "**not bold**\n  <tag>"

    def test_fence_anywhere_in_line_toggles(self):
        assert parse_markdown("text ```python\nx = 1\n```") == [
            CodeBlock(raw_lines=["x = 1"])
        ]

    def test_empty_closed_code_block_is_emitted(self):
        assert parse_markdown("```\n```") == [CodeBlock(raw_lines=[])]

    def test_unterminated_code_block_is_kept(self):
        assert parse_markdown("```\nline one\nline two") == [
            CodeBlock(raw_lines=["line one", "line two"])
        ]

    def test_unterminated_empty_code_block_is_dropped(self):
        assert parse_markdown("para\n```") == [Paragraph("para")]


class TestBlockquotes:
    """Tests for blockquote collection and line classification."""

    def test_quote_lines_are_classified(self):
        blocks = parse_markdown("> plain\n>\n> - bullet\n> 2. second")

        assert blocks == [
            Blockquote(lines=[
                QuoteLine(kind=QuoteLineKind.TEXT, text="plain"),
                QuoteLine(kind=QuoteLineKind.BLANK),
                QuoteLine(kind=QuoteLineKind.BULLET, text="bullet"),
                QuoteLine(kind=QuoteLineKind.NUMBERED, text="second", label="2"),
            ])
        ]

    def test_marker_without_space(self):
        assert parse_markdown(">tight") == [
            Blockquote(lines=[QuoteLine(kind=QuoteLineKind.TEXT, text="tight")])
        ]

    def test_quote_content_is_formatted(self):
        blocks = parse_markdown("> **loud**")
        assert blocks[0].lines[0].text == "<strong>loud</strong>"

    def test_blank_line_ends_quote(self):
        blocks = parse_markdown("> one\n\n> two")
        assert len(blocks) == 2
        assert all(isinstance(block, Blockquote) for block in blocks)


class TestRules:
    """Tests for horizontal rules."""

    @pytest.mark.parametrize("line", ["---", "***", "___", "  ---  "])
    def test_rule_markers(self, line: str):
        assert parse_markdown(line) == [Rule()]

    def test_rule_flushes_list(self):
        assert parse_markdown("- a\n---") == [
            ItemList(ordered=False, items=["a"]),
            Rule(),
        ]


class TestMutualExclusion:
    """An open list, table, quote or code block is flushed before another starts."""

    @pytest.mark.parametrize(
        "text, expected_types",
        [
            ("- item\n> quote", [ItemList, Blockquote]),
            ("> quote\n- item", [Blockquote, ItemList]),
            ("| a |\n- item", [Table, ItemList]),
            ("- item\n| a |", [ItemList, Table]),
            ("| a |\n> quote", [Table, Blockquote]),
            ("> quote\n| a |", [Blockquote, Table]),
            ("- item\n```\ncode\n```", [ItemList, CodeBlock]),
            ("> quote\n```\ncode\n```", [Blockquote, CodeBlock]),
            ("| a |\n```\ncode\n```", [Table, CodeBlock]),
            ("```\ncode\n```\n- item", [CodeBlock, ItemList]),
            ("```\ncode\n```\n> quote", [CodeBlock, Blockquote]),
            ("```\ncode\n```\n| a |", [CodeBlock, Table]),
        ],
    )
    def test_pairwise_flush(self, text: str, expected_types: list):
        blocks = parse_markdown(text)
        assert [type(block) for block in blocks] == expected_types

    def test_code_swallows_other_markers(self):
        blocks = parse_markdown("```\n- item\n> quote\n| a |\n# h\n```")
        assert blocks == [CodeBlock(raw_lines=["- item", "> quote", "| a |", "# h"])]

    def test_everything_flushed_at_end(self):
        blocks = parse_markdown("| a |\n| b |")
        assert blocks == [Table(header=["a"], rows=[["b"]])]
