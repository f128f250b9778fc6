"""Tests for the document converter."""

from pathlib import Path

import pytest
from docx import Document

from docucraft.core.converter import ConversionError, DocumentConverter


class TestDocumentConverter:
    """Tests for the DocumentConverter class."""

    @pytest.fixture
    def converter(self) -> DocumentConverter:
        return DocumentConverter()

    def test_build_tree(self, converter: DocumentConverter, sample_markdown: str):
        tree = converter.build_tree(sample_markdown)

        assert tree.find("h1").get_text() == "Title"
        assert tree.find("table") is not None

    def test_convert_markdown_to_docx(
        self, converter: DocumentConverter, tmp_markdown_file: Path, tmp_path: Path
    ):
        output = tmp_path / "draft.docx"

        assert converter.convert_file(tmp_markdown_file, output)
        texts = [p.text for p in Document(str(output)).paragraphs]
        assert "Title" in texts

    @pytest.mark.parametrize("suffix", [".pdf", ".html"])
    def test_convert_markdown_to_other_formats(
        self,
        converter: DocumentConverter,
        tmp_markdown_file: Path,
        tmp_path: Path,
        suffix: str,
    ):
        output = tmp_path / f"draft{suffix}"
        assert converter.convert_file(tmp_markdown_file, output)
        assert output.stat().st_size > 0

    def test_live_html_input_is_used_as_is(
        self, converter: DocumentConverter, tmp_path: Path
    ):
        source = tmp_path / "edited.html"
        source.write_text(
            '<p style="text-align:center"><b>**kept**</b></p>', encoding="utf-8"
        )
        output = tmp_path / "edited.docx"

        assert converter.convert_file(source, output)
        para = Document(str(output)).paragraphs[0]
        # Markdown markers inside live HTML are not parsed again
        assert para.text == "**kept**"
        assert para.runs[0].bold

    def test_txt_drafts_are_parsed(self, converter: DocumentConverter, tmp_path: Path):
        source = tmp_path / "notes.txt"
        source.write_text("## Notes", encoding="utf-8")
        output = tmp_path / "notes.html"

        assert converter.convert_file(source, output)
        assert "<h2>Notes</h2>" in output.read_text(encoding="utf-8")

    def test_convert_text(self, converter: DocumentConverter, tmp_path: Path):
        output = tmp_path / "memo.html"

        assert converter.convert_text("Hello **there**", output)
        assert "<strong>there</strong>" in output.read_text(encoding="utf-8")

    def test_file_not_found(self, converter: DocumentConverter, tmp_path: Path):
        with pytest.raises(ConversionError, match="not found"):
            converter.convert_file(tmp_path / "missing.md", tmp_path / "out.docx")

    def test_unsupported_input(self, converter: DocumentConverter, tmp_path: Path):
        source = tmp_path / "file.rtf"
        source.write_text("content")

        with pytest.raises(ConversionError, match="Unsupported input format"):
            converter.convert_file(source, tmp_path / "out.docx")

    def test_unsupported_output(
        self, converter: DocumentConverter, tmp_markdown_file: Path, tmp_path: Path
    ):
        with pytest.raises(ConversionError, match="Unsupported export format"):
            converter.convert_file(tmp_markdown_file, tmp_path / "out.odt")

    def test_empty_input(self, converter: DocumentConverter, tmp_path: Path):
        source = tmp_path / "empty.md"
        source.write_text("   \n\n")

        with pytest.raises(ConversionError, match="no text"):
            converter.convert_file(source, tmp_path / "out.docx")

    def test_empty_text(self, converter: DocumentConverter, tmp_path: Path):
        with pytest.raises(ConversionError, match="empty"):
            converter.convert_text("", tmp_path / "out.docx")

    def test_invalid_encoding(self, converter: DocumentConverter, tmp_path: Path):
        source = tmp_path / "latin.md"
        source.write_bytes(b"caf\xe9")

        with pytest.raises(ConversionError, match="UTF-8"):
            converter.convert_file(source, tmp_path / "out.docx")
