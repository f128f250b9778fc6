"""Tests for the CLI interface."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from docucraft.cli import app, generate_output_path


runner = CliRunner()


class TestGenerateOutputPath:
    """Tests for output path generation."""

    def test_replaces_extension_with_format(self):
        """Test that the export format becomes the extension."""
        input_path = Path("/path/to/notes.md")
        output = generate_output_path(input_path, "docx")

        assert output.name == "notes.docx"
        assert output.parent == input_path.parent

    def test_handles_spaces_in_filename(self):
        input_path = Path("/path/to/my notes.md")
        output = generate_output_path(input_path, "pdf")

        assert output.name == "my notes.pdf"

    def test_custom_output_directory(self):
        input_path = Path("/path/to/notes.md")
        output_dir = Path("/custom/output")
        output = generate_output_path(input_path, "html", output_dir)

        assert output.parent == output_dir
        assert output.name == "notes.html"

    def test_html_input_exported_as_html_gets_distinct_name(self, tmp_path: Path):
        """Test that the default output never names the input file."""
        input_path = tmp_path / "edited.html"
        output = generate_output_path(input_path, "html")

        assert output.name == "edited-export.html"
        assert output.parent == tmp_path


class TestCLI:
    """Tests for CLI commands."""

    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "DocuCraft" in result.stdout

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "--format" in result.stdout

    def test_missing_file_error(self, tmp_path: Path):
        result = runner.invoke(app, [str(tmp_path / "nonexistent.md")])

        assert result.exit_code != 0

    def test_unsupported_input_format(self, tmp_path: Path):
        unsupported = tmp_path / "file.xyz"
        unsupported.write_text("content")

        result = runner.invoke(app, [str(unsupported)])

        assert result.exit_code == 1
        assert "unsupported" in result.stdout.lower()

    def test_single_file_defaults_to_docx(self, tmp_markdown_file: Path):
        result = runner.invoke(app, [str(tmp_markdown_file)])

        assert result.exit_code == 0
        assert tmp_markdown_file.with_suffix(".docx").exists()

    def test_format_option(self, tmp_markdown_file: Path):
        result = runner.invoke(app, [str(tmp_markdown_file), "--format", "pdf"])

        assert result.exit_code == 0
        assert tmp_markdown_file.with_suffix(".pdf").read_bytes().startswith(b"%PDF")

    def test_invalid_format_option(self, tmp_markdown_file: Path):
        result = runner.invoke(app, [str(tmp_markdown_file), "-f", "odt"])

        assert result.exit_code != 0

    def test_output_option(self, tmp_markdown_file: Path, tmp_path: Path):
        output = tmp_path / "elsewhere" / "report.html"
        result = runner.invoke(app, [str(tmp_markdown_file), "-o", str(output)])

        assert result.exit_code == 0
        assert output.exists()

    def test_html_input_to_html_keeps_source(self, tmp_path: Path):
        source = tmp_path / "edited.html"
        markup = "<p>My <b>edited</b> doc</p>"
        source.write_text(markup, encoding="utf-8")

        result = runner.invoke(app, [str(source), "-f", "html"])

        assert result.exit_code == 0
        assert source.read_text(encoding="utf-8") == markup
        exported = (tmp_path / "edited-export.html").read_text(encoding="utf-8")
        assert "<b>edited</b>" in exported
        assert "<!DOCTYPE html>" in exported

    def test_output_option_equal_to_input_is_refused(self, tmp_path: Path):
        source = tmp_path / "edited.html"
        markup = "<p>My <b>edited</b> doc</p>"
        source.write_text(markup, encoding="utf-8")

        result = runner.invoke(app, [str(source), "-o", str(source), "-f", "html"])

        assert result.exit_code == 1
        assert "overwrite" in result.stdout
        assert source.read_text(encoding="utf-8") == markup

    def test_format_from_environment(self, tmp_markdown_file: Path, monkeypatch):
        monkeypatch.setenv("DOCUCRAFT_FORMAT", "html")

        result = runner.invoke(app, [str(tmp_markdown_file)])

        assert result.exit_code == 0
        assert tmp_markdown_file.with_suffix(".html").exists()

    def test_empty_draft_fails(self, tmp_path: Path):
        draft = tmp_path / "empty.md"
        draft.write_text("")

        result = runner.invoke(app, [str(draft)])

        assert result.exit_code == 1
        assert "no text" in result.stdout

    @patch("docucraft.cli.DocumentConverter")
    def test_failed_export_exits_nonzero(self, mock_converter_class, tmp_markdown_file: Path):
        mock_converter_class.return_value.convert_file.return_value = False

        result = runner.invoke(app, [str(tmp_markdown_file)])

        assert result.exit_code == 1
        mock_converter_class.return_value.convert_file.assert_called_once()
        call_args = mock_converter_class.return_value.convert_file.call_args
        assert call_args[0][0] == tmp_markdown_file

    @patch("docucraft.cli.DocumentConverter")
    def test_folder_processing(self, mock_converter_class, tmp_path: Path):
        (tmp_path / "one.md").write_text("# One")
        (tmp_path / "two.markdown").write_text("# Two")
        nested = tmp_path / "nested"
        nested.mkdir()
        (nested / "three.txt").write_text("Three")
        (tmp_path / "ignored.xyz").write_text("Ignored")
        (tmp_path / "exported.html").write_text("<p>not a draft</p>")
        mock_converter_class.return_value.convert_file.return_value = True

        result = runner.invoke(app, [str(tmp_path), "-f", "pdf"])

        assert result.exit_code == 0
        converter = mock_converter_class.return_value
        assert converter.convert_file.call_count == 3
        outputs = {call[0][1].name for call in converter.convert_file.call_args_list}
        assert outputs == {"one.pdf", "two.pdf", "three.pdf"}

    def test_folder_with_failures(self, tmp_path: Path):
        (tmp_path / "good.md").write_text("# Good")
        (tmp_path / "empty.md").write_text("")

        result = runner.invoke(app, [str(tmp_path)])

        assert result.exit_code == 1
        assert "1 succeeded, 1 failed" in result.stdout
        assert (tmp_path / "good.docx").exists()
        assert not (tmp_path / "empty.docx").exists()
