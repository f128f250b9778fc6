"""Pytest fixtures for DocuCraft tests."""

import base64
import io

import pytest
from PIL import Image as PILImage

from docucraft import config


@pytest.fixture(autouse=True)
def reset_settings():
    """Make every test start from freshly loaded settings."""
    config._settings = None
    yield
    config._settings = None


@pytest.fixture
def sample_markdown() -> str:
    """A draft touching every block kind the parser produces."""
    return (
        "# Title\n"
        "\n"
        "Some **bold** and *italic* text.\n"
        "\n"
        "- item one\n"
        "- item two\n"
        "\n"
        "| a | b |\n"
        "| - | - |\n"
        "| 1 | 2 |\n"
        "\n"
        "> A quoted line\n"
        "> - a quoted bullet\n"
        "\n"
        "```\n"
        "print('hi')\n"
        "```\n"
        "\n"
        "---\n"
        "\n"
        "Closing with `code`."
    )


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    PILImage.new("RGB", (8, 6), "red").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_data_uri(png_bytes: bytes) -> str:
    """The PNG fixture as a data URI."""
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def tmp_markdown_file(tmp_path, sample_markdown: str):
    """Create a temporary markdown draft for testing."""
    file_path = tmp_path / "draft.md"
    file_path.write_text(sample_markdown, encoding="utf-8")
    return file_path
