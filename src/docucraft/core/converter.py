"""Main draft-to-export conversion orchestrator."""

import logging
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup

from docucraft.core.walker import DocumentWalker
from docucraft.formats import (
    LIVE_EXTENSIONS,
    SOURCE_EXTENSIONS,
    SUPPORTED_EXTENSIONS,
    get_handler,
)
from docucraft.formatting.html_renderer import load_tree, render_html
from docucraft.formatting.parser import MarkdownParser

logger = logging.getLogger(__name__)


class ConversionError(Exception):
    """Error during document conversion."""

    pass


class DocumentConverter:
    """Orchestrates the conversion pipeline.

    Pipeline:
    1. Read the input (markdown draft or live HTML document)
    2. Parse the draft to blocks and render them as the live tree
    3. Pick the export handler from the output extension
    4. Walk the tree and write the artifact
    """

    def __init__(
        self,
        parser: Optional[MarkdownParser] = None,
        walker: Optional[DocumentWalker] = None,
    ) -> None:
        self.parser = parser or MarkdownParser()
        self.walker = walker or DocumentWalker()

    def build_tree(self, text: str) -> BeautifulSoup:
        """Parse a markdown draft and load its rendering as a live tree."""
        blocks = self.parser.parse(text)
        logger.debug("Parsed %d blocks", len(blocks))
        return load_tree(render_html(blocks))

    def convert_file(self, input_path: Path, output_path: Path) -> bool:
        """Convert a document file.

        Args:
            input_path: Markdown draft or live HTML document
            output_path: Destination; its extension selects the export format

        Returns:
            True if the artifact was written

        Raises:
            ConversionError: If the input cannot be converted
        """
        if not input_path.exists():
            raise ConversionError(f"Input file not found: {input_path}")

        ext = input_path.suffix.lower()
        if ext not in SOURCE_EXTENSIONS + LIVE_EXTENSIONS:
            raise ConversionError(
                f"Unsupported input format: {ext}. "
                f"Supported: {', '.join(SOURCE_EXTENSIONS + LIVE_EXTENSIONS)}"
            )

        try:
            text = input_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ConversionError(f"Input file is not valid UTF-8: {e}") from e

        if not text.strip():
            raise ConversionError("Input file contains no text")

        if ext in LIVE_EXTENSIONS:
            tree = load_tree(text)
        else:
            tree = self.build_tree(text)

        return self.export(tree, output_path)

    def convert_text(self, text: str, output_path: Path) -> bool:
        """Convert an in-memory markdown draft.

        Raises:
            ConversionError: If the text is empty or the format unsupported
        """
        if not text.strip():
            raise ConversionError("Input text is empty")
        return self.export(self.build_tree(text), output_path)

    def export(self, tree: BeautifulSoup, output_path: Path) -> bool:
        """Export a live tree with the handler matching output_path."""
        ext = output_path.suffix.lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise ConversionError(
                f"Unsupported export format: {ext}. "
                f"Supported: {', '.join(SUPPORTED_EXTENSIONS)}"
            )

        handler = get_handler(ext)(walker=self.walker)
        logger.info("Exporting %s with %s", output_path, type(handler).__name__)
        return handler.export(tree, output_path)
