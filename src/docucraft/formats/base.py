"""Abstract base class for document export handlers."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from bs4 import Tag

from docucraft.core.walker import DocumentWalker
from docucraft.formatting.ir import FormattedDocument, HeadingBlock

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "DocuCraft Export"


class ExportHandler(ABC):
    """Abstract base class for export handlers.

    Each handler renders a live document tree into the bytes of one
    artifact format. Writing is shared: the artifact is rendered fully in
    memory first, so a failed export never leaves a partial file behind.
    """

    def __init__(self, walker: Optional[DocumentWalker] = None) -> None:
        self._walker = walker

    @property
    def walker(self) -> DocumentWalker:
        """Walker used by build_document, created on first use."""
        if self._walker is None:
            self._walker = DocumentWalker()
        return self._walker

    @property
    @abstractmethod
    def supported_extensions(self) -> tuple[str, ...]:
        """Return tuple of supported file extensions (e.g., ('.pdf',))."""
        ...

    @abstractmethod
    def render(self, tree: Tag) -> bytes:
        """Render the document tree to the artifact's bytes.

        Args:
            tree: Root of the live document tree. Must not be mutated.

        Returns:
            The complete artifact
        """
        ...

    def build_document(self, tree: Tag) -> FormattedDocument:
        """Walk the tree into a flattened document with a derived title."""
        blocks = self.walker.walk(tree)
        title = DEFAULT_TITLE
        for block in blocks:
            if isinstance(block, HeadingBlock) and block.plain_text.strip():
                title = block.plain_text.strip()
                break
        document = FormattedDocument(blocks=blocks, metadata={"title": title})
        logger.debug(
            "Walked %d blocks (%d images)", len(document.blocks), len(document.images)
        )
        return document

    def export(self, tree: Optional[Tag], path: Path) -> bool:
        """Render the tree and write it to path.

        Args:
            tree: Root of the live document tree
            path: Destination file

        Returns:
            True when the artifact was written, False otherwise
        """
        if tree is None:
            logger.error("Export target not found, nothing to export to %s", path)
            return False

        try:
            data = self.render(tree)
        except Exception:
            logger.exception("%s export failed for %s", type(self).__name__, path)
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            return False

        logger.info("Exported %s (%d bytes)", path, len(data))
        return True
