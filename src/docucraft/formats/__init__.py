"""Document export handlers for DocuCraft."""

from docucraft.formats.base import ExportHandler
from docucraft.formats.docx_handler import DOCXHandler
from docucraft.formats.pdf_handler import PDFHandler
from docucraft.formats.html_handler import HTMLHandler

__all__ = [
    "ExportHandler",
    "DOCXHandler",
    "PDFHandler",
    "HTMLHandler",
]

# Map output file extensions to handlers
HANDLER_MAP: dict[str, type[ExportHandler]] = {
    ".docx": DOCXHandler,
    ".pdf": PDFHandler,
    ".html": HTMLHandler,
    ".htm": HTMLHandler,
}

SUPPORTED_EXTENSIONS = tuple(HANDLER_MAP.keys())

# Inputs: markdown drafts, or live documents already in HTML
SOURCE_EXTENSIONS = (".md", ".markdown", ".txt")
LIVE_EXTENSIONS = (".html", ".htm")


def get_handler(extension: str) -> type[ExportHandler]:
    """Get the appropriate handler class for an output file extension."""
    ext = extension.lower()
    if ext not in HANDLER_MAP:
        raise ValueError(
            f"Unsupported export format: {ext}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return HANDLER_MAP[ext]
