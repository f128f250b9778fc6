"""DocuCraft - Markdown drafts to live documents and portable exports."""

__version__ = "0.1.0"
