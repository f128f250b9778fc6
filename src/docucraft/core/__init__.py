"""Core tree walking and conversion logic for DocuCraft.

The converter lives in docucraft.core.converter; it depends on the export
handlers, which in turn depend on the walker, so it is not imported here.
"""

from docucraft.core.walker import DocumentWalker, NodeKind, RunStyle, walk, walk_html

__all__ = [
    "DocumentWalker",
    "NodeKind",
    "RunStyle",
    "walk",
    "walk_html",
]
