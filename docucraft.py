#!/usr/bin/env python3
"""
DocuCraft - Markdown drafts to styled documents

Simple usage:
    python docucraft.py notes.md                 # Outputs notes.docx
    python docucraft.py notes.md --format pdf    # Outputs notes.pdf
    python docucraft.py /folder/path -f html     # Converts every draft in folder
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from docucraft.cli import app

if __name__ == "__main__":
    app()
