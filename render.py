#!/usr/bin/env python3
"""
markdown-spans - render simple Markdown into styled text

Simple usage:
    python render.py README.md                 # Print styled output
    python render.py README.md -o README.docx  # Write a Word document
    python render.py /folder/path --format .txt
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from markdown_spans.cli import app

if __name__ == "__main__":
    app()
