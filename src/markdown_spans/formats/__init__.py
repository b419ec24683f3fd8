"""Rendering surfaces for styled documents."""

from markdown_spans.formats.base import FormatHandler
from markdown_spans.formats.txt_handler import TXTHandler
from markdown_spans.formats.docx_handler import DOCXHandler

__all__ = [
    "FormatHandler",
    "TXTHandler",
    "DOCXHandler",
]

# Map file extensions to handlers
HANDLER_MAP: dict[str, type[FormatHandler]] = {
    ".txt": TXTHandler,
    ".docx": DOCXHandler,
}

SUPPORTED_EXTENSIONS = tuple(HANDLER_MAP.keys())


def get_handler(extension: str) -> type[FormatHandler]:
    """Get the appropriate handler class for a file extension."""
    ext = extension.lower()
    if ext not in HANDLER_MAP:
        raise ValueError(
            f"Unsupported output format: {ext}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
    return HANDLER_MAP[ext]
