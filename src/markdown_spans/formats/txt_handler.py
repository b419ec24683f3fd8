"""Plain text file handler."""

from pathlib import Path

from markdown_spans.formats.base import FormatHandler
from markdown_spans.formatting.document import StyledDocument


class TXTHandler(FormatHandler):
    """Handler for plain text (.txt) output.

    Styling is dropped. Embedded images are written as ``[image: alt]``;
    unresolved placeholders stay as their token text.
    """

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        return (".txt",)

    def write(self, document: StyledDocument, path: Path) -> None:
        """Write the document's plain text."""
        path.write_text(document.plain_text, encoding="utf-8")
