"""Abstract base class for rendering surfaces."""

from abc import ABC, abstractmethod
from pathlib import Path

from markdown_spans.formatting.document import StyledDocument
from markdown_spans.formatting.ir import OBJECT_REPLACEMENT, TextSegment


class FormatHandler(ABC):
    """Abstract base class for output format handlers.

    A handler is a rendering surface: it takes the text and style runs of a
    StyledDocument and presents them in its own format.
    """

    @property
    @abstractmethod
    def supported_extensions(self) -> tuple[str, ...]:
        """Return tuple of supported file extensions (e.g., ('.docx',))."""
        ...

    @abstractmethod
    def write(self, document: StyledDocument, path: Path) -> None:
        """Write styled document to file.

        Args:
            document: The rendered StyledDocument
            path: Path to write the output document
        """
        ...

    @staticmethod
    def split_lines(document: StyledDocument) -> list[list[TextSegment]]:
        """Group the document's segments into lines.

        Line terminators are dropped; a segment spanning several lines is
        split at each terminator.
        """
        lines: list[list[TextSegment]] = [[]]
        for segment in document.segments():
            parts = segment.text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
            for index, part in enumerate(parts):
                if index > 0:
                    lines.append([])
                if part:
                    lines[-1].append(TextSegment(text=part, attributes=segment.attributes))
        return lines

    @staticmethod
    def is_embedded(segment: TextSegment) -> bool:
        """Check if a segment is an embedded-content marker."""
        return segment.attributes.embedded is not None and segment.text == OBJECT_REPLACEMENT
