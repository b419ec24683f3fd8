"""Mutable text buffer whose style runs follow the characters they cover."""

from typing import Iterator, Optional

from markdown_spans.formatting.ir import StyleRun, TextAttributes


def _map_offset(offset: int, start: int, end: int, length: int, is_start: bool) -> int:
    """Map a run boundary across the replacement of ``[start, end)``.

    ``length`` is the size of the inserted text. Run boundaries are
    exclusive: text inserted exactly at a run's start or end is not
    absorbed into the run.
    """
    if offset < start or (offset == start and (start < end or not is_start)):
        return offset
    if offset >= end:
        return offset + length - (end - start)
    return start if is_start else start + length


class SpannedBuffer:
    """A character buffer plus the style runs attached to it.

    Every edit re-maps existing runs so they keep covering the same
    characters. Runs that collapse to zero length are dropped.

    Attributes:
        text: Current buffer content
        runs: Style runs in the order they were added
    """

    def __init__(self, text: str = "") -> None:
        self.text = text
        self.runs: list[StyleRun] = []

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def replace(self, start: int, end: int, replacement: str) -> int:
        """Replace ``[start, end)`` with ``replacement``.

        Returns:
            Net number of characters removed from the buffer
        """
        if not 0 <= start <= end <= len(self.text):
            raise IndexError(f"Range [{start}, {end}) outside buffer of {len(self.text)}")

        self.text = self.text[:start] + replacement + self.text[end:]

        length = len(replacement)
        kept: list[StyleRun] = []
        for run in self.runs:
            run.start = _map_offset(run.start, start, end, length, is_start=True)
            run.end = _map_offset(run.end, start, end, length, is_start=False)
            if run.end > run.start:
                kept.append(run)
        self.runs = kept

        return (end - start) - length

    def delete(self, start: int, end: int) -> int:
        """Delete ``[start, end)``; returns the number of characters removed."""
        return self.replace(start, end, "")

    def insert(self, offset: int, text: str) -> int:
        """Insert ``text`` at ``offset``; returns the (negative) net removal."""
        return self.replace(offset, offset, text)

    def add_run(self, start: int, end: int, attributes: TextAttributes) -> Optional[StyleRun]:
        """Attach attributes to ``[start, end)``. Empty ranges are ignored."""
        if end <= start or attributes.is_empty:
            return None
        run = StyleRun(start=start, end=end, attributes=attributes)
        self.runs.append(run)
        return run

    def find(self, needle: str) -> int:
        """Literal search; returns -1 when ``needle`` is absent."""
        return self.text.find(needle)

    def runs_at(self, offset: int) -> Iterator[StyleRun]:
        """Iterate over runs covering the character at ``offset``."""
        return (run for run in self.runs if run.covers(offset))
