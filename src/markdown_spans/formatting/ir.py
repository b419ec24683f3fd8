"""Intermediate Representation for styled text.

This module defines the data structures produced by the renderer: style
runs over the final text, the attributes they carry, click payloads for
interactive ranges, and the placeholder records used while remote images
are still being fetched.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, Flag, auto
from io import BytesIO
from pathlib import Path
from typing import Optional


# Character the rendering surface replaces with embedded content
OBJECT_REPLACEMENT = "\ufffc"


class TextStyle(Flag):
    """Text styling flags (combinable with |)."""

    NONE = 0
    BOLD = auto()
    ITALIC = auto()
    MONOSPACE = auto()
    QUOTE = auto()


class SchemeKind(str, Enum):
    """Kinds of interactive content a click payload can describe."""

    LINK = "link"
    IMAGE = "image"


@dataclass
class EmbeddedImage:
    """Image carried by an embedded-content marker run.

    Attributes:
        reference: The reference string from the markdown source
        alt_text: Alternative text from the markdown source
        resource_id: Identifier of a bundled resource (local images)
        data: Raw image bytes (remotely resolved images)
        format: Image format (png, jpeg, etc.)
        width: Width in pixels (if known)
        height: Height in pixels (if known)
    """

    reference: str
    alt_text: str = ""
    resource_id: Optional[str] = None
    data: Optional[bytes] = None
    format: str = "png"
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def is_local(self) -> bool:
        """Check if this image comes from a bundled resource."""
        return self.resource_id is not None

    def open(self) -> BytesIO:
        """Return a readable stream over the image bytes."""
        if self.data is not None:
            return BytesIO(self.data)
        if self.resource_id is not None:
            return BytesIO(Path(self.resource_id).read_bytes())
        raise ValueError(f"Image {self.reference!r} has no data")


@dataclass(frozen=True)
class TextAttributes:
    """A set of presentation attributes applied to a range of text.

    Attributes:
        style: Combined style flags
        foreground: Foreground colour as ``#RRGGBB``
        background: Character background colour as ``#RRGGBB``
        block_background: Full-line background colour as ``#RRGGBB``
        relative_scale: Font size relative to the surface default
        click_id: Key into the document's click payload table
        embedded: Embedded content shown in place of the marker character
    """

    style: TextStyle = TextStyle.NONE
    foreground: Optional[str] = None
    background: Optional[str] = None
    block_background: Optional[str] = None
    relative_scale: Optional[float] = None
    click_id: Optional[int] = None
    embedded: Optional[EmbeddedImage] = None

    @property
    def bold(self) -> bool:
        return TextStyle.BOLD in self.style

    @property
    def italic(self) -> bool:
        return TextStyle.ITALIC in self.style

    @property
    def monospace(self) -> bool:
        return TextStyle.MONOSPACE in self.style

    @property
    def quote_marker(self) -> bool:
        return TextStyle.QUOTE in self.style

    @property
    def is_empty(self) -> bool:
        """Check if no attribute is set."""
        return self == TextAttributes()

    def with_values(self, **changes) -> "TextAttributes":
        """Return a copy with the given attributes changed."""
        return replace(self, **changes)

    def compose(self, other: "TextAttributes") -> "TextAttributes":
        """Layer ``other`` on top of these attributes.

        Style flags accumulate; valued attributes are taken from ``other``
        where it sets them.
        """
        return TextAttributes(
            style=self.style | other.style,
            foreground=other.foreground or self.foreground,
            background=other.background or self.background,
            block_background=other.block_background or self.block_background,
            relative_scale=(
                other.relative_scale
                if other.relative_scale is not None
                else self.relative_scale
            ),
            click_id=other.click_id if other.click_id is not None else self.click_id,
            embedded=other.embedded or self.embedded,
        )


@dataclass
class StyleRun:
    """A range of the final text plus the attributes applied to it.

    Runs are additive: several may cover overlapping ranges and the
    rendering surface composes them.
    """

    start: int
    end: int
    attributes: TextAttributes

    def __len__(self) -> int:
        return self.end - self.start

    def covers(self, offset: int) -> bool:
        """Check if the character at ``offset`` lies in this run."""
        return self.start <= offset < self.end


@dataclass
class ClickPayload:
    """Data delivered to the interaction boundary when a range is activated.

    Attributes:
        click_id: Key of this payload in the document's payload table
        scheme_kind: Whether the range is a link or an image
        raw_match_text: The full markdown text that produced the range
        resolved_value: Link target or image reference
        located_range: ``(start, end)`` of the range in the final text, if placed
    """

    click_id: int
    scheme_kind: SchemeKind
    raw_match_text: str
    resolved_value: str
    located_range: Optional[tuple[int, int]] = None


@dataclass(frozen=True)
class Placeholder:
    """Stand-in token for an image awaiting external resolution."""

    token: str
    click_id: int
    reference: str
    alt_text: str = ""


@dataclass(frozen=True)
class ResolutionRequest:
    """Event asking the fetch collaborator to resolve an image reference."""

    token: str
    reference: str


@dataclass
class TextSegment:
    """A piece of the final text with all covering attributes composed."""

    text: str
    attributes: TextAttributes = field(default_factory=TextAttributes)

    def __str__(self) -> str:
        return self.text
