"""Terminal surface: styled documents as rich Text."""

from typing import Optional

from rich.style import Style
from rich.text import Text

from markdown_spans.formatting.document import StyledDocument
from markdown_spans.formatting.ir import OBJECT_REPLACEMENT, SchemeKind, TextAttributes
from markdown_spans.formatting.rules import LINE_TERMINATORS

QUOTE_BAR = "\u2502"


def _style_for(attributes: TextAttributes, link: Optional[str] = None) -> Style:
    return Style(
        bold=attributes.bold or None,
        italic=attributes.italic or None,
        color=attributes.foreground,
        bgcolor=attributes.background or attributes.block_background,
        underline=True if link else None,
        link=link,
    )


def to_rich_text(document: StyledDocument) -> Text:
    """Convert a StyledDocument into a rich Text for console output.

    Links become terminal hyperlinks, embedded images are shown as
    ``[image: alt]`` and quote lines get a bar in place of the leading space.
    Relative scale has no terminal equivalent; headings show as bold.
    """
    text = Text()
    segments = document.segments()
    source = "".join(segment.text for segment in segments)
    offset = 0
    for segment in segments:
        attributes = segment.attributes
        content = segment.text
        at_line_start = offset == 0 or source[offset - 1] in LINE_TERMINATORS
        offset += len(content)

        if attributes.embedded is not None and content == OBJECT_REPLACEMENT:
            embedded = attributes.embedded
            text.append(
                f"[image: {embedded.alt_text or embedded.reference}]",
                style=Style(dim=True, italic=True),
            )
            continue

        if attributes.quote_marker and at_line_start and content.startswith(" "):
            text.append(QUOTE_BAR, style=Style(dim=True))
            content = content[1:]

        link = None
        if attributes.click_id is not None:
            payload = document.payloads.get(attributes.click_id)
            if payload is not None and payload.scheme_kind is SchemeKind.LINK:
                link = payload.resolved_value

        text.append(content, style=_style_for(attributes, link))
    return text
