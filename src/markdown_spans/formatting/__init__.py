"""Markdown rules, the renderer, and the styled document model."""

from markdown_spans.formatting.ir import (
    OBJECT_REPLACEMENT,
    TextStyle,
    TextAttributes,
    StyleRun,
    ClickPayload,
    SchemeKind,
    EmbeddedImage,
    Placeholder,
    ResolutionRequest,
    TextSegment,
)
from markdown_spans.formatting.images import ImageDecodeError, decode_image
from markdown_spans.formatting.placeholders import PlaceholderFactory
from markdown_spans.formatting.resources import (
    ResourceResolver,
    NullResourceResolver,
    MappingResourceResolver,
    DirectoryResourceResolver,
)
from markdown_spans.formatting.document import StyledDocument
from markdown_spans.formatting.rules import RULES, Rule, SyntaxKind
from markdown_spans.formatting.renderer import MarkdownRenderer, MalformedMatchError

__all__ = [
    "OBJECT_REPLACEMENT",
    "TextStyle",
    "TextAttributes",
    "StyleRun",
    "ClickPayload",
    "SchemeKind",
    "EmbeddedImage",
    "Placeholder",
    "ResolutionRequest",
    "TextSegment",
    "ImageDecodeError",
    "decode_image",
    "PlaceholderFactory",
    "ResourceResolver",
    "NullResourceResolver",
    "MappingResourceResolver",
    "DirectoryResourceResolver",
    "StyledDocument",
    "RULES",
    "Rule",
    "SyntaxKind",
    "MarkdownRenderer",
    "MalformedMatchError",
]
