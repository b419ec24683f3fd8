"""Markdown renderer: rewrites markdown into a styled document."""

import logging
import re
from typing import Callable, Optional

from markdown_spans.formatting.document import (
    InteractionHandler,
    ResolvedImage,
    StyledDocument,
)
from markdown_spans.formatting.ir import (
    OBJECT_REPLACEMENT,
    EmbeddedImage,
    ResolutionRequest,
    SchemeKind,
    TextAttributes,
)
from markdown_spans.formatting.placeholders import PlaceholderFactory
from markdown_spans.formatting.resources import NullResourceResolver, ResourceResolver
from markdown_spans.formatting.rules import BULLET, RULES, Rule, SyntaxKind

logger = logging.getLogger(__name__)

ResolutionHandler = Callable[[ResolutionRequest], None]


class MalformedMatchError(Exception):
    """A match lacks a capture group its rule needs."""

    pass


def _group(match: re.Match, name: str) -> str:
    value = match.group(name)
    if value is None:
        raise MalformedMatchError(f"missing group {name!r} in {match.group()!r}")
    return value


def _group_start(match: re.Match, name: str) -> int:
    _group(match, name)
    return match.start(name)


class MarkdownRenderer:
    """Apply the rule table to markdown text.

    Each rule makes one pass over the whole buffer. Matches for a pass are
    taken from the buffer as it was before the pass began; ``removed``
    tracks how far earlier edits of the same pass have shifted the text so
    every later match is corrected before it is applied.

    Images that the resolver cannot find locally are replaced by a
    placeholder token and a ResolutionRequest is sent to
    ``on_resolution_request`` once the document is complete. The host
    answers with ``complete_image_resolution``.
    """

    def __init__(
        self,
        resolver: Optional[ResourceResolver] = None,
        on_resolution_request: Optional[ResolutionHandler] = None,
        on_interaction: Optional[InteractionHandler] = None,
        rules: tuple[Rule, ...] = RULES,
        max_image_width: Optional[int] = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            resolver: Bundled image lookup (default: nothing is bundled)
            on_resolution_request: Receives requests for remote images
            on_interaction: Receives payloads of activated links and images
            rules: Ordered rule table
            max_image_width: Width resolved images are scaled down to
        """
        self.resolver = resolver or NullResourceResolver()
        self.on_resolution_request = on_resolution_request
        self.on_interaction = on_interaction
        self.rules = rules
        self.max_image_width = max_image_width
        self.placeholders = PlaceholderFactory()
        self.document: Optional[StyledDocument] = None

        self._handlers = {
            SyntaxKind.LINK: self._apply_link,
            SyntaxKind.BOLD: self._apply_bold,
            SyntaxKind.EMPHASIS: self._apply_emphasis,
            SyntaxKind.ORDERED_LIST: self._apply_ordered_list,
            SyntaxKind.UNORDERED_LIST: self._apply_unordered_list,
            SyntaxKind.CODE_BLOCK: self._apply_code_block,
            SyntaxKind.INLINE_CODE: self._apply_inline_code,
            SyntaxKind.QUOTE: self._apply_quote,
            SyntaxKind.IMAGE: self._apply_image,
        }

    def render(self, markdown_text: str) -> StyledDocument:
        """Convert markdown text to a StyledDocument.

        Args:
            markdown_text: Raw markdown

        Returns:
            StyledDocument with the rewritten text, runs and payloads
        """
        document = StyledDocument(
            markdown_text,
            on_interaction=self.on_interaction,
            max_image_width=self.max_image_width,
        )

        for rule in self.rules:
            logger.debug("Evaluating rule: %s", rule.kind.name)
            self._apply_rule(rule, document)

        document.finalize()
        self.document = document

        # Requests go out only once the buffer is final, so a resolver that
        # answers synchronously never sees a half-rewritten document
        for request in document.requests:
            self._emit(request)

        return document

    def _apply_rule(self, rule: Rule, document: StyledDocument) -> None:
        matches = list(rule.pattern.finditer(document.buffer.text))
        removed = 0
        for match in matches:
            try:
                removed += self._apply_match(rule, match, removed, document)
            except MalformedMatchError as e:
                logger.debug("Skipping %s match: %s", rule.kind.name, e)
        if matches:
            logger.debug("%s: %d match(es)", rule.kind.name, len(matches))

    def _apply_match(
        self, rule: Rule, match: re.Match, removed: int, document: StyledDocument
    ) -> int:
        """Apply one match; returns the net number of characters it removed."""
        if rule.kind.heading_level is not None:
            return self._apply_heading(rule, match, removed, document)
        return self._handlers[rule.kind](rule, match, removed, document)

    def _emit(self, request: ResolutionRequest) -> None:
        if self.on_resolution_request is None:
            logger.debug("No resolution handler for %s", request.reference)
            return
        self.on_resolution_request(request)

    def _apply_heading(
        self, rule: Rule, match: re.Match, removed: int, document: StyledDocument
    ) -> int:
        text = _group(match, "text")
        start = match.start() - removed
        marker_length = _group_start(match, "text") - match.start()

        buffer = document.buffer
        buffer.delete(start, start + marker_length)
        buffer.add_run(start, start + len(text), rule.run_attributes)
        return marker_length

    def _strip_delimiters(
        self,
        rule: Rule,
        match: re.Match,
        removed: int,
        document: StyledDocument,
        group: str,
        width: int,
    ) -> int:
        _group(match, group)
        start = match.start() - removed
        end = match.end() - removed

        buffer = document.buffer
        buffer.delete(end - width, end)
        buffer.delete(start, start + width)
        buffer.add_run(start, end - 2 * width, rule.run_attributes)
        return 2 * width

    def _apply_bold(self, rule, match, removed, document) -> int:
        return self._strip_delimiters(rule, match, removed, document, "text", 2)

    def _apply_emphasis(self, rule, match, removed, document) -> int:
        return self._strip_delimiters(rule, match, removed, document, "text", 1)

    def _apply_inline_code(self, rule, match, removed, document) -> int:
        return self._strip_delimiters(rule, match, removed, document, "code", 1)

    def _apply_code_block(self, rule, match, removed, document) -> int:
        return self._strip_delimiters(rule, match, removed, document, "code", 3)

    def _apply_quote(self, rule, match, removed, document) -> int:
        _group(match, "text")
        start = match.start() - removed
        end = match.end() - removed

        buffer = document.buffer
        buffer.replace(start, start + 1, " ")
        buffer.add_run(start, end, rule.run_attributes)
        return 0

    def _apply_ordered_list(self, rule, match, removed, document) -> int:
        indent = _group(match, "indent")
        marker = _group(match, "marker")
        start = match.start() - removed
        document.buffer.add_run(
            start, start + len(indent) + len(marker), rule.run_attributes
        )
        return 0

    def _apply_unordered_list(self, rule, match, removed, document) -> int:
        _group(match, "text")
        marker_start = _group_start(match, "marker") - removed
        start = match.start() - removed
        end = match.end() - removed

        buffer = document.buffer
        buffer.replace(marker_start, marker_start + 1, BULLET)
        buffer.add_run(start, end, rule.run_attributes)
        return 0

    def _apply_link(self, rule, match, removed, document) -> int:
        link_text = _group(match, "text")
        url = _group(match, "url").strip()
        start = match.start() - removed
        end = match.end() - removed

        payload = document.add_payload(SchemeKind.LINK, match.group(), url)

        buffer = document.buffer
        delta = buffer.replace(start, end, link_text)
        buffer.add_run(
            start,
            start + len(link_text),
            rule.run_attributes.with_values(click_id=payload.click_id),
        )
        return delta

    def _apply_image(self, rule, match, removed, document) -> int:
        alt_text = _group(match, "alt")
        reference = _group(match, "ref").strip()
        if not reference:
            raise MalformedMatchError(f"empty image reference in {match.group()!r}")
        start = match.start() - removed
        end = match.end() - removed

        payload = document.add_payload(SchemeKind.IMAGE, match.group(), reference)
        buffer = document.buffer

        resource_id = self.resolver.resolve_bundled_image(reference)
        if resource_id is not None:
            delta = buffer.replace(start, end, OBJECT_REPLACEMENT)
            embedded = EmbeddedImage(
                reference=reference, alt_text=alt_text, resource_id=resource_id
            )
            buffer.add_run(
                start,
                start + 1,
                TextAttributes(click_id=payload.click_id, embedded=embedded),
            )
            return delta

        placeholder = self.placeholders.create(
            click_id=payload.click_id, reference=reference, alt_text=alt_text
        )
        delta = buffer.replace(start, end, placeholder.token)
        document.add_placeholder(placeholder)
        logger.debug("Image %s pending as %s", reference, placeholder.token)
        return delta

    def complete_image_resolution(self, token: str, image: ResolvedImage) -> bool:
        """Resolve a placeholder in the most recently rendered document.

        Tokens from earlier documents are not found and the call is a
        no-op.
        """
        if self.document is None:
            logger.debug("Nothing rendered yet, ignoring %s", token)
            return False
        return self.document.complete_image_resolution(token, image)
