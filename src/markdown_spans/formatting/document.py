"""Styled document produced by the renderer.

The document owns the rewritten text, its style runs, the click payload
table and the placeholders of images still waiting for their data. Image
resolutions may arrive from other threads in any order; each one finds its
placeholder by searching the current text for the token, never by a stored
offset.
"""

import itertools
import logging
import threading
from dataclasses import replace
from typing import Callable, Optional, Union

from PIL import Image

from markdown_spans.formatting.buffer import SpannedBuffer
from markdown_spans.formatting.images import ImageDecodeError, decode_image
from markdown_spans.formatting.ir import (
    OBJECT_REPLACEMENT,
    ClickPayload,
    Placeholder,
    ResolutionRequest,
    SchemeKind,
    StyleRun,
    TextAttributes,
    TextSegment,
)

logger = logging.getLogger(__name__)

InteractionHandler = Callable[[ClickPayload], None]
ResolvedImage = Union[bytes, Image.Image, None]


class StyledDocument:
    """Render-ready text plus style runs and click payloads.

    Attributes:
        source: The markdown text the document was rendered from
        buffer: Working buffer holding the text and runs
        payloads: Click payloads keyed by click id
        placeholders: Pending image placeholders keyed by token
        requests: Resolution requests emitted for this document
        on_interaction: Callback receiving activated payloads
        max_image_width: Width resolved images are scaled down to
    """

    def __init__(
        self,
        source: str,
        on_interaction: Optional[InteractionHandler] = None,
        max_image_width: Optional[int] = None,
    ) -> None:
        self.source = source
        self.buffer = SpannedBuffer(source)
        self.payloads: dict[int, ClickPayload] = {}
        self.placeholders: dict[str, Placeholder] = {}
        self.requests: list[ResolutionRequest] = []
        self.on_interaction = on_interaction
        self.max_image_width = max_image_width
        self._click_ids = itertools.count(1)
        self._lock = threading.Lock()
        self._discarded = False

    @property
    def text(self) -> str:
        """Current text of the document.

        Use ``snapshot()`` when the text and runs must agree.
        """
        with self._lock:
            return self.buffer.text

    @property
    def runs(self) -> list[StyleRun]:
        """Copies of the current style runs, in application order."""
        with self._lock:
            return [replace(run) for run in self.buffer.runs]

    @property
    def pending_tokens(self) -> list[str]:
        """Tokens of images still waiting for resolution."""
        return list(self.placeholders)

    @property
    def is_discarded(self) -> bool:
        return self._discarded

    def snapshot(self) -> tuple[str, list[StyleRun]]:
        """Consistent copy of the text and runs."""
        with self._lock:
            return self.buffer.text, [replace(run) for run in self.buffer.runs]

    def add_payload(
        self, scheme_kind: SchemeKind, raw_match_text: str, resolved_value: str
    ) -> ClickPayload:
        """Register a click payload under a fresh click id."""
        payload = ClickPayload(
            click_id=next(self._click_ids),
            scheme_kind=scheme_kind,
            raw_match_text=raw_match_text,
            resolved_value=resolved_value,
        )
        self.payloads[payload.click_id] = payload
        return payload

    def add_placeholder(self, placeholder: Placeholder) -> ResolutionRequest:
        """Record a pending placeholder and the request that resolves it."""
        self.placeholders[placeholder.token] = placeholder
        request = ResolutionRequest(
            token=placeholder.token, reference=placeholder.reference
        )
        self.requests.append(request)
        return request

    def finalize(self) -> None:
        """Record where each click payload ended up in the final text."""
        with self._lock:
            self._locate_payloads()

    def _locate_payloads(self) -> None:
        located: dict[int, tuple[int, int]] = {}
        for run in self.buffer.runs:
            click_id = run.attributes.click_id
            if click_id is not None and click_id not in located:
                located[click_id] = (run.start, run.end)
        for click_id, payload in self.payloads.items():
            payload.located_range = located.get(click_id)

    def complete_image_resolution(self, token: str, image: ResolvedImage) -> bool:
        """Replace a placeholder token with the resolved image.

        Safe to call from any thread and in any order. Unknown, stale or
        already resolved tokens, discarded documents and missing or
        undecodable image data leave the document untouched.

        Args:
            token: The placeholder token from the resolution request
            image: Image bytes, a decoded Pillow image, or None on failure

        Returns:
            True if a placeholder was replaced
        """
        if image is None:
            logger.debug("No image data for %s, placeholder stays visible", token)
            return False

        placeholder = self.placeholders.get(token)
        if placeholder is None:
            logger.debug("Ignoring resolution for unknown token %s", token)
            return False

        try:
            embedded = decode_image(
                image,
                reference=placeholder.reference,
                alt_text=placeholder.alt_text,
                max_width=self.max_image_width,
            )
        except ImageDecodeError as e:
            logger.warning("%s", e)
            return False

        with self._lock:
            if self._discarded:
                logger.debug("Document discarded, dropping resolution for %s", token)
                return False

            offset = self.buffer.find(token)
            if offset < 0:
                logger.debug("Token %s no longer in text", token)
                return False

            self.buffer.replace(offset, offset + len(token), OBJECT_REPLACEMENT)
            self.buffer.add_run(
                offset,
                offset + 1,
                TextAttributes(click_id=placeholder.click_id, embedded=embedded),
            )
            del self.placeholders[token]
            self._locate_payloads()

        logger.debug("Resolved image %s at offset %d", placeholder.reference, offset)
        return True

    def discard(self) -> None:
        """Drop the document; later resolutions become no-ops."""
        with self._lock:
            self._discarded = True
            self.placeholders.clear()

    def payload_at(self, offset: int) -> Optional[ClickPayload]:
        """Get the click payload of the interactive range at ``offset``."""
        with self._lock:
            for run in self.buffer.runs_at(offset):
                if run.attributes.click_id is not None:
                    return self.payloads.get(run.attributes.click_id)
        return None

    def dispatch_interaction(self, click_id: int) -> Optional[ClickPayload]:
        """Deliver the payload for an activated range to the host.

        The handler receives a copy; the document keeps ownership of the
        payload table.

        Returns:
            The delivered copy, or None for an unknown click id
        """
        payload = self.payloads.get(click_id)
        if payload is None:
            logger.debug("No payload for click id %d", click_id)
            return None

        delivered = replace(payload)
        if self.on_interaction is not None:
            self.on_interaction(delivered)
        return delivered

    def segments(self) -> list[TextSegment]:
        """Partition the text into pieces with composed attributes.

        Overlapping runs are layered in application order, so a surface can
        render each segment with a single attribute set.
        """
        text, runs = self.snapshot()
        boundaries = {0, len(text)}
        for run in runs:
            boundaries.add(run.start)
            boundaries.add(run.end)
        points = sorted(b for b in boundaries if 0 <= b <= len(text))

        segments: list[TextSegment] = []
        for start, end in zip(points, points[1:]):
            if start == end:
                continue
            attributes = TextAttributes()
            for run in runs:
                if run.start <= start and end <= run.end:
                    attributes = attributes.compose(run.attributes)
            segments.append(TextSegment(text=text[start:end], attributes=attributes))
        return segments

    @property
    def plain_text(self) -> str:
        """Text with embedded-content markers replaced by their alt text."""
        parts: list[str] = []
        for segment in self.segments():
            embedded = segment.attributes.embedded
            if embedded is not None and segment.text == OBJECT_REPLACEMENT:
                parts.append(f"[image: {embedded.alt_text or embedded.reference}]")
            else:
                parts.append(segment.text)
        return "".join(parts)

    def __str__(self) -> str:
        return self.text
