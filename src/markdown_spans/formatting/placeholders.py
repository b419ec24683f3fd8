"""Placeholder tokens for images awaiting external resolution."""

import itertools
import secrets
import time

from markdown_spans.formatting.ir import Placeholder


# Shared by every factory so tokens stay unique across documents
_counter = itertools.count(1)


class PlaceholderFactory:
    """Generates unique placeholder tokens.

    A token combines a process-wide monotonically increasing counter, a
    nanosecond timestamp and a random component, so it cannot collide with
    another token or, in practice, with literal document text.
    """

    PREFIX = "{{image:"
    SUFFIX = "}}"

    def new_token(self) -> str:
        """Return a fresh token string."""
        serial = next(_counter)
        return (
            f"{self.PREFIX}{serial:x}-{time.time_ns():x}-{secrets.token_hex(3)}"
            f"{self.SUFFIX}"
        )

    def create(self, click_id: int, reference: str, alt_text: str = "") -> Placeholder:
        """Create a placeholder record with a fresh token."""
        return Placeholder(
            token=self.new_token(),
            click_id=click_id,
            reference=reference,
            alt_text=alt_text,
        )

    @classmethod
    def looks_like_token(cls, text: str) -> bool:
        """Check if ``text`` has the shape of a placeholder token."""
        return text.startswith(cls.PREFIX) and text.endswith(cls.SUFFIX)
