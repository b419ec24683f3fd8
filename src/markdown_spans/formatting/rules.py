"""Ordered catalog of the markdown syntax rules.

Rules are applied to the whole buffer one after another, so the order of
``RULES`` is part of the dialect: every rule sees the text already edited
by the rules before it.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from markdown_spans.formatting.ir import TextAttributes, TextStyle


# Colour palette
BLACK = "#000000"
CODE_BACKGROUND = "#DEDEDE"
LINK_COLOR = "#FF00CC"
LIST_BACKGROUND = "#F2F2F2"

BULLET = "\u2022"

# Line terminators recognised by "line start" anchors and "rest of line"
# wildcards: \n, \r (and so \r\n), NEL, LINE SEPARATOR, PARAGRAPH SEPARATOR
LINE_TERMINATORS = "\n\r\x85\u2028\u2029"
LINE_START = rf"(?<![^{LINE_TERMINATORS}])"
REST_OF_LINE = rf"[^{LINE_TERMINATORS}]*"
LINE_END = rf"(?:\r\n|[{LINE_TERMINATORS}]|\Z)"


class SyntaxKind(Enum):
    """Syntax constructs of the dialect."""

    HEADING_1 = 1
    HEADING_2 = 2
    HEADING_3 = 3
    HEADING_4 = 4
    HEADING_5 = 5
    HEADING_6 = 6
    LINK = "link"
    BOLD = "bold"
    EMPHASIS = "emphasis"
    ORDERED_LIST = "ordered_list"
    UNORDERED_LIST = "unordered_list"
    CODE_BLOCK = "code_block"
    INLINE_CODE = "inline_code"
    QUOTE = "quote"
    IMAGE = "image"

    @property
    def heading_level(self) -> Optional[int]:
        """Heading level 1-6, or None for non-heading kinds."""
        return self.value if isinstance(self.value, int) else None


@dataclass(frozen=True)
class Rule:
    """A syntax-to-style mapping.

    Attributes:
        kind: The construct this rule recognises
        pattern: Compiled pattern matched against the whole buffer
        attributes: Attributes applied to the rule's styled range
        relative_scale: Font scale for the styled range, if any
    """

    kind: SyntaxKind
    pattern: re.Pattern
    attributes: TextAttributes = TextAttributes()
    relative_scale: Optional[float] = None

    @property
    def run_attributes(self) -> TextAttributes:
        """Attributes including the relative scale."""
        if self.relative_scale is None:
            return self.attributes
        return self.attributes.with_values(relative_scale=self.relative_scale)


def heading_scale(level: int) -> float:
    """Relative size for a heading: 2.0 for level 1 down to 1.0 for level 6."""
    return round(2.0 - 0.2 * (level - 1), 1)


def _heading_rule(level: int) -> Rule:
    pattern = re.compile(
        LINE_START
        + "#" * level
        + rf"[ \t]+(?P<text>{REST_OF_LINE})(?P<eol>{LINE_END})"
    )
    return Rule(
        kind=SyntaxKind(level),
        pattern=pattern,
        attributes=TextAttributes(style=TextStyle.BOLD, foreground=BLACK),
        relative_scale=heading_scale(level),
    )


LINK_RULE = Rule(
    kind=SyntaxKind.LINK,
    pattern=re.compile(
        rf"(?<!!)\[(?P<text>[^\]{LINE_TERMINATORS}]*)\]"
        rf"\((?P<url>[^){LINE_TERMINATORS}]*)\)"
    ),
    attributes=TextAttributes(foreground=LINK_COLOR),
)

# Greedy: spans from the first opening to the last closing delimiter on a line
BOLD_RULE = Rule(
    kind=SyntaxKind.BOLD,
    pattern=re.compile(rf"\*\*(?P<text>{REST_OF_LINE})\*\*"),
    attributes=TextAttributes(style=TextStyle.BOLD),
)

# Greedy as well, but never opens or closes inside a word (snake_case_names)
EMPHASIS_RULE = Rule(
    kind=SyntaxKind.EMPHASIS,
    pattern=re.compile(rf"(?<![^\W_])_(?P<text>{REST_OF_LINE})_(?![^\W_])"),
    attributes=TextAttributes(style=TextStyle.ITALIC),
)

ORDERED_LIST_RULE = Rule(
    kind=SyntaxKind.ORDERED_LIST,
    pattern=re.compile(
        LINE_START + r"(?P<indent>[ \t]*)(?P<marker>\d{1,9}[.)])(?=[ \t])"
    ),
    attributes=TextAttributes(style=TextStyle.BOLD),
)

UNORDERED_LIST_RULE = Rule(
    kind=SyntaxKind.UNORDERED_LIST,
    pattern=re.compile(
        LINE_START
        + rf"(?P<indent>[ \t]*)(?P<marker>\*)[ \t](?P<text>{REST_OF_LINE})"
    ),
    attributes=TextAttributes(block_background=LIST_BACKGROUND),
)

# Nearest closing fence, so consecutive blocks stay separate
CODE_BLOCK_RULE = Rule(
    kind=SyntaxKind.CODE_BLOCK,
    pattern=re.compile(r"```(?P<code>.*?)```", re.DOTALL),
    attributes=TextAttributes(
        style=TextStyle.MONOSPACE, block_background=CODE_BACKGROUND
    ),
)

INLINE_CODE_RULE = Rule(
    kind=SyntaxKind.INLINE_CODE,
    pattern=re.compile(rf"`(?P<code>{REST_OF_LINE})`"),
    attributes=TextAttributes(
        style=TextStyle.MONOSPACE, background=CODE_BACKGROUND
    ),
)

QUOTE_RULE = Rule(
    kind=SyntaxKind.QUOTE,
    pattern=re.compile(LINE_START + rf">(?P<text>{REST_OF_LINE})"),
    attributes=TextAttributes(style=TextStyle.QUOTE),
)

IMAGE_RULE = Rule(
    kind=SyntaxKind.IMAGE,
    pattern=re.compile(
        rf"!\[(?P<alt>[^\]{LINE_TERMINATORS}]*)\]"
        rf"\((?P<ref>[^){LINE_TERMINATORS}]*)\)"
    ),
)

# Image must stay last: a pending image leaves a placeholder whose text
# later rules would otherwise rewrite
RULES: tuple[Rule, ...] = (
    *(_heading_rule(level) for level in range(6, 0, -1)),
    LINK_RULE,
    BOLD_RULE,
    EMPHASIS_RULE,
    ORDERED_LIST_RULE,
    UNORDERED_LIST_RULE,
    CODE_BLOCK_RULE,
    INLINE_CODE_RULE,
    QUOTE_RULE,
    IMAGE_RULE,
)


def get_rule(kind: SyntaxKind) -> Rule:
    """Look up the rule for a syntax kind."""
    for rule in RULES:
        if rule.kind is kind:
            return rule
    raise KeyError(f"No rule for {kind}")
