"""Tests for the rule catalog."""

import pytest

from markdown_spans.formatting.ir import TextStyle
from markdown_spans.formatting.rules import (
    BLACK,
    CODE_BACKGROUND,
    LINK_COLOR,
    LIST_BACKGROUND,
    RULES,
    SyntaxKind,
    get_rule,
    heading_scale,
)


class TestRuleOrder:
    """Tests for the order of the rule table."""

    def test_full_order(self):
        """Test that rules are applied in the documented order."""
        assert [rule.kind for rule in RULES] == [
            SyntaxKind.HEADING_6,
            SyntaxKind.HEADING_5,
            SyntaxKind.HEADING_4,
            SyntaxKind.HEADING_3,
            SyntaxKind.HEADING_2,
            SyntaxKind.HEADING_1,
            SyntaxKind.LINK,
            SyntaxKind.BOLD,
            SyntaxKind.EMPHASIS,
            SyntaxKind.ORDERED_LIST,
            SyntaxKind.UNORDERED_LIST,
            SyntaxKind.CODE_BLOCK,
            SyntaxKind.INLINE_CODE,
            SyntaxKind.QUOTE,
            SyntaxKind.IMAGE,
        ]

    def test_image_rule_is_last(self):
        """Test that placeholders are never seen by another rule."""
        assert RULES[-1].kind is SyntaxKind.IMAGE

    def test_get_rule(self):
        """Test looking up a rule by kind."""
        assert get_rule(SyntaxKind.BOLD).kind is SyntaxKind.BOLD


class TestRuleAttributes:
    """Tests for the attributes each rule applies."""

    @pytest.mark.parametrize(
        "level,scale", [(1, 2.0), (2, 1.8), (3, 1.6), (4, 1.4), (5, 1.2), (6, 1.0)]
    )
    def test_heading_scale(self, level: int, scale: float):
        """Test that heading sizes step down by 0.2 per level."""
        assert heading_scale(level) == scale
        rule = get_rule(SyntaxKind(level))
        assert rule.run_attributes.relative_scale == scale
        assert rule.run_attributes.bold
        assert rule.run_attributes.foreground == BLACK

    def test_heading_level(self):
        """Test heading level of syntax kinds."""
        assert SyntaxKind.HEADING_3.heading_level == 3
        assert SyntaxKind.BOLD.heading_level is None

    def test_palette(self):
        """Test the colours used by link, list and code rules."""
        assert get_rule(SyntaxKind.LINK).attributes.foreground == LINK_COLOR
        assert get_rule(SyntaxKind.UNORDERED_LIST).attributes.block_background == LIST_BACKGROUND
        assert get_rule(SyntaxKind.INLINE_CODE).attributes.background == CODE_BACKGROUND
        code_block = get_rule(SyntaxKind.CODE_BLOCK).attributes
        assert code_block.block_background == CODE_BACKGROUND
        assert TextStyle.MONOSPACE in code_block.style


class TestRulePatterns:
    """Tests for what each pattern does and does not match."""

    def test_heading_needs_line_start(self):
        """Test that a heading marker mid-line is not a heading."""
        pattern = get_rule(SyntaxKind.HEADING_1).pattern

        assert pattern.search("# Title\n")
        assert pattern.search("intro\n# Title")
        assert not pattern.search("not # a title")

    def test_heading_at_end_without_newline(self):
        """Test that a final heading line without terminator matches."""
        match = get_rule(SyntaxKind.HEADING_2).pattern.search("text\n## Last")

        assert match.group("text") == "Last"
        assert match.group("eol") == ""

    @pytest.mark.parametrize(
        "terminator", ["\n", "\r\n", "\r", "\x85", "\u2028", "\u2029"]
    )
    def test_line_terminators(self, terminator: str):
        """Test every recognised line terminator."""
        match = get_rule(SyntaxKind.HEADING_1).pattern.search(
            f"intro{terminator}# Title{terminator}body"
        )

        assert match.group("text") == "Title"
        assert match.group("eol") == terminator

    def test_link_is_not_image(self):
        """Test that the link pattern skips image syntax."""
        pattern = get_rule(SyntaxKind.LINK).pattern

        assert not pattern.search("![alt](pic.png)")
        assert pattern.search("see [docs](https://example.com)").group("url") == (
            "https://example.com"
        )

    def test_emphasis_ignores_snake_case(self):
        """Test that underscores inside words do not open emphasis."""
        pattern = get_rule(SyntaxKind.EMPHASIS).pattern

        assert not pattern.search("use ic_app_icon or snake_case_name")
        assert pattern.search("an _emphasised_ word").group("text") == "emphasised"

    def test_bold_is_greedy(self):
        """Test that bold spans from the first to the last delimiter on a line."""
        match = get_rule(SyntaxKind.BOLD).pattern.search("**a** and **b**")

        assert match.group("text") == "a** and **b"

    def test_bold_does_not_cross_lines(self):
        """Test that bold stays on a single line."""
        assert not get_rule(SyntaxKind.BOLD).pattern.search("**a\nb**")

    def test_code_block_spans_lines(self):
        """Test that code blocks cover several lines and stop at the nearest fence."""
        matches = list(
            get_rule(SyntaxKind.CODE_BLOCK).pattern.finditer("```\none\n```\n```two```")
        )

        assert [m.group("code") for m in matches] == ["\none\n", "two"]

    def test_ordered_list_marker(self):
        """Test ordered list markers with dot or parenthesis."""
        pattern = get_rule(SyntaxKind.ORDERED_LIST).pattern

        assert pattern.search("1. one").group("marker") == "1."
        assert pattern.search("  12) twelve").group("marker") == "12)"
        assert not pattern.search("version 1. one")

    def test_unordered_list_marker(self):
        """Test that only star markers at line start match."""
        pattern = get_rule(SyntaxKind.UNORDERED_LIST).pattern

        assert pattern.search("* item").group("text") == "item"
        assert not pattern.search("a * b")

    def test_image_groups(self):
        """Test image alt text and reference groups."""
        match = get_rule(SyntaxKind.IMAGE).pattern.search("![logo](ic_app_icon)")

        assert match.group("alt") == "logo"
        assert match.group("ref") == "ic_app_icon"
