"""Tests for TXT handler."""

from pathlib import Path

from markdown_spans.formats import HANDLER_MAP, SUPPORTED_EXTENSIONS, get_handler
from markdown_spans.formats.txt_handler import TXTHandler
from markdown_spans.formatting.renderer import MarkdownRenderer
from markdown_spans.formatting.resources import MappingResourceResolver

import pytest


class TestTXTHandler:
    """Tests for the TXT format handler."""

    def test_supported_extensions(self):
        """Test that handler supports .txt extension."""
        handler = TXTHandler()
        assert ".txt" in handler.supported_extensions

    def test_write_drops_styling(self, tmp_path: Path, renderer: MarkdownRenderer):
        """Test that only the rewritten text is written."""
        doc = renderer.render("# Title\nSome **bold** and `code`.")
        output = tmp_path / "out.txt"

        TXTHandler().write(doc, output)

        assert output.read_text(encoding="utf-8") == "Title\nSome bold and code."

    def test_write_images_as_alt_text(self, tmp_path: Path, resource_dir: Path):
        """Test that embedded images are written as their alt text."""
        renderer = MarkdownRenderer(
            resolver=MappingResourceResolver(
                {"ic_app_icon": str(resource_dir / "ic_app_icon.png")}
            )
        )
        doc = renderer.render("Icon: ![app icon](ic_app_icon)")
        output = tmp_path / "out.txt"

        TXTHandler().write(doc, output)

        assert output.read_text(encoding="utf-8") == "Icon: [image: app icon]"

    def test_pending_placeholder_stays(self, tmp_path: Path, renderer: MarkdownRenderer):
        """Test that unresolved images keep their token."""
        doc = renderer.render("![a](https://example.com/a.png)")
        output = tmp_path / "out.txt"

        TXTHandler().write(doc, output)

        assert output.read_text(encoding="utf-8") == doc.pending_tokens[0]


class TestHandlerRegistry:
    """Tests for handler lookup."""

    def test_supported_extensions(self):
        assert set(SUPPORTED_EXTENSIONS) == {".txt", ".docx"}

    def test_get_handler_ignores_case(self):
        assert get_handler(".DOCX") is HANDLER_MAP[".docx"]

    def test_unsupported_extension(self):
        with pytest.raises(ValueError, match="Unsupported output format"):
            get_handler(".pdf")
