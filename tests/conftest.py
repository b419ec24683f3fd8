"""Pytest fixtures for markdown-spans tests."""

import io
from pathlib import Path

import pytest
from PIL import Image

from markdown_spans.config import Settings
from markdown_spans.formatting.renderer import MarkdownRenderer


@pytest.fixture
def sample_markdown() -> str:
    """Markdown exercising every rule."""
    return (
        "# Release notes\n"
        "Read the [changelog](https://example.com/changes) first.\n"
        "This is **important** and _subtle_.\n"
        "1. Install\n"
        "* Run `make`\n"
        "> Quoted line\n"
        "```\ncode here\n```\n"
    )


def _png_bytes(width: int, height: int, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG."""
    return _png_bytes(4, 3)


@pytest.fixture
def wide_png_bytes() -> bytes:
    """A PNG wider than typical max widths."""
    return _png_bytes(800, 400, "blue")


@pytest.fixture
def renderer() -> MarkdownRenderer:
    """Renderer with no bundled resources and no resolution handler."""
    return MarkdownRenderer()


@pytest.fixture
def resource_dir(tmp_path: Path, png_bytes: bytes) -> Path:
    """Directory holding one bundled image named ic_app_icon.png."""
    directory = tmp_path / "resources"
    directory.mkdir()
    (directory / "ic_app_icon.png").write_bytes(png_bytes)
    return directory


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with retry backoff disabled so tests never sleep."""
    return Settings(
        max_retries=3,
        retry_backoff=0,
        fetch_timeout=2.0,
        fetch_workers=2,
    )


@pytest.fixture
def tmp_markdown_file(tmp_path: Path, sample_markdown: str) -> Path:
    """Create a temporary markdown file."""
    file_path = tmp_path / "notes.md"
    file_path.write_text(sample_markdown, encoding="utf-8")
    return file_path
