"""Main rendering orchestrator."""

import logging
from pathlib import Path
from typing import Optional

import httpx

from markdown_spans.config import Settings, get_settings
from markdown_spans.core.fetcher import ImageFetcher
from markdown_spans.formats import get_handler
from markdown_spans.formatting.document import InteractionHandler, StyledDocument
from markdown_spans.formatting.renderer import MarkdownRenderer
from markdown_spans.formatting.resources import (
    DirectoryResourceResolver,
    NullResourceResolver,
    ResourceResolver,
)

logger = logging.getLogger(__name__)

INPUT_EXTENSIONS = (".md", ".markdown", ".txt")


class RenderError(Exception):
    """Error while rendering a markdown file."""

    pass


class RenderPipeline:
    """Orchestrates rendering of markdown files.

    Pipeline:
    1. Read the markdown source
    2. Render it to a StyledDocument
    3. Optionally fetch remote images and wait for their placeholders
    4. Write the document with the handler for the output format
    """

    def __init__(
        self,
        resource_dir: Optional[Path] = None,
        fetch_images: bool = True,
        max_image_width: Optional[int] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
        on_interaction: Optional[InteractionHandler] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            resource_dir: Directory of bundled images (default: from settings)
            fetch_images: Whether to resolve remote images
            max_image_width: Width resolved images are scaled down to
            settings: Settings to use (default: global settings)
            client: Optional httpx client used for downloads
            on_interaction: Receives payloads of activated links and images
        """
        self.settings = settings or get_settings()
        self.resource_dir = resource_dir or self.settings.resource_dir
        self.fetch_images = fetch_images
        self.max_image_width = max_image_width or self.settings.max_image_width
        self.client = client
        self.on_interaction = on_interaction

    def _resolver(self) -> ResourceResolver:
        if self.resource_dir:
            return DirectoryResourceResolver(Path(self.resource_dir))
        return NullResourceResolver()

    def render_text(self, text: str, base_dir: Optional[Path] = None) -> StyledDocument:
        """Render markdown text, resolving images before returning.

        Args:
            text: Markdown source
            base_dir: Directory relative image paths are read from

        Returns:
            The rendered StyledDocument
        """
        renderer = MarkdownRenderer(
            resolver=self._resolver(),
            on_interaction=self.on_interaction,
            max_image_width=self.max_image_width,
        )

        if not self.fetch_images:
            return renderer.render(text)

        with ImageFetcher(
            on_complete=renderer.complete_image_resolution,
            base_dir=base_dir,
            settings=self.settings,
            client=self.client,
        ) as fetcher:
            renderer.on_resolution_request = fetcher.request
            document = renderer.render(text)
            fetcher.wait()

        if document.pending_tokens:
            logger.info("%d image(s) could not be resolved", len(document.pending_tokens))
        return document

    def render_file(
        self,
        input_path: Path,
        output_path: Optional[Path] = None,
    ) -> StyledDocument:
        """Render a markdown file.

        Args:
            input_path: Path to the markdown file
            output_path: Optional path to write the rendered document to

        Returns:
            The rendered StyledDocument

        Raises:
            RenderError: If the file cannot be read or the output format is unsupported
        """
        if not input_path.exists():
            raise RenderError(f"Input file not found: {input_path}")

        ext = input_path.suffix.lower()
        if ext not in INPUT_EXTENSIONS:
            raise RenderError(
                f"Unsupported input format: {ext}. "
                f"Supported: {', '.join(INPUT_EXTENSIONS)}"
            )

        handler = None
        if output_path is not None:
            try:
                handler = get_handler(output_path.suffix)()
            except ValueError as e:
                raise RenderError(str(e)) from e

        try:
            text = input_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RenderError(f"Cannot read {input_path}: {e}") from e

        document = self.render_text(text, base_dir=input_path.parent)

        if handler is not None:
            handler.write(document, output_path)

        return document
