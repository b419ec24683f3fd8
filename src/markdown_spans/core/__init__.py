"""Rendering pipeline and the remote image fetcher."""

from markdown_spans.core.fetcher import ImageFetcher, ImageFetchError, TransientFetchError
from markdown_spans.core.pipeline import RenderPipeline, RenderError

__all__ = [
    "ImageFetcher",
    "ImageFetchError",
    "TransientFetchError",
    "RenderPipeline",
    "RenderError",
]
