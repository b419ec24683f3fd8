"""Remote image fetching for pending placeholders.

The fetcher is the collaborator on the other side of the resolution
protocol: it receives ResolutionRequests from the renderer, downloads the
referenced image on a worker thread and hands the bytes back through a
completion callback, typically ``StyledDocument.complete_image_resolution``.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote, urlparse

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from markdown_spans.config import Settings, get_settings
from markdown_spans.formatting.ir import ResolutionRequest

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[str, Optional[bytes]], object]


class ImageFetchError(Exception):
    """Image could not be fetched."""

    pass


class TransientFetchError(ImageFetchError):
    """Fetch failed in a way that may succeed on retry."""

    pass


class ImageFetcher:
    """Resolve image references on a thread pool.

    ``http``/``https`` references are downloaded with a shared httpx client
    and retried on connection errors and server errors. Anything else is
    read from disk relative to ``base_dir``.
    """

    def __init__(
        self,
        on_complete: CompletionHandler,
        base_dir: Optional[Path] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            on_complete: Called with ``(token, data)``; data is None on failure
            base_dir: Directory relative file references are resolved against
            settings: Settings to use (default: global settings)
            client: Optional preconfigured httpx client
        """
        settings = settings or get_settings()
        self.on_complete = on_complete
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.max_retries = max(1, settings.max_retries)
        self.retry_backoff = settings.retry_backoff

        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=settings.fetch_timeout,
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=settings.fetch_workers,
            thread_name_prefix="image-fetch",
        )
        self._futures: set[Future] = set()
        self._lock = threading.Lock()

    def __enter__(self) -> "ImageFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(self, request: ResolutionRequest) -> Future:
        """Queue a resolution request; returns immediately."""
        future = self._executor.submit(self._resolve, request)
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget)
        return future

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until queued requests finish.

        Returns:
            True if nothing is left outstanding
        """
        with self._lock:
            pending = list(self._futures)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def close(self) -> None:
        """Finish outstanding work and release the pool and client."""
        self._executor.shutdown(wait=True)
        if self._owns_client:
            self._client.close()

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.error("Image completion handler failed: %s", future.exception())

    def _resolve(self, request: ResolutionRequest) -> bool:
        try:
            data: Optional[bytes] = self.fetch(request.reference)
        except ImageFetchError as e:
            logger.warning("Could not fetch image %s: %s", request.reference, e)
            data = None

        self.on_complete(request.token, data)
        return data is not None

    def fetch(self, reference: str) -> bytes:
        """Fetch the bytes behind an image reference.

        Raises:
            ImageFetchError: If the image cannot be retrieved
        """
        scheme = urlparse(reference).scheme.lower()
        if scheme in ("http", "https"):
            return self._download(reference)
        return self._read_file(reference)

    def _download(self, url: str) -> bytes:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_backoff, max=10),
            retry=retry_if_exception_type(TransientFetchError),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                return self._get(url)
        raise ImageFetchError(f"No attempt made for {url}")

    def _get(self, url: str) -> bytes:
        try:
            response = self._client.get(url)
        except httpx.TransportError as e:
            raise TransientFetchError(f"Connection error: {e}") from e

        if response.status_code >= 500:
            raise TransientFetchError(f"HTTP {response.status_code}")
        if response.status_code >= 400:
            raise ImageFetchError(f"HTTP {response.status_code}")
        return response.content

    def _read_file(self, reference: str) -> bytes:
        parsed = urlparse(reference)
        raw_path = unquote(parsed.path) if parsed.scheme == "file" else reference
        path = Path(raw_path)
        if not path.is_absolute():
            path = self.base_dir / path

        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageFetchError(f"Cannot read {path}: {e}") from e
