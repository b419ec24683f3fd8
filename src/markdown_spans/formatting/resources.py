"""Bundled image lookup.

A resolver maps a bare image reference (``![logo](app_logo)``) to a locally
packaged resource. Anything it cannot resolve goes down the asynchronous
fetch path instead.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Mapping, Optional


IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp")


def is_bare_identifier(reference: str) -> bool:
    """Check if a reference is a plain name rather than a URL or path."""
    return bool(reference) and "/" not in reference and ":" not in reference and "\\" not in reference


class ResourceResolver(ABC):
    """Abstract base class for bundled resource lookup."""

    @abstractmethod
    def resolve_bundled_image(self, reference: str) -> Optional[str]:
        """Map an image reference to a local resource identifier.

        Args:
            reference: The reference string from the markdown source

        Returns:
            Resource identifier, or None if the image is not bundled
        """
        ...


class NullResourceResolver(ResourceResolver):
    """Resolver with no bundled resources; every image is fetched."""

    def resolve_bundled_image(self, reference: str) -> Optional[str]:
        return None


class MappingResourceResolver(ResourceResolver):
    """Resolve references through an explicit name -> identifier table."""

    def __init__(self, resources: Mapping[str, str]) -> None:
        self.resources = dict(resources)

    def resolve_bundled_image(self, reference: str) -> Optional[str]:
        return self.resources.get(reference)


class DirectoryResourceResolver(ResourceResolver):
    """Resolve bare names against image files in a resource directory.

    ``ic_app_icon`` resolves to ``<directory>/ic_app_icon.png`` (or any
    other supported image extension). URLs and paths are never resolved
    here.
    """

    def __init__(
        self,
        directory: Path,
        extensions: tuple[str, ...] = IMAGE_EXTENSIONS,
    ) -> None:
        self.directory = Path(directory)
        self.extensions = extensions

    def resolve_bundled_image(self, reference: str) -> Optional[str]:
        if not is_bare_identifier(reference):
            return None

        candidate = self.directory / reference
        if candidate.suffix.lower() in self.extensions and candidate.is_file():
            return str(candidate)

        for ext in self.extensions:
            candidate = self.directory / f"{reference}{ext}"
            if candidate.is_file():
                return str(candidate)
        return None
