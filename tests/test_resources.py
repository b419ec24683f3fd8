"""Tests for bundled resource lookup and placeholder tokens."""

from pathlib import Path

import pytest

from markdown_spans.formatting.placeholders import PlaceholderFactory
from markdown_spans.formatting.resources import (
    DirectoryResourceResolver,
    MappingResourceResolver,
    NullResourceResolver,
    is_bare_identifier,
)


class TestIsBareIdentifier:
    """Tests for telling names apart from URLs and paths."""

    @pytest.mark.parametrize("reference", ["ic_app_icon", "logo.png", "banner-2"])
    def test_bare_names(self, reference: str):
        assert is_bare_identifier(reference)

    @pytest.mark.parametrize(
        "reference",
        ["", "https://example.com/a.png", "images/a.png", "C:\\a.png", "file:///a.png"],
    )
    def test_not_bare(self, reference: str):
        assert not is_bare_identifier(reference)


class TestResolvers:
    """Tests for the resolver implementations."""

    def test_null_resolver(self):
        """Test that nothing is bundled by default."""
        assert NullResourceResolver().resolve_bundled_image("ic_app_icon") is None

    def test_mapping_resolver(self):
        """Test lookups through an explicit table."""
        resolver = MappingResourceResolver({"logo": "/res/logo.png"})

        assert resolver.resolve_bundled_image("logo") == "/res/logo.png"
        assert resolver.resolve_bundled_image("other") is None

    def test_directory_resolver_adds_extension(self, resource_dir: Path):
        """Test that a bare name finds a file with an image extension."""
        resolver = DirectoryResourceResolver(resource_dir)

        assert resolver.resolve_bundled_image("ic_app_icon") == str(
            resource_dir / "ic_app_icon.png"
        )

    def test_directory_resolver_exact_name(self, resource_dir: Path):
        """Test that a name with its extension resolves too."""
        resolver = DirectoryResourceResolver(resource_dir)

        assert resolver.resolve_bundled_image("ic_app_icon.png") == str(
            resource_dir / "ic_app_icon.png"
        )

    def test_directory_resolver_misses(self, resource_dir: Path):
        """Test that unknown names, URLs and paths are not resolved."""
        resolver = DirectoryResourceResolver(resource_dir)

        assert resolver.resolve_bundled_image("missing") is None
        assert resolver.resolve_bundled_image("https://example.com/ic_app_icon.png") is None
        assert resolver.resolve_bundled_image("resources/ic_app_icon.png") is None


class TestPlaceholderFactory:
    """Tests for placeholder token generation."""

    def test_token_shape(self):
        """Test the token prefix and suffix."""
        token = PlaceholderFactory().new_token()

        assert token.startswith("{{image:")
        assert token.endswith("}}")
        assert PlaceholderFactory.looks_like_token(token)

    def test_tokens_unique_across_factories(self):
        """Test that separate factories never repeat a token."""
        tokens = {PlaceholderFactory().new_token() for _ in range(100)}
        tokens |= {PlaceholderFactory().new_token() for _ in range(100)}

        assert len(tokens) == 200

    def test_create(self):
        """Test creating a placeholder record."""
        placeholder = PlaceholderFactory().create(click_id=7, reference="a.png", alt_text="a")

        assert placeholder.click_id == 7
        assert placeholder.reference == "a.png"
        assert placeholder.alt_text == "a"
        assert PlaceholderFactory.looks_like_token(placeholder.token)
