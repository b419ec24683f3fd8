"""Tests for the CLI interface."""

from pathlib import Path

from typer.testing import CliRunner

from markdown_spans import __version__
from markdown_spans.cli import app, generate_output_path


runner = CliRunner()


class TestGenerateOutputPath:
    """Tests for output path generation."""

    def test_swaps_extension(self):
        """Test that the input suffix is replaced."""
        output = generate_output_path(Path("/path/to/notes.md"), ".docx")

        assert output == Path("/path/to/notes.docx")

    def test_custom_output_directory(self):
        """Test specifying custom output directory."""
        output = generate_output_path(
            Path("/path/to/notes.md"), ".txt", Path("/custom/output")
        )

        assert output == Path("/custom/output/notes.txt")


class TestCLI:
    """Tests for CLI commands."""

    def test_version_flag(self):
        """Test --version flag."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"markdown-spans v{__version__}" in result.stdout

    def test_help_flag(self):
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "Render simple Markdown" in result.stdout

    def test_missing_file_error(self, tmp_path: Path):
        """Test error when file doesn't exist."""
        result = runner.invoke(app, [str(tmp_path / "nonexistent.md")])

        assert result.exit_code != 0

    def test_render_to_terminal(self, tmp_markdown_file: Path):
        """Test that a file without --output is printed."""
        result = runner.invoke(app, [str(tmp_markdown_file), "--no-fetch"])

        assert result.exit_code == 0
        assert "Release notes" in result.stdout
        assert "# Release notes" not in result.stdout

    def test_render_to_docx(self, tmp_markdown_file: Path, tmp_path: Path):
        """Test writing a DOCX file with --output."""
        output = tmp_path / "notes.docx"

        result = runner.invoke(
            app, [str(tmp_markdown_file), "-o", str(output), "--no-fetch"]
        )

        assert result.exit_code == 0
        assert "Success" in result.stdout
        assert output.exists()

    def test_unsupported_output(self, tmp_markdown_file: Path, tmp_path: Path):
        """Test that an unknown output extension fails."""
        result = runner.invoke(
            app, [str(tmp_markdown_file), "-o", str(tmp_path / "notes.pdf")]
        )

        assert result.exit_code == 1
        assert "Unsupported output format" in result.stdout

    def test_verbose_summary(self, tmp_markdown_file: Path):
        """Test that verbose mode lists interactive ranges."""
        result = runner.invoke(app, [str(tmp_markdown_file), "--no-fetch", "-v"])

        assert result.exit_code == 0
        assert "https://example.com/changes" in result.stdout

    def test_folder_mode(self, tmp_path: Path):
        """Test rendering every markdown file in a folder."""
        (tmp_path / "a.md").write_text("# A", encoding="utf-8")
        (tmp_path / "b.markdown").write_text("**B**", encoding="utf-8")

        result = runner.invoke(app, [str(tmp_path), "--format", "txt", "--no-fetch"])

        assert result.exit_code == 0
        assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "A"
        assert (tmp_path / "b.txt").read_text(encoding="utf-8") == "B"
        assert "2 succeeded" in result.stdout

    def test_folder_unsupported_format(self, tmp_path: Path):
        """Test that folder mode rejects unknown formats."""
        (tmp_path / "a.md").write_text("# A", encoding="utf-8")

        result = runner.invoke(app, [str(tmp_path), "--format", ".pdf"])

        assert result.exit_code == 1
        assert "Unsupported output format" in result.stdout
