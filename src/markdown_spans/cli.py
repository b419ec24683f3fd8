"""Command-line interface for markdown-spans."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from markdown_spans import __version__
from markdown_spans.config import get_settings
from markdown_spans.core.pipeline import INPUT_EXTENSIONS, RenderError, RenderPipeline
from markdown_spans.formats import SUPPORTED_EXTENSIONS
from markdown_spans.formats.console import to_rich_text
from markdown_spans.formatting.document import StyledDocument

app = typer.Typer(
    name="markdown-spans",
    help="Render simple Markdown into styled text runs.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"markdown-spans v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def generate_output_path(
    input_path: Path, extension: str, output_dir: Optional[Path] = None
) -> Path:
    """Generate output path by swapping the input suffix for ``extension``."""
    output_name = f"{input_path.stem}{extension}"

    if output_dir:
        return output_dir / output_name
    return input_path.parent / output_name


def print_summary(document: StyledDocument) -> None:
    """Print the click payloads and pending images of a document."""
    if document.payloads:
        table = Table(title="Interactive ranges")
        table.add_column("Id", justify="right")
        table.add_column("Kind")
        table.add_column("Target")
        table.add_column("Range")
        for payload in document.payloads.values():
            located = payload.located_range
            table.add_row(
                str(payload.click_id),
                payload.scheme_kind.value,
                payload.resolved_value,
                f"{located[0]}-{located[1]}" if located else "pending",
            )
        console.print(table)

    for token in document.pending_tokens:
        placeholder = document.placeholders[token]
        console.print(
            f"[yellow]Unresolved image:[/yellow] {placeholder.reference} ({token})"
        )


def process_file(
    input_path: Path,
    output_path: Optional[Path],
    pipeline: RenderPipeline,
    verbose: bool,
) -> bool:
    """Render a single file. Returns True on success."""
    if verbose:
        console.print(f"[blue]Rendering:[/blue] {input_path}")
        if output_path:
            console.print(f"[blue]Output:[/blue] {output_path}")

    try:
        document = pipeline.render_file(input_path, output_path)
    except RenderError as e:
        console.print(f"[red]Error:[/red] {e}")
        return False

    if output_path is None:
        console.print(to_rich_text(document))
    else:
        console.print(f"[green]Success:[/green] {output_path}")

    if verbose:
        print_summary(document)
    return True


def process_folder(
    folder_path: Path,
    extension: str,
    pipeline: RenderPipeline,
    verbose: bool,
    recursive: bool = True,
) -> tuple[int, int]:
    """Render all markdown files in a folder. Returns (success_count, fail_count)."""
    files: list[Path] = []
    for ext in INPUT_EXTENSIONS:
        if ext == extension:
            continue
        if recursive:
            files.extend(folder_path.rglob(f"*{ext}"))
        else:
            files.extend(folder_path.glob(f"*{ext}"))

    if not files:
        console.print(
            f"[yellow]No markdown files found in {folder_path}[/yellow]\n"
            f"Supported inputs: {', '.join(INPUT_EXTENSIONS)}"
        )
        return 0, 0

    console.print(f"[blue]Found {len(files)} file(s) to render[/blue]")

    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Rendering files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Rendering {file_path.name}...")
            output_path = generate_output_path(file_path, extension)
            if process_file(file_path, output_path, pipeline, verbose):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="Markdown file or folder to render",
        exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to this file (.txt or .docx) instead of the terminal",
    ),
    output_format: str = typer.Option(
        ".docx",
        "--format",
        "-f",
        help="Output extension used in folder mode",
    ),
    resources: Optional[Path] = typer.Option(
        None,
        "--resources",
        "-r",
        help="Directory of bundled images referenced by bare name",
    ),
    fetch: bool = typer.Option(
        True,
        "--fetch/--no-fetch",
        help="Resolve remote and relative images (default: on)",
    ),
    max_width: Optional[int] = typer.Option(
        None,
        "--max-width",
        "-w",
        min=1,
        help="Scale resolved images down to this width in pixels",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Render Markdown into styled text.

    Examples:

        markdown-spans README.md

        markdown-spans README.md -o README.docx

        markdown-spans notes.md --resources ./images --no-fetch

        markdown-spans ./docs --format .txt
    """
    configure_logging(verbose)
    settings = get_settings()

    pipeline = RenderPipeline(
        resource_dir=resources or settings.resource_dir,
        fetch_images=fetch,
        max_image_width=max_width,
        settings=settings,
    )

    if path.is_file():
        # Single file mode
        success = process_file(path, output, pipeline, verbose)
        raise typer.Exit(0 if success else 1)

    # Folder mode
    extension = output_format if output_format.startswith(".") else f".{output_format}"
    if extension not in SUPPORTED_EXTENSIONS:
        console.print(
            f"[red]Error:[/red] Unsupported output format: {extension}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )
        raise typer.Exit(1)

    if output is not None:
        console.print(
            "[yellow]Warning:[/yellow] --output is ignored in folder mode. "
            "Files will be saved alongside the originals."
        )

    success, fail = process_folder(path, extension, pipeline, verbose)
    console.print(f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed")
    raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
