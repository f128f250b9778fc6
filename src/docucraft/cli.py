"""Command-line interface for DocuCraft."""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from docucraft import __version__
from docucraft.config import get_settings
from docucraft.core.converter import ConversionError, DocumentConverter
from docucraft.formats import LIVE_EXTENSIONS, SOURCE_EXTENSIONS

app = typer.Typer(
    name="docucraft",
    help="Convert markdown drafts into styled DOCX, PDF and HTML documents.",
    add_completion=False,
)
console = Console()


class ExportFormat(str, Enum):
    """Export formats selectable with --format."""

    DOCX = "docx"
    PDF = "pdf"
    HTML = "html"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"DocuCraft v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Configure the root logger from --verbose or the configured level."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def generate_output_path(
    input_path: Path,
    export_format: str,
    output_dir: Optional[Path] = None,
) -> Path:
    """Generate the output path: same stem, export format's extension.

    An input that would be overwritten (an .html document exported as html)
    gets an ``-export`` suffix instead.
    """
    parent = output_dir or input_path.parent
    output_path = parent / f"{input_path.stem}.{export_format}"

    if output_path.resolve() == input_path.resolve():
        output_path = parent / f"{input_path.stem}-export.{export_format}"
    return output_path


def process_file(
    input_path: Path,
    output_path: Optional[Path],
    export_format: str,
    verbose: bool,
) -> bool:
    """Process a single file. Returns True on success."""
    if not input_path.exists():
        console.print(f"[red]Error:[/red] File not found: {input_path}")
        return False

    ext = input_path.suffix.lower()
    if ext not in SOURCE_EXTENSIONS + LIVE_EXTENSIONS:
        console.print(
            f"[yellow]Skipping:[/yellow] {input_path.name} "
            f"(unsupported format: {ext})"
        )
        return False

    if output_path is None:
        output_path = generate_output_path(input_path, export_format)
    elif output_path.resolve() == input_path.resolve():
        console.print(
            f"[red]Error:[/red] Output would overwrite the input: {input_path}"
        )
        return False

    if verbose:
        console.print(f"[blue]Processing:[/blue] {input_path}")
        console.print(f"[blue]Output:[/blue] {output_path}")

    try:
        converter = DocumentConverter()
        if not converter.convert_file(input_path, output_path):
            console.print(f"[red]Export failed:[/red] {output_path}")
            return False
        console.print(f"[green]Success:[/green] {output_path}")
        return True
    except ConversionError as e:
        console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        return False
    except Exception as e:
        console.print(f"[red]Error processing {input_path.name}:[/red] {e}")
        if verbose:
            console.print_exception()
        return False


def process_folder(
    folder_path: Path,
    export_format: str,
    verbose: bool,
    recursive: bool = True,
) -> tuple[int, int]:
    """Process all markdown drafts in a folder. Returns (success_count, fail_count)."""
    if not folder_path.is_dir():
        console.print(f"[red]Error:[/red] Not a directory: {folder_path}")
        return 0, 0

    # Find all drafts
    files: list[Path] = []
    for ext in SOURCE_EXTENSIONS:
        if recursive:
            files.extend(folder_path.rglob(f"*{ext}"))
        else:
            files.extend(folder_path.glob(f"*{ext}"))
    files.sort()

    if not files:
        console.print(
            f"[yellow]No drafts found in {folder_path}[/yellow]\n"
            f"Supported formats: {', '.join(SOURCE_EXTENSIONS)}"
        )
        return 0, 0

    console.print(f"[blue]Found {len(files)} file(s) to process[/blue]")

    success_count = 0
    fail_count = 0

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Converting files...", total=len(files))

        for file_path in files:
            progress.update(task, description=f"Converting {file_path.name}...")
            if process_file(file_path, None, export_format, verbose):
                success_count += 1
            else:
                fail_count += 1
            progress.advance(task)

    return success_count, fail_count


@app.command()
def main(
    path: Path = typer.Argument(
        ...,
        help="Draft file or folder of drafts to convert",
        exists=True,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path (for single file only)",
    ),
    export_format: Optional[ExportFormat] = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Export format (default: DOCUCRAFT_FORMAT or docx)",
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
    Convert markdown drafts into portable documents.

    Examples:

        python docucraft.py notes.md                # Outputs notes.docx

        python docucraft.py notes.md --format pdf   # Outputs notes.pdf

        python docucraft.py edited.html -o out.docx # Export an edited document

        python docucraft.py /path/to/folder -f html
    """
    configure_logging(verbose)
    settings = get_settings()
    fmt = export_format.value if export_format else settings.default_format.lower()

    if path.is_file():
        # Single file mode
        success = process_file(path, output, fmt, verbose)
        raise typer.Exit(0 if success else 1)
    else:
        # Folder mode
        if output is not None:
            console.print(
                "[yellow]Warning:[/yellow] --output is ignored in folder mode. "
                "Files will be saved alongside their drafts."
            )

        success, fail = process_folder(path, fmt, verbose)
        console.print(
            f"\n[bold]Complete:[/bold] {success} succeeded, {fail} failed"
        )
        raise typer.Exit(0 if fail == 0 else 1)


if __name__ == "__main__":
    app()
