"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with tables and formatted messages.
"""

from rich.console import Console
from rich.table import Table
from rich.text import Text

from typeport.domain.font import FontFlags, FontInfo
from typeport.export.pipeline import ExportReport

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info
SYM_WARN = "!"  # Warning


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Typeport[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_artifact_info(path: str, pages: int, fonts: int, missing: int) -> None:
    """Print artifact summary.

    Args:
        path: Path to the artifact file
        pages: Number of pages
        fonts: Number of referenced faces
        missing: Referenced faces the resolver could not supply
    """
    line = Text("  ")
    line.append(path)
    console.print(line)
    missing_style = "yellow" if missing else "green"
    console.print(
        f"  {pages} pages {SYM_DOT} {fonts} fonts {SYM_DOT} "
        f"[{missing_style}]{missing} missing[/{missing_style}]"
    )


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    return f"{seconds:.1f}s"


def print_export_report(report: ExportReport) -> None:
    """Print the outcome of an export run.

    Args:
        report: Export report returned by the pipeline
    """
    stats = report.stats
    for target in stats.outputs:
        console.print(f"  [green]{SYM_OK}[/green] {target}")
    for exporter, message in stats.errors:
        console.print(f"  [red]{SYM_ERR}[/red] {exporter}: {message}")

    style = "bold green" if report.ok else "bold yellow"
    console.print(
        f"\n[{style}]{stats.exported_count} exported[/{style}] {SYM_DOT} "
        f"{stats.failed_count} failed {SYM_DOT} {_format_time(stats.duration_seconds)}"
    )


def print_render_success(output_path: str, width: int, height: int) -> None:
    """Print render result.

    Args:
        output_path: Path of the written image
        width: Image width in pixels
        height: Image height in pixels
    """
    line = Text(f"\n{SYM_OK} ", style="bold green")
    line.append(output_path, style="bold")
    line.append(f" ({width}×{height})")
    console.print(line)


def _flags_label(flags: FontFlags) -> str:
    labels = []
    if FontFlags.MONOSPACE in flags:
        labels.append("mono")
    if FontFlags.SERIF in flags:
        labels.append("serif")
    return ", ".join(labels)


def print_font_table(infos: list[FontInfo]) -> None:
    """Print discovered faces.

    Args:
        infos: Faces in index order
    """
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("Family")
    table.add_column("Style")
    table.add_column("Weight", justify="right")
    table.add_column("Stretch", justify="right")
    table.add_column("Flags")

    for index, info in enumerate(infos):
        table.add_row(
            str(index),
            info.family,
            info.variant.style.value,
            str(info.variant.weight.value),
            f"{info.variant.stretch.ratio:g}",
            _flags_label(info.flags),
        )
    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_warning(message: str) -> None:
    """Print warning message.

    Args:
        message: Warning text
    """
    console.print(f"[yellow]{SYM_WARN} {message}[/yellow]")
