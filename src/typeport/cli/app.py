"""CLI application entry point for typeport.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import structlog
import typer
from PIL import Image

from typeport import __version__
from typeport.cli.output import (
    console,
    print_artifact_info,
    print_error,
    print_export_report,
    print_font_table,
    print_header,
    print_render_success,
    print_step,
    print_warning,
)
from typeport.config import (
    ExportConfig,
    FontConfig,
    LoggingConfig,
    RenderConfig,
    TypeportSettings,
)
from typeport.domain.artifact import Artifact
from typeport.exceptions import ConfigurationError, TypeportError
from typeport.export import ExportPipeline, prepare_from_config
from typeport.fonts import FontResolver, SystemFontSearcher
from typeport.io import ArtifactCodec
from typeport.render import RenderBridge
from typeport.utils import configure_logging

logger = structlog.get_logger(__name__)

# Create the Typer app
app = typer.Typer(
    name="typeport",
    help="Export, re-import and rasterize typeset document artifacts.",
    add_completion=False,
    no_args_is_help=True,
)

FontPathOption = Annotated[
    list[Path] | None,
    typer.Option(
        "--font-path",
        help="Directory searched for fonts (repeatable)",
    ),
]
LogFileOption = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
QuietOption = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Typeport[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Export, re-import and rasterize typeset document artifacts."""


def entry_file_for(artifact_path: Path) -> Path:
    """Entry file implied by an artifact path.

    ``out/main.artifact.json`` belongs to the entry ``out/main``.
    """
    name = artifact_path.name
    base = name.split(".artifact.", 1)[0] if ".artifact." in name else artifact_path.stem
    return artifact_path.with_name(base)


def _setup(settings: TypeportSettings, quiet: bool) -> None:
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )
    if not quiet:
        print_header(__version__)


def _build_resolver(config: FontConfig) -> FontResolver:
    searcher = SystemFontSearcher(config)
    if config.font_paths:
        searcher.search_dirs(config.font_paths)
    return searcher.to_resolver()


def _read_artifact(path: Path, codec: ArtifactCodec) -> Artifact:
    if not path.is_file():
        print_error(
            f"Input file not found: {path}",
            details=f"The file '{path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)
    return codec.decode(path.read_bytes())


@app.command()
def export(
    artifact_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a .artifact.json or .artifact.rmp file",
            show_default=False,
        ),
    ],
    output: Annotated[
        str,
        typer.Option(
            "--output",
            "-o",
            help="Output base location (default: artifact directory)",
        ),
    ] = "",
    formats: Annotated[
        list[str] | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: pdf|json|rmp|web_socket (repeatable, default: pdf + json)",
        ),
    ] = None,
    web_socket: Annotated[
        str,
        typer.Option(
            "--web-socket",
            help="Push the artifact to this host:port",
        ),
    ] = "",
    font_paths: FontPathOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Re-import an artifact and export it to the requested formats.

    Example:
        typeport export main.artifact.json -f pdf -f rmp
    """
    settings = TypeportSettings(
        fonts=FontConfig(font_paths=font_paths or []),
        export=ExportConfig(output=output, formats=formats or [], web_socket=web_socket),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    _setup(settings, quiet)

    try:
        codec = ArtifactCodec()
        artifact = _read_artifact(artifact_file, codec)
        exporters = prepare_from_config(
            entry_file_for(artifact_file), settings.export, settings.render
        )
        for skipped in exporters.discard_target(artifact_file):
            logger.warning("Skipping exporter targeting its input", exporter=skipped.name)
            print_warning(f"Skipped {skipped.name}: would overwrite the input {artifact_file}")

        if not quiet:
            print_step("Resolving fonts")
        resolver = _build_resolver(settings.fonts)
        document = artifact.to_document(resolver)

        if not quiet:
            missing = sum(1 for info in artifact.fonts if resolver.resolve(info) is None)
            print_artifact_info(
                str(artifact_file), len(artifact.pages), len(artifact.fonts), missing
            )
            print_step(f"Exporting {len(exporters)} formats")

        report = ExportPipeline(exporters).run(document, artifact)

        if not quiet:
            print_export_report(report)
        if not report.ok:
            raise typer.Exit(code=1)

    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2)
    except TypeportError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def render(
    artifact_file: Annotated[
        Path,
        typer.Argument(
            help="Path to a .artifact.json or .artifact.rmp file",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output PNG path (default: {entry}.png)",
        ),
    ] = None,
    pixel_per_pt: Annotated[
        float,
        typer.Option(
            "--ppp",
            help="Pixels per point",
            min=0.01,
            max=64.0,
        ),
    ] = 1.0,
    fill: Annotated[
        str,
        typer.Option(
            "--fill",
            help="Background color as hex RGB(A)",
        ),
    ] = "ffffff",
    font_paths: FontPathOption = None,
    log_file: LogFileOption = None,
    log_level: LogLevelOption = "WARNING",
    quiet: QuietOption = False,
) -> None:
    """Rasterize the first page of an artifact to PNG.

    Example:
        typeport render main.artifact.json --ppp 2 --fill 1e1e1e
    """
    settings = TypeportSettings(
        fonts=FontConfig(font_paths=font_paths or []),
        render=RenderConfig(pixel_per_pt=pixel_per_pt, fill=fill),
        logging=LoggingConfig(log_file=log_file, log_level=log_level),
    )
    _setup(settings, quiet)

    if output is None:
        output = entry_file_for(artifact_file).with_suffix(".png")

    try:
        if not artifact_file.is_file():
            print_error(f"Input file not found: {artifact_file}")
            raise typer.Exit(code=1)

        if not quiet:
            print_step("Rendering")
        bridge = RenderBridge(_build_resolver(settings.fonts), settings.render)
        image = bridge.render(artifact_file.read_bytes())

        Image.frombytes("RGBA", (image.width, image.height), image.data).save(output)
        if not quiet:
            print_render_success(str(output), image.width, image.height)

    except TypeportError as e:
        print_error(str(e))
        raise typer.Exit(code=1)


@app.command()
def fonts(
    directories: Annotated[
        list[Path],
        typer.Argument(
            help="Directories searched recursively for font files",
            show_default=False,
        ),
    ],
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of discovery threads (default: auto)",
            min=1,
        ),
    ] = None,
    quiet: QuietOption = False,
) -> None:
    """List the faces found below DIRECTORIES in index order."""
    settings = TypeportSettings(fonts=FontConfig(font_paths=directories, max_workers=workers))
    _setup(settings, quiet)

    resolver = _build_resolver(settings.fonts)
    if not quiet:
        print_step(f"{len(resolver)} faces in {len(resolver.families())} families")
    print_font_table(list(resolver.book))


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
