"""Export pipeline orchestration.

Turns a requested set of format tags into bound exporters and runs them
for one compile, isolating each exporter's failure from its siblings.

Key components:
- prepare_exporters: Normalize formats and construct exporters
- ExportPipeline: Run the exporters for one document
"""

import time
import traceback
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from typeport.config import DEFAULT_WEB_SOCKET, ExportConfig, RenderConfig
from typeport.domain.artifact import Artifact
from typeport.domain.document import Document
from typeport.exceptions import ExportError, UnknownFormatError
from typeport.export.exporters import (
    ArtifactExporter,
    DocExporter,
    JsonArtifactExporter,
    PdfDocExporter,
    RmpArtifactExporter,
    WebSocketArtifactExporter,
)
from typeport.export.formats import DEFAULT_FORMATS, FORMATS, JSON, PDF, RMP, WEB_SOCKET
from typeport.utils import ExportLogger, ExportStats

logger = structlog.get_logger(__name__)


@dataclass
class ExporterSet:
    """Exporters prepared for one compile, in construction order."""

    doc_exporters: list[DocExporter] = field(default_factory=list)
    artifact_exporters: list[ArtifactExporter] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.doc_exporters) + len(self.artifact_exporters)

    def discard_target(self, path: Path) -> list[DocExporter | ArtifactExporter]:
        """Remove the file exporters that would write to ``path``.

        Returns:
            The removed exporters
        """
        target = path.resolve()

        def writes_target(exporter: DocExporter | ArtifactExporter) -> bool:
            exporter_path = getattr(exporter, "path", None)
            return exporter_path is not None and Path(exporter_path).resolve() == target

        removed = [
            e for e in [*self.doc_exporters, *self.artifact_exporters] if writes_target(e)
        ]
        self.doc_exporters = [e for e in self.doc_exporters if not writes_target(e)]
        self.artifact_exporters = [e for e in self.artifact_exporters if not writes_target(e)]
        return removed


def normalize_formats(formats: Iterable[str], web_socket: str = "") -> list[str]:
    """Sorted, deduplicated format tags for a request.

    A streaming address implies the web_socket format; an empty request
    falls back to the default formats.

    Raises:
        UnknownFormatError: If a tag is not part of the vocabulary
    """
    requested = list(formats)
    if web_socket:
        requested.append(WEB_SOCKET.tag)
    if not requested:
        requested.extend(DEFAULT_FORMATS)

    tags = sorted(set(requested))
    for tag in tags:
        if tag not in FORMATS:
            raise UnknownFormatError(tag)
    return tags


def output_base(output: str | Path, entry_file: Path) -> Path:
    """Directory marker for an entry file.

    This is ``<output or entry directory>/output``. Exporters replace its
    file-name component with the entry file name, so files land next to
    the marker rather than inside it.
    """
    base = Path(output) if str(output) else entry_file.parent
    return base / "output"


def output_path(output: str | Path, entry_file: Path, extension: str) -> Path:
    """Target file for one file-based format.

    Example:
        >>> output_path("", Path("docs/main.typ"), "artifact.json")
        PosixPath('docs/main.artifact.json')
    """
    return output_base(output, entry_file).with_name(entry_file.name).with_suffix(f".{extension}")


def prepare_exporters(
    entry_file: Path,
    output: str | Path = "",
    formats: Iterable[str] = (),
    web_socket: str = "",
    render_config: RenderConfig | None = None,
    default_web_socket: str = DEFAULT_WEB_SOCKET,
) -> ExporterSet:
    """Construct one exporter per requested format.

    Args:
        entry_file: Entry document of the compile
        output: Output base location (empty = entry file directory)
        formats: Requested format tags, possibly empty or repeated
        web_socket: Streaming address (implies the web_socket format)
        render_config: Raster settings for document exporters
        default_web_socket: Address used when web_socket has none

    Returns:
        ExporterSet with document and artifact exporters

    Raises:
        UnknownFormatError: If any tag is unknown; no exporter is built
    """
    exporters = ExporterSet()

    for tag in normalize_formats(formats, web_socket):
        fmt = FORMATS[tag]
        if fmt is PDF:
            exporters.doc_exporters.append(
                PdfDocExporter(output_path(output, entry_file, fmt.extension), render_config)
            )
        elif fmt is JSON:
            exporters.artifact_exporters.append(
                JsonArtifactExporter(output_path(output, entry_file, fmt.extension))
            )
        elif fmt is RMP:
            exporters.artifact_exporters.append(
                RmpArtifactExporter(output_path(output, entry_file, fmt.extension))
            )
        elif fmt is WEB_SOCKET:
            exporters.artifact_exporters.append(
                WebSocketArtifactExporter(web_socket or default_web_socket)
            )

    logger.debug(
        "Prepared exporters",
        doc=[e.target for e in exporters.doc_exporters],
        artifact=[e.target for e in exporters.artifact_exporters],
    )
    return exporters


def prepare_from_config(
    entry_file: Path,
    config: ExportConfig,
    render_config: RenderConfig | None = None,
) -> ExporterSet:
    """``prepare_exporters`` driven by an ExportConfig."""
    return prepare_exporters(
        entry_file,
        output=config.output,
        formats=config.formats,
        web_socket=config.web_socket,
        render_config=render_config,
        default_web_socket=config.default_web_socket,
    )


@dataclass
class ExportReport:
    """Outcome of one export run."""

    stats: ExportStats
    errors: list[ExportError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every exporter succeeded."""
        return not self.errors


class ExportPipeline:
    """Runs prepared exporters for one compile.

    Exporters run sequentially; a failing exporter is logged and reported
    without affecting the others.

    Example:
        exporters = prepare_exporters(Path("main.typ"), formats=["json", "rmp"])
        report = ExportPipeline(exporters).run(document)
    """

    def __init__(self, exporters: ExporterSet, export_logger: ExportLogger | None = None) -> None:
        self.exporters = exporters
        self.export_logger = export_logger if export_logger is not None else ExportLogger()

    def run(self, document: Document, artifact: Artifact | None = None) -> ExportReport:
        """Export one document.

        Args:
            document: Typeset document
            artifact: Snapshot of ``document`` (built when None and needed)

        Returns:
            ExportReport with statistics and per-exporter errors
        """
        doc_exporters = self.exporters.doc_exporters
        artifact_exporters = self.exporters.artifact_exporters
        self.export_logger.log_run_start(len(doc_exporters), len(artifact_exporters))
        errors: list[ExportError] = []

        for exporter in doc_exporters:
            self._run_one(exporter, document, errors)

        if artifact_exporters:
            if artifact is None:
                artifact = Artifact.from_document(document)
            for exporter in artifact_exporters:
                self._run_one(exporter, artifact, errors)

        self.export_logger.log_run_complete()
        return ExportReport(stats=self.export_logger.stats, errors=errors)

    def _run_one(
        self,
        exporter: DocExporter | ArtifactExporter,
        payload: Document | Artifact,
        errors: list[ExportError],
    ) -> None:
        start_time = time.time()
        try:
            exporter.export(payload)  # type: ignore[arg-type]
        except Exception as e:
            error = ExportError(exporter.name, str(e))
            error.__cause__ = e
            self.export_logger.log_export_error(
                exporter=exporter.name,
                error=e,
                traceback=traceback.format_exc(),
            )
            errors.append(error)
            return

        duration_ms = (time.time() - start_time) * 1000
        self.export_logger.log_export_complete(exporter.name, exporter.target, duration_ms)
