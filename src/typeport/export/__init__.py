"""Export pipeline for typeport.

This module selects, constructs and runs the exporters of one compile:

- Format normalization (defaults, streaming, sort + dedup)
- Deterministic output paths
- Failure-isolated exporter execution

Key classes:
- ExportPipeline: Runs exporters for one document
- ExporterSet: Prepared document and artifact exporters
"""

from typeport.export.exporters import (
    ArtifactExporter,
    DocExporter,
    JsonArtifactExporter,
    PdfDocExporter,
    RmpArtifactExporter,
    WebSocketArtifactExporter,
)
from typeport.export.formats import DEFAULT_FORMATS, FORMATS, ExporterKind, ExportFormat
from typeport.export.pipeline import (
    ExporterSet,
    ExportPipeline,
    ExportReport,
    normalize_formats,
    output_path,
    prepare_exporters,
    prepare_from_config,
)

__all__ = [
    "DEFAULT_FORMATS",
    "FORMATS",
    "ArtifactExporter",
    "DocExporter",
    "ExportFormat",
    "ExportPipeline",
    "ExportReport",
    "ExporterKind",
    "ExporterSet",
    "JsonArtifactExporter",
    "PdfDocExporter",
    "RmpArtifactExporter",
    "WebSocketArtifactExporter",
    "normalize_formats",
    "output_path",
    "prepare_exporters",
    "prepare_from_config",
]
