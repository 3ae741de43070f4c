"""Export format vocabulary.

Every accepted format tag maps to exactly one exporter family. Document
formats need the full typeset document; artifact formats only need the
serialized snapshot.
"""

from dataclasses import dataclass
from enum import Enum


class ExporterKind(Enum):
    """What an exporter consumes."""

    DOCUMENT = "document"
    ARTIFACT = "artifact"


@dataclass(frozen=True)
class ExportFormat:
    """One accepted format tag.

    Attributes:
        tag: Name used on the command line and in config
        kind: Whether the exporter consumes documents or artifacts
        extension: File extension, or None for non-file sinks
    """

    tag: str
    kind: ExporterKind
    extension: str | None


PDF = ExportFormat("pdf", ExporterKind.DOCUMENT, "pdf")
JSON = ExportFormat("json", ExporterKind.ARTIFACT, "artifact.json")
RMP = ExportFormat("rmp", ExporterKind.ARTIFACT, "artifact.rmp")
WEB_SOCKET = ExportFormat("web_socket", ExporterKind.ARTIFACT, None)

FORMATS: dict[str, ExportFormat] = {f.tag: f for f in (PDF, JSON, RMP, WEB_SOCKET)}

# Formats produced when none are requested
DEFAULT_FORMATS: tuple[str, ...] = (PDF.tag, JSON.tag)
