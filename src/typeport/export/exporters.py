"""Concrete exporters.

Each exporter is bound to one sink at construction and used for exactly
one export. Construction has no side effects; file exporters create their
parent directory when they write.

Key classes:
- DocExporter / ArtifactExporter: The two exporter capabilities
- PdfDocExporter: Rasterized multi-page PDF
- JsonArtifactExporter / RmpArtifactExporter: Artifact files
- WebSocketArtifactExporter: Pushes the artifact to a live-preview server
"""

from abc import ABC, abstractmethod
from pathlib import Path

import structlog
from websockets.sync.client import connect

from typeport.config import RenderConfig
from typeport.domain.artifact import Artifact
from typeport.domain.document import Document
from typeport.io.codec import ArtifactCodec, ArtifactEncoding
from typeport.render.color import parse_color
from typeport.render.rasterizer import PageRasterizer

logger = structlog.get_logger(__name__)

# PDF user space unit
POINTS_PER_INCH = 72.0


class _Exporter(ABC):
    """Single-use exporter bound to one target."""

    name: str = "exporter"

    def __init__(self) -> None:
        self._used = False

    @property
    @abstractmethod
    def target(self) -> str:
        """Human-readable sink description (path or address)."""

    def _claim(self) -> None:
        if self._used:
            raise RuntimeError(f"{self.name} exporter for {self.target} already ran")
        self._used = True


class DocExporter(_Exporter):
    """Exporter consuming the typeset document."""

    @abstractmethod
    def export(self, document: Document) -> None:
        """Write ``document`` to the bound sink."""


class ArtifactExporter(_Exporter):
    """Exporter consuming the serialized artifact."""

    @abstractmethod
    def export(self, artifact: Artifact) -> None:
        """Write ``artifact`` to the bound sink."""


def _write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class PdfDocExporter(DocExporter):
    """Writes every page, rasterized, into one PDF file."""

    name = "pdf"

    def __init__(self, path: Path, config: RenderConfig | None = None) -> None:
        super().__init__()
        self.path = Path(path)
        self.config = config if config is not None else RenderConfig()

    @property
    def target(self) -> str:
        return str(self.path)

    def export(self, document: Document) -> None:
        self._claim()
        if not document.pages:
            raise ValueError("cannot write a PDF without pages")

        rasterizer = PageRasterizer(self.config.pixel_per_pt)
        fill = parse_color(self.config.fill)
        images = [rasterizer.render(page, fill).convert("RGB") for page in document.pages]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        images[0].save(
            self.path,
            "PDF",
            save_all=True,
            append_images=images[1:],
            resolution=POINTS_PER_INCH * self.config.pixel_per_pt,
            title=document.title or self.path.stem,
        )


class _FileArtifactExporter(ArtifactExporter):
    encoding: ArtifactEncoding

    def __init__(self, path: Path, codec: ArtifactCodec | None = None) -> None:
        super().__init__()
        self.path = Path(path)
        self.codec = codec if codec is not None else ArtifactCodec()

    @property
    def target(self) -> str:
        return str(self.path)

    def export(self, artifact: Artifact) -> None:
        self._claim()
        _write_bytes(self.path, self.codec.encode(artifact, self.encoding))


class JsonArtifactExporter(_FileArtifactExporter):
    """Writes the artifact as JSON."""

    name = "json"
    encoding = ArtifactEncoding.JSON


class RmpArtifactExporter(_FileArtifactExporter):
    """Writes the artifact as MessagePack."""

    name = "rmp"
    encoding = ArtifactEncoding.RMP


class WebSocketArtifactExporter(ArtifactExporter):
    """Pushes the JSON artifact once over a websocket connection.

    Example:
        WebSocketArtifactExporter("127.0.0.1:23625").export(artifact)
    """

    name = "web_socket"

    def __init__(self, address: str, codec: ArtifactCodec | None = None) -> None:
        super().__init__()
        self.address = address
        self.codec = codec if codec is not None else ArtifactCodec()

    @property
    def url(self) -> str:
        """Websocket URL derived from the ``host:port`` address."""
        if "://" in self.address:
            return self.address
        return f"ws://{self.address}"

    @property
    def target(self) -> str:
        return self.url

    def export(self, artifact: Artifact) -> None:
        self._claim()
        payload = self.codec.encode(artifact, ArtifactEncoding.JSON).decode("utf-8")
        with connect(self.url) as websocket:
            websocket.send(payload)
        logger.debug("Artifact pushed", url=self.url, size=len(payload))
