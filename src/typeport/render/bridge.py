"""Render bridge: artifact bytes in, packed RGBA pixels out."""

from dataclasses import dataclass

import structlog

from typeport.config import RenderConfig
from typeport.domain.document import Document
from typeport.exceptions import UserVisibleError
from typeport.fonts.resolver import FontResolver
from typeport.io.codec import ArtifactCodec, ArtifactEncoding
from typeport.render.color import parse_color
from typeport.render.rasterizer import PageRasterizer

logger = structlog.get_logger(__name__)


@dataclass
class RenderedImage:
    """Packed row-major RGBA pixels.

    Attributes:
        data: ``width * height * 4`` bytes
        width: Width in pixels
        height: Height in pixels
    """

    data: bytes
    width: int
    height: int


class RenderBridge:
    """Reconstructs documents from artifacts and rasterizes their first page.

    Example:
        bridge = RenderBridge(resolver)
        image = bridge.render(Path("main.artifact.json").read_bytes(), pixel_per_pt=2.0)
    """

    def __init__(
        self,
        resolver: FontResolver,
        config: RenderConfig | None = None,
        codec: ArtifactCodec | None = None,
    ) -> None:
        self.resolver = resolver
        self.config = config if config is not None else RenderConfig()
        self.codec = codec if codec is not None else ArtifactCodec()

    def render(
        self,
        data: bytes,
        pixel_per_pt: float | None = None,
        fill: str | None = None,
        encoding: ArtifactEncoding | str | None = None,
    ) -> RenderedImage:
        """Decode an artifact and rasterize its first page.

        Args:
            data: Encoded artifact
            pixel_per_pt: Scale (config default when None)
            fill: Background as hex RGB(A) (config default when None)
            encoding: Artifact encoding (detected when None)

        Returns:
            RenderedImage of the first page

        Raises:
            DecodeError: If the artifact cannot be decoded
            UserVisibleError: If the artifact has no pages
            ColorParseError: If ``fill`` is not a hex color
        """
        artifact = self.codec.decode(data, encoding)
        logger.info(
            "Rendering artifact",
            pages=len(artifact.pages),
            fonts=[info.family for info in artifact.fonts],
        )
        document = artifact.to_document(self.resolver)
        if not document.pages:
            raise UserVisibleError("no pages in artifact")
        return self.render_document(document, pixel_per_pt, fill)

    def render_document(
        self,
        document: Document,
        pixel_per_pt: float | None = None,
        fill: str | None = None,
    ) -> RenderedImage:
        """Rasterize the first page of a document."""
        if not document.pages:
            raise UserVisibleError("no pages in artifact")
        scale = pixel_per_pt if pixel_per_pt is not None else self.config.pixel_per_pt
        background = parse_color(fill if fill is not None else self.config.fill)

        image = PageRasterizer(scale).render(document.pages[0], background)
        return RenderedImage(data=image.tobytes(), width=image.width, height=image.height)
