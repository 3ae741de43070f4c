"""Page rasterization with Pillow.

Shapes are drawn directly; text is drawn with the decoded face when one is
available, otherwise each glyph becomes an outlined missing-glyph box.
"""

from io import BytesIO

import structlog
from PIL import Image, ImageDraw, ImageFont

from typeport.domain.document import Page, ShapeItem, ShapeKind, TextItem
from typeport.domain.font import Font
from typeport.render.color import RGBA, parse_color

logger = structlog.get_logger(__name__)

# Missing-glyph box geometry, in em
NOTDEF_ADVANCE = 0.6
NOTDEF_WIDTH = 0.5
NOTDEF_HEIGHT = 0.7


def page_pixel_size(page: Page, pixel_per_pt: float) -> tuple[int, int]:
    """Pixel dimensions of a page at the given scale (at least 1x1)."""
    width = max(1, round(page.width * pixel_per_pt))
    height = max(1, round(page.height * pixel_per_pt))
    return width, height


class PageRasterizer:
    """Rasterizes pages into RGBA images.

    Example:
        rasterizer = PageRasterizer(pixel_per_pt=2.0)
        image = rasterizer.render(page, fill=(255, 255, 255, 255))
    """

    def __init__(self, pixel_per_pt: float = 1.0) -> None:
        if pixel_per_pt <= 0:
            raise ValueError(f"pixel_per_pt must be positive, got {pixel_per_pt}")
        self.pixel_per_pt = pixel_per_pt
        self._fonts: dict[tuple[int, int], ImageFont.FreeTypeFont | None] = {}

    def render(self, page: Page, fill: RGBA) -> Image.Image:
        """Rasterize one page onto a solid background.

        Args:
            page: Page to draw
            fill: Background color

        Returns:
            RGBA image of the page
        """
        image = Image.new("RGBA", page_pixel_size(page, self.pixel_per_pt), fill)
        draw = ImageDraw.Draw(image)
        for item in page.items:
            if isinstance(item, TextItem):
                self._draw_text(draw, item)
            else:
                self._draw_shape(draw, item)
        return image

    def _draw_shape(self, draw: ImageDraw.ImageDraw, item: ShapeItem) -> None:
        s = self.pixel_per_pt
        x0, y0 = item.x * s, item.y * s
        x1, y1 = (item.x + item.width) * s, (item.y + item.height) * s
        stroke = parse_color(item.stroke) if item.stroke else None
        stroke_width = max(1, round(item.stroke_width * s))

        if item.kind is ShapeKind.LINE:
            color = stroke or (parse_color(item.fill) if item.fill else None)
            if color is not None:
                draw.line([(x0, y0), (x1, y1)], fill=color, width=stroke_width)
            return

        box = [min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)]
        draw.rectangle(
            box,
            fill=parse_color(item.fill) if item.fill else None,
            outline=stroke,
            width=stroke_width if stroke else 0,
        )

    def _load_face(self, font: Font, size_px: int) -> ImageFont.FreeTypeFont | None:
        key = (id(font), size_px)
        if key not in self._fonts:
            try:
                self._fonts[key] = ImageFont.truetype(BytesIO(font.data), size_px, index=font.index)
            except OSError as e:
                logger.warning("Face not rasterizable", family=font.info.family, error=str(e))
                self._fonts[key] = None
        return self._fonts[key]

    def _draw_text(self, draw: ImageDraw.ImageDraw, item: TextItem) -> None:
        s = self.pixel_per_pt
        color = parse_color(item.fill)
        size_px = max(1, round(item.size * s))

        face = self._load_face(item.font, size_px) if item.font is not None else None
        if face is not None:
            draw.text((item.x * s, item.y * s), item.text, font=face, fill=color, anchor="ls")
            return

        # Missing-glyph path
        em = item.size * s
        x = item.x * s
        baseline = item.y * s
        for char in item.text:
            if not char.isspace():
                draw.rectangle(
                    [x, baseline - NOTDEF_HEIGHT * em, x + NOTDEF_WIDTH * em, baseline],
                    outline=color,
                    width=max(1, round(em / 20)),
                )
            x += NOTDEF_ADVANCE * em
