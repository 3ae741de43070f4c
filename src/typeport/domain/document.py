"""Typeset document value types.

A Document is what the typesetting engine produces: an ordered list of
pages, each with a size in typographic points and a flat list of positioned
drawing items. Text items point at decoded fonts; a text item whose font
could not be resolved keeps ``font=None`` and renders through the
missing-glyph path.
"""

from dataclasses import dataclass, field
from enum import Enum

from typeport.domain.font import Font, FontInfo


class ShapeKind(Enum):
    """Geometry of a shape item."""

    RECT = "rect"
    LINE = "line"


@dataclass
class TextItem:
    """A run of text set in one face at one size.

    Attributes:
        x: Baseline origin x in points
        y: Baseline origin y in points (from the page top)
        size: Font size in points
        text: The characters of the run
        font_info: Identity of the requested face
        font: Decoded face, or None when unavailable
        fill: Hexadecimal RGB(A) text color
    """

    x: float
    y: float
    size: float
    text: str
    font_info: FontInfo
    font: Font | None = None
    fill: str = "000000"


@dataclass
class ShapeItem:
    """A rectangle or line.

    For RECT, (x, y) is the top-left corner and (width, height) the extent.
    For LINE, (x, y) is the start and (x + width, y + height) the end.
    """

    kind: ShapeKind
    x: float
    y: float
    width: float
    height: float
    fill: str | None = "000000"
    stroke: str | None = None
    stroke_width: float = 1.0


Item = TextItem | ShapeItem


@dataclass
class Page:
    """One page of a typeset document."""

    width: float
    height: float
    items: list[Item] = field(default_factory=list)


@dataclass
class Document:
    """A paginated, typeset document."""

    pages: list[Page] = field(default_factory=list)
    title: str | None = None

    def referenced_fonts(self) -> list[FontInfo]:
        """FontInfo of every face used by a text item, in first-use order."""
        seen: dict[FontInfo, None] = {}
        for page in self.pages:
            for item in page.items:
                if isinstance(item, TextItem):
                    seen.setdefault(item.font_info, None)
        return list(seen)
