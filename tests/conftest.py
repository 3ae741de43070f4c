"""Shared fixtures: small TrueType fonts built in memory."""

from collections.abc import Callable
from io import BytesIO

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTCollection, TTFont
from fontTools.ttLib.tables.O_S_2f_2 import Panose

from typeport.domain import (
    Document,
    FontInfo,
    FontStyle,
    FontVariant,
    FontWeight,
    Page,
    ShapeItem,
    ShapeKind,
    TextItem,
)

PANOSE_FIELDS = (
    "bFamilyType",
    "bSerifStyle",
    "bWeight",
    "bProportion",
    "bContrast",
    "bStrokeVariation",
    "bArmStyle",
    "bLetterForm",
    "bMidline",
    "bXHeight",
)


def _square_glyph():
    pen = TTGlyphPen(None)
    pen.moveTo((100, 0))
    pen.lineTo((100, 700))
    pen.lineTo((500, 700))
    pen.lineTo((500, 0))
    pen.closePath()
    return pen.glyph()


def build_font(
    family: str = "Testa Sans",
    style_name: str = "Regular",
    weight: int = 400,
    width_class: int = 5,
    italic: bool = False,
    fixed_pitch: bool = False,
    serif: bool = False,
    chars: str = "Aa ",
) -> bytes:
    """Build a minimal TrueType font and return its bytes."""
    glyph_order = [".notdef"] + [f"uni{ord(c):04X}" for c in chars]
    cmap = {ord(c): f"uni{ord(c):04X}" for c in chars}

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf({name: _square_glyph() for name in glyph_order})
    fb.setupHorizontalMetrics({name: (600, 0) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable(
        {
            "familyName": family,
            "styleName": style_name,
            "fullName": f"{family} {style_name}",
            "psName": f"{family.replace(' ', '')}-{style_name.replace(' ', '')}",
            "uniqueFontIdentifier": f"typeport-tests: {family} {style_name}",
            "version": "Version 1.000",
        }
    )

    panose = Panose()
    for name in PANOSE_FIELDS:
        setattr(panose, name, 0)
    if serif:
        panose.bFamilyType = 2
        panose.bSerifStyle = 2

    fb.setupOS2(
        usWeightClass=weight,
        usWidthClass=width_class,
        fsSelection=0x01 if italic else 0x40,
        panose=panose,
        sTypoAscender=800,
        sTypoDescender=-200,
        usWinAscent=800,
        usWinDescent=200,
    )
    fb.setupPost(isFixedPitch=1 if fixed_pitch else 0)

    buffer = BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


def build_collection(*fonts: bytes) -> bytes:
    """Bundle font buffers into a TrueType collection."""
    collection = TTCollection()
    collection.fonts = [TTFont(BytesIO(data)) for data in fonts]
    buffer = BytesIO()
    collection.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def font_factory() -> Callable[..., bytes]:
    """Factory building font bytes (see ``build_font``)."""
    return build_font


@pytest.fixture
def collection_factory() -> Callable[..., bytes]:
    """Factory bundling font bytes into a collection."""
    return build_collection


@pytest.fixture
def regular_font() -> bytes:
    """Regular face of the Testa Sans family."""
    return build_font()


@pytest.fixture
def bold_font() -> bytes:
    """Bold face of the Testa Sans family."""
    return build_font(style_name="Bold", weight=700)


@pytest.fixture
def sample_info() -> FontInfo:
    """FontInfo of a regular face with full coverage."""
    return FontInfo(family="Testa Sans")


@pytest.fixture
def sample_document(sample_info: FontInfo) -> Document:
    """Two-page document using two faces."""
    bold = FontInfo(
        family="Testa Sans",
        variant=FontVariant(style=FontStyle.NORMAL, weight=FontWeight.BOLD),
    )
    first = Page(
        width=200.0,
        height=100.0,
        items=[
            ShapeItem(kind=ShapeKind.RECT, x=10, y=10, width=50, height=20, fill="ff0000"),
            TextItem(x=10, y=60, size=12, text="Aa", font_info=sample_info),
            TextItem(x=10, y=80, size=12, text="A", font_info=bold),
        ],
    )
    second = Page(
        width=200.0,
        height=100.0,
        items=[
            ShapeItem(kind=ShapeKind.LINE, x=0, y=50, width=200, height=0, stroke="0000ff"),
            TextItem(x=20, y=40, size=10, text="a", font_info=sample_info),
        ],
    )
    return Document(pages=[first, second], title="Sample")
