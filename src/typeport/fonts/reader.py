"""Font table reader for owned font buffers.

Unlike host descriptors, a font whose bytes we own can be introspected
directly: names, OS/2 classes, the post table and the character map give
an exact FontInfo for every face of a font file or collection.
"""

from collections.abc import Iterator
from io import BytesIO
from pathlib import Path

import structlog
from fontTools.ttLib import TTCollection, TTFont

from typeport.domain.font import (
    Coverage,
    Font,
    FontFlags,
    FontInfo,
    FontStretch,
    FontStyle,
    FontVariant,
    FontWeight,
)
from typeport.fonts.family import typographic_family

logger = structlog.get_logger(__name__)

FONT_EXTENSIONS = frozenset({".ttf", ".otf", ".ttc", ".otc"})

# Name table IDs we read
NAME_ID_FAMILY = 1
NAME_ID_FULL_NAME = 4
NAME_ID_TYPOGRAPHIC_FAMILY = 16

# OS/2 fsSelection bits
FS_SELECTION_ITALIC = 1 << 0
FS_SELECTION_OBLIQUE = 1 << 9

# OS/2 usWidthClass 1..9
WIDTH_CLASSES: dict[int, FontStretch] = {
    1: FontStretch.ULTRA_CONDENSED,
    2: FontStretch.EXTRA_CONDENSED,
    3: FontStretch.CONDENSED,
    4: FontStretch.SEMI_CONDENSED,
    5: FontStretch.NORMAL,
    6: FontStretch.SEMI_EXPANDED,
    7: FontStretch.EXPANDED,
    8: FontStretch.EXTRA_EXPANDED,
    9: FontStretch.ULTRA_EXPANDED,
}

PANOSE_LATIN_TEXT = 2


def is_collection(data: bytes) -> bool:
    """Check for a TrueType/OpenType collection header."""
    return data[:4] == b"ttcf"


def face_count(data: bytes) -> int:
    """Number of faces stored in a font buffer (0 if unreadable)."""
    if not is_collection(data):
        return 1 if len(data) >= 12 else 0
    try:
        return len(TTCollection(BytesIO(data), lazy=True).fonts)
    except Exception as e:  # fontTools raises a wide range of errors on bad data
        logger.debug("Unreadable font collection", error=str(e))
        return 0


def info_from_ttfont(font: TTFont) -> FontInfo | None:
    """Derive the identity of a parsed face.

    Args:
        font: fontTools representation of one face

    Returns:
        FontInfo, or None if the face carries no family name
    """
    name_table = font["name"] if "name" in font else None
    if name_table is None:
        return None

    raw_family = (
        name_table.getDebugName(NAME_ID_TYPOGRAPHIC_FAMILY)
        or name_table.getDebugName(NAME_ID_FAMILY)
        or ""
    )
    family = typographic_family(raw_family)
    if not family:
        return None
    full_name = (name_table.getDebugName(NAME_ID_FULL_NAME) or "").lower()

    os2 = font["OS/2"] if "OS/2" in font else None
    post = font["post"] if "post" in font else None

    fs_selection = os2.fsSelection if os2 is not None else 0
    mac_style = font["head"].macStyle if "head" in font else 0
    if fs_selection & FS_SELECTION_ITALIC or mac_style & 0b10 or "italic" in full_name:
        style = FontStyle.ITALIC
    elif fs_selection & FS_SELECTION_OBLIQUE or "oblique" in full_name or "slanted" in full_name:
        style = FontStyle.OBLIQUE
    else:
        style = FontStyle.NORMAL

    weight = FontWeight.from_number(os2.usWeightClass) if os2 is not None else FontWeight.REGULAR
    stretch = (
        WIDTH_CLASSES.get(os2.usWidthClass, FontStretch.NORMAL)
        if os2 is not None
        else FontStretch.NORMAL
    )

    flags = FontFlags.NONE
    if post is not None and post.isFixedPitch:
        flags |= FontFlags.MONOSPACE
    panose = getattr(os2, "panose", None)
    if (
        panose is not None
        and panose.bFamilyType == PANOSE_LATIN_TEXT
        and 2 <= panose.bSerifStyle <= 10
    ):
        flags |= FontFlags.SERIF

    cmap = font.getBestCmap() if "cmap" in font else None
    coverage = Coverage.from_codepoints(cmap) if cmap else Coverage(())

    return FontInfo(
        family=family,
        variant=FontVariant(style=style, weight=weight, stretch=stretch),
        flags=flags,
        coverage=coverage,
    )


def read_face(data: bytes, index: int) -> Font | None:
    """Decode one face of a font buffer.

    Args:
        data: Raw font file or collection bytes
        index: Face index within the buffer

    Returns:
        Decoded Font, or None if the face cannot be decoded
    """
    try:
        ttfont = TTFont(BytesIO(data), fontNumber=index, lazy=True)
        info = info_from_ttfont(ttfont)
    except Exception as e:  # fontTools raises a wide range of errors on bad data
        logger.warning("Face decode failed", index=index, error=str(e), error_type=type(e).__name__)
        return None

    if info is None:
        logger.warning("Face has no family name", index=index)
        return None

    font = Font(data, index, info)
    font._ttfont = ttfont
    return font


def iter_font_infos(data: bytes) -> Iterator[tuple[int, FontInfo]]:
    """Yield ``(face index, FontInfo)`` for every readable face of a buffer.

    Faces that fail to decode are skipped.

    Args:
        data: Raw font file or collection bytes

    Yields:
        Face index and its FontInfo
    """
    for index in range(face_count(data)):
        font = read_face(data, index)
        if font is not None:
            yield index, font.info
            font.ttfont.close()


def iter_font_files(directory: Path) -> Iterator[Path]:
    """Recursively yield font files below a directory, sorted by path."""
    if not directory.is_dir():
        return
    for path in sorted(directory.rglob("*")):
        if path.is_file() and path.suffix.lower() in FONT_EXTENSIONS:
            yield path
