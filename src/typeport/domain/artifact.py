"""Portable snapshot of a compiled document.

An Artifact carries the pages of a document plus the identity of every
face the pages reference. Faces are embedded by value (FontInfo), never by
their bytes: whoever re-imports the artifact re-resolves them against its
own font registry.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from typeport.domain.document import Document, Item, Page, ShapeItem, ShapeKind, TextItem
from typeport.domain.font import Font, FontInfo

if TYPE_CHECKING:
    from typeport.fonts.resolver import FontResolver

ARTIFACT_VERSION = "1"

# Fields every serialized item of a given type must carry
TEXT_FIELDS = ("x", "y", "size", "text", "font")
SHAPE_FIELDS = ("kind", "x", "y", "width", "height")

logger = structlog.get_logger(__name__)


@dataclass
class ArtifactPage:
    """Page payload: size in points plus serialized drawing items."""

    width: float
    height: float
    items: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "height": self.height, "items": self.items}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtifactPage":
        items = data.get("items", [])
        if not isinstance(items, list):
            raise ValueError(f"page items must be a list, got {type(items).__name__}")
        return cls(width=float(data["width"]), height=float(data["height"]), items=items)


@dataclass
class Artifact:
    """Self-describing snapshot of a compiled document.

    Attributes:
        pages: Ordered page payloads
        fonts: Every face referenced by the pages, by value
        version: Format version tag
        title: Optional document title
    """

    pages: list[ArtifactPage] = field(default_factory=list)
    fonts: list[FontInfo] = field(default_factory=list)
    version: str = ARTIFACT_VERSION
    title: str | None = None

    @classmethod
    def from_document(cls, document: Document) -> "Artifact":
        """Snapshot a typeset document.

        Text items reference fonts by their position in ``fonts``, which
        lists faces in first-use order.

        Args:
            document: The typeset document

        Returns:
            Artifact describing the document
        """
        fonts = document.referenced_fonts()
        font_ids = {info: idx for idx, info in enumerate(fonts)}

        pages = [
            ArtifactPage(
                width=page.width,
                height=page.height,
                items=[_item_to_dict(item, font_ids) for item in page.items],
            )
            for page in document.pages
        ]
        return cls(pages=pages, fonts=fonts, title=document.title)

    def to_document(self, resolver: "FontResolver") -> Document:
        """Rebuild a document, re-resolving fonts through ``resolver``.

        A face the resolver cannot supply is kept as ``font=None`` on the
        text items that use it.

        Args:
            resolver: Font resolver of the importing side

        Returns:
            Reconstructed document
        """
        faces: list[Font | None] = []
        for info in self.fonts:
            font = resolver.resolve(info)
            if font is None:
                logger.warning("Font unavailable, using fallback", family=info.family)
            faces.append(font)

        pages = [
            Page(
                width=page.width,
                height=page.height,
                items=[_item_from_dict(data, self.fonts, faces) for data in page.items],
            )
            for page in self.pages
        ]
        return Document(pages=pages, title=self.title)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation of the artifact
        """
        return {
            "version": self.version,
            "title": self.title,
            "fonts": [info.to_dict() for info in self.fonts],
            "pages": [page.to_dict() for page in self.pages],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Artifact":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of the artifact

        Returns:
            Artifact instance

        Raises:
            KeyError, TypeError, ValueError: If the dictionary is malformed,
                including items with missing fields, wrong field types or a
                font reference outside the font list
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        version = str(data.get("version", ARTIFACT_VERSION))
        if version != ARTIFACT_VERSION:
            raise ValueError(f"unsupported artifact version {version!r}")
        pages = [ArtifactPage.from_dict(p) for p in data["pages"]]
        fonts = [FontInfo.from_dict(f) for f in data["fonts"]]
        for page in pages:
            for item in page.items:
                _validate_item(item, len(fonts))
        return cls(pages=pages, fonts=fonts, version=version, title=data.get("title"))


def _item_to_dict(item: Item, font_ids: dict[FontInfo, int]) -> dict[str, Any]:
    if isinstance(item, TextItem):
        return {
            "type": "text",
            "x": item.x,
            "y": item.y,
            "size": item.size,
            "text": item.text,
            "font": font_ids[item.font_info],
            "fill": item.fill,
        }
    return {
        "type": "shape",
        "kind": item.kind.value,
        "x": item.x,
        "y": item.y,
        "width": item.width,
        "height": item.height,
        "fill": item.fill,
        "stroke": item.stroke,
        "stroke_width": item.stroke_width,
    }


def _item_from_dict(
    data: dict[str, Any],
    fonts: list[FontInfo],
    faces: list[Font | None],
) -> Item:
    item_type = data.get("type")
    if item_type == "text":
        font_id = data["font"]
        return TextItem(
            x=data["x"],
            y=data["y"],
            size=data["size"],
            text=data["text"],
            font_info=fonts[font_id],
            font=faces[font_id],
            fill=data.get("fill", "000000"),
        )
    if item_type == "shape":
        return ShapeItem(
            kind=ShapeKind(data["kind"]),
            x=data["x"],
            y=data["y"],
            width=data["width"],
            height=data["height"],
            fill=data.get("fill"),
            stroke=data.get("stroke"),
            stroke_width=data.get("stroke_width", 1.0),
        )
    raise ValueError(f"unknown item type {item_type!r}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _expect_number(data: dict[str, Any], key: str) -> None:
    if not _is_number(data[key]):
        raise TypeError(f"item field {key!r} must be a number, got {data[key]!r}")


def _expect_optional_str(data: dict[str, Any], key: str) -> None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"item field {key!r} must be a string, got {value!r}")


def _validate_item(data: Any, font_count: int) -> None:
    """Check one serialized item before it is turned back into a drawing item.

    Raises:
        KeyError: If a required field is missing
        TypeError: If a field has the wrong type
        ValueError: If the item type or shape kind is unknown, or the font
            reference is outside ``0..font_count - 1``
    """
    if not isinstance(data, dict):
        raise TypeError(f"page item must be an object, got {type(data).__name__}")

    item_type = data.get("type")
    if item_type == "text":
        missing = [key for key in TEXT_FIELDS if key not in data]
        if missing:
            raise KeyError(f"text item is missing {', '.join(missing)}")
        for key in ("x", "y", "size"):
            _expect_number(data, key)
        if not isinstance(data["text"], str):
            raise TypeError(f"item field 'text' must be a string, got {data['text']!r}")
        font = data["font"]
        if not isinstance(font, int) or isinstance(font, bool):
            raise TypeError(f"item field 'font' must be an integer, got {font!r}")
        if not 0 <= font < font_count:
            raise ValueError(f"font reference {font} outside the {font_count} artifact fonts")
        _expect_optional_str(data, "fill")
    elif item_type == "shape":
        missing = [key for key in SHAPE_FIELDS if key not in data]
        if missing:
            raise KeyError(f"shape item is missing {', '.join(missing)}")
        ShapeKind(data["kind"])
        for key in ("x", "y", "width", "height"):
            _expect_number(data, key)
        if "stroke_width" in data:
            _expect_number(data, "stroke_width")
        _expect_optional_str(data, "fill")
        _expect_optional_str(data, "stroke")
    else:
        raise ValueError(f"unknown item type {item_type!r}")
