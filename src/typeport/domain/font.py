"""Font identity types.

This module defines the typed identity of a font face as seen by the
typesetting engine:
- FontStyle, FontWeight, FontStretch: the three variant axes
- FontVariant: one combination of the three axes
- FontFlags: coarse classification bits (monospace, serif)
- Coverage: codepoint intervals a face can render
- FontInfo: everything needed to select a face without loading it
- Font: a decoded face backed by its raw bytes
"""

from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, Flag
from io import BytesIO
from typing import Any, ClassVar

from fontTools.ttLib import TTFont

MAX_CODEPOINT = 0x10FFFF


class FontStyle(Enum):
    """Slant of a face."""

    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"


@dataclass(frozen=True, slots=True, order=True)
class FontWeight:
    """Weight of a face, from 1 (thinnest) to 1000 (heaviest).

    Named presets follow the usual CSS numbering (THIN = 100 ... BLACK = 900).
    """

    value: int

    THIN: ClassVar["FontWeight"]
    EXTRALIGHT: ClassVar["FontWeight"]
    LIGHT: ClassVar["FontWeight"]
    REGULAR: ClassVar["FontWeight"]
    MEDIUM: ClassVar["FontWeight"]
    SEMIBOLD: ClassVar["FontWeight"]
    BOLD: ClassVar["FontWeight"]
    EXTRABOLD: ClassVar["FontWeight"]
    BLACK: ClassVar["FontWeight"]

    def __post_init__(self) -> None:
        if not 1 <= self.value <= 1000:
            raise ValueError(f"font weight must be within 1..1000, got {self.value}")

    @classmethod
    def from_number(cls, number: int) -> "FontWeight":
        """Create a weight, clamping the number into the valid range."""
        return cls(min(max(int(number), 1), 1000))

    def distance(self, other: "FontWeight") -> int:
        """Absolute difference between two weights."""
        return abs(self.value - other.value)


FontWeight.THIN = FontWeight(100)
FontWeight.EXTRALIGHT = FontWeight(200)
FontWeight.LIGHT = FontWeight(300)
FontWeight.REGULAR = FontWeight(400)
FontWeight.MEDIUM = FontWeight(500)
FontWeight.SEMIBOLD = FontWeight(600)
FontWeight.BOLD = FontWeight(700)
FontWeight.EXTRABOLD = FontWeight(800)
FontWeight.BLACK = FontWeight(900)


@dataclass(frozen=True, slots=True, order=True)
class FontStretch:
    """Width of a face relative to its normal width.

    Stored in thousandths so that presets compare exactly; ``ratio``
    gives the conventional value (0.5 = ultra-condensed, 2.0 = ultra-expanded).
    """

    permille: int

    ULTRA_CONDENSED: ClassVar["FontStretch"]
    EXTRA_CONDENSED: ClassVar["FontStretch"]
    CONDENSED: ClassVar["FontStretch"]
    SEMI_CONDENSED: ClassVar["FontStretch"]
    NORMAL: ClassVar["FontStretch"]
    SEMI_EXPANDED: ClassVar["FontStretch"]
    EXPANDED: ClassVar["FontStretch"]
    EXTRA_EXPANDED: ClassVar["FontStretch"]
    ULTRA_EXPANDED: ClassVar["FontStretch"]

    def __post_init__(self) -> None:
        if not 500 <= self.permille <= 2000:
            raise ValueError(f"font stretch must be within 0.5..2.0, got {self.ratio}")

    @classmethod
    def from_ratio(cls, ratio: float) -> "FontStretch":
        """Create a stretch from a ratio, clamping into 0.5..2.0."""
        return cls(min(max(round(ratio * 1000), 500), 2000))

    @property
    def ratio(self) -> float:
        """Width ratio relative to normal."""
        return self.permille / 1000

    def distance(self, other: "FontStretch") -> int:
        """Absolute difference between two stretches, in thousandths."""
        return abs(self.permille - other.permille)


FontStretch.ULTRA_CONDENSED = FontStretch(500)
FontStretch.EXTRA_CONDENSED = FontStretch(625)
FontStretch.CONDENSED = FontStretch(750)
FontStretch.SEMI_CONDENSED = FontStretch(875)
FontStretch.NORMAL = FontStretch(1000)
FontStretch.SEMI_EXPANDED = FontStretch(1125)
FontStretch.EXPANDED = FontStretch(1250)
FontStretch.EXTRA_EXPANDED = FontStretch(1500)
FontStretch.ULTRA_EXPANDED = FontStretch(2000)


@dataclass(frozen=True, slots=True)
class FontVariant:
    """One style/weight/stretch combination.

    Attributes:
        style: Slant of the face
        weight: Weight of the face
        stretch: Width of the face
    """

    style: FontStyle = FontStyle.NORMAL
    weight: FontWeight = FontWeight.REGULAR
    stretch: FontStretch = FontStretch.NORMAL

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with style, weight and stretch fields
        """
        return {
            "style": self.style.value,
            "weight": self.weight.value,
            "stretch": self.stretch.permille,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontVariant":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with style, weight and stretch fields

        Returns:
            FontVariant instance
        """
        return cls(
            style=FontStyle(data["style"]),
            weight=FontWeight(data["weight"]),
            stretch=FontStretch(data["stretch"]),
        )


class FontFlags(Flag):
    """Coarse classification of a face."""

    NONE = 0
    MONOSPACE = 1
    SERIF = 2


@dataclass(frozen=True, slots=True)
class Coverage:
    """Sorted, non-overlapping, inclusive codepoint intervals."""

    intervals: tuple[tuple[int, int], ...] = ((0, MAX_CODEPOINT),)
    _starts: tuple[int, ...] = field(default=(), init=False, repr=False, compare=False)

    FULL: ClassVar["Coverage"]

    def __post_init__(self) -> None:
        previous_end = -1
        for start, end in self.intervals:
            if start > end or start <= previous_end:
                raise ValueError(
                    f"coverage intervals must be sorted and disjoint: {self.intervals}"
                )
            previous_end = end
        object.__setattr__(self, "_starts", tuple(start for start, _ in self.intervals))

    @classmethod
    def from_codepoints(cls, codepoints: Iterable[int]) -> "Coverage":
        """Collapse a set of codepoints into intervals.

        Args:
            codepoints: Codepoints in any order, duplicates allowed

        Returns:
            Coverage with adjacent codepoints merged into one interval
        """
        intervals: list[tuple[int, int]] = []
        for cp in sorted(set(codepoints)):
            if intervals and cp == intervals[-1][1] + 1:
                intervals[-1] = (intervals[-1][0], cp)
            else:
                intervals.append((cp, cp))
        return cls(tuple(intervals))

    def contains(self, codepoint: int) -> bool:
        """Check whether a codepoint falls inside one of the intervals."""
        idx = bisect_right(self._starts, codepoint) - 1
        return idx >= 0 and codepoint <= self.intervals[idx][1]

    def to_list(self) -> list[list[int]]:
        """Serialize to a list of [start, end] pairs."""
        return [[start, end] for start, end in self.intervals]

    @classmethod
    def from_list(cls, data: list[list[int]]) -> "Coverage":
        """Deserialize from a list of [start, end] pairs."""
        return cls(tuple((int(start), int(end)) for start, end in data))


Coverage.FULL = Coverage()


@dataclass(frozen=True, slots=True)
class FontInfo:
    """Identity of one face, usable without loading its outlines.

    Hashable, so resolvers can look faces up by value.

    Attributes:
        family: Canonical typographic family name (never empty)
        variant: Style, weight and stretch of the face
        flags: Monospace/serif classification
        coverage: Codepoints the face can render
    """

    family: str
    variant: FontVariant = field(default_factory=FontVariant)
    flags: FontFlags = FontFlags.NONE
    coverage: Coverage = Coverage.FULL

    def __post_init__(self) -> None:
        if not self.family:
            raise ValueError("font family must not be empty")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary representation of the font info
        """
        return {
            "family": self.family,
            "variant": self.variant.to_dict(),
            "flags": self.flags.value,
            "coverage": self.coverage.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FontInfo":
        """Deserialize from dictionary.

        Args:
            data: Dictionary representation of the font info

        Returns:
            FontInfo instance
        """
        return cls(
            family=data["family"],
            variant=FontVariant.from_dict(data["variant"]),
            flags=FontFlags(data.get("flags", 0)),
            coverage=Coverage.from_list(data["coverage"]) if "coverage" in data else Coverage.FULL,
        )


class Font:
    """A decoded face backed by its raw font bytes.

    The fontTools representation is parsed lazily on first access.

    Example:
        font = Font(data, index=0, info=info)
        units = font.units_per_em
    """

    def __init__(self, data: bytes, index: int, info: FontInfo) -> None:
        self.data = data
        self.index = index
        self.info = info
        self._ttfont: TTFont | None = None

    @property
    def ttfont(self) -> TTFont:
        """fontTools view of the face."""
        if self._ttfont is None:
            self._ttfont = TTFont(BytesIO(self.data), fontNumber=self.index, lazy=True)
        return self._ttfont

    @property
    def units_per_em(self) -> int:
        """Units per em of the face."""
        return self.ttfont["head"].unitsPerEm  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"Font(family={self.info.family!r}, index={self.index}, size={len(self.data)})"
