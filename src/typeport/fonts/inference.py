"""Font metadata inference for host-supplied font descriptors.

Browser-like hosts describe local fonts with a handful of free-form strings
(family, full name, PostScript name, style) and no access to the font
tables. This module turns such a descriptor into typed FontInfo records.

Key functions:
- infer_info_from_web_font: Heuristic FontInfo from the four name strings
- parse_web_font: Validate a raw descriptor mapping and infer its faces
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from typeport.domain.font import (
    Coverage,
    FontFlags,
    FontInfo,
    FontStretch,
    FontStyle,
    FontVariant,
    FontWeight,
)
from typeport.exceptions import (
    MalformedDescriptorError,
    MissingLoaderError,
    MissingReferenceError,
)
from typeport.fonts.family import GENERIC_FAMILY_PREFIXES, resolve_family
from typeport.fonts.profile import FontProfile

logger = structlog.get_logger(__name__)

# Ordered light to heavy; order decides which fallback wins
WEIGHT_KEYWORDS: tuple[tuple[str, FontWeight], ...] = (
    ("thin", FontWeight.THIN),
    ("extralight", FontWeight.EXTRALIGHT),
    ("extra light", FontWeight.EXTRALIGHT),
    ("extra-light", FontWeight.EXTRALIGHT),
    ("light", FontWeight.LIGHT),
    ("regular", FontWeight.REGULAR),
    ("medium", FontWeight.MEDIUM),
    ("semibold", FontWeight.SEMIBOLD),
    ("semi bold", FontWeight.SEMIBOLD),
    ("semi-bold", FontWeight.SEMIBOLD),
    ("bold", FontWeight.BOLD),
    ("extrabold", FontWeight.EXTRABOLD),
    ("extra bold", FontWeight.EXTRABOLD),
    ("extra-bold", FontWeight.EXTRABOLD),
    ("black", FontWeight.BLACK),
)

STRETCH_KEYWORDS: tuple[tuple[str, FontStretch], ...] = (
    ("ultracondensed", FontStretch.ULTRA_CONDENSED),
    ("ultra_condensed", FontStretch.ULTRA_CONDENSED),
    ("ultra-condensed", FontStretch.ULTRA_CONDENSED),
    ("extracondensed", FontStretch.EXTRA_CONDENSED),
    ("extra_condensed", FontStretch.EXTRA_CONDENSED),
    ("extra-condensed", FontStretch.EXTRA_CONDENSED),
    ("condensed", FontStretch.CONDENSED),
    ("semicondensed", FontStretch.SEMI_CONDENSED),
    ("semi_condensed", FontStretch.SEMI_CONDENSED),
    ("semi-condensed", FontStretch.SEMI_CONDENSED),
    ("normal", FontStretch.NORMAL),
    ("semiexpanded", FontStretch.SEMI_EXPANDED),
    ("semi_expanded", FontStretch.SEMI_EXPANDED),
    ("semi-expanded", FontStretch.SEMI_EXPANDED),
    ("expanded", FontStretch.EXPANDED),
    ("extraexpanded", FontStretch.EXTRA_EXPANDED),
    ("extra_expanded", FontStretch.EXTRA_EXPANDED),
    ("extra-expanded", FontStretch.EXTRA_EXPANDED),
    ("ultraexpanded", FontStretch.ULTRA_EXPANDED),
    ("ultra_expanded", FontStretch.ULTRA_EXPANDED),
    ("ultra-expanded", FontStretch.ULTRA_EXPANDED),
)

DESCRIPTOR_STRING_KEYS: dict[str, str] = {
    "postscriptName": "postscript_name",
    "family": "family",
    "fullName": "full_name",
    "style": "style",
}
DESCRIPTOR_KEYS = frozenset([*DESCRIPTOR_STRING_KEYS, "ref", "info", "blob"])


@dataclass(frozen=True)
class WebFontDescriptor:
    """Raw name strings describing one host font resource.

    Attributes:
        family: Family name as reported by the host
        full_name: Full name (family plus style words)
        postscript_name: PostScript name
        style: Style name (e.g. "Bold Italic")
    """

    family: str = ""
    full_name: str = ""
    postscript_name: str = ""
    style: str = ""


@dataclass
class WebFont:
    """A validated host font resource.

    Attributes:
        ref: Opaque host handle for the resource
        blob: Host callback returning the raw font bytes
        infos: One FontInfo per face of the resource
    """

    ref: Any
    blob: Callable[[int], Any]
    infos: list[FontInfo]


def _infer_style(full: str) -> FontStyle:
    # Some fonts miss the relevant bits for italic or oblique, so only the
    # full name is trusted here.
    if "italic" in full:
        return FontStyle.ITALIC
    if "oblique" in full or "slanted" in full:
        return FontStyle.OBLIQUE
    return FontStyle.NORMAL


def _infer_weight(search_scopes: Sequence[str]) -> FontWeight:
    fallback: FontWeight | None = None
    for keyword, weight in WEIGHT_KEYWORDS:
        for idx, scope in enumerate(search_scopes):
            if keyword in scope:
                if idx == 0:
                    return weight
                fallback = weight
    return fallback if fallback is not None else FontWeight.REGULAR


def _infer_stretch(search_scopes: Sequence[str]) -> FontStretch:
    # Unlike weight, matches outside the first scope are discarded
    for keyword, stretch in STRETCH_KEYWORDS:
        for idx, scope in enumerate(search_scopes):
            if keyword in scope and idx == 0:
                return stretch
    return FontStretch.NORMAL


def _infer_flags(search_scopes: Sequence[str]) -> FontFlags:
    flags = FontFlags.NONE
    for scope in search_scopes:
        if "mono" in scope:
            flags |= FontFlags.MONOSPACE
        elif "serif" in scope:
            flags |= FontFlags.SERIF
    return flags


def infer_info_from_web_font(
    descriptor: WebFontDescriptor,
    generic_prefixes: Sequence[str] = GENERIC_FAMILY_PREFIXES,
) -> FontInfo:
    """Infer the identity of a face from its host-reported names.

    Keywords are searched in three scopes ranked by trust: the style name,
    the PostScript name, then the full name. A weight keyword found in the
    style name is definitive; otherwise the last keyword (in light to heavy
    order) found anywhere else wins. Stretch only honours the style name.
    Monospace and serif flags are also read from the resolved family.

    Args:
        descriptor: Name strings reported by the host
        generic_prefixes: Family prefixes replaced by the full name

    Returns:
        Inferred FontInfo with full coverage

    Raises:
        MissingFamilyError: If no family can be derived
    """
    family = resolve_family(descriptor.family, descriptor.full_name, generic_prefixes)

    full = descriptor.full_name.lower()
    postscript = descriptor.postscript_name.lower()
    style = descriptor.style.lower()
    search_scopes = (style, postscript, full)

    variant = FontVariant(
        style=_infer_style(full),
        weight=_infer_weight(search_scopes),
        stretch=_infer_stretch(search_scopes),
    )

    return FontInfo(
        family=family,
        variant=variant,
        flags=_infer_flags((*search_scopes, family.lower())),
        coverage=Coverage.FULL,
    )


def _expect_string(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise MalformedDescriptorError(
            f"expected string for web_font.{field}, got {value!r}", key=field
        )
    return value


def _parse_info_cache(value: Any, profile: FontProfile) -> list[FontInfo] | None:
    """Read a precomputed metadata cache, or None if it is unusable.

    The cache is ``{"info": [FontInfo dict, ...], "conditions": [...]}``.
    It is only used when ``profile`` accepts its conditions.
    """
    try:
        infos = [FontInfo.from_dict(item) for item in value["info"]]
        conditions = value.get("conditions")
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.warning("Ignoring unusable font info cache", error=str(e))
        return None
    if not profile.is_valid(conditions):
        logger.info("Ignoring stale font info cache", profile=profile.version)
        return None
    return infos or None


def parse_web_font(
    descriptor: Any,
    generic_prefixes: Sequence[str] = GENERIC_FAMILY_PREFIXES,
    profile: FontProfile | None = None,
) -> WebFont:
    """Validate a host font descriptor and infer its faces.

    Recognized keys are ``postscriptName``, ``family``, ``fullName``,
    ``style`` (strings), ``ref`` (opaque handle), ``info`` (optional
    precomputed metadata cache) and ``blob`` (callable returning bytes).

    Args:
        descriptor: Mapping supplied by the host
        generic_prefixes: Family prefixes replaced by the full name
        profile: Profile deciding whether a cache is still valid
            (default profile when None)

    Returns:
        WebFont bundling the handle, the byte loader and the inferred faces

    Raises:
        MalformedDescriptorError: Unknown key or value of the wrong type
        MissingFamilyError: No family can be derived
        MissingReferenceError: No ``ref`` handle
        MissingLoaderError: No ``blob`` callback
    """
    if not isinstance(descriptor, Mapping):
        raise MalformedDescriptorError(
            f"expected object for iterating font, got {descriptor!r}"
        )

    if profile is None:
        profile = FontProfile()

    names: dict[str, str] = {}
    font_ref: Any = None
    font_blob: Callable[[int], Any] | None = None
    cached: list[FontInfo] | None = None

    for key, value in descriptor.items():
        key = _expect_string("key", key)
        if key in DESCRIPTOR_STRING_KEYS:
            names[DESCRIPTOR_STRING_KEYS[key]] = _expect_string(key, value)
        elif key == "ref":
            font_ref = value
        elif key == "info":
            cached = _parse_info_cache(value, profile)
        elif key == "blob":
            if not callable(value):
                raise MalformedDescriptorError(
                    f"expected function for web_font.blob, got {value!r}", key=key
                )
            font_blob = value
        else:
            raise MalformedDescriptorError(f"unknown key for web_font: {key}", key=key)

    web_descriptor = WebFontDescriptor(**names)
    if cached is not None:
        infos = cached
    else:
        infos = [infer_info_from_web_font(web_descriptor, generic_prefixes)]

    if font_ref is None:
        raise MissingReferenceError(web_descriptor.family)
    if font_blob is None:
        raise MissingLoaderError(web_descriptor.family)

    return WebFont(ref=font_ref, blob=font_blob, infos=infos)
