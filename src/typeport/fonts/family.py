"""Typographic family canonicalization.

Host environments and font name tables often report a family name that
still carries style words ("Roboto Bold", "Inter-SemiBold Italic"). The
canonical family strips those so that all faces of one family share a name.
"""

from collections.abc import Sequence

from typeport.exceptions import MissingFamilyError

GENERIC_FAMILY_PREFIXES: tuple[str, ...] = ("Noto", "NewCM", "NewComputerModern")

SEPARATORS: tuple[str, ...] = (" ", "-", "_")

# Optional modifier in front of a style suffix ("extra bold", "semi-light")
MODIFIERS: tuple[str, ...] = (
    "extra", "ext", "ex", "x", "semi", "sem", "sm", "demi", "dem", "ultra",
)

STYLE_SUFFIXES: tuple[str, ...] = (
    "normal", "italic", "oblique", "slanted",
    "thin", "th", "hairline", "light", "lt", "regular", "medium", "med", "md",
    "bold", "bd", "demi", "extb", "black", "blk", "bk", "heavy",
    "narrow", "condensed", "cond", "cn", "cd", "compressed", "expanded", "exp",
)


def _strip_any_suffix(text: str, suffixes: Sequence[str]) -> str | None:
    for suffix in suffixes:
        if text.endswith(suffix):
            return text[: len(text) - len(suffix)]
    return None


def typographic_family(family: str) -> str:
    """Strip trailing style words from a family name.

    Matching is case-insensitive but the original casing of the kept prefix
    is preserved.

    Args:
        family: Raw family name

    Returns:
        Canonical family name

    Example:
        >>> typographic_family("Roboto Bold Italic")
        'Roboto'
    """
    family = family.strip().lstrip(".")
    # ASCII-only so that indices into lower stay valid for family
    lower = "".join(c.lower() if c.isascii() else c for c in family)

    length = len(lower) + 1
    trimmed = lower
    while len(trimmed) < length:
        length = len(trimmed)

        t = trimmed
        shortened = False
        while (stripped := _strip_any_suffix(t, STYLE_SUFFIXES)) is not None:
            shortened = True
            t = stripped
        if not shortened:
            break

        stripped = _strip_any_suffix(t, SEPARATORS)
        if stripped is not None:
            trimmed = stripped
            t = stripped

        # A modifier only counts when a separator precedes it
        without_modifier = _strip_any_suffix(t, MODIFIERS)
        if without_modifier is not None:
            stripped = _strip_any_suffix(without_modifier, SEPARATORS)
            if stripped is not None:
                trimmed = stripped

    return family[: len(trimmed)]


def resolve_family(
    family: str,
    full_name: str,
    generic_prefixes: Sequence[str] = GENERIC_FAMILY_PREFIXES,
) -> str:
    """Pick and canonicalize the family of a host-supplied font.

    Families starting with a generic prefix (e.g. "Noto") group many
    unrelated faces, so the full name is used instead.

    Args:
        family: Family reported by the host
        full_name: Full name reported by the host
        generic_prefixes: Prefixes that trigger substitution by the full name

    Returns:
        Canonical family name

    Raises:
        MissingFamilyError: If neither field yields a family
    """
    if not family or family.startswith(tuple(generic_prefixes)):
        family = full_name

    if not family:
        raise MissingFamilyError()

    canonical = typographic_family(family)
    if not canonical:
        raise MissingFamilyError()
    return canonical
