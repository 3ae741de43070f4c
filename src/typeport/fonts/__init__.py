"""Font registry for typeport.

This module turns heterogeneous font sources into a queryable registry:

- Metadata inference from host-supplied font descriptors
- Exact metadata from owned font bytes via fonttools
- Lazy, source-agnostic face loading through slots
- Concurrent discovery merged into a stable index space

Key classes:
- FontResolver: The registry queried by the typesetting engine
- BrowserFontSearcher: Builds a resolver from host descriptors and buffers
- SystemFontSearcher: Builds a resolver from font directories
"""

from typeport.fonts.book import FontBook, PartialFontBook, ReadWriteLock
from typeport.fonts.family import resolve_family, typographic_family
from typeport.fonts.inference import (
    WebFont,
    WebFontDescriptor,
    infer_info_from_web_font,
    parse_web_font,
)
from typeport.fonts.loader import (
    BufferFontLoader,
    FontLoader,
    FontSlot,
    WebFontHandle,
    WebFontLoader,
)
from typeport.fonts.profile import FontProfile
from typeport.fonts.resolver import (
    BrowserFontSearcher,
    FontResolver,
    FontSearcher,
    SystemFontSearcher,
)

__all__ = [
    "BrowserFontSearcher",
    "BufferFontLoader",
    "FontBook",
    "FontLoader",
    "FontProfile",
    "FontResolver",
    "FontSearcher",
    "FontSlot",
    "PartialFontBook",
    "ReadWriteLock",
    "SystemFontSearcher",
    "WebFont",
    "WebFontDescriptor",
    "WebFontHandle",
    "WebFontLoader",
    "infer_info_from_web_font",
    "parse_web_font",
    "resolve_family",
    "typographic_family",
]
