"""Domain models for typeport.

This module contains the value types shared by the font registry, the
export pipeline and the render bridge. All models are designed to be:

- Immutable where they act as identities (FontInfo and its parts)
- Serializable to plain dictionaries for the artifact encodings
- Independent of fonttools implementation details, except Font

Key classes:
- FontInfo: Identity of one face
- Font: A decoded face
- Document: A paginated typeset document
- Artifact: Portable snapshot of a document
"""

from typeport.domain.artifact import ARTIFACT_VERSION, Artifact, ArtifactPage
from typeport.domain.document import Document, Page, ShapeItem, ShapeKind, TextItem
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

__all__: list[str] = [
    "ARTIFACT_VERSION",
    # Enums
    "FontFlags",
    "FontStyle",
    "ShapeKind",
    # Font identity
    "Coverage",
    "Font",
    "FontInfo",
    "FontStretch",
    "FontVariant",
    "FontWeight",
    # Documents
    "Artifact",
    "ArtifactPage",
    "Document",
    "Page",
    "ShapeItem",
    "TextItem",
]
