"""Artifact I/O layer for typeport.

This module handles turning artifacts into bytes and back.

Key classes:
- ArtifactCodec: Encode/decode artifacts
- ArtifactEncoding: Supported byte encodings
"""

from typeport.io.codec import ArtifactCodec, ArtifactEncoding, detect_encoding

__all__ = [
    "ArtifactCodec",
    "ArtifactEncoding",
    "detect_encoding",
]
