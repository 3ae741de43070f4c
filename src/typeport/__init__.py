"""Typeport - Font registry and artifact export for typeset documents.

Typeport turns heterogeneous font sources (font files, embedded byte buffers,
host-supplied font descriptors with partial metadata) into a queryable font
registry, and turns compiled documents into portable artifacts that can be
written to disk, streamed to live-preview clients, or rasterized again.

Example:
    $ typeport render main.artifact.json -o main.png

This will decode the artifact, re-resolve its fonts and write the first page
as a PNG image.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
