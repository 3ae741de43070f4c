"""Rasterization of documents and artifacts.

Key classes:
- RenderBridge: Artifact bytes to packed RGBA pixels
- PageRasterizer: Pillow-based page rasterizer
"""

from typeport.render.bridge import RenderBridge, RenderedImage
from typeport.render.color import parse_color
from typeport.render.rasterizer import PageRasterizer, page_pixel_size

__all__ = [
    "PageRasterizer",
    "RenderBridge",
    "RenderedImage",
    "page_pixel_size",
    "parse_color",
]
