"""Lazy font loaders and registry slots.

A FontSlot pairs a registry index with a loader that produces the decoded
face on first use. Loaders never raise for undecodable data: they return
None and the face is treated as unavailable.

Key classes:
- FontLoader: Loader capability
- BufferFontLoader: Decodes a face from an owned byte buffer
- WebFontLoader: Fetches bytes from the host through a callback
- FontSlot: Registry entry caching the loader's result
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from typeport.domain.font import Font, FontInfo
from typeport.fonts.reader import read_face

logger = structlog.get_logger(__name__)


class FontLoader(ABC):
    """Produces a decoded face on demand."""

    @abstractmethod
    def load(self) -> Font | None:
        """Load the face.

        Returns:
            Decoded Font, or None if the face is unavailable
        """


class BufferFontLoader(FontLoader):
    """Decodes face ``index`` of a font buffer held in memory.

    Example:
        loader = BufferFontLoader(Path("Inter.ttc").read_bytes(), index=2)
        font = loader.load()
    """

    def __init__(self, buffer: bytes, index: int = 0) -> None:
        self.buffer = bytes(buffer)
        self.index = index

    def load(self) -> Font | None:
        return read_face(self.buffer, self.index)


@dataclass
class WebFontHandle:
    """Host-side font resource bound to one registry slot.

    Attributes:
        info: Inferred identity of the face
        context: Opaque host handle for the resource
        blob: Host callback returning raw bytes for a registry index
        index: Registry index passed to ``blob``
    """

    info: FontInfo
    context: Any
    blob: Callable[[int], Any]
    index: int

    def load(self) -> bytes | None:
        """Fetch the raw bytes from the host.

        Blocks until the host answers.

        Returns:
            Raw font bytes, or None if the host returned something else
        """
        data = self.blob(self.index)
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)
        logger.warning(
            "Host returned no font bytes",
            family=self.info.family,
            index=self.index,
            result_type=type(data).__name__,
        )
        return None


class WebFontLoader(FontLoader):
    """Fetches font bytes from the host and decodes face ``index``."""

    def __init__(self, font: WebFontHandle, index: int = 0) -> None:
        self.font = font
        self.index = index

    def load(self) -> Font | None:
        logger.debug("Fetching host font", family=self.font.info.family, index=self.font.index)
        try:
            data = self.font.load()
        except Exception as e:  # host callbacks may fail arbitrarily
            logger.warning(
                "Host font fetch failed",
                family=self.font.info.family,
                index=self.font.index,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        if data is None:
            return None
        return read_face(data, self.index)


class FontSlot:
    """Registry entry owning one loader.

    The loader runs at most once; later calls return the cached result,
    including a cached None for unavailable faces.
    """

    def __init__(self, loader: FontLoader) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._loaded = False
        self._font: Font | None = None

    def load(self) -> Font | None:
        """Get the decoded face, loading it on first use."""
        with self._lock:
            if not self._loaded:
                self._font = self._loader.load()
                self._loaded = True
            return self._font

    @property
    def is_loaded(self) -> bool:
        """Whether the loader already ran."""
        return self._loaded
