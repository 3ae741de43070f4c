"""Font resolution for the typesetting engine.

A FontResolver wraps a frozen FontBook, the parallel list of FontSlots and
a FontProfile. Searchers build resolvers: the BrowserFontSearcher from
host descriptors and embedded buffers, the SystemFontSearcher from font
files discovered on disk by concurrent workers.

Once a resolver exists, face indices are a stability contract: artifacts
created against it reference faces by these indices.
"""

import os
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any

import structlog

from typeport.config import FontConfig
from typeport.domain.font import Font, FontInfo, FontVariant
from typeport.exceptions import FontDescriptorError, FontLoadError
from typeport.fonts.book import FontBook, PartialFontBook
from typeport.fonts.family import GENERIC_FAMILY_PREFIXES
from typeport.fonts.inference import parse_web_font
from typeport.fonts.loader import (
    BufferFontLoader,
    FontLoader,
    FontSlot,
    WebFontHandle,
    WebFontLoader,
)
from typeport.fonts.profile import FontProfile
from typeport.fonts.reader import iter_font_files, iter_font_infos

logger = structlog.get_logger(__name__)


class FontResolver:
    """The font registry queried by the typesetting engine.

    Example:
        resolver = SystemFontSearcher().search_dirs([Path("fonts")]).to_resolver()
        index = resolver.select("Inter", FontVariant())
        font = resolver.font(index)
    """

    def __init__(
        self,
        book: FontBook,
        partial_book: PartialFontBook,
        slots: list[FontSlot],
        profile: FontProfile,
    ) -> None:
        if len(book) != len(slots):
            raise ValueError(f"font book has {len(book)} faces but {len(slots)} slots")
        self._book = book
        self._partial_book = partial_book
        self._slots = slots
        self._profile = profile

    @property
    def book(self) -> FontBook:
        """Metadata of every face, indexed by face id."""
        return self._book

    @property
    def profile(self) -> FontProfile:
        """Profile the resolver was built with."""
        return self._profile

    @property
    def partial_book(self) -> PartialFontBook:
        """Faces discovered after construction, not yet indexed."""
        return self._partial_book

    def __len__(self) -> int:
        return len(self._slots)

    def font(self, index: int) -> Font | None:
        """Load the face at ``index``.

        Returns:
            Decoded Font, or None if the index is unknown or the face
            cannot be decoded
        """
        if not 0 <= index < len(self._slots):
            return None
        return self._slots[index].load()

    def find(self, info: FontInfo) -> int | None:
        """Index of a face with exactly this identity."""
        return self._book.find(info)

    def select(self, family: str, variant: FontVariant) -> int | None:
        """Index of the face of ``family`` closest to ``variant``."""
        return self._book.select(family, variant)

    def families(self) -> list[str]:
        """Distinct family names known to the resolver."""
        return self._book.families()

    def resolve(self, info: FontInfo) -> Font | None:
        """Supply a face for ``info``.

        Tries an exact identity match first, then the closest variant of
        the same family. Returns None when neither yields a decodable face.
        """
        index = self.find(info)
        if index is None:
            index = self.select(info.family, info.variant)
        if index is None:
            return None
        return self.font(index)

    def rebuild(self) -> list[int]:
        """Promote faces pending in the partial book.

        Existing indices are unaffected; promoted faces get the next ones.

        Returns:
            Indices assigned to the promoted faces
        """
        indices = self._partial_book.merge_into(self._book, self._slots)
        if indices:
            logger.info("Promoted discovered fonts", count=len(indices))
        return indices


class FontSearcher:
    """Accumulates faces and their loaders in lockstep."""

    def __init__(self, config: FontConfig | None = None) -> None:
        self.config = config if config is not None else FontConfig()
        self.book = FontBook()
        self.fonts: list[FontSlot] = []
        self.profile = FontProfile(version=self.config.profile_version)
        self.partial_book = PartialFontBook()

    def _push(self, info: FontInfo, loader: FontLoader) -> int:
        index = self.book.push(info)
        self.fonts.append(FontSlot(loader))
        return index

    def add_font_data(self, buffer: bytes) -> int:
        """Register every face of an in-memory font file or collection.

        Args:
            buffer: Raw font bytes

        Returns:
            Number of faces registered
        """
        buffer = bytes(buffer)
        count = 0
        for face, info in iter_font_infos(buffer):
            self._push(info, BufferFontLoader(buffer, face))
            count += 1
        if count == 0:
            logger.warning("No readable faces in font data", size=len(buffer))
        return count

    def to_resolver(self) -> FontResolver:
        """Freeze the collected faces into a resolver."""
        return FontResolver(self.book, self.partial_book, self.fonts, self.profile)


class BrowserFontSearcher(FontSearcher):
    """Searcher fed by host-supplied font descriptors and embedded buffers."""

    def add_web_fonts(self, fonts: Iterable[Any]) -> list[FontDescriptorError]:
        """Register faces from host font descriptors.

        A bad descriptor is skipped and reported; the rest still register.

        Args:
            fonts: Descriptor mappings (see ``parse_web_font``)

        Returns:
            One error per rejected descriptor, in input order
        """
        prefixes = self.config.generic_family_prefixes or list(GENERIC_FAMILY_PREFIXES)
        errors: list[FontDescriptorError] = []

        for position, descriptor in enumerate(fonts):
            try:
                web_font = parse_web_font(descriptor, prefixes, self.profile)
            except FontDescriptorError as e:
                logger.warning(
                    "Rejected font descriptor",
                    position=position,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                errors.append(e)
                continue

            for face, info in enumerate(web_font.infos):
                index = len(self.fonts)
                handle = WebFontHandle(
                    info=info,
                    context=web_font.ref,
                    blob=web_font.blob,
                    index=index,
                )
                self._push(info, WebFontLoader(handle, face))
                logger.debug("Registered web font", family=info.family, index=index)

        return errors


class SystemFontSearcher(FontSearcher):
    """Searcher discovering font files on disk with parallel workers."""

    def add_font_file(self, path: Path) -> int:
        """Register every face of a font file.

        Raises:
            FontLoadError: If the file cannot be read
        """
        try:
            data = path.read_bytes()
        except OSError as e:
            raise FontLoadError(str(path), str(e)) from e
        return self.add_font_data(data)

    def _discover(self, path: Path) -> int:
        data = path.read_bytes()
        count = 0
        for face, info in iter_font_infos(data):
            self.partial_book.push(info, BufferFontLoader(data, face), source=str(path), face=face)
            count += 1
        return count

    def search_dirs(
        self,
        directories: Sequence[Path],
        max_workers: int | None = None,
    ) -> "SystemFontSearcher":
        """Discover fonts below ``directories`` concurrently.

        Each file is read and parsed by a worker thread that records its
        faces in the partial book. After every worker has joined, the
        partial book is merged; only then do the faces get indices.

        Args:
            directories: Directories searched recursively
            max_workers: Worker threads (None = config or auto)

        Returns:
            self, for chaining
        """
        if max_workers is None:
            max_workers = self.config.max_workers or min(32, (os.cpu_count() or 1) + 4)

        paths = [path for directory in directories for path in iter_font_files(directory)]
        logger.info("Searching fonts", files=len(paths), max_workers=max_workers)

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self._discover, path): path for path in paths}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    faces = future.result()
                except OSError as e:
                    logger.warning("Could not read font file", path=str(path), error=str(e))
                    continue
                logger.debug("Discovered font file", path=str(path), faces=faces)

        # Executor has joined every worker
        indices = self.partial_book.merge_into(self.book, self.fonts)
        logger.info("Font search complete", faces=len(indices), total=len(self.book))
        return self
