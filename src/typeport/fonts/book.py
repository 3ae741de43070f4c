"""Font book and provisional discovery state.

The FontBook is the ordered, append-only list of faces a registry knows
about; a face's position is its permanent index. The PartialFontBook
collects candidates from concurrent discovery workers; none of its entries
has an index until a single merge step promotes them into a FontBook.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from typeport.domain.font import FontInfo, FontStyle, FontVariant
from typeport.fonts.loader import FontLoader, FontSlot


def style_distance(a: FontStyle, b: FontStyle) -> int:
    """Distance between two styles (italic and oblique are close)."""
    if a == b:
        return 0
    if a != FontStyle.NORMAL and b != FontStyle.NORMAL:
        return 1
    return 2


class FontBook:
    """Append-only ordered collection of FontInfo.

    Example:
        book = FontBook()
        index = book.push(info)
        assert book[index] == info
    """

    def __init__(self) -> None:
        self._infos: list[FontInfo] = []

    def push(self, info: FontInfo) -> int:
        """Append a face and return its index."""
        index = len(self._infos)
        self._infos.append(info)
        return index

    def __len__(self) -> int:
        return len(self._infos)

    def __getitem__(self, index: int) -> FontInfo:
        return self._infos[index]

    def __iter__(self) -> Iterator[FontInfo]:
        return iter(self._infos)

    def families(self) -> list[str]:
        """Distinct family names, sorted case-insensitively."""
        return sorted({info.family for info in self._infos}, key=str.lower)

    def find(self, info: FontInfo) -> int | None:
        """Index of the first face whose info equals ``info``."""
        for index, candidate in enumerate(self._infos):
            if candidate == info:
                return index
        return None

    def select(self, family: str, variant: FontVariant) -> int | None:
        """Index of the face of ``family`` closest to ``variant``.

        Faces are ranked by style distance, then stretch distance, then
        weight distance; ties go to the lower index.

        Args:
            family: Family name, compared case-insensitively
            variant: Requested variant

        Returns:
            Best index, or None if the family is unknown
        """
        wanted = family.lower()
        best: tuple[tuple[int, int, int], int] | None = None
        for index, info in enumerate(self._infos):
            if info.family.lower() != wanted:
                continue
            key = (
                style_distance(info.variant.style, variant.style),
                info.variant.stretch.distance(variant.stretch),
                info.variant.weight.distance(variant.weight),
            )
            if best is None or key < best[0]:
                best = (key, index)
        return best[1] if best is not None else None


class ReadWriteLock:
    """Many concurrent readers or one exclusive writer, never both.

    Waiting writers take precedence: new readers queue behind them.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass
class PartialEntry:
    """A discovered face waiting for promotion."""

    info: FontInfo
    loader: FontLoader
    source: str = ""
    face: int = 0


class PartialFontBook:
    """Lock-guarded accumulator for concurrently discovered faces.

    Workers call ``push``; after all of them have joined, one owner calls
    ``merge_into`` which assigns indices ordered by source and face index,
    so the outcome does not depend on worker scheduling.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._entries: list[PartialEntry] = []
        self.revision = 0

    def push(self, info: FontInfo, loader: FontLoader, source: str = "", face: int = 0) -> None:
        """Record a provisional face found in ``source`` at ``face``."""
        with self._lock.write_locked():
            self._entries.append(PartialEntry(info, loader, source, face))
            self.revision += 1

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._entries)

    def infos(self) -> list[FontInfo]:
        """Snapshot of the provisional faces."""
        with self._lock.read_locked():
            return [entry.info for entry in self._entries]

    def merge_into(self, book: FontBook, slots: list[FontSlot]) -> list[int]:
        """Promote every provisional face into ``book`` and ``slots``.

        Must only run once all discovery workers have finished.

        Args:
            book: Book receiving the faces
            slots: Slot list kept in lockstep with ``book``

        Returns:
            Indices assigned to the promoted faces, in promotion order
        """
        with self._lock.write_locked():
            entries, self._entries = self._entries, []
        entries.sort(key=lambda entry: (entry.source, entry.face))

        indices = []
        for entry in entries:
            index = book.push(entry.info)
            slots.append(FontSlot(entry.loader))
            indices.append(index)
        return indices
