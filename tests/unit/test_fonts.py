"""Tests for the font reader, loaders, book and resolvers."""

import threading
import time
from pathlib import Path
from unittest.mock import Mock

import pytest

from typeport.config import FontConfig
from typeport.domain import FontFlags, FontInfo, FontStretch, FontStyle, FontVariant, FontWeight
from typeport.exceptions import FontLoadError, MissingLoaderError
from typeport.fonts import (
    BrowserFontSearcher,
    BufferFontLoader,
    FontBook,
    FontProfile,
    FontResolver,
    FontLoader,
    FontSlot,
    PartialFontBook,
    ReadWriteLock,
    SystemFontSearcher,
    WebFontHandle,
    WebFontLoader,
)
from typeport.fonts.reader import face_count, is_collection, iter_font_infos, read_face


class TestReader:
    """Tests for reading FontInfo from font tables."""

    def test_regular_face(self, regular_font: bytes) -> None:
        """Test identity of a plain face."""
        font = read_face(regular_font, 0)
        assert font is not None
        assert font.info.family == "Testa Sans"
        assert font.info.variant == FontVariant()
        assert font.info.flags == FontFlags.NONE
        assert font.units_per_em == 1000

    def test_coverage_from_cmap(self, regular_font: bytes) -> None:
        """Test coverage lists exactly the mapped characters."""
        info = read_face(regular_font, 0).info
        assert info.coverage.contains(ord("A"))
        assert info.coverage.contains(ord(" "))
        assert not info.coverage.contains(ord("B"))

    def test_weight_and_width_classes(self, font_factory) -> None:
        """Test OS/2 weight and width classes."""
        data = font_factory(style_name="Bold Condensed", weight=700, width_class=3)
        info = read_face(data, 0).info
        assert info.variant.weight == FontWeight.BOLD
        assert info.variant.stretch == FontStretch.CONDENSED

    def test_italic_bit(self, font_factory) -> None:
        """Test fsSelection italic bit."""
        info = read_face(font_factory(style_name="Oblique", italic=True), 0).info
        assert info.variant.style == FontStyle.ITALIC

    def test_oblique_from_full_name(self, font_factory) -> None:
        """Test oblique detected from the full name."""
        info = read_face(font_factory(style_name="Oblique"), 0).info
        assert info.variant.style == FontStyle.OBLIQUE

    def test_flags(self, font_factory) -> None:
        """Test monospace from post and serif from panose."""
        mono = read_face(font_factory(family="Testa Mono", fixed_pitch=True), 0).info
        serif = read_face(font_factory(family="Testa Serif", serif=True), 0).info
        assert mono.flags == FontFlags.MONOSPACE
        assert serif.flags == FontFlags.SERIF

    def test_family_is_canonicalized(self, font_factory) -> None:
        """Test style words left in the family name are stripped."""
        info = read_face(font_factory(family="Testa Sans Bold"), 0).info
        assert info.family == "Testa Sans"

    def test_collection(self, regular_font: bytes, bold_font: bytes, collection_factory) -> None:
        """Test every face of a collection is read."""
        data = collection_factory(regular_font, bold_font)
        assert is_collection(data)
        assert face_count(data) == 2
        weights = [info.variant.weight for _, info in iter_font_infos(data)]
        assert weights == [FontWeight.REGULAR, FontWeight.BOLD]

    def test_garbage_is_skipped(self) -> None:
        """Test undecodable data yields no faces."""
        assert read_face(b"definitely not a font", 0) is None
        assert list(iter_font_infos(b"definitely not a font")) == []
        assert face_count(b"tiny") == 0


class TestLoaders:
    """Tests for lazy loaders and slots."""

    def test_buffer_loader(self, bold_font: bytes) -> None:
        """Test a buffer loader decodes its face."""
        font = BufferFontLoader(bold_font).load()
        assert font is not None
        assert font.info.variant.weight == FontWeight.BOLD

    def test_web_loader_passes_slot_index_to_host(self, regular_font: bytes) -> None:
        """Test the host callback receives the registry index."""
        blob = Mock(return_value=regular_font)
        handle = WebFontHandle(info=FontInfo("Testa Sans"), context="ref", blob=blob, index=7)
        font = WebFontLoader(handle).load()
        blob.assert_called_once_with(7)
        assert font is not None
        assert font.info.family == "Testa Sans"

    def test_web_loader_non_bytes(self) -> None:
        """Test a host answer that is not bytes leaves the face unavailable."""
        handle = WebFontHandle(
            info=FontInfo("Testa Sans"), context=None, blob=Mock(return_value="oops"), index=0
        )
        assert WebFontLoader(handle).load() is None

    def test_web_loader_host_failure(self) -> None:
        """Test a failing host callback leaves the face unavailable."""
        handle = WebFontHandle(
            info=FontInfo("Testa Sans"),
            context=None,
            blob=Mock(side_effect=RuntimeError("gone")),
            index=0,
        )
        assert WebFontLoader(handle).load() is None

    def test_slot_loads_once(self) -> None:
        """Test the slot caches its result, including None."""
        loader = Mock(spec=FontLoader)
        loader.load.return_value = None
        slot = FontSlot(loader)

        assert not slot.is_loaded
        assert slot.load() is None
        assert slot.load() is None
        assert slot.is_loaded
        loader.load.assert_called_once()


class TestFontBook:
    """Tests for FontBook queries."""

    @pytest.fixture
    def book(self) -> FontBook:
        book = FontBook()
        book.push(FontInfo("Testa Sans"))
        book.push(FontInfo("Testa Sans", FontVariant(weight=FontWeight.BOLD)))
        book.push(FontInfo("Testa Sans", FontVariant(style=FontStyle.ITALIC)))
        book.push(FontInfo("alpha"))
        return book

    def test_push_returns_indices(self) -> None:
        """Test indices are assigned in push order."""
        book = FontBook()
        assert book.push(FontInfo("A")) == 0
        assert book.push(FontInfo("B")) == 1
        assert len(book) == 2

    def test_find_exact(self, book: FontBook) -> None:
        """Test exact identity lookup."""
        assert book.find(FontInfo("Testa Sans", FontVariant(weight=FontWeight.BOLD))) == 1
        assert book.find(FontInfo("Testa Sans", FontVariant(weight=FontWeight.THIN))) is None

    def test_select_nearest_weight(self, book: FontBook) -> None:
        """Test the closest weight is chosen."""
        assert book.select("Testa Sans", FontVariant(weight=FontWeight.BLACK)) == 1
        assert book.select("testa sans", FontVariant(weight=FontWeight.LIGHT)) == 0

    def test_select_prefers_style(self, book: FontBook) -> None:
        """Test style distance dominates weight distance."""
        variant = FontVariant(style=FontStyle.OBLIQUE, weight=FontWeight.BOLD)
        assert book.select("Testa Sans", variant) == 2

    def test_select_unknown_family(self, book: FontBook) -> None:
        """Test unknown families select nothing."""
        assert book.select("Missing", FontVariant()) is None

    def test_families_sorted(self, book: FontBook) -> None:
        """Test families are distinct and sorted case-insensitively."""
        assert book.families() == ["alpha", "Testa Sans"]


class TestPartialFontBook:
    """Tests for provisional discovery state."""

    def test_merge_orders_by_source_and_face(self) -> None:
        """Test merge order does not depend on push order."""
        partial = PartialFontBook()
        loader = Mock(spec=FontLoader)
        partial.push(FontInfo("C"), loader, source="b.ttc", face=1)
        partial.push(FontInfo("A"), loader, source="a.ttf", face=0)
        partial.push(FontInfo("B"), loader, source="b.ttc", face=0)
        assert partial.revision == 3

        book = FontBook()
        slots: list[FontSlot] = []
        assert partial.merge_into(book, slots) == [0, 1, 2]
        assert [info.family for info in book] == ["A", "B", "C"]
        assert len(slots) == 3
        assert len(partial) == 0

    def test_merge_appends_after_existing(self) -> None:
        """Test merged faces never disturb existing indices."""
        book = FontBook()
        book.push(FontInfo("Existing"))
        slots = [FontSlot(Mock(spec=FontLoader))]

        partial = PartialFontBook()
        partial.push(FontInfo("New"), Mock(spec=FontLoader))
        assert partial.merge_into(book, slots) == [1]
        assert book[0].family == "Existing"

    def test_concurrent_pushes(self) -> None:
        """Test no push is lost under concurrent workers."""
        partial = PartialFontBook()
        loader = Mock(spec=FontLoader)

        def worker(n: int) -> None:
            for face in range(50):
                partial.push(FontInfo(f"F{n}"), loader, source=f"{n}", face=face)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(partial) == 400
        assert len(partial.infos()) == 400


class TestReadWriteLock:
    """Tests for the reader/writer lock."""

    def test_readers_share(self) -> None:
        """Test two readers may hold the lock together."""
        lock = ReadWriteLock()
        with lock.read_locked(), lock.read_locked():
            pass

    def test_writer_excludes_readers(self) -> None:
        """Test a reader waits while a writer holds the lock."""
        lock = ReadWriteLock()
        entered = threading.Event()

        def reader() -> None:
            with lock.read_locked():
                entered.set()

        with lock.write_locked():
            thread = threading.Thread(target=reader)
            thread.start()
            assert not entered.wait(timeout=0.1)

        thread.join(timeout=5)
        assert entered.is_set()

    def test_waiting_writer_blocks_new_readers(self) -> None:
        """Test a new reader queues behind a writer that is already waiting."""
        lock = ReadWriteLock()
        order: list[str] = []

        def writer() -> None:
            with lock.write_locked():
                order.append("writer")

        def reader() -> None:
            with lock.read_locked():
                order.append("reader")

        with lock.read_locked():
            writer_thread = threading.Thread(target=writer)
            writer_thread.start()
            deadline = time.monotonic() + 5
            while not lock._writers_waiting and time.monotonic() < deadline:
                time.sleep(0.01)
            assert lock._writers_waiting == 1

            reader_thread = threading.Thread(target=reader)
            reader_thread.start()
            reader_thread.join(timeout=0.1)
            assert reader_thread.is_alive()
            assert order == []

        writer_thread.join(timeout=5)
        reader_thread.join(timeout=5)
        assert order == ["writer", "reader"]


class TestBrowserFontSearcher:
    """Tests for building a resolver from host descriptors."""

    def test_web_fonts_and_buffers(self, regular_font: bytes, bold_font: bytes) -> None:
        """Test buffers and descriptors share one index space."""
        blob = Mock(return_value=bold_font)
        searcher = BrowserFontSearcher()
        assert searcher.add_font_data(regular_font) == 1
        errors = searcher.add_web_fonts(
            [
                {
                    "family": "Testa Sans",
                    "fullName": "Testa Sans Bold",
                    "style": "Bold",
                    "ref": "handle",
                    "blob": blob,
                }
            ]
        )
        assert errors == []

        resolver = searcher.to_resolver()
        assert len(resolver) == 2
        assert resolver.book[1].variant.weight == FontWeight.BOLD
        blob.assert_not_called()

        font = resolver.font(1)
        blob.assert_called_once_with(1)
        assert font is not None
        assert font.info.variant.weight == FontWeight.BOLD

    def test_bad_descriptor_is_reported(self, bold_font: bytes) -> None:
        """Test one bad descriptor does not block the others."""
        searcher = BrowserFontSearcher()
        errors = searcher.add_web_fonts(
            [
                {"family": "Broken", "ref": "handle"},
                {"family": "Testa Sans", "ref": "handle", "blob": lambda index: bold_font},
            ]
        )
        assert len(errors) == 1
        assert isinstance(errors[0], MissingLoaderError)
        assert searcher.book.families() == ["Testa Sans"]

    def test_custom_generic_prefixes(self) -> None:
        """Test configured generic prefixes replace the defaults."""
        searcher = BrowserFontSearcher(FontConfig(generic_family_prefixes=["Acme"]))
        searcher.add_web_fonts(
            [
                {
                    "family": "Acme",
                    "fullName": "Acme Display Bold",
                    "ref": 1,
                    "blob": lambda index: b"",
                }
            ]
        )
        assert searcher.book[0].family == "Acme Display"


class TestResolver:
    """Tests for FontResolver queries."""

    @pytest.fixture
    def resolver(self, regular_font: bytes, bold_font: bytes):
        searcher = BrowserFontSearcher()
        searcher.add_font_data(regular_font)
        searcher.add_font_data(bold_font)
        return searcher.to_resolver()

    def test_unknown_index(self, resolver) -> None:
        """Test out-of-range indices load nothing."""
        assert resolver.font(5) is None
        assert resolver.font(-1) is None

    def test_resolve_by_variant(self, resolver, sample_info: FontInfo) -> None:
        """Test resolve falls back to the closest variant."""
        font = resolver.resolve(sample_info)
        assert font is not None
        assert font.info.variant.weight == FontWeight.REGULAR

    def test_resolve_exact(self, resolver) -> None:
        """Test resolve prefers an exact identity match."""
        info = resolver.book[1]
        assert resolver.resolve(info).info == info

    def test_resolve_unknown_family(self, resolver) -> None:
        """Test resolve yields None for unknown families."""
        assert resolver.resolve(FontInfo("Nowhere")) is None

    def test_rebuild_promotes_pending_faces(self, resolver, font_factory) -> None:
        """Test rebuild appends without renumbering existing faces."""
        before = [resolver.book[i] for i in range(len(resolver))]
        data = font_factory(family="Late Arrival")
        _, info = next(iter_font_infos(data))
        resolver.partial_book.push(info, BufferFontLoader(data), source="late.ttf")

        assert resolver.rebuild() == [2]
        assert [resolver.book[i] for i in range(2)] == before
        assert resolver.font(2).info.family == "Late Arrival"
        assert resolver.rebuild() == []

    def test_mismatched_lengths(self) -> None:
        """Test book and slots must be in lockstep."""
        book = FontBook()
        book.push(FontInfo("A"))
        with pytest.raises(ValueError):
            FontResolver(book, PartialFontBook(), [], FontProfile())

    def test_profile_version(self) -> None:
        """Test the configured profile version is carried."""
        resolver = BrowserFontSearcher(FontConfig(profile_version="v2")).to_resolver()
        assert resolver.profile.version == "v2"
        assert resolver.profile.is_valid()


class TestSystemFontSearcher:
    """Tests for concurrent directory discovery."""

    @pytest.fixture
    def font_dir(self, tmp_path: Path, regular_font, bold_font, font_factory, collection_factory):
        (tmp_path / "b.ttf").write_bytes(bold_font)
        (tmp_path / "a.ttf").write_bytes(regular_font)
        (tmp_path / "broken.ttf").write_bytes(b"definitely not a font")
        (tmp_path / "notes.txt").write_text("not a font")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "c.ttc").write_bytes(
            collection_factory(
                font_factory(family="Collected"),
                font_factory(family="Collected", style_name="Italic", italic=True),
            )
        )
        return tmp_path

    def test_deterministic_indices(self, font_dir: Path) -> None:
        """Test indices follow file path and face order."""
        resolver = SystemFontSearcher().search_dirs([font_dir], max_workers=4).to_resolver()
        infos = [resolver.book[i] for i in range(len(resolver))]
        assert [info.family for info in infos] == [
            "Testa Sans",
            "Testa Sans",
            "Collected",
            "Collected",
        ]
        assert infos[0].variant.weight == FontWeight.REGULAR
        assert infos[1].variant.weight == FontWeight.BOLD
        assert infos[3].variant.style == FontStyle.ITALIC

    def test_same_result_regardless_of_workers(self, font_dir: Path) -> None:
        """Test single and multi worker searches agree."""
        one = SystemFontSearcher().search_dirs([font_dir], max_workers=1).to_resolver()
        many = SystemFontSearcher().search_dirs([font_dir], max_workers=8).to_resolver()
        assert list(one.book) == list(many.book)

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing directory contributes nothing."""
        resolver = SystemFontSearcher().search_dirs([tmp_path / "nope"]).to_resolver()
        assert len(resolver) == 0

    def test_add_font_file(self, tmp_path: Path, regular_font: bytes) -> None:
        """Test explicit font files are registered immediately."""
        path = tmp_path / "a.ttf"
        path.write_bytes(regular_font)
        searcher = SystemFontSearcher()
        assert searcher.add_font_file(path) == 1
        with pytest.raises(FontLoadError):
            searcher.add_font_file(tmp_path / "missing.ttf")
