"""Tests for artifact encodings."""

import json

import msgpack
import pytest

from typeport.domain import Artifact, Document
from typeport.exceptions import DecodeError
from typeport.io import ArtifactCodec, ArtifactEncoding, detect_encoding


class TestArtifactCodec:
    """Tests for ArtifactCodec."""

    @pytest.fixture
    def artifact(self, sample_document: Document) -> Artifact:
        return Artifact.from_document(sample_document)

    @pytest.mark.parametrize("encoding", [ArtifactEncoding.JSON, ArtifactEncoding.RMP])
    def test_preserves_pages_and_fonts(self, artifact: Artifact, encoding) -> None:
        """Test decoding restores page count, fonts and items."""
        codec = ArtifactCodec()
        decoded = codec.decode(codec.encode(artifact, encoding), encoding)

        assert len(decoded.pages) == 2
        assert decoded.fonts == artifact.fonts
        assert decoded.title == "Sample"
        assert decoded.pages[0].items == artifact.pages[0].items

    def test_json_is_text(self, artifact: Artifact) -> None:
        """Test the json encoding is plain UTF-8 JSON."""
        data = ArtifactCodec().encode(artifact, "json")
        payload = json.loads(data.decode("utf-8"))
        assert payload["version"] == "1"
        assert payload["fonts"][0]["family"] == "Testa Sans"

    def test_rmp_is_msgpack(self, artifact: Artifact) -> None:
        """Test the rmp encoding is MessagePack and smaller than JSON."""
        codec = ArtifactCodec()
        data = codec.encode(artifact, "rmp")
        assert msgpack.unpackb(data, raw=False)["title"] == "Sample"
        assert len(data) < len(codec.encode(artifact, "json"))

    def test_detects_encoding(self, artifact: Artifact) -> None:
        """Test decode without an explicit encoding."""
        codec = ArtifactCodec()
        for encoding in ArtifactEncoding:
            assert len(codec.decode(codec.encode(artifact, encoding)).pages) == 2

    def test_detect_encoding(self) -> None:
        """Test JSON detection skips leading whitespace."""
        assert detect_encoding(b'  \n{"pages": []}') is ArtifactEncoding.JSON
        assert detect_encoding(b"\x84\xa7version") is ArtifactEncoding.RMP

    def test_invalid_json(self) -> None:
        """Test malformed JSON raises DecodeError."""
        with pytest.raises(DecodeError, match="json"):
            ArtifactCodec().decode(b"{not json", "json")

    def test_invalid_msgpack(self) -> None:
        """Test truncated MessagePack raises DecodeError."""
        with pytest.raises(DecodeError, match="rmp"):
            ArtifactCodec().decode(b"\x84\xa7vers", "rmp")

    def test_invalid_structure(self) -> None:
        """Test well-formed payloads with the wrong shape."""
        codec = ArtifactCodec()
        with pytest.raises(DecodeError, match="invalid artifact structure"):
            codec.decode(b'{"pages": [{"width": 1}], "fonts": []}')
        with pytest.raises(DecodeError):
            codec.decode(b"[1, 2, 3]", "json")

    def test_unsupported_version(self) -> None:
        """Test artifacts of another format version are rejected."""
        with pytest.raises(DecodeError, match="version"):
            ArtifactCodec().decode(b'{"version": "9", "pages": [], "fonts": []}')

    def test_unknown_encoding(self, artifact: Artifact) -> None:
        """Test unknown encoding names are rejected."""
        with pytest.raises(ValueError):
            ArtifactCodec().encode(artifact, "xml")

    def test_font_reference_out_of_range(self, artifact: Artifact) -> None:
        """Test items pointing past the font list fail at decode time."""
        payload = artifact.to_dict()
        payload["pages"][0]["items"][1]["font"] = len(payload["fonts"])
        with pytest.raises(DecodeError, match="font reference"):
            ArtifactCodec().decode(msgpack.packb(payload, use_bin_type=True), "rmp")
