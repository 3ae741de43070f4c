"""Artifact byte encodings.

Two interchange encodings are supported:
- json: structured text, human-readable, used for files and streaming
- rmp: MessagePack, compact binary

Document to artifact conversion itself happens in the domain layer; this
module only turns artifacts into bytes and back.
"""

import json
from enum import Enum
from typing import Any

import msgpack

from typeport.domain.artifact import Artifact
from typeport.exceptions import DecodeError


class ArtifactEncoding(str, Enum):
    """Byte encoding of an artifact."""

    JSON = "json"
    RMP = "rmp"


def detect_encoding(data: bytes) -> ArtifactEncoding:
    """Guess the encoding of an artifact payload.

    JSON artifacts start with ``{`` once leading whitespace is skipped;
    anything else is treated as MessagePack.
    """
    if data.lstrip()[:1] == b"{":
        return ArtifactEncoding.JSON
    return ArtifactEncoding.RMP


class ArtifactCodec:
    """Encodes and decodes artifacts.

    Example:
        codec = ArtifactCodec()
        data = codec.encode(artifact, ArtifactEncoding.RMP)
        same = codec.decode(data)
    """

    def encode(self, artifact: Artifact, encoding: ArtifactEncoding | str) -> bytes:
        """Serialize an artifact.

        Args:
            artifact: Artifact to serialize
            encoding: Target encoding

        Returns:
            Encoded bytes
        """
        encoding = ArtifactEncoding(encoding)
        payload = artifact.to_dict()
        if encoding is ArtifactEncoding.JSON:
            return json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return msgpack.packb(payload, use_bin_type=True)

    def decode(
        self,
        data: bytes,
        encoding: ArtifactEncoding | str | None = None,
    ) -> Artifact:
        """Deserialize an artifact.

        Args:
            data: Encoded bytes
            encoding: Source encoding (detected when None)

        Returns:
            Decoded Artifact

        Raises:
            DecodeError: If the bytes are not a valid artifact
        """
        encoding = ArtifactEncoding(encoding) if encoding is not None else detect_encoding(data)
        payload = self._load(data, encoding)
        try:
            return Artifact.from_dict(payload)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            raise DecodeError(encoding.value, f"invalid artifact structure: {e}") from e

    def _load(self, data: bytes, encoding: ArtifactEncoding) -> Any:
        if encoding is ArtifactEncoding.JSON:
            try:
                return json.loads(data)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise DecodeError(encoding.value, str(e)) from e
        try:
            return msgpack.unpackb(data, raw=False)
        except (ValueError, TypeError) as e:  # msgpack errors derive from ValueError
            raise DecodeError(encoding.value, str(e)) from e
