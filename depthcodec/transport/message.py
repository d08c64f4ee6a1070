"""Envelope that carries a compressed depth payload to the transport layer."""

from __future__ import annotations

from dataclasses import dataclass

from depthcodec.errors import UnsupportedFormat

COMPRESSED_DEPTH_SUFFIX = "compressedDepth png"


def build_format(encoding: str) -> str:
    return f"{encoding}; {COMPRESSED_DEPTH_SUFFIX}"


@dataclass(slots=True)
class CompressedDepthImage:
    format: str
    data: bytes

    @property
    def encoding(self) -> str:
        """Source encoding named in front of the ``compressedDepth`` tag."""

        encoding, sep, kind = self.format.partition(";")
        if not sep or not kind.strip().startswith("compressedDepth"):
            raise UnsupportedFormat(self.format)
        return encoding.strip()
