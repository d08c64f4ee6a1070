"""Binary header prefixed to every compressed depth payload."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from depthcodec.errors import PayloadCorrupt, UnsupportedFormat

TAG_STRUCT = struct.Struct("<B")
PARAMS_STRUCT = struct.Struct("<ff")
QUANTIZED_HEADER_SIZE = TAG_STRUCT.size + PARAMS_STRUCT.size  # 9 bytes


class FormatTag(IntEnum):
    RAW = 0
    INVERSE_DEPTH_QUANTIZED = 1


@dataclass(frozen=True, slots=True)
class WireHeader:
    format_tag: FormatTag
    a: float = 0.0
    b: float = 0.0

    def pack(self) -> bytes:
        tag = TAG_STRUCT.pack(int(self.format_tag))
        if self.format_tag is FormatTag.INVERSE_DEPTH_QUANTIZED:
            return tag + PARAMS_STRUCT.pack(self.a, self.b)
        return tag


def unpack_header(payload: bytes | memoryview) -> tuple[WireHeader, memoryview]:
    """Split ``payload`` into its header and the container bytes that follow.

    The tag is checked before anything else is read, so an unknown tag never
    leads to interpreting the rest of the buffer.
    """

    view = memoryview(payload)
    if len(view) < TAG_STRUCT.size:
        raise PayloadCorrupt("payload is empty")
    (raw_tag,) = TAG_STRUCT.unpack_from(view, 0)
    try:
        tag = FormatTag(raw_tag)
    except ValueError:
        raise UnsupportedFormat(raw_tag) from None

    if tag is FormatTag.RAW:
        return WireHeader(tag), view[TAG_STRUCT.size:]

    if len(view) < QUANTIZED_HEADER_SIZE:
        raise PayloadCorrupt(
            f"quantized header truncated: {len(view)} bytes, need {QUANTIZED_HEADER_SIZE}"
        )
    a, b = PARAMS_STRUCT.unpack_from(view, TAG_STRUCT.size)
    return WireHeader(tag, a, b), view[QUANTIZED_HEADER_SIZE:]
