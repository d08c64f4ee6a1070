import struct

import pytest

from depthcodec.codec.header import FormatTag, QUANTIZED_HEADER_SIZE, WireHeader, unpack_header
from depthcodec.errors import PayloadCorrupt, UnsupportedFormat


def test_raw_header_is_a_single_tag_byte():
    assert WireHeader(FormatTag.RAW).pack() == b"\x00"


def test_quantized_header_layout():
    packed = WireHeader(FormatTag.INVERSE_DEPTH_QUANTIZED, 10100.0, 1009.0).pack()
    assert len(packed) == QUANTIZED_HEADER_SIZE
    assert packed[0] == 1
    assert struct.unpack("<ff", packed[1:]) == (10100.0, 1009.0)


def test_unpack_splits_header_and_body():
    packed = WireHeader(FormatTag.INVERSE_DEPTH_QUANTIZED, 2.5, 0.25).pack() + b"body"
    header, body = unpack_header(packed)
    assert header == WireHeader(FormatTag.INVERSE_DEPTH_QUANTIZED, 2.5, 0.25)
    assert bytes(body) == b"body"

    header, body = unpack_header(b"\x00png")
    assert header.format_tag is FormatTag.RAW
    assert bytes(body) == b"png"


@pytest.mark.parametrize("tag", [2, 7, 255])
def test_unknown_tag_is_rejected(tag):
    with pytest.raises(UnsupportedFormat) as exc_info:
        unpack_header(bytes([tag]) + b"\x00" * 32)
    assert exc_info.value.tag == tag


def test_empty_payload_is_corrupt():
    with pytest.raises(PayloadCorrupt):
        unpack_header(b"")


def test_truncated_quantized_header_is_corrupt():
    with pytest.raises(PayloadCorrupt):
        unpack_header(b"\x01\x00\x00")
