"""Compressed payload back to a depth frame."""

from __future__ import annotations

from typing import Optional

import numpy as np

from depthcodec.codec import quantization
from depthcodec.codec.container import ContainerCodec, get_default_container
from depthcodec.codec.frame import FLOAT32, UINT16, DepthFrame
from depthcodec.codec.header import FormatTag, unpack_header
from depthcodec.errors import ContainerCodecFailure, InvalidParameters, PayloadCorrupt


def decode(
    payload: bytes | memoryview,
    encoding: str = FLOAT32,
    container: Optional[ContainerCodec] = None,
    expected_shape: Optional[tuple[int, int]] = None,
) -> DepthFrame:
    """Reconstruct a frame from ``payload``.

    ``encoding`` only matters for raw payloads: ``16UC1`` returns the
    millimeter grid as-is, anything else returns float32 meters. Quantized
    payloads always decode to ``32FC1``.

    Raises:
        UnsupportedFormat: unknown header tag.
        PayloadCorrupt: truncated header, undecodable container bytes or a grid
            that is not 2-D uint16 of the expected shape.
    """

    header, body = unpack_header(payload)

    params = None
    if header.format_tag is FormatTag.INVERSE_DEPTH_QUANTIZED:
        try:
            params = quantization.QuantizationParams.from_header(header.a, header.b)
        except InvalidParameters as exc:
            raise PayloadCorrupt(str(exc)) from exc

    container = container or get_default_container()
    try:
        grid = container.decompress_grid(body)
    except ContainerCodecFailure as exc:
        raise PayloadCorrupt(str(exc)) from exc

    if grid.ndim != 2 or grid.dtype != np.uint16:
        raise PayloadCorrupt(f"expected a 2-D uint16 grid, got {grid.dtype} with shape {grid.shape}")
    if expected_shape is not None and tuple(grid.shape) != tuple(expected_shape):
        raise PayloadCorrupt(f"decoded shape {grid.shape} does not match expected {tuple(expected_shape)}")

    if params is not None:
        return DepthFrame(depth=quantization.inverse(grid, params), encoding=FLOAT32)
    if encoding == UINT16:
        return DepthFrame(depth=grid, encoding=UINT16)
    return DepthFrame(depth=quantization.inverse_raw(grid), encoding=FLOAT32)
