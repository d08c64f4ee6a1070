"""Depth frame to compressed payload."""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from depthcodec.codec import quantization
from depthcodec.codec.container import ContainerCodec, get_default_container
from depthcodec.codec.frame import FLOAT32, UINT16, DepthFrame
from depthcodec.codec.header import FormatTag, WireHeader
from depthcodec.errors import ContainerCodecFailure, InvalidParameters

logger = logging.getLogger(__name__)


def select_params(encoding: str, depth_max: float, depth_quantization: float) -> Optional[quantization.QuantizationParams]:
    """Return inverse-depth params, or None when the raw law applies."""

    if encoding != FLOAT32:
        return None
    try:
        return quantization.QuantizationParams.from_limits(depth_max, depth_quantization)
    except InvalidParameters as exc:
        logger.debug("Falling back to raw depth: %s", exc)
        return None


def build_grid(frame: DepthFrame, params: Optional[quantization.QuantizationParams]) -> tuple[WireHeader, np.ndarray]:
    if params is not None:
        if logger.isEnabledFor(logging.DEBUG):
            with np.errstate(invalid="ignore"):
                clipped = np.count_nonzero((frame.depth > 0.0) & (frame.depth < params.near_limit))
            if clipped:
                logger.debug("%d samples nearer than %.4f m clip to the top code", clipped, params.near_limit)
        header = WireHeader(FormatTag.INVERSE_DEPTH_QUANTIZED, params.a, params.b)
        return header, quantization.forward(frame.depth, params)
    if frame.encoding == UINT16:
        # Signed or wider samples would wrap on the cast.
        if frame.depth.dtype != np.uint16:
            raise ValueError(f"16UC1 frame carries {frame.depth.dtype} samples, expected uint16")
        return WireHeader(FormatTag.RAW), frame.depth
    return WireHeader(FormatTag.RAW), quantization.forward_raw(frame.depth)


def encode(
    frame: DepthFrame,
    depth_max: float,
    depth_quantization: float,
    png_level: int,
    container: Optional[ContainerCodec] = None,
) -> Optional[bytes]:
    """Compress ``frame``; ``None`` means there is nothing to publish.

    Float frames use the inverse-depth law when both limits are positive and the
    millimeter raw law otherwise; 16-bit frames always pass through unchanged.
    """

    if frame.encoding not in (FLOAT32, UINT16):
        logger.error("Compressed depth cannot handle %s images; use 32FC1 or 16UC1", frame.encoding)
        return None
    depth = np.asarray(frame.depth)
    if depth.ndim != 2 or depth.size == 0:
        logger.error("Compressed depth needs a non-empty 2-D frame, got shape %s", depth.shape)
        return None

    params = select_params(frame.encoding, depth_max, depth_quantization)
    try:
        header, grid = build_grid(frame, params)
    except ValueError as exc:
        logger.error("Compressed depth encoding failed: %s", exc)
        return None

    container = container or get_default_container()
    try:
        body = container.compress_grid(grid, png_level)
    except ContainerCodecFailure as exc:
        logger.error("Compressed depth encoding failed: %s", exc)
        return None
    return header.pack() + body
