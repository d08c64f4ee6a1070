"""Lossless containers for 16-bit sample grids."""

from __future__ import annotations

from typing import Protocol

import cv2
import numpy as np

from depthcodec.errors import ContainerCodecFailure

MIN_LEVEL = 0
MAX_LEVEL = 9


class ContainerCodec(Protocol):
    def compress_grid(self, grid: np.ndarray, level: int) -> bytes:
        ...

    def decompress_grid(self, data: bytes | memoryview) -> np.ndarray:
        ...


class PngContainerCodec:
    """Single-channel 16-bit PNG through OpenCV.

    Each call owns its buffers, so one instance can be shared across threads.
    """

    def compress_grid(self, grid: np.ndarray, level: int) -> bytes:
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            raise ContainerCodecFailure(f"png level {level} outside [{MIN_LEVEL}, {MAX_LEVEL}]")
        if grid.ndim != 2 or grid.size == 0:
            raise ContainerCodecFailure(f"expected a non-empty 2-D grid, got shape {grid.shape}")
        if grid.dtype != np.uint16:
            raise ContainerCodecFailure(f"expected uint16 samples, got {grid.dtype}")
        try:
            ok, encoded = cv2.imencode(".png", np.ascontiguousarray(grid), [cv2.IMWRITE_PNG_COMPRESSION, int(level)])
        except cv2.error as exc:
            raise ContainerCodecFailure(f"png encode failed: {exc}") from exc
        if not ok:
            raise ContainerCodecFailure("png encode failed")
        return encoded.tobytes()

    def decompress_grid(self, data: bytes | memoryview) -> np.ndarray:
        buf = np.frombuffer(data, dtype=np.uint8)
        if buf.size == 0:
            raise ContainerCodecFailure("png payload is empty")
        try:
            grid = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
        except cv2.error as exc:
            raise ContainerCodecFailure(f"png decode failed: {exc}") from exc
        if grid is None:
            raise ContainerCodecFailure("png decode failed")
        return grid


_default_container: PngContainerCodec | None = None


def get_default_container() -> PngContainerCodec:
    global _default_container
    if _default_container is None:
        _default_container = PngContainerCodec()
    return _default_container
