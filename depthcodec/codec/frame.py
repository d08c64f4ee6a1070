"""Depth frame container shared by the encoder and decoder."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

FLOAT32 = "32FC1"
UINT16 = "16UC1"
SUPPORTED_ENCODINGS = (FLOAT32, UINT16)

_DTYPES = {
    FLOAT32: np.dtype(np.float32),
    UINT16: np.dtype(np.uint16),
}


@dataclass(slots=True)
class DepthFrame:
    """A single-channel depth image.

    ``32FC1`` frames hold meters with NaN (or 0) for missing returns;
    ``16UC1`` frames hold millimeters with 0 for missing returns.
    """

    depth: np.ndarray
    encoding: str = FLOAT32

    @property
    def width(self) -> int:
        return int(self.depth.shape[1])

    @property
    def height(self) -> int:
        return int(self.depth.shape[0])

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int, encoding: str = FLOAT32) -> "DepthFrame":
        """Wrap little-endian row-major samples."""

        dtype = dtype_for(encoding).newbyteorder("<")
        expected = width * height * dtype.itemsize
        if len(data) != expected:
            raise ValueError(f"expected {expected} bytes for {width}x{height} {encoding}, got {len(data)}")
        depth = np.frombuffer(data, dtype=dtype).reshape(height, width)
        return cls(depth=depth.astype(dtype.newbyteorder("="), copy=True), encoding=encoding)

    def to_bytes(self) -> bytes:
        dtype = dtype_for(self.encoding).newbyteorder("<")
        return np.ascontiguousarray(self.depth, dtype=dtype).tobytes()


def dtype_for(encoding: str) -> np.dtype:
    try:
        return _DTYPES[encoding]
    except KeyError:
        raise ValueError(f"unsupported depth encoding: {encoding!r}") from None
