import struct
import sys
from pathlib import Path

import numpy as np
import pytest

# Resolve repo root no matter where pytest is run from
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from depthcodec.errors import ContainerCodecFailure  # noqa: E402

_SHAPE = struct.Struct("<II")


class MemoryContainer:
    """Uncompressed stand-in for the PNG container; counts calls."""

    def __init__(self):
        self.compress_calls = 0
        self.decompress_calls = 0

    def compress_grid(self, grid, level):
        self.compress_calls += 1
        if grid.ndim != 2 or grid.size == 0:
            raise ContainerCodecFailure(f"bad grid shape {grid.shape}")
        h, w = grid.shape
        return _SHAPE.pack(h, w) + np.ascontiguousarray(grid, dtype="<u2").tobytes()

    def decompress_grid(self, data):
        self.decompress_calls += 1
        data = bytes(data)
        if len(data) < _SHAPE.size:
            raise ContainerCodecFailure("truncated grid")
        h, w = _SHAPE.unpack_from(data)
        body = data[_SHAPE.size:]
        if len(body) != h * w * 2:
            raise ContainerCodecFailure("grid size mismatch")
        return np.frombuffer(body, dtype="<u2").reshape(h, w).astype(np.uint16)


@pytest.fixture
def memory_container():
    return MemoryContainer()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def depth_4x4():
    depth = np.linspace(0.5, 9.5, 16, dtype=np.float32).reshape(4, 4)
    depth[1, 2] = np.nan
    return depth
