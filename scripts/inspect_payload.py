import sys

import numpy as np

from depthcodec.codec.container import get_default_container
from depthcodec.codec.header import FormatTag, unpack_header
from depthcodec.errors import DepthCodecError


def main():
    if len(sys.argv) < 2:
        print("Usage: python inspect_payload.py <payload_path>")
        return

    path = sys.argv[1]
    with open(path, "rb") as f:
        payload = f.read()

    print(f"Inspecting {path} ({len(payload)} bytes)")
    try:
        header, body = unpack_header(payload)
        grid = get_default_container().decompress_grid(body)
    except DepthCodecError as exc:
        print(f"Invalid payload: {exc}")
        sys.exit(1)

    print(f"Format: {header.format_tag.name}")
    if header.format_tag is FormatTag.INVERSE_DEPTH_QUANTIZED:
        print(f"A: {header.a:.6g}  B: {header.b:.6g}")
    print(f"Grid: {grid.shape[1]}x{grid.shape[0]} {grid.dtype}")
    valid = np.count_nonzero(grid)
    print(f"Valid pixels: {valid}/{grid.size} ({100.0 * valid / max(grid.size, 1):.1f}%)")
    print(f"Compression ratio vs 16-bit grid: {grid.nbytes / len(payload):.2f}")

if __name__ == "__main__":
    main()
