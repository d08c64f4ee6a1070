"""Inverse-depth quantization of depth maps into 16-bit codes.

Valid depth ``d`` maps to ``round(A / d - B)``, so code spacing in meters grows
with ``d**2``: near-range samples keep fine resolution and far-range samples
share coarse bins, which follows the noise profile of stereo and
structured-light sensors. Code 0 is reserved for invalid samples.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from depthcodec.errors import InvalidParameters

INVALID_CODE = 0
MIN_CODE = 1
MAX_CODE = 65535
# Number of code steps between depth_max (code 1) and the near end (code 65535).
CODE_SPAN = MAX_CODE - MIN_CODE

MM_PER_METER = 1000.0


@dataclass(frozen=True, slots=True)
class QuantizationParams:
    depth_max: float
    depth_quantization: float
    a: float
    b: float

    @classmethod
    def from_limits(cls, depth_max: float, depth_quantization: float) -> "QuantizationParams":
        """Derive ``(A, B)`` from the user-facing limits.

        Both laws place ``depth_max`` on code 1. When ``depth_quantization`` is
        smaller than ``depth_max`` it is read as the near limit in meters and
        lands on code 65535. Otherwise it follows the legacy convention (the
        default of 100 with ``depth_max`` 10): it is roughly the depth at which
        one code spans a meter, and ``A = q * (q + 1)``.

        The switch at ``depth_quantization == depth_max`` is abrupt: just below
        it (say 9.99 with ``depth_max`` 10) the whole 16-bit budget covers the
        last centimeter and every nearer sample clips to ``near_limit``; at or
        above it the coarse legacy law covers the full range.

        A and B are rounded to float32 so the encoder uses exactly the values the
        header carries.
        """

        depth_max = float(depth_max)
        depth_quantization = float(depth_quantization)
        if not (np.isfinite(depth_max) and np.isfinite(depth_quantization)):
            raise InvalidParameters("depth_max and depth_quantization must be finite")
        if depth_max <= 0.0 or depth_quantization <= 0.0:
            raise InvalidParameters(
                f"depth_max={depth_max} and depth_quantization={depth_quantization} must both be positive"
            )

        if depth_quantization < depth_max:
            a = CODE_SPAN / (1.0 / depth_quantization - 1.0 / depth_max)
        else:
            a = depth_quantization * (depth_quantization + 1.0)
        a = float(np.float32(a))
        b = float(np.float32(a / depth_max - 1.0))
        return cls(depth_max=depth_max, depth_quantization=depth_quantization, a=a, b=b)

    @property
    def near_limit(self) -> float:
        """Depth of code 65535; valid samples nearer than this clip to it."""

        return self.a / (MAX_CODE + self.b)

    @classmethod
    def from_header(cls, a: float, b: float) -> "QuantizationParams":
        """Rebuild params on the decode side, where only ``(A, B)`` travel."""

        a = float(a)
        b = float(b)
        # Code 1 must decode to a positive depth_max, otherwise every code is garbage.
        if not (np.isfinite(a) and np.isfinite(b)) or a <= 0.0 or MIN_CODE + b <= 0.0:
            raise InvalidParameters(f"invalid quantization header a={a} b={b}")
        return cls(depth_max=a / (MIN_CODE + b), depth_quantization=0.0, a=a, b=b)


def invalid_mask(depth: np.ndarray) -> np.ndarray:
    """True where a float sample is a missing return (NaN, zero or negative)."""

    with np.errstate(invalid="ignore"):
        return ~(depth > 0.0)


def forward(depth: np.ndarray, params: QuantizationParams) -> np.ndarray:
    """Map float meters to uint16 codes."""

    d = np.asarray(depth, dtype=np.float64)
    invalid = invalid_mask(d)
    # +inf clamps to depth_max like any far sample.
    d = np.where(invalid, params.depth_max, np.minimum(d, params.depth_max))
    with np.errstate(over="ignore"):
        codes = np.clip(np.rint(params.a / d - params.b), MIN_CODE, MAX_CODE)
    return np.where(invalid, INVALID_CODE, codes).astype(np.uint16)


def inverse(codes: np.ndarray, params: QuantizationParams) -> np.ndarray:
    """Map uint16 codes back to float32 meters; code 0 becomes NaN."""

    c = np.asarray(codes)
    invalid = c == INVALID_CODE
    denom = c.astype(np.float64) + params.b
    with np.errstate(divide="ignore", invalid="ignore"):
        depth = params.a / denom
    # Corrupted headers can push the denominator to zero or below.
    depth = np.where(np.isfinite(depth), depth, params.depth_max)
    np.clip(depth, 0.0, params.depth_max, out=depth)
    depth[invalid] = np.nan
    return depth.astype(np.float32)


def step_bound(depth: np.ndarray | float, params: QuantizationParams) -> np.ndarray:
    """Bound on the round-trip error at ``depth``.

    A sample that lands on code ``c`` lies between the depths of ``c + 1`` and
    ``c - 1``, so the error is at most the span from ``c`` to ``c - 1``. Code 1
    has no farther neighbour and uses the span from code 2 to ``depth_max``.
    The span only widens as codes shrink, so the bound never decreases with
    depth. Samples nearer than ``near_limit`` clip to code 65535 and are not
    covered.
    """

    codes = forward(depth, params).astype(np.float64)
    codes = np.maximum(codes, MIN_CODE + 1)
    return params.a / (codes - 1 + params.b) - params.a / (codes + params.b)


def forward_raw(depth: np.ndarray) -> np.ndarray:
    """Scale float meters to integer millimeters (0 stays invalid)."""

    d = np.asarray(depth, dtype=np.float64)
    invalid = invalid_mask(d)
    mm = np.rint(np.where(invalid, 0.0, d) * MM_PER_METER)
    np.clip(mm, INVALID_CODE, MAX_CODE, out=mm)
    mm[invalid] = INVALID_CODE
    return mm.astype(np.uint16)


def inverse_raw(mm: np.ndarray) -> np.ndarray:
    """Integer millimeters back to float32 meters; 0 becomes NaN."""

    mm = np.asarray(mm)
    # float32 division is correctly rounded, so k / 1000 hits float32(k / 1000).
    depth = mm.astype(np.float32) / np.float32(MM_PER_METER)
    depth[mm == INVALID_CODE] = np.nan
    return depth
