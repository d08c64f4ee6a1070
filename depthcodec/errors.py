"""Exception types raised by the depth codec."""

from __future__ import annotations


class DepthCodecError(Exception):
    """Base class for codec failures."""


class InvalidParameters(DepthCodecError, ValueError):
    """Quantization limits cannot build an inverse-depth law."""


class ContainerCodecFailure(DepthCodecError):
    """The lossless grid container rejected its input."""


class UnsupportedFormat(DepthCodecError):
    """Payload header carries a format tag this codec does not know."""

    def __init__(self, tag: int | str) -> None:
        super().__init__(f"unsupported compressed depth format: {tag!r}")
        self.tag = tag


class PayloadCorrupt(DepthCodecError):
    """Payload is structurally invalid (truncated header, bad grid, shape mismatch)."""
