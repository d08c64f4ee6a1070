"""HTTP endpoints wrapping the depth encoder and decoder."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from depthcodec.codec.decoder import decode
from depthcodec.codec.encoder import encode
from depthcodec.codec.frame import FLOAT32, SUPPORTED_ENCODINGS, DepthFrame
from depthcodec.config import Settings, get_settings
from depthcodec.errors import PayloadCorrupt, UnsupportedFormat
from depthcodec.transport.message import build_format
from depthcodec.utils.stats import CodecStats

logger = logging.getLogger(__name__)
profile_logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api/depth", tags=["depth"])

OCTET_STREAM = "application/octet-stream"


def get_codec_stats() -> CodecStats:
    if not hasattr(get_codec_stats, "_instance"):
        setattr(get_codec_stats, "_instance", CodecStats())
    return getattr(get_codec_stats, "_instance")


def _check_encoding(encoding: str) -> None:
    if encoding not in SUPPORTED_ENCODINGS:
        raise HTTPException(status_code=422, detail=f"encoding must be one of {list(SUPPORTED_ENCODINGS)}")


@router.post("/encode")
async def encode_depth(
    request: Request,
    width: int = Query(..., gt=0),
    height: int = Query(..., gt=0),
    encoding: str = FLOAT32,
    depth_max: Optional[float] = None,
    depth_quantization: Optional[float] = None,
    png_level: Optional[int] = Query(default=None, ge=0, le=9),
    settings: Settings = Depends(get_settings),
    stats: CodecStats = Depends(get_codec_stats),
) -> Response:
    _check_encoding(encoding)
    body = await request.body()
    try:
        frame = DepthFrame.from_bytes(body, width, height, encoding)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    depth_max = settings.depth_max if depth_max is None else depth_max
    depth_quantization = settings.depth_quantization if depth_quantization is None else depth_quantization
    png_level = settings.png_level if png_level is None else png_level

    start = time.perf_counter()
    payload = await asyncio.to_thread(encode, frame, depth_max, depth_quantization, png_level)
    encode_s = time.perf_counter() - start
    stats.record_encode(encode_s, len(body), None if payload is None else len(payload))

    if settings.profile_timing:
        profile_logger.info(
            "depth_encode %dx%d %s encode=%.4f in=%d out=%d",
            width,
            height,
            encoding,
            encode_s,
            len(body),
            len(payload) if payload else 0,
        )

    if payload is None:
        return Response(status_code=204)
    return Response(content=payload, media_type=OCTET_STREAM, headers={"X-Depth-Format": build_format(encoding)})


@router.post("/decode")
async def decode_depth(
    request: Request,
    encoding: str = FLOAT32,
    width: Optional[int] = Query(default=None, gt=0),
    height: Optional[int] = Query(default=None, gt=0),
    settings: Settings = Depends(get_settings),
    stats: CodecStats = Depends(get_codec_stats),
) -> Response:
    _check_encoding(encoding)
    if (width is None) != (height is None):
        raise HTTPException(status_code=422, detail="width and height must be given together")
    payload = await request.body()
    expected_shape = (height, width) if width is not None else None

    start = time.perf_counter()
    try:
        frame = await asyncio.to_thread(decode, payload, encoding, None, expected_shape)
    except UnsupportedFormat as exc:
        stats.record_decode_error()
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    except PayloadCorrupt as exc:
        stats.record_decode_error()
        logger.warning("Rejected corrupt depth payload: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    decode_s = time.perf_counter() - start
    stats.record_decode(decode_s)

    if settings.profile_timing:
        profile_logger.info("depth_decode %dx%d decode=%.4f in=%d", frame.width, frame.height, decode_s, len(payload))

    return Response(
        content=frame.to_bytes(),
        media_type=OCTET_STREAM,
        headers={
            "X-Depth-Width": str(frame.width),
            "X-Depth-Height": str(frame.height),
            "X-Depth-Encoding": frame.encoding,
        },
    )


@router.get("/stats")
async def codec_stats(stats: CodecStats = Depends(get_codec_stats)) -> dict:
    return stats.snapshot()
