"""Publish/subscribe adapters around the depth codec."""

from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from depthcodec.codec.container import ContainerCodec
from depthcodec.codec.decoder import decode
from depthcodec.codec.encoder import encode
from depthcodec.codec.frame import DepthFrame
from depthcodec.config import Settings, get_settings
from depthcodec.transport.message import CompressedDepthImage, build_format

logger = logging.getLogger(__name__)

PublishFn = Callable[[CompressedDepthImage], None]
FrameCallback = Callable[[DepthFrame], None]


class CompressedDepthPublisher:
    """Encodes frames with the configuration captured at construction."""

    def __init__(self, settings: Optional[Settings] = None, container: Optional[ContainerCodec] = None) -> None:
        settings = settings or get_settings()
        self.png_level = settings.png_level
        self.depth_max = settings.depth_max
        self.depth_quantization = settings.depth_quantization
        self.container = container

    def publish(self, frame: DepthFrame, publish_fn: PublishFn) -> bool:
        """Encode ``frame`` and hand it to ``publish_fn``; skip it if encoding produced nothing."""

        data = encode(
            frame,
            self.depth_max,
            self.depth_quantization,
            self.png_level,
            container=self.container,
        )
        if data is None:
            logger.debug("Skipping %s frame with shape %s: nothing to publish", frame.encoding, np.shape(frame.depth))
            return False
        publish_fn(CompressedDepthImage(format=build_format(frame.encoding), data=data))
        return True


class CompressedDepthSubscriber:
    """Decodes incoming envelopes; decode errors reach the caller."""

    def __init__(self, callback: FrameCallback, container: Optional[ContainerCodec] = None) -> None:
        self.callback = callback
        self.container = container

    def handle(self, message: CompressedDepthImage) -> DepthFrame:
        frame = decode(message.data, encoding=message.encoding, container=self.container)
        self.callback(frame)
        return frame
