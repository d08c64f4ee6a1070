import numpy as np
import pytest

from depthcodec.codec.frame import FLOAT32, UINT16, DepthFrame
from depthcodec.config import Settings
from depthcodec.errors import PayloadCorrupt, UnsupportedFormat
from depthcodec.transport.message import CompressedDepthImage, build_format
from depthcodec.transport.publisher import CompressedDepthPublisher, CompressedDepthSubscriber


@pytest.fixture
def settings():
    return Settings(png_level=6, depth_max=10.0, depth_quantization=0.1)


def test_publisher_tags_content_type(settings, depth_4x4):
    published = []
    publisher = CompressedDepthPublisher(settings)

    assert publisher.publish(DepthFrame(depth_4x4), published.append)
    assert len(published) == 1
    assert published[0].format == "32FC1; compressedDepth png"
    assert published[0].encoding == FLOAT32
    assert published[0].data[0] == 1


def test_publisher_skips_frames_without_output(settings):
    published = []
    publisher = CompressedDepthPublisher(settings)
    assert not publisher.publish(DepthFrame(np.zeros((0, 0), dtype=np.float32)), published.append)
    assert published == []


def test_publisher_keeps_construction_settings(depth_4x4):
    publisher = CompressedDepthPublisher(Settings(depth_max=0.0))
    published = []
    publisher.publish(DepthFrame(depth_4x4), published.append)
    assert published[0].data[0] == 0


def test_publish_subscribe_round_trip(settings, memory_container):
    received = []
    depth = np.arange(1, 13, dtype=np.uint16).reshape(3, 4) * 250
    publisher = CompressedDepthPublisher(settings, container=memory_container)
    subscriber = CompressedDepthSubscriber(received.append, container=memory_container)

    publisher.publish(DepthFrame(depth, UINT16), subscriber.handle)

    assert len(received) == 1
    assert received[0].encoding == UINT16
    np.testing.assert_array_equal(received[0].depth, depth)


def test_subscriber_rejects_other_content_types():
    received = []
    subscriber = CompressedDepthSubscriber(received.append)
    with pytest.raises(UnsupportedFormat):
        subscriber.handle(CompressedDepthImage(format="32FC1; png", data=b"\x00"))
    with pytest.raises(UnsupportedFormat):
        subscriber.handle(CompressedDepthImage(format="32FC1", data=b"\x00"))
    assert received == []


def test_subscriber_reports_decode_errors():
    received = []
    subscriber = CompressedDepthSubscriber(received.append)
    with pytest.raises(PayloadCorrupt):
        subscriber.handle(CompressedDepthImage(format=build_format(FLOAT32), data=b"\x01\x00"))
    assert received == []
