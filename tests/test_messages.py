import struct

import pytest

from dogbot.messages import (
    HQ_CAPSULE_SIZE,
    RESP_MEASUREMENT_HQ_SYNC,
    DeviceHealth,
    DeviceInfo,
    HealthStatus,
    HqCapsule,
    MeasurementNode,
    MeasurementNodeHq,
    SampleRate,
    varbitscale_src_max,
)
from dogbot.results import LidarError, ResultCode


def test_hq_node_round_trip():
    node = MeasurementNodeHq(angle_z_q14=12345, dist_mm_q2=98765, quality=47, flag=1)
    data = node.to_bytes()
    assert len(data) == MeasurementNodeHq.SIZE
    assert MeasurementNodeHq.from_bytes(data) == node


def test_hq_node_packed_size_is_eight():
    assert len(MeasurementNodeHq(0, 0).to_bytes()) == 8


def test_hq_node_angle_and_distance():
    node = MeasurementNodeHq(angle_z_q14=16384, dist_mm_q2=4 * 250, quality=10, flag=0)
    assert node.angle_degrees == pytest.approx(90.0)
    assert node.distance_mm == pytest.approx(250)
    assert not node.is_sync


def test_hq_node_short_data_raises():
    with pytest.raises(LidarError) as info:
        MeasurementNodeHq.from_bytes(b"\x00\x01\x02")
    assert info.value.code == ResultCode.INVALID_DATA


def test_legacy_node_fields():
    quality = 15
    node = MeasurementNode(
        sync_quality=(quality << 2) | 1,
        angle_q6_checkbit=((64 * 45) << 1) | 1,
        distance_q2=4 * 700,
    )
    assert node.quality == quality
    assert node.is_sync
    assert node.angle_degrees == pytest.approx(45)
    assert node.distance_mm == pytest.approx(700)


def test_legacy_node_round_trip():
    node = MeasurementNode(sync_quality=0x3E, angle_q6_checkbit=0x1235, distance_q2=0x4321)
    assert MeasurementNode.from_bytes(node.to_bytes()) == node
    assert len(node.to_bytes()) == MeasurementNode.SIZE


def test_device_info_decode():
    serial = bytes(range(16))
    data = struct.pack("<BHB16s", 0x18, (1 << 8) | 29, 7, serial)
    info = DeviceInfo.from_bytes(data)
    assert info.model == 0x18
    assert info.firmware_major == 1
    assert info.firmware_minor == 29
    assert info.hardware_version == 7
    assert info.serial_hex == "000102030405060708090A0B0C0D0E0F"
    assert info.to_bytes() == data


def test_device_info_short_raises():
    with pytest.raises(LidarError):
        DeviceInfo.from_bytes(b"\x00" * 10)


def test_device_health_decode():
    data = struct.pack("<BH", HealthStatus.ERROR, 0x1234)
    health = DeviceHealth.from_bytes(data)
    assert health.status == HealthStatus.ERROR
    assert health.error_code == 0x1234
    assert health.to_bytes() == data


def test_sample_rate_decode():
    rate = SampleRate.from_bytes(struct.pack("<HH", 476, 250))
    assert rate.std_sample_duration_us == 476
    assert rate.express_sample_duration_us == 250


def test_hq_capsule_decode():
    nodes = [MeasurementNodeHq(i * 100, i * 4, i % 256, i & 1) for i in range(96)]
    data = (
        struct.pack("<BQ", RESP_MEASUREMENT_HQ_SYNC, 123456789)
        + b"".join(n.to_bytes() for n in nodes)
        + struct.pack("<I", 0xDEADBEEF)
    )
    assert len(data) == HQ_CAPSULE_SIZE
    capsule = HqCapsule.from_bytes(data)
    assert capsule.sync_byte == RESP_MEASUREMENT_HQ_SYNC
    assert capsule.time_stamp == 123456789
    assert list(capsule.nodes) == nodes
    assert capsule.crc32 == 0xDEADBEEF


def test_hq_capsule_short_raises():
    with pytest.raises(LidarError):
        HqCapsule.from_bytes(b"\xa5" * (HQ_CAPSULE_SIZE - 1))


@pytest.mark.parametrize("bits", [14, 15, 16, 20])
def test_varbitscale_grows_sixteen_per_step(bits):
    assert varbitscale_src_max(bits + 1) - varbitscale_src_max(bits) == (1 << bits) * 16
    assert varbitscale_src_max(bits) > 0