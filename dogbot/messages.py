"""Binary layouts of the lidar's command payloads and answers."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from dogbot.results import LidarError, ResultCode

AUTOBAUD_MAGICBYTE = 0x41


class Command(IntEnum):
    """Command bytes understood by the lidar."""

    STOP = 0x25
    SCAN = 0x20
    FORCE_SCAN = 0x21
    RESET = 0x40
    NEW_BAUDRATE_CONFIRM = 0x90
    GET_DEVICE_INFO = 0x50
    GET_DEVICE_HEALTH = 0x52
    GET_SAMPLERATE = 0x59
    HQ_MOTOR_SPEED_CTRL = 0xA8
    EXPRESS_SCAN = 0x82
    HQ_SCAN = 0x83
    GET_LIDAR_CONF = 0x84
    SET_LIDAR_CONF = 0x85
    SET_MOTOR_PWM = 0xF0
    GET_ACC_BOARD_FLAG = 0xFF


class AnswerType(IntEnum):
    """Answer type codes carried in the answer header."""

    DEVINFO = 0x4
    DEVHEALTH = 0x6
    MEASUREMENT = 0x81
    MEASUREMENT_CAPSULED = 0x82
    MEASUREMENT_HQ = 0x83
    SAMPLE_RATE = 0x15
    MEASUREMENT_CAPSULED_ULTRA = 0x84
    GET_LIDAR_CONF = 0x20
    SET_LIDAR_CONF = 0x21
    MEASUREMENT_DENSE_CAPSULED = 0x85
    ACC_BOARD_FLAG = 0xFF


class HealthStatus(IntEnum):
    """Health status reported by the device."""

    OK = 0x0
    WARNING = 0x1
    ERROR = 0x2


class ConfScanCommand(IntEnum):
    """Scan command identifiers used in configuration answers."""

    STD = 0
    EXPRESS = 1
    HQ = 2
    BOOST = 3
    STABILITY = 4
    SENSITIVITY = 5


class ConfKey(IntEnum):
    """Configuration entry identifiers for get/set configuration commands."""

    ANGLE_RANGE = 0x00000000
    DESIRED_ROT_FREQ = 0x00000001
    SCAN_COMMAND_BITMAP = 0x00000002
    MIN_ROT_FREQ = 0x00000004
    MAX_ROT_FREQ = 0x00000005
    MAX_DISTANCE = 0x00000060
    SCAN_MODE_COUNT = 0x00000070
    SCAN_MODE_US_PER_SAMPLE = 0x00000071
    SCAN_MODE_MAX_DISTANCE = 0x00000074
    SCAN_MODE_ANS_TYPE = 0x00000075
    LIDAR_MAC_ADDR = 0x00000079
    SCAN_MODE_TYPICAL = 0x0000007C
    SCAN_MODE_NAME = 0x0000007F
    DETECTED_SERIAL_BPS = 0x000000A1
    LIDAR_STATIC_IP_ADDR = 0x0001CCC0


EXPRESS_SCAN_MODE_NORMAL = 0
EXPRESS_SCAN_MODE_FIXANGLE = 0
EXPRESS_SCAN_FLAG_BOOST = 0x0001
EXPRESS_SCAN_FLAG_SUNLIGHT_REJECTION = 0x0002
ULTRAEXPRESS_SCAN_FLAG_STD = 0x0001
ULTRAEXPRESS_SCAN_FLAG_HIGH_SENSITIVITY = 0x0002
EXPRESS_SCAN_STABILITY_BITMAP = 4
EXPRESS_SCAN_SENSITIVITY_BITMAP = 5

DEFAULT_MOTOR_SPEED = 0xFFFF

RESP_ACC_BOARD_FLAG_MOTOR_CTRL_SUPPORT_MASK = 0x1

RESP_MEASUREMENT_SYNCBIT = 0x1 << 0
RESP_MEASUREMENT_QUALITY_SHIFT = 2
RESP_HQ_FLAG_SYNCBIT = 0x1 << 0
RESP_MEASUREMENT_CHECKBIT = 0x1 << 0
RESP_MEASUREMENT_ANGLE_SHIFT = 1

RESP_MEASUREMENT_EXP_ANGLE_MASK = 0x3
RESP_MEASUREMENT_EXP_DISTANCE_MASK = 0xFC
RESP_MEASUREMENT_EXP_SYNC_1 = 0xA
RESP_MEASUREMENT_EXP_SYNC_2 = 0x5
RESP_MEASUREMENT_HQ_SYNC = 0xA5
RESP_MEASUREMENT_EXP_SYNCBIT = 0x1 << 15
RESP_MEASUREMENT_EXP_ULTRA_MAJOR_BITS = 12
RESP_MEASUREMENT_EXP_ULTRA_PREDICT_BITS = 10

VARBITSCALE_X2_SRC_BIT = 9
VARBITSCALE_X4_SRC_BIT = 11
VARBITSCALE_X8_SRC_BIT = 12
VARBITSCALE_X16_SRC_BIT = 14

VARBITSCALE_X2_DEST_VAL = 512
VARBITSCALE_X4_DEST_VAL = 1280
VARBITSCALE_X8_DEST_VAL = 1792
VARBITSCALE_X16_DEST_VAL = 3328

HQ_CAPSULE_NODE_COUNT = 96

_NODE_STRUCT = struct.Struct("<BHH")
_NODE_HQ_STRUCT = struct.Struct("<HIBB")
_DEVICE_INFO_STRUCT = struct.Struct("<BHB16s")
_DEVICE_HEALTH_STRUCT = struct.Struct("<BH")
_SAMPLE_RATE_STRUCT = struct.Struct("<HH")
_HQ_CAPSULE_HEAD = struct.Struct("<BQ")
_HQ_CAPSULE_TAIL = struct.Struct("<I")
HQ_CAPSULE_SIZE = (
    _HQ_CAPSULE_HEAD.size
    + HQ_CAPSULE_NODE_COUNT * _NODE_HQ_STRUCT.size
    + _HQ_CAPSULE_TAIL.size
)


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise LidarError(
            ResultCode.INVALID_DATA,
            f"{what} needs {size} bytes, got {len(data)}",
        )


def varbitscale_src_max(bits: int) -> int:
    """Largest source value representable with ``bits`` bits of variable-scale encoding."""
    return (
        (((1 << bits) - VARBITSCALE_X16_DEST_VAL) << 4)
        + ((VARBITSCALE_X16_DEST_VAL - VARBITSCALE_X8_DEST_VAL) << 3)
        + ((VARBITSCALE_X8_DEST_VAL - VARBITSCALE_X4_DEST_VAL) << 2)
        + ((VARBITSCALE_X4_DEST_VAL - VARBITSCALE_X2_DEST_VAL) << 1)
        + VARBITSCALE_X2_DEST_VAL
        - 1
    )


@dataclass(frozen=True)
class MeasurementNode:
    """A legacy measurement sample (sync/quality, Q6 angle with check bit, Q2 distance)."""

    sync_quality: int
    angle_q6_checkbit: int
    distance_q2: int

    SIZE = _NODE_STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "MeasurementNode":
        """Decode a node from its packed layout."""
        _require(data, _NODE_STRUCT.size, "measurement node")
        return cls(*_NODE_STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the node in its packed layout."""
        return _NODE_STRUCT.pack(self.sync_quality, self.angle_q6_checkbit, self.distance_q2)

    @property
    def angle_degrees(self) -> float:
        """Angle of the sample in degrees."""
        return (self.angle_q6_checkbit >> RESP_MEASUREMENT_ANGLE_SHIFT) / 64.0

    @property
    def distance_mm(self) -> float:
        """Distance of the sample in millimetres."""
        return self.distance_q2 / 4.0

    @property
    def quality(self) -> int:
        """Signal quality of the sample."""
        return self.sync_quality >> RESP_MEASUREMENT_QUALITY_SHIFT

    @property
    def is_sync(self) -> bool:
        """True when this sample starts a new revolution."""
        return bool(self.sync_quality & RESP_MEASUREMENT_SYNCBIT)


@dataclass(frozen=True)
class MeasurementNodeHq:
    """A high-quality measurement sample (Q14 angle, Q2 distance, quality, flag)."""

    angle_z_q14: int
    dist_mm_q2: int
    quality: int = 0
    flag: int = 0

    SIZE = _NODE_HQ_STRUCT.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "MeasurementNodeHq":
        """Decode a node from its packed layout."""
        _require(data, _NODE_HQ_STRUCT.size, "hq measurement node")
        return cls(*_NODE_HQ_STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the node in its packed layout."""
        return _NODE_HQ_STRUCT.pack(self.angle_z_q14, self.dist_mm_q2, self.quality, self.flag)

    @property
    def angle_degrees(self) -> float:
        """Angle of the sample in degrees."""
        return self.angle_z_q14 * 90.0 / 16384.0

    @property
    def distance_mm(self) -> float:
        """Distance of the sample in millimetres."""
        return self.dist_mm_q2 / 4.0

    @property
    def is_sync(self) -> bool:
        """True when this sample starts a new revolution."""
        return bool(self.flag & RESP_HQ_FLAG_SYNCBIT)


@dataclass(frozen=True)
class DeviceInfo:
    """Model, firmware, hardware version and serial number of the device."""

    model: int
    firmware_version: int
    hardware_version: int
    serialnum: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> "DeviceInfo":
        """Decode the device information answer."""
        _require(data, _DEVICE_INFO_STRUCT.size, "device info")
        return cls(*_DEVICE_INFO_STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the device information in its packed layout."""
        return _DEVICE_INFO_STRUCT.pack(
            self.model, self.firmware_version, self.hardware_version, self.serialnum
        )

    @property
    def firmware_major(self) -> int:
        """Major part of the firmware version."""
        return self.firmware_version >> 8

    @property
    def firmware_minor(self) -> int:
        """Minor part of the firmware version."""
        return self.firmware_version & 0xFF

    @property
    def serial_hex(self) -> str:
        """Serial number as upper-case hex digits."""
        return self.serialnum.hex().upper()


@dataclass(frozen=True)
class DeviceHealth:
    """Health status and error code of the device."""

    status: int
    error_code: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "DeviceHealth":
        """Decode the device health answer."""
        _require(data, _DEVICE_HEALTH_STRUCT.size, "device health")
        return cls(*_DEVICE_HEALTH_STRUCT.unpack_from(data))

    def to_bytes(self) -> bytes:
        """Encode the health answer in its packed layout."""
        return _DEVICE_HEALTH_STRUCT.pack(self.status, self.error_code)


@dataclass(frozen=True)
class SampleRate:
    """Sample durations, in microseconds, of the standard and express scans."""

    std_sample_duration_us: int
    express_sample_duration_us: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "SampleRate":
        """Decode the sample rate answer."""
        _require(data, _SAMPLE_RATE_STRUCT.size, "sample rate")
        return cls(*_SAMPLE_RATE_STRUCT.unpack_from(data))


@dataclass(frozen=True)
class HqCapsule:
    """A capsule of 96 high-quality samples with time stamp and CRC."""

    sync_byte: int
    time_stamp: int
    nodes: tuple[MeasurementNodeHq, ...]
    crc32: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "HqCapsule":
        """Decode a capsule from its packed layout."""
        _require(data, HQ_CAPSULE_SIZE, "hq capsule")
        sync_byte, time_stamp = _HQ_CAPSULE_HEAD.unpack_from(data)
        offset = _HQ_CAPSULE_HEAD.size
        nodes = tuple(
            MeasurementNodeHq(*fields)
            for fields in _NODE_HQ_STRUCT.iter_unpack(
                data[offset : offset + HQ_CAPSULE_NODE_COUNT * _NODE_HQ_STRUCT.size]
            )
        )
        offset += HQ_CAPSULE_NODE_COUNT * _NODE_HQ_STRUCT.size
        (crc32,) = _HQ_CAPSULE_TAIL.unpack_from(data, offset)
        return cls(sync_byte, time_stamp, nodes, crc32)