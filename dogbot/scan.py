"""Driver limits and ordering of the samples of one lidar revolution."""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum
from typing import TypeVar, Union

from dogbot.messages import MeasurementNode, MeasurementNodeHq
from dogbot.results import LidarError, ResultCode

NodeT = TypeVar("NodeT", bound=Union[MeasurementNode, MeasurementNodeHq])


class DriverDefaults(IntEnum):
    """Fixed values the driver works with.

    Timeouts are in milliseconds and sample durations in microseconds.
    """

    DEFAULT_TIMEOUT = 2000
    MAX_SCAN_NODES = 8192
    LEGACY_SAMPLE_DURATION = 476
    A2A3_LIDAR_MIN_MAJOR_ID = 2
    TOF_LIDAR_MIN_MAJOR_ID = 6


class CapsuleKind(IntEnum):
    """Layout of the capsules delivered by an express scan."""

    NORMAL = 0
    DENSE = 1


def _angle_key(node: MeasurementNode | MeasurementNodeHq) -> float:
    return node.angle_degrees


def ascend_scan_data(nodes: Iterable[NodeT]) -> list[NodeT]:
    """Return the samples of one scan ordered by ascending angle.

    Samples with equal angles keep their original order. Raises
    :class:`LidarError` with ``OPERATION_FAIL`` when no sample carries a
    valid (non-zero) distance.
    """
    samples = list(nodes)
    if not any(node.distance_mm != 0 for node in samples):
        raise LidarError(ResultCode.OPERATION_FAIL, "all scan data is invalid")
    return sorted(samples, key=_angle_key)