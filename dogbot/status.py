"""Shared, thread-safe state of the robot."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable
from typing import Any

from dogbot.messages import MeasurementNodeHq


class DogStatus:
    """State exchanged between the camera, odometry, lidar and motor threads.

    Every attribute is guarded by its own lock.
    """

    def __init__(self) -> None:
        self._frame_lock = threading.Lock()
        self._current_frame: Any = None

        self._buffer_lock = threading.Lock()
        self._frame_buffer: deque[Any] = deque()

        self._working_lock = threading.Lock()
        self._is_working = False

        self._traj_lock = threading.Lock()
        self._traj: list[tuple[float, float]] = []

        self._location_lock = threading.Lock()
        self._location: tuple[float, float] = (0.0, 0.0)

        self._scan_lock = threading.Lock()
        self._scan_data: list[MeasurementNodeHq] = []

    @property
    def current_frame(self) -> Any:
        """Most recent camera frame, or None before the first one."""
        with self._frame_lock:
            return self._current_frame

    @current_frame.setter
    def current_frame(self, frame: Any) -> None:
        with self._frame_lock:
            self._current_frame = frame

    def push_frame(self, frame: Any) -> None:
        """Queue a frame for the odometry thread."""
        with self._buffer_lock:
            self._frame_buffer.append(frame)

    def pop_frame(self) -> Any:
        """Take the oldest queued frame; raise IndexError when none is queued."""
        with self._buffer_lock:
            if not self._frame_buffer:
                raise IndexError("frame buffer is empty")
            return self._frame_buffer.popleft()

    def __len__(self) -> int:
        with self._buffer_lock:
            return len(self._frame_buffer)

    @property
    def system_status(self) -> bool:
        """True while the system is running."""
        with self._working_lock:
            return self._is_working

    @system_status.setter
    def system_status(self, flag: bool) -> None:
        with self._working_lock:
            self._is_working = bool(flag)

    @property
    def traj_data(self) -> list[tuple[float, float]]:
        """A copy of the current trajectory points."""
        with self._traj_lock:
            return list(self._traj)

    @traj_data.setter
    def traj_data(self, points: Iterable[tuple[float, float]]) -> None:
        copied = [(float(x), float(y)) for x, y in points]
        with self._traj_lock:
            self._traj = copied

    @property
    def current_location(self) -> tuple[float, float]:
        """Current estimated location."""
        with self._location_lock:
            return self._location

    @current_location.setter
    def current_location(self, location: tuple[float, float]) -> None:
        x, y = location
        with self._location_lock:
            self._location = (float(x), float(y))

    @property
    def scan_data(self) -> list[MeasurementNodeHq]:
        """A copy of the latest lidar scan."""
        with self._scan_lock:
            return list(self._scan_data)

    @scan_data.setter
    def scan_data(self, nodes: Iterable[MeasurementNodeHq]) -> None:
        copied = list(nodes)
        with self._scan_lock:
            self._scan_data = copied