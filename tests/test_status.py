import threading

import pytest

from dogbot.messages import MeasurementNodeHq
from dogbot.status import DogStatus


def test_frames_come_out_in_order():
    status = DogStatus()
    for frame in ("a", "b", "c"):
        status.push_frame(frame)
    assert len(status) == 3
    assert [status.pop_frame() for _ in range(3)] == ["a", "b", "c"]
    assert len(status) == 0


def test_pop_from_empty_buffer_raises():
    status = DogStatus()
    with pytest.raises(IndexError):
        status.pop_frame()


def test_current_frame_starts_empty_and_updates():
    status = DogStatus()
    assert status.current_frame is None
    status.current_frame = "frame-1"
    assert status.current_frame == "frame-1"


def test_system_status_flag():
    status = DogStatus()
    assert status.system_status is False
    status.system_status = True
    assert status.system_status is True


def test_traj_data_is_a_copy():
    status = DogStatus()
    status.traj_data = [(1, 2), (3, 4)]
    got = status.traj_data
    got.append((9.0, 9.0))
    assert status.traj_data == [(1.0, 2.0), (3.0, 4.0)]


def test_current_location_round_trip():
    status = DogStatus()
    assert status.current_location == (0.0, 0.0)
    status.current_location = (5, -2.5)
    assert status.current_location == (5.0, -2.5)


def test_scan_data_round_trip():
    status = DogStatus()
    nodes = [MeasurementNodeHq(100, 400), MeasurementNodeHq(200, 800, 10, 1)]
    status.scan_data = nodes
    assert status.scan_data == nodes
    assert status.scan_data is not nodes


def test_concurrent_pushes_are_all_kept():
    status = DogStatus()

    def worker(base):
        for i in range(200):
            status.push_frame(base + i)

    threads = [threading.Thread(target=worker, args=(k * 1000,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    popped = [status.pop_frame() for _ in range(800)]
    assert sorted(popped) == sorted(k * 1000 + i for k in range(4) for i in range(200))
    with pytest.raises(IndexError):
        status.pop_frame()