# dogbot

Building blocks for a small quadruped robot that carries a Slamtec RPLIDAR
and a camera: decoding of lidar answers, ordering of scan samples, a
thread-safe store for sensor state, pose arithmetic for monocular visual
odometry, and bundle adjustment of camera poses and 3D points.

## What is inside

- `dogbot.results`: the `ResultCode` values reported by the lidar link, with
  `is_ok`, `is_fail` and `check_result`. `check_result` returns the code
  unchanged, or raises `LidarError` when the code carries the failure bit
  (`0x80000000`).
- `dogbot.messages`: the command bytes (`Command`), answer types
  (`AnswerType`), `HealthStatus`, `ConfScanCommand` and `ConfKey`, and
  decoders for the packed little-endian answers:
  - `MeasurementNode` (legacy sample) with `angle_degrees`, `distance_mm`,
    `quality` and `is_sync`;
  - `MeasurementNodeHq` (high-quality sample) with `angle_degrees`,
    `distance_mm` and `is_sync`;
  - `DeviceInfo` with `firmware_major`, `firmware_minor` and `serial_hex`;
  - `DeviceHealth`, `SampleRate` and `HqCapsule` (96 HQ samples with time
    stamp and CRC field);
  - `varbitscale_src_max(bits)`, the largest value of the variable
    bit-scale encoding.

  A buffer too short for its layout raises `LidarError` with
  `ResultCode.INVALID_DATA`.
- `dogbot.scan`: `DriverDefaults` (default timeout, maximum scan nodes,
  legacy sample duration, model id thresholds), `CapsuleKind`, and
  `ascend_scan_data`, which orders the samples of one revolution by angle.
  Samples with equal angles keep their order; when no sample has a non-zero
  distance it raises `LidarError` with `ResultCode.OPERATION_FAIL`.
- `dogbot.status`: `DogStatus`, state shared between worker threads, each
  field behind its own lock: `current_frame`, `system_status`, `traj_data`,
  `current_location` and `scan_data` properties, plus a frame queue with
  `push_frame`, `pop_frame` (raises `IndexError` when empty) and `len()`.
- `dogbot.odometry`: `intrinsic_matrix`, `relative_transform`,
  `accumulate_pose` (applies a motion only when the inlier count exceeds the
  minimum, 100 by default), `bird_view_point`, `dehomogenize` and
  `projection_matrices`.
- `dogbot.bundle_adjustment`: `angle_axis_rotate_point`,
  `ReprojectionError`, `load_observations` (reads "x y w" triples from files
  named by `pattern % index`) and `bundle_adjust`, which refines cameras
  `[r1, r2, r3, t1, t2, t3]` and 3D points with SciPy least squares. Cameras
  start at the identity pose and points at `(0, 0, 5.5)` unless given.

## Installing

```
pip install .
```

Install the test tools as well with `pip install .[test]`.

## Examples

Ordering the samples of a scan:

```python
from dogbot.messages import MeasurementNodeHq
from dogbot.scan import ascend_scan_data

samples = [
    MeasurementNodeHq(angle_z_q14=8192, dist_mm_q2=4000),
    MeasurementNodeHq(angle_z_q14=0, dist_mm_q2=2000, flag=1),
]
ordered = ascend_scan_data(samples)
print([s.angle_degrees for s in ordered])  # [0.0, 45.0]
```

Chaining a relative motion onto a camera pose:

```python
import numpy as np
from dogbot.odometry import accumulate_pose, bird_view_point

pose = np.eye(4)
pose = accumulate_pose(pose, np.eye(3), [0.0, 0.0, -1.0], inlier_count=150)
print(bird_view_point(pose))  # (500, 501)
```

Refining poses and points:

```python
from dogbot.bundle_adjustment import bundle_adjust, load_observations

views = load_observations("data/image_formation%d.xyz", 5)
cameras, points = bundle_adjust(views, 1000.0, (320.0, 240.0))
```

## What this package does not do

It holds no driver for the lidar: it does not open a serial, TCP or UDP
link, send commands or read answers from a device; it only decodes answer
bytes that you already have. It does not capture camera frames, detect or
track image features, or estimate essential matrices; the odometry module
works on rotations, translations and poses you supply. It does not drive
the motor board, plan paths or draw anything on screen, and it installs no
command-line program.