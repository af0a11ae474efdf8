"""Pose arithmetic for monocular visual odometry."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

DEFAULT_MIN_INLIERS = 100
BIRD_VIEW_OFFSET = (500, 500)


def _as_rotation(rotation: np.ndarray) -> np.ndarray:
    rot = np.asarray(rotation, dtype=np.float64)
    if rot.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {rot.shape}")
    return rot


def _as_translation(translation: np.ndarray) -> np.ndarray:
    vec = np.asarray(translation, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"translation must have three elements, got {vec.size}")
    return vec


def _as_pose(camera_pose: np.ndarray) -> np.ndarray:
    pose = np.asarray(camera_pose, dtype=np.float64)
    if pose.shape != (4, 4):
        raise ValueError(f"camera pose must be 4x4, got shape {pose.shape}")
    return pose


def intrinsic_matrix(
    focal_length: float, principal_point: Sequence[float]
) -> np.ndarray:
    """Camera matrix K for a focal length and principal point (cx, cy)."""
    cx, cy = principal_point
    return np.array(
        [
            [focal_length, 0.0, cx],
            [0.0, focal_length, cy],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


def relative_transform(rotation: np.ndarray, translation: np.ndarray) -> np.ndarray:
    """Homogeneous 4x4 transform built from a rotation and a translation."""
    transform = np.eye(4, dtype=np.float64)
    transform[:3, :3] = _as_rotation(rotation)
    transform[:3, 3] = _as_translation(translation)
    return transform


def accumulate_pose(
    camera_pose: np.ndarray,
    rotation: np.ndarray,
    translation: np.ndarray,
    inlier_count: int,
    min_inliers: int = DEFAULT_MIN_INLIERS,
) -> np.ndarray:
    """Chain a relative motion onto the camera pose when it is reliable.

    The motion is applied only when ``inlier_count`` exceeds ``min_inliers``;
    otherwise a copy of the pose is returned unchanged.
    """
    pose = _as_pose(camera_pose)
    if inlier_count > min_inliers:
        transform = relative_transform(rotation, translation)
        return pose @ np.linalg.inv(transform)
    return pose.copy()


def bird_view_point(
    camera_pose: np.ndarray, offset: Sequence[int] = BIRD_VIEW_OFFSET
) -> tuple[int, int]:
    """Top-down pixel of the camera: x and z of the pose, truncated, plus an offset."""
    pose = _as_pose(camera_pose)
    x = int(pose[0, 3])
    z = int(pose[2, 3])
    return x + int(offset[0]), z + int(offset[1])


def dehomogenize(points: np.ndarray) -> np.ndarray:
    """Normalise 4xN homogeneous points so that their last row is one."""
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[0] != 4:
        raise ValueError(f"points must be 4xN, got shape {pts.shape}")
    result = np.empty_like(pts)
    result[:3] = pts[:3] / pts[3]
    result[3] = 1.0
    return result


def projection_matrices(
    intrinsics: np.ndarray, rotation: np.ndarray, translation: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Projection matrices of the first view, K[I|0], and the second, K[R|t]."""
    k = np.asarray(intrinsics, dtype=np.float64)
    if k.shape != (3, 3):
        raise ValueError(f"intrinsics must be 3x3, got shape {k.shape}")
    p0 = k @ np.eye(3, 4, dtype=np.float64)
    rt = np.hstack([_as_rotation(rotation), _as_translation(translation).reshape(3, 1)])
    p1 = k @ rt
    return p0, p1