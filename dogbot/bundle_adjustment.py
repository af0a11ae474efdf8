"""Reprojection error and joint refinement of camera poses and 3D points."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy.optimize import least_squares
from scipy.sparse import lil_matrix

INITIAL_DEPTH = 5.5
_CAMERA_PARAMS = 6
_POINT_PARAMS = 3


def _rotate_many(angle_axes: np.ndarray, points: np.ndarray) -> np.ndarray:
    """Rotate each row of ``points`` by the matching angle-axis row."""
    w = np.asarray(angle_axes, dtype=np.float64)
    p = np.asarray(points, dtype=np.float64)
    theta2 = np.einsum("ij,ij->i", w, w)
    large = theta2 > np.finfo(np.float64).eps
    result = p + np.cross(w, p)
    if np.any(large):
        wl = w[large]
        pl = p[large]
        theta = np.sqrt(theta2[large])
        cos_t = np.cos(theta)[:, None]
        sin_t = np.sin(theta)[:, None]
        unit = wl / theta[:, None]
        dot = np.einsum("ij,ij->i", unit, pl)[:, None]
        result[large] = pl * cos_t + np.cross(unit, pl) * sin_t + unit * dot * (1.0 - cos_t)
    return result


def angle_axis_rotate_point(angle_axis: Sequence[float], point: Sequence[float]) -> np.ndarray:
    """Rotate a 3D point by an angle-axis vector (Rodrigues' formula)."""
    w = np.asarray(angle_axis, dtype=np.float64).reshape(-1)
    p = np.asarray(point, dtype=np.float64).reshape(-1)
    if w.shape != (3,) or p.shape != (3,):
        raise ValueError("angle axis and point must each have three elements")
    return _rotate_many(w[None, :], p[None, :])[0]


def _project(
    cameras: np.ndarray, points: np.ndarray, focal_length: float, principal_point: np.ndarray
) -> np.ndarray:
    rotated = _rotate_many(cameras[:, :3], points) + cameras[:, 3:6]
    return focal_length * rotated[:, :2] / rotated[:, 2:3] + principal_point


class ReprojectionError:
    """Pixel error between an observed point and the projection of a 3D point.

    A camera is ``[r1, r2, r3, t1, t2, t3]``: an angle-axis rotation followed
    by a translation.
    """

    def __init__(
        self,
        observed: Sequence[float],
        focal_length: float,
        principal_point: Sequence[float],
    ) -> None:
        self.observed = np.asarray(observed, dtype=np.float64).reshape(2)
        self.focal_length = float(focal_length)
        self.principal_point = np.asarray(principal_point, dtype=np.float64).reshape(2)

    def residual(self, camera: Sequence[float], point: Sequence[float]) -> np.ndarray:
        """Observed minus projected pixel coordinates."""
        cam = np.asarray(camera, dtype=np.float64).reshape(-1)
        if cam.shape != (_CAMERA_PARAMS,):
            raise ValueError("a camera has six parameters")
        pt = np.asarray(point, dtype=np.float64).reshape(-1)
        if pt.shape != (_POINT_PARAMS,):
            raise ValueError("a point has three coordinates")
        projected = _project(cam[None, :], pt[None, :], self.focal_length, self.principal_point)
        return self.observed - projected[0]


def load_observations(pattern: str, count: int) -> list[np.ndarray]:
    """Read ``count`` files named by ``pattern % index`` holding "x y w" triples.

    Returns one (N, 2) array of (x, y) per file. A trailing incomplete triple
    is ignored. Raises ValueError when the files hold different numbers of
    points or a value is not a number.
    """
    views: list[np.ndarray] = []
    for index in range(count):
        path = pattern % index
        with open(path, encoding="utf-8") as handle:
            tokens = handle.read().split()
        usable = len(tokens) - len(tokens) % 3
        try:
            values = [float(token) for token in tokens[:usable]]
        except ValueError as exc:
            raise ValueError(f"{path}: {exc}") from exc
        triples = np.array(values, dtype=np.float64).reshape(-1, 3)
        views.append(triples[:, :2].copy())
        if len(views[0]) != len(views[-1]):
            raise ValueError(
                f"{path} holds {len(views[-1])} points, expected {len(views[0])}"
            )
    return views


def bundle_adjust(
    observations: Sequence[np.ndarray],
    focal_length: float,
    principal_point: Sequence[float],
    cameras: np.ndarray | None = None,
    points: np.ndarray | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Refine camera poses and 3D points together to minimise reprojection error.

    Every point is assumed visible in every view. Cameras default to the
    identity pose and points to (0, 0, 5.5). Returns the refined
    ``(cameras, points)`` as (M, 6) and (N, 3) arrays.
    """
    views = [np.asarray(view, dtype=np.float64).reshape(-1, 2) for view in observations]
    if not views:
        raise ValueError("no observations given")
    n_views = len(views)
    n_points = len(views[0])
    if any(len(view) != n_points for view in views):
        raise ValueError("every view must observe the same number of points")

    if cameras is None:
        cams0 = np.zeros((n_views, _CAMERA_PARAMS))
    else:
        cams0 = np.asarray(cameras, dtype=np.float64).reshape(-1, _CAMERA_PARAMS)
    if points is None:
        pts0 = np.tile([0.0, 0.0, INITIAL_DEPTH], (n_points, 1))
    else:
        pts0 = np.asarray(points, dtype=np.float64).reshape(-1, _POINT_PARAMS)
    if cams0.shape[0] != n_views:
        raise ValueError(f"expected {n_views} cameras, got {cams0.shape[0]}")
    if pts0.shape[0] != n_points:
        raise ValueError(f"expected {n_points} points, got {pts0.shape[0]}")

    c = np.asarray(principal_point, dtype=np.float64).reshape(2)
    f = float(focal_length)
    cam_idx = np.repeat(np.arange(n_views), n_points)
    pt_idx = np.tile(np.arange(n_points), n_views)
    observed = np.concatenate(views)
    n_cam_params = n_views * _CAMERA_PARAMS

    def residuals(x: np.ndarray) -> np.ndarray:
        cams = x[:n_cam_params].reshape(n_views, _CAMERA_PARAMS)
        pts = x[n_cam_params:].reshape(n_points, _POINT_PARAMS)
        projected = _project(cams[cam_idx], pts[pt_idx], f, c)
        return (observed - projected).ravel()

    n_residuals = 2 * len(observed)
    sparsity = lil_matrix((n_residuals, n_cam_params + n_points * _POINT_PARAMS), dtype=int)
    rows = np.arange(len(observed))
    for k in range(_CAMERA_PARAMS):
        sparsity[2 * rows, cam_idx * _CAMERA_PARAMS + k] = 1
        sparsity[2 * rows + 1, cam_idx * _CAMERA_PARAMS + k] = 1
    for k in range(_POINT_PARAMS):
        sparsity[2 * rows, n_cam_params + pt_idx * _POINT_PARAMS + k] = 1
        sparsity[2 * rows + 1, n_cam_params + pt_idx * _POINT_PARAMS + k] = 1

    x0 = np.concatenate([cams0.ravel(), pts0.ravel()])
    solution = least_squares(
        residuals, x0, jac_sparsity=sparsity, x_scale="jac", method="trf",
        ftol=1e-12, xtol=1e-12, gtol=1e-12,
    )
    x = solution.x
    return (
        x[:n_cam_params].reshape(n_views, _CAMERA_PARAMS).copy(),
        x[n_cam_params:].reshape(n_points, _POINT_PARAMS).copy(),
    )