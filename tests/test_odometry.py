import numpy as np
import pytest

from dogbot.odometry import (
    accumulate_pose,
    bird_view_point,
    dehomogenize,
    intrinsic_matrix,
    projection_matrices,
    relative_transform,
)

F = 707.0912
C = (601.8873, 183.1104)


def _rotation_z(angle):
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def test_intrinsic_matrix_layout():
    k = intrinsic_matrix(F, C)
    assert k.shape == (3, 3)
    assert k[0, 0] == F and k[1, 1] == F
    assert k[0, 2] == C[0] and k[1, 2] == C[1]
    assert k[2, 2] == 1.0
    assert k[0, 1] == 0.0 and k[1, 0] == 0.0 and k[2, 0] == 0.0


def test_relative_transform_holds_rotation_and_translation():
    rot = _rotation_z(0.3)
    t = np.array([1.0, 2.0, 3.0])
    transform = relative_transform(rot, t)
    np.testing.assert_allclose(transform[:3, :3], rot)
    np.testing.assert_allclose(transform[:3, 3], t)
    np.testing.assert_allclose(transform[3], [0, 0, 0, 1])


def test_relative_transform_rejects_bad_shapes():
    with pytest.raises(ValueError):
        relative_transform(np.eye(2), [0, 0, 0])
    with pytest.raises(ValueError):
        relative_transform(np.eye(3), [0, 0])


def test_accumulate_pose_ignores_unreliable_motion():
    pose = np.eye(4)
    result = accumulate_pose(pose, _rotation_z(0.5), [1, 0, 0], 100, 100)
    np.testing.assert_allclose(result, pose)


def test_accumulate_pose_applies_inverse_motion():
    pose = relative_transform(_rotation_z(0.1), [0.5, 0.0, 2.0])
    rot = _rotation_z(0.4)
    t = np.array([0.2, -0.1, 1.5])
    result = accumulate_pose(pose, rot, t, 101, 100)
    np.testing.assert_allclose(result @ relative_transform(rot, t), pose, atol=1e-12)


def test_accumulate_pose_rejects_bad_pose():
    with pytest.raises(ValueError):
        accumulate_pose(np.eye(3), np.eye(3), [0, 0, 0], 200)


def test_bird_view_point_truncates_and_offsets():
    pose = np.eye(4)
    pose[0, 3] = 3.7
    pose[2, 3] = -2.2
    assert bird_view_point(pose) == (503, 498)
    assert bird_view_point(pose, (0, 0)) == (3, -2)


def test_dehomogenize_round_trip():
    rng = np.random.default_rng(1)
    xyz = rng.normal(size=(3, 6))
    w = rng.uniform(0.5, 3.0, size=6)
    homogeneous = np.vstack([xyz * w, w])
    result = dehomogenize(homogeneous)
    np.testing.assert_allclose(result[:3], xyz)
    np.testing.assert_allclose(result[3], np.ones(6))


def test_dehomogenize_rejects_wrong_shape():
    with pytest.raises(ValueError):
        dehomogenize(np.ones((3, 4)))


def test_projection_matrices_project_points():
    k = intrinsic_matrix(F, C)
    rot = _rotation_z(0.2)
    t = np.array([0.3, -0.1, 0.5])
    p0, p1 = projection_matrices(k, rot, t)
    np.testing.assert_allclose(p0[:, :3], k)
    np.testing.assert_allclose(p0[:, 3], np.zeros(3))
    x = np.array([0.4, 0.2, 5.0])
    np.testing.assert_allclose(p1 @ np.append(x, 1.0), k @ (rot @ x + t))