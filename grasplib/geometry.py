from scipy.spatial.transform import Rotation
import numpy as np


def invert_homogeneous(T):
    inverse = np.eye(4)
    inverse[:3, :3] = T[:3, :3].T
    inverse[:3, 3] = - T[:3, :3].T @ T[:3, 3]
    return inverse


def homogeneous_mat_from_RT(R, t):
    trans = np.eye(4)
    t = np.squeeze(t)

    if isinstance(R, Rotation):
        trans[0:3, 0:3] = R.as_matrix()
        trans[:3, 3] = t

    elif R.shape == (3, 3):
        trans[0:3, 0:3] = R
        trans[:3, 3] = t

    return trans


def rotate_local(pose, axis, angle):
    """ rotate pose by angle [rad] about one of its own axes ('x', 'y' or 'z') """
    rot = np.eye(4)
    rot[:3, :3] = Rotation.from_euler(axis, angle).as_matrix()
    return pose @ rot


def translate_global(pose, translation):
    """ shift the origin of pose by a translation given in the parent frame """
    moved = pose.copy()
    moved[:3, 3] += translation
    return moved


def transform_points(T, points):
    """ apply homogeneous T to points [n,3] (or a single point [3]) """
    points = np.asarray(points, dtype=float)
    return points @ T[:3, :3].T + T[:3, 3]


def angle_between_vectors(a, b) -> float:
    a_norm = np.linalg.norm(a)
    b_norm = np.linalg.norm(b)
    if a_norm < 1e-12 or b_norm < 1e-12:
        return 0.0
    x = np.clip(np.dot(a, b) / (a_norm * b_norm), -1.0, 1.0)
    return float(np.arccos(x))


def is_rigid_transform(T, tol=1e-6) -> bool:
    T = np.asarray(T, dtype=float)
    if T.shape != (4, 4) or not np.all(np.isfinite(T)):
        return False
    rot = T[:3, :3]
    orthonormal = np.allclose(rot.T @ rot, np.eye(3), atol=tol)
    proper = abs(np.linalg.det(rot) - 1.0) < tol
    bottom_row = np.allclose(T[3], [0., 0., 0., 1.], atol=tol)
    return orthonormal and proper and bottom_row
