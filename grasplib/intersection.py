import numpy as np
from grasplib.geometry import invert_homogeneous, transform_points

# (normal axis, first in-plane axis, second in-plane axis), tested in this order:
# +-height (z) faces, then +-width (y) faces, then +-depth (x) faces
_FACE_AXES = ((2, 0, 1), (1, 0, 2), (0, 1, 2))

_PARALLEL_EPS = 1e-12


def _face_hit(t, u1, v1, u2, v2, a, b):
    """ plane must cross the segment and the crossing must lie inside the a x b face """
    if not 0.0 <= t <= 1.0:
        return False
    u = u1 + t * (u2 - u1)
    v = v1 + t * (v2 - v1)
    return -a / 2.0 <= u <= a / 2.0 and -b / 2.0 <= v <= b / 2.0


def segment_intersects_cuboid(point_a, point_b, cuboid) -> bool:
    """ True if the segment point_a -> point_b (reference frame) crosses a face of the cuboid """
    to_cuboid = invert_homogeneous(cuboid.pose)
    p_a, p_b = transform_points(to_cuboid, np.stack([point_a, point_b]))
    extents = cuboid.extents

    for normal, u_ax, v_ax in _FACE_AXES:
        denominator = p_b[normal] - p_a[normal]
        if abs(denominator) < _PARALLEL_EPS:
            # parallel to both planes of this pair
            continue
        for sign in (1.0, -1.0):
            offset = sign * extents[normal] / 2.0
            t = (offset - p_a[normal]) / denominator
            if _face_hit(t, p_a[u_ax], p_a[v_ax], p_b[u_ax], p_b[v_ax],
                         extents[u_ax], extents[v_ax]):
                return True

    return False


def grasp_intersects_cuboid(grasp_pose, cuboid, finger_to_palm_depth) -> bool:
    """ does the line from grasp point to finger tip touch the cuboid? """
    point_a = grasp_pose[:3, 3]
    point_b = point_a + grasp_pose[:3, 2] * finger_to_palm_depth
    return segment_intersects_cuboid(point_a, point_b, cuboid)
