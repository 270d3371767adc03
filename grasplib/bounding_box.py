"""
Principal axis bounding box of a mesh.

The box axes are the eigenvectors of the inertia tensor of the vertex cloud
(point masses, relative to the centroid). This is an approximation of the
tightest box, not the minimum volume box.

Known limitation: if two eigenvalues are (nearly) equal, e.g. for a cube or a
cylinder, the eigenvectors inside the degenerate subspace are arbitrary and
the resulting box orientation is numerically unstable.
"""
import numpy as np
from grasp_models.cuboid import Cuboid, Mesh
from grasplib.errors import DegenerateMeshError
from grasplib.geometry import homogeneous_mat_from_RT, invert_homogeneous, transform_points
from grasplib.utils import log

HANDEDNESS_EPS = 1e-6

# extents below this fraction of the largest one count as flat
FLAT_EXTENT_RATIO = 1e-9


def inertia_tensor(points):
    """ second moment matrix of point masses about their origin """
    x, y, z = points[:, 0], points[:, 1], points[:, 2]
    Ixx = np.sum(y * y + z * z)
    Iyy = np.sum(x * x + z * z)
    Izz = np.sum(x * x + y * y)
    Ixy = np.sum(x * y)
    Ixz = np.sum(x * z)
    Iyz = np.sum(y * z)
    return np.array([[Ixx, -Ixy, -Ixz],
                     [-Ixy, Iyy, -Iyz],
                     [-Ixz, -Iyz, Izz]])


def principal_axes(inertia):
    """ eigenvectors of the inertia tensor as columns, forced to be right-handed """
    _, eigenvectors = np.linalg.eigh(inertia)
    axis_1 = eigenvectors[:, 0]
    axis_2 = eigenvectors[:, 1]
    axis_3 = eigenvectors[:, 2]

    w = np.cross(axis_1, axis_2) - axis_3
    if np.any(np.abs(w) > HANDEDNESS_EPS):
        axis_3 = -axis_3

    return np.stack([axis_1, axis_2, axis_3], axis=-1)


def get_bounding_box_from_mesh(mesh, verbose=False) -> Cuboid:
    """ fit a principal axis aligned cuboid to the vertices of mesh (Mesh or [n,3] array) """
    if isinstance(mesh, Mesh):
        vertices = mesh.vertices
    else:
        vertices = np.asarray(mesh, dtype=float).reshape((-1, 3))

    if len(vertices) == 0:
        raise DegenerateMeshError("Unable to get bounding box from mesh: no vertices")
    if not np.all(np.isfinite(vertices)):
        raise DegenerateMeshError("Unable to get bounding box from mesh: non-finite vertices")

    centroid = np.mean(vertices, axis=0)
    inertia = inertia_tensor(vertices - centroid)
    axes = principal_axes(inertia)

    if verbose:
        log(f"num vertices = {len(vertices)}, centroid = {centroid}", name="bbox")
        log(f"inertia = \n{inertia}", name="bbox")

    world_to_mesh_transform = homogeneous_mat_from_RT(axes, centroid)

    local = transform_points(invert_homogeneous(world_to_mesh_transform), vertices)
    min_bound = np.min(local, axis=0)
    max_bound = np.max(local, axis=0)
    depth, width, height = max_bound - min_bound

    cuboid_pose = world_to_mesh_transform.copy()
    cuboid_pose[:3, 3] = transform_points(
        world_to_mesh_transform, (min_bound + max_bound) / 2.0)

    if verbose:
        log(f"bbox size = {depth}, {width}, {height}", name="bbox")

    if min(depth, width, height) <= FLAT_EXTENT_RATIO * max(depth, width, height):
        raise DegenerateMeshError(
            f"Unable to get bounding box from mesh: flat extents {depth}, {width}, {height}")

    return Cuboid(cuboid_pose, depth, width, height)
