"""
Procedural grasp pose sampling around one axis of a cuboid.

Sampled poses follow the gripper convention: origin at the palm, z pointing
towards the object (approach), y along the swept cuboid axis ("up"), x
completing the right-handed frame. All poses are [4x4] matrices in the frame
of the cuboid pose.

Stages, each a pure function returning a new list:
  corners -> faces -> depth -> angles -> both directions
"""
from dataclasses import dataclass
from typing import List
import math
import numpy as np
from scipy.spatial.transform import Rotation as R
from grasp_models.grasp_data import GraspAxis
from grasplib.geometry import rotate_local, translate_global
from grasplib.intersection import grasp_intersects_cuboid
from grasplib.utils import log, warn

# back the palm off of the object slightly
CORNER_CLEARANCE = 0.001

# rounding slack for floor/ceil of ratios like (0.06 - 0.02) / 0.01
_ROUND_EPS = 1e-9


@dataclass(frozen=True)
class AxisGeometry:
    length_a: str       # cuboid extent along a_dir
    length_b: str       # cuboid extent along b_dir
    a_axis: int         # local cuboid axis index of a_dir
    b_axis: int         # local cuboid axis index of b_dir
    base_angles: tuple  # intrinsic x-y-z rotation aligning the gripper with the axis


AXIS_GEOMETRY = {
    GraspAxis.X: AxisGeometry('width', 'height', 1, 2, (-np.pi / 2.0, 0., -np.pi / 2.0)),
    GraspAxis.Y: AxisGeometry('depth', 'height', 0, 2, (0., np.pi / 2.0, np.pi)),
    GraspAxis.Z: AxisGeometry('depth', 'width', 0, 1, (np.pi / 2.0, np.pi / 2.0, 0.)),
}


@dataclass(frozen=True)
class NarrowFacePolicy:
    """ placement for faces narrower than the gripper: the gripper is aligned
    with the center and shifted to both sides by offset_fraction * gripper_width """
    num_positions: int = 3
    offset_fraction: float = 0.5


@dataclass(frozen=True)
class AxisFrame:
    cuboid_pose: np.ndarray
    base_pose: np.ndarray   # cuboid pose rotated into the gripper convention
    length_a: float
    length_b: float
    a_dir: np.ndarray
    b_dir: np.ndarray


def floor_ratio(num, den) -> int:
    return int(math.floor(num / den + _ROUND_EPS))


def ceil_ratio(num, den) -> int:
    return int(math.ceil(num / den - _ROUND_EPS))


def axis_frame(cuboid, axis) -> AxisFrame:
    geometry = AXIS_GEOMETRY[GraspAxis.parse(axis)]
    rotation = cuboid.pose[:3, :3]
    a_dir = rotation[:, geometry.a_axis]
    b_dir = rotation[:, geometry.b_axis]

    base_rot = np.eye(4)
    base_rot[:3, :3] = R.from_euler('XYZ', geometry.base_angles).as_matrix()

    return AxisFrame(
        cuboid_pose=cuboid.pose,
        base_pose=cuboid.pose @ base_rot,
        length_a=getattr(cuboid, geometry.length_a),
        length_b=getattr(cuboid, geometry.length_b),
        a_dir=a_dir / np.linalg.norm(a_dir),
        b_dir=b_dir / np.linalg.norm(b_dir))


def num_radial_grasps(angle_res) -> int:
    return max(1, ceil_ratio(np.pi / 2.0, angle_res))


def sample_corner_grasps(frame: AxisFrame, angle_res) -> List[np.ndarray]:
    """ fan of grasps at each of the 4 edges parallel to the swept axis, aimed at the centroid """
    num_radial = num_radial_grasps(angle_res)
    delta_angle = (np.pi / 2.0) / (num_radial + 1)

    corner_a = 0.5 * (frame.length_a + CORNER_CLEARANCE) * frame.a_dir
    corner_b = 0.5 * (frame.length_b + CORNER_CLEARANCE) * frame.b_dir
    corners = [
        (-corner_a - corner_b, 0.),
        (-corner_a + corner_b, -np.pi / 2.0),
        (corner_a + corner_b, np.pi),
        (corner_a - corner_b, np.pi / 2.0),
    ]

    poses = []
    for translation, corner_rotation in corners:
        grasp_pose = rotate_local(frame.base_pose, 'y', corner_rotation)
        grasp_pose = translate_global(grasp_pose, translation)
        for _ in range(num_radial):
            grasp_pose = rotate_local(grasp_pose, 'y', delta_angle)
            poses.append(grasp_pose)
    return poses


def face_grasp_offsets(length, grasp_data, policy=NarrowFacePolicy()) -> np.ndarray:
    """ positions [m] along a face of given length, centered on the face """
    span = length - grasp_data.gripper_width
    num_grasps = floor_ratio(span, grasp_data.grasp_resolution) + 1

    if num_grasps <= 0:
        # fingers are wider than the object: align with top/center/bottom
        num_grasps = policy.num_positions
        delta = policy.offset_fraction * grasp_data.gripper_width
    elif num_grasps == 1:
        delta = 0.
    else:
        delta = span / (num_grasps - 1)

    return (np.arange(num_grasps) - (num_grasps - 1) / 2.0) * delta


def sample_face_grasps(frame: AxisFrame, grasp_data,
                       policy=NarrowFacePolicy()) -> List[np.ndarray]:
    """ rows of axis aligned grasps along the 4 faces parallel to the swept axis """
    half_a = 0.5 * (frame.length_a + CORNER_CLEARANCE) * frame.a_dir
    half_b = 0.5 * (frame.length_b + CORNER_CLEARANCE) * frame.b_dir
    offsets_a = face_grasp_offsets(frame.length_a, grasp_data, policy)
    offsets_b = face_grasp_offsets(frame.length_b, grasp_data, policy)

    # (face center, alignment rotation, sweep direction, offsets)
    faces = [
        (-half_a, 0., frame.b_dir, offsets_b),
        (half_b, -np.pi / 2.0, -frame.a_dir, offsets_a),
        (half_a, np.pi, -frame.b_dir, offsets_b),
        (-half_b, np.pi / 2.0, frame.a_dir, offsets_a),
    ]

    poses = []
    for center, rotation, sweep_dir, offsets in faces:
        face_pose = rotate_local(frame.base_pose, 'y', rotation)
        face_pose = translate_global(face_pose, center)
        poses.extend(translate_global(face_pose, offset * sweep_dir)
                     for offset in offsets)
    return poses


def num_depth_grasps(grasp_data) -> int:
    return max(1, ceil_ratio(grasp_data.finger_depth, grasp_data.grasp_depth_resolution))


def sample_depth_grasps(poses, grasp_data) -> List[np.ndarray]:
    """ poses followed by num_depth copies of each, stepped back along the approach axis """
    num_depth = num_depth_grasps(grasp_data)
    delta_f = grasp_data.finger_depth / num_depth

    depth_poses = list(poses)
    for pose in poses:
        grasp_dir = pose[:3, 2]
        for j in range(1, num_depth + 1):
            depth_poses.append(translate_global(pose, -j * delta_f * grasp_dir))
    return depth_poses


def max_sweep_iterations(angle_res) -> int:
    return ceil_ratio(np.pi, angle_res) + 1


class AngularSweep:
    """ lazily rotates a pose about its y axis in steps of angle_step, yielding
    each rotated pose while its fingers still touch the cuboid.
    Stops at the first probe that misses the cuboid or after max_iterations
    poses; in the latter case truncated is set. """

    def __init__(self, base_pose, angle_step, cuboid, finger_to_palm_depth, max_iterations):
        self.base_pose = base_pose
        self.angle_step = angle_step
        self.cuboid = cuboid
        self.finger_to_palm_depth = finger_to_palm_depth
        self.max_iterations = max_iterations
        self.truncated = False

    def _touches(self, pose):
        return grasp_intersects_cuboid(pose, self.cuboid, self.finger_to_palm_depth)

    def __iter__(self):
        self.truncated = False
        grasp_pose = rotate_local(self.base_pose, 'y', self.angle_step)
        iterations = 0
        while self._touches(grasp_pose):
            if iterations >= self.max_iterations:
                self.truncated = True
                return
            yield grasp_pose
            iterations += 1
            grasp_pose = rotate_local(grasp_pose, 'y', self.angle_step)


def sample_angle_grasps(poses, cuboid, grasp_data, angle_res) -> List[np.ndarray]:
    """ poses followed by their rotational variants in + and - direction """
    max_iterations = max_sweep_iterations(angle_res)
    angle_poses = list(poses)
    for base_pose in poses:
        for step in (angle_res, -angle_res):
            sweep = AngularSweep(base_pose, step, cuboid,
                                 grasp_data.finger_to_palm_depth, max_iterations)
            angle_poses.extend(sweep)
            if sweep.truncated:
                warn("exceeded max iterations while creating variable angle grasps",
                     name="cuboid_axis_grasps")
    return angle_poses


def sample_bidirectional_grasps(poses) -> List[np.ndarray]:
    """ poses followed by each pose flipped by 180 deg about its approach axis """
    return list(poses) + [rotate_local(pose, 'z', np.pi) for pose in poses]


def sample_axis_grasps(cuboid, axis, grasp_data, verbose=False,
                       policy=NarrowFacePolicy()) -> List[np.ndarray]:
    """ all raw grasp poses for one axis of the cuboid """
    frame = axis_frame(cuboid, axis)
    angle_res = grasp_data.angle_resolution_rad

    corner_poses = sample_corner_grasps(frame, angle_res)
    face_poses = sample_face_grasps(frame, grasp_data, policy)
    seed_poses = corner_poses + face_poses

    depth_poses = sample_depth_grasps(seed_poses, grasp_data)

    # corner grasps at zero depth don't need variable angles
    num_corner = len(corner_poses)
    angle_poses = depth_poses[:num_corner] + sample_angle_grasps(
        depth_poses[num_corner:], cuboid, grasp_data, angle_res)

    grasp_poses = sample_bidirectional_grasps(angle_poses)

    if verbose:
        log(f"axis {GraspAxis.parse(axis).name}: {len(corner_poses)} corner, "
            f"{len(face_poses)} face, {len(depth_poses)} with depth, "
            f"{len(angle_poses)} with angles, {len(grasp_poses)} total",
            name="cuboid_axis_grasps")
    return grasp_poses
