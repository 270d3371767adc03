import numpy as np
import pytest
from grasp_models.cuboid import Cuboid
from grasp_models.grasp_data import GraspAxis, GraspData
from grasplib.cuboid_sampler import (
    CORNER_CLEARANCE, AngularSweep, NarrowFacePolicy, axis_frame, face_grasp_offsets,
    max_sweep_iterations, num_depth_grasps, num_radial_grasps, sample_angle_grasps,
    sample_axis_grasps, sample_bidirectional_grasps, sample_corner_grasps,
    sample_depth_grasps, sample_face_grasps)
from grasplib.errors import InvalidAxisError
from grasplib.geometry import homogeneous_mat_from_RT
from grasplib.intersection import grasp_intersects_cuboid


def is_orthonormal(pose):
    rot = pose[:3, :3]
    return np.allclose(rot.T @ rot, np.eye(3)) and np.isclose(np.linalg.det(rot), 1.)


def test_face_count_example(grasp_data):
    offsets = face_grasp_offsets(0.06, grasp_data)
    assert len(offsets) == 5
    np.testing.assert_allclose(offsets, [-0.02, -0.01, 0., 0.01, 0.02], atol=1e-12)


def test_face_count_for_gripper_wide_face(grasp_data):
    np.testing.assert_allclose(face_grasp_offsets(0.02, grasp_data), [0.])


def test_narrow_face_policy(grasp_data):
    offsets = face_grasp_offsets(0.01, grasp_data)
    np.testing.assert_allclose(offsets, [-0.01, 0., 0.01])

    wider = NarrowFacePolicy(num_positions=5, offset_fraction=0.25)
    np.testing.assert_allclose(face_grasp_offsets(0.01, grasp_data, wider),
                               [-0.01, -0.005, 0., 0.005, 0.01])


def test_axis_frame_lengths(cuboid):
    frame = axis_frame(cuboid, GraspAxis.X)
    assert (frame.length_a, frame.length_b) == (cuboid.width, cuboid.height)
    frame = axis_frame(cuboid, 'y')
    assert (frame.length_a, frame.length_b) == (cuboid.depth, cuboid.height)
    frame = axis_frame(cuboid, 'Z')
    assert (frame.length_a, frame.length_b) == (cuboid.depth, cuboid.width)


@pytest.mark.parametrize("axis, up", [('x', 0), ('y', 1), ('z', 2)])
def test_base_pose_is_aligned_with_axis(rotated_cuboid, axis, up):
    frame = axis_frame(rotated_cuboid, axis)
    assert is_orthonormal(frame.base_pose)
    # gripper y along the swept axis, approach along a_dir, x along b_dir
    cuboid_rot = rotated_cuboid.pose[:3, :3]
    assert abs(frame.base_pose[:3, 1] @ cuboid_rot[:, up]) == pytest.approx(1.)
    np.testing.assert_allclose(frame.base_pose[:3, 2], frame.a_dir, atol=1e-12)
    np.testing.assert_allclose(frame.base_pose[:3, 0], frame.b_dir, atol=1e-12)


def test_num_radial_grasps():
    assert num_radial_grasps(np.radians(16.)) == 6
    assert num_radial_grasps(np.pi / 4) == 2
    assert num_radial_grasps(np.pi) == 1


@pytest.mark.parametrize("extents", [(0.05, 0.06, 0.08), (0.5, 0.01, 0.3), (0.002, 0.002, 0.002)])
def test_corner_count_is_independent_of_size(grasp_data, extents):
    cuboid = Cuboid(np.eye(4), *extents)
    angle_res = grasp_data.angle_resolution_rad
    for axis in GraspAxis:
        corners = sample_corner_grasps(axis_frame(cuboid, axis), angle_res)
        assert len(corners) == 4 * num_radial_grasps(angle_res)


@pytest.mark.parametrize("axis", list(GraspAxis))
def test_corner_grasps_point_at_the_cuboid(rotated_cuboid, grasp_data, axis):
    frame = axis_frame(rotated_cuboid, axis)
    corners = sample_corner_grasps(frame, grasp_data.angle_resolution_rad)
    center = rotated_cuboid.position
    for pose in corners:
        assert is_orthonormal(pose)
        assert pose[:3, 2] @ (center - pose[:3, 3]) > 0
        # stays in the plane through the center perpendicular to the swept axis
        assert abs(pose[:3, 1] @ (pose[:3, 3] - center)) < 1e-12
        assert grasp_intersects_cuboid(pose, rotated_cuboid, grasp_data.finger_to_palm_depth)


def test_face_grasps(cuboid, grasp_data):
    frame = axis_frame(cuboid, 'x')
    faces = sample_face_grasps(frame, grasp_data)
    # 7 along the height (0.08) for both a faces, 5 along the width (0.06) for both b faces
    assert len(faces) == 7 + 5 + 7 + 5
    for pose in faces:
        assert is_orthonormal(pose)
        assert grasp_intersects_cuboid(pose, cuboid, grasp_data.finger_to_palm_depth)

    # first face: palm backed off the -y face, fingers pointing along +y
    first = faces[0]
    np.testing.assert_allclose(first[:3, 2], [0., 1., 0.], atol=1e-12)
    assert first[1, 3] == pytest.approx(-(cuboid.width + CORNER_CLEARANCE) / 2)
    np.testing.assert_allclose([p[2, 3] for p in faces[:7]], np.linspace(-0.03, 0.03, 7), atol=1e-12)


def test_depth_sampling_growth(cuboid, grasp_data):
    frame = axis_frame(cuboid, 'z')
    seeds = sample_face_grasps(frame, grasp_data)
    k = num_depth_grasps(grasp_data)
    assert k == 6

    depth_poses = sample_depth_grasps(seeds, grasp_data)
    assert len(depth_poses) == len(seeds) * (k + 1)
    for original, kept in zip(seeds, depth_poses):
        np.testing.assert_array_equal(original, kept)

    # deepest copy of the first seed backs off by the full finger depth
    deepest = depth_poses[len(seeds) + k - 1]
    np.testing.assert_allclose(deepest[:3, 3],
                               seeds[0][:3, 3] - grasp_data.finger_depth * seeds[0][:3, 2])
    np.testing.assert_allclose(deepest[:3, :3], seeds[0][:3, :3])


def test_angular_sweep_stops_at_first_miss(cuboid, grasp_data):
    seed = sample_face_grasps(axis_frame(cuboid, 'x'), grasp_data)[0]
    angle_res = grasp_data.angle_resolution_rad
    ftp = grasp_data.finger_to_palm_depth
    sweep = AngularSweep(seed, angle_res, cuboid, ftp, max_sweep_iterations(angle_res))
    poses = list(sweep)

    assert not sweep.truncated
    assert 0 < len(poses) < max_sweep_iterations(angle_res)
    assert all(grasp_intersects_cuboid(p, cuboid, ftp) for p in poses)
    # one step further misses
    beyond = AngularSweep(poses[-1], angle_res, cuboid, ftp, 1)
    assert list(beyond) == []


def test_angular_sweep_is_lazy(cuboid, grasp_data):
    seed = sample_face_grasps(axis_frame(cuboid, 'x'), grasp_data)[0]
    sweep = iter(AngularSweep(seed, 0.1, cuboid, grasp_data.finger_to_palm_depth, 100))
    first = next(sweep)
    np.testing.assert_allclose(first[:3, 3], seed[:3, 3])


def test_angular_sweep_cap(grasp_data):
    box = Cuboid(np.eye(4), 0.1, 0.1, 0.1)
    # grasp origin inside the box: every direction leaves it
    center_pose = homogeneous_mat_from_RT(np.eye(3), [0., 0., 0.])
    angle_res = np.pi / 6
    cap = max_sweep_iterations(angle_res)
    assert cap == 7
    sweep = AngularSweep(center_pose, angle_res, box, 0.2, cap)
    assert len(list(sweep)) == cap
    assert sweep.truncated


def test_angle_stage_reports_truncation(capsys):
    box = Cuboid(np.eye(4), 0.1, 0.1, 0.1)
    long_fingers = GraspData(finger_to_palm_depth=0.2, grasp_min_depth=0.01,
                             gripper_width=0.02, angle_resolution=30.)
    center_pose = np.eye(4)
    angle_res = long_fingers.angle_resolution_rad
    poses = sample_angle_grasps([center_pose], box, long_fingers, angle_res)
    assert len(poses) == 1 + 2 * max_sweep_iterations(angle_res)
    assert "exceeded max iterations" in capsys.readouterr().out


def test_bidirectional_doubles(cuboid, grasp_data):
    seeds = sample_face_grasps(axis_frame(cuboid, 'y'), grasp_data)
    both = sample_bidirectional_grasps(seeds)
    assert len(both) == 2 * len(seeds)
    for pose, flipped in zip(seeds, both[len(seeds):]):
        np.testing.assert_allclose(flipped[:3, 3], pose[:3, 3])
        np.testing.assert_allclose(flipped[:3, 2], pose[:3, 2], atol=1e-12)
        np.testing.assert_allclose(flipped[:3, :2], -pose[:3, :2], atol=1e-12)


@pytest.mark.parametrize("axis", ['x', 'y', 'z'])
def test_axis_grasps_compose_stages(rotated_cuboid, grasp_data, axis):
    frame = axis_frame(rotated_cuboid, axis)
    angle_res = grasp_data.angle_resolution_rad
    corners = sample_corner_grasps(frame, angle_res)
    faces = sample_face_grasps(frame, grasp_data)
    depth = sample_depth_grasps(corners + faces, grasp_data)
    k = num_depth_grasps(grasp_data)
    assert len(depth) == (len(corners) + len(faces)) * (k + 1)

    # corner seeds at zero depth are not swept
    swept = sample_angle_grasps(depth[len(corners):], rotated_cuboid, grasp_data, angle_res)

    poses = sample_axis_grasps(rotated_cuboid, axis, grasp_data)
    assert len(poses) == 2 * (len(corners) + len(swept))
    for expected, pose in zip(corners + swept, poses):
        np.testing.assert_allclose(pose, expected)


def test_axis_grasps_are_deterministic(cuboid, grasp_data):
    first = sample_axis_grasps(cuboid, 'x', grasp_data)
    second = sample_axis_grasps(cuboid, 'x', grasp_data)
    assert len(first) == len(second)
    np.testing.assert_array_equal(np.array(first), np.array(second))


def test_axis_grasps_are_proper_poses(rotated_cuboid, grasp_data):
    for pose in sample_axis_grasps(rotated_cuboid, 'z', grasp_data):
        assert is_orthonormal(pose)


def test_invalid_axis_raises(cuboid, grasp_data):
    with pytest.raises(InvalidAxisError):
        sample_axis_grasps(cuboid, 'w', grasp_data)
    with pytest.raises(InvalidAxisError):
        sample_axis_grasps(cuboid, 3, grasp_data)
