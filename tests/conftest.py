import numpy as np
import pytest
from scipy.spatial.transform import Rotation as R
from grasp_models.cuboid import Cuboid
from grasp_models.grasp_data import GraspData
from grasplib.geometry import homogeneous_mat_from_RT


@pytest.fixture
def grasp_data():
    return GraspData(finger_to_palm_depth=0.065,
                     grasp_min_depth=0.01,
                     gripper_width=0.02,
                     angle_resolution=16.0,
                     grasp_resolution=0.01,
                     grasp_depth_resolution=0.01,
                     max_grasp_size=0.101,
                     base_link='world',
                     parent_link='gripper_link')


@pytest.fixture
def cuboid():
    return Cuboid(np.eye(4), 0.05, 0.06, 0.08)


@pytest.fixture
def rotated_cuboid():
    pose = homogeneous_mat_from_RT(R.from_euler('xyz', [0.3, -0.2, 1.1]), [0.4, -0.1, 0.25])
    return Cuboid(pose, 0.05, 0.06, 0.08)
