from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any
import math
import numpy as np
from grasplib.errors import InvalidAxisError


class GraspAxis(Enum):
    """ local cuboid axis the gripper is swept around """
    X = 'x'
    Y = 'y'
    Z = 'z'

    @classmethod
    def parse(cls, axis):
        if isinstance(axis, cls):
            return axis
        if isinstance(axis, str):
            try:
                return cls(axis.strip().lower())
            except ValueError:
                pass
        raise InvalidAxisError(axis)


def _identity():
    eye = np.eye(4)
    eye.setflags(write=False)
    return eye


@dataclass(frozen=True)
class GraspData:
    """ gripper geometry and grasp settings, immutable during generation
    distances in [m], angle_resolution in [deg] """
    finger_to_palm_depth: float
    grasp_min_depth: float
    gripper_width: float
    angle_resolution: float = 16.0
    grasp_resolution: float = 0.01
    grasp_depth_resolution: float = 0.005
    max_grasp_size: float = 0.1
    base_link: str = 'world'
    parent_link: str = 'gripper'
    pre_grasp_posture: Any = None
    grasp_posture: Any = None
    grasp_pose_to_eef_pose: np.ndarray = field(default_factory=_identity)

    def __post_init__(self):
        for name in ('finger_to_palm_depth', 'angle_resolution',
                     'grasp_resolution', 'grasp_depth_resolution'):
            if not getattr(self, name) > 0:
                raise ValueError(
                    f"GraspData.{name} must be positive, got {getattr(self, name)}")
        if self.gripper_width < 0:
            raise ValueError(
                f"GraspData.gripper_width must not be negative, got {self.gripper_width}")
        if not 0 <= self.grasp_min_depth <= self.finger_to_palm_depth:
            raise ValueError(
                f"GraspData.grasp_min_depth must lie within [0, finger_to_palm_depth], "
                f"got {self.grasp_min_depth} with finger_to_palm_depth {self.finger_to_palm_depth}")
        eef = np.array(self.grasp_pose_to_eef_pose, dtype=float)
        eef.setflags(write=False)
        object.__setattr__(self, 'grasp_pose_to_eef_pose', eef)

    @property
    def finger_depth(self):
        """ usable depth of the fingers beyond the minimum grasp depth """
        return self.finger_to_palm_depth - self.grasp_min_depth

    @property
    def angle_resolution_rad(self):
        return math.radians(self.angle_resolution)

    @classmethod
    def from_dict(cls, data: dict):
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if 'grasp_pose_to_eef_pose' in kwargs:
            kwargs['grasp_pose_to_eef_pose'] = np.array(
                kwargs['grasp_pose_to_eef_pose'], dtype=float)
        return cls(**kwargs)
