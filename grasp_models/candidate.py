from dataclasses import dataclass
from typing import Any
import numpy as np


@dataclass(frozen=True)
class GripperTranslation:
    direction: np.ndarray   # (3,) unit vector in frame_id
    frame_id: str
    desired_distance: float  # [m]
    min_distance: float      # [m]


@dataclass(frozen=True)
class GraspCandidate:
    id: str
    pose: np.ndarray        # [4x4] end effector pose in frame_id
    frame_id: str
    grasp_quality: float    # [0, 1], higher is better
    pre_grasp_approach: GripperTranslation
    post_grasp_retreat: GripperTranslation
    pre_grasp_posture: Any = None
    grasp_posture: Any = None

    def __post_init__(self):
        pose = np.array(self.pose, dtype=float)
        pose.setflags(write=False)
        object.__setattr__(self, 'pose', pose)

    @property
    def position(self):
        return self.pose[:3, 3]
