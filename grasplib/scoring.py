from dataclasses import dataclass, fields
import numpy as np
from scipy.spatial.transform import Rotation as R
from grasplib.geometry import angle_between_vectors


def _ideal_orientation():
    rot = R.from_euler('YZ', [np.pi / 2.0, np.pi / 2.0]).as_matrix()
    rot.setflags(write=False)
    return rot


# preferred gripper orientation in the reference frame: approaching along +x, fingers closing along z
IDEAL_GRASP_ORIENTATION = _ideal_orientation()


@dataclass(frozen=True)
class GraspScore:
    approach: float  # z axis alignment with the ideal approach
    roll: float      # y axis alignment ("is the camera pointed up?")
    depth: float     # palm proximity to the object

    def combined(self, weights: 'ScoreWeights') -> float:
        total_weight = 0.
        score_sum = 0.
        for f in fields(self):
            w = getattr(weights, f.name)
            score_sum += w * getattr(self, f.name)
            total_weight += w
        if total_weight <= 0:
            return 0.
        return float(np.clip(score_sum / total_weight, 0., 1.))


@dataclass(frozen=True)
class ScoreWeights:
    approach: float = 1.
    roll: float = 1.
    depth: float = 1.


def score_components(pose, grasp_data, object_pose,
                     ideal_orientation=IDEAL_GRASP_ORIENTATION) -> GraspScore:
    # 0 = 180 degrees off, 1 = aligned
    approach_angle = angle_between_vectors(pose[:3, 2], ideal_orientation[:, 2])
    roll_angle = angle_between_vectors(pose[:3, 1], ideal_orientation[:, 1])

    # 0 = at finger length, 1 = in palm
    # NOTE: measured from the object origin, not from its surface
    finger_length = grasp_data.finger_depth
    distance = np.linalg.norm(pose[:3, 3] - object_pose[:3, 3])
    if finger_length <= 0:
        depth = 0.
    else:
        depth = max(0., (finger_length - distance) / finger_length)

    return GraspScore(approach=(np.pi - approach_angle) / np.pi,
                      roll=(np.pi - roll_angle) / np.pi,
                      depth=float(depth))


def score_grasp(pose, grasp_data, object_pose, weights=ScoreWeights(),
                ideal_orientation=IDEAL_GRASP_ORIENTATION) -> float:
    """ geometric quality of a grasp pose in [0, 1], higher is better """
    return score_components(pose, grasp_data, object_pose,
                            ideal_orientation).combined(weights)
