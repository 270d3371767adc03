import itertools
import numpy as np
from grasp_models.candidate import GraspCandidate, GripperTranslation
from grasplib.scoring import ScoreWeights, score_grasp, IDEAL_GRASP_ORIENTATION


class GraspCandidateBuilder:
    """ wraps sampled grasp poses into GraspCandidates with score, approach/retreat and postures
    ids are unique per builder: Grasp0, Grasp1, ... """

    def __init__(self, start_id=0, weights=ScoreWeights(),
                 ideal_orientation=IDEAL_GRASP_ORIENTATION):
        self._ids = itertools.count(start_id)
        self.weights = weights
        self.ideal_orientation = ideal_orientation

    def build(self, grasp_pose, grasp_data, object_pose) -> GraspCandidate:
        # approach and retreat along the z axis of the gripper parent link
        pre_grasp_approach = GripperTranslation(
            direction=np.array([0., 0., 1.]),
            frame_id=grasp_data.parent_link,
            desired_distance=grasp_data.finger_to_palm_depth,
            min_distance=grasp_data.finger_to_palm_depth)
        post_grasp_retreat = GripperTranslation(
            direction=np.array([0., 0., -1.]),
            frame_id=grasp_data.parent_link,
            desired_distance=grasp_data.finger_to_palm_depth,
            min_distance=grasp_data.finger_to_palm_depth)

        quality = score_grasp(grasp_pose, grasp_data, object_pose,
                              self.weights, self.ideal_orientation)

        return GraspCandidate(
            id=f"Grasp{next(self._ids)}",
            pose=grasp_pose @ grasp_data.grasp_pose_to_eef_pose,
            frame_id=grasp_data.base_link,
            grasp_quality=quality,
            pre_grasp_approach=pre_grasp_approach,
            post_grasp_retreat=post_grasp_retreat,
            pre_grasp_posture=grasp_data.pre_grasp_posture,
            grasp_posture=grasp_data.grasp_posture)


def get_pre_grasp_direction(candidate: GraspCandidate, ee_parent_link) -> np.ndarray:
    """ offset from grasp to pre-grasp position, in the frame of the grasp pose parent """
    approach = candidate.pre_grasp_approach
    direction = -1 * np.asarray(approach.direction) * approach.desired_distance

    # approach given in the end effector frame has to be rotated with the grasp
    if approach.frame_id == ee_parent_link:
        return candidate.pose[:3, :3] @ direction
    return direction


def get_pre_grasp_pose(candidate: GraspCandidate, ee_parent_link) -> np.ndarray:
    """ pose [4x4] from which the gripper moves in to the grasp, same frame as the candidate """
    pre_grasp_pose = candidate.pose.copy()
    pre_grasp_pose[:3, 3] += get_pre_grasp_direction(candidate, ee_parent_link)
    return pre_grasp_pose
