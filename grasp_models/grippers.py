import numpy as np
from .grasp_data import GraspData


class OnRobot_RG2:
    """ grasp settings for the OnRobot RG2 parallel gripper """
    MAX_WIDTH = 0.101  # as reported by the plugin
    FINGER_TO_PALM_DEPTH = 0.065  # valid grasp depth when nearly closed, from datasheet
    GRASP_MIN_DEPTH = 0.01
    FINGER_WIDTH = 0.02

    @classmethod
    def get_valid_grasp_depth(cls, grasp_width):
        """ get valid depth of object to avoid collision with the grasper"""
        # from datasheet
        widths = np.linspace(0.01, 0.1, 10)
        depths = np.array([0.065, 0.05, 0.05, 0.049, 0.048,
                          0.045, 0.042, 0.04, 0.039, 0.036])
        return float(np.interp(grasp_width, widths, depths))

    @classmethod
    def grasp_data(cls, grasp_width=None, **kwargs):
        """ GraspData for grasping objects of about grasp_width [m] """
        if grasp_width is None:
            finger_to_palm = cls.FINGER_TO_PALM_DEPTH
        else:
            finger_to_palm = cls.get_valid_grasp_depth(grasp_width)
        settings = dict(
            finger_to_palm_depth=finger_to_palm,
            grasp_min_depth=cls.GRASP_MIN_DEPTH,
            gripper_width=cls.FINGER_WIDTH,
            max_grasp_size=cls.MAX_WIDTH,
            parent_link='OR_RG2',
        )
        settings.update(kwargs)
        return GraspData(**settings)
