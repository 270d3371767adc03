import numpy as np

MIN_GRASP_DISTANCE = 0.001


class SpacingFilter:
    """ optional post-generation filter that thins out grasps closer than the
    configured spacing. Two grasps are too close if their orientations differ
    by less than rot_thr [rad], their lateral distance is below m_between_grasps
    and their distance along the approach axis is below m_between_depth_grasps.
    The earlier grasp (in generation order) is kept. """

    def __init__(self, m_between_grasps=MIN_GRASP_DISTANCE,
                 m_between_depth_grasps=MIN_GRASP_DISTANCE, rot_thr=1e-3):
        self.m_between_grasps = m_between_grasps
        self.m_between_depth_grasps = m_between_depth_grasps
        self.rot_thr = rot_thr

    def _conflicts(self, candidate, kept_rots, kept_pos):
        if len(kept_pos) == 0:
            return False
        rot = candidate.pose[:3, :3]
        # angle of R_kept^T R from its trace
        traces = np.einsum('nij,ij->n', kept_rots, rot)
        rot_dists = np.arccos(np.clip((traces - 1.) / 2., -1., 1.))

        offsets = candidate.position - kept_pos
        approach = rot[:, 2]
        axial = offsets @ approach
        lateral = np.linalg.norm(offsets - axial[:, np.newaxis] * approach, axis=1)

        too_close = np.logical_and.reduce([
            rot_dists < self.rot_thr,
            lateral < self.m_between_grasps,
            np.abs(axial) < self.m_between_depth_grasps])
        return bool(np.any(too_close))

    def __call__(self, candidates):
        keep = []
        kept_rots = np.zeros((0, 3, 3))
        kept_pos = np.zeros((0, 3))
        for candidate in candidates:
            if self._conflicts(candidate, kept_rots, kept_pos):
                continue
            keep.append(candidate)
            kept_rots = np.concatenate([kept_rots, candidate.pose[np.newaxis, :3, :3]])
            kept_pos = np.concatenate([kept_pos, candidate.position[np.newaxis]])
        return keep
