"""
Generates geometric grasps for cuboids and blocks, not using physics or contact wrenches.
"""
from typing import Callable, List, Optional
from tqdm import tqdm
from grasp_models.candidate import GraspCandidate
from grasp_models.cuboid import Cuboid
from grasp_models.grasp_data import GraspAxis, GraspData
from grasplib.bounding_box import get_bounding_box_from_mesh
from grasplib.candidates import GraspCandidateBuilder
from grasplib.cuboid_sampler import NarrowFacePolicy, sample_axis_grasps
from grasplib.errors import InvalidAxisError
from grasplib.settings import GeneratorSettings
from grasplib.spacing import SpacingFilter
from grasplib.utils import log, warn

PostFilter = Callable[[List[GraspCandidate]], List[GraspCandidate]]


class GraspGenerator:
    def __init__(self, settings: GeneratorSettings = None,
                 post_filter: Optional[PostFilter] = None,
                 narrow_face_policy=NarrowFacePolicy(),
                 builder: GraspCandidateBuilder = None):
        self.settings = settings if settings is not None else GeneratorSettings()
        self.post_filter = post_filter
        self.narrow_face_policy = narrow_face_policy
        self.builder = builder if builder is not None else GraspCandidateBuilder()

    @classmethod
    def with_spacing_filter(cls, settings: GeneratorSettings = None, **kwargs):
        """ generator that thins out candidates by m_between_grasps / m_between_depth_grasps """
        settings = settings if settings is not None else GeneratorSettings()
        spacing = SpacingFilter(settings.m_between_grasps, settings.m_between_depth_grasps)
        return cls(settings, post_filter=spacing, **kwargs)

    @property
    def verbose(self):
        return self.settings.verbose

    def generate_cuboid_axis_grasps(self, cuboid: Cuboid, axis,
                                    grasp_data: GraspData) -> List[GraspCandidate]:
        """ candidates with the gripper swept around one axis of the cuboid """
        try:
            grasp_poses = sample_axis_grasps(cuboid, axis, grasp_data, self.verbose,
                                             self.narrow_face_policy)
        except InvalidAxisError as e:
            warn(e, name="cuboid_axis_grasps")
            return []

        candidates = [self.builder.build(pose, grasp_data, cuboid.pose)
                      for pose in tqdm(grasp_poses, disable=not self.verbose,
                                       desc="Scoring grasps")]
        if self.verbose:
            log(f"created {len(candidates)} grasp poses", name="cuboid_axis_grasps")
        return candidates

    def generate_grasps(self, cuboid: Cuboid, grasp_data: GraspData,
                        max_grasp_size=None, axes=None) -> List[GraspCandidate]:
        """ candidates over all axes that aren't too wide to grip.
        axes overrides the axis selection (e.g. ['x', 'z']). """
        if max_grasp_size is None:
            max_grasp_size = grasp_data.max_grasp_size

        if axes is None:
            axes = []
            # size of the cuboid across the gripper fingers for each axis
            if cuboid.depth <= max_grasp_size:
                axes.append(GraspAxis.X)
            if cuboid.width <= max_grasp_size:
                axes.append(GraspAxis.Y)
            if cuboid.height <= max_grasp_size:
                axes.append(GraspAxis.Z)

        possible_grasps = []
        for axis in axes:
            if self.verbose:
                log(f"Generating grasps around {axis} of cuboid", name="grasp_generator")
            possible_grasps.extend(
                self.generate_cuboid_axis_grasps(cuboid, axis, grasp_data))

        if self.post_filter is not None:
            n_before = len(possible_grasps)
            possible_grasps = self.post_filter(possible_grasps)
            if self.verbose:
                log(f"Post filter kept {len(possible_grasps)} of {n_before} grasps",
                    name="grasp_generator")

        if not possible_grasps:
            warn("Generated 0 grasps", name="grasp_generator")
        else:
            log(f"Generated {len(possible_grasps)} grasps", name="grasp_generator")

        if self.settings.show_prefiltered_grasps:
            from grasplib.visualization import show_grasps
            show_grasps(cuboid, possible_grasps, grasp_data,
                        speed=self.settings.show_prefiltered_grasps_speed,
                        show_arrows=self.settings.show_grasp_arrows)

        return possible_grasps

    def generate_grasps_from_mesh(self, mesh, grasp_data: GraspData,
                                  max_grasp_size=None) -> List[GraspCandidate]:
        """ fit a bounding box to the mesh and generate grasps for it.
        raises DegenerateMeshError if no box can be fit """
        cuboid = get_bounding_box_from_mesh(mesh, verbose=self.verbose)
        return self.generate_grasps(cuboid, grasp_data, max_grasp_size)
