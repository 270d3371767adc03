from dataclasses import dataclass, field
import numpy as np
from grasplib.geometry import is_rigid_transform, transform_points


@dataclass(frozen=True)
class Cuboid:
    """ oriented box approximating an object
    pose: [4x4] matrix, center of the box in the reference frame
    depth, width, height: [m] extents along the local x, y and z axis """
    pose: np.ndarray
    depth: float
    width: float
    height: float

    def __post_init__(self):
        pose = np.array(self.pose, dtype=float)
        if not is_rigid_transform(pose):
            raise ValueError("Cuboid pose must be a proper rigid transform")
        for name in ('depth', 'width', 'height'):
            value = float(getattr(self, name))
            if not value > 0:
                raise ValueError(f"Cuboid {name} must be positive, got {value}")
            object.__setattr__(self, name, value)
        pose.setflags(write=False)
        object.__setattr__(self, 'pose', pose)

    @property
    def extents(self):
        return np.array([self.depth, self.width, self.height])

    @property
    def position(self):
        return self.pose[:3, 3]

    @property
    def bounding_box(self):
        """ box corners in the reference frame: [8,3]"""
        half = self.extents / 2.0
        signs = np.array([[x, y, z] for z in (-1, 1)
                         for y in (-1, 1) for x in (-1, 1)])
        return transform_points(self.pose, signs * half)


@dataclass(frozen=True)
class Mesh:
    vertices: np.ndarray            # [n,3]
    triangles: np.ndarray = field(  # [m,3] vertex indices, unused by the bbox fit
        default_factory=lambda: np.zeros((0, 3), dtype=int))

    def __post_init__(self):
        vertices = np.asarray(self.vertices, dtype=float).reshape((-1, 3))
        triangles = np.asarray(self.triangles, dtype=int).reshape((-1, 3))
        object.__setattr__(self, 'vertices', vertices)
        object.__setattr__(self, 'triangles', triangles)
