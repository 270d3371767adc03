from .cuboid import Cuboid, Mesh
from .grasp_data import GraspAxis, GraspData
from .candidate import GraspCandidate, GripperTranslation
from .grippers import OnRobot_RG2
