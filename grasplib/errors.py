class GraspGenerationError(Exception):
    """ base class for failures of the grasp generator """


class InvalidAxisError(GraspGenerationError, ValueError):
    """ axis selector is not one of X, Y or Z """

    def __init__(self, axis):
        self.axis = axis
        super().__init__(f"axis not defined properly: {axis!r}")


class DegenerateMeshError(GraspGenerationError, ValueError):
    """ mesh cannot be approximated by a bounding box (e.g. no vertices) """
