import json
import numpy as np
import begin
from grasp_models.candidate import GraspCandidate, GripperTranslation
from grasp_models.cuboid import Cuboid
from grasplib.settings import load_grasp_data


def read_candidates(path, grasp_data):
    with open(path) as F:
        stored = json.load(F)

    c = stored["cuboid"]
    cuboid = Cuboid(np.array(c["pose"]), c["depth"], c["width"], c["height"])

    def translation(sign):
        return GripperTranslation(np.array([0., 0., sign]), grasp_data.parent_link,
                                  grasp_data.finger_to_palm_depth,
                                  grasp_data.finger_to_palm_depth)

    candidates = [GraspCandidate(id=g["id"], pose=np.array(g["pose"]), frame_id=g["frame_id"],
                                 grasp_quality=g["grasp_quality"],
                                 pre_grasp_approach=translation(1.),
                                 post_grasp_retreat=translation(-1.))
                  for g in stored["grasps"]]
    return cuboid, candidates


@begin.start(auto_convert=True)
def main(grasps_file, settings='settings.json', speed=0.05, best=0):
    """ animate stored grasp candidates, best > 0 only shows the n highest scored ones """
    from grasplib.visualization import show_grasps

    grasp_data = load_grasp_data(settings)
    cuboid, candidates = read_candidates(grasps_file, grasp_data)

    print("\nTotal grasp poses: ", len(candidates))
    if best > 0:
        candidates = sorted(candidates, key=lambda c: -c.grasp_quality)[:best]

    show_grasps(cuboid, candidates, grasp_data, speed=speed, show_arrows=True)
