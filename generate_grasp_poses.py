import json
import time
import numpy as np
import begin
from grasp_models.cuboid import Cuboid
from grasplib.bounding_box import get_bounding_box_from_mesh
from grasplib.generator import GraspGenerator
from grasplib.settings import NumpyArrayEncoder, load_generator_settings, load_grasp_data
from grasplib.utils import HiddenPrints, load_mesh, mesh_from_o3d, time_stamp


def candidates_to_json(cuboid, candidates):
    return {
        "cuboid": {"pose": cuboid.pose, "depth": cuboid.depth,
                   "width": cuboid.width, "height": cuboid.height},
        "grasps": [{"id": c.id, "pose": c.pose, "frame_id": c.frame_id,
                    "grasp_quality": c.grasp_quality} for c in candidates],
    }


def main(cuboid=None, mesh_path=None, settings_path='settings.json', output=None, filter_spacing=False):
    t = time.perf_counter()
    settings = load_generator_settings(settings_path)
    grasp_data = load_grasp_data(settings_path)

    if filter_spacing:
        generator = GraspGenerator.with_spacing_filter(settings)
    else:
        generator = GraspGenerator(settings)

    if mesh_path is not None:
        mesh = mesh_from_o3d(load_mesh(mesh_path, debug=settings.verbose))
        cuboid = get_bounding_box_from_mesh(mesh, verbose=settings.verbose)

    candidates = generator.generate_grasps(cuboid, grasp_data)

    print(
        f"[{time_stamp()}] Found {len(candidates)} grasp poses ({time.perf_counter()-t:.2f} sec)")
    if candidates:
        best = max(candidates, key=lambda c: c.grasp_quality)
        print(f"[{time_stamp()}] Best: {best.id} with quality {best.grasp_quality:.3f}")

    if output is not None:
        with open(output, 'w') as F:
            json.dump(candidates_to_json(cuboid, candidates), F, indent="\t", cls=NumpyArrayEncoder)
        print(f"[{time_stamp()}] Saved grasp poses to {output}")
    return candidates


@begin.start(auto_convert=True)
def run(depth=0.0, width=0.0, height=0.0, mesh='', settings='settings.json',
        output='', filter_spacing=False, quiet=False):
    """ generate grasp candidates for a cuboid (depth x width x height at the origin) or a mesh file """
    cuboid = None
    if not mesh:
        cuboid = Cuboid(np.eye(4), depth, width, height)

    kwargs = dict(cuboid=cuboid, mesh_path=mesh or None, settings_path=settings,
                  output=output or None, filter_spacing=filter_spacing)
    if quiet:
        with HiddenPrints():
            main(**kwargs)
    else:
        main(**kwargs)
