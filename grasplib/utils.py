import os
import json
import sys
from datetime import datetime
import numpy as np
from grasp_models.cuboid import Mesh


class HiddenPrints:
    def __enter__(self):
        self._original_stdout = sys.stdout
        sys.stdout = open(os.devnull, 'w')

    def __exit__(self, exc_type, exc_val, exc_tb):
        sys.stdout.close()
        sys.stdout = self._original_stdout


def time_stamp():
    return datetime.now().strftime("%H:%M:%S:%f")


def log(msg, name="grasps"):
    print(f"[{time_stamp()}] [{name}] {msg}")


def warn(msg, name="grasps"):
    print(f"[{time_stamp()}] [{name}] WARN: {msg}")


def load_mesh(meshpath, debug=False):
    import open3d as o3d

    mesh = o3d.io.read_triangle_mesh(meshpath)
    if not mesh.has_triangles() and not mesh.has_vertices():
        warn(f"Read an empty mesh from {meshpath}", name="bbox")

    if debug:
        print(f"  vertices:    {len(mesh.vertices)}")
        print(f"  triangles:   {len(mesh.triangles)}")
        print(f"  watertight:  {mesh.is_watertight()}")

    try:
        with open(os.path.join(os.path.dirname(meshpath), "metadata.json")) as F:
            meta = json.load(F)

        if 'scale' in meta.keys():
            mesh.scale(scale=meta['scale'], center=[0., 0., 0.])

    except FileNotFoundError:
        if debug:
            print(f"[{time_stamp()}] Did not find metadata for {meshpath}")

    return mesh


def mesh_from_o3d(o3d_mesh):
    """ convert an open3d TriangleMesh into the plain Mesh used by the bbox fit """
    return Mesh(vertices=np.asarray(o3d_mesh.vertices, dtype=float),
                triangles=np.asarray(o3d_mesh.triangles, dtype=int))
