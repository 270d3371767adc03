import time
import numpy as np
import open3d as o3d
from grasp_models.candidate import GraspCandidate


def get_gripper_vis(grasp_data, candidate: GraspCandidate, thickness=0.005):
    """ simple finger/palm proxy of the gripper at the candidate pose """
    grasp_width = grasp_data.max_grasp_size
    gripper_height = grasp_data.finger_to_palm_depth
    f_h = thickness      # finger height
    f_d = thickness      # finger thickness
    y_pos_finger = o3d.geometry.TriangleMesh.create_box(f_h, f_d, gripper_height)
    y_neg_finger = o3d.geometry.TriangleMesh.create_box(f_h, f_d, gripper_height)
    palm = o3d.geometry.TriangleMesh.create_box(f_h, grasp_width + 2*f_d, f_d)
    stem = o3d.geometry.TriangleMesh.create_box(f_h, f_h, 0.05)

    # palm at the grasp origin, fingers along +z towards the object
    y_pos_finger.translate([-f_h/2, grasp_width/2, 0.])
    y_neg_finger.translate([-f_h/2, -grasp_width/2 - f_d, 0.])
    palm.translate([-f_h/2, -grasp_width/2. - f_d, -f_d])
    stem.translate([-f_h/2, -f_h/2, -0.05 - f_d])

    gripper_vis = y_neg_finger + y_pos_finger + palm + stem
    gripper_vis.paint_uniform_color(
        [1. - candidate.grasp_quality, candidate.grasp_quality, 0.])
    gripper_vis.compute_vertex_normals()
    gripper_vis.transform(candidate.pose)
    return gripper_vis


def get_arrow_vis(candidate: GraspCandidate, length=0.02):
    arrow = o3d.geometry.TriangleMesh.create_arrow(
        cylinder_radius=length/20, cone_radius=length/10,
        cylinder_height=length*0.8, cone_height=length*0.2)
    arrow.paint_uniform_color([0., 0., 1.])
    arrow.compute_vertex_normals()
    arrow.transform(candidate.pose)  # arrow points along the approach (z)
    return arrow


def get_cuboid_vis(cuboid):
    box = o3d.geometry.TriangleMesh.create_box(cuboid.depth, cuboid.width, cuboid.height)
    box.translate(-cuboid.extents / 2.0)
    box.transform(np.asarray(cuboid.pose))
    return o3d.geometry.LineSet.create_from_triangle_mesh(box)


def show_grasps(cuboid, candidates, grasp_data, speed=0.01, show_arrows=False):
    """ animate the candidates one by one around the cuboid, speed [s] per grasp """
    vis = o3d.visualization.Visualizer()
    vis.create_window(window_name=f"{len(candidates)} grasp candidates")
    vis.add_geometry(get_cuboid_vis(cuboid))
    vis.add_geometry(o3d.geometry.TriangleMesh.create_coordinate_frame(size=0.1))

    gripper_vis = None
    for candidate in candidates:
        if gripper_vis is not None:
            vis.remove_geometry(gripper_vis, reset_bounding_box=False)
        gripper_vis = get_gripper_vis(grasp_data, candidate, thickness=0.001)
        vis.add_geometry(gripper_vis, reset_bounding_box=False)
        if show_arrows:
            vis.add_geometry(get_arrow_vis(candidate), reset_bounding_box=False)
        if not vis.poll_events():
            break
        vis.update_renderer()
        time.sleep(speed)

    vis.destroy_window()
