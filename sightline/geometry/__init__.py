"""Pose geometry, field of view and wall intersection."""

from sightline.geometry.basis import COLMAP_TO_SCENE, SceneBasis
from sightline.geometry.fov import FieldOfViewBoundaries, field_of_view_boundaries
from sightline.geometry.pose import CameraPose, camera_pose, scene_forward, scene_position
from sightline.geometry.rotation import quaternion_to_rotation_matrix
from sightline.geometry.walls import (
    IntersectionQueryResult,
    WallSegment,
    WallSet,
    default_walls,
    intersect_field_of_view,
    nearest_intersection,
)

__all__ = [
    "COLMAP_TO_SCENE",
    "SceneBasis",
    "FieldOfViewBoundaries",
    "field_of_view_boundaries",
    "CameraPose",
    "camera_pose",
    "scene_forward",
    "scene_position",
    "quaternion_to_rotation_matrix",
    "IntersectionQueryResult",
    "WallSegment",
    "WallSet",
    "default_walls",
    "intersect_field_of_view",
    "nearest_intersection",
]
