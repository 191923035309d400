"""Geometry helpers: planar vectors and object coordinate systems."""

from dxf_dimensions.geometry.ocs import (
    ObjectCoordinateSystem,
    arbitrary_axis,
    ocs_to_world,
    transform_points,
    world_to_ocs,
)
from dxf_dimensions.geometry.vectors import (
    angle,
    angle_between,
    are_parallel,
    arc_from_bulge,
    find_intersection,
    is_zero,
    normalize_angle,
    polar,
)

__all__ = [
    "ObjectCoordinateSystem",
    "arbitrary_axis",
    "ocs_to_world",
    "transform_points",
    "world_to_ocs",
    "angle",
    "angle_between",
    "are_parallel",
    "arc_from_bulge",
    "find_intersection",
    "is_zero",
    "normalize_angle",
    "polar",
]
