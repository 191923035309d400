"""
Linear dimension: distance between two points projected onto a rotated
dimension line.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.dimensions.base import (
    _DEFAULT_STYLE,
    Dimension,
    DimensionType,
    check_offset,
    check_reference_points,
    world_point,
)
from dxf_dimensions.entities.primitives import Line, Polyline2DVertex
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    PointLike,
    angle,
    distance,
    dot,
    is_zero,
    midpoint,
    normalize_angle,
    polar,
)

logger = logging.getLogger(__name__)


def reverse_ends(u: PointLike, v: PointLike, dim_rotation: float, ref_angle: float) -> int:
    """Side (+1/-1) of the dimension line that receives the first arrowhead.

    Args:
        u: first reference point (OCS).
        v: second reference point (OCS).
        dim_rotation: dimension line rotation in radians.
        ref_angle: direction of ``u -> v`` in radians.
    """
    side = 1
    rot = normalize_angle(math.degrees(dim_rotation + ref_angle))
    if 180.0 <= rot < 360.0:
        side = -side
    dx = v[0] - u[0]
    dy = v[1] - u[1]
    if dx * dy < 0:
        side = -side
    return side


@dataclass
class LinearGeometry:
    """OCS layout of a straight dimension line.

    Attributes:
        ref1, ref2: reference points.
        dim_ref1, dim_ref2: dimension line ends facing ``ref1``/``ref2``.
        mid_dim: middle of the dimension line.
        rotation: dimension line direction in radians.
        reversed: +1/-1, side of the trim (see ``reverse_ends``).
        offset: signed distance of the dimension line.
        text_point: computed text anchor.
    """
    ref1: NDArray[np.float64]
    ref2: NDArray[np.float64]
    dim_ref1: NDArray[np.float64]
    dim_ref2: NDArray[np.float64]
    mid_dim: NDArray[np.float64]
    rotation: float
    reversed: int
    offset: float
    text_point: NDArray[np.float64]

    @property
    def definition_point(self) -> NDArray[np.float64]:
        return self.dim_ref2

    @property
    def mid_text_point(self) -> NDArray[np.float64]:
        return self.mid_dim

    @property
    def extension_angle(self) -> float:
        return self.rotation + HALF_PI


class LinearDimension(Dimension):
    """Horizontal, vertical or rotated distance.

    Args:
        first_point: first reference point (world).
        second_point: second reference point (world).
        offset: distance from the reference midpoint to the dimension line,
            measured perpendicular to the dimension line. Non-zero.
        rotation: dimension line rotation in degrees (OCS).
        style: dimension style.
        normal: plane normal.

    Raises:
        DimensionError: if the reference points coincide or the offset is zero.

    Example:
        >>> dim = LinearDimension((0, 0), (10, 0), offset=2)
        >>> dim.measurement
        10.0
    """

    dimension_type = DimensionType.LINEAR

    def __init__(
        self,
        first_point: PointLike,
        second_point: PointLike,
        offset: float,
        rotation: float = 0.0,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        self._first_point = world_point(first_point)
        self._second_point = world_point(second_point)
        check_reference_points(self._first_point, self._second_point)
        self._offset = check_offset(offset)
        self._rotation = normalize_angle(rotation)
        self.update()

    @classmethod
    def from_line(cls, line: Line, offset: float, rotation: float = 0.0,
                  style: Any = _DEFAULT_STYLE) -> 'LinearDimension':
        """Dimension of a ``Line``, in the plane of the line normal."""
        return cls(line.start, line.end, offset, rotation, style, line.normal)

    @classmethod
    def from_vertices(
        cls,
        start: Polyline2DVertex,
        end: Polyline2DVertex,
        offset: float,
        rotation: float = 0.0,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
        elevation: float = 0.0,
    ) -> 'LinearDimension':
        """Dimension of a polyline segment given by two OCS vertices."""
        ocs = ObjectCoordinateSystem.from_normal(normal)
        return cls(ocs.to_world(start.position, elevation), ocs.to_world(end.position, elevation),
                   offset, rotation, style, normal)

    # ------------------------------------------------------------------
    # Defining values
    # ------------------------------------------------------------------

    @property
    def first_reference_point(self) -> NDArray[np.float64]:
        return self._first_point.copy()

    @first_reference_point.setter
    def first_reference_point(self, value: PointLike) -> None:
        value = world_point(value)
        check_reference_points(value, self._second_point)
        self._first_point = value
        self.update()

    @property
    def second_reference_point(self) -> NDArray[np.float64]:
        return self._second_point.copy()

    @second_reference_point.setter
    def second_reference_point(self, value: PointLike) -> None:
        value = world_point(value)
        check_reference_points(self._first_point, value)
        self._second_point = value
        self.update()

    @property
    def offset(self) -> float:
        return self._offset

    @offset.setter
    def offset(self, value: float) -> None:
        self._offset = check_offset(value)
        self.update()

    @property
    def rotation(self) -> float:
        """Dimension line rotation in degrees, in [0, 360)."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = normalize_angle(value)
        self.update()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def measurement(self) -> float:
        ref1 = self.to_ocs(self._first_point)
        ref2 = self.to_ocs(self._second_point)
        return abs(distance(ref1, ref2) * math.cos(math.radians(self._rotation) - angle(ref1, ref2)))

    def _anchor_point(self) -> NDArray[np.float64]:
        return self._first_point

    def compute_geometry(self) -> LinearGeometry:
        ref1 = self.to_ocs(self._first_point)
        ref2 = self.to_ocs(self._second_point)
        measure = self.measurement
        rotation = math.radians(self._rotation)
        reversed_ = reverse_ends(ref1, ref2, rotation, angle(ref1, ref2))

        mid_dim = polar(midpoint(ref1, ref2), self._offset, rotation + HALF_PI)
        dim_ref1 = polar(mid_dim, -reversed_ * measure * 0.5, rotation)
        dim_ref2 = polar(mid_dim, reversed_ * measure * 0.5, rotation)
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        text_point = polar(mid_dim, gap, rotation + HALF_PI)
        return LinearGeometry(ref1, ref2, dim_ref1, dim_ref2, mid_dim, rotation,
                              reversed_, self._offset, text_point)

    def _move_dimension_line(self, point: NDArray[np.float64]) -> None:
        ref1 = self.to_ocs(self._first_point)
        ref2 = self.to_ocs(self._second_point)
        rotation = math.radians(self._rotation)
        normal_dir = (-math.sin(rotation), math.cos(rotation))
        offset = dot(point - midpoint(ref1, ref2), normal_dir)
        if is_zero(offset):
            logger.debug("Dimension line position on the reference midpoint, offset kept")
            return
        self._offset = offset
