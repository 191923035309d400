"""
Aligned dimension: true distance between two points, dimension line
parallel to the measured segment.
"""

import logging
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
from dxf_dimensions.dimensions.linear import LinearGeometry
from dxf_dimensions.entities.primitives import Line, Polyline2DVertex
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    PointLike,
    angle,
    cross,
    distance,
    is_zero,
    length,
    midpoint,
    polar,
)

logger = logging.getLogger(__name__)


class AlignedDimension(Dimension):
    """Distance measured along the segment between two points.

    Args:
        first_point: first reference point (world).
        second_point: second reference point (world).
        offset: distance of the dimension line from the segment; positive
            values lie to the left of ``first_point -> second_point``.
        style: dimension style.
        normal: plane normal.

    Raises:
        DimensionError: if the reference points coincide or the offset is zero.
    """

    dimension_type = DimensionType.ALIGNED

    def __init__(
        self,
        first_point: PointLike,
        second_point: PointLike,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        self._first_point = world_point(first_point)
        self._second_point = world_point(second_point)
        check_reference_points(self._first_point, self._second_point)
        self._offset = check_offset(offset)
        self.update()

    @classmethod
    def from_line(cls, line: Line, offset: float, style: Any = _DEFAULT_STYLE) -> 'AlignedDimension':
        return cls(line.start, line.end, offset, style, line.normal)

    @classmethod
    def from_vertices(
        cls,
        start: Polyline2DVertex,
        end: Polyline2DVertex,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
        elevation: float = 0.0,
    ) -> 'AlignedDimension':
        ocs = ObjectCoordinateSystem.from_normal(normal)
        return cls(ocs.to_world(start.position, elevation), ocs.to_world(end.position, elevation),
                   offset, style, normal)

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
    def measurement(self) -> float:
        return distance(self.to_ocs(self._first_point), self.to_ocs(self._second_point))

    def _anchor_point(self) -> NDArray[np.float64]:
        return self._first_point

    def compute_geometry(self) -> LinearGeometry:
        ref1 = self.to_ocs(self._first_point)
        ref2 = self.to_ocs(self._second_point)
        ref_angle = angle(ref1, ref2)
        ext_angle = ref_angle + HALF_PI

        dim_ref1 = polar(ref1, self._offset, ext_angle)
        dim_ref2 = polar(ref2, self._offset, ext_angle)
        mid_dim = midpoint(dim_ref1, dim_ref2)
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        text_point = polar(mid_dim, gap, ext_angle)
        # dim_ref1 -> dim_ref2 always runs along ref_angle, so the trim side is fixed
        return LinearGeometry(ref1, ref2, dim_ref1, dim_ref2, mid_dim, ref_angle,
                              1, self._offset, text_point)

    def _move_dimension_line(self, point: NDArray[np.float64]) -> None:
        ref1 = self.to_ocs(self._first_point)
        ref2 = self.to_ocs(self._second_point)
        ref_dir = ref2 - ref1
        if is_zero(length(ref_dir)):
            logger.debug("Coincident reference points, dimension line not moved")
            return
        # signed distance of the point from the reference line
        offset = cross(ref_dir, point - ref1) / length(ref_dir)
        if is_zero(offset):
            logger.debug("Dimension line position on the reference line, offset kept")
            return
        self._offset = offset
