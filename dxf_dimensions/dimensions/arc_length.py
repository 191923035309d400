"""
Arc length dimension.
"""

import logging
import math
from typing import Any

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.dimensions.angular import ArcGeometry, arc_sector_geometry, point_in_sector
from dxf_dimensions.dimensions.base import (
    _DEFAULT_STYLE,
    Dimension,
    DimensionType,
    check_offset,
    world_point,
)
from dxf_dimensions.entities.primitives import Arc, Polyline2DVertex
from dxf_dimensions.errors import DimensionError
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import (
    PointLike,
    arc_from_bulge,
    distance,
    is_zero,
    normalize_angle,
    polar,
)

logger = logging.getLogger(__name__)


class ArcLengthDimension(Dimension):
    """Length of a circular arc.

    The arc runs counter-clockwise from ``start_angle`` to ``end_angle``.
    A negative offset dimensions the complementary arc instead, so the
    measurements for ``+k`` and ``-k`` add up to the circumference.

    Args:
        center: arc center (world).
        radius: arc radius, > 0.
        start_angle: start angle in degrees (OCS).
        end_angle: end angle in degrees (OCS).
        offset: signed radius of the dimension arc. Non-zero.
        style: dimension style.
        normal: plane normal.
    """

    dimension_type = DimensionType.ARC_LENGTH

    def __init__(
        self,
        center: PointLike,
        radius: float,
        start_angle: float,
        end_angle: float,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        self._center = world_point(center)
        self._radius = self._check_radius(radius)
        self._start_angle = normalize_angle(start_angle)
        self._end_angle = normalize_angle(end_angle)
        self._offset = check_offset(offset)
        self.update()

    @classmethod
    def from_arc(cls, arc: Arc, offset: float, style: Any = _DEFAULT_STYLE) -> 'ArcLengthDimension':
        return cls(arc.center, arc.radius, arc.start_angle, arc.end_angle, offset, style, arc.normal)

    @classmethod
    def from_bulge(
        cls,
        start: Polyline2DVertex,
        end: Polyline2DVertex,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
        elevation: float = 0.0,
    ) -> 'ArcLengthDimension':
        """Dimension of the bulged polyline segment from ``start`` to ``end``.

        Raises:
            DimensionError: if the segment is straight (zero bulge).
        """
        center, radius, start_angle, end_angle = arc_from_bulge(start.position, end.position, start.bulge)
        ocs = ObjectCoordinateSystem.from_normal(normal)
        return cls(ocs.to_world(center, elevation), radius, start_angle, end_angle, offset, style, normal)

    @staticmethod
    def _check_radius(radius: float) -> float:
        if radius <= 0:
            raise DimensionError(f"The arc radius must be greater than zero, got {radius}")
        return float(radius)

    # ------------------------------------------------------------------
    # Defining values
    # ------------------------------------------------------------------

    @property
    def center_point(self) -> NDArray[np.float64]:
        return self._center.copy()

    @center_point.setter
    def center_point(self, value: PointLike) -> None:
        self._center = world_point(value)
        self.update()

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = self._check_radius(value)
        self.update()

    @property
    def start_angle(self) -> float:
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float) -> None:
        self._start_angle = normalize_angle(value)
        self.update()

    @property
    def end_angle(self) -> float:
        return self._end_angle

    @end_angle.setter
    def end_angle(self, value: float) -> None:
        self._end_angle = normalize_angle(value)
        self.update()

    @property
    def offset(self) -> float:
        return self._offset

    @offset.setter
    def offset(self, value: float) -> None:
        self._offset = check_offset(value)
        self.update()

    @property
    def arc_angle(self) -> float:
        """Included angle in degrees of the dimensioned arc."""
        sweep = normalize_angle(self._end_angle - self._start_angle)
        if self._offset < 0:
            return 360.0 - sweep
        return sweep

    @property
    def measurement(self) -> float:
        return self._radius * math.radians(self.arc_angle)

    def _anchor_point(self) -> NDArray[np.float64]:
        return self._center

    def _arc_points(self):
        center = self.to_ocs(self._center)
        start = polar(center, self._radius, math.radians(self._start_angle))
        end = polar(center, self._radius, math.radians(self._end_angle))
        return center, start, end

    def compute_geometry(self) -> ArcGeometry:
        center, start, end = self._arc_points()
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        return arc_sector_geometry(center, start, end, self._offset, gap)

    def _move_dimension_line(self, point: NDArray[np.float64]) -> None:
        center, start, end = self._arc_points()
        radius = distance(center, point)
        if is_zero(radius):
            logger.debug("Dimension arc position on the center, offset kept")
            return
        self._offset = radius if point_in_sector(center, start, end, point) else -radius
