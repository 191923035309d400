"""
Angular dimensions.

Contents:
- ArcGeometry: OCS layout shared by the arc based dimensions
- Angular2LineDimension: angle between two lines
- Angular3PointDimension: angle at a center point from a start to an end point
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Tuple

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.dimensions.base import (
    _DEFAULT_STYLE,
    Dimension,
    DimensionType,
    check_offset,
    world_point,
)
from dxf_dimensions.entities.primitives import Arc, Line
from dxf_dimensions.errors import ParallelLinesError
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    PointLike,
    angle,
    angle_between,
    are_parallel,
    cross,
    distance,
    find_intersection,
    is_zero,
    normalize_angle,
    polar,
)

logger = logging.getLogger(__name__)

Vector = NDArray[np.float64]


@dataclass
class ArcGeometry:
    """OCS layout of a dimension arc.

    Attributes:
        center: arc center.
        radius: arc radius (absolute offset).
        dim_ref1, dim_ref2: arc end points, counter-clockwise from 1 to 2.
        start_angle, end_angle: directions (radians) the arrowheads and
            extension lines are oriented by.
        reversed: -1 when the arc lies on the opposite rays of the
            directions, +1 otherwise.
        ext1_start, ext2_start: feature points the extension lines start at.
        mid_angle: direction of the arc middle from the center.
        mid_dim: middle of the arc.
        text_point: computed text anchor.
        text_rotation: text direction in radians, before the upright flip.
        definition_point: point written as the definition point.
        markers: reference points placed on the Defpoints layer.
    """
    center: Vector
    radius: float
    dim_ref1: Vector
    dim_ref2: Vector
    start_angle: float
    end_angle: float
    reversed: int
    ext1_start: Vector
    ext2_start: Vector
    mid_angle: float
    mid_dim: Vector
    text_point: Vector
    text_rotation: float
    definition_point: Vector
    markers: List[Vector] = field(default_factory=list)

    @property
    def mid_text_point(self) -> Vector:
        return self.mid_dim


def arc_sector_geometry(
    center: Vector,
    start: Vector,
    end: Vector,
    offset: float,
    gap: float,
) -> ArcGeometry:
    """Layout of a dimension arc around ``center`` from ``start`` to ``end``.

    A negative ``offset`` selects the complementary arc, running from
    ``end`` back to ``start``.

    Args:
        center: arc center (OCS).
        start: feature point of the first extension line.
        end: feature point of the second extension line.
        offset: signed radius of the dimension arc.
        gap: text gap, already scaled.
    """
    if offset < 0:
        start, end = end, start
    radius = abs(offset)
    start_angle = angle(center, start)
    end_angle = angle(center, end)
    aperture = math.radians(normalize_angle(math.degrees(end_angle - start_angle)))
    mid_angle = start_angle + aperture * 0.5

    mid_dim = polar(center, radius, mid_angle)
    return ArcGeometry(
        center=center,
        radius=radius,
        dim_ref1=polar(center, radius, start_angle),
        dim_ref2=polar(center, radius, end_angle),
        start_angle=start_angle,
        end_angle=end_angle,
        reversed=1,
        ext1_start=start,
        ext2_start=end,
        mid_angle=mid_angle,
        mid_dim=mid_dim,
        text_point=polar(mid_dim, gap, mid_angle),
        text_rotation=mid_angle - HALF_PI,
        definition_point=mid_dim,
        markers=[start, end, center],
    )


def point_in_sector(center: Vector, start: Vector, end: Vector, point: Vector) -> bool:
    """True if ``point`` lies in the counter-clockwise sector from ``start`` to ``end``."""
    start_angle = math.degrees(angle(center, start))
    sweep = normalize_angle(math.degrees(angle(center, end)) - start_angle)
    return normalize_angle(math.degrees(angle(center, point)) - start_angle) <= sweep


# ---------------------------------------------------------------------------
# Two lines
# ---------------------------------------------------------------------------

class Angular2LineDimension(Dimension):
    """Angle between two lines.

    The vertex is the intersection of the (infinite) lines. The measured
    angle is the one between the line directions, start to end point.

    Args:
        start_first_line, end_first_line: first line (world).
        start_second_line, end_second_line: second line (world).
        offset: radius of the dimension arc; a negative value draws the arc
            on the opposite rays. Non-zero.
        style: dimension style.
        normal: plane normal.

    Raises:
        ParallelLinesError: if the two lines are parallel.
    """

    dimension_type = DimensionType.ANGULAR
    is_angular = True

    def __init__(
        self,
        start_first_line: PointLike,
        end_first_line: PointLike,
        start_second_line: PointLike,
        end_second_line: PointLike,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        points = [world_point(p) for p in
                  (start_first_line, end_first_line, start_second_line, end_second_line)]
        self._check_lines(points)
        self._lines = points
        self._offset = check_offset(offset)
        self.update()

    @classmethod
    def from_lines(cls, first: Line, second: Line, offset: float,
                   style: Any = _DEFAULT_STYLE) -> 'Angular2LineDimension':
        """Dimension between two ``Line`` entities (plane of the first one)."""
        return cls(first.start, first.end, second.start, second.end, offset, style, first.normal)

    def _check_lines(self, points: List[Vector]) -> None:
        ocs = [self.to_ocs(p) for p in points]
        if are_parallel(ocs[1] - ocs[0], ocs[3] - ocs[2]):
            raise ParallelLinesError("The two lines that define the dimension are parallel")

    def _set_line_point(self, index: int, value: PointLike) -> None:
        points = list(self._lines)
        points[index] = world_point(value)
        self._check_lines(points)
        self._lines = points
        self.update()

    # ------------------------------------------------------------------
    # Defining values
    # ------------------------------------------------------------------

    @property
    def start_first_line(self) -> Vector:
        return self._lines[0].copy()

    @start_first_line.setter
    def start_first_line(self, value: PointLike) -> None:
        self._set_line_point(0, value)

    @property
    def end_first_line(self) -> Vector:
        return self._lines[1].copy()

    @end_first_line.setter
    def end_first_line(self, value: PointLike) -> None:
        self._set_line_point(1, value)

    @property
    def start_second_line(self) -> Vector:
        return self._lines[2].copy()

    @start_second_line.setter
    def start_second_line(self, value: PointLike) -> None:
        self._set_line_point(2, value)

    @property
    def end_second_line(self) -> Vector:
        return self._lines[3].copy()

    @end_second_line.setter
    def end_second_line(self, value: PointLike) -> None:
        self._set_line_point(3, value)

    @property
    def offset(self) -> float:
        return self._offset

    @offset.setter
    def offset(self, value: float) -> None:
        self._offset = check_offset(value)
        self.update()

    @property
    def normal(self) -> Vector:
        return self._ocs.normal.copy()

    @normal.setter
    def normal(self, value: PointLike) -> None:
        previous = self._ocs
        self._ocs = ObjectCoordinateSystem.from_normal(value)
        try:
            self._check_lines(self._lines)
        except ParallelLinesError:
            self._ocs = previous
            raise
        self.update()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def _ocs_lines(self) -> Tuple[Vector, Vector, Vector, Vector]:
        s1, e1, s2, e2 = (self.to_ocs(p) for p in self._lines)
        if are_parallel(e1 - s1, e2 - s2):
            raise ParallelLinesError("The two lines that define the dimension are parallel")
        return s1, e1, s2, e2

    @property
    def center(self) -> Vector:
        """Vertex of the angle (OCS)."""
        s1, e1, s2, e2 = self._ocs_lines()
        return find_intersection(s1, e1 - s1, s2, e2 - s2)

    @property
    def measurement(self) -> float:
        s1, e1, s2, e2 = self._ocs_lines()
        return math.degrees(angle_between(e1 - s1, e2 - s2))

    def _anchor_point(self) -> Vector:
        return self._lines[0]

    def compute_geometry(self) -> ArcGeometry:
        s1, e1, s2, e2 = self._ocs_lines()
        dir1 = e1 - s1
        dir2 = e2 - s2
        center = find_intersection(s1, dir1, s2, dir2)
        start_angle = angle(s1, e1)
        end_angle = angle(s2, e2)
        if cross(dir1, dir2) < 0:
            s1, e1, s2, e2 = s2, e2, s1, e1
            start_angle, end_angle = end_angle, start_angle
        aperture = angle_between(dir1, dir2)

        offset = self._offset
        reversed_ = 1
        if offset < 0:
            s1, e1 = e1, s1
            s2, e2 = e2, s2
            reversed_ = -1

        mid_angle = start_angle + aperture * 0.5
        mid_dim = polar(center, offset, mid_angle)
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        return ArcGeometry(
            center=center,
            radius=abs(offset),
            dim_ref1=polar(center, offset, start_angle),
            dim_ref2=polar(center, offset, end_angle),
            start_angle=start_angle,
            end_angle=end_angle,
            reversed=reversed_,
            ext1_start=e1,
            ext2_start=e2,
            mid_angle=mid_angle,
            mid_dim=mid_dim,
            text_point=polar(mid_dim, math.copysign(gap, offset), mid_angle),
            text_rotation=mid_angle - HALF_PI,
            definition_point=self.to_ocs(self._lines[3]),
            markers=[s1, e1, s2, e2],
        )

    def _move_dimension_line(self, point: Vector) -> None:
        s1, e1, s2, e2 = self._ocs_lines()
        dir1 = e1 - s1
        dir2 = e2 - s2
        center = find_intersection(s1, dir1, s2, dir2)
        radius = distance(center, point)
        if is_zero(radius):
            logger.debug("Dimension arc position on the vertex, offset kept")
            return
        direction = point - center

        # pick the line orientations whose sector holds the point
        for sign1, sign2 in ((1, 1), (-1, 1), (-1, -1), (1, -1)):
            u = sign1 * dir1
            v = sign2 * dir2
            if cross(u, v) < 0:
                u, v = v, u
            if cross(u, direction) >= 0 and cross(direction, v) >= 0:
                break
        lines = list(self._lines)
        if sign1 < 0:
            lines[0], lines[1] = lines[1], lines[0]
        if sign2 < 0:
            lines[2], lines[3] = lines[3], lines[2]
        self._lines = lines
        self._offset = radius


# ---------------------------------------------------------------------------
# Three points
# ---------------------------------------------------------------------------

class Angular3PointDimension(Dimension):
    """Angle at ``center`` swept counter-clockwise from ``start`` to ``end``.

    A negative offset measures the other arc (``360 - angle``).

    Args:
        center: vertex (world).
        start: point on the first side (world).
        end: point on the second side (world).
        offset: signed radius of the dimension arc. Non-zero.
        style: dimension style.
        normal: plane normal.
    """

    dimension_type = DimensionType.ANGULAR_3POINT
    is_angular = True

    def __init__(
        self,
        center: PointLike,
        start: PointLike,
        end: PointLike,
        offset: float,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        self._center = world_point(center)
        self._start = world_point(start)
        self._end = world_point(end)
        self._offset = check_offset(offset)
        self.update()

    @classmethod
    def from_arc(cls, arc: Arc, offset: float, style: Any = _DEFAULT_STYLE) -> 'Angular3PointDimension':
        """Dimension of the included angle of an ``Arc``."""
        ocs = ObjectCoordinateSystem.from_normal(arc.normal)
        center = ocs.to_ocs(arc.center)
        elevation = float(center[2])
        start = polar(center, arc.radius, math.radians(arc.start_angle))
        end = polar(center, arc.radius, math.radians(arc.end_angle))
        return cls(arc.center, ocs.to_world(start, elevation), ocs.to_world(end, elevation),
                   offset, style, arc.normal)

    @property
    def center_point(self) -> Vector:
        return self._center.copy()

    @center_point.setter
    def center_point(self, value: PointLike) -> None:
        self._center = world_point(value)
        self.update()

    @property
    def start_point(self) -> Vector:
        return self._start.copy()

    @start_point.setter
    def start_point(self, value: PointLike) -> None:
        self._start = world_point(value)
        self.update()

    @property
    def end_point(self) -> Vector:
        return self._end.copy()

    @end_point.setter
    def end_point(self, value: PointLike) -> None:
        self._end = world_point(value)
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
        center = self.to_ocs(self._center)
        start = self.to_ocs(self._start)
        end = self.to_ocs(self._end)
        if self._offset < 0:
            start, end = end, start
        return normalize_angle(math.degrees(angle(center, end) - angle(center, start)))

    def _anchor_point(self) -> Vector:
        return self._center

    def compute_geometry(self) -> ArcGeometry:
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        return arc_sector_geometry(
            self.to_ocs(self._center), self.to_ocs(self._start), self.to_ocs(self._end),
            self._offset, gap,
        )

    def _move_dimension_line(self, point: Vector) -> None:
        center = self.to_ocs(self._center)
        radius = distance(center, point)
        if is_zero(radius):
            logger.debug("Dimension arc position on the center, offset kept")
            return
        inside = point_in_sector(center, self.to_ocs(self._start), self.to_ocs(self._end), point)
        self._offset = radius if inside else -radius
