"""
Diametric and radial dimensions.

Both measure a circle (or arc) from its center and a point on the curve.
The offset is the distance from the center to the text end of the
dimension line; offsets that would put the text on the curve are snapped
out of a band around it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Union

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.dimensions.base import (
    _DEFAULT_STYLE,
    Dimension,
    DimensionType,
    check_offset,
    world_point,
)
from dxf_dimensions.entities.primitives import Arc, Circle, MTextAttachmentPoint
from dxf_dimensions.errors import DimensionError
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    THREE_HALF_PI,
    PointLike,
    angle,
    are_equal,
    distance,
    is_zero,
    polar,
)

logger = logging.getLogger(__name__)

Vector = NDArray[np.float64]


@dataclass
class RadialGeometry:
    """OCS layout of a diametric or radial dimension.

    Attributes:
        center: circle center.
        ref1: measured point on the curve (arrowhead position).
        ref2: opposite end of the measured segment.
        angle_ref: direction from the center to ``ref1``.
        offset: text offset after snapping.
        clamped: True if the requested offset was snapped.
        side: +1 text inside the curve, -1 outside.
        reverse: -1 when ``angle_ref`` points to the left half plane.
        dim_ref: text end of the dimension line.
        mark_radius: radius used by the center lines.
        text_point: computed text reference point.
        gap: text gap, already scaled.
    """
    center: Vector
    ref1: Vector
    ref2: Vector
    angle_ref: float
    offset: float
    clamped: bool
    side: int
    reverse: int
    dim_ref: Vector
    mark_radius: float
    text_point: Vector
    gap: float = 0.0

    @property
    def definition_point(self) -> Vector:
        return self.ref2

    @property
    def mid_text_point(self) -> Vector:
        return self.dim_ref

    @property
    def text_rotation(self) -> float:
        """Text direction kept readable (flipped on the left half plane)."""
        rotation = self.angle_ref
        if HALF_PI < rotation <= THREE_HALF_PI:
            rotation += math.pi
        return rotation

    @property
    def text_anchor(self) -> Vector:
        """Text insertion point next to the dimension line end."""
        return polar(self.dim_ref, -self.reverse * self.side * self.gap, self.text_rotation)

    @property
    def attachment_point(self) -> MTextAttachmentPoint:
        if self.reverse * self.side < 0:
            return MTextAttachmentPoint.MIDDLE_LEFT
        return MTextAttachmentPoint.MIDDLE_RIGHT


def clamp_text_offset(offset: float, half: float, min_offset: float):
    """Snap ``offset`` out of the band ``(half - min_offset, half + min_offset)``.

    Args:
        offset: requested distance from the center.
        half: distance from the center to the curve.
        min_offset: half width of the band.

    Returns:
        (offset, side, clamped): side is +1 for text inside the curve.
    """
    if half - min_offset < offset < half:
        return half - min_offset, 1, True
    if half <= offset < half + min_offset:
        return half + min_offset, -1, True
    return offset, 1, False


class _CenterReferenceDimension(Dimension):
    """Center point plus a point on the curve."""

    # distance from the center to the curve, as a fraction of the measurement
    _half_factor = 1.0

    def __init__(
        self,
        center: PointLike,
        reference_point: PointLike,
        offset: Optional[float] = None,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        center = world_point(center)
        reference_point = world_point(reference_point)
        self._check_points(center, reference_point)
        self._center = center
        self._reference_point = reference_point
        if offset is None:
            offset = distance(self.to_ocs(center), self.to_ocs(reference_point))
        self._offset = check_offset(offset, allow_negative=False)
        self.update()

    @classmethod
    def from_circle(
        cls,
        circle: Union[Circle, Arc],
        rotation: float = 0.0,
        offset: Optional[float] = None,
        style: Any = _DEFAULT_STYLE,
    ):
        """Dimension of a ``Circle`` or ``Arc`` at ``rotation`` degrees (OCS)."""
        ocs = ObjectCoordinateSystem.from_normal(circle.normal)
        center = ocs.to_ocs(circle.center)
        ref = polar(center, circle.radius, math.radians(rotation))
        return cls(circle.center, ocs.to_world(ref, float(center[2])), offset, style, circle.normal)

    from_arc = from_circle

    @staticmethod
    def _check_points(center: Vector, reference_point: Vector) -> None:
        if are_equal(center, reference_point):
            raise DimensionError("The center and the reference point cannot be the same")

    @property
    def center_point(self) -> Vector:
        return self._center.copy()

    @center_point.setter
    def center_point(self, value: PointLike) -> None:
        value = world_point(value)
        self._check_points(value, self._reference_point)
        self._center = value
        self.update()

    @property
    def reference_point(self) -> Vector:
        return self._reference_point.copy()

    @reference_point.setter
    def reference_point(self, value: PointLike) -> None:
        value = world_point(value)
        self._check_points(self._center, value)
        self._reference_point = value
        self.update()

    @property
    def offset(self) -> float:
        """Requested distance from the center to the text end of the line."""
        return self._offset

    @offset.setter
    def offset(self, value: float) -> None:
        self._offset = check_offset(value, allow_negative=False)
        self.update()

    @property
    def radius(self) -> float:
        return distance(self.to_ocs(self._center), self.to_ocs(self._reference_point))

    def _anchor_point(self) -> Vector:
        return self._center

    def compute_geometry(self) -> RadialGeometry:
        center = self.to_ocs(self._center)
        ref1 = self.to_ocs(self._reference_point)
        if are_equal(center, ref1):
            raise DimensionError("The center and the reference point cannot be the same")
        style = self.resolved_style
        measure = self.measurement
        angle_ref = angle(center, ref1)
        ref2 = polar(ref1, -measure, angle_ref)
        reverse = -1 if HALF_PI < angle_ref <= THREE_HALF_PI else 1

        half = measure * self._half_factor
        min_offset = 2 * style.arrow_size + style.text_offset * style.scale
        offset, side, clamped = clamp_text_offset(self._offset, half, min_offset)
        if clamped:
            logger.debug("Text offset %.6g snapped to %.6g", self._offset, offset)

        text_distance = (2 * style.arrow_size + style.text_offset) * style.scale
        return RadialGeometry(
            center=center,
            ref1=ref1,
            ref2=ref2,
            angle_ref=angle_ref,
            offset=offset,
            clamped=clamped,
            side=side,
            reverse=reverse,
            dim_ref=polar(center, offset, angle_ref),
            mark_radius=half,
            text_point=polar(ref1, text_distance, angle_ref),
            gap=style.text_offset * style.scale,
        )

    def _move_dimension_line(self, point: Vector) -> None:
        center = self.to_ocs(self._center)
        dist = distance(center, point)
        if is_zero(dist):
            logger.debug("Dimension line position on the center, not moved")
            return
        ref = self.to_ocs(self._reference_point)
        rotated = polar(center, distance(center, ref), angle(center, point))
        self._reference_point = self._ocs.to_world(rotated, self.elevation)
        self._offset = dist


class DiametricDimension(_CenterReferenceDimension):
    """Diameter of a circle or arc.

    Args:
        center: circle center (world).
        reference_point: point on the circle (world).
        offset: distance from the center to the text; defaults to the radius.
        style: dimension style.
        normal: plane normal.

    Raises:
        DimensionError: if the center and the reference point coincide or
            the offset is negative.
    """

    dimension_type = DimensionType.DIAMETER
    _half_factor = 0.5

    @property
    def measurement(self) -> float:
        return 2.0 * self.radius


class RadialDimension(_CenterReferenceDimension):
    """Radius of a circle or arc.

    Args:
        center: circle center (world).
        reference_point: point on the curve (world).
        offset: distance from the center to the text; defaults to the radius.
        style: dimension style.
        normal: plane normal.
    """

    dimension_type = DimensionType.RADIUS

    @property
    def measurement(self) -> float:
        return self.radius
