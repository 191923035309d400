"""
Ordinate dimension: X or Y coordinate of a feature relative to an origin.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.dimensions.base import _DEFAULT_STYLE, Dimension, DimensionType, world_point
from dxf_dimensions.entities.primitives import MTextAttachmentPoint
from dxf_dimensions.errors import DimensionError
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    PointLike,
    as_point,
    dot,
    normalize_angle,
    polar,
    rotate,
)

logger = logging.getLogger(__name__)

Vector = NDArray[np.float64]


class OrdinateAxis(Enum):
    """Coordinate an ordinate dimension reports."""
    X = 0
    Y = 1


@dataclass
class OrdinateGeometry:
    """OCS layout of an ordinate dimension.

    Attributes:
        origin: datum point.
        feature_point: dimensioned point (origin + rotated local offset).
        leader_end: end of the leader line.
        direction: leader direction in radians.
        side: sign of the leader length.
        text_point: text insertion point.
    """
    origin: Vector
    feature_point: Vector
    leader_end: Vector
    direction: float
    side: int
    text_point: Vector

    @property
    def definition_point(self) -> Vector:
        return self.origin

    @property
    def mid_text_point(self) -> Vector:
        return self.text_point

    @property
    def attachment_point(self) -> MTextAttachmentPoint:
        if self.side < 0:
            return MTextAttachmentPoint.MIDDLE_RIGHT
        return MTextAttachmentPoint.MIDDLE_LEFT


class OrdinateDimension(Dimension):
    """Datum dimension.

    Args:
        origin: datum point (world).
        reference_point: feature position relative to ``origin``, in the
            ordinate frame rotated by ``rotation`` (OCS units).
        length: signed leader length; the leader runs along the measured
            axis' perpendicular (vertical for X, horizontal for Y).
        axis: ``OrdinateAxis.X`` or ``OrdinateAxis.Y``.
        rotation: ordinate frame rotation in degrees.
        style: dimension style.
        normal: plane normal.

    Example:
        >>> dim = OrdinateDimension((0, 0), (4, 7), 2.5, OrdinateAxis.X)
        >>> dim.measurement
        4.0
    """

    dimension_type = DimensionType.ORDINATE

    def __init__(
        self,
        origin: PointLike,
        reference_point: PointLike,
        length: float,
        axis: OrdinateAxis = OrdinateAxis.Y,
        rotation: float = 0.0,
        style: Any = _DEFAULT_STYLE,
        normal: PointLike = (0.0, 0.0, 1.0),
    ):
        super().__init__(style, normal)
        self._origin = world_point(origin)
        self._reference_point = as_point(reference_point, 2)
        self._length = float(length)
        self._axis = self._check_axis(axis)
        self._rotation = normalize_angle(rotation)
        self.update()

    @staticmethod
    def _check_axis(axis: OrdinateAxis) -> OrdinateAxis:
        if not isinstance(axis, OrdinateAxis):
            raise DimensionError(f"Ordinate axis must be an OrdinateAxis, got {axis!r}")
        return axis

    @property
    def origin(self) -> Vector:
        return self._origin.copy()

    @origin.setter
    def origin(self, value: PointLike) -> None:
        self._origin = world_point(value)
        self.update()

    @property
    def reference_point(self) -> Vector:
        return self._reference_point.copy()

    @reference_point.setter
    def reference_point(self, value: PointLike) -> None:
        self._reference_point = as_point(value, 2)
        self.update()

    @property
    def length(self) -> float:
        return self._length

    @length.setter
    def length(self, value: float) -> None:
        self._length = float(value)
        self.update()

    @property
    def axis(self) -> OrdinateAxis:
        return self._axis

    @axis.setter
    def axis(self, value: OrdinateAxis) -> None:
        self._axis = self._check_axis(value)
        self.update()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = normalize_angle(value)
        self.update()

    @property
    def measurement(self) -> float:
        if self._axis is OrdinateAxis.X:
            return float(self._reference_point[0])
        return float(self._reference_point[1])

    @property
    def feature_point(self) -> Vector:
        """Dimensioned point in world coordinates."""
        return self.to_world(self.compute_geometry().feature_point)

    @property
    def leader_end_point(self) -> Vector:
        """Leader end in world coordinates."""
        return self.to_world(self.compute_geometry().leader_end)

    def _anchor_point(self) -> Vector:
        return self._origin

    def _direction(self) -> float:
        direction = math.radians(self._rotation)
        if self._axis is OrdinateAxis.X:
            direction += HALF_PI
        return direction

    def compute_geometry(self) -> OrdinateGeometry:
        origin = self.to_ocs(self._origin)
        rotation = math.radians(self._rotation)
        feature = origin + rotate(self._reference_point, rotation)
        direction = self._direction()
        side = -1 if self._length < 0 else 1
        gap = self.resolved_style.text_offset * self.resolved_style.scale
        return OrdinateGeometry(
            origin=origin,
            feature_point=feature,
            leader_end=polar(feature, self._length, direction),
            direction=direction,
            side=side,
            text_point=polar(feature, self._length + side * gap, direction),
        )

    def _move_dimension_line(self, point: Vector) -> None:
        # the leader follows the point along its own direction
        feature = self.compute_geometry().feature_point
        direction = self._direction()
        self._length = dot(point - feature, (math.cos(direction), math.sin(direction)))
