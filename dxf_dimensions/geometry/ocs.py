"""
Object coordinate system (OCS) transforms.

Planar DXF entities are computed in 2D in the plane perpendicular to
their normal (extrusion) vector. The plane axes come from the DXF
"arbitrary axis algorithm":

    if |Nx| < 1/64 and |Ny| < 1/64:  Ax = Wy x N
    else:                            Ax = Wz x N
    Ay = N x Ax

Provides:
- arbitrary_axis() returning the 3x3 OCS -> world matrix
- ObjectCoordinateSystem wrapping that matrix with point transforms
- world_to_ocs() / ocs_to_world() convenience functions
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions.errors import DimensionError
from dxf_dimensions.geometry.vectors import PointLike, as_point, are_equal, is_zero

logger = logging.getLogger(__name__)

UNIT_X = np.array([1.0, 0.0, 0.0])
UNIT_Y = np.array([0.0, 1.0, 0.0])
UNIT_Z = np.array([0.0, 0.0, 1.0])

# Threshold of the arbitrary axis algorithm
_ARBITRARY_AXIS_LIMIT = 1.0 / 64.0


def normalize_normal(normal: PointLike) -> NDArray[np.float64]:
    """Unit length copy of ``normal``.

    Raises:
        DimensionError: if the normal is the zero vector.
    """
    n = as_point(normal, 3)
    norm = np.linalg.norm(n)
    if is_zero(norm):
        raise DimensionError("The normal vector cannot be zero")
    return n / norm


def arbitrary_axis(normal: PointLike) -> NDArray[np.float64]:
    """OCS -> world rotation matrix for a plane normal.

    Columns are the OCS X axis, Y axis and the normal itself.

    Args:
        normal: plane normal, any non-zero length.

    Returns:
        3x3 orthonormal matrix.
    """
    n = normalize_normal(normal)
    if are_equal(n, UNIT_Z):
        return np.eye(3)

    if abs(n[0]) < _ARBITRARY_AXIS_LIMIT and abs(n[1]) < _ARBITRARY_AXIS_LIMIT:
        ax = np.cross(UNIT_Y, n)
    else:
        ax = np.cross(UNIT_Z, n)
    ax = ax / np.linalg.norm(ax)
    ay = np.cross(n, ax)
    ay = ay / np.linalg.norm(ay)
    return np.column_stack([ax, ay, n])


@dataclass
class ObjectCoordinateSystem:
    """OCS of a plane normal.

    Attributes:
        normal: unit normal of the plane.
        matrix: 3x3 OCS -> world matrix (columns Ax, Ay, N).
    """
    normal: NDArray[np.float64]
    matrix: NDArray[np.float64]

    @classmethod
    def from_normal(cls, normal: PointLike) -> 'ObjectCoordinateSystem':
        n = normalize_normal(normal)
        return cls(normal=n, matrix=arbitrary_axis(n))

    @property
    def is_world_aligned(self) -> bool:
        """True when the OCS coincides with the world system."""
        return np.allclose(self.matrix, np.eye(3))

    def to_ocs(self, point: PointLike) -> NDArray[np.float64]:
        """World point -> OCS point (x, y, elevation)."""
        return self.matrix.T @ as_point(point, 3)

    def to_world(self, point: PointLike, elevation: float = 0.0) -> NDArray[np.float64]:
        """OCS point -> world point.

        A 2D ``point`` is lifted to ``elevation`` along the normal; a 3D
        point keeps its own z.
        """
        p = as_point(point, 3)
        if len(point) == 2:
            p[2] = elevation
        return self.matrix @ p

    def to_ocs_2d(self, point: PointLike) -> NDArray[np.float64]:
        """World point -> planar OCS coordinates, dropping the elevation."""
        return self.to_ocs(point)[:2]


def world_to_ocs(
    point: PointLike,
    normal: PointLike,
) -> NDArray[np.float64]:
    """Transform a world point into the OCS of ``normal``."""
    return ObjectCoordinateSystem.from_normal(normal).to_ocs(point)


def ocs_to_world(
    point: PointLike,
    normal: PointLike,
    elevation: float = 0.0,
) -> NDArray[np.float64]:
    """Transform an OCS point (2D with ``elevation``, or 3D) into world."""
    return ObjectCoordinateSystem.from_normal(normal).to_world(point, elevation)


def transform_points(
    points: Sequence[PointLike],
    normal: PointLike,
    to_world: bool = False,
    elevation: Union[float, None] = None,
) -> NDArray[np.float64]:
    """Batch variant of world_to_ocs / ocs_to_world.

    Returns:
        (N, 3) array of transformed points.
    """
    ocs = ObjectCoordinateSystem.from_normal(normal)
    if to_world:
        elev = 0.0 if elevation is None else elevation
        return np.array([ocs.to_world(p, elev) for p in points])
    return np.array([ocs.to_ocs(p) for p in points])
