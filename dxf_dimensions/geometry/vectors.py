"""
Planar vector helpers for dimension geometry.

All points and directions are numpy float64 arrays. Angles are radians
unless the name says ``_deg``. Zero and parallel tests share the tolerance
``config.EPSILON``.

Functions:
  - as_point()          — coerce a sequence to a float array
  - is_zero()           — tolerance based zero test
  - normalize_angle()   — fold degrees into [0, 360)
  - angle() / polar()   — direction angle and polar displacement
  - angle_between()     — unsigned angle between two directions
  - are_parallel()      — tolerance based parallel test
  - find_intersection() — intersection of two parametric lines
  - arc_from_bulge()    — arc parameters of a bulged polyline segment
"""

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions import config as cfg
from dxf_dimensions.errors import DimensionError

Vector = NDArray[np.float64]
PointLike = Union[Sequence[float], Vector]

TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi
THREE_HALF_PI = 1.5 * math.pi


def as_point(point: PointLike, dim: int = 2) -> Vector:
    """Coerce ``point`` to a float array of length ``dim``.

    Shorter inputs are padded with zeros, longer ones truncated, so a
    3D point can be used where a 2D one is expected and vice versa.
    """
    values = np.zeros(dim, dtype=np.float64)
    arr = np.asarray(point, dtype=np.float64).ravel()
    n = min(dim, arr.size)
    values[:n] = arr[:n]
    return values


def is_zero(value: float, threshold: Optional[float] = None) -> bool:
    """Check ``|value| <= threshold`` (default ``config.EPSILON``)."""
    if threshold is None:
        threshold = cfg.EPSILON
    return abs(value) <= threshold


def are_equal(u: PointLike, v: PointLike, threshold: Optional[float] = None) -> bool:
    """Component-wise tolerance comparison of two points."""
    diff = np.asarray(u, dtype=np.float64) - np.asarray(v, dtype=np.float64)
    return all(is_zero(float(c), threshold) for c in diff)


def normalize_angle(angle_deg: float) -> float:
    """Fold an angle in degrees into [0, 360).

    Values within tolerance of 0 or 360 become exactly 0.
    """
    normalized = math.fmod(angle_deg, 360.0)
    if is_zero(normalized) or is_zero(normalized - 360.0) or is_zero(normalized + 360.0):
        return 0.0
    if normalized < 0:
        normalized += 360.0
    return normalized


def round_to_nearest(number: float, roundoff: float) -> float:
    """Round ``number`` to the nearest multiple of ``roundoff``."""
    return round(number / roundoff) * roundoff


def length(v: PointLike) -> float:
    return float(np.linalg.norm(np.asarray(v, dtype=np.float64)))


def distance(u: PointLike, v: PointLike) -> float:
    return length(np.asarray(v, dtype=np.float64) - np.asarray(u, dtype=np.float64))


def midpoint(u: PointLike, v: PointLike) -> Vector:
    return 0.5 * (np.asarray(u, dtype=np.float64) + np.asarray(v, dtype=np.float64))


def normalize(v: PointLike) -> Vector:
    """Unit vector in the direction of ``v``.

    Raises:
        DimensionError: if ``v`` has zero length.
    """
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v)
    if is_zero(norm):
        raise DimensionError("Cannot normalize a zero-length vector")
    return v / norm


def cross(u: PointLike, v: PointLike) -> float:
    """Z component of the cross product of two 2D vectors."""
    return float(u[0] * v[1] - u[1] * v[0])


def dot(u: PointLike, v: PointLike) -> float:
    return float(np.dot(np.asarray(u, dtype=np.float64), np.asarray(v, dtype=np.float64)))


def perpendicular(v: PointLike) -> Vector:
    """Vector rotated by +90 degrees."""
    return np.array([-v[1], v[0]], dtype=np.float64)


def rotate(v: PointLike, angle_rad: float) -> Vector:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    return np.array([v[0] * c - v[1] * s, v[0] * s + v[1] * c], dtype=np.float64)


def angle(u: PointLike, v: Optional[PointLike] = None) -> float:
    """Direction angle in [0, 2*pi).

    With one argument the angle of vector ``u``; with two, the angle of
    the segment from ``u`` to ``v``.
    """
    if v is not None:
        u = np.asarray(v, dtype=np.float64) - np.asarray(u, dtype=np.float64)
    a = math.atan2(u[1], u[0])
    if a < 0:
        a += TWO_PI
    return a


def polar(point: PointLike, dist: float, angle_rad: float) -> Vector:
    """Point at ``dist`` from ``point`` in direction ``angle_rad``."""
    return np.array([
        point[0] + dist * math.cos(angle_rad),
        point[1] + dist * math.sin(angle_rad),
    ], dtype=np.float64)


def angle_between(u: PointLike, v: PointLike) -> float:
    """Unsigned angle in [0, pi] between two directions."""
    cos = dot(u, v) / (length(u) * length(v))
    if is_zero(cos - 1.0):
        return 0.0
    if is_zero(cos + 1.0):
        return math.pi
    return math.acos(max(-1.0, min(1.0, cos)))


def are_parallel(u: PointLike, v: PointLike, threshold: Optional[float] = None) -> bool:
    """True if the directions are parallel or anti-parallel.

    Zero-length directions count as parallel to anything.
    """
    len_u = length(u)
    len_v = length(v)
    if is_zero(len_u) or is_zero(len_v):
        return True
    return is_zero(cross(u, v) / (len_u * len_v), threshold)


def find_intersection(
    point0: PointLike,
    dir0: PointLike,
    point1: PointLike,
    dir1: PointLike,
    threshold: Optional[float] = None,
) -> Optional[Vector]:
    """Intersection of the lines ``point0 + s*dir0`` and ``point1 + t*dir1``.

    Returns:
        The intersection point, or None if the lines are parallel.
    """
    if are_parallel(dir0, dir1, threshold):
        return None
    vect = np.asarray(point1, dtype=np.float64) - np.asarray(point0, dtype=np.float64)
    s = cross(vect, dir1) / cross(dir0, dir1)
    return np.asarray(point0, dtype=np.float64) + s * np.asarray(dir0, dtype=np.float64)


def arc_from_bulge(
    start: PointLike,
    end: PointLike,
    bulge: float,
) -> Tuple[Vector, float, float, float]:
    """Arc described by a bulged polyline segment.

    The bulge is the tangent of a quarter of the included angle; positive
    values run counter-clockwise from ``start`` to ``end``.

    Args:
        start: segment start point (OCS).
        end: segment end point (OCS).
        bulge: non-zero bulge value.

    Returns:
        (center, radius, start_angle_deg, end_angle_deg), angles running
        counter-clockwise.

    Raises:
        DimensionError: for a zero bulge or coincident end points.
    """
    if is_zero(bulge):
        raise DimensionError("A zero bulge describes a straight segment, not an arc")
    p1 = as_point(start)
    p2 = as_point(end)
    if are_equal(p1, p2):
        raise DimensionError("Bulge segment start and end points coincide")

    theta = 4.0 * math.atan(abs(bulge))
    chord_half = 0.5 * distance(p1, p2)
    radius = chord_half / math.sin(0.5 * theta)
    gamma = 0.5 * (math.pi - theta)
    phi = angle(p1, p2) + math.copysign(gamma, bulge)
    center = polar(p1, radius, phi)

    a1 = math.degrees(angle(center, p1))
    a2 = math.degrees(angle(center, p2))
    if bulge > 0:
        return center, radius, normalize_angle(a1), normalize_angle(a2)
    return center, radius, normalize_angle(a2), normalize_angle(a1)
