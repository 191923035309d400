"""
Polygonal approximation of block entities.

Arcs, circles and bulged polyline segments are sampled with
``precision`` segments per full turn (``config.ARC_PRECISION`` by
default). Text and inserts have no outline of their own and are rejected.
"""

import logging
import math
from typing import List, Optional, Tuple

from dxf_dimensions import config as cfg
from dxf_dimensions.entities.primitives import Arc, Circle, Line, Point, Polyline, Solid
from dxf_dimensions.errors import UnsupportedEntityError
from dxf_dimensions.geometry.vectors import arc_from_bulge, is_zero

logger = logging.getLogger(__name__)

Vertex = Tuple[float, float]


def _arc_vertices(center, radius: float, start_deg: float, end_deg: float,
                  precision: int) -> List[Vertex]:
    sweep = end_deg - start_deg
    if sweep <= 0:
        sweep += 360.0
    segments = max(2, int(math.ceil(precision * sweep / 360.0)))
    start = math.radians(start_deg)
    step = math.radians(sweep) / segments
    cx, cy = center[0], center[1]
    return [
        (cx + radius * math.cos(start + i * step), cy + radius * math.sin(start + i * step))
        for i in range(segments + 1)
    ]


def _polyline_vertices(polyline: Polyline, precision: int) -> List[Vertex]:
    verts = list(polyline.vertices)
    pairs = list(zip(verts, verts[1:]))
    if polyline.closed:
        pairs.append((verts[-1], verts[0]))

    result: List[Vertex] = [verts[0].position]
    for v1, v2 in pairs:
        if is_zero(v1.bulge) or v1.position == v2.position:
            result.append(v2.position)
            continue
        center, radius, start_deg, end_deg = arc_from_bulge(v1.position, v2.position, v1.bulge)
        points = _arc_vertices(center, radius, start_deg, end_deg, precision)
        if v1.bulge < 0:
            # clockwise segment: sampled counter-clockwise from the end vertex
            points.reverse()
        result.extend(points[1:])
    return result


def to_vertices(entity, precision: Optional[int] = None) -> List[Vertex]:
    """Vertex sequence approximating ``entity`` in its own plane.

    Args:
        entity: Point, Line, Arc, Circle, Solid or Polyline.
        precision: segments per full circle for curved entities.

    Returns:
        List of (x, y) vertices. Closed shapes repeat the first vertex.

    Raises:
        UnsupportedEntityError: for any other entity type.
    """
    if precision is None:
        precision = cfg.ARC_PRECISION
    if precision < 3:
        raise ValueError(f"Tessellation precision must be at least 3, got {precision}")

    if isinstance(entity, Point):
        return [entity.location[:2]]
    if isinstance(entity, Line):
        return [entity.start[:2], entity.end[:2]]
    if isinstance(entity, Arc):
        return _arc_vertices(entity.center, entity.radius,
                             entity.start_angle, entity.end_angle, precision)
    if isinstance(entity, Circle):
        return _arc_vertices(entity.center, entity.radius, 0.0, 360.0, precision)
    if isinstance(entity, Solid):
        verts = [v[:2] for v in entity.vertices]
        return verts + [verts[0]]
    if isinstance(entity, Polyline):
        return _polyline_vertices(entity, precision)

    logger.debug("Cannot tessellate %s", type(entity).__name__)
    raise UnsupportedEntityError(entity, "tessellation")
