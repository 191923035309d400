"""
Dimension block builders.

Strategy/Builder pattern: one builder per dimension type turns the
geometry computed by the dimension (``compute_geometry``) into the
entities of an anonymous block, in the dimension OCS. Building writes the
definition and mid text points back onto the dimension.

Builders:
  - LinearBuilder   - linear and aligned dimensions
  - AngularBuilder  - two line and three point angular dimensions
  - ArcLengthBuilder - arc length dimensions
  - RadialBuilder   - diametric and radial dimensions
  - OrdinateBuilder - ordinate dimensions

Factory:
  - build_dimension_block() - build through the builder registry

Every entity is created before the block is assembled, so an error never
leaves a partial block behind.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from dxf_dimensions.dimensions.angular import ArcGeometry
from dxf_dimensions.dimensions.base import Dimension, DimensionType
from dxf_dimensions.dimensions.linear import LinearGeometry
from dxf_dimensions.dimensions.ordinate import OrdinateGeometry
from dxf_dimensions.dimensions.radial import RadialGeometry
from dxf_dimensions.dimensions.symbols import get_dimension_prefix
from dxf_dimensions.dimensions.text import Layout, format_dimension_text
from dxf_dimensions.entities.primitives import (
    Arc,
    Block,
    EntityStyle,
    Insert,
    Line,
    MText,
    MTextAttachmentPoint,
    Point,
    Solid,
    defpoints_layer,
)
from dxf_dimensions.errors import UnsupportedDimensionError
from dxf_dimensions.geometry.vectors import (
    HALF_PI,
    THREE_HALF_PI,
    TWO_PI,
    angle,
    dot,
    is_zero,
    normalize,
    polar,
)
from dxf_dimensions.logging_config import timed
from dxf_dimensions.styles.arrowheads import is_no_trim, resolve_arrowhead
from dxf_dimensions.styles.overrides import ResolvedStyle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Entity styling
# ---------------------------------------------------------------------------

def _dim_line_style(style: ResolvedStyle) -> EntityStyle:
    return EntityStyle(color=style.dim_line_color, linetype=style.dim_line_linetype,
                       lineweight=style.dim_line_lineweight)


def _ext_line_style(style: ResolvedStyle, linetype: str) -> EntityStyle:
    return EntityStyle(color=style.ext_line_color, linetype=linetype,
                       lineweight=style.ext_line_lineweight)


def _defpoint(location) -> Point:
    """Invisible reference marker on the non-plotting Defpoints layer."""
    return Point(location, style=EntityStyle(layer=defpoints_layer()))


# ---------------------------------------------------------------------------
# Arrowheads
# ---------------------------------------------------------------------------

def arrow_blocks(style: ResolvedStyle):
    """Arrow values (name, Block or None) of the first and second end.

    DIMSAH selects separate DIMBLK1/DIMBLK2 blocks, otherwise both ends
    use DIMBLK.
    """
    if style.separate_arrow_blocks:
        return style.dim_arrow1, style.dim_arrow2
    return style.arrow_block, style.arrow_block


def _trim_lengths(style: ResolvedStyle, no_trim_value: float) -> Tuple[float, float]:
    """Trim of the first and second dimension line end.

    Normal arrowheads shorten the line by the arrow size; no-trim shapes
    use ``no_trim_value`` instead.
    """
    arrow1, arrow2 = arrow_blocks(style)
    size = style.arrow_size * style.scale
    ext1 = -no_trim_value if is_no_trim(arrow1) else size
    ext2 = no_trim_value if is_no_trim(arrow2) else -size
    return ext1, ext2


def _arrowhead(position, rotation: float, arrow, style: ResolvedStyle):
    """Arrowhead at ``position`` pointing along ``rotation`` (radians).

    Without an arrow block a filled triangle is drawn, otherwise the block
    is inserted at arrow size.
    """
    size = style.arrow_size * style.scale
    entity_style = EntityStyle(color=style.dim_line_color)
    block = resolve_arrowhead(arrow)
    if block is None:
        arrow_ref = polar(position, -size, rotation)
        half_width = size / 6.0
        return Solid(
            position,
            polar(arrow_ref, -half_width, rotation + HALF_PI),
            polar(arrow_ref, half_width, rotation + HALF_PI),
            style=entity_style,
        )
    return Insert(block, position, scale=size, rotation=math.degrees(rotation), style=entity_style)


# ---------------------------------------------------------------------------
# Lines, arcs and marks
# ---------------------------------------------------------------------------

def dimension_line(start, end, rotation: float, reversed_: int, style: ResolvedStyle) -> Line:
    """Dimension line between two arrow tips, trimmed at both ends."""
    ext1, ext2 = _trim_lengths(style, style.dim_line_extend * style.scale)
    start = polar(start, reversed_ * ext1, rotation)
    end = polar(end, reversed_ * ext2, rotation)
    return Line(start, end, style=_dim_line_style(style))


def dimension_arc(geometry: ArcGeometry, style: ResolvedStyle) -> Tuple[Arc, float, float]:
    """Dimension arc trimmed at both ends.

    Returns:
        (arc, ext1, ext2): the trim lengths used, needed to turn the
        arrowheads along the arc.
    """
    ext1, ext2 = _trim_lengths(style, 0.0)
    center = geometry.center
    start = polar(geometry.dim_ref1, geometry.reversed * ext1, geometry.start_angle + HALF_PI)
    end = polar(geometry.dim_ref2, geometry.reversed * ext2, geometry.end_angle + HALF_PI)
    arc = Arc(
        center,
        geometry.radius,
        math.degrees(angle(center, start)),
        math.degrees(angle(center, end)),
        style=_dim_line_style(style),
    )
    return arc, ext1, ext2


def radial_line(start, end, rotation: float, side: int, style: ResolvedStyle) -> Line:
    """Diametric/radial dimension line; only the arrow end is trimmed."""
    _, ext2 = _trim_lengths(style, style.dim_line_extend * style.scale)
    end = polar(end, side * ext2, rotation)
    return Line(start, end, style=_dim_line_style(style))


def extension_line(start, end, style: ResolvedStyle, linetype: str) -> Line:
    return Line(start, end, style=_ext_line_style(style, linetype))


def center_cross(center, radius: float, style: ResolvedStyle) -> List[Line]:
    """Center mark, plus center lines when DIMCEN is negative."""
    mark = style.center_mark_size
    if is_zero(mark):
        return []
    entity_style = EntityStyle(color=style.ext_line_color, lineweight=style.ext_line_lineweight)
    cx, cy = float(center[0]), float(center[1])
    dist = abs(mark * style.scale)

    def segment(x1, y1, x2, y2):
        return Line((cx + x1, cy + y1), (cx + x2, cy + y2), style=entity_style)

    lines = [segment(0.0, -dist, 0.0, dist), segment(-dist, 0.0, dist, 0.0)]
    if mark < 0:
        lines.extend([
            segment(2 * dist, 0.0, radius + dist, 0.0),
            segment(-2 * dist, 0.0, -radius - dist, 0.0),
            segment(0.0, 2 * dist, 0.0, radius + dist),
            segment(0.0, -2 * dist, 0.0, -radius - dist),
        ])
    return lines


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def upright_rotation(rotation: float) -> Tuple[float, bool]:
    """Text rotation that never reads upside down.

    Returns:
        (rotation, flipped): rotations in (90, 270] degrees are turned by
        180 degrees and reported as flipped.
    """
    rotation = math.fmod(rotation, TWO_PI)
    if rotation < 0:
        rotation += TWO_PI
    if HALF_PI < rotation <= THREE_HALF_PI:
        return rotation - math.pi, True
    return rotation, False


def dimension_text(dim: Dimension, text: str, position, rotation: float,
                   attachment: MTextAttachmentPoint, style: ResolvedStyle) -> MText:
    """MText label; a manually placed text keeps its point and attachment."""
    if dim.text_position_manually_set:
        logger.debug("Using manual text position %s", dim.text_reference_point)
        position = dim.text_reference_point
        attachment = dim.attachment_point
    return MText(
        text,
        position,
        style.text_height * style.scale,
        rotation=math.degrees(rotation),
        attachment_point=attachment,
        text_style=style.text_style,
        line_spacing_factor=dim.line_spacing_factor,
        style=EntityStyle(color=style.text_color),
    )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

class DimensionBuilder(ABC):
    """Abstract block builder.

    Subclasses implement ``_entities`` for their geometry record. Shared:
      - build()       - compute geometry, collect entities, write anchors
      - _text()       - formatted text or None when suppressed
    """

    def build(self, dim: Dimension, name: str, layout: Optional[Layout] = None) -> Block:
        """Build the block of ``dim``.

        Args:
            dim: dimension to draw.
            name: block name.
            layout: layout the dimension lives in (negative DIMLFAC).

        Returns:
            Anonymous block in the dimension OCS.
        """
        style = dim.resolved_style
        geometry = dim.compute_geometry()
        entities = self._entities(dim, geometry, style, layout)
        dim.store_anchor_points(geometry)

        block = Block(
            name,
            entities=[e for e in entities if e is not None],
            anonymous=True,
            normal=tuple(float(c) for c in dim.normal),
            elevation=dim.elevation,
        )
        logger.debug("Built %s block '%s': %d entities",
                     dim.dimension_type.name, name, len(block))
        return block

    @abstractmethod
    def _entities(self, dim: Dimension, geometry, style: ResolvedStyle,
                  layout: Optional[Layout]) -> list:
        """Entities of the block, None for suppressed elements."""

    def _text(self, dim: Dimension, style: ResolvedStyle, layout: Optional[Layout]) -> Optional[str]:
        return format_dimension_text(
            dim.measurement, dim.is_angular, dim.user_text, style, layout,
            symbol=get_dimension_prefix(dim.dimension_type),
        )


class LinearBuilder(DimensionBuilder):
    """Linear and aligned dimensions: straight line, two extension lines."""

    def _entities(self, dim, geometry: LinearGeometry, style, layout):
        scale = style.scale
        sign = 1.0 if geometry.offset >= 0 else -1.0
        dimexo = sign * style.ext_line_offset * scale
        dimexe = sign * style.ext_line_extend * scale
        ext_rot = geometry.extension_angle
        arrow1, arrow2 = arrow_blocks(style)

        entities = [
            _defpoint(geometry.ref1),
            _defpoint(geometry.ref2),
            _defpoint(geometry.dim_ref2),
        ]
        if not style.ext_line1_off:
            entities.append(extension_line(
                polar(geometry.ref1, dimexo, ext_rot), polar(geometry.dim_ref1, dimexe, ext_rot),
                style, style.ext_line1_linetype))
        if not style.ext_line2_off:
            entities.append(extension_line(
                polar(geometry.ref2, dimexo, ext_rot), polar(geometry.dim_ref2, dimexe, ext_rot),
                style, style.ext_line2_linetype))

        entities.append(dimension_line(geometry.dim_ref1, geometry.dim_ref2,
                                       geometry.rotation, geometry.reversed, style))
        entities.append(_arrowhead(geometry.dim_ref1, angle(geometry.dim_ref2, geometry.dim_ref1),
                                   arrow1, style))
        entities.append(_arrowhead(geometry.dim_ref2, angle(geometry.dim_ref1, geometry.dim_ref2),
                                   arrow2, style))

        text = self._text(dim, style, layout)
        if text is not None:
            rotation, flipped = upright_rotation(geometry.rotation)
            attachment = (MTextAttachmentPoint.TOP_CENTER if flipped
                          else MTextAttachmentPoint.BOTTOM_CENTER)
            entities.append(dimension_text(dim, text, geometry.text_point, rotation, attachment, style))
        return entities


class AngularBuilder(DimensionBuilder):
    """Arc based dimensions: dimension arc, radial extension lines."""

    # The second extension line keeps the first line type; see DESIGN.md.
    second_extension_linetype = 'ext_line1_linetype'

    def _extension(self, start, dim_ref, center, style, linetype):
        u = normalize(dim_ref - center)
        sign = 1.0 if dot(dim_ref - start, u) >= 0 else -1.0
        dimexo = sign * style.ext_line_offset * style.scale
        dimexe = sign * style.ext_line_extend * style.scale
        return extension_line(start + dimexo * u, dim_ref + dimexe * u, style, linetype)

    def _entities(self, dim, geometry: ArcGeometry, style, layout):
        arrow1, arrow2 = arrow_blocks(style)
        entities = [_defpoint(p) for p in geometry.markers]

        arc, ext1, ext2 = dimension_arc(geometry, style)
        turn = (1 - geometry.reversed) * HALF_PI
        angle1 = math.asin(max(-1.0, min(1.0, ext1 * 0.5 / geometry.radius)))
        angle2 = math.asin(max(-1.0, min(1.0, ext2 * 0.5 / geometry.radius)))
        first_arrow = _arrowhead(geometry.dim_ref1, turn + angle1 + geometry.start_angle - HALF_PI,
                                 arrow1, style)
        second_arrow = _arrowhead(geometry.dim_ref2, turn + angle2 + geometry.end_angle + HALF_PI,
                                  arrow2, style)

        if not style.ext_line1_off:
            entities.append(self._extension(geometry.ext1_start, geometry.dim_ref1, geometry.center,
                                            style, style.ext_line1_linetype))
        if not style.ext_line2_off:
            entities.append(self._extension(geometry.ext2_start, geometry.dim_ref2, geometry.center,
                                            style, getattr(style, self.second_extension_linetype)))
        entities.extend([arc, first_arrow, second_arrow])

        text = self._text(dim, style, layout)
        if text is not None:
            rotation, flipped = upright_rotation(geometry.text_rotation)
            attachment = (MTextAttachmentPoint.TOP_CENTER if flipped
                          else MTextAttachmentPoint.BOTTOM_CENTER)
            entities.append(dimension_text(dim, text, geometry.text_point, rotation, attachment, style))
        return entities


class ArcLengthBuilder(AngularBuilder):
    """Arc length: angular layout, arc symbol before the text."""

    second_extension_linetype = 'ext_line2_linetype'


class RadialBuilder(DimensionBuilder):
    """Diametric and radial dimensions: one line, one arrow, center mark."""

    def _entities(self, dim, geometry: RadialGeometry, style, layout):
        _, arrow2 = arrow_blocks(style)
        entities: list = [_defpoint(geometry.ref1)]
        entities.append(radial_line(geometry.dim_ref, geometry.ref1, geometry.angle_ref,
                                    geometry.side, style))
        entities.extend(center_cross(geometry.center, geometry.mark_radius, style))
        entities.append(_arrowhead(geometry.ref1, (1 - geometry.side) * HALF_PI + geometry.angle_ref,
                                   arrow2, style))

        text = self._text(dim, style, layout)
        if text is not None:
            entities.append(dimension_text(dim, text, geometry.text_anchor, geometry.text_rotation,
                                           geometry.attachment_point, style))
        return entities


class OrdinateBuilder(DimensionBuilder):
    """Ordinate dimensions: leader line and text at its end."""

    def _entities(self, dim, geometry: OrdinateGeometry, style, layout):
        start = polar(geometry.feature_point, style.ext_line_offset * style.scale, geometry.direction)
        entities = [
            _defpoint(geometry.feature_point),
            _defpoint(geometry.leader_end),
            Line(start, geometry.leader_end, style=_dim_line_style(style)),
        ]
        text = self._text(dim, style, layout)
        if text is not None:
            entities.append(dimension_text(dim, text, geometry.text_point, geometry.direction,
                                           geometry.attachment_point, style))
        return entities


# ---------------------------------------------------------------------------
# Builder registry
# ---------------------------------------------------------------------------

_REGISTRY = {
    DimensionType.LINEAR: LinearBuilder(),
    DimensionType.ALIGNED: LinearBuilder(),
    DimensionType.ANGULAR: AngularBuilder(),
    DimensionType.ANGULAR_3POINT: AngularBuilder(),
    DimensionType.ARC_LENGTH: ArcLengthBuilder(),
    DimensionType.DIAMETER: RadialBuilder(),
    DimensionType.RADIUS: RadialBuilder(),
    DimensionType.ORDINATE: OrdinateBuilder(),
}


@timed(operation="Build dimension block")
def build_dimension_block(dim: Dimension, name: str, layout: Optional[Layout] = None) -> Block:
    """Build the block of a dimension through the builder registry.

    Args:
        dim: dimension to draw.
        name: block name (anonymous dimension blocks are usually ``*D<n>``).
        layout: layout of the dimension; None means model space.

    Returns:
        The dimension block. ``dim.definition_point`` and
        ``dim.mid_text_point`` are updated as a side effect.

    Raises:
        UnsupportedDimensionError: if no builder handles the dimension type.
        ParallelLinesError: if the lines of an angular dimension became parallel.
    """
    dim_type = getattr(dim, 'dimension_type', None)
    builder = _REGISTRY.get(dim_type)
    if builder is None:
        logger.debug("Unknown dimension type '%s', no builder in registry", dim_type)
        raise UnsupportedDimensionError(
            f"No block builder for dimension type '{getattr(dim_type, 'name', dim_type)}' "
            f"({type(dim).__name__})"
        )
    return builder.build(dim, name, layout)
