"""
DXF output for built dimension blocks.

Places dimension blocks into an in-memory ezdxf document: block
definitions with their entities, a DIMENSION entity referencing each
block, and DIMSTYLE table entries mirroring ``DimensionStyle`` values.
Writing the document is left to the caller (``renderer.doc``).

Usage:
    from dxf_dimensions.drawing.dxf_renderer import DxfRenderer

    renderer = DxfRenderer()
    renderer.create_drawing()
    renderer.add_dimension(LinearDimension((0, 0), (10, 0), 2), '*D1')
    renderer.doc.saveas('dimensions.dxf')
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import ezdxf
from ezdxf import units

from dxf_dimensions import config as cfg
from dxf_dimensions.dimensions.base import Dimension, DimensionType
from dxf_dimensions.dimensions.ordinate import OrdinateAxis
from dxf_dimensions.dimensions.text import MODEL_SPACE, Layout
from dxf_dimensions.entities.primitives import (
    Arc,
    Block,
    Circle,
    EntityStyle,
    Insert,
    Layer,
    Line,
    MText,
    Point,
    Polyline,
    Solid,
)
from dxf_dimensions.errors import UnsupportedEntityError
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.logging_config import LogContext, log_timing
from dxf_dimensions.styles.dimension_style import DXF_VARIABLES, DimensionStyle

logger = logging.getLogger(__name__)

_NOT_CREATED = "Drawing not created. Call create_drawing() first."

# DIMENSION group 70 flags
_BLOCK_REFERENCED_BY_THIS_DIMENSION_ONLY = 32
_ORDINATE_X_TYPE = 64

# DXF variables written through dedicated ezdxf setters
_SPECIAL_VARIABLES = frozenset({
    'DIMLTYPE', 'DIMLTEX1', 'DIMLTEX2',
    'DIMBLK', 'DIMBLK1', 'DIMBLK2', 'DIMLDRBLK',
    'DIMDSEP',
})


def _entity_attribs(style: EntityStyle) -> Dict:
    return {
        'layer': style.layer.name,
        'color': style.color,
        'linetype': style.linetype,
        'lineweight': style.lineweight,
    }


def _xyz(coords: Sequence[float], z: float) -> Tuple[float, float, float]:
    return float(coords[0]), float(coords[1]), z


def _zero_suppression(leading: bool, trailing: bool) -> int:
    return (4 if leading else 0) | (8 if trailing else 0)


def dimzin(style: DimensionStyle) -> int:
    """DIMZIN bit code of the linear zero suppression flags."""
    if style.suppress_zero_feet and style.suppress_zero_inches:
        feet_inches = 0
    elif not style.suppress_zero_feet and not style.suppress_zero_inches:
        feet_inches = 1
    elif style.suppress_zero_inches:
        feet_inches = 2
    else:
        feet_inches = 3
    return feet_inches | _zero_suppression(
        style.suppress_linear_leading_zeros, style.suppress_linear_trailing_zeros)


def dimazin(style: DimensionStyle) -> int:
    """DIMAZIN bit code of the angular zero suppression flags."""
    return ((1 if style.suppress_angular_leading_zeros else 0)
            | (2 if style.suppress_angular_trailing_zeros else 0))


def dimpost(style: DimensionStyle) -> str:
    """DIMPOST text; empty if neither prefix nor suffix is set."""
    if not style.dim_prefix and not style.dim_suffix:
        return ''
    return f"{style.dim_prefix}{cfg.MEASUREMENT_TOKEN}{style.dim_suffix}"


class DxfRenderer:
    """DXF export of dimension blocks using ezdxf."""

    def __init__(self):
        self.doc: Optional[ezdxf.document.Drawing] = None
        self.msp = None  # Modelspace
        # our block name -> ezdxf block name
        self._block_names: Dict[str, str] = {}

    def create_drawing(
        self,
        dxf_version: Optional[str] = None,
        drawing_units: int = units.MM,
        style: Optional[DimensionStyle] = None,
    ) -> None:
        """Create a new DXF document.

        Args:
            dxf_version: DXF version (R2000 and later); default
                ``config.DXF_VERSION``.
            drawing_units: ezdxf unit code of the drawing ($INSUNITS).
            style: optional dimension style added to the DIMSTYLE table.
        """
        dxf_version = dxf_version or cfg.DXF_VERSION
        self.doc = ezdxf.new(dxf_version, units=drawing_units)
        self.msp = self.doc.modelspace()
        self._block_names = {}

        self._setup_layers()
        if style is not None:
            self.add_dimension_style(style)

        logger.info("Created DXF drawing (%s)", dxf_version)

    def _require_drawing(self) -> None:
        if self.msp is None:
            raise RuntimeError(_NOT_CREATED)

    def _setup_layers(self) -> None:
        """Create the dimension layer and the non-plotting Defpoints layer."""
        self._ensure_layer(Layer(cfg.DIMENSION_LAYER))
        self._ensure_layer(Layer(cfg.DEFPOINTS_LAYER, plot=False))

    def _ensure_layer(self, layer: Layer) -> None:
        if layer.name in self.doc.layers:
            return
        dxf_layer = self.doc.layers.add(layer.name, color=layer.color)
        if not layer.plot:
            dxf_layer.dxf.plot = 0

    def _ensure_linetype(self, name: str) -> bool:
        if name in self.doc.linetypes:
            return True
        logger.debug("Linetype %s not in drawing; left to DIMSTYLE default", name)
        return False

    # ------------------------------------------------------------------
    # Dimension styles
    # ------------------------------------------------------------------

    def add_dimension_style(self, style: DimensionStyle):
        """Add or update the DIMSTYLE table entry named after ``style``.

        Numeric, boolean and enum values map onto their DXF variables;
        arrow blocks, linetypes and the decimal separator use the ezdxf
        setters. Custom arrow blocks are defined in the drawing first.

        Returns:
            The ezdxf DimStyle entry.
        """
        self._require_drawing()

        if style.name in self.doc.dimstyles:
            dimstyle = self.doc.dimstyles.get(style.name)
        else:
            dimstyle = self.doc.dimstyles.new(style.name)

        if style.text_style not in self.doc.styles:
            self.doc.styles.add(style.text_style)

        for prop, variable in DXF_VARIABLES.items():
            if variable in _SPECIAL_VARIABLES:
                continue
            attr = variable.lower()
            value = getattr(style, prop)
            if hasattr(value, 'value'):
                value = value.value
            elif isinstance(value, bool):
                value = int(value)
            if not dimstyle.dxf.is_supported(attr):
                logger.debug("%s not supported by this DXF version", variable)
                continue
            dimstyle.dxf.set(attr, value)

        dimstyle.dxf.dimdsep = ord(style.decimal_separator)
        dimstyle.dxf.dimzin = dimzin(style)
        dimstyle.dxf.dimazin = dimazin(style)
        dimstyle.dxf.dimtfac = style.fraction_height_scale
        dimstyle.dxf.dimpost = dimpost(style)

        dimstyle.set_arrows(
            blk=self._arrow_name(style.arrow_block),
            blk1=self._arrow_name(style.dim_arrow1),
            blk2=self._arrow_name(style.dim_arrow2),
            ldrblk=self._arrow_name(style.leader_arrow),
        )

        linetypes = {
            'dimline': style.dim_line_linetype,
            'ext1': style.ext_line1_linetype,
            'ext2': style.ext_line2_linetype,
        }
        linetypes = {k: v for k, v in linetypes.items() if self._ensure_linetype(v)}
        if linetypes:
            dimstyle.set_linetypes(**linetypes)

        logger.debug("Dimension style %s written", style.name)
        return dimstyle

    def _arrow_name(self, arrow) -> str:
        """ezdxf arrow name for a style arrow value ('' = closed filled)."""
        if arrow is None:
            return ''
        if isinstance(arrow, Block):
            return self.add_block(arrow).name
        # predefined names carry a leading underscore as block names only
        return arrow.upper().lstrip('_')

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def add_block(self, block: Block):
        """Define ``block`` (and the blocks it inserts) in the drawing.

        Anonymous blocks always get a new ezdxf generated ``*D`` name;
        named blocks already defined are reused.

        Returns:
            The ezdxf BlockLayout.

        Raises:
            UnsupportedEntityError: for an entity type without DXF mapping.
        """
        self._require_drawing()

        if not block.anonymous:
            existing = self._block_names.get(block.name)
            if existing is not None:
                return self.doc.blocks.get(existing)
            if block.name in self.doc.blocks:
                self._block_names[block.name] = block.name
                return self.doc.blocks.get(block.name)

        # nested arrowhead blocks must exist before their inserts
        for insert in block.query(Insert):
            self.add_block(insert.block)

        if block.anonymous:
            layout = self.doc.blocks.new_anonymous_block(type_char='D')
        else:
            layout = self.doc.blocks.new(name=block.name)
        self._block_names[block.name] = layout.name

        ocs = ObjectCoordinateSystem.from_normal(block.normal)
        for entity in block:
            self._add_entity(layout, entity, ocs, block.elevation)

        logger.debug("Block %s defined as %s (%d entities)",
                     block.name, layout.name, len(block))
        return layout

    def _add_entity(self, layout, entity, ocs: ObjectCoordinateSystem, elevation: float) -> None:
        self._ensure_layer(entity.style.layer)
        attribs = _entity_attribs(entity.style)
        extrusion = tuple(float(v) for v in ocs.normal)
        ocs_attribs = dict(attribs, extrusion=extrusion)

        # LINE, POINT and the MTEXT insert are WCS entities
        if isinstance(entity, Line):
            start = ocs.to_world(entity.start[:2], elevation)
            end = ocs.to_world(entity.end[:2], elevation)
            layout.add_line(tuple(start), tuple(end), dxfattribs=attribs)
        elif isinstance(entity, Point):
            location = ocs.to_world(entity.location[:2], elevation)
            layout.add_point(tuple(location), dxfattribs=attribs)
        elif isinstance(entity, Arc):
            layout.add_arc(
                _xyz(entity.center, elevation),
                entity.radius,
                entity.start_angle,
                entity.end_angle,
                dxfattribs=ocs_attribs,
            )
        elif isinstance(entity, Circle):
            layout.add_circle(_xyz(entity.center, elevation), entity.radius,
                              dxfattribs=ocs_attribs)
        elif isinstance(entity, Solid):
            # DXF vertex order is kept as stored
            corners = [entity.first, entity.second, entity.third, entity.fourth]
            layout.add_solid([_xyz(c, elevation) for c in corners], dxfattribs=ocs_attribs)
        elif isinstance(entity, MText):
            position = ocs.to_world(entity.position[:2], elevation)
            mtext_attribs = dict(
                ocs_attribs,
                insert=tuple(position),
                char_height=entity.height,
                rotation=entity.rotation,
                attachment_point=entity.attachment_point.value,
                style=entity.text_style,
                line_spacing_factor=entity.line_spacing_factor,
            )
            if entity.text_style not in self.doc.styles:
                self.doc.styles.add(entity.text_style)
            layout.add_mtext(entity.text, dxfattribs=mtext_attribs)
        elif isinstance(entity, Insert):
            name = self._block_names[entity.block.name]
            insert_attribs = dict(
                ocs_attribs,
                xscale=entity.scale,
                yscale=entity.scale,
                zscale=entity.scale,
                rotation=entity.rotation,
            )
            layout.add_blockref(name, _xyz(entity.position, elevation),
                                dxfattribs=insert_attribs)
        elif isinstance(entity, Polyline):
            points = [(v.position[0], v.position[1], v.bulge) for v in entity.vertices]
            polyline_attribs = dict(ocs_attribs, elevation=elevation,
                                    const_width=entity.constant_width)
            layout.add_lwpolyline(points, format='xyb', close=entity.closed,
                                  dxfattribs=polyline_attribs)
        else:
            raise UnsupportedEntityError(entity, "DXF export")

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    def add_dimension(self, dim: Dimension, name: str, layout: Layout = MODEL_SPACE):
        """Build the block of ``dim`` and reference it from the modelspace.

        Linear to ordinate dimensions become DIMENSION entities carrying
        the definition and mid text points; arc length dimensions (no
        DIMENSION type code) are placed as a block reference.

        Args:
            dim: dimension to export.
            name: name of the dimension block.
            layout: layout whose scale applies to the text.

        Returns:
            The created modelspace entity.
        """
        self._require_drawing()

        self.add_dimension_style(dim.style)
        with LogContext(block=name, dimension=dim.dimension_type.name):
            block = dim.build_block(name, layout)
        dxf_block = self.add_block(block)

        if dim.dimension_type is DimensionType.ARC_LENGTH:
            logger.debug("Arc length dimension %s placed as block reference", name)
            return self.msp.add_blockref(dxf_block.name, (0.0, 0.0, 0.0),
                                         dxfattribs={'layer': dim.layer.name})

        dimtype = dim.dimension_type.value | _BLOCK_REFERENCED_BY_THIS_DIMENSION_ONLY
        if (dim.dimension_type is DimensionType.ORDINATE
                and dim.axis is OrdinateAxis.X):
            dimtype |= _ORDINATE_X_TYPE

        attribs = {
            'layer': dim.layer.name,
            'geometry': dxf_block.name,
            'dimstyle': dim.style.name,
            'dimtype': dimtype,
            'defpoint': tuple(float(v) for v in dim.definition_point),
            'text_midpoint': tuple(float(v) for v in dim.mid_text_point),
            'attachment_point': dim.attachment_point.value,
            'line_spacing_factor': dim.line_spacing_factor,
            'actual_measurement': dim.measurement,
            'extrusion': tuple(float(v) for v in dim.normal),
        }
        if dim.user_text is not None:
            attribs['text'] = dim.user_text
        return self.msp.new_entity('DIMENSION', dxfattribs=attribs)

    def add_dimensions(
        self,
        dimensions: Iterable[Dimension],
        prefix: str = '*D',
        layout: Layout = MODEL_SPACE,
    ) -> List:
        """Export several dimensions; block names are ``prefix`` + index."""
        self._require_drawing()

        dimensions = list(dimensions)
        with log_timing(logger, "Export dimensions", count=len(dimensions)):
            return [
                self.add_dimension(dim, f"{prefix}{index}", layout)
                for index, dim in enumerate(dimensions, start=1)
            ]
