"""
Drawable primitives produced by the dimension block builders.

Geometry is stored as plain float tuples, in the object coordinate
system of the owning block unless stated otherwise. The same classes
serve as source shapes for the dimension constructors (``Line``, ``Arc``,
``Circle``, ``Polyline2DVertex``), where coordinates are world points.

Types:
  - Layer, EntityStyle     — layer and color/linetype/lineweight bundle
  - MTextAttachmentPoint   — MText anchor (DXF group 71 values)
  - Point, Line, Arc, Circle, Solid, MText, Insert, Polyline
  - Polyline2DVertex       — vertex with bulge (arc segment source)
  - Block                  — named container of the above
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Type, TypeVar, Union

from dxf_dimensions import config as cfg

Point2 = Tuple[float, float]
Point3 = Tuple[float, float, float]
Coords = Union[Point2, Point3]

# ACI color / lineweight / linetype "by" values
BYBLOCK = 0
BYLAYER = 256
LINEWEIGHT_BYBLOCK = -2
LINEWEIGHT_BYLAYER = -1
LINETYPE_BYBLOCK = "ByBlock"
LINETYPE_BYLAYER = "ByLayer"

UNIT_NORMAL: Point3 = (0.0, 0.0, 1.0)


def _coords(values) -> Tuple[float, ...]:
    return tuple(float(v) for v in values)


# ---------------------------------------------------------------------------
# Layers and entity styling
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Layer:
    """Drawing layer.

    Attributes:
        name: layer name.
        plot: False for non-plotting layers (Defpoints).
        color: ACI color of the layer.
    """
    name: str = "0"
    plot: bool = True
    color: int = 7


DEFAULT_LAYER = Layer()


def defpoints_layer() -> Layer:
    """Non-plotting layer for reference point markers."""
    return Layer(name=cfg.DEFPOINTS_LAYER, plot=False)


@dataclass(frozen=True)
class EntityStyle:
    """Visual properties shared by every entity."""
    layer: Layer = DEFAULT_LAYER
    color: int = BYLAYER
    linetype: str = LINETYPE_BYLAYER
    lineweight: int = LINEWEIGHT_BYLAYER


DEFAULT_STYLE = EntityStyle()


class MTextAttachmentPoint(Enum):
    """MText anchor relative to its insertion point."""
    TOP_LEFT = 1
    TOP_CENTER = 2
    TOP_RIGHT = 3
    MIDDLE_LEFT = 4
    MIDDLE_CENTER = 5
    MIDDLE_RIGHT = 6
    BOTTOM_LEFT = 7
    BOTTOM_CENTER = 8
    BOTTOM_RIGHT = 9


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Point:
    location: Coords
    style: EntityStyle = DEFAULT_STYLE

    def __post_init__(self):
        object.__setattr__(self, 'location', _coords(self.location))


@dataclass(frozen=True)
class Line:
    """Straight segment.

    Attributes:
        start: start point.
        end: end point.
        normal: extrusion direction (only meaningful for source shapes).
    """
    start: Coords
    end: Coords
    style: EntityStyle = DEFAULT_STYLE
    normal: Point3 = UNIT_NORMAL

    def __post_init__(self):
        object.__setattr__(self, 'start', _coords(self.start))
        object.__setattr__(self, 'end', _coords(self.end))
        object.__setattr__(self, 'normal', _coords(self.normal))


@dataclass(frozen=True)
class Arc:
    """Circular arc running counter-clockwise from start to end angle.

    Attributes:
        center: center point (world for source shapes, OCS in blocks).
        radius: arc radius, > 0.
        start_angle: start angle in degrees (OCS).
        end_angle: end angle in degrees (OCS).
        normal: plane normal.
    """
    center: Coords
    radius: float
    start_angle: float
    end_angle: float
    style: EntityStyle = DEFAULT_STYLE
    normal: Point3 = UNIT_NORMAL

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Arc radius must be positive, got {self.radius}")
        object.__setattr__(self, 'center', _coords(self.center))
        object.__setattr__(self, 'normal', _coords(self.normal))


@dataclass(frozen=True)
class Circle:
    center: Coords
    radius: float
    style: EntityStyle = DEFAULT_STYLE
    normal: Point3 = UNIT_NORMAL

    def __post_init__(self):
        if self.radius <= 0:
            raise ValueError(f"Circle radius must be positive, got {self.radius}")
        object.__setattr__(self, 'center', _coords(self.center))
        object.__setattr__(self, 'normal', _coords(self.normal))


@dataclass(frozen=True)
class Solid:
    """Filled triangle or quadrilateral (DXF vertex order).

    For a triangle the fourth vertex repeats the third.
    """
    first: Point2
    second: Point2
    third: Point2
    fourth: Optional[Point2] = None
    style: EntityStyle = DEFAULT_STYLE

    def __post_init__(self):
        for name in ('first', 'second', 'third'):
            object.__setattr__(self, name, _coords(getattr(self, name)))
        fourth = self.third if self.fourth is None else _coords(self.fourth)
        object.__setattr__(self, 'fourth', fourth)

    @property
    def vertices(self) -> List[Point2]:
        verts = [self.first, self.second, self.third]
        if self.fourth != self.third:
            verts.append(self.fourth)
        return verts


@dataclass(frozen=True)
class MText:
    """Multi-line text.

    Attributes:
        text: text content (may contain MText formatting codes).
        position: insertion point.
        height: character height.
        rotation: rotation in degrees.
        attachment_point: anchor of ``position``.
        text_style: text style name.
        line_spacing_factor: line spacing, 0.25 to 4.0.
    """
    text: str
    position: Point2
    height: float
    rotation: float = 0.0
    attachment_point: MTextAttachmentPoint = MTextAttachmentPoint.BOTTOM_CENTER
    text_style: str = "Standard"
    line_spacing_factor: float = 1.0
    style: EntityStyle = DEFAULT_STYLE

    def __post_init__(self):
        if self.height <= 0:
            raise ValueError(f"MText height must be positive, got {self.height}")
        object.__setattr__(self, 'position', _coords(self.position))


@dataclass(frozen=True)
class Insert:
    """Reference to a block (arrowheads).

    Attributes:
        block: inserted block.
        position: insertion point.
        scale: uniform scale factor.
        rotation: rotation in degrees.
    """
    block: 'Block'
    position: Point2
    scale: float = 1.0
    rotation: float = 0.0
    style: EntityStyle = DEFAULT_STYLE

    def __post_init__(self):
        object.__setattr__(self, 'position', _coords(self.position))


@dataclass(frozen=True)
class Polyline2DVertex:
    """Polyline vertex in OCS; ``bulge`` shapes the segment to the next vertex."""
    position: Point2
    bulge: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'position', _coords(self.position)[:2])


@dataclass(frozen=True)
class Polyline:
    """Lightweight polyline in OCS.

    Attributes:
        vertices: vertices; each bulge applies to the segment leaving it.
        closed: True to join the last vertex back to the first.
        constant_width: segment width (0 for a hairline).
    """
    vertices: Tuple[Polyline2DVertex, ...]
    closed: bool = False
    constant_width: float = 0.0
    style: EntityStyle = DEFAULT_STYLE

    def __post_init__(self):
        if len(self.vertices) < 2:
            raise ValueError("A polyline needs at least two vertices")
        object.__setattr__(self, 'vertices', tuple(self.vertices))


Entity = Union[Point, Line, Arc, Circle, Solid, MText, Insert, Polyline]
E = TypeVar('E')


# ---------------------------------------------------------------------------
# Block container
# ---------------------------------------------------------------------------

@dataclass
class Block:
    """Named container of entities.

    Dimension blocks are anonymous; their entities live in the OCS of
    ``normal`` at ``elevation``.

    Attributes:
        name: block name.
        entities: contained entities, in drawing order.
        anonymous: True for generated blocks.
        normal: OCS normal of the contained geometry.
        elevation: OCS elevation of the contained geometry.
    """
    name: str
    entities: List[Entity] = field(default_factory=list)
    anonymous: bool = False
    normal: Point3 = UNIT_NORMAL
    elevation: float = 0.0

    def add(self, entity: Optional[Entity]) -> None:
        """Append ``entity``; None (a suppressed element) is ignored."""
        if entity is not None:
            self.entities.append(entity)

    def extend(self, entities) -> None:
        for entity in entities:
            self.add(entity)

    def query(self, entity_type: Type[E]) -> List[E]:
        """Entities of the given type, in drawing order."""
        return [e for e in self.entities if isinstance(e, entity_type)]

    def on_layer(self, layer_name: str) -> List[Entity]:
        return [e for e in self.entities if e.style.layer.name == layer_name]

    def __iter__(self) -> Iterator[Entity]:
        return iter(self.entities)

    def __len__(self) -> int:
        return len(self.entities)

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """Axis aligned bounding box of the block geometry.

        Text and inserts contribute their insertion point only.

        Returns:
            (x_min, y_min, x_max, y_max)
        """
        from dxf_dimensions.entities.tessellation import to_vertices

        xs: List[float] = []
        ys: List[float] = []
        for entity in self.entities:
            if isinstance(entity, (MText, Insert)):
                points = [entity.position]
            else:
                points = to_vertices(entity)
            for p in points:
                xs.append(p[0])
                ys.append(p[1])

        if not xs:
            return (0.0, 0.0, 0.0, 0.0)
        return (min(xs), min(ys), max(xs), max(ys))
