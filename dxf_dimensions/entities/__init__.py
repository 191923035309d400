"""Drawable entities and the block container produced by dimension builders."""

from dxf_dimensions.entities.primitives import (
    Arc,
    Block,
    Circle,
    EntityStyle,
    Insert,
    Layer,
    Line,
    MText,
    MTextAttachmentPoint,
    Point,
    Polyline,
    Polyline2DVertex,
    Solid,
)
from dxf_dimensions.entities.tessellation import to_vertices

__all__ = [
    "Arc",
    "Block",
    "Circle",
    "EntityStyle",
    "Insert",
    "Layer",
    "Line",
    "MText",
    "MTextAttachmentPoint",
    "Point",
    "Polyline",
    "Polyline2DVertex",
    "Solid",
    "to_vertices",
]
