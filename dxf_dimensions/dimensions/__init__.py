"""Dimension types, text formatting and block builders."""

from dxf_dimensions.dimensions.aligned import AlignedDimension
from dxf_dimensions.dimensions.angular import Angular2LineDimension, Angular3PointDimension
from dxf_dimensions.dimensions.arc_length import ArcLengthDimension
from dxf_dimensions.dimensions.base import Dimension, DimensionType
from dxf_dimensions.dimensions.builders import build_dimension_block
from dxf_dimensions.dimensions.linear import LinearDimension
from dxf_dimensions.dimensions.ordinate import OrdinateAxis, OrdinateDimension
from dxf_dimensions.dimensions.radial import DiametricDimension, RadialDimension
from dxf_dimensions.dimensions.symbols import get_symbol
from dxf_dimensions.dimensions.text import MODEL_SPACE, Layout, format_dimension_text

__all__ = [
    "AlignedDimension",
    "Angular2LineDimension",
    "Angular3PointDimension",
    "ArcLengthDimension",
    "Dimension",
    "DimensionType",
    "build_dimension_block",
    "LinearDimension",
    "OrdinateAxis",
    "OrdinateDimension",
    "DiametricDimension",
    "RadialDimension",
    "get_symbol",
    "MODEL_SPACE",
    "Layout",
    "format_dimension_text",
]
