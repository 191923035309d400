"""Dimension styles, per-dimension overrides and the arrowhead library."""

from dxf_dimensions.styles.arrowheads import arrowhead_names, get_arrowhead, is_no_trim
from dxf_dimensions.styles.dimension_style import (
    DXF_VARIABLES,
    AngleUnitType,
    DimensionStyle,
    FitTextMove,
    FractionFormatType,
    LinearUnitType,
    TextHorizontalPlacement,
    TextVerticalPlacement,
    validate_style_value,
)
from dxf_dimensions.styles.overrides import (
    DimensionStyleOverride,
    DimensionStyleOverrideType,
    ResolvedStyle,
    StyleOverrides,
)

__all__ = [
    "arrowhead_names",
    "get_arrowhead",
    "is_no_trim",
    "DXF_VARIABLES",
    "AngleUnitType",
    "DimensionStyle",
    "FitTextMove",
    "FractionFormatType",
    "LinearUnitType",
    "TextHorizontalPlacement",
    "TextVerticalPlacement",
    "validate_style_value",
    "DimensionStyleOverride",
    "DimensionStyleOverrideType",
    "ResolvedStyle",
    "StyleOverrides",
]
