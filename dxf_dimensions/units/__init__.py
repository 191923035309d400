"""Linear and angular number formats for dimension text."""

from dxf_dimensions.units.formats import UnitStyleFormat, format_angle, format_linear

__all__ = [
    "UnitStyleFormat",
    "format_angle",
    "format_linear",
]
