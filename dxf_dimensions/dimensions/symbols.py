"""
Symbols used in dimension text.

Symbols are written either as Unicode characters or as the DXF text
control codes understood by every CAD reader (``%%c`` diameter, ``%%d``
degree, ``%%p`` plus/minus). The arc symbol has no control code and
falls back to the MText Unicode escape.

The default is ``config.USE_UNICODE_SYMBOLS``.
"""

from typing import Optional

from dxf_dimensions import config as cfg
from dxf_dimensions.dimensions.base import DimensionType

SYMBOLS = {
    'diameter': 'Ø',       # Ø
    'radius': 'R',
    'degree': '°',         # °
    'plus_minus': '±',     # ±
    'arc': '⌒',            # ⌒
}

DXF_CODES = {
    'diameter': '%%c',
    'radius': 'R',
    'degree': '%%d',
    'plus_minus': '%%p',
    'arc': '\\U+2312',
}


def get_symbol(name: str, use_unicode: Optional[bool] = None) -> str:
    """Symbol ``name`` as Unicode or as a DXF control code.

    Raises:
        KeyError: for an unknown symbol name.
    """
    if use_unicode is None:
        use_unicode = cfg.USE_UNICODE_SYMBOLS
    table = SYMBOLS if use_unicode else DXF_CODES
    return table[name]


def get_dimension_prefix(dim_type: DimensionType,
                         use_unicode: Optional[bool] = None) -> str:
    """Prefix written before the measured value (may be empty).

    Args:
        dim_type: dimension type.
        use_unicode: Unicode symbols (True) or DXF control codes (False).
    """
    if dim_type is DimensionType.DIAMETER:
        return get_symbol('diameter', use_unicode)
    if dim_type is DimensionType.RADIUS:
        return get_symbol('radius', use_unicode)
    if dim_type is DimensionType.ARC_LENGTH:
        return get_symbol('arc', use_unicode)
    return ""
