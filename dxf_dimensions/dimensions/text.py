"""
Dimension text formatting.

``format_dimension_text`` turns a measurement into the string written in
the dimension block: unit formatting, linear scale and round-off, the
prefix/suffix template and the user text template, in that order.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from dxf_dimensions import config as cfg
from dxf_dimensions.dimensions.symbols import get_symbol
from dxf_dimensions.geometry.vectors import round_to_nearest
from dxf_dimensions.units.formats import UnitStyleFormat, format_angle, format_linear

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Layout:
    """Drawing layout a dimension is placed in."""
    name: str = "Model"

    @property
    def is_paper_space(self) -> bool:
        return self.name.lower() != "model"


MODEL_SPACE = Layout()


def linear_scale_factor(style, layout: Optional[Layout] = None) -> float:
    """Effective DIMLFAC.

    A negative factor only applies to dimensions in paper space; elsewhere
    the measurement is used unscaled.
    """
    factor = style.dim_scale_linear
    if factor < 0 and not (layout is not None and layout.is_paper_space):
        return 1.0
    return abs(factor)


def format_measurement(measure: float, is_angular: bool, style,
                       layout: Optional[Layout] = None) -> str:
    """Measured value formatted with the style units, without templates."""
    fmt = UnitStyleFormat.from_style(style, degrees_symbol=get_symbol('degree'))
    if is_angular:
        return format_angle(measure, style.dim_angular_units, fmt)

    value = measure * linear_scale_factor(style, layout)
    if style.dim_roundoff > 0:
        value = round_to_nearest(value, style.dim_roundoff)
    return format_linear(value, style.dim_length_units, fmt)


def format_dimension_text(
    measure: float,
    is_angular: bool,
    user_text: Optional[str],
    style,
    layout: Optional[Layout] = None,
    symbol: str = "",
) -> Optional[str]:
    """Text of a dimension.

    The formatted value replaces the ``<>`` token of the prefix/suffix
    template; that result then replaces ``<>`` in ``user_text`` when one
    is given. A user text without the token is used literally.

    Args:
        measure: measurement (drawing units, or degrees if angular).
        is_angular: use the angular unit format.
        user_text: template or literal text; a single space suppresses text.
        style: ``DimensionStyle`` or ``ResolvedStyle``.
        layout: layout of the dimension, for negative DIMLFAC.
        symbol: prepended to the result (diameter, radius, arc symbol).

    Returns:
        The text, or None when suppressed.
    """
    if user_text == cfg.SUPPRESS_TEXT:
        return None

    token = cfg.MEASUREMENT_TOKEN
    value = format_measurement(measure, is_angular, style, layout)
    text = f"{style.dim_prefix}{token}{style.dim_suffix}".replace(token, value)
    if user_text:
        text = user_text.replace(token, text)
    return symbol + text
