"""
Dimension style: the named set of display parameters shared by dimensions.

Property names are descriptive; ``DXF_VARIABLES`` maps each one to its
DXF header variable (``arrow_size`` -> ``DIMASZ``). Every assignment is
validated through ``validate_style_value``, the same check used by
per-dimension overrides.

Defaults reproduce the DXF "Standard" style (imperial sizes).
"""

import copy
import logging
import numbers
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

from dxf_dimensions import config as cfg
from dxf_dimensions.entities.primitives import (
    BYBLOCK,
    LINETYPE_BYBLOCK,
    LINEWEIGHT_BYBLOCK,
    Block,
)
from dxf_dimensions.errors import DimensionError, StyleValueError
from dxf_dimensions.styles.arrowheads import is_predefined

logger = logging.getLogger(__name__)

ArrowValue = Optional[Union[str, Block]]


# ---------------------------------------------------------------------------
# Enumerations (values are the DXF codes)
# ---------------------------------------------------------------------------

class LinearUnitType(Enum):
    SCIENTIFIC = 1
    DECIMAL = 2
    ENGINEERING = 3
    ARCHITECTURAL = 4
    FRACTIONAL = 5
    WINDOWS_DESKTOP = 6


class AngleUnitType(Enum):
    DECIMAL_DEGREES = 0
    DEGREES_MINUTES_SECONDS = 1
    GRADIANS = 2
    RADIANS = 3
    SURVEYOR_UNITS = 4


class FractionFormatType(Enum):
    """Fraction layout in architectural and fractional units (DIMFRAC)."""
    HORIZONTAL = 0
    DIAGONAL = 1
    NOT_STACKED = 2


class TextVerticalPlacement(Enum):
    CENTERED = 0
    ABOVE = 1
    OUTSIDE = 2
    JIS = 3
    BELOW = 4


class TextHorizontalPlacement(Enum):
    CENTERED = 0
    AT_EXT_LINE1 = 1
    AT_EXT_LINE2 = 2
    OVER_EXT_LINE1 = 3
    OVER_EXT_LINE2 = 4


class FitTextMove(Enum):
    """What moves when the text is repositioned (DIMTMOVE)."""
    BESIDE_DIM_LINE = 0
    OVER_DIM_LINE_WITH_LEADER = 1
    OVER_DIM_LINE_WITHOUT_LEADER = 2


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _number(prop: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise StyleValueError(prop, value, "expected a number")
    return float(value)


def _integer(prop: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise StyleValueError(prop, value, "expected an integer")
    return int(value)


def _non_negative(prop: str, value: Any) -> float:
    value = _number(prop, value)
    if value < 0:
        raise StyleValueError(prop, value, "must be equal or greater than zero")
    return value


def _positive(prop: str, value: Any) -> float:
    value = _number(prop, value)
    if value <= 0:
        raise StyleValueError(prop, value, "must be greater than zero")
    return value


def _any_number(prop: str, value: Any) -> float:
    return _number(prop, value)


def _non_zero(prop: str, value: Any) -> float:
    value = _number(prop, value)
    if value == 0:
        raise StyleValueError(prop, value, "must be different than zero")
    return value


def _roundoff(prop: str, value: Any) -> float:
    value = _non_negative(prop, value)
    if 0 < value < cfg.MIN_ROUNDOFF:
        raise StyleValueError(prop, value, f"must be zero or at least {cfg.MIN_ROUNDOFF}")
    return value


def _length_precision(prop: str, value: Any) -> int:
    value = _integer(prop, value)
    if value < 0:
        raise StyleValueError(prop, value, "must be equal or greater than zero")
    return value


def _angular_precision(prop: str, value: Any) -> int:
    # -1 means "same as the length precision"
    value = _integer(prop, value)
    if value < -1:
        raise StyleValueError(prop, value, "must be -1 or greater")
    return value


def _flag(prop: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise StyleValueError(prop, value, "expected True or False")
    return value


def _text(prop: str, value: Any) -> str:
    if not isinstance(value, str):
        raise StyleValueError(prop, value, "expected a string")
    return value


def _name(prop: str, value: Any) -> str:
    value = _text(prop, value)
    if not value:
        raise StyleValueError(prop, value, "should be at least one character long")
    return value


def _separator(prop: str, value: Any) -> str:
    value = _text(prop, value)
    if len(value) != 1:
        raise StyleValueError(prop, value, "must be a single character")
    return value


def _color(prop: str, value: Any) -> int:
    value = _integer(prop, value)
    if not 0 <= value <= 256:
        raise StyleValueError(prop, value, "ACI color must be in range 0..256")
    return value


def _lineweight(prop: str, value: Any) -> int:
    value = _integer(prop, value)
    if value < -3 or value > 211:
        raise StyleValueError(prop, value, "lineweight must be in range -3..211")
    return value


def _arrow(prop: str, value: Any) -> ArrowValue:
    if value is None or isinstance(value, Block):
        return value
    if isinstance(value, str):
        if not is_predefined(value):
            raise StyleValueError(prop, value, "not a predefined arrowhead name")
        return value.upper()
    raise StyleValueError(prop, value, "expected None, an arrowhead name or a Block")


def _enum(enum_cls: type) -> Callable[[str, Any], Enum]:
    def check(prop: str, value: Any) -> Enum:
        if not isinstance(value, enum_cls):
            raise StyleValueError(prop, value, f"expected {enum_cls.__name__}")
        return value
    return check


_VALIDATORS: Dict[str, Callable[[str, Any], Any]] = {
    'name': _name,
    # dimension line
    'dim_line_color': _color,
    'dim_line_linetype': _name,
    'dim_line_lineweight': _lineweight,
    'dim_baseline_spacing': _non_negative,
    'dim_line_extend': _non_negative,
    # extension lines
    'ext_line_color': _color,
    'ext_line1_linetype': _name,
    'ext_line2_linetype': _name,
    'ext_line_lineweight': _lineweight,
    'ext_line1_off': _flag,
    'ext_line2_off': _flag,
    'ext_line_offset': _non_negative,
    'ext_line_extend': _non_negative,
    # symbols and arrows
    'arrow_size': _non_negative,
    'center_mark_size': _any_number,
    'leader_arrow': _arrow,
    'arrow_block': _arrow,
    'separate_arrow_blocks': _flag,
    'dim_arrow1': _arrow,
    'dim_arrow2': _arrow,
    # text
    'text_style': _name,
    'text_color': _color,
    'text_height': _positive,
    'text_vertical_placement': _enum(TextVerticalPlacement),
    'text_horizontal_placement': _enum(TextHorizontalPlacement),
    'text_offset': _non_negative,
    'text_inside_align': _flag,
    'text_outside_align': _flag,
    # fit
    'dim_scale_overall': _positive,
    'fit_text_move': _enum(FitTextMove),
    # primary units
    'angular_precision': _angular_precision,
    'length_precision': _length_precision,
    'dim_prefix': _text,
    'dim_suffix': _text,
    'decimal_separator': _separator,
    'dim_scale_linear': _non_zero,
    'dim_length_units': _enum(LinearUnitType),
    'dim_angular_units': _enum(AngleUnitType),
    'fraction_type': _enum(FractionFormatType),
    'fraction_height_scale': _positive,
    'suppress_linear_leading_zeros': _flag,
    'suppress_linear_trailing_zeros': _flag,
    'suppress_angular_leading_zeros': _flag,
    'suppress_angular_trailing_zeros': _flag,
    'suppress_zero_feet': _flag,
    'suppress_zero_inches': _flag,
    'dim_roundoff': _roundoff,
}


def validate_style_value(prop: str, value: Any) -> Any:
    """Check ``value`` for the style property ``prop``.

    Args:
        prop: property name (a ``DimensionStyle`` field).
        value: candidate value.

    Returns:
        The value, normalized (ints widened to float, arrow names upper-cased).

    Raises:
        StyleValueError: wrong type or out of range.
        DimensionError: ``prop`` is not a style property.
    """
    validator = _VALIDATORS.get(prop)
    if validator is None:
        raise DimensionError(f"Unknown dimension style property '{prop}'")
    return validator(prop, value)


# ---------------------------------------------------------------------------
# DimensionStyle
# ---------------------------------------------------------------------------

@dataclass(eq=False)
class DimensionStyle:
    """Named dimension style.

    Attributes mirror the DXF DIMxxx variables listed in ``DXF_VARIABLES``.
    Arrow values are None (default closed filled triangle), a predefined
    arrowhead name such as ``"_OBLIQUE"`` or a custom ``Block``.

    Raises:
        StyleValueError: on construction or assignment of an invalid value.
    """
    name: str = cfg.DEFAULT_STYLE_NAME

    # dimension line
    dim_line_color: int = BYBLOCK
    dim_line_linetype: str = LINETYPE_BYBLOCK
    dim_line_lineweight: int = LINEWEIGHT_BYBLOCK
    dim_baseline_spacing: float = 0.38
    dim_line_extend: float = 0.0

    # extension lines
    ext_line_color: int = BYBLOCK
    ext_line1_linetype: str = LINETYPE_BYBLOCK
    ext_line2_linetype: str = LINETYPE_BYBLOCK
    ext_line_lineweight: int = LINEWEIGHT_BYBLOCK
    ext_line1_off: bool = False
    ext_line2_off: bool = False
    ext_line_offset: float = 0.0625
    ext_line_extend: float = 0.18

    # symbols and arrows
    arrow_size: float = 0.18
    center_mark_size: float = 0.09
    leader_arrow: ArrowValue = None
    arrow_block: ArrowValue = None
    separate_arrow_blocks: bool = False
    dim_arrow1: ArrowValue = None
    dim_arrow2: ArrowValue = None

    # text
    text_style: str = "Standard"
    text_color: int = BYBLOCK
    text_height: float = 0.18
    text_vertical_placement: TextVerticalPlacement = TextVerticalPlacement.ABOVE
    text_horizontal_placement: TextHorizontalPlacement = TextHorizontalPlacement.CENTERED
    text_offset: float = 0.09
    text_inside_align: bool = False
    text_outside_align: bool = False

    # fit
    dim_scale_overall: float = 1.0
    fit_text_move: FitTextMove = FitTextMove.BESIDE_DIM_LINE

    # primary units
    angular_precision: int = 0
    length_precision: int = 2
    dim_prefix: str = ""
    dim_suffix: str = ""
    decimal_separator: str = "."
    dim_scale_linear: float = 1.0
    dim_length_units: LinearUnitType = LinearUnitType.DECIMAL
    dim_angular_units: AngleUnitType = AngleUnitType.DECIMAL_DEGREES
    fraction_type: FractionFormatType = FractionFormatType.HORIZONTAL
    fraction_height_scale: float = 1.0
    suppress_linear_leading_zeros: bool = False
    suppress_linear_trailing_zeros: bool = False
    suppress_angular_leading_zeros: bool = False
    suppress_angular_trailing_zeros: bool = False
    suppress_zero_feet: bool = True
    suppress_zero_inches: bool = True
    dim_roundoff: float = 0.0

    def __setattr__(self, prop: str, value: Any) -> None:
        super().__setattr__(prop, validate_style_value(prop, value))

    @property
    def is_reserved(self) -> bool:
        """The Standard style cannot be renamed or removed from a drawing."""
        return self.name.lower() == cfg.DEFAULT_STYLE_NAME.lower()

    def copy(self, new_name: Optional[str] = None) -> 'DimensionStyle':
        """Deep copy, optionally under a new name."""
        clone = copy.deepcopy(self)
        if new_name is not None:
            clone.name = new_name
        return clone

    def to_dict(self) -> Dict[str, Any]:
        """Property values keyed by name; enums by member name, blocks by block name."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.name
            elif isinstance(value, Block):
                value = value.name
            result[f.name] = value
        return result

    def __repr__(self) -> str:
        return f"DimensionStyle(name={self.name!r})"


STYLE_PROPERTIES = tuple(f.name for f in fields(DimensionStyle))

# Style property -> DXF variable
DXF_VARIABLES: Dict[str, str] = {
    'dim_line_color': 'DIMCLRD',
    'dim_line_linetype': 'DIMLTYPE',
    'dim_line_lineweight': 'DIMLWD',
    'dim_baseline_spacing': 'DIMDLI',
    'dim_line_extend': 'DIMDLE',
    'ext_line_color': 'DIMCLRE',
    'ext_line1_linetype': 'DIMLTEX1',
    'ext_line2_linetype': 'DIMLTEX2',
    'ext_line_lineweight': 'DIMLWE',
    'ext_line1_off': 'DIMSE1',
    'ext_line2_off': 'DIMSE2',
    'ext_line_offset': 'DIMEXO',
    'ext_line_extend': 'DIMEXE',
    'arrow_size': 'DIMASZ',
    'center_mark_size': 'DIMCEN',
    'leader_arrow': 'DIMLDRBLK',
    'arrow_block': 'DIMBLK',
    'separate_arrow_blocks': 'DIMSAH',
    'dim_arrow1': 'DIMBLK1',
    'dim_arrow2': 'DIMBLK2',
    'text_style': 'DIMTXSTY',
    'text_color': 'DIMCLRT',
    'text_height': 'DIMTXT',
    'text_vertical_placement': 'DIMTAD',
    'text_horizontal_placement': 'DIMJUST',
    'text_offset': 'DIMGAP',
    'text_inside_align': 'DIMTIH',
    'text_outside_align': 'DIMTOH',
    'dim_scale_overall': 'DIMSCALE',
    'fit_text_move': 'DIMTMOVE',
    'angular_precision': 'DIMADEC',
    'length_precision': 'DIMDEC',
    'decimal_separator': 'DIMDSEP',
    'dim_scale_linear': 'DIMLFAC',
    'dim_length_units': 'DIMLUNIT',
    'dim_angular_units': 'DIMAUNIT',
    'fraction_type': 'DIMFRAC',
    'dim_roundoff': 'DIMRND',
}
