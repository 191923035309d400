"""
Number formatting for dimension text.

Linear values: decimal, architectural, engineering, fractional,
scientific and Windows desktop (locale) notation. Angles are given in
degrees and written as decimal degrees, degrees/minutes/seconds,
gradians or radians.

Fractions are emitted as MText stacking codes (``\\S1/2;``) unless the
fraction type is NOT_STACKED.
"""

import locale
import logging
import math
from dataclasses import dataclass
from typing import Tuple

from dxf_dimensions.errors import DimensionError
from dxf_dimensions.styles.dimension_style import (
    AngleUnitType,
    FractionFormatType,
    LinearUnitType,
)

logger = logging.getLogger(__name__)


@dataclass
class UnitStyleFormat:
    """Snapshot of the number formatting options of a style.

    Attributes:
        linear_decimal_places: digits after the separator (and the 2**n
            fraction denominator for architectural and fractional units).
        angular_decimal_places: digits for angles.
        decimal_separator: separator character.
        feet_inches_separator: text between feet and inches.
        fraction_type: stacking of fractions.
        fraction_height_scale: height of stacked fractions relative to text.
    """
    linear_decimal_places: int = 2
    angular_decimal_places: int = 0
    decimal_separator: str = "."
    feet_inches_separator: str = "-"
    degrees_symbol: str = "°"
    minutes_symbol: str = "'"
    seconds_symbol: str = '"'
    radians_symbol: str = "r"
    gradians_symbol: str = "g"
    feet_symbol: str = "'"
    inches_symbol: str = '"'
    fraction_type: FractionFormatType = FractionFormatType.HORIZONTAL
    fraction_height_scale: float = 1.0
    suppress_linear_leading_zeros: bool = False
    suppress_linear_trailing_zeros: bool = False
    suppress_angular_leading_zeros: bool = False
    suppress_angular_trailing_zeros: bool = False
    suppress_zero_feet: bool = True
    suppress_zero_inches: bool = True

    def __post_init__(self):
        if self.linear_decimal_places < 0:
            raise DimensionError(
                f"Linear decimal places must be >= 0, got {self.linear_decimal_places}")
        if self.angular_decimal_places < 0:
            raise DimensionError(
                f"Angular decimal places must be >= 0, got {self.angular_decimal_places}")
        if self.fraction_height_scale <= 0:
            raise DimensionError(
                f"Fraction height scale must be > 0, got {self.fraction_height_scale}")

    @classmethod
    def from_style(cls, style, degrees_symbol: str = "°") -> 'UnitStyleFormat':
        """Build from a ``DimensionStyle`` or ``ResolvedStyle``.

        An angular precision of -1 takes the length precision.
        """
        angular = style.angular_precision
        if angular < 0:
            angular = style.length_precision
        return cls(
            linear_decimal_places=style.length_precision,
            angular_decimal_places=angular,
            decimal_separator=style.decimal_separator,
            degrees_symbol=degrees_symbol,
            fraction_type=style.fraction_type,
            fraction_height_scale=style.fraction_height_scale,
            suppress_linear_leading_zeros=style.suppress_linear_leading_zeros,
            suppress_linear_trailing_zeros=style.suppress_linear_trailing_zeros,
            suppress_angular_leading_zeros=style.suppress_angular_leading_zeros,
            suppress_angular_trailing_zeros=style.suppress_angular_trailing_zeros,
            suppress_zero_feet=style.suppress_zero_feet,
            suppress_zero_inches=style.suppress_zero_inches,
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _format_decimal(value: float, places: int, separator: str,
                    suppress_leading: bool, suppress_trailing: bool) -> str:
    text = f"{value:.{places}f}"
    if text.startswith("-") and float(text) == 0:
        text = text[1:]

    if suppress_trailing and "." in text:
        text = text.rstrip("0").rstrip(".")
    if suppress_leading:
        if text.startswith("0."):
            text = text[1:]
        elif text.startswith("-0."):
            text = "-" + text[2:]
    return text.replace(".", separator)


def _split_fraction(value: float, precision: int) -> Tuple[int, int, int]:
    """Whole part and reduced fraction num/den of a non-negative value.

    The denominator before reduction is ``2**precision``.
    """
    denominator = 2 ** precision
    whole = int(math.floor(value))
    numerator = int(round((value - whole) * denominator))
    if numerator == denominator:
        whole += 1
        numerator = 0
    if numerator == 0:
        return whole, 0, 1
    common = math.gcd(numerator, denominator)
    return whole, numerator // common, denominator // common


def _fraction_text(numerator: int, denominator: int, fmt: UnitStyleFormat) -> str:
    if fmt.fraction_type is FractionFormatType.NOT_STACKED:
        return f"{numerator}/{denominator}"
    mark = "#" if fmt.fraction_type is FractionFormatType.DIAGONAL else "/"
    stacked = f"\\S{numerator}{mark}{denominator};"
    if fmt.fraction_height_scale != 1.0:
        return f"{{\\H{fmt.fraction_height_scale}x;{stacked}}}"
    return stacked


def _join_fraction(whole: int, numerator: int, denominator: int, fmt: UnitStyleFormat) -> str:
    if numerator == 0:
        return str(whole)
    fraction = _fraction_text(numerator, denominator, fmt)
    if whole == 0:
        return fraction
    separator = " " if fmt.fraction_type is FractionFormatType.NOT_STACKED else ""
    return f"{whole}{separator}{fraction}"


def _feet_and_inches(sign: str, feet: int, inches_text: str, inches_zero: bool,
                     fmt: UnitStyleFormat) -> str:
    if feet == 0 and inches_zero:
        return f"0{fmt.inches_symbol}"
    if feet == 0 and fmt.suppress_zero_feet:
        text = f"{inches_text}{fmt.inches_symbol}"
    elif inches_zero and fmt.suppress_zero_inches:
        text = f"{feet}{fmt.feet_symbol}"
    else:
        text = f"{feet}{fmt.feet_symbol}{fmt.feet_inches_separator}{inches_text}{fmt.inches_symbol}"
    return sign + text


def _sign(value: float) -> str:
    return "-" if value < 0 else ""


# ---------------------------------------------------------------------------
# Linear formats
# ---------------------------------------------------------------------------

def to_decimal(value: float, fmt: UnitStyleFormat) -> str:
    return _format_decimal(value, fmt.linear_decimal_places, fmt.decimal_separator,
                           fmt.suppress_linear_leading_zeros,
                           fmt.suppress_linear_trailing_zeros)


def to_scientific(value: float, fmt: UnitStyleFormat) -> str:
    text = f"{value:.{fmt.linear_decimal_places}E}"
    return text.replace(".", fmt.decimal_separator)


def to_fractional(value: float, fmt: UnitStyleFormat) -> str:
    """Whole units and a fraction of denominator 2**precision."""
    whole, numerator, denominator = _split_fraction(abs(value), fmt.linear_decimal_places)
    if whole == 0 and numerator == 0:
        return "0"
    return _sign(value) + _join_fraction(whole, numerator, denominator, fmt)


def to_architectural(value: float, fmt: UnitStyleFormat) -> str:
    """Feet and inches with fractional inches (value in inches).

    Example: 14.5 -> ``1'-2\\S1/2;"``
    """
    magnitude = abs(value)
    feet = int(magnitude // 12)
    whole, numerator, denominator = _split_fraction(magnitude - feet * 12,
                                                    fmt.linear_decimal_places)
    if whole == 12:
        feet += 1
        whole = 0

    inches_text = _join_fraction(whole, numerator, denominator, fmt)
    inches_zero = whole == 0 and numerator == 0
    return _feet_and_inches(_sign(value), feet, inches_text, inches_zero, fmt)


def to_engineering(value: float, fmt: UnitStyleFormat) -> str:
    """Feet and decimal inches (value in inches).

    Example: 14.5 -> ``1'-2.50"``
    """
    magnitude = abs(value)
    feet = int(magnitude // 12)
    inches = round(magnitude - feet * 12, fmt.linear_decimal_places)
    if inches >= 12:
        feet += 1
        inches -= 12

    inches_text = _format_decimal(inches, fmt.linear_decimal_places, fmt.decimal_separator,
                                  fmt.suppress_linear_leading_zeros,
                                  fmt.suppress_linear_trailing_zeros)
    return _feet_and_inches(_sign(value), feet, inches_text, inches == 0, fmt)


def to_desktop(value: float, fmt: UnitStyleFormat) -> str:
    """Decimal notation following the current locale (grouping and separator)."""
    return locale.format_string(f"%.{fmt.linear_decimal_places}f", value, grouping=True)


_LINEAR_FORMATTERS = {
    LinearUnitType.SCIENTIFIC: to_scientific,
    LinearUnitType.DECIMAL: to_decimal,
    LinearUnitType.ENGINEERING: to_engineering,
    LinearUnitType.ARCHITECTURAL: to_architectural,
    LinearUnitType.FRACTIONAL: to_fractional,
    LinearUnitType.WINDOWS_DESKTOP: to_desktop,
}


def format_linear(value: float, unit_type: LinearUnitType, fmt: UnitStyleFormat) -> str:
    """Format a length in the given unit system."""
    return _LINEAR_FORMATTERS[unit_type](value, fmt)


# ---------------------------------------------------------------------------
# Angular formats (input in degrees)
# ---------------------------------------------------------------------------

def _angular_decimal(value: float, fmt: UnitStyleFormat) -> str:
    return _format_decimal(value, fmt.angular_decimal_places, fmt.decimal_separator,
                           fmt.suppress_angular_leading_zeros,
                           fmt.suppress_angular_trailing_zeros)


def to_decimal_degrees(angle_deg: float, fmt: UnitStyleFormat) -> str:
    return _angular_decimal(angle_deg, fmt) + fmt.degrees_symbol


def to_degrees_minutes_seconds(angle_deg: float, fmt: UnitStyleFormat) -> str:
    """Degrees, minutes and seconds.

    Precision 0 writes whole degrees, 1-2 adds minutes, 3-4 adds seconds,
    higher values add ``precision - 4`` decimals to the seconds.
    """
    precision = fmt.angular_decimal_places
    sign = _sign(angle_deg)
    value = abs(angle_deg)
    deg, mins, secs = fmt.degrees_symbol, fmt.minutes_symbol, fmt.seconds_symbol

    if precision == 0:
        return f"{sign}{int(round(value))}{deg}"
    if precision <= 2:
        degrees, minutes = divmod(int(round(value * 60)), 60)
        return f"{sign}{degrees}{deg}{minutes}{mins}"
    if precision <= 4:
        degrees, rest = divmod(int(round(value * 3600)), 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{sign}{degrees}{deg}{minutes}{mins}{seconds}{secs}"

    places = precision - 4
    total = round(value * 3600, places)
    degrees = int(total // 3600)
    minutes = int((total - degrees * 3600) // 60)
    seconds = round(total - degrees * 3600 - minutes * 60, places)
    if seconds >= 60:
        seconds -= 60
        minutes += 1
    if minutes >= 60:
        minutes -= 60
        degrees += 1
    seconds_text = _format_decimal(seconds, places, fmt.decimal_separator,
                                   fmt.suppress_angular_leading_zeros,
                                   fmt.suppress_angular_trailing_zeros)
    return f"{sign}{degrees}{deg}{minutes}{mins}{seconds_text}{secs}"


def to_gradians(angle_deg: float, fmt: UnitStyleFormat) -> str:
    return _angular_decimal(angle_deg * 400.0 / 360.0, fmt) + fmt.gradians_symbol


def to_radians(angle_deg: float, fmt: UnitStyleFormat) -> str:
    return _angular_decimal(math.radians(angle_deg), fmt) + fmt.radians_symbol


def format_angle(angle_deg: float, unit_type: AngleUnitType, fmt: UnitStyleFormat) -> str:
    """Format an angle given in degrees."""
    if unit_type is AngleUnitType.DEGREES_MINUTES_SECONDS:
        return to_degrees_minutes_seconds(angle_deg, fmt)
    if unit_type is AngleUnitType.GRADIANS:
        return to_gradians(angle_deg, fmt)
    if unit_type is AngleUnitType.RADIANS:
        return to_radians(angle_deg, fmt)
    if unit_type is AngleUnitType.SURVEYOR_UNITS:
        # No surveyor notation (N45d0'0"E); written as decimal degrees.
        logger.debug("Surveyor units not implemented, using decimal degrees")
    return to_decimal_degrees(angle_deg, fmt)
