"""
Unit tests for dxf_dimensions.units.formats module.

Tests:
- Decimal notation with separators and zero suppression
- Fractional, architectural and engineering notation
- Angle notations
"""

import pytest

from dxf_dimensions.errors import DimensionError
from dxf_dimensions.styles import AngleUnitType, DimensionStyle, FractionFormatType, LinearUnitType
from dxf_dimensions.units import UnitStyleFormat, format_angle, format_linear


class TestUnitStyleFormat:
    """Tests for UnitStyleFormat construction."""

    def test_negative_places_rejected(self):
        """Decimal places cannot be negative."""
        with pytest.raises(DimensionError):
            UnitStyleFormat(linear_decimal_places=-1)

    def test_from_style(self):
        """Style values are copied; angular -1 takes the length precision."""
        style = DimensionStyle()
        style.length_precision = 3
        style.angular_precision = -1
        style.decimal_separator = ","
        fmt = UnitStyleFormat.from_style(style, degrees_symbol="%%d")
        assert fmt.linear_decimal_places == 3
        assert fmt.angular_decimal_places == 3
        assert fmt.decimal_separator == ","
        assert fmt.degrees_symbol == "%%d"


class TestDecimal:
    """Tests for decimal notation."""

    def test_default(self):
        """Two decimals with a point."""
        assert format_linear(10.0, LinearUnitType.DECIMAL, UnitStyleFormat()) == "10.00"

    def test_separator(self):
        """The separator replaces the point."""
        fmt = UnitStyleFormat(decimal_separator=",")
        assert format_linear(2.5, LinearUnitType.DECIMAL, fmt) == "2,50"

    def test_suppress_trailing(self):
        """Trailing zeros and a bare separator are dropped."""
        fmt = UnitStyleFormat(suppress_linear_trailing_zeros=True)
        assert format_linear(10.5, LinearUnitType.DECIMAL, fmt) == "10.5"
        assert format_linear(10.0, LinearUnitType.DECIMAL, fmt) == "10"

    def test_suppress_leading(self):
        """The leading zero of values below one is dropped."""
        fmt = UnitStyleFormat(suppress_linear_leading_zeros=True)
        assert format_linear(0.5, LinearUnitType.DECIMAL, fmt) == ".50"
        assert format_linear(-0.5, LinearUnitType.DECIMAL, fmt) == "-.50"

    def test_no_negative_zero(self):
        """Values rounding to zero lose their sign."""
        assert format_linear(-0.001, LinearUnitType.DECIMAL, UnitStyleFormat()) == "0.00"

    def test_scientific(self):
        """Scientific notation uses the precision for the mantissa."""
        assert format_linear(1234.5, LinearUnitType.SCIENTIFIC, UnitStyleFormat()) == "1.23E+03"


class TestFractional:
    """Tests for fractional and architectural notation."""

    def test_stacked_fraction(self):
        """Fractions use MText stacking with denominator 2**precision."""
        fmt = UnitStyleFormat(linear_decimal_places=3)
        assert format_linear(2.375, LinearUnitType.FRACTIONAL, fmt) == "2\\S3/8;"

    def test_fraction_reduced(self):
        """Fractions are reduced."""
        fmt = UnitStyleFormat(linear_decimal_places=4)
        assert format_linear(0.5, LinearUnitType.FRACTIONAL, fmt) == "\\S1/2;"

    def test_not_stacked(self):
        """NOT_STACKED writes a plain fraction after a space."""
        fmt = UnitStyleFormat(linear_decimal_places=3,
                              fraction_type=FractionFormatType.NOT_STACKED)
        assert format_linear(2.375, LinearUnitType.FRACTIONAL, fmt) == "2 3/8"

    def test_diagonal(self):
        """DIAGONAL uses the # stacking mark."""
        fmt = UnitStyleFormat(linear_decimal_places=3,
                              fraction_type=FractionFormatType.DIAGONAL)
        assert format_linear(2.375, LinearUnitType.FRACTIONAL, fmt) == "2\\S3#8;"

    def test_fraction_height(self):
        """A fraction height scale wraps the stack in a height code."""
        fmt = UnitStyleFormat(linear_decimal_places=1, fraction_height_scale=0.5)
        assert format_linear(1.5, LinearUnitType.FRACTIONAL, fmt) == "1{\\H0.5x;\\S1/2;}"

    def test_rounds_up_to_whole(self):
        """A fraction rounding to one carries into the whole part."""
        fmt = UnitStyleFormat(linear_decimal_places=1)
        assert format_linear(2.9, LinearUnitType.FRACTIONAL, fmt) == "3"

    def test_architectural(self):
        """Feet and fractional inches."""
        assert format_linear(14.5, LinearUnitType.ARCHITECTURAL,
                             UnitStyleFormat()) == "1'-2\\S1/2;\""

    def test_architectural_zero_suppression(self):
        """Zero inches and zero feet are suppressed by default."""
        fmt = UnitStyleFormat()
        assert format_linear(12.0, LinearUnitType.ARCHITECTURAL, fmt) == "1'"
        assert format_linear(6.0, LinearUnitType.ARCHITECTURAL, fmt) == "6\""

    def test_architectural_zero_feet_kept(self):
        """With zero feet kept, 0' is written."""
        fmt = UnitStyleFormat(suppress_zero_feet=False)
        assert format_linear(6.0, LinearUnitType.ARCHITECTURAL, fmt) == "0'-6\""

    def test_engineering(self):
        """Feet and decimal inches."""
        assert format_linear(14.5, LinearUnitType.ENGINEERING,
                             UnitStyleFormat()) == "1'-2.50\""


class TestAngles:
    """Tests for angular notation."""

    def test_decimal_degrees(self):
        """Decimal degrees with the degree symbol."""
        assert format_angle(90.0, AngleUnitType.DECIMAL_DEGREES, UnitStyleFormat()) == "90°"

    def test_decimal_degrees_precision(self):
        """Angular decimal places apply."""
        fmt = UnitStyleFormat(angular_decimal_places=2)
        assert format_angle(45.5, AngleUnitType.DECIMAL_DEGREES, fmt) == "45.50°"

    def test_degrees_minutes(self):
        """Precision 1-2 writes degrees and minutes."""
        fmt = UnitStyleFormat(angular_decimal_places=2)
        assert format_angle(30.25, AngleUnitType.DEGREES_MINUTES_SECONDS, fmt) == "30°15'"

    def test_degrees_minutes_seconds(self):
        """Precision 3-4 adds seconds."""
        fmt = UnitStyleFormat(angular_decimal_places=4)
        assert format_angle(30.2575, AngleUnitType.DEGREES_MINUTES_SECONDS, fmt) == "30°15'27\""

    def test_gradians(self):
        """A right angle is 100 gradians."""
        assert format_angle(90.0, AngleUnitType.GRADIANS, UnitStyleFormat()) == "100g"

    def test_radians(self):
        """Radians with the r suffix."""
        fmt = UnitStyleFormat(angular_decimal_places=4)
        assert format_angle(180.0, AngleUnitType.RADIANS, fmt) == "3.1416r"

    def test_surveyor_falls_back(self):
        """Surveyor units are written as decimal degrees."""
        assert format_angle(45.0, AngleUnitType.SURVEYOR_UNITS, UnitStyleFormat()) == "45°"
