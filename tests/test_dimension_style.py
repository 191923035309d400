"""
Unit tests for dxf_dimensions.styles (dimension style and overrides).

Tests:
- Defaults and per-property validation
- Copy and dict export
- Override map: validation, observers, copy
- ResolvedStyle lookup order
"""

import copy

import pytest

from dxf_dimensions.entities.primitives import Block
from dxf_dimensions.errors import DimensionError, StyleValueError
from dxf_dimensions.styles import (
    DXF_VARIABLES,
    DimensionStyle,
    DimensionStyleOverride,
    DimensionStyleOverrideType,
    LinearUnitType,
    ResolvedStyle,
    StyleOverrides,
    TextVerticalPlacement,
    validate_style_value,
)


class TestDimensionStyleDefaults:
    """Tests for the Standard style values."""

    def test_standard_values(self):
        """Defaults reproduce the DXF Standard style."""
        style = DimensionStyle()
        assert style.name == "Standard"
        assert style.arrow_size == 0.18
        assert style.text_height == 0.18
        assert style.text_offset == 0.09
        assert style.ext_line_offset == 0.0625
        assert style.length_precision == 2
        assert style.decimal_separator == "."
        assert style.dim_length_units is LinearUnitType.DECIMAL
        assert style.text_vertical_placement is TextVerticalPlacement.ABOVE

    def test_is_reserved(self):
        """Only the Standard style is reserved."""
        assert DimensionStyle("standard").is_reserved
        assert not DimensionStyle("ISO-25").is_reserved

    def test_dxf_variables_cover_real_properties(self):
        """Every mapped property exists on the style."""
        style = DimensionStyle()
        for prop, variable in DXF_VARIABLES.items():
            assert hasattr(style, prop)
            assert variable.startswith("DIM")


class TestDimensionStyleValidation:
    """Tests for assignment validation."""

    def test_negative_size_rejected(self):
        """Sizes cannot be negative; the message names the property."""
        style = DimensionStyle()
        with pytest.raises(StyleValueError, match="arrow_size"):
            style.arrow_size = -1.0

    def test_zero_text_height_rejected(self):
        """The text height must be positive."""
        with pytest.raises(StyleValueError, match="greater than zero"):
            DimensionStyle().text_height = 0

    def test_ints_widened_to_float(self):
        """Integer sizes are stored as floats."""
        style = DimensionStyle()
        style.arrow_size = 3
        assert isinstance(style.arrow_size, float)

    def test_bool_is_not_a_number(self):
        """Booleans are not accepted as numbers."""
        with pytest.raises(StyleValueError):
            DimensionStyle().arrow_size = True

    def test_center_mark_may_be_negative(self):
        """A negative center mark size selects center lines."""
        style = DimensionStyle()
        style.center_mark_size = -0.09
        assert style.center_mark_size == -0.09

    def test_precision_limits(self):
        """Length precision >= 0, angular precision >= -1."""
        style = DimensionStyle()
        style.angular_precision = -1
        with pytest.raises(StyleValueError):
            style.angular_precision = -2
        with pytest.raises(StyleValueError):
            style.length_precision = -1

    def test_decimal_separator_single_character(self):
        """The decimal separator is one character."""
        with pytest.raises(StyleValueError, match="single character"):
            DimensionStyle().decimal_separator = ".."

    def test_scale_linear_non_zero(self):
        """DIMLFAC may be negative but not zero."""
        style = DimensionStyle()
        style.dim_scale_linear = -2.0
        with pytest.raises(StyleValueError, match="different than zero"):
            style.dim_scale_linear = 0.0

    def test_roundoff_minimum(self):
        """A non-zero roundoff below the minimum is rejected."""
        style = DimensionStyle()
        style.dim_roundoff = 0.25
        with pytest.raises(StyleValueError):
            style.dim_roundoff = 1e-9

    def test_enum_type_checked(self):
        """Enum properties need enum members."""
        with pytest.raises(StyleValueError, match="LinearUnitType"):
            DimensionStyle().dim_length_units = 2

    def test_arrow_values(self):
        """Arrows accept None, predefined names (upper-cased) and blocks."""
        style = DimensionStyle()
        style.arrow_block = "_dot"
        assert style.arrow_block == "_DOT"
        style.dim_arrow1 = Block("CUSTOM")
        assert style.dim_arrow1.name == "CUSTOM"
        with pytest.raises(StyleValueError, match="predefined"):
            style.dim_arrow2 = "_ROCKET"

    def test_color_range(self):
        """ACI colors run 0..256."""
        with pytest.raises(StyleValueError, match="ACI"):
            DimensionStyle().text_color = 300

    def test_empty_name_rejected(self):
        """Style names need at least one character."""
        with pytest.raises(StyleValueError):
            DimensionStyle("")

    def test_unknown_property(self):
        """validate_style_value rejects unknown properties."""
        with pytest.raises(DimensionError, match="Unknown"):
            validate_style_value("arrow_colour", 1)


class TestDimensionStyleCopy:
    """Tests for copy and to_dict."""

    def test_copy_is_independent(self):
        """Copies do not share values."""
        style = DimensionStyle("A")
        clone = style.copy("B")
        clone.arrow_size = 5.0
        assert clone.name == "B"
        assert style.arrow_size == 0.18

    def test_to_dict_names(self):
        """Enums export by member name, blocks by block name."""
        style = DimensionStyle()
        style.dim_arrow1 = Block("CUSTOM")
        data = style.to_dict()
        assert data["dim_length_units"] == "DECIMAL"
        assert data["dim_arrow1"] == "CUSTOM"
        assert data["arrow_size"] == 0.18


class TestStyleOverrides:
    """Tests for the override map."""

    def test_override_validated(self):
        """Override values go through the style validation."""
        with pytest.raises(StyleValueError):
            DimensionStyleOverride(DimensionStyleOverrideType.ARROW_SIZE, -1.0)

    def test_name_not_overridable(self):
        """The style name has no override type."""
        with pytest.raises(DimensionError, match="overridable"):
            StyleOverrides()["name"] = "X"

    def test_string_and_enum_keys(self):
        """Property names and enum members address the same entry."""
        overrides = StyleOverrides()
        overrides["arrow_size"] = 2.0
        assert DimensionStyleOverrideType.ARROW_SIZE in overrides
        assert overrides[DimensionStyleOverrideType.ARROW_SIZE].value == 2.0
        assert "text_height" not in overrides
        assert 42 not in overrides

    def test_mismatched_override_rejected(self):
        """An override cannot be stored under another type."""
        override = DimensionStyleOverride(DimensionStyleOverrideType.ARROW_SIZE, 2.0)
        with pytest.raises(DimensionError):
            StyleOverrides()["text_height"] = override

    def test_observer_notified(self):
        """Subscribers are called with the changed type."""
        overrides = StyleOverrides()
        seen = []
        overrides.subscribe(seen.append)
        overrides["arrow_size"] = 2.0
        overrides.remove("arrow_size")
        assert seen == [DimensionStyleOverrideType.ARROW_SIZE] * 2

    def test_add_equal_is_noop(self):
        """Adding an equal override reports False and notifies nobody."""
        overrides = StyleOverrides()
        override = DimensionStyleOverride(DimensionStyleOverrideType.ARROW_SIZE, 2.0)
        assert overrides.add(override)
        seen = []
        overrides.subscribe(seen.append)
        assert not overrides.add(DimensionStyleOverride("arrow_size", 2.0))
        assert seen == []

    def test_remove_missing(self):
        """Removing an absent override reports False."""
        assert not StyleOverrides().remove("arrow_size")

    def test_clear_notifies_each(self):
        """clear() notifies every removed type."""
        overrides = StyleOverrides()
        overrides["arrow_size"] = 2.0
        overrides["text_height"] = 3.0
        seen = []
        overrides.subscribe(seen.append)
        overrides.clear()
        assert len(overrides) == 0
        assert len(seen) == 2

    def test_deepcopy_drops_subscribers(self):
        """Copies keep values but not observers."""
        overrides = StyleOverrides()
        overrides["arrow_size"] = 2.0
        seen = []
        overrides.subscribe(seen.append)
        clone = copy.deepcopy(overrides)
        clone["arrow_size"] = 3.0
        assert seen == []
        assert overrides["arrow_size"].value == 2.0


class TestResolvedStyle:
    """Tests for override-first lookup."""

    def test_override_wins(self):
        """An override replaces the base value."""
        style = DimensionStyle()
        overrides = StyleOverrides()
        overrides["arrow_size"] = 2.0
        resolved = ResolvedStyle(style, overrides)
        assert resolved.arrow_size == 2.0
        assert resolved.text_height == style.text_height
        assert resolved.has_override("arrow_size")

    def test_base_changes_visible(self):
        """Without override the base style is read live."""
        style = DimensionStyle()
        resolved = ResolvedStyle(style)
        style.text_height = 5.0
        assert resolved.text_height == 5.0
        assert not resolved.has_override("text_height")

    def test_scale(self):
        """scale reads DIMSCALE through the overrides."""
        overrides = StyleOverrides()
        overrides["dim_scale_overall"] = 4.0
        assert ResolvedStyle(DimensionStyle(), overrides).scale == 4.0

    def test_unknown_attribute(self):
        """Non style attributes raise AttributeError."""
        with pytest.raises(AttributeError):
            ResolvedStyle(DimensionStyle()).colour
