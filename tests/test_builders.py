"""
Unit tests for dxf_dimensions.dimensions.builders.

Tests:
- Block content per dimension type
- Arrowheads, trimming and no-trim shapes
- Text labels and suppression
- Center marks and Defpoints markers
- Builder registry
"""

import logging
import math

import numpy as np
import pytest

from dxf_dimensions import config as cfg
from dxf_dimensions.dimensions import LinearDimension, build_dimension_block
from dxf_dimensions.dimensions.builders import (
    arrow_blocks,
    center_cross,
    upright_rotation,
)
from dxf_dimensions.entities import Arc, Insert, Line, MText, Point, Solid
from dxf_dimensions.entities.primitives import MTextAttachmentPoint
from dxf_dimensions.errors import UnsupportedDimensionError
from dxf_dimensions.styles import ResolvedStyle
from tests.conftest import assert_point


def _texts(block):
    return [entity.text for entity in block.query(MText)]


class TestLinearBuilder:
    """Tests for linear and aligned blocks."""

    def test_block_attributes(self, linear_dim):
        """The block is anonymous and in the dimension plane."""
        block = build_dimension_block(linear_dim, "*D1")
        assert block.name == "*D1"
        assert block.anonymous
        assert block.normal == (0.0, 0.0, 1.0)
        assert block.elevation == 0.0

    def test_dimension_line_trimmed(self, linear_dim):
        """The dimension line stops one arrow size short of each tip."""
        block = build_dimension_block(linear_dim, "*D1")
        dim_line = [line for line in block.query(Line) if line.start[1] == pytest.approx(2.0)
                    and line.end[1] == pytest.approx(2.0)][0]
        assert_point(dim_line.start, (1, 2))
        assert_point(dim_line.end, (9, 2))

    def test_arrowheads_face_each_other(self, linear_dim):
        """Tips at the line ends, bodies towards the middle."""
        first, second = build_dimension_block(linear_dim, "*D1").query(Solid)
        assert_point(first.first, (0, 2))
        assert first.second[0] == pytest.approx(1.0)
        assert_point(second.first, (10, 2))
        assert second.second[0] == pytest.approx(9.0)

    def test_extension_lines(self, linear_dim):
        """Extension lines start off the feature and pass the dimension line."""
        lines = build_dimension_block(linear_dim, "*D1").query(Line)
        verticals = [line for line in lines if abs(line.start[0] - line.end[0]) < 1e-9]
        assert len(verticals) == 2
        assert_point(verticals[0].start, (0, 0.5))
        assert_point(verticals[0].end, (0, 3))
        assert_point(verticals[1].start, (10, 0.5))

    def test_extension_lines_suppressed(self, linear_dim):
        """DIMSE1/DIMSE2 remove the extension lines."""
        linear_dim.style.ext_line1_off = True
        linear_dim.style.ext_line2_off = True
        assert len(build_dimension_block(linear_dim, "*D1").query(Line)) == 1

    def test_text(self, linear_dim):
        """The measured value sits above the dimension line."""
        text = build_dimension_block(linear_dim, "*D1").query(MText)[0]
        assert text.text == "10.00"
        assert_point(text.position, (5, 2.5))
        assert text.height == pytest.approx(2.5)
        assert text.attachment_point is MTextAttachmentPoint.BOTTOM_CENTER

    def test_upside_down_text_flipped(self, iso_style):
        """A dimension line pointing left still reads left to right."""
        dim = LinearDimension((0, 0), (10, 0), 2.0, rotation=180.0, style=iso_style)
        text = build_dimension_block(dim, "*D1").query(MText)[0]
        assert text.rotation == pytest.approx(0.0, abs=1e-9)
        assert text.attachment_point is MTextAttachmentPoint.TOP_CENTER

    def test_suppressed_text(self, linear_dim):
        """A single space user text draws no label."""
        linear_dim.user_text = " "
        assert build_dimension_block(linear_dim, "*D1").query(MText) == []

    def test_user_text(self, linear_dim):
        """User text with the measurement token."""
        linear_dim.user_text = "<> TYP"
        assert _texts(build_dimension_block(linear_dim, "*D1")) == ["10.00 TYP"]

    def test_defpoints(self, linear_dim):
        """Reference points are marked on the non-plotting layer."""
        markers = build_dimension_block(linear_dim, "*D1").on_layer(cfg.DEFPOINTS_LAYER)
        assert len(markers) == 3
        assert all(isinstance(marker, Point) for marker in markers)
        assert all(not marker.style.layer.plot for marker in markers)

    def test_scale(self, linear_dim):
        """DIMSCALE multiplies every size."""
        linear_dim.style_overrides["dim_scale_overall"] = 2.0
        block = build_dimension_block(linear_dim, "*D1")
        assert block.query(MText)[0].height == pytest.approx(5.0)
        assert block.query(Solid)[0].second[0] == pytest.approx(2.0)

    def test_build_is_idempotent(self, linear_dim):
        """Building twice gives the same block."""
        assert build_dimension_block(linear_dim, "*D1") == build_dimension_block(linear_dim, "*D1")

    def test_anchor_points_written(self, linear_dim):
        """Building writes the definition and mid text points."""
        linear_dim.definition_point[:] = 0.0
        build_dimension_block(linear_dim, "*D1")
        assert_point(linear_dim.definition_point, (10, 2, 0))

    def test_build_block_keeps_block(self, aligned_dim):
        """Dimension.build_block stores the result."""
        block = aligned_dim.build_block("*D7")
        assert aligned_dim.block is block


class TestArrowheadBlocks:
    """Tests for arrowhead choice and no-trim shapes."""

    def test_shared_block(self, iso_style):
        """Without DIMSAH both ends use DIMBLK."""
        iso_style.arrow_block = "_DOT"
        iso_style.dim_arrow1 = "_OPEN"
        assert arrow_blocks(ResolvedStyle(iso_style)) == ("_DOT", "_DOT")

    def test_separate_blocks(self, iso_style):
        """With DIMSAH each end has its own block."""
        iso_style.separate_arrow_blocks = True
        iso_style.dim_arrow1 = "_OPEN"
        iso_style.dim_arrow2 = "_DOT"
        assert arrow_blocks(ResolvedStyle(iso_style)) == ("_OPEN", "_DOT")

    def test_block_arrows_inserted(self, linear_dim):
        """Named arrowheads are inserted at arrow size."""
        linear_dim.style.arrow_block = "_OPEN"
        inserts = build_dimension_block(linear_dim, "*D1").query(Insert)
        assert [insert.block.name for insert in inserts] == ["_OPEN", "_OPEN"]
        assert inserts[0].scale == pytest.approx(1.0)
        assert inserts[0].rotation == pytest.approx(180.0)
        assert inserts[1].rotation == pytest.approx(0.0)

    def test_no_trim_extends_line(self, linear_dim):
        """Ticks keep the line, extended by DIMDLE past the tips."""
        linear_dim.style.arrow_block = "_ARCHTICK"
        linear_dim.style.dim_line_extend = 0.5
        lines = build_dimension_block(linear_dim, "*D1").query(Line)
        dim_line = [line for line in lines if line.start[1] == line.end[1]][0]
        assert_point(dim_line.start, (-0.5, 2))
        assert_point(dim_line.end, (10.5, 2))


class TestAngularBuilder:
    """Tests for angular and arc length blocks."""

    def test_dimension_arc(self, angular_dim):
        """The arc runs at the offset radius, trimmed at both ends."""
        arc = build_dimension_block(angular_dim, "*D1").query(Arc)[0]
        assert arc.radius == pytest.approx(5.0)
        assert_point(arc.center, (0, 0))
        assert 0.0 < arc.start_angle < 45.0
        assert 45.0 < arc.end_angle < 90.0

    def test_text(self, angular_dim):
        """The angle in degrees."""
        assert _texts(build_dimension_block(angular_dim, "*D1")) == ["90°"]

    def test_two_line_markers(self, angular_dim):
        """The four line end points are markers."""
        block = build_dimension_block(angular_dim, "*D1")
        assert len(block.on_layer(cfg.DEFPOINTS_LAYER)) == 4

    def test_three_point(self, angular_3point_dim):
        """Three markers, one arc and two arrows."""
        block = build_dimension_block(angular_3point_dim, "*D1")
        assert len(block.on_layer(cfg.DEFPOINTS_LAYER)) == 3
        assert len(block.query(Arc)) == 1
        assert len(block.query(Solid)) == 2

    def test_arc_length_symbol(self, arc_length_dim):
        """The arc length label starts with the arc symbol."""
        text = _texts(build_dimension_block(arc_length_dim, "*D1"))[0]
        assert text.startswith("⌒")
        assert text.endswith("6.28")


class TestRadialBuilder:
    """Tests for diametric and radial blocks."""

    def test_diameter_prefix(self, diametric_dim):
        """Diameters get the diameter sign."""
        assert _texts(build_dimension_block(diametric_dim, "*D1")) == ["Ø10.00"]

    def test_radius_prefix(self, radial_dim):
        """Radii get the R prefix."""
        assert _texts(build_dimension_block(radial_dim, "*D1")) == ["R5.00"]

    def test_control_code_prefix(self, diametric_dim):
        """With DXF codes the diameter sign is %%c."""
        cfg.USE_UNICODE_SYMBOLS = False
        assert _texts(build_dimension_block(diametric_dim, "*D1")) == ["%%c10.00"]

    def test_center_mark(self, radial_dim):
        """A positive DIMCEN draws a cross next to the dimension line."""
        assert len(build_dimension_block(radial_dim, "*D1").query(Line)) == 3

    def test_center_lines(self, radial_dim):
        """A negative DIMCEN adds center lines."""
        radial_dim.style.center_mark_size = -1.0
        assert len(build_dimension_block(radial_dim, "*D1").query(Line)) == 7

    def test_no_center_mark(self, radial_dim):
        """A zero DIMCEN draws no mark."""
        radial_dim.style.center_mark_size = 0.0
        assert len(build_dimension_block(radial_dim, "*D1").query(Line)) == 1

    def test_single_arrow(self, diametric_dim):
        """Only the measured point gets an arrowhead."""
        block = build_dimension_block(diametric_dim, "*D1")
        solids = block.query(Solid)
        assert len(solids) == 1
        assert_point(solids[0].first, (5, 0))

    def test_center_cross_helper(self, iso_style):
        """The cross is centered on the given point."""
        lines = center_cross((2, 3), 5.0, ResolvedStyle(iso_style))
        assert_point(lines[0].start, (2, 2))
        assert_point(lines[1].end, (3, 3))


class TestOrdinateBuilder:
    """Tests for ordinate blocks."""

    def test_leader(self, ordinate_dim):
        """The leader starts one DIMEXO from the feature."""
        block = build_dimension_block(ordinate_dim, "*D1")
        leader = block.query(Line)[0]
        assert_point(leader.start, (4, 7.5))
        assert_point(leader.end, (4, 9.5))

    def test_text(self, ordinate_dim):
        """The ordinate value at the leader end."""
        assert _texts(build_dimension_block(ordinate_dim, "*D1")) == ["4.00"]


class TestRegistry:
    """Tests for the builder registry."""

    def test_every_type_builds(self, all_dimensions):
        """Every dimension type has a builder."""
        for index, dim in enumerate(all_dimensions):
            block = build_dimension_block(dim, f"*D{index}")
            assert len(block) > 0

    def test_anchor_points_idempotent(self, all_dimensions):
        """A second build of an unchanged dimension gives the same anchors and block."""
        for dim in all_dimensions:
            first = build_dimension_block(dim, "*D1")
            definition_point = dim.definition_point.copy()
            mid_text_point = dim.mid_text_point.copy()

            second = build_dimension_block(dim, "*D1")

            np.testing.assert_allclose(dim.definition_point, definition_point, atol=1e-9)
            np.testing.assert_allclose(dim.mid_text_point, mid_text_point, atol=1e-9)
            assert [type(e) for e in second] == [type(e) for e in first]

    def test_suppressed_text_every_type(self, all_dimensions):
        """A single space user text removes the label of every type."""
        for dim in all_dimensions:
            assert build_dimension_block(dim, "*D1").query(MText)
            dim.user_text = " "
            assert build_dimension_block(dim, "*D1").query(MText) == [], dim.dimension_type

    def test_build_timed(self, linear_dim, caplog):
        """Block building is logged with its duration."""
        with caplog.at_level(logging.DEBUG, logger="dxf_dimensions"):
            build_dimension_block(linear_dim, "*D1")
        assert "Completed: Build dimension block" in caplog.text

    def test_unknown_type(self):
        """Objects without a known type are rejected."""
        class Fake:
            dimension_type = None

        with pytest.raises(UnsupportedDimensionError, match="Fake"):
            build_dimension_block(Fake(), "*D1")

    @pytest.mark.parametrize("degrees, expected, flipped", [
        (0.0, 0.0, False),
        (90.0, 90.0, False),
        (135.0, -45.0, True),
        (270.0, 90.0, True),
        (300.0, 300.0, False),
    ])
    def test_upright_rotation(self, degrees, expected, flipped):
        """Rotations in (90, 270] are turned by half a turn."""
        rotation, was_flipped = upright_rotation(math.radians(degrees))
        assert math.degrees(rotation) == pytest.approx(expected)
        assert was_flipped is flipped
