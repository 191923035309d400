"""
Pytest configuration and fixtures for dxf_dimensions.

Provides:
- Dimension style fixtures
- Sample dimensions of every type
- Global config isolation
- Assertion helpers for points and blocks
"""

import logging
from typing import Sequence

import numpy as np
import pytest

from dxf_dimensions import config as cfg
from dxf_dimensions.dimensions import (
    AlignedDimension,
    Angular2LineDimension,
    Angular3PointDimension,
    ArcLengthDimension,
    DiametricDimension,
    LinearDimension,
    OrdinateAxis,
    OrdinateDimension,
    RadialDimension,
)
from dxf_dimensions.logging_config import PACKAGE_LOGGER
from dxf_dimensions.styles.dimension_style import DimensionStyle


# ============================================================================
# Config isolation
# ============================================================================

_CONFIG_NAMES = [name for name in dir(cfg) if name.isupper()]


@pytest.fixture(autouse=True)
def restore_config():
    """Undo changes to config.py globals made by a test."""
    saved = {name: getattr(cfg, name) for name in _CONFIG_NAMES}
    yield
    for name, value in saved.items():
        setattr(cfg, name, value)


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() so later tests still propagate to caplog."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ============================================================================
# Style fixtures
# ============================================================================

@pytest.fixture
def standard_style() -> DimensionStyle:
    """The "Standard" style with its default values."""
    return DimensionStyle("Standard")


@pytest.fixture
def iso_style() -> DimensionStyle:
    """Metric style with round numbers for geometry assertions."""
    style = DimensionStyle("ISO")
    style.arrow_size = 1.0
    style.text_height = 2.5
    style.text_offset = 0.5
    style.ext_line_offset = 0.5
    style.ext_line_extend = 1.0
    style.center_mark_size = 1.0
    return style


# ============================================================================
# Dimension fixtures
# ============================================================================

@pytest.fixture
def linear_dim(iso_style) -> LinearDimension:
    """Horizontal 10 unit linear dimension, dimension line at y=2."""
    return LinearDimension((0, 0), (10, 0), 2.0, style=iso_style)


@pytest.fixture
def aligned_dim(iso_style) -> AlignedDimension:
    """3-4-5 aligned dimension."""
    return AlignedDimension((0, 0), (3, 4), 1.0, style=iso_style)


@pytest.fixture
def angular_dim(iso_style) -> Angular2LineDimension:
    """Right angle between the positive x and y axes."""
    return Angular2LineDimension((0, 0), (10, 0), (0, 0), (0, 10), 5.0, style=iso_style)


@pytest.fixture
def angular_3point_dim(iso_style) -> Angular3PointDimension:
    """Right angle at the origin, arc radius 5."""
    return Angular3PointDimension((0, 0), (10, 0), (0, 10), 5.0, style=iso_style)


@pytest.fixture
def diametric_dim(iso_style) -> DiametricDimension:
    """Circle of radius 5 at the origin."""
    return DiametricDimension((0, 0), (5, 0), style=iso_style)


@pytest.fixture
def radial_dim(iso_style) -> RadialDimension:
    """Circle of radius 5 at the origin."""
    return RadialDimension((0, 0), (5, 0), style=iso_style)


@pytest.fixture
def arc_length_dim(iso_style) -> ArcLengthDimension:
    """Quarter arc of radius 4."""
    return ArcLengthDimension((0, 0), 4.0, 0.0, 90.0, 1.0, style=iso_style)


@pytest.fixture
def ordinate_dim(iso_style) -> OrdinateDimension:
    """X ordinate of a feature at (4, 7)."""
    return OrdinateDimension((0, 0), (4, 7), 2.5, OrdinateAxis.X, style=iso_style)


@pytest.fixture
def all_dimensions(linear_dim, aligned_dim, angular_dim, angular_3point_dim,
                   diametric_dim, radial_dim, arc_length_dim, ordinate_dim):
    """One dimension of every type."""
    return [linear_dim, aligned_dim, angular_dim, angular_3point_dim,
            diametric_dim, radial_dim, arc_length_dim, ordinate_dim]


# ============================================================================
# Assertion Helpers
# ============================================================================

def assert_point(actual: Sequence[float], expected: Sequence[float], tol: float = 1e-9) -> None:
    """Assert two points are equal within ``tol``."""
    actual = np.asarray(actual, dtype=float)
    expected = np.asarray(expected, dtype=float)
    assert actual.shape == expected.shape, f"shape {actual.shape} != {expected.shape}"
    assert np.allclose(actual, expected, atol=tol), f"{actual.tolist()} != {expected.tolist()}"
