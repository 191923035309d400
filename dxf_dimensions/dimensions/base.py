"""
Common record of all dimension types.

A dimension holds its reference points in world coordinates, a plane
normal, a style reference with a sparse override map and the text
options. Derived points live in the object coordinate system (OCS) of
the normal:

- ``definition_point``: world point written to DXF group 10;
- ``mid_text_point``: OCS point (x, y, elevation), DXF group 11;
- ``text_reference_point``: OCS 2D text anchor, computed unless set
  manually.

Concrete types implement ``measurement``, ``compute_geometry`` (all OCS
points the block builder and ``update`` need) and
``_move_dimension_line``.
"""

import copy
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
from numpy.typing import NDArray

from dxf_dimensions import config as cfg
from dxf_dimensions.entities.primitives import Block, Layer, MTextAttachmentPoint
from dxf_dimensions.errors import DimensionError
from dxf_dimensions.geometry.ocs import ObjectCoordinateSystem
from dxf_dimensions.geometry.vectors import PointLike, are_equal, as_point, is_zero
from dxf_dimensions.styles.dimension_style import DimensionStyle, FitTextMove
from dxf_dimensions.styles.overrides import ResolvedStyle, StyleOverrides

logger = logging.getLogger(__name__)

_DEFAULT_STYLE = object()


class DimensionType(Enum):
    """Dimension kinds (DXF group 70 type values)."""
    LINEAR = 0
    ALIGNED = 1
    ANGULAR = 2
    DIAMETER = 3
    RADIUS = 4
    ANGULAR_3POINT = 5
    ORDINATE = 6
    ARC_LENGTH = 7


def world_point(point: PointLike) -> NDArray[np.float64]:
    """Copy of ``point`` as a 3D world point (2D input gets z=0)."""
    return as_point(point, 3)


def check_offset(offset: float, allow_negative: bool = True) -> float:
    """Validate a dimension offset.

    Raises:
        DimensionError: for a zero offset, or a negative one when not allowed.
    """
    offset = float(offset)
    if allow_negative:
        if is_zero(offset):
            raise DimensionError("The offset must be different than zero")
    elif offset < 0:
        raise DimensionError(f"The offset must be equal or greater than zero, got {offset}")
    return offset


def check_reference_points(first_point: NDArray[np.float64], second_point: NDArray[np.float64]) -> None:
    """Reject a zero length reference segment."""
    if are_equal(first_point, second_point):
        raise DimensionError("The first and the second reference points cannot be the same")


class Dimension(ABC):
    """Base of the dimension types.

    Args:
        style: dimension style. Omitted: a private "Standard" style owned by
            this dimension. An explicit None is rejected.
        normal: plane normal of the dimension.

    Raises:
        DimensionError: if ``style`` is None or ``normal`` is zero.
    """

    dimension_type: DimensionType
    is_angular = False

    def __init__(self, style: Any = _DEFAULT_STYLE, normal: PointLike = (0.0, 0.0, 1.0)):
        if style is _DEFAULT_STYLE:
            style = DimensionStyle(cfg.DEFAULT_STYLE_NAME)
            self._owns_style = True
        else:
            self._owns_style = False
        if style is None:
            raise DimensionError("The dimension style cannot be None")
        self._style: DimensionStyle = style
        self._ocs = ObjectCoordinateSystem.from_normal(normal)
        self._style_overrides: Optional[StyleOverrides] = None

        self.definition_point = np.zeros(3)
        self.mid_text_point = np.zeros(3)
        self._text_reference_point = np.zeros(2)
        self.text_position_manually_set = False

        self.user_text: Optional[str] = None
        self.attachment_point = MTextAttachmentPoint.MIDDLE_CENTER
        self._line_spacing_factor = 1.0
        self.layer = Layer(cfg.DIMENSION_LAYER)
        self.xdata: Dict[str, List[Any]] = {}
        self.block: Optional[Block] = None
        self._updating = False

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    @property
    def style(self) -> DimensionStyle:
        return self._style

    @style.setter
    def style(self, value: DimensionStyle) -> None:
        if value is None:
            raise DimensionError("The dimension style cannot be None")
        self._style = value
        self._owns_style = False
        self.update()

    @property
    def owns_style(self) -> bool:
        """True if the style is private to this dimension (copied by clone)."""
        return self._owns_style

    @property
    def style_overrides(self) -> StyleOverrides:
        """Per-dimension overrides, created on first access."""
        if self._style_overrides is None:
            self._style_overrides = StyleOverrides()
            self._style_overrides.subscribe(self._on_overrides_changed)
        return self._style_overrides

    @property
    def has_style_overrides(self) -> bool:
        return bool(self._style_overrides)

    @property
    def resolved_style(self) -> ResolvedStyle:
        """Style values with the overrides applied."""
        return ResolvedStyle(self._style, self._style_overrides)

    def _on_overrides_changed(self, override_type) -> None:
        logger.debug("Style override changed: %s", override_type.value)
        self.update()

    # ------------------------------------------------------------------
    # Plane
    # ------------------------------------------------------------------

    @property
    def normal(self) -> NDArray[np.float64]:
        return self._ocs.normal.copy()

    @normal.setter
    def normal(self, value: PointLike) -> None:
        self._ocs = ObjectCoordinateSystem.from_normal(value)
        self.update()

    @property
    def ocs(self) -> ObjectCoordinateSystem:
        return self._ocs

    @property
    def elevation(self) -> float:
        """Distance of the dimension plane from the world origin along the normal."""
        return float(self._ocs.to_ocs(self._anchor_point())[2])

    def to_ocs(self, point: PointLike) -> NDArray[np.float64]:
        """World point -> planar OCS point."""
        return self._ocs.to_ocs_2d(point)

    def to_world(self, point: PointLike) -> NDArray[np.float64]:
        """Planar OCS point -> world point at the dimension elevation."""
        return self._ocs.to_world(as_point(point, 2), self.elevation)

    # ------------------------------------------------------------------
    # Text options
    # ------------------------------------------------------------------

    @property
    def line_spacing_factor(self) -> float:
        return self._line_spacing_factor

    @line_spacing_factor.setter
    def line_spacing_factor(self, value: float) -> None:
        if not cfg.LINE_SPACING_MIN <= value <= cfg.LINE_SPACING_MAX:
            raise DimensionError(
                f"The line spacing factor valid values range from "
                f"{cfg.LINE_SPACING_MIN} to {cfg.LINE_SPACING_MAX}, got {value}"
            )
        self._line_spacing_factor = float(value)

    @property
    def text_reference_point(self) -> NDArray[np.float64]:
        """OCS anchor of the dimension text."""
        return self._text_reference_point.copy()

    def set_text_reference_point(self, point: PointLike) -> None:
        """Place the text manually at an OCS point.

        With ``FitTextMove.BESIDE_DIM_LINE`` the dimension line follows
        the text.
        """
        self._text_reference_point = as_point(point, 2)
        self.text_position_manually_set = True
        self.update()

    def reset_text_position(self) -> None:
        """Return to the computed text position."""
        self.text_position_manually_set = False
        self.update()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def measurement(self) -> float:
        """Measured value: drawing units, or degrees for angular types."""

    @abstractmethod
    def compute_geometry(self):
        """OCS points of the current state.

        Returns:
            A record with at least ``definition_point``, ``mid_text_point``
            and ``text_point`` (the computed text anchor), all OCS 2D.
        """

    @abstractmethod
    def _anchor_point(self) -> NDArray[np.float64]:
        """World point whose OCS z is the dimension elevation."""

    @abstractmethod
    def _move_dimension_line(self, point: NDArray[np.float64]) -> None:
        """Change the defining values so the dimension line passes ``point`` (OCS)."""

    def store_anchor_points(self, geometry) -> None:
        """Write the definition and mid text points of ``geometry``."""
        elevation = self.elevation
        self.definition_point = self._ocs.to_world(as_point(geometry.definition_point, 2), elevation)
        mid = as_point(geometry.mid_text_point, 3)
        mid[2] = elevation
        self.mid_text_point = mid

    def _calculate_reference_points(self) -> None:
        geometry = self.compute_geometry()
        self.store_anchor_points(geometry)
        if not self.text_position_manually_set:
            self._text_reference_point = as_point(geometry.text_point, 2)

    def update(self) -> None:
        """Recompute the definition, mid text and text reference points."""
        if self._updating:
            return
        self._updating = True
        try:
            self._calculate_reference_points()
            if (self.text_position_manually_set
                    and self.resolved_style.fit_text_move is FitTextMove.BESIDE_DIM_LINE):
                self._move_dimension_line(self._text_reference_point)
                self._calculate_reference_points()
        finally:
            self._updating = False

    def set_dimension_line_position(self, point: PointLike) -> None:
        """Move the dimension line through an OCS point."""
        self._updating = True
        try:
            self._move_dimension_line(as_point(point, 2))
        finally:
            self._updating = False
        self.update()

    def build_block(self, name: str, layout=None) -> Block:
        """Build (and keep) the block drawing this dimension.

        See ``dimensions.builders.build_dimension_block``.
        """
        from dxf_dimensions.dimensions.builders import build_dimension_block

        self.block = build_dimension_block(self, name, layout)
        return self.block

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def clone(self) -> 'Dimension':
        """Deep copy.

        Owned sub-objects (private style, overrides, xdata) are copied; a
        shared style stays shared. The clone has no block.
        """
        memo: Dict[int, Any] = {}
        if not self._owns_style:
            memo[id(self._style)] = self._style
        if self.block is not None:
            memo[id(self.block)] = None
        clone = copy.deepcopy(self, memo)
        if clone._style_overrides is not None:
            clone._style_overrides.subscribe(clone._on_overrides_changed)
        return clone

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(measurement={self.measurement:.6g}, "
                f"style={self._style.name!r})")
