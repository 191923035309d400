"""ezdxf export of dimension blocks."""

from dxf_dimensions.drawing.dxf_renderer import DxfRenderer

__all__ = ["DxfRenderer"]
