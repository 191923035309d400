"""
dxf_dimensions - DXF dimension entities and dimension block generation.

Dimension types live in ``dxf_dimensions.dimensions``, styles in
``dxf_dimensions.styles``; ``dxf_dimensions.drawing`` exports built
blocks to an ezdxf document.
"""

from dxf_dimensions.logging_config import (
    setup_logging,
    get_logger,
    log_timing,
    timed,
    LogContext,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_timing",
    "timed",
    "LogContext",
]
