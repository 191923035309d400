"""
Predefined arrowhead blocks.

Every arrowhead is drawn for a unit arrow size with its tip at the origin
pointing along +X; dimension builders insert it scaled by
``DIMASZ * DIMSCALE`` and rotated to the dimension line. Entities use
ByBlock color, linetype and lineweight so they follow the dimension.

Names follow the DXF convention (``_OPEN``, ``_DOT``, ...). Arrowheads
listed in ``config.NO_TRIM_ARROWHEADS`` do not shorten the dimension line.
"""

import logging
from typing import Callable, Dict, List, Optional, Union

from dxf_dimensions import config as cfg
from dxf_dimensions.entities.primitives import (
    BYBLOCK,
    LINETYPE_BYBLOCK,
    LINEWEIGHT_BYBLOCK,
    Arc,
    Block,
    Circle,
    EntityStyle,
    Line,
    Polyline,
    Polyline2DVertex,
    Solid,
)
from dxf_dimensions.errors import DimensionError

logger = logging.getLogger(__name__)

_BY_BLOCK = EntityStyle(color=BYBLOCK, linetype=LINETYPE_BYBLOCK, lineweight=LINEWEIGHT_BYBLOCK)

# Half width of the open and closed arrowheads (1/6 of the length)
_OPEN_HALF = 1.0 / 6.0
# tan(15 deg)
_OPEN30_HALF = 0.26794919
# Half height of the datum triangles
_DATUM_HALF = 0.57735027


def _line(x1, y1, x2, y2) -> Line:
    return Line((x1, y1), (x2, y2), style=_BY_BLOCK)


def _tail(start_x: float = -0.5) -> Line:
    """Stub joining the arrowhead to the dimension line."""
    return _line(start_x, 0.0, -1.0, 0.0)


def _dot_polyline(half: float) -> Polyline:
    """Filled dot as a closed two-vertex polyline of bulge 1."""
    return Polyline(
        (Polyline2DVertex((-half, 0.0), 1.0), Polyline2DVertex((half, 0.0), 1.0)),
        closed=True,
        constant_width=2.0 * half,
        style=_BY_BLOCK,
    )


# ---------------------------------------------------------------------------
# Arrowhead shapes
# ---------------------------------------------------------------------------

def _dot() -> list:
    return [_dot_polyline(0.25), _tail()]


def _dot_small() -> list:
    return [_dot_polyline(0.0625)]


def _dot_blank() -> list:
    return [Circle((0.0, 0.0), 0.5, style=_BY_BLOCK), _tail()]


def _origin() -> list:
    return [Circle((0.0, 0.0), 0.5, style=_BY_BLOCK), _tail(0.0)]


def _origin2() -> list:
    return [
        Circle((0.0, 0.0), 0.5, style=_BY_BLOCK),
        Circle((0.0, 0.0), 0.25, style=_BY_BLOCK),
        _tail(),
    ]


def _open() -> list:
    return [
        _line(-1.0, _OPEN_HALF, 0.0, 0.0),
        _line(0.0, 0.0, -1.0, -_OPEN_HALF),
        _tail(0.0),
    ]


def _open90() -> list:
    return [
        _line(-0.5, 0.5, 0.0, 0.0),
        _line(0.0, 0.0, -0.5, -0.5),
        _tail(0.0),
    ]


def _open30() -> list:
    return [
        _line(-1.0, _OPEN30_HALF, 0.0, 0.0),
        _line(0.0, 0.0, -1.0, -_OPEN30_HALF),
        _tail(0.0),
    ]


def _closed() -> list:
    return _closed_blank() + [_tail(0.0)]


def _closed_blank() -> list:
    return [
        _line(-1.0, _OPEN_HALF, 0.0, 0.0),
        _line(0.0, 0.0, -1.0, -_OPEN_HALF),
        _line(-1.0, _OPEN_HALF, -1.0, -_OPEN_HALF),
    ]


def _small() -> list:
    return [Circle((0.0, 0.0), 0.25, style=_BY_BLOCK)]


def _none() -> list:
    return []


def _oblique() -> list:
    return [_line(-0.5, -0.5, 0.5, 0.5)]


def _arch_tick() -> list:
    return [Polyline(
        (Polyline2DVertex((-0.5, -0.5)), Polyline2DVertex((0.5, 0.5))),
        constant_width=0.15,
        style=_BY_BLOCK,
    )]


def _box_filled() -> list:
    return [
        Solid((-0.5, 0.5), (0.5, 0.5), (-0.5, -0.5), (0.5, -0.5), style=_BY_BLOCK),
        _tail(),
    ]


def _box_blank() -> list:
    return [
        _line(-0.5, -0.5, 0.5, -0.5),
        _line(0.5, -0.5, 0.5, 0.5),
        _line(0.5, 0.5, -0.5, 0.5),
        _line(-0.5, 0.5, -0.5, -0.5),
        _tail(),
    ]


def _datum_filled() -> list:
    return [Solid((0.0, _DATUM_HALF), (-1.0, 0.0), (0.0, -_DATUM_HALF), style=_BY_BLOCK)]


def _datum_blank() -> list:
    return [
        _line(0.0, _DATUM_HALF, -1.0, 0.0),
        _line(-1.0, 0.0, 0.0, -_DATUM_HALF),
        _line(0.0, -_DATUM_HALF, 0.0, _DATUM_HALF),
    ]


def _integral() -> list:
    return [
        Arc((0.44488802, -0.09133463), 0.45416667, 102.0, 168.0, style=_BY_BLOCK),
        Arc((-0.44488802, 0.09133463), 0.45416667, 282.0, 348.0, style=_BY_BLOCK),
    ]


_ARROWHEADS: Dict[str, Callable[[], list]] = {
    "_DOT": _dot,
    "_DOTSMALL": _dot_small,
    "_DOTBLANK": _dot_blank,
    "_ORIGIN": _origin,
    "_ORIGIN2": _origin2,
    "_OPEN": _open,
    "_OPEN90": _open90,
    "_OPEN30": _open30,
    "_CLOSED": _closed,
    "_SMALL": _small,
    "_NONE": _none,
    "_OBLIQUE": _oblique,
    "_BOXFILLED": _box_filled,
    "_BOXBLANK": _box_blank,
    "_CLOSEDBLANK": _closed_blank,
    "_DATUMFILLED": _datum_filled,
    "_DATUMBLANK": _datum_blank,
    "_INTEGRAL": _integral,
    "_ARCHTICK": _arch_tick,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def arrowhead_names() -> List[str]:
    """Names of all predefined arrowheads."""
    return sorted(_ARROWHEADS)


def is_predefined(name: str) -> bool:
    return name.upper() in _ARROWHEADS


def get_arrowhead(name: str) -> Block:
    """New block holding the predefined arrowhead ``name``.

    Args:
        name: arrowhead name, case insensitive (e.g. ``"_OPEN"``).

    Raises:
        DimensionError: if no arrowhead of that name exists.
    """
    key = name.upper()
    factory = _ARROWHEADS.get(key)
    if factory is None:
        logger.debug("Unknown arrowhead requested: %s", name)
        raise DimensionError(
            f"Unknown arrowhead '{name}'. Available: {', '.join(arrowhead_names())}"
        )
    return Block(name=key, entities=factory())


def resolve_arrowhead(arrow: Optional[Union[str, Block]]) -> Optional[Block]:
    """Block for a style arrow value: None, a predefined name or a Block."""
    if arrow is None or isinstance(arrow, Block):
        return arrow
    return get_arrowhead(arrow)


def is_no_trim(arrow: Optional[Union[str, Block]]) -> bool:
    """True if the arrowhead keeps the dimension line at full length.

    The closed default triangle (``None``) is trimmed.
    """
    if arrow is None:
        return False
    name = arrow.name if isinstance(arrow, Block) else arrow
    return name.upper() in cfg.NO_TRIM_ARROWHEADS
