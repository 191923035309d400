"""
Global constants for dxf_dimensions.

Values are read through the module (``cfg.EPSILON``) so that
``project_config.apply_config_to_globals`` can adjust them at runtime.
"""

# ---------------------------------------------------------------------------
# Numeric tolerances
# ---------------------------------------------------------------------------

# Shared "is zero" / "is parallel" tolerance
EPSILON = 1e-12

# Segments per full circle when tessellating arcs and circles
ARC_PRECISION = 64

# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

# Non-plotting layer for the invisible reference point markers
DEFPOINTS_LAYER = "Defpoints"

# Layer for the generated dimension entities
DIMENSION_LAYER = "0"

# ---------------------------------------------------------------------------
# Dimension style
# ---------------------------------------------------------------------------

DEFAULT_STYLE_NAME = "Standard"

# Arrowhead blocks that replace the dimension line trim by an extension
NO_TRIM_ARROWHEADS = frozenset({"_OBLIQUE", "_ARCHTICK", "_INTEGRAL", "_NONE"})

# Valid range of the MText line spacing factor
LINE_SPACING_MIN = 0.25
LINE_SPACING_MAX = 4.0

# Smallest non-zero DIMRND
MIN_ROUNDOFF = 0.000001

# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

# Unicode symbols (False = DXF control codes, see dimensions.symbols)
USE_UNICODE_SYMBOLS = True

# Token replaced by the measured value in prefix/suffix and user text
MEASUREMENT_TOKEN = "<>"

# User text that suppresses the dimension text
SUPPRESS_TEXT = " "

# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

DXF_VERSION = "R2010"
