"""
Exceptions raised by dxf_dimensions.

Argument problems derive from ValueError, type problems from TypeError,
so callers may catch either the specific class or the builtin one.
"""


class DimensionError(ValueError):
    """Invalid argument supplied to a dimension constructor or setter."""


class ParallelLinesError(DimensionError):
    """The two lines defining an angular dimension are parallel."""


class StyleValueError(DimensionError):
    """A dimension style property or override has an invalid value."""

    def __init__(self, prop: str, value: object, reason: str):
        self.prop = prop
        self.value = value
        super().__init__(f"Invalid value {value!r} for '{prop}': {reason}")


class UnsupportedEntityError(TypeError):
    """An entity type cannot be handled by a conversion helper."""

    def __init__(self, entity: object, operation: str = "this operation"):
        self.entity_type = type(entity).__name__
        super().__init__(
            f"Entity type '{self.entity_type}' is not supported by {operation}"
        )


class UnsupportedDimensionError(TypeError):
    """No block builder is registered for a dimension type."""
