"""
Per-dimension style overrides.

A dimension keeps a reference to a (possibly shared) ``DimensionStyle``
plus a sparse ``StyleOverrides`` map. Lookups go through
``ResolvedStyle``: the override when present, the base style otherwise.
The map stays separate from the style so "has override" remains
answerable.
"""

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from dxf_dimensions.errors import DimensionError
from dxf_dimensions.styles.dimension_style import (
    STYLE_PROPERTIES,
    DimensionStyle,
    validate_style_value,
)

logger = logging.getLogger(__name__)

DimensionStyleOverrideType = Enum(
    'DimensionStyleOverrideType',
    [(prop.upper(), prop) for prop in STYLE_PROPERTIES if prop != 'name'],
    module=__name__,
)

OverrideKey = Union[DimensionStyleOverrideType, str]
OverrideCallback = Callable[[DimensionStyleOverrideType], None]


def _as_type(key: OverrideKey) -> DimensionStyleOverrideType:
    if isinstance(key, DimensionStyleOverrideType):
        return key
    try:
        return DimensionStyleOverrideType(key)
    except ValueError:
        raise DimensionError(f"'{key}' is not an overridable style property") from None


@dataclass(frozen=True)
class DimensionStyleOverride:
    """Single property override, validated like the style property itself."""
    type: DimensionStyleOverrideType
    value: Any

    def __post_init__(self):
        override_type = _as_type(self.type)
        object.__setattr__(self, 'type', override_type)
        object.__setattr__(self, 'value', validate_style_value(override_type.value, self.value))


class StyleOverrides(MutableMapping):
    """Override map keyed by ``DimensionStyleOverrideType``.

    Keys may also be given as property names (``"arrow_size"``). Values
    read back are ``DimensionStyleOverride`` instances; assignment accepts
    either an override or a raw value. Subscribers are called with the
    affected type after every change.
    """

    def __init__(self, overrides=None):
        self._items: Dict[DimensionStyleOverrideType, DimensionStyleOverride] = {}
        self._subscribers: List[OverrideCallback] = []
        for override in overrides or ():
            self.add(override)

    # -- observer ------------------------------------------------------------

    def subscribe(self, callback: OverrideCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: OverrideCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, override_type: DimensionStyleOverrideType) -> None:
        for callback in list(self._subscribers):
            callback(override_type)

    # -- mapping protocol ----------------------------------------------------

    def __getitem__(self, key: OverrideKey) -> DimensionStyleOverride:
        return self._items[_as_type(key)]

    def __setitem__(self, key: OverrideKey, value: Any) -> None:
        override_type = _as_type(key)
        if isinstance(value, DimensionStyleOverride):
            if value.type is not override_type:
                raise DimensionError(
                    f"Override of {value.type.value} cannot be stored under {override_type.value}"
                )
            override = value
        else:
            override = DimensionStyleOverride(override_type, value)
        self._items[override_type] = override
        self._notify(override_type)

    def __delitem__(self, key: OverrideKey) -> None:
        override_type = _as_type(key)
        del self._items[override_type]
        self._notify(override_type)

    def __iter__(self) -> Iterator[DimensionStyleOverrideType]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (DimensionStyleOverrideType, str)):
            return False
        try:
            return _as_type(key) in self._items
        except DimensionError:
            return False

    def __repr__(self) -> str:
        body = ", ".join(f"{k.value}={v.value!r}" for k, v in self._items.items())
        return f"StyleOverrides({body})"

    # -- convenience ---------------------------------------------------------

    def add(self, override: DimensionStyleOverride) -> bool:
        """Store ``override``.

        Returns:
            False if an equal override was already present (nothing changes).
        """
        current = self._items.get(override.type)
        if current is not None and current.value == override.value:
            return False
        self[override.type] = override
        return True

    def remove(self, key: OverrideKey) -> bool:
        """Remove an override; False if there was none."""
        override_type = _as_type(key)
        if override_type not in self._items:
            return False
        del self[override_type]
        return True

    def clear(self) -> None:
        cleared = list(self._items)
        self._items.clear()
        for override_type in cleared:
            self._notify(override_type)

    def has_override(self, key: OverrideKey) -> bool:
        return _as_type(key) in self._items

    def try_get(self, key: OverrideKey) -> Optional[DimensionStyleOverride]:
        """Override for ``key`` or None."""
        return self._items.get(_as_type(key))

    def copy(self) -> 'StyleOverrides':
        """Copy without subscribers."""
        return StyleOverrides(self._items.values())

    def __deepcopy__(self, memo) -> 'StyleOverrides':
        return self.copy()


class ResolvedStyle:
    """Read-only view: override value first, then the base style.

    Example:
        >>> resolved = ResolvedStyle(style, overrides)
        >>> resolved.arrow_size
    """

    def __init__(self, style: DimensionStyle, overrides: Optional[StyleOverrides] = None):
        self.style = style
        self.overrides = overrides

    def __getattr__(self, prop: str) -> Any:
        if prop not in STYLE_PROPERTIES:
            raise AttributeError(prop)
        if self.overrides and prop != 'name':
            override = self.overrides.try_get(prop)
            if override is not None:
                return override.value
        return getattr(self.style, prop)

    def has_override(self, prop: str) -> bool:
        return bool(self.overrides) and prop in self.overrides

    @property
    def scale(self) -> float:
        """Overall scale (DIMSCALE) applied to every size."""
        return self.dim_scale_overall
