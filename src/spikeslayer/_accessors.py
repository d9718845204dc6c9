"""Value accessors and the XY point they produce.

Each raw item goes through the X accessor ``(item, index)`` and the Y
accessor ``(item)`` to become an :class:`XYPoint`.  Accepted points are
turned into spikes by the transform accessor
``(point_dict, original_item, index)``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from spikeslayer._errors import InvalidArgument, TypeMismatch

XAccessor = Callable[[Any, int], Any]
YAccessor = Callable[[Any], Any]
Transform = Callable[[dict[str, Any], Any, int], Any]


@dataclass(frozen=True)
class XYPoint:
    """Numeric pair derived from one raw item.

    ``index`` is the positional index of the raw item in its source, used to
    map detected peaks back to the item they came from.
    """

    x: Any
    y: float
    index: int

    def as_dict(self) -> dict[str, Any]:
        """Return the ``{"x": ..., "y": ...}`` shape handed to transforms."""
        return {"x": self.x, "y": self.y}


def default_x(item: Any, index: int) -> int:
    """Use the positional index as the X value."""
    return index


def default_y(item: Any) -> Any:
    """Use the item itself as the Y value."""
    return item


def default_transform(point: dict[str, Any], original_item: Any, index: int) -> dict[str, Any]:
    """Return the XY point unchanged."""
    return point


def ensure_callable(value: Any, name: str, role: str = "mapper") -> Any:
    """Return *value* if it is callable, raise :class:`InvalidArgument` otherwise.

    *name* is the method receiving *value* and *role* what the argument is
    used as (``"mapper"``, ``"callback"``, ...); both appear in the message.
    """
    if not callable(value):
        msg = f"The {name}() {role} argument should be a callable. Was: {value!r}"
        raise InvalidArgument(msg)
    return value


def coerce_y(value: Any) -> float | None:
    """Convert a Y accessor result to a float.

    ``None`` is passed through and means the item yields no point.  Numeric
    strings (e.g. a slice of a decoded text line) are parsed with ``float``.

    Raises
    ------
    TypeMismatch
        If *value* is neither ``None``, a real number nor a numeric string.
    """
    if value is None:
        return None
    msg = f"Y value should be numeric. Was: {value!r}"
    if isinstance(value, bool):
        raise TypeMismatch(msg)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise TypeMismatch(msg) from exc
