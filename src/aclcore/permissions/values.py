"""Access values: the permission granted for one operation.

An access value is one of four shapes:

- :class:`Denied`: no access (stored as ``false`` or absent).
- :class:`Full`: unconditional access (stored as ``true``).
- :class:`Filtered`: access restricted to documents matching a query
  filter, optionally with a field projection (``{"filter": {...}}``).
- :class:`Projected`: access restricted to a field projection
  (``{"fields": {"title": 1}}``).

Values are immutable. Use :func:`parse_access_value` to turn a stored
grant into a value and :meth:`to_raw` to go back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Denied:
    """No access."""

    def to_raw(self) -> bool:
        return False

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class Full:
    """Unconditional access."""

    def to_raw(self) -> bool:
        return True


@dataclass(frozen=True, eq=True)
class Filtered:
    """Access limited to documents matching ``filter``.

    ``filter`` is an opaque query object handed to the datastore.
    ``fields`` is an optional projection applied on top of the filter.
    """

    filter: dict[str, Any] = field(default_factory=dict)
    fields: dict[str, Any] | None = None

    def to_raw(self) -> dict[str, Any]:
        raw: dict[str, Any] = {"filter": dict(self.filter)}
        if self.fields:
            raw["fields"] = dict(self.fields)
        return raw


@dataclass(frozen=True, eq=True)
class Projected:
    """Access limited to a field projection.

    ``{"title": 1, "author": 1}`` is an inclusion projection (only these
    fields), ``{"secret": 0}`` an exclusion projection (all but these).
    """

    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def is_inclusion(self) -> bool:
        return bool(self.fields) and all(v == 1 for v in self.fields.values())

    @property
    def is_exclusion(self) -> bool:
        return bool(self.fields) and all(v == 0 for v in self.fields.values())

    def to_raw(self) -> dict[str, Any]:
        return {"fields": dict(self.fields)}


AccessValue = Union[Denied, Full, Filtered, Projected]

DENIED = Denied()
FULL = Full()


def parse_access_value(raw: Any) -> AccessValue:
    """Convert a stored grant into an :data:`AccessValue`.

    Args:
        raw: ``True``/``False``/``None``, a ``{"filter": ..., "fields": ...}``
             object, or an already-parsed access value.

    Returns:
        The matching access value. Objects with no surviving restriction
        (``{}``, ``{"fields": {}}``) are unconditional access.

    Raises:
        TypeError: If ``raw`` is neither a boolean, ``None`` nor a mapping.

    Example::

        parse_access_value(True)                        # FULL
        parse_access_value({"fields": {"title": 1}})    # Projected({"title": 1})
        parse_access_value({"filter": {"published": True}})
    """
    if isinstance(raw, (Denied, Full, Filtered, Projected)):
        return raw
    if raw is None or raw is False:
        return DENIED
    if raw is True:
        return FULL
    if not isinstance(raw, dict):
        raise TypeError(f"Access value must be a boolean or an object, got {type(raw).__name__}")

    query = raw.get("filter")
    fields = raw.get("fields")

    if query:
        return Filtered(filter=dict(query), fields=dict(fields) if fields else None)
    if fields:
        return Projected(fields=dict(fields))
    return FULL


__all__ = [
    "AccessValue",
    "DENIED",
    "Denied",
    "FULL",
    "Filtered",
    "Full",
    "Projected",
    "parse_access_value",
]
