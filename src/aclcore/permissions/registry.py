"""Catalog of access-controlled resources.

Collection loaders register one resource per managed collection
(``collection:library_book``), plus the fixed system resources.
"""

from __future__ import annotations

import logging
from typing import Iterator

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """In-memory map of resource name → description.

    Re-registering a name replaces its description.

    Example::

        registry = ResourceRegistry()
        registry.register("collection:library_book", "Books in the library")
        registry.has("collection:library_book")   # True
        registry.describe("collection:library_book")  # "Books in the library"
    """

    __slots__ = ("_resources",)

    def __init__(self, resources: dict[str, str | None] | None = None) -> None:
        self._resources: dict[str, str | None] = dict(resources or {})

    def register(self, name: str, description: str | None = None) -> None:
        if not name:
            raise ValueError("Resource name must be a non-empty string")
        if name in self._resources:
            logger.debug("Re-registering resource %s", name)
        self._resources[name] = description

    def has(self, name: str) -> bool:
        return name in self._resources

    def describe(self, name: str) -> str | None:
        """Description of ``name``, or None if unknown or undescribed."""
        return self._resources.get(name)

    def all(self) -> dict[str, str | None]:
        return dict(self._resources)

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._resources))

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"ResourceRegistry(resources={sorted(self._resources)!r})"


__all__ = ["ResourceRegistry"]
