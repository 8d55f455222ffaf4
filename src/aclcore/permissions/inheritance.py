"""Role inheritance resolution.

A role may extend one parent role. Its effective grants are its own
grants merged (broadest wins) with everything it inherits::

    viewer  ──extends──►  editor  ──extends──►  administrator
                                                 (root)

Resolving ``viewer`` walks ``viewer → editor → administrator`` and then
folds root to self: ``administrator``'s grants first, then ``editor``'s,
then ``viewer``'s.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from ..exceptions import CyclicRoleInheritance, UnknownIdentity, UnknownParentRole
from .matrix import parse_resource_map
from .merge import ResourceMap, merge_resource_maps

if TYPE_CHECKING:
    from ..models import Role

logger = logging.getLogger(__name__)

RoleLookup = Callable[[str], Optional["Role"]]


class RoleResolver:
    """Resolves roles to their effective resource → matrix maps.

    One resolver is one resolution scope: every role resolved through it
    (including ancestors reached along the way) is cached, so clients
    holding several roles with shared ancestors fold each ancestor once.
    Create a new resolver per request so the cache never outlives the
    role snapshot it was built from.

    Args:
        role_lookup: Returns the role with the given name, or None.

    Example::

        resolver = RoleResolver(roles.get)
        resolver.resolve("viewer")
        # {"collection:books": {Operation.READ: FULL, ...}}
    """

    __slots__ = ("_lookup", "_resolved")

    def __init__(self, role_lookup: RoleLookup) -> None:
        self._lookup = role_lookup
        self._resolved: dict[str, ResourceMap] = {}

    def resolve(self, role_name: str) -> ResourceMap:
        """Return the effective grants of ``role_name``, inheritance included.

        Raises:
            UnknownIdentity: ``role_name`` itself does not exist.
            UnknownParentRole: A role on the chain extends a missing role.
            CyclicRoleInheritance: The chain revisits a role.
        """
        if role_name not in self._resolved:
            role = self._lookup(role_name)
            if role is None:
                raise UnknownIdentity(f"Unknown role '{role_name}'", role=role_name)
            self._fold(self._walk(role))
            self._resolved.setdefault(role_name, self._resolved[role.name])
        return {resource: dict(matrix) for resource, matrix in self._resolved[role_name].items()}

    def resolve_optional(self, role_name: str) -> ResourceMap | None:
        """Like :meth:`resolve`, but None for a role that does not exist."""
        try:
            return self.resolve(role_name)
        except UnknownIdentity:
            logger.warning("Role '%s' not found, it grants no access", role_name)
            return None

    def _walk(self, role: Role) -> tuple[list[Role], ResourceMap]:
        # Collect self → … → root, stopping early at an already resolved ancestor.
        chain: list[Role] = []
        visited: set[str] = set()
        inherited: ResourceMap = {}

        while True:
            chain.append(role)
            visited.add(role.name)

            parent_name = role.extends
            if not parent_name:
                break
            if parent_name in visited:
                raise CyclicRoleInheritance([r.name for r in chain] + [parent_name])
            if parent_name in self._resolved:
                inherited = self._resolved[parent_name]
                break

            parent = self._lookup(parent_name)
            if parent is None:
                raise UnknownParentRole(role.name, parent_name)
            role = parent

        return chain, inherited

    def _fold(self, walked: tuple[list[Role], ResourceMap]) -> None:
        chain, accumulated = walked
        for role in reversed(chain):
            accumulated = merge_resource_maps(accumulated, parse_resource_map(role.resources))
            self._resolved[role.name] = accumulated
        logger.debug("Resolved role chain %s", " -> ".join(r.name for r in chain))


def resolve_role(role_name: str, role_lookup: RoleLookup) -> ResourceMap:
    """Resolve a single role in its own resolution scope."""
    return RoleResolver(role_lookup).resolve(role_name)


__all__ = [
    "RoleLookup",
    "RoleResolver",
    "resolve_role",
]
