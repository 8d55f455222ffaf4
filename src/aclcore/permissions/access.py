"""Effective access composition for a client.

Combines a client's direct grants with the resolved grants of each of
its roles, per resource and per operation, using the broadest-wins
merge. Admin clients bypass composition entirely.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, overload

from .constants import ALL_OPERATIONS, AccessType
from .inheritance import RoleLookup, RoleResolver
from .matrix import parse_resource_map
from .merge import AccessMatrix, ResourceMap, merge_all
from .values import DENIED, FULL, Denied

if TYPE_CHECKING:
    from ..models import Client

logger = logging.getLogger(__name__)


def is_admin(client: Client) -> bool:
    """Check if a client has admin access (full access to everything)."""
    return client.access_type == AccessType.ADMIN


def full_matrix() -> AccessMatrix:
    """Matrix granting unconditional access to every operation."""
    return {operation: FULL for operation in ALL_OPERATIONS}


class AccessCompositor:
    """Computes effective access matrices for clients.

    Stateless apart from its role lookup; every call resolves roles in
    a fresh :class:`RoleResolver`, so results reflect exactly the role
    snapshot the lookup serves at call time.

    Args:
        role_lookup: Returns the role with the given name, or None.
    """

    __slots__ = ("_role_lookup",)

    def __init__(self, role_lookup: RoleLookup) -> None:
        self._role_lookup = role_lookup

    @overload
    def get_access(self, client: Client, resource: str) -> AccessMatrix: ...

    @overload
    def get_access(self, client: Client, resource: None = None) -> ResourceMap: ...

    def get_access(self, client: Client, resource: str | None = None) -> AccessMatrix | ResourceMap:
        """Effective access of ``client``.

        Args:
            client: Client record (direct grants, roles, access type).
            resource: Resource name. If None, every resource the client
                      can reach at all is returned.

        Returns:
            With ``resource``: a sparse matrix for that resource.
            Without: a map of resource → sparse matrix; resources with no
            access are omitted.

            Admin clients get every operation on any named resource. With
            no resource they get an empty map, which callers must read as
            "everything allowed" (check :func:`is_admin`).

        Raises:
            UnknownParentRole: One of the client's roles extends a missing role.
            CyclicRoleInheritance: One of the client's roles has a cyclic chain.
        """
        if is_admin(client):
            logger.debug("Admin client %s bypasses access composition", client.client_id)
            return full_matrix() if resource is not None else {}

        sources = self._collect_sources(client)

        if resource is not None:
            return _compose(resource, sources)

        names = dict.fromkeys(name for source in sources for name in source)

        composed: ResourceMap = {}
        for name in names:
            matrix = _compose(name, sources)
            if matrix:
                composed[name] = matrix
        return composed

    def _collect_sources(self, client: Client) -> list[ResourceMap]:
        resolver = RoleResolver(self._role_lookup)
        sources = [parse_resource_map(client.resources)]
        for role_name in client.roles:
            resolved = resolver.resolve_optional(role_name)
            if resolved is not None:
                sources.append(resolved)
        return sources


def _compose(resource: str, sources: list[ResourceMap]) -> AccessMatrix:
    matrix: AccessMatrix = {}
    for operation in ALL_OPERATIONS:
        value = merge_all(source.get(resource, {}).get(operation, DENIED) for source in sources)
        if not isinstance(value, Denied):
            matrix[operation] = value
    return matrix


def get_access(client: Client, role_lookup: RoleLookup, resource: str | None = None) -> AccessMatrix | ResourceMap:
    """Shortcut for ``AccessCompositor(role_lookup).get_access(client, resource)``."""
    return AccessCompositor(role_lookup).get_access(client, resource)


__all__ = [
    "AccessCompositor",
    "full_matrix",
    "get_access",
    "is_admin",
]
