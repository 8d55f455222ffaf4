"""Access engine: the entry point callers use.

Wires the resource registry and the role/client stores into the access
compositor. An engine holds no per-request state; each call fetches a
role snapshot, resolves against it, and discards it.

Usage::

    engine = AccessEngine(
        registry=ResourceRegistry(),
        role_store=InMemoryRoleStore([...]),
        client_store=InMemoryClientStore([...]),
    )
    engine.register_resource("collection:books", "Books")
    engine.get_access(client, "collection:books")
    # {Operation.READ: FULL, Operation.UPDATE: Projected({"title": 1})}
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import AclConfig
from .interfaces import ClientStore, RoleStore
from .logging import get_acl_logger
from .models import AccessEntry, Client, Role
from .permissions.access import AccessCompositor, is_admin
from .permissions.constants import SYSTEM_RESOURCES
from .permissions.matrix import dump_matrix, resolve_own_operations
from .permissions.merge import AccessMatrix, ResourceMap
from .permissions.registry import ResourceRegistry

logger = logging.getLogger(__name__)


class AccessEngine:
    """Computes effective access matrices for API clients.

    Args:
        registry: Catalog of access-controlled resources.
        role_store: Source of Role records.
        client_store: Source of Client records.
        config: Engine configuration (defaults apply if None).
    """

    def __init__(
        self,
        registry: ResourceRegistry,
        role_store: RoleStore,
        client_store: ClientStore,
        config: Optional[AclConfig] = None,
    ) -> None:
        self.registry = registry
        self.role_store = role_store
        self.client_store = client_store
        self.config = config or AclConfig()

        if self.config.register_system_resources:
            for name, description in SYSTEM_RESOURCES.items():
                if not registry.has(name):
                    registry.register(name, description)

    # ── Resources ────────────────────────────────────────

    def register_resource(self, name: str, description: str | None = None) -> None:
        self.registry.register(name, description)

    def has_resource(self, name: str) -> bool:
        return self.registry.has(name)

    def get_resources(self) -> dict[str, str | None]:
        return self.registry.all()

    # ── Access ───────────────────────────────────────────

    @staticmethod
    def is_admin(client: Client) -> bool:
        return is_admin(client)

    def get_access(self, client: Client, resource: str | None = None) -> AccessMatrix | ResourceMap:
        """Effective access of ``client`` on ``resource`` (or on every resource).

        See :meth:`AccessCompositor.get_access` for the return shapes.
        """
        snapshot = self.snapshot_roles(client.roles)
        return AccessCompositor(snapshot.get).get_access(client, resource)

    def get_client_access(self, client_id: str, resource: str | None = None) -> AccessMatrix | ResourceMap:
        """Like :meth:`get_access`, fetching the client first.

        An unknown client has no access: the result is empty rather
        than an error.
        """
        client = self.client_store.fetch(client_id)
        if client is None:
            get_acl_logger(__name__, client_id=client_id, resource=resource).warning(
                "Unknown client, no access granted"
            )
            return {}
        return self.get_access(client, resource)

    def get_scoped_access(self, client: Client, resource: str) -> AccessMatrix:
        """Access on ``resource`` with ``*Own`` operations folded into owner filters.

        This is the matrix a request handler enforces: ``readOwn`` becomes
        ``read`` restricted to documents the client created.
        """
        matrix = self.get_access(client, resource)
        return resolve_own_operations(matrix, client.client_id, owner_field=self.config.owner_field)

    def build_access_table(self, clients: Iterable[Client] | None = None) -> list[AccessEntry]:
        """Effective access for every client/resource pair.

        Args:
            clients: Clients to include (default: every client in the store).

        Returns:
            One :class:`AccessEntry` per client and reachable resource, with
            the access matrix in its stored (raw) shape. Admin clients have
            no entries; they are allowed everything.
        """
        entries: list[AccessEntry] = []
        for client in self.client_store.all() if clients is None else clients:
            if is_admin(client):
                continue
            for resource, matrix in self.get_access(client).items():
                entries.append(AccessEntry(client=client.client_id, resource=resource, access=dump_matrix(matrix)))
        logger.debug("Built access table with %d entries", len(entries))
        return entries

    # ── Snapshot ─────────────────────────────────────────

    def snapshot_roles(self, role_names: Iterable[str]) -> dict[str, Role]:
        """Fetch ``role_names`` and all their ancestors from the role store.

        Each role is fetched once. Missing roles are simply absent from the
        snapshot; resolution reports them.
        """
        snapshot: dict[str, Role] = {}
        missing: set[str] = set()
        pending = list(role_names)

        while pending:
            name = pending.pop()
            if name in snapshot or name in missing:
                continue
            role = self.role_store.fetch(name)
            if role is None:
                missing.add(name)
                continue
            snapshot[name] = role
            if role.extends:
                pending.append(role.extends)

        return snapshot


__all__ = ["AccessEngine"]
