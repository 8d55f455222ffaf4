"""Operation and access-type constants for aclcore.

Provides:
- ``Operation``: the closed set of operations a grant can target.
- ``AccessType``: client access tiers (admin / user).
- ``SYSTEM_RESOURCES``: resources that exist regardless of loaded collections.
"""

from __future__ import annotations

from enum import Enum


class Operation(str, Enum):
    """Operation a permission grant applies to.

    The set is closed: matrices carrying any other key are rejected on
    the write path and ignored on the read path.

    ``*Own`` variants restrict the base operation to documents created
    by the requesting client (see :func:`resolve_own_operations`).
    """

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    CREATE_OWN = "createOwn"
    READ_OWN = "readOwn"
    UPDATE_OWN = "updateOwn"
    DELETE_OWN = "deleteOwn"

    @property
    def is_own(self) -> bool:
        return self.value.endswith("Own")

    @property
    def base(self) -> Operation:
        """Base operation for an ``*Own`` variant (``readOwn`` → ``read``)."""
        if not self.is_own:
            return self
        return Operation(self.value[: -len("Own")])

    @classmethod
    def parse(cls, name: str | Operation) -> Operation | None:
        """Return the operation for ``name``, or None if it is not one."""
        if isinstance(name, Operation):
            return name
        try:
            return cls(name)
        except ValueError:
            return None


ALL_OPERATIONS: tuple[Operation, ...] = tuple(Operation)


class AccessType:
    """Client access tier.

    ``admin`` clients bypass resolution entirely and hold full access
    to every operation on every resource, registered or not.
    """

    ADMIN = "admin"
    USER = "user"

    ALL = frozenset({"admin", "user"})


# Registered alongside collection resources by the engine.
SYSTEM_RESOURCES: dict[str, str] = {
    "clients": "API clients",
    "roles": "Client roles",
}

# Document field holding the creator's client ID.
DEFAULT_OWNER_FIELD = "_createdBy"


__all__ = [
    "ALL_OPERATIONS",
    "AccessType",
    "DEFAULT_OWNER_FIELD",
    "Operation",
    "SYSTEM_RESOURCES",
]
