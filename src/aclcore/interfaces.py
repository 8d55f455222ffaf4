"""Store interfaces the access engine consumes.

Role and Client records are persisted elsewhere. The engine only needs
to fetch them by key; implementations live with the datastore.
"""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from .models import Client, Role


@runtime_checkable
class RoleStore(Protocol):
    """Read access to persisted roles."""

    def fetch(self, name: str) -> Role | None:
        """Return the role called ``name``, or None if there is none."""
        ...


@runtime_checkable
class ClientStore(Protocol):
    """Read access to persisted clients."""

    def fetch(self, client_id: str) -> Client | None:
        """Return the client with ``client_id``, or None if there is none."""
        ...

    def all(self) -> Iterable[Client]: ...


class InMemoryRoleStore:
    """Dict-backed :class:`RoleStore`, for tests and embedded use."""

    def __init__(self, roles: Iterable[Role] = ()) -> None:
        self._roles: dict[str, Role] = {}
        for role in roles:
            self.save(role)

    def save(self, role: Role) -> None:
        self._roles[role.name] = role

    def delete(self, name: str) -> None:
        """Delete a role, detaching any roles that extended it."""
        self._roles.pop(name, None)
        for child in list(self._roles.values()):
            if child.extends == name:
                self._roles[child.name] = child.model_copy(update={"extends": None})

    def fetch(self, name: str) -> Role | None:
        return self._roles.get(name)


class InMemoryClientStore:
    """Dict-backed :class:`ClientStore`, for tests and embedded use."""

    def __init__(self, clients: Iterable[Client] = ()) -> None:
        self._clients: dict[str, Client] = {}
        for client in clients:
            self.save(client)

    def save(self, client: Client) -> None:
        self._clients[client.client_id] = client

    def fetch(self, client_id: str) -> Client | None:
        return self._clients.get(client_id)

    def all(self) -> list[Client]:
        return list(self._clients.values())


__all__ = [
    "ClientStore",
    "InMemoryClientStore",
    "InMemoryRoleStore",
    "RoleStore",
]
