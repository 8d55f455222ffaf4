"""Tests for the AccessEngine entry point."""

from __future__ import annotations

import logging

import pytest

from aclcore import (
    FULL,
    AccessEngine,
    AclConfig,
    Client,
    ClientStore,
    Filtered,
    InMemoryClientStore,
    InMemoryRoleStore,
    Operation,
    Projected,
    ResourceRegistry,
    Role,
    RoleStore,
    UnknownParentRole,
)


class CountingRoleStore(InMemoryRoleStore):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.fetched: list[str] = []

    def fetch(self, name: str) -> Role | None:
        self.fetched.append(name)
        return super().fetch(name)


def make_engine(roles=(), clients=(), config: AclConfig | None = None) -> AccessEngine:
    return AccessEngine(
        registry=ResourceRegistry(),
        role_store=CountingRoleStore(roles),
        client_store=InMemoryClientStore(clients),
        config=config,
    )


class TestStores:
    def test_in_memory_stores_satisfy_protocols(self) -> None:
        assert isinstance(InMemoryRoleStore(), RoleStore)
        assert isinstance(InMemoryClientStore(), ClientStore)

    def test_role_delete_detaches_children(self) -> None:
        store = InMemoryRoleStore([Role(name="editor"), Role(name="administrator", extends="editor")])
        store.delete("editor")
        assert store.fetch("editor") is None
        assert store.fetch("administrator").extends is None


class TestResources:
    def test_system_resources_registered(self) -> None:
        engine = make_engine()
        assert engine.has_resource("clients")
        assert engine.has_resource("roles")

    def test_system_resources_can_be_disabled(self) -> None:
        engine = make_engine(config=AclConfig(register_system_resources=False))
        assert engine.get_resources() == {}

    def test_register_resource(self) -> None:
        engine = make_engine()
        engine.register_resource("collection:library_book", "Books")
        assert engine.has_resource("collection:library_book")
        assert engine.get_resources()["collection:library_book"] == "Books"


class TestEngineAccess:
    def test_get_access(self) -> None:
        engine = make_engine(
            roles=[
                Role(name="editor", resources={"collection:books": {"read": {"fields": {"title": 1}}}}),
                Role(name="administrator", extends="editor", resources={"collection:books": {"delete": True}}),
            ]
        )
        client = Client(client_id="C1", roles=["administrator"])
        assert engine.get_access(client, "collection:books") == {
            Operation.READ: Projected({"title": 1}),
            Operation.DELETE: FULL,
        }

    def test_role_snapshot_fetches_each_role_once(self) -> None:
        engine = make_engine(
            roles=[
                Role(name="base", resources={"r": {"read": True}}),
                Role(name="writer", extends="base"),
                Role(name="reviewer", extends="base"),
            ]
        )
        engine.get_access(Client(client_id="C1", roles=["writer", "reviewer"]))
        assert engine.role_store.fetched.count("base") == 1

    def test_unknown_parent_propagates(self) -> None:
        engine = make_engine(roles=[Role(name="administrator", extends="ghost")])
        with pytest.raises(UnknownParentRole):
            engine.get_access(Client(client_id="C1", roles=["administrator"]), "r")

    def test_get_client_access(self) -> None:
        engine = make_engine(clients=[Client(client_id="C1", resources={"r": {"read": True}})])
        assert engine.get_client_access("C1", "r") == {Operation.READ: FULL}

    def test_unknown_client_has_no_access(self, caplog: pytest.LogCaptureFixture) -> None:
        engine = make_engine()
        with caplog.at_level(logging.WARNING):
            assert engine.get_client_access("nobody", "r") == {}
        assert "Unknown client" in caplog.text

    def test_is_admin(self) -> None:
        assert AccessEngine.is_admin(Client(client_id="root", accessType="admin"))


class TestScopedAccess:
    def test_own_operation_becomes_owner_filter(self) -> None:
        engine = make_engine()
        client = Client(client_id="C1", resources={"r": {"update": False, "updateOwn": True}})
        assert engine.get_scoped_access(client, "r") == {
            Operation.UPDATE: Filtered({"_createdBy": "C1"}),
        }

    def test_custom_owner_field(self) -> None:
        engine = make_engine(config=AclConfig(owner_field="ownerId"))
        client = Client(client_id="C1", resources={"r": {"readOwn": True}})
        assert engine.get_scoped_access(client, "r") == {Operation.READ: Filtered({"ownerId": "C1"})}


class TestAccessTable:
    def test_entries_per_client_and_resource(self) -> None:
        engine = make_engine(
            roles=[Role(name="viewer", resources={"collection:authors": {"read": True}})],
            clients=[
                Client(client_id="C1", roles=["viewer"], resources={"collection:books": {"read": {"fields": {"a": 1}}}}),
                Client(client_id="C2"),
                Client(client_id="root", access_type="admin"),
            ],
        )
        entries = engine.build_access_table()
        assert {(e.client, e.resource) for e in entries} == {
            ("C1", "collection:books"),
            ("C1", "collection:authors"),
        }
        books = next(e for e in entries if e.resource == "collection:books")
        assert books.access == {"read": {"fields": {"a": 1}}}
