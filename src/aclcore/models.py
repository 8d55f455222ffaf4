"""Identity records consumed by the access engine.

These are Pydantic models mirroring the persisted Role and Client
documents. Grants are kept in their stored (raw) shape; the engine
parses them into access values when resolving.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .permissions.constants import AccessType
from .permissions.matrix import validate_matrix


class _GrantHolder(BaseModel):
    resources: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def validate_grants(self) -> None:
        """Validate every stored access matrix (write path only).

        Raises:
            MatrixValidationError: On the first resource with invalid grants.
        """
        for matrix in self.resources.values():
            validate_matrix(matrix)


class Role(_GrantHolder):
    """Named, inheritable bundle of per-resource access matrices."""

    model_config = {"extra": "ignore"}

    name: str
    extends: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Role name must not be empty")
        return v


class Client(_GrantHolder):
    """API identity holding direct grants and role memberships.

    Accepts both ``client_id``/``access_type`` and the stored
    ``clientId``/``accessType`` spellings.
    """

    model_config = {"extra": "ignore", "populate_by_name": True}

    client_id: str = Field(alias="clientId")
    access_type: Literal["admin", "user"] = Field(default="user", alias="accessType")
    roles: list[str] = Field(default_factory=list)
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("roles")
    @classmethod
    def dedupe_roles(cls, v: list[str]) -> list[str]:
        """Roles are a set; keep first-seen order."""
        return list(dict.fromkeys(v))

    @property
    def is_admin(self) -> bool:
        return self.access_type == AccessType.ADMIN


class AccessEntry(BaseModel):
    """Effective access of one client on one resource."""

    client: str
    resource: str
    access: dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "AccessEntry",
    "Client",
    "Role",
]
