"""Exception hierarchy for aclcore.

All errors inherit from AclError. This module provides:
- Base exception hierarchy with stable error codes
- ErrorRegistry for mapping codes back to exception classes

Usage:
    from aclcore.exceptions import AclError, CyclicRoleInheritance

    try:
        engine.get_access(client, "collection:books")
    except CyclicRoleInheritance as e:
        logger.error("Broken role graph: %s", e.details["chain"])
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "AclError",
    "ConfigurationError",
    "RoleResolutionError",
    "CyclicRoleInheritance",
    "UnknownParentRole",
    "UnknownIdentity",
    "MatrixValidationError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
]


# ---- Exception Hierarchy ----------------------------------------------------


class AclError(Exception):
    """Base exception for aclcore.

    Attributes:
        code: Stable error code string (e.g. "UNKNOWN_PARENT_ROLE").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AclError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class RoleResolutionError(AclError):
    """A role's inheritance chain cannot be resolved."""

    code: str = "ROLE_RESOLUTION_ERROR"


class CyclicRoleInheritance(RoleResolutionError):
    """A role's ``extends`` chain revisits a role already on the chain."""

    code: str = "CYCLIC_ROLE_INHERITANCE"

    def __init__(self, chain: list[str], **kwargs: Any) -> None:
        super().__init__(
            f"Cyclic role inheritance: {' -> '.join(chain)}",
            chain=list(chain),
            **kwargs,
        )


class UnknownParentRole(RoleResolutionError):
    """A role extends a role that does not exist."""

    code: str = "UNKNOWN_PARENT_ROLE"

    def __init__(self, role: str, parent: str, **kwargs: Any) -> None:
        super().__init__(
            f"Role '{role}' extends unknown role '{parent}'",
            role=role,
            parent=parent,
            **kwargs,
        )


class UnknownIdentity(AclError):
    """A client or role reference does not resolve to a record.

    The access engine maps unknown identities to "no access" instead of
    raising; this is for stores and callers that must tell
    "unauthenticated" apart from "unauthorized".
    """

    code: str = "UNKNOWN_IDENTITY"


class MatrixValidationError(AclError, ValueError):
    """Stored access matrix has an invalid shape."""

    code: str = "ACCESS_MATRIX_VALIDATION_FAILED"
    message: str = "ACCESS_MATRIX_VALIDATION_FAILED"

    def __init__(self, errors: list[str], **kwargs: Any) -> None:
        super().__init__(errors=list(errors), **kwargs)
        self.errors = list(errors)


# ---- Error Registry ---------------------------------------------------------

_E = TypeVar("_E", bound=type[AclError])


class ErrorRegistry:
    """Registry for mapping stable error codes to exception classes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[AclError]] = {}

    def register(self, code: str, error_cls: type[AclError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[AclError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[AclError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("ROLE_STORE_UNAVAILABLE")
        class RoleStoreUnavailable(AclError):
            code = "ROLE_STORE_UNAVAILABLE"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", AclError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("ROLE_RESOLUTION_ERROR", RoleResolutionError)
error_registry.register("CYCLIC_ROLE_INHERITANCE", CyclicRoleInheritance)
error_registry.register("UNKNOWN_PARENT_ROLE", UnknownParentRole)
error_registry.register("UNKNOWN_IDENTITY", UnknownIdentity)
error_registry.register("ACCESS_MATRIX_VALIDATION_FAILED", MatrixValidationError)
