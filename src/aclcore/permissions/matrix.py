"""Access matrix helpers.

An access matrix maps each :class:`Operation` to an access value. In
computed form it is sparse (denied operations are omitted). In stored
form it is a plain dict of raw grants, e.g.::

    {"read": True, "update": {"filter": {"published": False}}, "delete": False}
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ..exceptions import MatrixValidationError
from .constants import ALL_OPERATIONS, DEFAULT_OWNER_FIELD, Operation
from .merge import AccessMatrix, ResourceMap
from .values import AccessValue, Denied, Filtered, Full, Projected, parse_access_value

logger = logging.getLogger(__name__)

_ALLOWED_OBJECT_KEYS = ("fields", "filter")


def parse_matrix(raw: Mapping[Any, Any] | None) -> AccessMatrix:
    """Parse a stored access matrix into a sparse matrix of access values.

    Unknown operation names are ignored; rejecting them is the job of
    :func:`validate_matrix` on the write path.
    """
    matrix: AccessMatrix = {}
    for name, raw_value in (raw or {}).items():
        operation = Operation.parse(name)
        if operation is None:
            logger.debug("Ignoring unknown operation %r in access matrix", name)
            continue
        value = parse_access_value(raw_value)
        if not isinstance(value, Denied):
            matrix[operation] = value
    return matrix


def parse_resource_map(raw: Mapping[str, Any] | None) -> ResourceMap:
    """Parse a stored resource → matrix map, dropping resources with no grants."""
    resources: ResourceMap = {}
    for resource, raw_matrix in (raw or {}).items():
        matrix = parse_matrix(raw_matrix)
        if matrix:
            resources[resource] = matrix
    return resources


def dump_matrix(matrix: Mapping[Operation, AccessValue]) -> dict[str, Any]:
    """Convert a matrix back to its sparse stored shape."""
    return {
        operation.value: value.to_raw() for operation, value in matrix.items() if not isinstance(value, Denied)
    }


def format_matrix(matrix: Mapping[Operation, AccessValue]) -> dict[str, Any]:
    """Return a fixed-key document with every operation present.

    Denied operations are filled in as ``False``.
    """
    return {operation.value: matrix.get(operation, Denied()).to_raw() for operation in ALL_OPERATIONS}


def format_resource_map(resources: Mapping[str, Mapping[Operation, AccessValue]]) -> dict[str, dict[str, Any]]:
    return {resource: format_matrix(matrix) for resource, matrix in resources.items()}


def validate_matrix(raw: Any) -> None:
    """Validate a stored access matrix before it is written.

    All problems are collected and raised together.

    Raises:
        MatrixValidationError: With one message per problem in ``errors``.
    """
    if not isinstance(raw, dict):
        raise MatrixValidationError(errors=["Access matrix must be an object"])

    errors: list[str] = []

    for name, value in raw.items():
        if Operation.parse(name) is None:
            errors.append(f"Invalid access type: {name}")

        if isinstance(value, bool):
            continue

        if not isinstance(value, dict):
            errors.append(f"Invalid value for {name} (expected boolean or object)")
            continue

        for key, inner in value.items():
            if key not in _ALLOWED_OBJECT_KEYS:
                errors.append(f"Invalid key in access matrix: {name}.{key}")
            elif not isinstance(inner, dict):
                errors.append(f"Invalid value in access matrix: {name}.{key} (expected object)")

        fields = value.get("fields")
        if isinstance(fields, dict):
            kinds = {v == 0 for v in fields.values()}
            if len(kinds) > 1:
                errors.append(f"Invalid projection in access matrix: {name}.fields mixes inclusion and exclusion")

    if errors:
        raise MatrixValidationError(errors=errors)


def resolve_own_operations(
    matrix: Mapping[Operation, AccessValue],
    client_id: str,
    owner_field: str = DEFAULT_OWNER_FIELD,
) -> AccessMatrix:
    """Fold ``*Own`` operations into their base operations.

    ``{"update": False, "updateOwn": True}`` for client ``C1`` becomes
    ``{"update": {"filter": {"_createdBy": "C1"}}}``. Filters already on
    the base or ``*Own`` grant are kept, with the owner condition added.
    A base operation that is already unconditional stays unconditional.

    Returns:
        A new sparse matrix without any ``*Own`` keys.
    """
    resolved: AccessMatrix = {
        operation: value for operation, value in matrix.items() if not operation.is_own
    }

    for operation, own_value in matrix.items():
        if not operation.is_own or isinstance(own_value, Denied):
            continue

        base_value = resolved.get(operation.base)
        if isinstance(base_value, Full):
            continue

        query: dict[str, Any] = {}
        if isinstance(base_value, Filtered):
            query.update(base_value.filter)
        if isinstance(own_value, Filtered):
            query.update(own_value.filter)
        query[owner_field] = client_id

        fields = _fields_of(base_value) or _fields_of(own_value)
        resolved[operation.base] = Filtered(filter=query, fields=fields)

    return resolved


def _fields_of(value: AccessValue | None) -> dict[str, Any] | None:
    if isinstance(value, (Filtered, Projected)) and value.fields:
        return dict(value.fields)
    return None


def filter_fields(access: AccessValue, data: Any) -> Any:
    """Drop the fields an access value does not allow.

    Args:
        access: Access value for the operation being performed.
        data: A list of field names or a document (dict).

    Returns:
        ``data`` unchanged if ``access`` carries no projection, otherwise
        a new list/dict with only the permitted fields.

    Example::

        filter_fields(Projected({"title": 1}), ["title", "body"])   # ["title"]
        filter_fields(Projected({"body": 0}), {"title": "x", "body": "y"})  # {"title": "x"}
    """
    fields = _fields_of(access)
    if fields is None or not data:
        return data

    is_exclusion = any(field != "_id" and value == 0 for field, value in fields.items())

    def allowed(field: str) -> bool:
        if is_exclusion:
            return field not in fields
        return fields.get(field) == 1

    if isinstance(data, list):
        return [field for field in data if allowed(field)]
    return {field: value for field, value in data.items() if allowed(field)}


__all__ = [
    "dump_matrix",
    "filter_fields",
    "format_matrix",
    "format_resource_map",
    "parse_matrix",
    "parse_resource_map",
    "resolve_own_operations",
    "validate_matrix",
]
