"""Access resolution for aclcore.

Defines:
- Operation / AccessType: the closed operation set and client tiers
- AccessValue: Denied | Full | Filtered | Projected
- merge(): broadest-wins combination of access values
- ResourceRegistry: catalog of access-controlled resources
- RoleResolver: role inheritance resolution
- AccessCompositor: effective access of a client
"""

from .access import AccessCompositor, full_matrix, get_access, is_admin
from .constants import ALL_OPERATIONS, DEFAULT_OWNER_FIELD, SYSTEM_RESOURCES, AccessType, Operation
from .inheritance import RoleLookup, RoleResolver, resolve_role
from .matrix import (
    dump_matrix,
    filter_fields,
    format_matrix,
    format_resource_map,
    parse_matrix,
    parse_resource_map,
    resolve_own_operations,
    validate_matrix,
)
from .merge import (
    AccessMatrix,
    ResourceMap,
    merge,
    merge_all,
    merge_fields,
    merge_matrices,
    merge_resource_maps,
)
from .registry import ResourceRegistry
from .values import (
    DENIED,
    FULL,
    AccessValue,
    Denied,
    Filtered,
    Full,
    Projected,
    parse_access_value,
)

__all__ = [
    "ALL_OPERATIONS",
    "DEFAULT_OWNER_FIELD",
    "DENIED",
    "FULL",
    "SYSTEM_RESOURCES",
    "AccessCompositor",
    "AccessMatrix",
    "AccessType",
    "AccessValue",
    "Denied",
    "Filtered",
    "Full",
    "Operation",
    "Projected",
    "ResourceMap",
    "ResourceRegistry",
    "RoleLookup",
    "RoleResolver",
    "dump_matrix",
    "filter_fields",
    "format_matrix",
    "format_resource_map",
    "full_matrix",
    "get_access",
    "is_admin",
    "merge",
    "merge_all",
    "merge_fields",
    "merge_matrices",
    "merge_resource_maps",
    "parse_access_value",
    "parse_matrix",
    "parse_resource_map",
    "resolve_own_operations",
    "resolve_role",
    "validate_matrix",
]
