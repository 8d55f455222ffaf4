from .config import AclConfig, LogLevel, load_config_from_env
from .engine import AccessEngine
from .exceptions import (
    AclError,
    ConfigurationError,
    CyclicRoleInheritance,
    MatrixValidationError,
    RoleResolutionError,
    UnknownIdentity,
    UnknownParentRole,
)
from .interfaces import ClientStore, InMemoryClientStore, InMemoryRoleStore, RoleStore
from .logging import (
    AclFormatter,
    AclLoggerAdapter,
    get_acl_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .models import AccessEntry, Client, Role
from .permissions import (
    DENIED,
    FULL,
    AccessCompositor,
    AccessType,
    AccessValue,
    Denied,
    Filtered,
    Full,
    Operation,
    Projected,
    ResourceRegistry,
    RoleResolver,
    filter_fields,
    format_matrix,
    get_access,
    is_admin,
    merge,
    merge_fields,
    parse_access_value,
    resolve_own_operations,
    resolve_role,
    validate_matrix,
)

__all__ = [
    'AccessEngine',
    'AclConfig',
    'LogLevel',
    'load_config_from_env',
    'AclError',
    'ConfigurationError',
    'CyclicRoleInheritance',
    'MatrixValidationError',
    'RoleResolutionError',
    'UnknownIdentity',
    'UnknownParentRole',
    'ClientStore',
    'RoleStore',
    'InMemoryClientStore',
    'InMemoryRoleStore',
    'AclFormatter',
    'AclLoggerAdapter',
    'get_acl_logger',
    'redact_secrets',
    'safe_log_value',
    'safe_preview',
    'setup_logging',
    'AccessEntry',
    'Client',
    'Role',
    'DENIED',
    'FULL',
    'AccessCompositor',
    'AccessType',
    'AccessValue',
    'Denied',
    'Filtered',
    'Full',
    'Operation',
    'Projected',
    'ResourceRegistry',
    'RoleResolver',
    'filter_fields',
    'format_matrix',
    'get_access',
    'is_admin',
    'merge',
    'merge_fields',
    'parse_access_value',
    'resolve_own_operations',
    'resolve_role',
    'validate_matrix',
]
