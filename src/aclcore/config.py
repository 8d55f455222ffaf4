"""Configuration for the access engine.

Pydantic-validated settings shared by every process embedding aclcore
(log level and format, owner field, system resources).

Direct os.environ/os.getenv usage is confined to
:func:`load_config_from_env`; everything else receives an
:class:`AclConfig`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .permissions.constants import DEFAULT_OWNER_FIELD


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AclConfig(BaseModel):
    """Configuration for :class:`~aclcore.engine.AccessEngine` and logging."""

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used as logger name for the service",
    )

    # Access resolution
    owner_field: str = Field(
        default=DEFAULT_OWNER_FIELD,
        description="Document field holding the creating client's ID, used for *Own operations",
    )
    register_system_resources: bool = Field(
        default=True,
        description="Register the fixed system resources (clients, roles) on engine creation",
    )

    @field_validator("owner_field")
    @classmethod
    def validate_owner_field(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Owner field must be a non-empty string")
        return v.strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def load_config_from_env() -> AclConfig:
    """Load configuration from environment variables.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - SERVICE_NAME: Service name
    - ACL_OWNER_FIELD: Owner field for *Own operations (default: _createdBy)
    - ACL_REGISTER_SYSTEM_RESOURCES: Register clients/roles resources (default: true)

    Returns:
        AclConfig instance with values from environment or defaults.
    """
    import os

    return AclConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in ("true", "1", "yes"),
        service_name=os.getenv("SERVICE_NAME"),
        owner_field=os.getenv("ACL_OWNER_FIELD", DEFAULT_OWNER_FIELD),
        register_system_resources=os.getenv("ACL_REGISTER_SYSTEM_RESOURCES", "true").lower()
        in ("true", "1", "yes", "on"),
    )


__all__ = [
    "AclConfig",
    "LogLevel",
    "load_config_from_env",
]
