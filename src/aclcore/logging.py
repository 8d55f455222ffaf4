"""Centralized logging utilities for aclcore.

This module provides:
- Logging configuration from AclConfig
- Safe preview utilities for access values and grants
- Secret redaction (client secrets, bearer tokens)
- Structured logging with client_id / resource context
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from .config import AclConfig, LogLevel

# Patterns for detecting secrets (common patterns to redact)
SECRET_PATTERNS = [
    r'(?i)(?:password|passwd|pwd|secret|client[_-]?secret|token|api[_-]?key)\s*[:=]\s*["\']?([^"\'\s,}]+)',
    r'(?i)(?:bearer|basic)\s+([a-zA-Z0-9+/=._-]+)',
    r'[a-f0-9]{32,}',  # Long hex strings (hashed secrets, keys)
]

# Record attributes that are never copied into structured output.
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "client_id", "resource",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a safe, length-bounded preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A single-line, truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


def redact_secrets(text: str, replacement: str = "[REDACTED]") -> str:
    """Redact secret patterns (client secrets, tokens, passwords) from text."""
    if not isinstance(text, str):
        return text

    result = text
    for pattern in SECRET_PATTERNS:
        result = re.sub(pattern, replacement, result, flags=re.IGNORECASE | re.DOTALL)

    return result


def safe_log_value(value: Any, limit: int = 240, redact: bool = True) -> str:
    """Preview plus optional redaction; use this for anything client-supplied."""
    preview = safe_preview(value, limit=limit)
    if redact:
        preview = redact_secrets(preview)
    return preview


class AclFormatter(logging.Formatter):
    """Formatter that adds client/resource context, as JSON or plain text."""

    def __init__(
        self,
        include_context: bool = True,
        json_format: bool = True,
        redact_secrets: bool = True,
        *args: Any,
        **kwargs: Any,
    ):
        super().__init__(*args, **kwargs)
        self.include_context = include_context
        self.json_format = json_format
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        client_id = getattr(record, "client_id", None)
        resource = getattr(record, "resource", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            if client_id:
                log_data["client_id"] = client_id
            if resource:
                log_data["resource"] = resource

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_log_value(value, redact=self.redact_secrets)

        if self.redact_secrets:
            log_data["message"] = redact_secrets(log_data["message"])

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            f"{log_data['level']}",
            f"{log_data['logger']}",
        ]
        if self.include_context and client_id:
            parts.append(f"client_id={client_id}")
        if self.include_context and resource:
            parts.append(f"resource={resource}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AclLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds client_id and resource to log records.

    Usage:
        logger = get_acl_logger(__name__, client_id="C1")
        logger.info("Resolved access", resource="collection:books")
    """

    def __init__(
        self,
        logger: logging.Logger,
        client_id: Optional[str] = None,
        resource: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.client_id = client_id
        self.resource = resource

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        client_id = kwargs.pop("client_id", self.client_id)
        resource = kwargs.pop("resource", self.resource)

        extra = kwargs.get("extra", {})
        if client_id:
            extra["client_id"] = client_id
        if resource:
            extra["resource"] = resource
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[AclConfig] = None,
    json_format: Optional[bool] = None,
    redact_secrets: bool = True,
) -> None:
    """Configure root logging from an AclConfig.

    Args:
        config: AclConfig instance (if None, loads from environment)
        json_format: Overrides ``config.log_json`` when given
        redact_secrets: Whether to redact secrets (default: True)
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(config.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AclFormatter(
            include_context=True,
            json_format=config.log_json if json_format is None else json_format,
            redact_secrets=redact_secrets,
        )
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_acl_logger(
    name: str,
    client_id: Optional[str] = None,
    resource: Optional[str] = None,
) -> AclLoggerAdapter:
    """Get a logger adapter carrying client/resource context.

    Example:
        logger = get_acl_logger(__name__, client_id=client.client_id)
        logger.warning("Client has no roles")
    """
    return AclLoggerAdapter(logging.getLogger(name), client_id=client_id, resource=resource)


__all__ = [
    "AclFormatter",
    "AclLoggerAdapter",
    "get_acl_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
]
