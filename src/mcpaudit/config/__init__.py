"""Configuration loading, schema, and defaults."""

from mcpaudit.config.loader import ConfigError, load_config
from mcpaudit.config.schema import (
    McpAuditConfig,
    Severity,
    parse_severity,
    severity_at_or_above,
)

__all__ = [
    "ConfigError",
    "McpAuditConfig",
    "Severity",
    "load_config",
    "parse_severity",
    "severity_at_or_above",
]
