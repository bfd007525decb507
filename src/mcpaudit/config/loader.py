"""Load and merge configuration from .mcpaudit.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from mcpaudit.config.schema import (
    McpAuditConfig,
    OutputSection,
    ScanSection,
    Suppression,
    ThresholdsSection,
    parse_category,
    parse_severity,
)

CONFIG_FILENAME = ".mcpaudit.toml"

_FORMATS = ("json", "sarif", "csv", "markdown")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    defaults = cls()
    for key, value in filtered.items():
        if isinstance(getattr(defaults, key), list) and not isinstance(value, list):
            raise ConfigError(f"[{section}] {key} must be an array, got {value!r}")
    return cls(**filtered)


def _check_threshold(name: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; "true" is not a ceiling
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"Threshold '{name}' must be a non-negative integer, got {value!r}")
    return value


def _parse_int_env(name: str, value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc
    return _check_threshold(name, parsed)  # type: ignore[return-value]


def _parse_suppressions(raw: Any) -> List[Suppression]:
    if not isinstance(raw, list):
        raise ConfigError("[[suppressions]] must be an array of tables")
    entries: List[Suppression] = []
    for idx, item in enumerate(raw, 1):
        if not isinstance(item, dict) or not isinstance(item.get("location"), str):
            raise ConfigError(f"Suppression #{idx} needs a string 'location'")
        location = item["location"].strip()
        if not location:
            raise ConfigError(f"Suppression #{idx} has an empty 'location'")
        entries.append(Suppression(location=location, reason=str(item.get("reason", ""))))
    return entries


def _parse_patterns(raw: Any) -> Dict[str, List[str]]:
    if not isinstance(raw, dict):
        raise ConfigError("[patterns] must be a table of term lists")
    patterns: Dict[str, List[str]] = {}
    for name, terms in raw.items():
        if not isinstance(terms, list) or not all(isinstance(t, str) for t in terms):
            raise ConfigError(f"Pattern list '{name}' must be an array of strings")
        patterns[name] = list(terms)
    return patterns


def validate_config(cfg: McpAuditConfig) -> None:
    """Normalise enum-like values in place; raise ConfigError on bad input."""
    scan = cfg.scan
    try:
        if scan.minimum_severity is not None:
            scan.minimum_severity = parse_severity(scan.minimum_severity)
        scan.exclude_categories = [parse_category(c) for c in scan.exclude_categories]
    except (ValueError, AttributeError) as exc:
        raise ConfigError(str(exc)) from exc
    if not isinstance(scan.enhanced, bool):
        raise ConfigError("[scan] enhanced must be true or false")

    cfg.thresholds.critical = _check_threshold("critical", cfg.thresholds.critical)
    cfg.thresholds.high = _check_threshold("high", cfg.thresholds.high)

    unknown = [f for f in cfg.output.formats if f not in _FORMATS]
    if unknown:
        raise ConfigError(
            f"Unknown output format(s): {', '.join(map(str, unknown))} "
            f"(expected: {', '.join(_FORMATS)})"
        )


def _merge_env_overrides(cfg: McpAuditConfig) -> None:
    """Apply MCPAUDIT_* environment variable overrides."""
    if val := os.environ.get("MCPAUDIT_MIN_SEVERITY"):
        cfg.scan.minimum_severity = val  # type: ignore[assignment]
    if val := os.environ.get("MCPAUDIT_EXCLUDE_CATEGORIES"):
        cfg.scan.exclude_categories.extend(c.strip() for c in val.split(",") if c.strip())
    if val := os.environ.get("MCPAUDIT_CRITICAL_THRESHOLD"):
        cfg.thresholds.critical = _parse_int_env("MCPAUDIT_CRITICAL_THRESHOLD", val)
    if val := os.environ.get("MCPAUDIT_HIGH_THRESHOLD"):
        cfg.thresholds.high = _parse_int_env("MCPAUDIT_HIGH_THRESHOLD", val)
    if os.environ.get("MCPAUDIT_ENHANCED") == "1":
        cfg.scan.enhanced = True


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> McpAuditConfig:
    """Load, validate, and return a McpAuditConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = McpAuditConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = McpAuditConfig(
                version=str(raw.get("version", "1.0")),
                scan=_build_section(raw, ScanSection, "scan"),
                thresholds=_build_section(raw, ThresholdsSection, "thresholds"),
                output=_build_section(raw, OutputSection, "output"),
                suppressions=_parse_suppressions(raw.get("suppressions", [])),
                patterns=_parse_patterns(raw.get("patterns", {})),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    validate_config(cfg)
    return cfg
