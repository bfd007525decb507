"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional

Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_ORDER: dict[str, int] = {
    "low": 0,
    "medium": 1,
    "high": 2,
    "critical": 3,
}

Category = Literal[
    "prompt_injection",
    "tool_poisoning",
    "toxic_flow",
    "general_security",
    "secrets_exposure",
    "missing_audit_logging",
]

CATEGORIES: tuple[str, ...] = (
    "prompt_injection",
    "tool_poisoning",
    "toxic_flow",
    "general_security",
    "secrets_exposure",
    "missing_audit_logging",
)

# "PromptInjection", "prompt-injection" and "prompt_injection" all fold to "promptinjection"
_CATEGORY_KEYS: dict[str, str] = {c.replace("_", ""): c for c in CATEGORIES}


def severity_at_or_above(finding_sev: str, threshold: str) -> bool:
    """Return True if *finding_sev* is at or above *threshold*."""
    return SEVERITY_ORDER.get(finding_sev, 0) >= SEVERITY_ORDER.get(threshold, 0)


def parse_severity(value: str) -> Severity:
    """Normalise a user-supplied severity name. Raises ValueError if unknown."""
    sev = value.strip().lower()
    if sev not in SEVERITY_ORDER:
        raise ValueError(
            f"Unknown severity '{value}' (expected one of: {', '.join(SEVERITY_ORDER)})"
        )
    return sev  # type: ignore[return-value]


def parse_category(value: str) -> Category:
    """Normalise a category name regardless of case or separators."""
    key = re.sub(r"[^a-z]", "", value.lower())
    if key not in _CATEGORY_KEYS:
        raise ValueError(
            f"Unknown category '{value}' (expected one of: {', '.join(CATEGORIES)})"
        )
    return _CATEGORY_KEYS[key]  # type: ignore[return-value]


@dataclass
class ScanSection:
    minimum_severity: Optional[Severity] = None  # None = report everything
    exclude_categories: List[str] = field(default_factory=list)
    enhanced: bool = False  # secrets-exposure + audit-logging rules


@dataclass
class ThresholdsSection:
    critical: Optional[int] = None  # None = unbounded
    high: Optional[int] = None


@dataclass
class OutputSection:
    formats: List[Literal["json", "sarif", "csv", "markdown"]] = field(
        default_factory=lambda: ["json"]
    )


@dataclass(frozen=True)
class Suppression:
    """Operator override removing every finding at an exact location."""

    location: str
    reason: str = ""

    def matches(self, location: str) -> bool:
        return self.location.casefold() == location.casefold()


@dataclass
class McpAuditConfig:
    version: str = "1.0"
    scan: ScanSection = field(default_factory=ScanSection)
    thresholds: ThresholdsSection = field(default_factory=ThresholdsSection)
    output: OutputSection = field(default_factory=OutputSection)
    suppressions: List[Suppression] = field(default_factory=list)
    patterns: Dict[str, List[str]] = field(default_factory=dict)
