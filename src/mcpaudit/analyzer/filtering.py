"""Severity floor, category exclusion, and location suppressions.

Applied in that order. Each step only removes findings; survivors keep their
relative order and are never edited.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from mcpaudit.config.schema import ScanSection, Suppression, severity_at_or_above
from mcpaudit.findings.models import Finding, SuppressedFinding


@dataclass
class FilterOutcome:
    kept: List[Finding] = field(default_factory=list)
    suppressed: List[SuppressedFinding] = field(default_factory=list)
    below_threshold: int = 0
    excluded: int = 0


def filter_by_severity(findings: Iterable[Finding], minimum: Optional[str]) -> List[Finding]:
    if minimum is None:
        return list(findings)
    return [f for f in findings if severity_at_or_above(f.severity, minimum)]


def filter_by_category(findings: Iterable[Finding], excluded: Iterable[str]) -> List[Finding]:
    excluded_set = set(excluded)
    return [f for f in findings if f.category not in excluded_set]


def find_suppression(location: str, suppressions: Sequence[Suppression]) -> Optional[Suppression]:
    """Return the first suppression whose location equals *location* (case-insensitive)."""
    for sup in suppressions:
        if sup.matches(location):
            return sup
    return None


def apply_filters(
    findings: Sequence[Finding],
    scan: ScanSection,
    suppressions: Sequence[Suppression] = (),
) -> FilterOutcome:
    after_severity = filter_by_severity(findings, scan.minimum_severity)
    after_category = filter_by_category(after_severity, scan.exclude_categories)

    outcome = FilterOutcome(
        below_threshold=len(findings) - len(after_severity),
        excluded=len(after_severity) - len(after_category),
    )
    for finding in after_category:
        sup = find_suppression(finding.location, suppressions)
        if sup is None:
            outcome.kept.append(finding)
            continue
        outcome.suppressed.append(
            SuppressedFinding(
                location=finding.location,
                reason=sup.reason,
                category=finding.category,
                title=finding.title,
            )
        )
    return outcome
