"""Severity counting and result assembly."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from mcpaudit.config.schema import SEVERITY_ORDER
from mcpaudit.findings.models import (
    AnalysisResult,
    Finding,
    SeveritySummary,
    SuppressedFinding,
)


def summarize(findings: Iterable[Finding]) -> SeveritySummary:
    """Count *findings* per severity. Always computed from scratch."""
    counts = Counter(f.severity for f in findings)
    return SeveritySummary(
        total=sum(counts.values()),
        critical=counts.get("critical", 0),
        high=counts.get("high", 0),
        medium=counts.get("medium", 0),
        low=counts.get("low", 0),
    )


def build_result(
    findings: List[Finding],
    suppressed: Optional[List[SuppressedFinding]] = None,
    filtered_out: int = 0,
) -> AnalysisResult:
    """Wrap the final finding list with a freshly computed summary."""
    return AnalysisResult(
        findings=list(findings),
        summary=summarize(findings),
        suppressed=list(suppressed or []),
        filtered_out=filtered_out,
    )


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    """Most severe first; original order kept within a severity."""
    return sorted(findings, key=lambda f: -SEVERITY_ORDER.get(f.severity, 0))
