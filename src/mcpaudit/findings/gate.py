"""Threshold gate — pass/fail decision for CI pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from mcpaudit.findings.models import SeveritySummary


@dataclass(frozen=True)
class GateResult:
    passed: bool
    reasons: List[str] = field(default_factory=list)


def evaluate_gate(
    summary: SeveritySummary,
    critical_threshold: Optional[int] = None,
    high_threshold: Optional[int] = None,
) -> GateResult:
    """Fail when a post-filter count exceeds its ceiling. None = no ceiling."""
    reasons: List[str] = []
    if critical_threshold is not None and summary.critical > critical_threshold:
        reasons.append(
            f"{summary.critical} critical finding(s) exceed threshold of {critical_threshold}"
        )
    if high_threshold is not None and summary.high > high_threshold:
        reasons.append(
            f"{summary.high} high finding(s) exceed threshold of {high_threshold}"
        )
    return GateResult(passed=not reasons, reasons=reasons)
