"""Finding data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from mcpaudit.config.schema import Category, Severity


@dataclass(frozen=True)
class Finding:
    """A single heuristic observation tied to a location."""

    rule_id: str
    category: Category
    severity: Severity
    title: str
    description: str
    location: str  # "<type>.<member>" or "<type>" for group-level findings
    recommendation: str = ""
    evidence: str = ""
    # attached by enrichment
    classification_code: Optional[str] = None
    code_example: Optional[str] = None
    documentation_link: Optional[str] = None


@dataclass(frozen=True)
class SuppressedFinding:
    """Audit record of a finding removed by an explicit suppression."""

    location: str
    reason: str
    category: str
    title: str


@dataclass(frozen=True)
class SeveritySummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass
class AnalysisResult:
    """Complete result of an analysis run."""

    findings: List[Finding] = field(default_factory=list)
    summary: SeveritySummary = field(default_factory=SeveritySummary)
    suppressed: List[SuppressedFinding] = field(default_factory=list)
    filtered_out: int = 0  # dropped by severity floor or category exclusion

    @property
    def total_findings(self) -> int:
        return len(self.findings)
