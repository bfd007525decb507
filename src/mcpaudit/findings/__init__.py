"""Finding models, enrichment, aggregation, and the threshold gate."""

from mcpaudit.findings.aggregator import build_result, sort_findings, summarize
from mcpaudit.findings.enrichment import CATEGORY_GUIDANCE, enrich
from mcpaudit.findings.gate import GateResult, evaluate_gate
from mcpaudit.findings.models import (
    AnalysisResult,
    Finding,
    SeveritySummary,
    SuppressedFinding,
)

__all__ = [
    "AnalysisResult",
    "CATEGORY_GUIDANCE",
    "Finding",
    "GateResult",
    "SeveritySummary",
    "SuppressedFinding",
    "build_result",
    "enrich",
    "evaluate_gate",
    "sort_findings",
    "summarize",
]
