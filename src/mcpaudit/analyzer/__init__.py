"""Analyzer — validation signal, rule evaluation, filtering."""

from mcpaudit.analyzer.engine import analyze, run_rules
from mcpaudit.analyzer.filtering import FilterOutcome, apply_filters
from mcpaudit.analyzer.validation import collect_validated_owners

__all__ = [
    "FilterOutcome",
    "analyze",
    "apply_filters",
    "collect_validated_owners",
    "run_rules",
]
