"""Analysis pipeline — validation signal, rules, enrichment, filtering, counts.

Every stage takes an immutable input and returns a new list, so the same
discovery result and config always yield an equal AnalysisResult.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from mcpaudit.analyzer.filtering import apply_filters
from mcpaudit.analyzer.validation import collect_validated_owners
from mcpaudit.config.schema import McpAuditConfig
from mcpaudit.findings.aggregator import build_result
from mcpaudit.findings.enrichment import enrich
from mcpaudit.findings.models import AnalysisResult, Finding
from mcpaudit.metadata.models import CapabilityGroup, DiscoveryResult
from mcpaudit.rules.models import RuleContext
from mcpaudit.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)


def run_rules(
    groups: Iterable[CapabilityGroup],
    registry: RuleRegistry,
    context: RuleContext,
    *,
    enhanced: bool = False,
) -> List[Finding]:
    """Evaluate every active rule; member rules first, then group rules."""
    member_rules = registry.member_rules(enhanced=enhanced)
    group_rules = registry.group_rules(enhanced=enhanced)

    findings: List[Finding] = []
    for group in groups:
        for member in group.members:
            for rule in member_rules:
                findings.extend(rule.check(member, group, context))
        for rule in group_rules:
            findings.extend(rule.check(group, context))
    return findings


def analyze(
    discovery: DiscoveryResult,
    config: McpAuditConfig,
    registry: RuleRegistry,
) -> AnalysisResult:
    """Run the full pipeline over *discovery*."""
    groups = [g for g in discovery.all_groups() if g.members]

    validated = collect_validated_owners(groups, registry.vocabulary("validation"))
    context = registry.context(validated)
    logger.debug("Validation signal present for %d of %d group(s)", len(validated), len(groups))

    raw = run_rules(groups, registry, context, enhanced=config.scan.enhanced)
    enriched = enrich(raw)
    logger.debug("Rules produced %d finding(s)", len(enriched))

    outcome = apply_filters(enriched, config.scan, config.suppressions)
    logger.debug(
        "Filtering kept %d, below severity %d, excluded %d, suppressed %d",
        len(outcome.kept), outcome.below_threshold, outcome.excluded, len(outcome.suppressed),
    )

    return build_result(
        outcome.kept,
        suppressed=outcome.suppressed,
        filtered_out=outcome.below_threshold + outcome.excluded,
    )
