"""Missing audit logging on state-changing tools (enhanced mode)."""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext
from mcpaudit.rules.text import member_text


def check_missing_audit_logging(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    if group.kind != "tool_group":
        return []
    text = member_text(cap)
    term = ctx.vocab("mutating_operation").first_match(text)
    if term is None or ctx.vocab("audit_logging").matches(text):
        return []
    return [
        Finding(
            rule_id=MISSING_AUDIT_LOGGING.id,
            category="missing_audit_logging",
            severity="medium",
            title="Missing Audit Logging",
            description=(
                f"State-changing operation '{term}' does not document audit logging."
            ),
            location=cap.location,
            evidence=f"Mutating pattern '{term}' detected without logging vocabulary",
        )
    ]


MISSING_AUDIT_LOGGING = Rule(
    id="MISSING_AUDIT_LOGGING",
    name="Missing Audit Logging",
    description="Mutating tools that never mention logging or auditing.",
    category="missing_audit_logging",
    check=check_missing_audit_logging,
    enhanced=True,
)

ALL_AUDIT_RULES = [MISSING_AUDIT_LOGGING]
