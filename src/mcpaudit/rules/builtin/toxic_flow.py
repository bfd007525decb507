"""Toxic-flow detection — unbounded async work and unthrottled expensive tools."""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext
from mcpaudit.rules.text import description_text, member_text


def check_toxic_flow(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    findings: List[Finding] = []
    text = member_text(cap)
    description = description_text(cap)

    if ctx.vocab("async_operation").matches(text) and not ctx.vocab("timeout").matches(description):
        findings.append(
            Finding(
                rule_id=TOXIC_FLOW.id,
                category="toxic_flow",
                severity="medium",
                title="Async Operation Without Timeout",
                description=(
                    "Async operation detected without timeout configuration, which "
                    "could lead to resource exhaustion."
                ),
                location=cap.location,
                recommendation=(
                    "Implement cancellation and timeout limits. Document expected "
                    "execution time."
                ),
                evidence="Async operation without timeout documentation",
            )
        )

    if cap.kind == "tool":
        term = ctx.vocab("expensive_operation").first_match(text)
        if term and not ctx.vocab("rate_limit").matches(description):
            findings.append(
                Finding(
                    rule_id=TOXIC_FLOW.id,
                    category="toxic_flow",
                    severity="medium",
                    title="Potentially Expensive Operation",
                    description=(
                        f"Tool performs potentially expensive operation '{term}' "
                        "without rate limiting."
                    ),
                    location=cap.location,
                    recommendation=(
                        "Implement rate limiting, request throttling, or queue-based "
                        "processing. Set maximum execution time limits."
                    ),
                    evidence=f"Expensive operation pattern '{term}' detected without rate limiting",
                )
            )

    return findings


TOXIC_FLOW = Rule(
    id="TOXIC_FLOW",
    name="Toxic Flow",
    description="Operations that can exhaust resources when invoked repeatedly.",
    category="toxic_flow",
    check=check_toxic_flow,
)

ALL_FLOW_RULES = [TOXIC_FLOW]
