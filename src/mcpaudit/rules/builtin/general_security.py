"""Access-control and outbound-call checks, per capability and per group."""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext
from mcpaudit.rules.text import description_text, identifier_text

_SENSITIVE_VOCABULARIES = ("dangerous_operation", "file_system", "database")

# groups with more members than this need an audience
_GROUP_SIZE_LIMIT = 3


def check_general_security(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    findings: List[Finding] = []

    if cap.kind == "tool" and not cap.audiences:
        identifiers = identifier_text(cap)
        if any(ctx.vocab(v).matches(identifiers) for v in _SENSITIVE_VOCABULARIES):
            findings.append(
                Finding(
                    rule_id=GENERAL_SECURITY.id,
                    category="general_security",
                    severity="high",
                    title="Missing Authorization Controls",
                    description="Sensitive tool operation lacks audience restrictions for access control.",
                    location=cap.location,
                    recommendation=(
                        "Declare audiences for the tool to restrict who may call it. "
                        "Implement role-based access control."
                    ),
                    evidence="No audience restrictions defined on sensitive operation",
                )
            )

    if ctx.vocab("external_call").matches(description_text(cap)):
        findings.append(
            Finding(
                rule_id=GENERAL_SECURITY.id,
                category="general_security",
                severity="medium",
                title="External API Call Detected",
                description="Capability makes external API calls which could be vulnerable to SSRF attacks.",
                location=cap.location,
                recommendation=(
                    "Validate all URLs against an allowlist. Use HTTPS only. Avoid "
                    "accepting arbitrary URLs from user input."
                ),
                evidence="External API/URL pattern detected in description",
            )
        )

    return findings


def check_group_access_control(group: CapabilityGroup, ctx: RuleContext) -> List[Finding]:
    count = len(group.members)
    if group.kind != "tool_group" or group.audiences or count <= _GROUP_SIZE_LIMIT:
        return []
    return [
        Finding(
            rule_id=GROUP_ACCESS_CONTROL.id,
            category="general_security",
            severity="medium",
            title="Tool Class Without Access Control",
            description=f"Tool class contains {count} tools but lacks audience-based access control.",
            location=group.type_name,
            recommendation="Declare audiences on the class to define who can access these tools.",
            evidence=f"Class has {count} tools with no audience restrictions",
        )
    ]


GENERAL_SECURITY = Rule(
    id="GENERAL_SECURITY",
    name="General Security",
    description="Sensitive tools without audiences, and capabilities calling external URLs.",
    category="general_security",
    check=check_general_security,
)

GROUP_ACCESS_CONTROL = Rule(
    id="GROUP_ACCESS_CONTROL",
    name="Group Access Control",
    description="Large tool classes without any audience restriction.",
    category="general_security",
    check=check_group_access_control,
    scope="group",
)

ALL_GENERAL_RULES = [GENERAL_SECURITY, GROUP_ACCESS_CONTROL]
