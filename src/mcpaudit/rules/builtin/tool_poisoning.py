"""Tool-poisoning detection — dangerous, file-system, and database tools.

The three checks are independent: one tool can produce up to three findings.
Only the dangerous-operation check ignores the validation signal.
"""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext
from mcpaudit.rules.text import member_text


def check_tool_poisoning(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    if cap.kind != "tool":
        return []

    findings: List[Finding] = []
    text = member_text(cap)
    discounted = "medium" if ctx.has_validation(group) else "high"

    term = ctx.vocab("dangerous_operation").first_match(text)
    if term:
        findings.append(
            Finding(
                rule_id=TOOL_POISONING.id,
                category="tool_poisoning",
                severity="critical",
                title="Potentially Dangerous Tool Operation",
                description=f"Tool contains dangerous operation pattern: '{term}'",
                location=cap.location,
                recommendation=(
                    "Ensure strict input validation, implement allowlists, add "
                    "authorization checks, and audit all usage."
                ),
                evidence=f"Pattern '{term}' detected in tool name/description",
            )
        )

    term = ctx.vocab("file_system").first_match(text)
    if term:
        findings.append(
            Finding(
                rule_id=TOOL_POISONING.id,
                category="tool_poisoning",
                severity=discounted,
                title="File System Access Detected",
                description=(
                    "Tool performs file system operations which could be exploited "
                    "for path traversal attacks."
                ),
                location=cap.location,
                recommendation=(
                    "Validate all file paths against an allowlist. Resolve paths and "
                    "ensure they stay within expected directories."
                ),
                evidence=f"File system pattern '{term}' detected",
            )
        )

    term = ctx.vocab("database").first_match(text)
    if term:
        findings.append(
            Finding(
                rule_id=TOOL_POISONING.id,
                category="tool_poisoning",
                severity=discounted,
                title="Database Operation Detected",
                description=(
                    "Tool performs database operations which could be vulnerable to "
                    "SQL injection."
                ),
                location=cap.location,
                recommendation=(
                    "Always use parameterized queries or an ORM. Never concatenate user "
                    "input into SQL statements. Use least-privilege database access."
                ),
                evidence=f"Database pattern '{term}' detected",
            )
        )

    return findings


TOOL_POISONING = Rule(
    id="TOOL_POISONING",
    name="Tool Poisoning",
    description="Tools whose name or description suggests dangerous side effects.",
    category="tool_poisoning",
    check=check_tool_poisoning,
)

ALL_TOOL_RULES = [TOOL_POISONING]
