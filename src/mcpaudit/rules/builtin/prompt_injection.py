"""Prompt-injection detection for prompt templates."""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext


def check_prompt_injection(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    if cap.kind != "prompt":
        return []

    findings: List[Finding] = []
    description = cap.description or ""

    user_term = ctx.vocab("prompt_user_input").first_match(description)
    concat_term = ctx.vocab("prompt_concatenation").first_match(description)
    if user_term and concat_term:
        findings.append(
            Finding(
                rule_id=PROMPT_INJECTION.id,
                category="prompt_injection",
                severity="medium" if ctx.has_validation(group) else "high",
                title="Potential Prompt Injection Risk",
                description=(
                    "Prompt appears to accept user input and may concatenate it "
                    "directly without sanitization."
                ),
                location=cap.location,
                recommendation=(
                    "Implement input sanitization and validation. Use templating with "
                    "proper escaping. Consider allowlists for expected input patterns."
                ),
                evidence=f"Description contains user input indicators: '{description}'",
            )
        )

    if not description:
        findings.append(
            Finding(
                rule_id=PROMPT_INJECTION.id,
                category="prompt_injection",
                severity="medium",
                title="Missing Prompt Documentation",
                description=(
                    "Prompt lacks a description, which may indicate missing input "
                    "validation considerations."
                ),
                location=cap.location,
                recommendation="Document the prompt's expected inputs and validate them.",
                evidence="No description provided",
            )
        )

    return findings


PROMPT_INJECTION = Rule(
    id="PROMPT_INJECTION",
    name="Prompt Injection",
    description="Prompts that splice user input into their text, or are undocumented.",
    category="prompt_injection",
    check=check_prompt_injection,
)

ALL_PROMPT_RULES = [PROMPT_INJECTION]
