"""Secrets-exposure detection (enhanced mode)."""

from __future__ import annotations

from typing import List

from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup
from mcpaudit.rules.models import Rule, RuleContext
from mcpaudit.rules.text import full_text


def check_secrets_exposure(
    cap: Capability, group: CapabilityGroup, ctx: RuleContext
) -> List[Finding]:
    term = ctx.vocab("secret_indicator").first_match(full_text(cap))
    if term is None:
        return []
    return [
        Finding(
            rule_id=SECRETS_EXPOSURE.id,
            category="secrets_exposure",
            severity="critical",
            title="Potential Secret Exposure",
            description=(
                f"Capability appears to handle credentials ('{term}'), which may be "
                "accepted, returned, or logged in clear text."
            ),
            location=cap.location,
            evidence=f"Secret indicator '{term}' detected in name/title/description",
        )
    ]


SECRETS_EXPOSURE = Rule(
    id="SECRETS_EXPOSURE",
    name="Secrets Exposure",
    description="Capabilities whose metadata mentions credentials or tokens.",
    category="secrets_exposure",
    check=check_secrets_exposure,
    enhanced=True,
)

ALL_SECRET_RULES = [SECRETS_EXPOSURE]
