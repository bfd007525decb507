"""Attach classification codes, remediation, and references to findings."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Dict, Iterable, List

from mcpaudit.findings.models import Finding


@dataclass(frozen=True)
class CategoryGuidance:
    classification_code: str
    remediation: str
    code_example: str
    documentation_link: str


CATEGORY_GUIDANCE: Dict[str, CategoryGuidance] = {
    "prompt_injection": CategoryGuidance(
        classification_code="CWE-77",
        remediation=(
            "Treat user-supplied text as data, never as instructions. Validate inputs "
            "against an allowlist, keep them in clearly delimited template slots, and "
            "avoid building prompts by string concatenation."
        ),
        code_example=(
            'template = "Summarise the text between <input> tags.\\n<input>{text}</input>"\n'
            "prompt = template.format(text=sanitize(user_text))"
        ),
        documentation_link="https://cwe.mitre.org/data/definitions/77.html",
    ),
    "tool_poisoning": CategoryGuidance(
        classification_code="CWE-78",
        remediation=(
            "Constrain what the tool can do: validate every argument against an "
            "allowlist, resolve paths inside a fixed root, use parameterized queries, "
            "and require explicit authorization for destructive operations."
        ),
        code_example=(
            "root = Path(BASE_DIR).resolve()\n"
            "target = (root / requested).resolve()\n"
            "if not target.is_relative_to(root):\n"
            '    raise PermissionError("path escapes sandbox")'
        ),
        documentation_link="https://cwe.mitre.org/data/definitions/78.html",
    ),
    "toxic_flow": CategoryGuidance(
        classification_code="CWE-400",
        remediation=(
            "Bound resource usage: apply timeouts and cancellation to long-running "
            "work, rate-limit expensive calls, and document expected execution time."
        ),
        code_example="result = await asyncio.wait_for(fetch(url), timeout=10)",
        documentation_link="https://cwe.mitre.org/data/definitions/400.html",
    ),
    "general_security": CategoryGuidance(
        classification_code="CWE-285",
        remediation=(
            "Declare audiences for sensitive capabilities and enforce role-based "
            "access control. Validate outbound URLs against an allowlist and use "
            "HTTPS only."
        ),
        code_example='[McpAudience("admin")]\npublic static string DeleteAll() { ... }',
        documentation_link="https://cwe.mitre.org/data/definitions/285.html",
    ),
    "secrets_exposure": CategoryGuidance(
        classification_code="CWE-798",
        remediation=(
            "Never accept or return credentials through capability arguments or "
            "results. Load secrets from a secret manager or environment at runtime "
            "and redact them from responses and logs."
        ),
        code_example='api_key = os.environ["SERVICE_API_KEY"]  # never a tool argument',
        documentation_link="https://cwe.mitre.org/data/definitions/798.html",
    ),
    "missing_audit_logging": CategoryGuidance(
        classification_code="CWE-778",
        remediation=(
            "Record who invoked every state-changing capability, with what "
            "arguments and outcome, in a tamper-evident audit log."
        ),
        code_example='audit_log.info("tool=%s caller=%s args=%s", name, caller, redacted_args)',
        documentation_link="https://cwe.mitre.org/data/definitions/778.html",
    ),
}


def enrich_finding(finding: Finding) -> Finding:
    """Return a copy of *finding* carrying its category guidance."""
    guidance = CATEGORY_GUIDANCE.get(finding.category)
    if guidance is None:
        return finding
    return dataclasses.replace(
        finding,
        classification_code=guidance.classification_code,
        recommendation=finding.recommendation or guidance.remediation,
        code_example=guidance.code_example,
        documentation_link=guidance.documentation_link,
    )


def enrich(findings: Iterable[Finding]) -> List[Finding]:
    return [enrich_finding(f) for f in findings]
