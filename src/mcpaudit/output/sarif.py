"""SARIF v2.1.0 reporter — GitHub Advanced Security / Code Scanning."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from mcpaudit import __version__
from mcpaudit.findings.enrichment import CATEGORY_GUIDANCE
from mcpaudit.findings.models import AnalysisResult, Finding

_SEVERITY_MAP = {
    "critical": "error",
    "high": "error",
    "medium": "warning",
    "low": "note",
}

# Highest severity each category can raise.
_CATEGORY_SEVERITY = {
    "prompt_injection": "high",
    "tool_poisoning": "critical",
    "toxic_flow": "medium",
    "general_security": "high",
    "secrets_exposure": "critical",
    "missing_audit_logging": "medium",
}


def _rule_descriptor(category: str) -> Dict[str, Any]:
    guidance = CATEGORY_GUIDANCE.get(category)
    default_severity = _CATEGORY_SEVERITY.get(category, "medium")
    descriptor: Dict[str, Any] = {
        "id": category,
        "name": category.replace("_", " ").title().replace(" ", ""),
        "shortDescription": {"text": category.replace("_", " ").capitalize()},
        "defaultConfiguration": {
            "level": _SEVERITY_MAP[default_severity],
        },
        "properties": {
            "security-severity": _security_severity(default_severity),
        },
    }
    if guidance is not None:
        descriptor["helpUri"] = guidance.documentation_link
        descriptor["help"] = {"text": guidance.remediation}
        descriptor["properties"]["tags"] = ["security", guidance.classification_code]
    return descriptor


def _properties(f: Finding) -> Dict[str, Any]:
    props: Dict[str, Any] = {"severity": f.severity, "title": f.title}
    for key, value in (
        ("classificationCode", f.classification_code),
        ("recommendation", f.recommendation),
        ("evidence", f.evidence),
        ("codeExample", f.code_example),
        ("documentationLink", f.documentation_link),
    ):
        if value:
            props[key] = value
    return props


def to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Convert AnalysisResult to a SARIF v2.1.0 dict."""
    rules: List[Dict[str, Any]] = []
    seen_rules: set[str] = set()
    results: List[Dict[str, Any]] = []

    for f in result.findings:
        # Rule definition (only once per category)
        if f.category not in seen_rules:
            seen_rules.add(f.category)
            rules.append(_rule_descriptor(f.category))

        results.append({
            "ruleId": f.category,
            "level": _SEVERITY_MAP.get(f.severity, "warning"),
            "message": {"text": f.description},
            "locations": [
                {
                    "logicalLocations": [
                        {
                            "fullyQualifiedName": f.location,
                            "kind": "member" if "." in f.location else "type",
                        }
                    ]
                }
            ],
            "properties": _properties(f),
        })

    sarif = {
        "$schema": "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/main/sarif-2.1/schema/sarif-schema-2.1.0.json",
        "version": "2.1.0",
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": "mcpaudit",
                        "version": __version__,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }
    return sarif


def render(result: AnalysisResult) -> str:
    """Return SARIF JSON string."""
    return json.dumps(to_dict(result), indent=2)


def _security_severity(severity: str) -> str:
    """Map severity to SARIF security-severity score (0.0 – 10.0)."""
    mapping = {
        "critical": "9.5",
        "high": "7.5",
        "medium": "5.0",
        "low": "2.0",
    }
    return mapping.get(severity, "5.0")
