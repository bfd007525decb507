"""Structured JSON report — discovery metadata plus the security analysis."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from mcpaudit import __version__
from mcpaudit.findings.models import AnalysisResult, Finding
from mcpaudit.metadata.models import Capability, CapabilityGroup, DiscoveryResult


def _optional(**fields: Optional[str]) -> Dict[str, str]:
    """Keep only non-empty text fields (absent rather than null)."""
    return {k: v for k, v in fields.items() if v}


def _member_dict(cap: Capability) -> Dict[str, Any]:
    return {
        "method_name": cap.member_name,
        "kind": cap.kind,
        **_optional(name=cap.name, title=cap.title, description=cap.description),
        "audiences": list(cap.audiences),
    }


def _group_dict(group: CapabilityGroup) -> Dict[str, Any]:
    return {
        "type_name": group.type_name,
        "kind": group.kind,
        **_optional(description=group.description),
        "audiences": list(group.audiences),
        "members": [_member_dict(m) for m in group.members],
    }


def finding_dict(f: Finding) -> Dict[str, Any]:
    return {
        "rule": f.rule_id,
        "category": f.category,
        "severity": f.severity,
        "title": f.title,
        "description": f.description,
        "location": f.location,
        **_optional(
            recommendation=f.recommendation,
            evidence=f.evidence,
            classification_code=f.classification_code,
            code_example=f.code_example,
            documentation_link=f.documentation_link,
        ),
    }


def to_dict(
    discovery: DiscoveryResult,
    result: AnalysisResult,
    *,
    generated_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Convert discovery + analysis to a JSON-serialisable dict."""
    suppressed_list: List[Dict[str, Any]] = [
        {
            "location": s.location,
            "category": s.category,
            "title": s.title,
            **_optional(reason=s.reason),
        }
        for s in result.suppressed
    ]
    summary = result.summary

    report: Dict[str, Any] = {
        "version": "1.0",
        "tool": {"name": "mcpaudit", "version": __version__},
    }
    if generated_at is not None:
        report["generated_at_utc"] = generated_at.isoformat()
    report.update({
        "assemblies": [
            {
                "assembly_path": a.assembly_path,
                "classes": [_group_dict(g) for g in a.groups],
            }
            for a in discovery.assemblies
        ],
        "security_analysis": {
            "total_findings": summary.total,
            "critical_count": summary.critical,
            "high_count": summary.high,
            "medium_count": summary.medium,
            "low_count": summary.low,
            "filtered_out": result.filtered_out,
            "findings": [finding_dict(f) for f in result.findings],
            "suppressed": len(result.suppressed),
            "suppressed_details": suppressed_list,
        },
    })
    return report


def render(
    discovery: DiscoveryResult,
    result: AnalysisResult,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(discovery, result, generated_at=generated_at), indent=2)
