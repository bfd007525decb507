"""Markdown report — capability inventory followed by the security review."""

from __future__ import annotations

from collections import Counter
from datetime import datetime
from pathlib import PurePath
from typing import List, Optional

from mcpaudit.findings.models import AnalysisResult, Finding
from mcpaudit.metadata.models import CapabilityGroup, DiscoveryResult

_KIND_SECTIONS = [
    ("tool_group", "🔧 Tools"),
    ("resource_group", "📚 Resources"),
    ("prompt_group", "💬 Prompts"),
]

_SEVERITY_SECTIONS = [
    ("critical", "🚨 Critical Severity"),
    ("high", "⚠️ High Severity"),
    ("medium", "⚡ Medium Severity"),
    ("low", "ℹ️ Low Severity"),
]

_CATEGORY_ICON = {
    "prompt_injection": "💉",
    "tool_poisoning": "☠️",
    "toxic_flow": "⚡",
    "general_security": "🛡️",
    "secrets_exposure": "🔑",
    "missing_audit_logging": "📝",
}


def escape_cell(text: Optional[str]) -> str:
    """Make *text* safe inside a table cell."""
    if not text:
        return ""
    return text.replace("|", "\\|").replace("\r", "").replace("\n", " ")


def _group_section(lines: List[str], group: CapabilityGroup) -> None:
    lines += [f"### {group.type_name}", ""]
    if group.description:
        lines += [f"*{group.description}*", ""]
    if group.audiences:
        lines += [f"**Audiences:** {', '.join(group.audiences)}", ""]
    lines.append("| Name | Title | Description | Audiences |")
    lines.append("|------|-------|-------------|-----------|")
    for m in group.members:
        lines.append(
            f"| `{escape_cell(m.display_name)}` | {escape_cell(m.title)} "
            f"| {escape_cell(m.description)} | {', '.join(m.audiences)} |"
        )
    lines.append("")


def _finding_block(lines: List[str], f: Finding) -> None:
    icon = _CATEGORY_ICON.get(f.category, "⚠️")
    lines += [
        f"#### {icon} {f.title}",
        "",
        f"**Location:** `{f.location}`",
        "",
        f"**Description:** {f.description}",
        "",
    ]
    if f.classification_code:
        lines += [f"**Classification:** {f.classification_code}", ""]
    lines += [f"**Recommendation:** {f.recommendation}", ""]
    if f.evidence:
        lines += [f"**Evidence:** {f.evidence}", ""]
    if f.documentation_link:
        lines += [f"**Reference:** {f.documentation_link}", ""]
    lines += ["---", ""]


def _security_section(lines: List[str], result: AnalysisResult) -> None:
    s = result.summary
    lines += [
        "## 🔒 Security Analysis",
        "",
        "### Summary",
        "",
        f"- **Total Findings:** {s.total}",
        f"- **Critical:** {s.critical}",
        f"- **High:** {s.high}",
        f"- **Medium:** {s.medium}",
        f"- **Low:** {s.low}",
        "",
    ]
    if not result.findings:
        lines += ["✅ No security vulnerabilities detected.", ""]
        return
    for severity, heading in _SEVERITY_SECTIONS:
        matching = [f for f in result.findings if f.severity == severity]
        if not matching:
            continue
        lines += [f"### {heading}", ""]
        for f in matching:
            _finding_block(lines, f)


def render(
    discovery: DiscoveryResult,
    result: Optional[AnalysisResult] = None,
    *,
    generated_at: Optional[datetime] = None,
) -> str:
    """Return the Markdown report. The security section needs *result*."""
    lines: List[str] = ["# MCP Discovery Report", ""]
    if generated_at is not None:
        lines += [f"**Generated:** {generated_at:%Y-%m-%d %H:%M:%S} UTC", ""]

    lines += [
        "## Summary",
        "",
        f"- **Assemblies Scanned:** {len(discovery.assemblies)}",
        f"- **Total Classes:** {discovery.total_groups}",
        f"- **Total Capabilities:** {discovery.total_capabilities}",
        f"  - Tools: {discovery.capability_count('tool')}",
        f"  - Resources: {discovery.capability_count('resource')}",
        f"  - Prompts: {discovery.capability_count('prompt')}",
        "",
    ]

    for kind, heading in _KIND_SECTIONS:
        groups = discovery.groups_of_kind(kind)  # type: ignore[arg-type]
        if not groups:
            continue
        lines += [f"## {heading}", ""]
        for group in groups:
            _group_section(lines, group)

    lines += ["## 📦 Assembly Details", ""]
    for assembly in discovery.assemblies:
        lines += [
            f"### {PurePath(assembly.assembly_path).name}",
            "",
            f"**Path:** `{assembly.assembly_path}`",
            "",
            f"**Classes:** {len(assembly.groups)}",
            "",
        ]
        kinds = Counter(g.kind for g in assembly.groups)
        members = Counter()
        for g in assembly.groups:
            members[g.kind] += len(g.members)
        for kind, count in kinds.items():
            lines.append(f"- {kind}: {count} ({members[kind]} members)")
        lines.append("")

    if result is not None:
        _security_section(lines, result)

    return "\n".join(lines)
