"""CSV reporter — one row per finding, for spreadsheets and triage queues."""

from __future__ import annotations

import csv
import io

from mcpaudit.findings.models import AnalysisResult

HEADER = [
    "Category",
    "Severity",
    "CWE",
    "Title",
    "Description",
    "Location",
    "Recommendation",
    "Evidence",
]


def render(result: AnalysisResult) -> str:
    """Return CSV text. Fields with commas, quotes or newlines are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADER)
    for f in result.findings:
        writer.writerow([
            f.category,
            f.severity,
            f.classification_code or "",
            f.title,
            f.description,
            f.location,
            f.recommendation,
            f.evidence,
        ])
    return buf.getvalue()
