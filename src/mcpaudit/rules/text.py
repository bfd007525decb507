"""Text views of a capability that the heuristics search."""

from __future__ import annotations

from mcpaudit.metadata.models import Capability


def _join(*parts: object) -> str:
    return " ".join(p for p in parts if isinstance(p, str) and p).lower()


def identifier_text(cap: Capability) -> str:
    """Implementation name plus declared name."""
    return _join(cap.member_name, cap.name)


def member_text(cap: Capability) -> str:
    """Identifiers plus description."""
    return _join(cap.member_name, cap.name, cap.description)


def full_text(cap: Capability) -> str:
    """Identifiers, title and description."""
    return _join(cap.member_name, cap.name, cap.title, cap.description)


def description_text(cap: Capability) -> str:
    return (cap.description or "").lower()
