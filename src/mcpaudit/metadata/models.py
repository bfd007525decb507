"""Capability metadata models — the normalized output of a Metadata Provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Literal, Optional, Tuple

CapabilityKind = Literal["tool", "resource", "prompt"]
GroupKind = Literal["tool_group", "resource_group", "prompt_group"]

GROUP_MEMBER_KIND: Dict[str, str] = {
    "tool_group": "tool",
    "resource_group": "resource",
    "prompt_group": "prompt",
}


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Trim *value*; blank or missing text becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def normalize_audiences(values: Iterable[Optional[str]]) -> Tuple[str, ...]:
    """Trim, drop blanks, and de-duplicate case-insensitively (first spelling wins)."""
    seen: set[str] = set()
    result: List[str] = []
    for raw in values:
        value = normalize_text(raw)
        if value is None:
            continue
        key = value.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return tuple(result)


@dataclass(frozen=True)
class Capability:
    """One discovered tool, resource, or prompt."""

    owner_name: str
    member_name: str
    kind: CapabilityKind
    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    audiences: Tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.member_name

    @property
    def location(self) -> str:
        return f"{self.owner_name}.{self.member_name}"


@dataclass(frozen=True)
class CapabilityGroup:
    """A declaring class and the capabilities it exposes."""

    type_name: str
    kind: GroupKind
    description: Optional[str] = None
    audiences: Tuple[str, ...] = ()
    members: Tuple[Capability, ...] = ()


@dataclass(frozen=True)
class AssemblyMetadata:
    assembly_path: str
    groups: Tuple[CapabilityGroup, ...] = ()


@dataclass(frozen=True)
class DiscoveryResult:
    """Everything the Metadata Provider reported for one scan."""

    assemblies: Tuple[AssemblyMetadata, ...] = field(default_factory=tuple)

    def all_groups(self) -> Iterator[CapabilityGroup]:
        for assembly in self.assemblies:
            yield from assembly.groups

    def groups_of_kind(self, kind: GroupKind) -> List[CapabilityGroup]:
        return [g for g in self.all_groups() if g.kind == kind]

    @property
    def total_groups(self) -> int:
        return sum(len(a.groups) for a in self.assemblies)

    @property
    def total_capabilities(self) -> int:
        return sum(len(g.members) for g in self.all_groups())

    def capability_count(self, kind: CapabilityKind) -> int:
        return sum(1 for g in self.all_groups() for m in g.members if m.kind == kind)


def make_capability(
    owner_name: str,
    member_name: str,
    kind: CapabilityKind,
    *,
    name: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    audiences: Iterable[Optional[str]] = (),
) -> Capability:
    """Build a Capability with normalized text fields."""
    return Capability(
        owner_name=owner_name,
        member_name=member_name,
        kind=kind,
        name=normalize_text(name),
        title=normalize_text(title),
        description=normalize_text(description),
        audiences=normalize_audiences(audiences),
    )


def make_group(
    type_name: str,
    kind: GroupKind,
    members: Iterable[Capability],
    *,
    description: Optional[str] = None,
    audiences: Iterable[Optional[str]] = (),
) -> Optional[CapabilityGroup]:
    """Build a CapabilityGroup; returns None when it has no members."""
    member_tuple = tuple(members)
    if not member_tuple:
        return None
    return CapabilityGroup(
        type_name=type_name,
        kind=kind,
        description=normalize_text(description),
        audiences=normalize_audiences(audiences),
        members=member_tuple,
    )
