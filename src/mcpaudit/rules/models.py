"""Rule data model — vocabularies, the evaluation context, and rule records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Literal, Mapping, Optional, Tuple

from mcpaudit.config.schema import Category
from mcpaudit.findings.models import Finding
from mcpaudit.metadata.models import CapabilityGroup


@dataclass(frozen=True)
class Vocabulary:
    """An ordered list of lowercase substring terms.

    Matching is case-insensitive substring search; when several terms occur,
    the first one in list order wins.
    """

    name: str
    terms: Tuple[str, ...]

    def __post_init__(self) -> None:
        cleaned = tuple(t.strip().lower() for t in self.terms if t and t.strip())
        object.__setattr__(self, "terms", cleaned)

    @classmethod
    def of(cls, name: str, terms: Iterable[str]) -> "Vocabulary":
        return cls(name=name, terms=tuple(terms))

    def first_match(self, text: str) -> Optional[str]:
        lowered = text.lower()
        for term in self.terms:
            if term in lowered:
                return term
        return None

    def matches(self, text: str) -> bool:
        return self.first_match(text) is not None


@dataclass(frozen=True)
class RuleContext:
    """Read-only state shared by every rule invocation in one run."""

    vocabularies: Mapping[str, Vocabulary]
    validated_owners: FrozenSet[str] = frozenset()

    def vocab(self, name: str) -> Vocabulary:
        return self.vocabularies[name]

    def has_validation(self, group: CapabilityGroup) -> bool:
        return group.type_name in self.validated_owners


@dataclass(frozen=True)
class Rule:
    """A single detector.

    Member-scope rules are called once per capability with its owning group;
    group-scope rules once per group. ``enhanced`` rules only run when the
    enhanced analysis mode is switched on.
    """

    id: str
    name: str
    description: str
    category: Category
    check: Callable[..., List[Finding]]
    scope: Literal["member", "group"] = "member"
    enhanced: bool = False
