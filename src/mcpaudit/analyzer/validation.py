"""Validation signal — which groups document input validation somewhere.

The signal is deliberately group-wide: a single member mentioning validation
lowers the severity of file-system, database, and prompt findings for every
sibling in the same class.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable

from mcpaudit.metadata.models import CapabilityGroup
from mcpaudit.rules.models import Vocabulary
from mcpaudit.rules.text import member_text


def group_has_validation(group: CapabilityGroup, vocabulary: Vocabulary) -> bool:
    return any(vocabulary.matches(member_text(m)) for m in group.members)


def collect_validated_owners(
    groups: Iterable[CapabilityGroup], vocabulary: Vocabulary
) -> FrozenSet[str]:
    """Return the type names of groups with at least one validating member."""
    return frozenset(g.type_name for g in groups if group_has_validation(g, vocabulary))
