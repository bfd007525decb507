"""Rule registry — built-in rules plus overridable vocabularies."""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

import yaml

from mcpaudit.config.loader import ConfigError
from mcpaudit.config.schema import McpAuditConfig
from mcpaudit.rules.models import Rule, RuleContext, Vocabulary

logger = logging.getLogger(__name__)

PATTERNS_DIRNAME = ".mcpaudit-patterns"


class RuleRegistry:
    """Central store for detection rules and the vocabularies they read."""

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}
        self._vocabularies: Dict[str, Vocabulary] = {}

    # ---- registration ----

    def register(self, rule: Rule) -> None:
        self._rules[rule.id] = rule

    def register_many(self, rules: Iterable[Rule]) -> None:
        for r in rules:
            self.register(r)

    def register_vocabulary(self, vocabulary: Vocabulary) -> None:
        self._vocabularies[vocabulary.name] = vocabulary

    # ---- queries ----

    @property
    def all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def active_rules(self, *, enhanced: bool = False) -> List[Rule]:
        return [r for r in self._rules.values() if enhanced or not r.enhanced]

    def member_rules(self, *, enhanced: bool = False) -> List[Rule]:
        return [r for r in self.active_rules(enhanced=enhanced) if r.scope == "member"]

    def group_rules(self, *, enhanced: bool = False) -> List[Rule]:
        return [r for r in self.active_rules(enhanced=enhanced) if r.scope == "group"]

    def vocabulary(self, name: str) -> Vocabulary:
        return self._vocabularies[name]

    @property
    def vocabulary_names(self) -> List[str]:
        return sorted(self._vocabularies)

    def context(self, validated_owners: FrozenSet[str] = frozenset()) -> RuleContext:
        """Freeze the current vocabularies into a read-only rule context."""
        frozen: Mapping[str, Vocabulary] = MappingProxyType(dict(self._vocabularies))
        return RuleContext(vocabularies=frozen, validated_owners=frozenset(validated_owners))

    # ---- overrides ----

    def override_vocabulary(self, name: str, terms: Iterable[str]) -> None:
        """Replace the terms of a known vocabulary. Raises KeyError if unknown."""
        if name not in self._vocabularies:
            raise KeyError(name)
        self._vocabularies[name] = Vocabulary.of(name, terms)

    def apply_config(self, config: McpAuditConfig) -> None:
        """Apply ``[patterns]`` overrides from config."""
        for name, terms in config.patterns.items():
            try:
                self.override_vocabulary(name, terms)
            except KeyError:
                raise ConfigError(
                    f"Unknown pattern list '{name}' "
                    f"(expected one of: {', '.join(self.vocabulary_names)})"
                ) from None

    # ---- pattern packs ----

    def load_pattern_files(self, directory: Path) -> int:
        """Load YAML vocabulary overrides from *directory*. Returns count applied."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_patterns(path)
        return count

    def _load_yaml_patterns(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to parse pattern file {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, dict):
            raise ConfigError(f"Pattern file {path} must map list names to term lists")
        count = 0
        for name, terms in data.items():
            if not isinstance(terms, list) or not all(isinstance(t, str) for t in terms):
                raise ConfigError(f"{path}: '{name}' must be a list of strings")
            try:
                self.override_vocabulary(str(name), terms)
            except KeyError:
                raise ConfigError(f"{path}: unknown pattern list '{name}'") from None
            count += 1
        logger.debug("Applied %d pattern override(s) from %s", count, path)
        return count


def build_registry(config: McpAuditConfig, base_dir: Optional[Path] = None) -> RuleRegistry:
    """Create a fully populated registry with pattern overrides applied."""
    from mcpaudit.rules.builtin import ALL_BUILTIN_RULES, ALL_VOCABULARIES

    registry = RuleRegistry()
    registry.register_many(ALL_BUILTIN_RULES)
    for vocabulary in ALL_VOCABULARIES:
        registry.register_vocabulary(vocabulary)

    # Pattern packs from .mcpaudit-patterns/, then [patterns] from config
    if base_dir is not None:
        registry.load_pattern_files(base_dir / PATTERNS_DIRNAME)
    registry.apply_config(config)

    return registry
