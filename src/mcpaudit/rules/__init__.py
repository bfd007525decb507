"""Rule engine — models, registry, built-in rules."""

from mcpaudit.rules.models import Rule, RuleContext, Vocabulary
from mcpaudit.rules.registry import RuleRegistry, build_registry

__all__ = ["Rule", "RuleContext", "RuleRegistry", "Vocabulary", "build_registry"]
