"""Built-in rules and vocabularies — aggregate all categories."""

from mcpaudit.rules.builtin.audit_logging import ALL_AUDIT_RULES
from mcpaudit.rules.builtin.general_security import ALL_GENERAL_RULES
from mcpaudit.rules.builtin.prompt_injection import ALL_PROMPT_RULES
from mcpaudit.rules.builtin.secrets import ALL_SECRET_RULES
from mcpaudit.rules.builtin.tool_poisoning import ALL_TOOL_RULES
from mcpaudit.rules.builtin.toxic_flow import ALL_FLOW_RULES
from mcpaudit.rules.builtin.vocabularies import ALL_VOCABULARIES
from mcpaudit.rules.models import Rule

ALL_BUILTIN_RULES: list[Rule] = [
    *ALL_PROMPT_RULES,
    *ALL_TOOL_RULES,
    *ALL_FLOW_RULES,
    *ALL_GENERAL_RULES,
    *ALL_SECRET_RULES,
    *ALL_AUDIT_RULES,
]

__all__ = ["ALL_BUILTIN_RULES", "ALL_VOCABULARIES"]
