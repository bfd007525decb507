"""Starter .mcpaudit.toml template written by ``mcpaudit init``."""

DEFAULT_TOML = """\
# mcpaudit configuration
version = "1.0"

[scan]
# minimum_severity = "medium"      # low | medium | high | critical
# exclude_categories = ["toxic_flow"]
enhanced = false                   # also run secrets-exposure and audit-logging rules

[thresholds]
# critical = 0                     # fail when more critical findings than this
# high = 5                         # absent = no ceiling

[output]
formats = ["json"]                 # json | sarif | csv | markdown (json is always written)

# [[suppressions]]
# location = "Acme.Tools.AdminTools.DeleteAll"
# reason = "admin-only tool, reviewed"

[patterns]
# Replace any built-in vocabulary, e.g.:
# dangerous_operation = ["exec", "shell", "kill"]
# validation = ["validate", "sanitize", "schema"]
"""
