"""Built-in term lists. Every list can be replaced by name from config."""

from mcpaudit.rules.models import Vocabulary

VALIDATION = Vocabulary.of(
    "validation",
    ["validate", "sanitize", "check", "verify", "whitelist", "allowlist", "regex", "filter"],
)

PROMPT_USER_INPUT = Vocabulary.of("prompt_user_input", ["user", "input", "parameter"])

PROMPT_CONCATENATION = Vocabulary.of("prompt_concatenation", ["concat", "+", "format"])

DANGEROUS_OPERATION = Vocabulary.of(
    "dangerous_operation",
    [
        "execute", "exec", "run", "invoke", "call", "system", "command", "shell",
        "delete", "remove", "drop", "truncate", "destroy", "kill", "terminate",
    ],
)

FILE_SYSTEM = Vocabulary.of(
    "file_system",
    ["file", "directory", "path", "read", "write", "create", "open", "save", "load"],
)

DATABASE = Vocabulary.of(
    "database",
    ["query", "sql", "database", "db", "execute", "insert", "update", "delete", "select"],
)

ASYNC_OPERATION = Vocabulary.of("async_operation", ["async"])

TIMEOUT = Vocabulary.of("timeout", ["timeout", "delay"])

EXPENSIVE_OPERATION = Vocabulary.of(
    "expensive_operation",
    ["process", "generate", "compute", "calculate", "analyze", "fetch", "download"],
)

RATE_LIMIT = Vocabulary.of("rate_limit", ["rate", "limit", "throttle"])

EXTERNAL_CALL = Vocabulary.of("external_call", ["api", "http", "url"])

# Most specific first: "auth_token" must win over "token".
SECRET_INDICATOR = Vocabulary.of(
    "secret_indicator",
    [
        "aws_secret", "private_key", "auth_token", "api_key", "apikey", "access_key",
        "client_secret", "connection_string", "password", "passwd", "credentials",
        "bearer", "token",
    ],
)

MUTATING_OPERATION = Vocabulary.of(
    "mutating_operation",
    ["delete", "remove", "create", "update", "execute", "modify"],
)

AUDIT_LOGGING = Vocabulary.of("audit_logging", ["log", "audit", "track", "record", "monitor"])

ALL_VOCABULARIES = [
    VALIDATION,
    PROMPT_USER_INPUT,
    PROMPT_CONCATENATION,
    DANGEROUS_OPERATION,
    FILE_SYSTEM,
    DATABASE,
    ASYNC_OPERATION,
    TIMEOUT,
    EXPENSIVE_OPERATION,
    RATE_LIMIT,
    EXTERNAL_CALL,
    SECRET_INDICATOR,
    MUTATING_OPERATION,
    AUDIT_LOGGING,
]
