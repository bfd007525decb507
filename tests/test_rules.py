"""Tests for vocabularies, the rule registry, and the built-in rules."""

from pathlib import Path

import pytest
import yaml

from mcpaudit.config.loader import ConfigError
from mcpaudit.config.schema import McpAuditConfig
from mcpaudit.metadata.models import make_capability, make_group
from mcpaudit.rules.builtin import ALL_BUILTIN_RULES
from mcpaudit.rules.builtin.audit_logging import check_missing_audit_logging
from mcpaudit.rules.builtin.general_security import (
    check_general_security,
    check_group_access_control,
)
from mcpaudit.rules.builtin.prompt_injection import check_prompt_injection
from mcpaudit.rules.builtin.secrets import check_secrets_exposure
from mcpaudit.rules.builtin.tool_poisoning import check_tool_poisoning
from mcpaudit.rules.builtin.toxic_flow import check_toxic_flow
from mcpaudit.rules.models import Vocabulary
from mcpaudit.rules.registry import PATTERNS_DIRNAME, RuleRegistry, build_registry

OWNER = "Acme.Tools"


@pytest.fixture
def registry() -> RuleRegistry:
    return build_registry(McpAuditConfig())


@pytest.fixture
def ctx(registry):
    return registry.context()


@pytest.fixture
def validated_ctx(registry):
    return registry.context(frozenset({OWNER}))


def _single(kind="tool", group_kind="tool_group", **fields):
    cap = make_capability(OWNER, fields.pop("member", "Member"), kind, **fields)
    return cap, make_group(OWNER, group_kind, [cap])


def _titles(findings):
    return [f.title for f in findings]


class TestVocabulary:
    def test_terms_normalized(self):
        vocab = Vocabulary.of("x", [" Token ", "", "  ", "API"])
        assert vocab.terms == ("token", "api")

    def test_first_match_follows_list_order(self):
        vocab = Vocabulary.of("x", ["token", "auth_token"])
        assert vocab.first_match("my AUTH_TOKEN here") == "token"

    def test_no_match(self):
        vocab = Vocabulary.of("x", ["shell"])
        assert vocab.first_match("harmless") is None
        assert not vocab.matches("harmless")


class TestRegistry:
    def test_all_builtins_registered(self, registry):
        assert len(registry.all_rules) == len(ALL_BUILTIN_RULES)

    def test_enhanced_rules_gated(self, registry):
        basic = {r.id for r in registry.active_rules(enhanced=False)}
        full = {r.id for r in registry.active_rules(enhanced=True)}
        assert "SECRETS_EXPOSURE" not in basic
        assert "MISSING_AUDIT_LOGGING" not in basic
        assert full - basic == {"SECRETS_EXPOSURE", "MISSING_AUDIT_LOGGING"}

    def test_group_rules_split_out(self, registry):
        assert [r.id for r in registry.group_rules()] == ["GROUP_ACCESS_CONTROL"]
        assert all(r.scope == "member" for r in registry.member_rules(enhanced=True))

    def test_context_is_read_only(self, ctx):
        with pytest.raises(TypeError):
            ctx.vocabularies["validation"] = Vocabulary.of("validation", [])  # type: ignore[index]

    def test_config_patterns_override(self):
        cfg = McpAuditConfig(patterns={"dangerous_operation": ["nuke"]})
        reg = build_registry(cfg)
        assert reg.vocabulary("dangerous_operation").terms == ("nuke",)

    def test_unknown_config_pattern_rejected(self):
        cfg = McpAuditConfig(patterns={"no_such_list": ["x"]})
        with pytest.raises(ConfigError, match="no_such_list"):
            build_registry(cfg)

    def test_pattern_pack_loaded(self, tmp_path: Path):
        pack_dir = tmp_path / PATTERNS_DIRNAME
        pack_dir.mkdir()
        (pack_dir / "team.yaml").write_text(yaml.dump({"timeout": ["deadline"]}))
        reg = build_registry(McpAuditConfig(), tmp_path)
        assert reg.vocabulary("timeout").terms == ("deadline",)

    def test_config_wins_over_pattern_pack(self, tmp_path: Path):
        pack_dir = tmp_path / PATTERNS_DIRNAME
        pack_dir.mkdir()
        (pack_dir / "team.yml").write_text(yaml.dump({"timeout": ["deadline"]}))
        reg = build_registry(McpAuditConfig(patterns={"timeout": ["ttl"]}), tmp_path)
        assert reg.vocabulary("timeout").terms == ("ttl",)

    def test_invalid_yaml_raises(self, tmp_path: Path):
        pack_dir = tmp_path / PATTERNS_DIRNAME
        pack_dir.mkdir()
        (pack_dir / "bad.yaml").write_text("timeout: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            build_registry(McpAuditConfig(), tmp_path)

    def test_undecodable_pattern_file_raises(self, tmp_path: Path):
        pack_dir = tmp_path / PATTERNS_DIRNAME
        pack_dir.mkdir()
        (pack_dir / "bad.yaml").write_bytes(b"timeout: [\xff\xfe]\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            build_registry(McpAuditConfig(), tmp_path)

    def test_pattern_values_must_be_string_lists(self, tmp_path: Path):
        pack_dir = tmp_path / PATTERNS_DIRNAME
        pack_dir.mkdir()
        (pack_dir / "bad.yaml").write_text(yaml.dump({"timeout": "deadline"}))
        with pytest.raises(ConfigError, match="list of strings"):
            build_registry(McpAuditConfig(), tmp_path)

    def test_missing_pack_dir_is_fine(self, tmp_path: Path):
        reg = build_registry(McpAuditConfig(), tmp_path)
        assert reg.vocabulary("timeout").terms == ("timeout", "delay")


class TestPromptInjection:
    def test_user_input_concatenation_is_high(self, ctx):
        cap, group = _single(
            "prompt", "prompt_group", member="GetUserPrompt", name="user-prompt",
            description="Process this user input: {concatenated}",
        )
        findings = check_prompt_injection(cap, group, ctx)
        assert len(findings) == 1
        assert findings[0].severity == "high"
        assert "Process this user input" in findings[0].evidence

    def test_validation_discounts_to_medium(self, validated_ctx):
        cap, group = _single(
            "prompt", "prompt_group", description="Formats the user parameter",
        )
        findings = check_prompt_injection(cap, group, validated_ctx)
        assert [f.severity for f in findings] == ["medium"]

    def test_missing_description(self, ctx):
        cap, group = _single("prompt", "prompt_group", member="Greet")
        findings = check_prompt_injection(cap, group, ctx)
        assert _titles(findings) == ["Missing Prompt Documentation"]
        assert findings[0].severity == "medium"

    def test_user_input_alone_not_flagged(self, ctx):
        cap, group = _single("prompt", "prompt_group", description="Summarises user input")
        assert check_prompt_injection(cap, group, ctx) == []

    def test_tools_ignored(self, ctx):
        cap, group = _single(description="concat user input")
        assert check_prompt_injection(cap, group, ctx) == []


class TestToolPoisoning:
    def test_file_system_only(self, ctx):
        cap, group = _single(
            member="ReadFile", name="read-file",
            description="Reads file content from user-specified path",
        )
        findings = check_tool_poisoning(cap, group, ctx)
        assert _titles(findings) == ["File System Access Detected"]
        assert findings[0].severity == "high"
        assert "'file'" in findings[0].evidence

    def test_checks_are_independent(self, ctx):
        cap, group = _single(
            member="ExecuteQuery", name="sql-query",
            description="Executes SQL query with user input",
        )
        findings = check_tool_poisoning(cap, group, ctx)
        assert _titles(findings) == [
            "Potentially Dangerous Tool Operation",
            "Database Operation Detected",
        ]
        assert [f.severity for f in findings] == ["critical", "high"]
        assert "'execute'" in findings[0].description
        assert "'query'" in findings[1].evidence

    def test_validation_discount_spares_dangerous(self, validated_ctx):
        cap, group = _single(member="DeleteAll", name="delete-all", description="Deletes all system data")
        findings = check_tool_poisoning(cap, group, validated_ctx)
        severities = {f.title: f.severity for f in findings}
        assert severities["Potentially Dangerous Tool Operation"] == "critical"
        assert severities["Database Operation Detected"] == "medium"

    def test_non_tools_ignored(self, ctx):
        cap, group = _single("resource", "resource_group", member="DeleteAll", description="Deletes all")
        assert check_tool_poisoning(cap, group, ctx) == []

    def test_synthetic_vocabulary(self):
        reg = build_registry(McpAuditConfig(patterns={"dangerous_operation": ["frobnicate"]}))
        cap, group = _single(member="Frobnicate")
        findings = check_tool_poisoning(cap, group, reg.context())
        assert [f.severity for f in findings] == ["critical"]


class TestToxicFlow:
    def test_async_and_expensive(self, ctx):
        cap, group = _single(
            member="ProcessData", name="process-data",
            description="Processes large dataset asynchronously",
        )
        findings = check_toxic_flow(cap, group, ctx)
        assert _titles(findings) == [
            "Async Operation Without Timeout",
            "Potentially Expensive Operation",
        ]
        assert all(f.severity == "medium" for f in findings)

    def test_timeout_and_rate_limit_documented(self, ctx):
        cap, group = _single(
            member="ProcessData",
            description="Processes data asynchronously with a timeout and rate limit",
        )
        assert check_toxic_flow(cap, group, ctx) == []

    def test_expensive_only_for_tools(self, ctx):
        cap, group = _single("resource", "resource_group", member="Report", description="Generates a report")
        assert check_toxic_flow(cap, group, ctx) == []

    def test_async_applies_to_any_kind(self, ctx):
        cap, group = _single("resource", "resource_group", member="LoadAsync")
        assert _titles(check_toxic_flow(cap, group, ctx)) == ["Async Operation Without Timeout"]


class TestGeneralSecurity:
    def test_sensitive_tool_without_audience(self, ctx):
        cap, group = _single(member="DeleteAll", name="delete-all")
        findings = check_general_security(cap, group, ctx)
        assert _titles(findings) == ["Missing Authorization Controls"]
        assert findings[0].severity == "high"

    def test_audience_clears_authorization_finding(self, ctx):
        cap, group = _single(member="DeleteAll", audiences=["admin"])
        assert check_general_security(cap, group, ctx) == []

    def test_only_identifiers_considered_for_authorization(self, ctx):
        cap, group = _single(member="Summary", description="Reads the file index")
        assert check_general_security(cap, group, ctx) == []

    def test_external_call(self, ctx):
        cap, group = _single(
            "resource", "resource_group", member="Status",
            description="Makes HTTP request to a status page",
        )
        findings = check_general_security(cap, group, ctx)
        assert _titles(findings) == ["External API Call Detected"]
        assert findings[0].severity == "medium"

    def test_large_tool_group_without_audience(self, ctx):
        members = [make_capability(OWNER, f"M{i}", "tool") for i in range(4)]
        group = make_group(OWNER, "tool_group", members)
        findings = check_group_access_control(group, ctx)
        assert len(findings) == 1
        assert findings[0].location == OWNER
        assert "4 tools" in findings[0].description

    def test_three_members_is_fine(self, ctx):
        members = [make_capability(OWNER, f"M{i}", "tool") for i in range(3)]
        group = make_group(OWNER, "tool_group", members)
        assert check_group_access_control(group, ctx) == []

    def test_group_audience_or_kind_clears(self, ctx):
        members = [make_capability(OWNER, f"M{i}", "tool") for i in range(5)]
        with_audience = make_group(OWNER, "tool_group", members, audiences=["ops"])
        resources = make_group(
            OWNER, "resource_group",
            [make_capability(OWNER, f"R{i}", "resource") for i in range(5)],
        )
        assert check_group_access_control(with_audience, ctx) == []
        assert check_group_access_control(resources, ctx) == []


class TestSecretsExposure:
    def test_most_specific_indicator_wins(self, ctx):
        cap, group = _single(member="RotateToken", name="rotate_auth_token")
        findings = check_secrets_exposure(cap, group, ctx)
        assert len(findings) == 1
        assert findings[0].severity == "critical"
        assert "'auth_token'" in findings[0].evidence

    def test_title_is_searched(self, ctx):
        cap, group = _single(member="Login", title="Check password")
        assert len(check_secrets_exposure(cap, group, ctx)) == 1

    def test_clean(self, ctx):
        cap, group = _single(member="Forecast", description="Weather for a city")
        assert check_secrets_exposure(cap, group, ctx) == []


class TestMissingAuditLogging:
    def test_mutating_tool_without_logging(self, ctx):
        cap, group = _single(member="DeleteUser", description="Deletes a user")
        findings = check_missing_audit_logging(cap, group, ctx)
        assert _titles(findings) == ["Missing Audit Logging"]
        assert findings[0].category == "missing_audit_logging"

    def test_logging_documented(self, ctx):
        cap, group = _single(member="DeleteUser", description="Deletes a user and writes an audit record")
        assert check_missing_audit_logging(cap, group, ctx) == []

    def test_tool_groups_only(self, ctx):
        cap, group = _single("resource", "resource_group", member="DeleteUser")
        assert check_missing_audit_logging(cap, group, ctx) == []
