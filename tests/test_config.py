"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from mcpaudit.config.defaults import DEFAULT_TOML
from mcpaudit.config.loader import CONFIG_FILENAME, ConfigError, load_config
from mcpaudit.config.schema import (
    Suppression,
    parse_category,
    parse_severity,
    severity_at_or_above,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(text)
    return path


class TestSeverityAndCategory:
    def test_at_or_above(self):
        assert severity_at_or_above("critical", "high") is True
        assert severity_at_or_above("high", "high") is True
        assert severity_at_or_above("medium", "high") is False
        assert severity_at_or_above("low", "medium") is False

    def test_parse_severity(self):
        assert parse_severity(" HIGH ") == "high"
        with pytest.raises(ValueError, match="Unknown severity"):
            parse_severity("severe")

    @pytest.mark.parametrize("raw", ["PromptInjection", "prompt-injection", "prompt_injection", "PROMPT INJECTION"])
    def test_parse_category_spellings(self, raw):
        assert parse_category(raw) == "prompt_injection"

    def test_parse_category_unknown(self):
        with pytest.raises(ValueError, match="Unknown category"):
            parse_category("spam")


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.scan.minimum_severity is None
        assert cfg.scan.exclude_categories == []
        assert cfg.scan.enhanced is False
        assert cfg.thresholds.critical is None
        assert cfg.thresholds.high is None
        assert cfg.output.formats == ["json"]
        assert cfg.suppressions == []

    def test_starter_template_loads(self, tmp_path: Path):
        _write(tmp_path, DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.output.formats == ["json"]
        assert cfg.patterns == {}

    def test_custom_toml(self, tmp_path: Path):
        _write(
            tmp_path,
            'version = "1.0"\n'
            "[scan]\n"
            'minimum_severity = "Medium"\n'
            'exclude_categories = ["ToxicFlow"]\n'
            "enhanced = true\n"
            "[thresholds]\n"
            "critical = 0\n"
            "high = 3\n"
            "[output]\n"
            'formats = ["json", "sarif"]\n'
            "[[suppressions]]\n"
            'location = "Acme.Tools.DeleteAll"\n'
            'reason = "admin only"\n'
            "[patterns]\n"
            'timeout = ["deadline"]\n',
        )
        cfg = load_config(tmp_path)
        assert cfg.scan.minimum_severity == "medium"
        assert cfg.scan.exclude_categories == ["toxic_flow"]
        assert cfg.scan.enhanced is True
        assert cfg.thresholds.critical == 0
        assert cfg.thresholds.high == 3
        assert cfg.output.formats == ["json", "sarif"]
        assert cfg.suppressions == [Suppression("Acme.Tools.DeleteAll", "admin only")]
        assert cfg.patterns == {"timeout": ["deadline"]}

    def test_unknown_keys_ignored(self, tmp_path: Path):
        _write(tmp_path, "[scan]\nfuture_option = 1\n")
        assert load_config(tmp_path).scan.minimum_severity is None

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[scan]\nminimum_severity = "low"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.scan.minimum_severity == "low"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        _write(tmp_path, "this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestValidation:
    @pytest.mark.parametrize(
        "text",
        [
            '[scan]\nminimum_severity = "extreme"\n',
            '[scan]\nexclude_categories = ["spam"]\n',
            '[scan]\nenhanced = "yes"\n',
            "[thresholds]\ncritical = -1\n",
            "[thresholds]\nhigh = true\n",
            '[thresholds]\nhigh = "5"\n',
            '[output]\nformats = ["pdf"]\n',
            '[output]\nformats = "json"\n',
            '[scan]\nexclude_categories = "toxic_flow"\n',
            "[[suppressions]]\nreason = \"no location\"\n",
            '[[suppressions]]\nlocation = "  "\n',
            '[patterns]\ntimeout = "deadline"\n',
            "scan = 3\n",
        ],
    )
    def test_rejected(self, tmp_path: Path, text):
        _write(tmp_path, text)
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    @pytest.mark.parametrize("section,key", [("scan", "exclude_categories"), ("output", "formats")])
    def test_bare_string_for_list(self, tmp_path: Path, section, key):
        _write(tmp_path, f'[{section}]\n{key} = "toxic_flow"\n')
        with pytest.raises(ConfigError, match=f"\\[{section}\\] {key} must be an array"):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_min_severity(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MCPAUDIT_MIN_SEVERITY", "HIGH")
        assert load_config(tmp_path).scan.minimum_severity == "high"

    def test_exclude_categories(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MCPAUDIT_EXCLUDE_CATEGORIES", "toxic-flow, SecretsExposure")
        cfg = load_config(tmp_path)
        assert cfg.scan.exclude_categories == ["toxic_flow", "secrets_exposure"]

    def test_thresholds(self, tmp_path: Path, monkeypatch):
        _write(tmp_path, "[thresholds]\ncritical = 5\n")
        monkeypatch.setenv("MCPAUDIT_CRITICAL_THRESHOLD", "0")
        monkeypatch.setenv("MCPAUDIT_HIGH_THRESHOLD", "2")
        cfg = load_config(tmp_path)
        assert cfg.thresholds.critical == 0
        assert cfg.thresholds.high == 2

    def test_enhanced(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MCPAUDIT_ENHANCED", "1")
        assert load_config(tmp_path).scan.enhanced is True

    @pytest.mark.parametrize("value", ["abc", "-3"])
    def test_invalid_threshold_env(self, tmp_path: Path, monkeypatch, value):
        monkeypatch.setenv("MCPAUDIT_HIGH_THRESHOLD", value)
        with pytest.raises(ConfigError, match="MCPAUDIT_HIGH_THRESHOLD"):
            load_config(tmp_path)

    def test_invalid_severity_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MCPAUDIT_MIN_SEVERITY", "severe")
        with pytest.raises(ConfigError):
            load_config(tmp_path)
