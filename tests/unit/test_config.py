"""
Unit tests for configuration system
"""

import json
from pathlib import Path

import pytest
import yaml
from styled_sort.core.config import (
    BackupConfig,
    Config,
    FixConfig,
    ParserConfig,
    RuleConfig,
)


class TestConfig:
    """Test configuration functionality"""

    def test_default_config(self):
        """Test default configuration creation"""
        config = Config()

        assert config.dry_run is False
        assert config.verbose is False
        assert config.quiet is False
        assert config.extensions == [".js", ".jsx", ".ts", ".tsx"]

        assert isinstance(config.rule, RuleConfig)
        assert isinstance(config.fix, FixConfig)
        assert isinstance(config.parser, ParserConfig)
        assert isinstance(config.backup, BackupConfig)

    def test_rule_config_defaults(self):
        """Test rule configuration defaults"""
        config = RuleConfig()

        assert "styled" in config.marker_names
        assert config.separator == "\n"
        assert config.usage_strategy == "structural"
        assert config.max_passes == 1000

    def test_defaults_not_shared(self):
        """Test list defaults are per instance"""
        first = RuleConfig()
        first.marker_names.append("emotion")

        assert "emotion" not in RuleConfig().marker_names

    def test_load_from_yaml(self, tmp_path):
        """Test loading configuration from YAML file"""
        config_file = tmp_path / "config.yaml"
        config_data = {
            "dry_run": True,
            "rule": {"marker_names": ["styled"], "separator": "\n\n"},
            "parser": {"command": ["node", "dump-ast.js"]},
        }
        config_file.write_text(yaml.safe_dump(config_data))

        config = Config.from_file(config_file)

        assert config.dry_run is True
        assert config.rule.marker_names == ["styled"]
        assert config.rule.separator == "\n\n"
        assert config.parser.command == ["node", "dump-ast.js"]
        assert config.config_file == str(config_file)

    def test_load_from_json(self, tmp_path):
        """Test loading configuration from JSON file"""
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"backup": {"enabled": False}, "fix": {"max_fix_passes": 3}})
        )

        config = Config.from_file(config_file)

        assert config.backup.enabled is False
        assert config.fix.max_fix_passes == 3

    def test_missing_and_unsupported_files(self, tmp_path):
        """Test fallbacks to defaults"""
        assert Config.from_file(tmp_path / "missing.yaml") == Config()

        ini = tmp_path / "config.ini"
        ini.write_text("[rule]")
        assert Config.from_file(ini) == Config()

    def test_merge_configs(self):
        """Test merging configurations"""
        base = Config()
        other = Config()
        other.verbose = True
        other.rule.separator = "\n\n"

        base.merge(other)

        assert base.verbose is True
        assert base.rule.separator == "\n\n"
        assert base.rule.marker_names == RuleConfig().marker_names

    def test_environment_variables(self, monkeypatch):
        """Test environment variable application"""
        monkeypatch.setenv("STYLED_SORT_DRY_RUN", "1")
        monkeypatch.setenv("STYLED_SORT_VERBOSE", "yes")
        monkeypatch.setenv("STYLED_SORT_MARKERS", "styled, css ,")
        monkeypatch.setenv("STYLED_SORT_SEPARATOR", "2")

        config = Config()
        config.apply_env_vars()

        assert config.dry_run is True
        assert config.verbose is True
        assert config.rule.marker_names == ["styled", "css"]
        assert config.rule.separator == "\n\n"

    def test_validation(self):
        """Test configuration validation"""
        config = Config()
        assert config.validate() == []

        config.rule.marker_names = []
        config.rule.separator = ";"
        config.rule.usage_strategy = "magic"
        config.fix.max_fix_passes = 0
        config.extensions = ["jsx"]

        errors = config.validate()

        assert any("marker name" in e for e in errors)
        assert any("Invalid separator" in e for e in errors)
        assert any("Invalid usage strategy: magic" in e for e in errors)
        assert any("max_fix_passes" in e for e in errors)
        assert any("Invalid extension: jsx" in e for e in errors)

    def test_save_config(self, tmp_path):
        """Test saving configuration to file"""
        config = Config()
        config.rule.marker_names = ["styled"]

        for name in ["saved.yaml", "saved.json"]:
            config.save(tmp_path / name)
            loaded = Config.from_file(tmp_path / name)
            assert loaded.rule.marker_names == ["styled"]

        with pytest.raises(ValueError):
            config.save(tmp_path / "saved.toml")

    def test_hierarchy_loading(self, tmp_path, monkeypatch):
        """Test hierarchical configuration loading"""
        global_dir = tmp_path / ".styled-sort"
        global_dir.mkdir()
        (global_dir / "config.yaml").write_text(
            yaml.safe_dump({"verbose": True, "rule": {"separator": "\n\n"}})
        )

        project_dir = tmp_path / "project"
        project_dir.mkdir()
        (project_dir / ".styled-sort.yaml").write_text(
            yaml.safe_dump({"rule": {"marker_names": ["styled"]}})
        )

        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        config = Config.load_hierarchy(project_dir)

        assert config.verbose is True
        assert config.rule.separator == "\n\n"
        assert config.rule.marker_names == ["styled"]
