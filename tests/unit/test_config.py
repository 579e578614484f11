"""
Unit tests for configuration loading and validation.
"""

from pathlib import Path

import pytest
from contentquarry.config import Config, MonitoringConfig, ParserConfig, ScoringThresholds, find_config_file
from pydantic import ValidationError


class TestParserConfig:
    """Test cases for ParserConfig."""

    def test_defaults(self):
        config = ParserConfig()
        assert config.char_threshold == 500
        assert config.nb_top_candidates == 5
        assert config.keep_classes is False
        assert config.classes_to_preserve == {"page"}
        assert config.thresholds.min_paragraph_length == 25

    def test_camel_case_aliases(self):
        config = ParserConfig(charThreshold=120, nbTopCandidates=3, keepClasses=True)
        assert config.char_threshold == 120
        assert config.nb_top_candidates == 3
        assert config.keep_classes is True

    @pytest.mark.parametrize("options", [{"char_threshold": -1}, {"nb_top_candidates": 0}])
    def test_invalid_values(self, options):
        with pytest.raises(ValidationError):
            ParserConfig(**options)

    def test_threshold_ratios_are_bounded(self):
        with pytest.raises(ValidationError):
            ScoringThresholds(sibling_score_ratio=1.5)
        with pytest.raises(ValidationError):
            ScoringThresholds(sharedParentScoreRatio=-0.1)

    def test_thresholds_are_frozen(self):
        thresholds = ScoringThresholds()
        with pytest.raises(ValidationError):
            thresholds.class_weight = 10.0


class TestMonitoringConfig:
    """Test cases for MonitoringConfig."""

    def test_log_level_is_normalized(self):
        assert MonitoringConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError):
            MonitoringConfig(log_level="chatty")

    def test_log_file_parent_is_created(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "nested" / "contentquarry.log"
        config = MonitoringConfig(log_file=log_file)
        assert config.log_file == str(log_file)
        assert log_file.parent.is_dir()


class TestConfig:
    """Test cases for the top-level Config."""

    def test_from_yaml(self, tmp_path: Path):
        path = tmp_path / "contentquarry.yaml"
        path.write_text(
            "parser:\n"
            "  char_threshold: 200\n"
            "  keepClasses: true\n"
            "  thresholds:\n"
            "    class_weight: 10\n"
            "monitoring:\n"
            "  log_level: warning\n",
            encoding="utf-8",
        )
        config = Config.from_yaml(path)

        assert config.parser.char_threshold == 200
        assert config.parser.keep_classes is True
        assert config.parser.thresholds.class_weight == 10
        assert config.monitoring.log_level == "WARNING"

    def test_empty_yaml_uses_defaults(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.from_yaml(path).parser.char_threshold == 500

    def test_missing_yaml(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CONTENTQUARRY_PARSER__CHAR_THRESHOLD", "42")
        monkeypatch.setenv("CONTENTQUARRY_MONITORING__ENABLED", "false")
        config = Config()
        assert config.parser.char_threshold == 42
        assert config.monitoring.enabled is False

    def test_find_config_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert find_config_file() is None

        (tmp_path / "config.yml").write_text("{}", encoding="utf-8")
        (tmp_path / "contentquarry.yaml").write_text("{}", encoding="utf-8")
        assert find_config_file() == tmp_path / "contentquarry.yaml"
