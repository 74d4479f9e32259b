import os
from pathlib import Path

import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from perfgate.common.config import (
    ConfigError,
    ParserConfig,
    PublisherConfig,
    Settings,
    ThresholdConfig,
    clamp_percent,
)
from perfgate.common.yaml_config import load_publisher_config


class TestThresholdConfig:
    """Tests for threshold normalization at construction time."""

    def test_defaults(self) -> None:
        config = ThresholdConfig()

        assert config.error_unstable == 0
        assert config.error_failed == 0
        assert config.perf_percent_unstable == 0
        assert config.perf_percent_failed == 0
        assert config.perf_time_unstable == -1
        assert config.perf_time_failed == -1

    def test_error_threshold_clamped_above(self) -> None:
        assert ThresholdConfig(error_failed=150).error_failed == 100

    def test_error_threshold_clamped_below(self) -> None:
        assert ThresholdConfig(error_failed=-5).error_failed == 0

    def test_percent_thresholds_clamped(self) -> None:
        config = ThresholdConfig(perf_percent_unstable=-1, perf_percent_failed=250)

        assert config.perf_percent_unstable == 0
        assert config.perf_percent_failed == 100

    def test_time_thresholds_not_clamped(self) -> None:
        config = ThresholdConfig(perf_time_unstable=-5, perf_time_failed=5000)

        assert config.perf_time_unstable == -5
        assert config.perf_time_failed == 5000

    def test_in_range_values_kept(self) -> None:
        config = ThresholdConfig(error_unstable=5, error_failed=10)

        assert config.error_unstable == 5
        assert config.error_failed == 10

    def test_is_immutable(self) -> None:
        config = ThresholdConfig(error_failed=10)

        with pytest.raises(ValidationError):
            config.error_failed = 20

    def test_non_integer_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ThresholdConfig(error_failed="lots")

    def test_is_enabled(self) -> None:
        assert ThresholdConfig.is_enabled(0)
        assert ThresholdConfig.is_enabled(50)
        assert not ThresholdConfig.is_enabled(-1)

    def test_clamp_percent(self) -> None:
        assert clamp_percent(150) == 100
        assert clamp_percent(-5) == 0
        assert clamp_percent(42) == 42


class TestParserConfig:
    def test_blank_glob_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParserConfig(format="summary", glob="  ")


class TestLoadPublisherConfig:
    """Tests for YAML configuration loading."""

    def test_loads_thresholds_and_parsers(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text(
            """
thresholds:
  error_unstable: 5
  error_failed: 150
  perf_percent_failed: 20
  perf_time_failed: -3
parsers:
  - format: summary
    glob: "**/*.json"
"""
        )

        config = load_publisher_config(str(config_file))

        assert config.thresholds.error_unstable == 5
        assert config.thresholds.error_failed == 100
        assert config.thresholds.perf_percent_failed == 20
        assert config.thresholds.perf_time_failed == -3
        assert config.parsers == [ParserConfig(format="summary", glob="**/*.json")]

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text("")

        config = load_publisher_config(str(config_file))

        assert config == PublisherConfig()

    def test_missing_sections_give_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text("thresholds:\n  error_failed: 3\n")

        config = load_publisher_config(str(config_file))

        assert config.thresholds.error_failed == 3
        assert config.parsers == []

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError) as exc_info:
            load_publisher_config(str(tmp_path / "nope.yaml"))

        assert "nope.yaml" in str(exc_info.value)

    def test_invalid_yaml_raises_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text("thresholds: [unclosed\n")

        with pytest.raises(ConfigError):
            load_publisher_config(str(config_file))

    def test_non_mapping_raises_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_publisher_config(str(config_file))

    def test_invalid_values_raise_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "perfgate.yaml"
        config_file.write_text("parsers:\n  - format: summary\n")

        with pytest.raises(ConfigError):
            load_publisher_config(str(config_file))


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        class TestSettings(Settings):
            model_config = SettingsConfigDict(env_prefix="PERFGATE_", env_file=None)

        settings = TestSettings()

        assert settings.builds_dir == Path("data/builds")
        assert settings.config_path == Path("perfgate.yaml")

    def test_loads_from_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / "test.env"
        env_file.write_text("PERFGATE_BUILDS_DIR=/tmp/builds\nPERFGATE_WORKSPACE=/tmp/ws\n")

        class TestSettings(Settings):
            model_config = SettingsConfigDict(
                env_prefix="PERFGATE_", env_file=env_file, env_file_encoding="utf-8", extra="ignore"
            )

        original = {key: os.environ.pop(key, None) for key in ("PERFGATE_BUILDS_DIR", "PERFGATE_WORKSPACE")}

        try:
            settings = TestSettings()
            assert settings.builds_dir == Path("/tmp/builds")
            assert settings.workspace == Path("/tmp/ws")
        finally:
            for key, value in original.items():
                if value is not None:
                    os.environ[key] = value

    def test_loads_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PERFGATE_CONFIG_PATH", "custom.yaml")

        assert Settings().config_path == Path("custom.yaml")
