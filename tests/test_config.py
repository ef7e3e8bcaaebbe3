"""Tests for configuration loading and validation."""

import pytest

from remodular.config import AnalysisConfig, load_config, validate_threshold
from remodular.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty directory with no REMODULAR_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in ("COUPLING_THRESHOLD", "LARGE_MODEL_WARNING", "PRECISION", "VERBOSITY", "LOG_FILE"):
        monkeypatch.delenv(f"REMODULAR_{key}", raising=False)


class TestAnalysisConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.coupling_threshold == 0.02
        assert config.verbosity == "normal"
        assert config.log_file is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"coupling_threshold": 1.5},
            {"coupling_threshold": -0.01},
            {"large_model_warning": 0},
            {"precision": 13},
            {"verbosity": "loud"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigError):
            AnalysisConfig(**kwargs)

    def test_frozen(self):
        config = AnalysisConfig()
        with pytest.raises(Exception):
            config.coupling_threshold = 0.5  # type: ignore[misc]


class TestValidateThreshold:
    def test_accepts_ints(self):
        assert validate_threshold(1) == 1.0
        assert validate_threshold(0) == 0.0

    def test_error_details(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            validate_threshold(2)
        assert exc_info.value.key == "coupling_threshold"
        assert "between 0.0 and 1.0" in str(exc_info.value)


class TestLoadConfig:
    """Merging of files, environment and overrides."""

    def test_project_file(self, tmp_path):
        (tmp_path / "remodular.toml").write_text("coupling_threshold = 0.04\nprecision = 2\n")
        config = load_config()
        assert config.coupling_threshold == 0.04
        assert config.precision == 2

    def test_section_table(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text("[remodular]\nlarge_model_warning = 50\n")
        assert load_config(config_file=path).large_model_warning == 50

    def test_priority_env_over_file_override_over_env(self, tmp_path, monkeypatch):
        (tmp_path / "remodular.toml").write_text("coupling_threshold = 0.04\n")
        monkeypatch.setenv("REMODULAR_COUPLING_THRESHOLD", "0.03")
        assert load_config().coupling_threshold == 0.03
        assert load_config(coupling_threshold=0.01).coupling_threshold == 0.01

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False).verbosity == "normal"

    def test_none_overrides_ignored(self):
        assert load_config(coupling_threshold=None).coupling_threshold == 0.02

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "nope.toml")

    def test_unknown_key(self, tmp_path):
        (tmp_path / "remodular.toml").write_text("max_findings = 3\n")
        with pytest.raises(ConfigurationError, match="Unknown configuration keys"):
            load_config()

    def test_invalid_toml(self, tmp_path):
        (tmp_path / "remodular.toml").write_text("coupling_threshold = = 1\n")
        with pytest.raises(ConfigurationError, match="Invalid project config"):
            load_config()

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("REMODULAR_PRECISION", "many")
        with pytest.raises(InvalidConfigError):
            load_config()

    def test_env_threshold_out_of_range(self, monkeypatch):
        monkeypatch.setenv("REMODULAR_COUPLING_THRESHOLD", "7")
        with pytest.raises(InvalidConfigError):
            load_config()
