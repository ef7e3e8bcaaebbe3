"""Tests for the Remodular exception hierarchy."""

from pathlib import Path

import pytest

from remodular.exceptions import (
    AnalysisError,
    ConfigurationError,
    InvalidConfigError,
    ModelLoadError,
    RemodularError,
)


class TestRemodularError:
    """Test RemodularError base exception."""

    def test_message_only(self):
        err = RemodularError("Something broke")
        assert err.message == "Something broke"
        assert err.details == {}
        assert str(err) == "Something broke"

    def test_str_includes_details(self):
        """Details are appended as key=value pairs."""
        err = RemodularError("Bad input", details={"path": "m.json", "reason": "empty"})
        assert str(err) == "Bad input (path=m.json, reason=empty)"


class TestSubclasses:
    """Every error can be caught as RemodularError."""

    @pytest.mark.parametrize(
        "err",
        [
            ConfigurationError("nope"),
            InvalidConfigError("precision", 20, "must be between 0 and 12"),
            AnalysisError("nope"),
            ModelLoadError(Path("model.json"), "not JSON"),
        ],
    )
    def test_catchable_as_base(self, err):
        with pytest.raises(RemodularError):
            raise err

    def test_invalid_config_fields(self):
        err = InvalidConfigError("coupling_threshold", 1.5, "must be between 0.0 and 1.0")
        assert isinstance(err, ConfigurationError)
        assert err.key == "coupling_threshold"
        assert err.value == 1.5
        assert "reason=must be between 0.0 and 1.0" in str(err)

    def test_model_load_error_without_path(self):
        err = ModelLoadError(None, "classes must be a list")
        assert isinstance(err, AnalysisError)
        assert err.path is None
        assert err.message == "Cannot load class model: <memory>"
        assert err.reason == "classes must be a list"


class TestErrorPayload:
    """JSON form used by --format json commands."""

    def test_details_are_strings(self):
        err = InvalidConfigError("precision", 20, "must be between 0 and 12")
        assert err.details == {"key": "precision", "value": "20", "reason": "must be between 0 and 12"}

    def test_to_dict(self):
        err = ModelLoadError(Path("model.json"), "not JSON")
        assert err.to_dict() == {
            "error": "ModelLoadError",
            "message": "Cannot load class model: model.json",
            "details": {"path": "model.json", "reason": "not JSON"},
        }

    def test_to_dict_without_details(self):
        assert RemodularError("plain").to_dict() == {
            "error": "RemodularError",
            "message": "plain",
            "details": {},
        }
