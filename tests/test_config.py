"""Tests for configuration loading and startup validation."""

import pytest

from config import ConfigurationError, _load_model_names, validate_server_config


class TestLoadModelNames:
    """Tests for _load_model_names."""

    def test_order_preserved(self) -> None:
        assert _load_model_names("b-model, a-model ,c-model") == ["b-model", "a-model", "c-model"]

    def test_blank_entries_dropped(self) -> None:
        assert _load_model_names(" m1,, ,m2,") == ["m1", "m2"]

    def test_empty(self) -> None:
        assert _load_model_names("") == []


class TestValidateServerConfig:
    """Tests for validate_server_config."""

    def test_missing_key(self) -> None:
        with pytest.raises(ConfigurationError, match="GROQ_API_KEY"):
            validate_server_config(api_key="", model_names=["m1"])

    def test_missing_models(self) -> None:
        with pytest.raises(ConfigurationError, match="GROQ_MODELS"):
            validate_server_config(api_key="gsk-test", model_names=[])

    def test_valid(self) -> None:
        validate_server_config(api_key="gsk-test", model_names=["m1"])
