"""Tests for pipeline configuration."""

from pathlib import Path

import pytest

from src.processor.config import PipelineConfig
from src.processor.exceptions import ConfigurationError


def test_defaults():
    config = PipelineConfig()

    assert config.max_workers == 4
    assert config.request_timeout_seconds == 300
    assert config.publish_retry_attempts == 3
    assert config.edinet_api_key is None


def test_from_env_reads_variables(tmp_path):
    config = PipelineConfig.from_env(
        {
            "EDINET_API_KEY": "secret",
            "EDINET_STORE_DIR": str(tmp_path / "store"),
            "EDINET_MAX_WORKERS": "8",
            "EDINET_REQUEST_TIMEOUT": "60",
        }
    )

    assert config.require_api_key() == "secret"
    assert config.store_dir == tmp_path / "store"
    assert config.max_workers == 8
    assert config.request_timeout_seconds == 60


def test_overrides_take_precedence_and_none_is_ignored():
    config = PipelineConfig.from_env(
        {"EDINET_MAX_WORKERS": "8"}, max_workers=2, store_dir=None
    )

    assert config.max_workers == 2
    assert config.store_dir == Path("data/edinet")


def test_invalid_numbers_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        PipelineConfig.from_env({"EDINET_MAX_WORKERS": "many"})
    with pytest.raises(ConfigurationError):
        PipelineConfig(max_workers=0)


def test_missing_api_key():
    with pytest.raises(ConfigurationError):
        PipelineConfig.from_env({}).require_api_key()
